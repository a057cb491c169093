"""
Pub/sub operation executor - backs Subscription fields with a message bus.

The bus is any object exposing ``async_iterator(topic)`` that returns an async
iterator of payloads (see ``restgraph.messaging``).
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Mapping, Optional, Protocol, Union

from graphql import GraphQLError

from ..core.defs import PubSubOperation
from ..core.errors import create_error
from ..core.interpolation import interpolate
from .context import InterpolationContext, get_capability

logger = logging.getLogger(__name__)


class PubSub(Protocol):
    def async_iterator(self, topic: str) -> AsyncIterator[Any]:
        ...


class PubSubOperationExecutor:
    """
    Subscribes a field to an interpolated topic.

    Usage:
        executor = PubSubOperationExecutor(operation, pubsub=bus)
        field.subscribe = executor.subscribe
        field.resolve = executor.resolve
    """

    def __init__(
        self,
        operation: PubSubOperation,
        *,
        pubsub: Optional[PubSub] = None,
        env: Optional[Mapping[str, str]] = None,
        operation_logger: Optional[logging.Logger] = None,
    ):
        self.operation = operation
        self.pubsub = pubsub
        self.env = env
        self.logger = operation_logger or logger.getChild(operation.label)

    def subscribe(self, root: Any, info: Any, **args: Any) -> Union[AsyncIterator[Any], GraphQLError]:
        """graphql-core subscribe entry point."""
        return self.open(root, args, info.context, info)

    def open(
        self,
        root: Any,
        args: Mapping[str, Any],
        context: Any = None,
        info: Any = None,
    ) -> Union[AsyncIterator[Any], GraphQLError]:
        """Return the bus iterator for the interpolated topic, or a structured error."""
        pubsub = get_capability(context, "pubsub") or self.pubsub
        if pubsub is None:
            return create_error("You should have PubSub defined in either the config or the context!")

        if self.env is None:
            ctx = InterpolationContext(root=root, args=args, context=context, info=info)
        else:
            ctx = InterpolationContext(root=root, args=args, context=context, info=info, env=self.env)
        topic = interpolate(self.operation.pubsub_topic, ctx)
        self.logger.debug(f"=> Subscribing to pubSubTopic: {topic}")
        return pubsub.async_iterator(topic)

    def resolve(self, root: Any, info: Any, **args: Any) -> Any:
        """Payloads from the bus are the field value as-is."""
        self.logger.debug(f"Received {root!r} from {self.operation.pubsub_topic}")
        return root
