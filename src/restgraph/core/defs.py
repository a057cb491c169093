"""
Operation descriptors.

A descriptor binds one schema field to either an HTTP endpoint or a pub/sub
topic. Descriptors are authored as plain dicts with camelCase keys:

    {"type": "query", "field": "user", "method": "GET", "path": "/users/{args.id}"}
    {"type": "subscription", "field": "userUpdated", "pubsubTopic": "user.{args.id}.updated"}

``parse_operation`` turns each dict into exactly one of ``HttpOperation`` or
``PubSubOperation``.
"""

from __future__ import annotations

from typing import Any, Literal, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .errors import GraphConfigError
from .utils import to_camel_case, to_pascal_case

RootTypeName = Literal["Query", "Mutation", "Subscription"]

QUERY_STRING_METHODS = frozenset({"GET", "HEAD", "CONNECT", "OPTIONS", "TRACE"})
BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class _OperationBase(BaseModel):
    """Fields shared by both descriptor kinds."""

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    field: str
    type: Optional[Literal["query", "mutation", "subscription"]] = None
    description: Optional[str] = None
    arg_type_map: dict[str, str] = Field(default_factory=dict)

    @property
    def root_type_name(self) -> RootTypeName:
        raise NotImplementedError

    @property
    def label(self) -> str:
        """``Query.user`` style name used in logs and errors."""
        return f"{self.root_type_name}.{self.field}"


class HttpOperation(_OperationBase):
    """Field backed by an HTTP request."""

    kind: Literal["http"] = "http"
    path: str
    method: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("method", "httpMethod", "http_method"),
    )
    headers: dict[str, str] = Field(default_factory=dict)
    request_base_body: Optional[dict[str, Any]] = None
    binary: bool = False

    @property
    def http_method(self) -> str:
        if self.method:
            return self.method.upper()
        return "POST" if self.type == "mutation" else "GET"

    @property
    def root_type_name(self) -> RootTypeName:
        if self.type:
            return to_pascal_case(self.type)
        return "Query" if self.http_method == "GET" else "Mutation"


class PubSubOperation(_OperationBase):
    """Field backed by a pub/sub topic."""

    kind: Literal["pubsub"] = "pubsub"
    pubsub_topic: str

    @property
    def root_type_name(self) -> RootTypeName:
        return "Subscription"


Operation = Union[HttpOperation, PubSubOperation]


def parse_operation(data: Union[Mapping[str, Any], Operation]) -> Operation:
    """
    Parse a raw descriptor into its closed variant.

    Raises:
        GraphConfigError: If the descriptor carries both or neither of
            ``path`` and ``pubsubTopic``, or fails validation.
    """
    if isinstance(data, (HttpOperation, PubSubOperation)):
        return data

    label = data.get("field")
    has_path = data.get("path") is not None
    has_topic = data.get("pubsubTopic", data.get("pubsub_topic")) is not None

    if has_path and has_topic:
        raise GraphConfigError("Descriptor cannot define both 'path' and 'pubsubTopic'", label)
    if not has_path and not has_topic:
        raise GraphConfigError("Descriptor must define either 'path' or 'pubsubTopic'", label)

    model = HttpOperation if has_path else PubSubOperation
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise GraphConfigError(f"Invalid operation descriptor: {e}", label) from e
