"""
Operation registry - binds operation descriptors to schema fields.

One pass over all descriptors at build time:
1. Parse each descriptor into HttpOperation | PubSubOperation
2. Locate the field on its root type (fatal if missing)
3. Register arguments derived from ``{args.*}`` placeholders
4. Install the resolver (and subscriber for pub/sub fields)

Usage:
    from graphql import build_schema
    from restgraph.core.registry import build_registry

    schema = build_schema(sdl)
    registry = build_registry(schema, {
        "baseUrl": "https://api.example.com",
        "operations": [{"type": "query", "field": "user", "path": "/users/{args.id}"}],
    }, fetch=HttpxFetch())

    registry["Query.user"].operation.path  # "/users/{args.id}"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Union

from graphql import (
    GraphQLArgument,
    GraphQLError,
    GraphQLField,
    GraphQLInputType,
    GraphQLObjectType,
    GraphQLSchema,
    is_input_type,
    parse_type,
    type_from_ast,
)

from ..runtime.executor import HttpOperationExecutor
from ..runtime.fetch import Fetch
from ..runtime.subscription import PubSub, PubSubOperationExecutor
from .config import LoaderConfig
from .defs import HttpOperation, Operation, PubSubOperation
from .errors import GraphConfigError
from .interpolation import parse_interpolation_strings
from .scalars import GraphQLJSON
from .union_input import UnionInputResolver, resolve_data_by_union_input_type

logger = logging.getLogger(__name__)

Executor = Union[HttpOperationExecutor, PubSubOperationExecutor]


@dataclass(frozen=True)
class OperationBinding:
    """One descriptor bound to one schema field."""
    operation: Operation
    root_type_name: str
    field_name: str
    field: GraphQLField
    executor: Executor
    derived_args: Mapping[str, str]


class OperationRegistry(Mapping[str, OperationBinding]):
    """Immutable ``"Root.field" -> OperationBinding`` table."""

    def __init__(self, schema: GraphQLSchema, bindings: Mapping[str, OperationBinding]):
        self.schema = schema
        self._bindings = MappingProxyType(dict(bindings))

    def __getitem__(self, key: str) -> OperationBinding:
        return self._bindings[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)


def get_root_type(schema: GraphQLSchema, root_type_name: str) -> Optional[GraphQLObjectType]:
    return {
        "Query": schema.query_type,
        "Mutation": schema.mutation_type,
        "Subscription": schema.subscription_type,
    }.get(root_type_name)


def resolve_arg_type(schema: GraphQLSchema, type_notation: str, label: str) -> GraphQLInputType:
    """
    Turn ``"Int!"`` / ``"[String]"`` / ``"JSON"`` into a GraphQL input type.

    ``JSON`` is added to the schema when it does not define one.
    """
    if type_notation == GraphQLJSON.name and schema.get_type(GraphQLJSON.name) is None:
        schema.type_map[GraphQLJSON.name] = GraphQLJSON

    try:
        type_node = parse_type(type_notation)
    except GraphQLError as e:
        raise GraphConfigError(f"Invalid argument type '{type_notation}': {e.message}", label) from e

    arg_type = type_from_ast(schema, type_node)
    if arg_type is None or not is_input_type(arg_type):
        raise GraphConfigError(f"Unknown input type '{type_notation}'", label)
    return arg_type


def collect_interpolation_strings(operation: Operation, config: LoaderConfig) -> list[str]:
    """Every template the operation interpolates at request time."""
    strings = [*config.operation_headers.values(), config.base_url]
    if isinstance(operation, PubSubOperation):
        strings.append(operation.pubsub_topic)
    else:
        strings.extend(operation.headers.values())
        strings.append(operation.path)
        for value in (operation.request_base_body or {}).values():
            if isinstance(value, str):
                strings.append(value)
    return strings


def describe_operation(operation: Operation, config: LoaderConfig) -> Optional[str]:
    """Field description, verbose when the debug flag is on."""
    if isinstance(operation, PubSubOperation):
        return operation.description or f"PubSub Topic: {operation.pubsub_topic}"
    if config.debug:
        return (
            f"Original Description: {operation.description or '(none)'}\n"
            f"Method: {operation.http_method}\n"
            f"baseUrl: {config.base_url}\n"
            f"Path: {operation.path}"
        )
    return operation.description


def build_registry(
    schema: GraphQLSchema,
    config: Union[LoaderConfig, Mapping[str, Any]],
    *,
    fetch: Optional[Fetch] = None,
    pubsub: Optional[PubSub] = None,
    union_input_resolver: UnionInputResolver = resolve_data_by_union_input_type,
    env: Optional[Mapping[str, str]] = None,
) -> OperationRegistry:
    """
    Attach execution logic for every descriptor to ``schema``.

    Args:
        schema: Schema whose root fields the descriptors refer to
        config: LoaderConfig or the raw descriptor document
        fetch: Default fetch capability (``context.fetch`` wins)
        pubsub: Default event bus (``context.pubsub`` wins)
        union_input_resolver: Reshapes ``input`` payloads for union inputs
        env: Source for ``{env.*}`` placeholders (default os.environ)

    Returns:
        Immutable OperationRegistry

    Raises:
        GraphConfigError: If a descriptor is invalid or names a missing field
    """
    if not isinstance(config, LoaderConfig):
        config = LoaderConfig.from_dict(config)

    logger.debug("Attaching execution logic to the schema")
    bindings: dict[str, OperationBinding] = {}

    for operation in config.operations:
        label = operation.label
        if label in bindings:
            raise GraphConfigError("Field is bound by more than one descriptor", label)
        root_type = get_root_type(schema, operation.root_type_name)
        if root_type is None:
            raise GraphConfigError(f"Schema has no {operation.root_type_name} type", label)
        field = root_type.fields.get(operation.field)
        if field is None:
            raise GraphConfigError(
                f"Field '{operation.field}' not found on {operation.root_type_name}", label
            )

        operation_logger = logger.getChild(label)
        field.description = describe_operation(operation, config)

        if isinstance(operation, HttpOperation):
            input_arg = field.args.get("input")
            executor: Executor = HttpOperationExecutor(
                operation,
                return_type=field.type,
                input_type=input_arg.type if input_arg else None,
                base_url=config.base_url,
                operation_headers=config.operation_headers,
                fetch=fetch,
                union_input_resolver=union_input_resolver,
                max_upload_size=config.max_upload_size,
                env=env if env is not None else os.environ,
                operation_logger=operation_logger,
            )
            field.resolve = executor.resolve
        else:
            executor = PubSubOperationExecutor(
                operation,
                pubsub=pubsub,
                env=env if env is not None else os.environ,
                operation_logger=operation_logger,
            )
            field.subscribe = executor.subscribe
            field.resolve = executor.resolve

        derived_args = parse_interpolation_strings(
            collect_interpolation_strings(operation, config),
            operation.arg_type_map,
        )
        for arg_name, type_notation in derived_args.items():
            if arg_name not in field.args:
                field.args[arg_name] = GraphQLArgument(resolve_arg_type(schema, type_notation, label))

        bindings[label] = OperationBinding(
            operation=operation,
            root_type_name=operation.root_type_name,
            field_name=operation.field,
            field=field,
            executor=executor,
            derived_args=MappingProxyType(derived_args),
        )
        operation_logger.debug(f"Bound {operation.kind} operation with args {sorted(derived_args)}")

    logger.info(f"Operation registry built: {len(bindings)} operations")
    return OperationRegistry(schema, bindings)
