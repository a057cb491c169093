"""
Custom scalars.
"""

from __future__ import annotations

from typing import Any, Optional

from graphql import GraphQLScalarType, ValueNode, value_from_ast_untyped


def _serialize(value: Any) -> Any:
    return value


def _parse_literal(value_node: ValueNode, variables: Optional[dict[str, Any]] = None) -> Any:
    return value_from_ast_untyped(value_node, variables)


GraphQLJSON = GraphQLScalarType(
    name="JSON",
    description="Arbitrary JSON value.",
    serialize=_serialize,
    parse_value=_serialize,
    parse_literal=_parse_literal,
)
