"""
Response assembler - turns an upstream payload into the field's value.

Handles:
- Cardinality reconciliation against the declared return type
- Attaching ``__response`` metadata without mutating the parsed payload
"""

from __future__ import annotations

from typing import Any, Mapping

from graphql import (
    GraphQLOutputType,
    get_named_type,
    is_list_type,
    is_non_null_type,
    is_scalar_type,
    is_union_type,
)

RESPONSE_METADATA_KEY = "__response"


def is_list_return_type(return_type: GraphQLOutputType) -> bool:
    """True for ``[T]`` and ``[T]!``."""
    if is_non_null_type(return_type):
        return is_list_type(return_type.of_type)
    return is_list_type(return_type)


def is_scalar_return_type(return_type: GraphQLOutputType) -> bool:
    return is_scalar_type(get_named_type(return_type))


def is_union_return_type(return_type: GraphQLOutputType) -> bool:
    return is_union_type(get_named_type(return_type))


class ResponseAssembler:
    """
    Assembles the final field value from a parsed response.

    Usage:
        assembler = ResponseAssembler(field.type)
        value = assembler.assemble(payload, metadata)
    """

    def __init__(self, return_type: GraphQLOutputType):
        """
        Initialize assembler.

        Args:
            return_type: Declared GraphQL type of the field
        """
        self.return_type = return_type
        self.is_list = is_list_return_type(return_type)

    def reconcile(self, payload: Any) -> Any:
        """
        Repair upstream APIs that disagree with the declared cardinality.

        - list type, single value -> [value]
        - single type, list value -> first element (None when empty)
        """
        is_array = isinstance(payload, list)
        if self.is_list and not is_array:
            return [payload]
        if not self.is_list and is_array:
            return payload[0] if payload else None
        return payload

    def assemble(self, payload: Any, metadata: Mapping[str, Any]) -> Any:
        """Reconcile ``payload`` and attach ``metadata`` to every object in it."""
        payload = self.reconcile(payload)
        if isinstance(payload, list):
            return [add_response_metadata(item, metadata) for item in payload]
        return add_response_metadata(payload, metadata)


def add_response_metadata(value: Any, metadata: Mapping[str, Any]) -> Any:
    """
    Return a shallow copy of ``value`` with a ``__response`` key.

    Non-object values (scalars, None) are returned unchanged.
    """
    if not isinstance(value, Mapping):
        return value
    return {**value, RESPONSE_METADATA_KEY: dict(metadata)}
