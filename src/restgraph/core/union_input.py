"""
Union-aware input resolution.

GraphQL has no input unions, so a union in the upstream request schema is
modelled as a ``oneOf`` input object with one field per member:

    input PetInput @oneOf { cat: CatInput, dog: DogInput }

A client sends ``{"dog": {"name": "Rex"}}`` and the upstream API expects the
member payload itself, ``{"name": "Rex"}``. Field names that had to be
sanitised for GraphQL keep their wire name in ``extensions["propertyName"]``.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from graphql import (
    GraphQLInputObjectType,
    GraphQLInputType,
    is_input_object_type,
    is_list_type,
    is_non_null_type,
)

UnionInputResolver = Callable[[Any, Optional[GraphQLInputType]], Any]


def is_one_of_input_type(input_type: GraphQLInputObjectType) -> bool:
    """True when the input object is a ``oneOf`` (tagged union) type."""
    if getattr(input_type, "is_one_of", False):
        return True
    extensions = input_type.extensions or {}
    return bool(extensions.get("oneOf") or extensions.get("one_of"))


def resolve_data_by_union_input_type(data: Any, input_type: Optional[GraphQLInputType]) -> Any:
    """
    Reshape ``data`` against ``input_type``.

    Returns a new structure; ``data`` is not modified.
    """
    if data is None or input_type is None:
        return data

    if is_non_null_type(input_type):
        return resolve_data_by_union_input_type(data, input_type.of_type)

    if is_list_type(input_type):
        items = data if isinstance(data, list) else [data]
        return [resolve_data_by_union_input_type(item, input_type.of_type) for item in items]

    if not is_input_object_type(input_type):
        return data

    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict):
        return data

    fields = input_type.fields
    one_of = is_one_of_input_type(input_type)
    resolved: dict[str, Any] = {}

    for key, value in data.items():
        field = fields.get(key)
        if field is None:
            resolved[key] = value
            continue
        if one_of:
            return resolve_data_by_union_input_type(value, field.type)
        property_name = (field.extensions or {}).get("propertyName") or key
        resolved[property_name] = resolve_data_by_union_input_type(value, field.type)

    return resolved
