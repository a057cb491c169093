"""
Core module - descriptors, interpolation and encoding helpers.

The operation registry lives in ``restgraph.core.registry``.
"""

from __future__ import annotations

from .config import LoaderConfig
from .defs import (
    BODY_METHODS,
    QUERY_STRING_METHODS,
    HttpOperation,
    Operation,
    PubSubOperation,
    parse_operation,
)
from .errors import (
    ExecutionError,
    GraphConfigError,
    RestGraphError,
    create_error,
)
from .interpolation import (
    NOT_FOUND,
    get_interpolation_keys,
    interpolate,
    parse_interpolation_strings,
)
from .scalars import GraphQLJSON
from .union_input import resolve_data_by_union_input_type
from .utils import clean_object, to_camel_case, to_pascal_case

__all__ = [
    # Definitions
    "HttpOperation",
    "PubSubOperation",
    "Operation",
    "parse_operation",
    "QUERY_STRING_METHODS",
    "BODY_METHODS",
    "LoaderConfig",
    # Errors
    "RestGraphError",
    "GraphConfigError",
    "ExecutionError",
    "create_error",
    # Interpolation
    "NOT_FOUND",
    "interpolate",
    "get_interpolation_keys",
    "parse_interpolation_strings",
    # Helpers
    "GraphQLJSON",
    "resolve_data_by_union_input_type",
    "clean_object",
    "to_camel_case",
    "to_pascal_case",
]
