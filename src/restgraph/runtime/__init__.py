"""
Runtime module - per-invocation request execution.
"""

from __future__ import annotations

from .assembler import ResponseAssembler, add_response_metadata
from .context import InterpolationContext, RequestPlan
from .executor import HttpOperationExecutor
from .fetch import Fetch, FetchResponse, HttpxFetch
from .subscription import PubSub, PubSubOperationExecutor

__all__ = [
    "InterpolationContext",
    "RequestPlan",
    "Fetch",
    "FetchResponse",
    "HttpxFetch",
    "HttpOperationExecutor",
    "PubSub",
    "PubSubOperationExecutor",
    "ResponseAssembler",
    "add_response_metadata",
]
