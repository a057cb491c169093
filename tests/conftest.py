"""
Shared fixtures: a fresh schema per test and a recording fetch.
"""

from __future__ import annotations

from typing import Any

import pytest
from graphql import GraphQLSchema, build_schema

from restgraph.core.registry import build_registry
from tests.helpers import BASE_URL, SDL, FakeFetch


@pytest.fixture(autouse=True)
def isolate_debug_env(monkeypatch):
    """Keep a developer's DEBUG toggle from changing field descriptions."""
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture
def schema() -> GraphQLSchema:
    # Registry binding mutates fields, so every test gets a fresh schema
    return build_schema(SDL)


@pytest.fixture
def fetch() -> FakeFetch:
    return FakeFetch()


@pytest.fixture
def bind(schema, fetch):
    """Bind descriptors to the schema and return the registry."""

    def _bind(*operations: dict, **options: Any):
        document = {
            "baseUrl": options.pop("base_url", BASE_URL),
            "operationHeaders": options.pop("operation_headers", {}),
            "operations": list(operations),
            "debug": options.pop("debug", False),
        }
        if "max_upload_size" in options:
            document["maxUploadSize"] = options.pop("max_upload_size")
        options.setdefault("fetch", fetch)
        options.setdefault("env", {"API_VERSION": "v2"})
        return build_registry(schema, document, **options)

    return _bind
