"""
Loader configuration.

The descriptor document is handed over already parsed (loading YAML/JSON
files is the caller's business):

    {
        "baseUrl": "https://api.example.com/{env.API_VERSION}",
        "operationHeaders": {"Authorization": "Bearer {context.token}"},
        "operations": [
            {"type": "query", "field": "user", "path": "/users/{args.id}"},
        ],
    }
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .defs import Operation, parse_operation


def _debug_from_env() -> bool:
    return os.getenv("DEBUG", "").lower() not in ("", "0", "false", "no")


@dataclass
class LoaderConfig:
    """Global settings plus the list of operation descriptors."""
    base_url: str = ""
    operation_headers: dict[str, str] = field(default_factory=dict)
    operations: list[Operation] = field(default_factory=list)
    debug: bool = field(default_factory=_debug_from_env)
    max_upload_size: Optional[int] = None  # bytes, None = unlimited

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoaderConfig":
        """Create config from a parsed descriptor document."""
        config = cls(
            base_url=data.get("baseUrl", data.get("base_url", "")) or "",
            operation_headers=dict(
                data.get("operationHeaders", data.get("operation_headers")) or {}
            ),
            operations=[parse_operation(op) for op in data.get("operations", [])],
            max_upload_size=data.get("maxUploadSize", data.get("max_upload_size")),
        )
        if "debug" in data:
            config.debug = bool(data["debug"])
        return config
