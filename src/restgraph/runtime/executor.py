"""
HTTP operation executor - runs one HTTP-backed field invocation.

Handles:
- Interpolating base URL, path and headers against the call context
- Building the request body (binary upload or structured input)
- Query string vs body encoding by HTTP method
- Dispatching through the fetch capability
- Parsing, status checking, cardinality reconciliation, metadata

Every failure comes back as a ``GraphQLError`` value, never as a raised
exception, so sibling fields keep resolving.
"""

from __future__ import annotations

import copy
import inspect
import json
import logging
from typing import Any, Mapping, Optional, Union

from graphql import GraphQLError, GraphQLInputType, GraphQLOutputType

from ..core import querystring
from ..core.defs import BODY_METHODS, QUERY_STRING_METHODS, HttpOperation
from ..core.errors import create_error
from ..core.interpolation import interpolate
from ..core.union_input import UnionInputResolver, resolve_data_by_union_input_type
from ..core.utils import clean_object, find_header, json_flat_stringify, url_join
from .assembler import ResponseAssembler, is_scalar_return_type, is_union_return_type
from .context import InterpolationContext, RequestPlan, get_capability
from .fetch import Fetch
from .upload import UnsupportedUpload, UploadTooLarge, get_upload_mimetype, is_file_upload, read_upload

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

Body = Optional[Union[str, bytes]]


def set_default_at_path(target: dict, path: str, value: Any) -> bool:
    """
    Set ``value`` at dotted ``path`` unless something is already there.

    Returns True when the default was applied.
    """
    parts = path.split(".")
    node = target
    for part in parts[:-1]:
        child = node.get(part)
        if child is None:
            child = {}
            node[part] = child
        elif not isinstance(child, dict):
            return False
        node = child
    if node.get(parts[-1]) is not None:
        return False
    node[parts[-1]] = value
    return True


def clean_query_string(url: str) -> str:
    """Re-parse the query component, drop empty parameters and re-serialise."""
    path, sep, query = url.partition("?")
    if not sep:
        return url
    cleaned = querystring.stringify(clean_object(querystring.parse(query)))
    return f"{path}?{cleaned}" if cleaned else path


class HttpOperationExecutor:
    """
    Executes one HTTP-backed field.

    Usage:
        executor = HttpOperationExecutor(operation, return_type=field.type, ...)
        value = await executor.execute(root, args, context)
    """

    def __init__(
        self,
        operation: HttpOperation,
        *,
        return_type: GraphQLOutputType,
        input_type: Optional[GraphQLInputType] = None,
        base_url: str = "",
        operation_headers: Optional[Mapping[str, str]] = None,
        fetch: Optional[Fetch] = None,
        union_input_resolver: UnionInputResolver = resolve_data_by_union_input_type,
        max_upload_size: Optional[int] = None,
        env: Optional[Mapping[str, str]] = None,
        operation_logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize executor.

        Args:
            operation: Parsed HTTP descriptor
            return_type: Declared GraphQL type of the field
            input_type: Declared type of the field's ``input`` argument, if any
            base_url: Global base URL template
            operation_headers: Global header templates
            fetch: Default fetch, overridden by ``context.fetch``
            union_input_resolver: Reshapes input payloads for union inputs
            max_upload_size: Upload limit in bytes (None = unlimited)
            env: Environment for ``{env.*}`` placeholders (default os.environ)
            operation_logger: Logger for this operation
        """
        self.operation = operation
        self.method = operation.http_method
        self.input_type = input_type
        self.base_url = base_url
        self.operation_headers = dict(operation_headers or {})
        self.fetch = fetch
        self.union_input_resolver = union_input_resolver
        self.max_upload_size = max_upload_size
        self.env = env
        self.logger = operation_logger or logger.getChild(operation.label)
        self.assembler = ResponseAssembler(return_type)
        self.is_scalar = is_scalar_return_type(return_type)
        self.is_union = is_union_return_type(return_type)

    async def resolve(self, root: Any, info: Any, **args: Any) -> Any:
        """graphql-core resolver entry point."""
        return await self.execute(root, args, info.context)

    async def execute(self, root: Any, args: Mapping[str, Any], context: Any = None) -> Any:
        """
        Run the operation end to end.

        Returns:
            The reconciled response value, the raw text for scalar fields whose
            response is not JSON, or a ``GraphQLError``.
        """
        self.logger.debug("=> Resolving")
        ctx = self._interpolation_context(root, args, context)

        plan = await self.build_plan(ctx)
        if isinstance(plan, GraphQLError):
            return plan

        fetch = get_capability(context, "fetch") or self.fetch
        if fetch is None:
            return create_error(
                "You should have fetch defined in either the config or the context!",
                url=plan.url,
                method=plan.method,
            )

        self.logger.debug(f"=> Fetching {plan.url} => {plan.method} {dict(plan.headers)}")
        try:
            response = await fetch(plan.url, method=plan.method, headers=plan.headers, body=plan.body)
            response_text = await response.text()
        except Exception as e:
            self.logger.warning(f"Request to {plan.url} failed: {e!r}")
            return create_error("Request failed", url=plan.url, method=plan.method, cause=str(e))

        self.logger.debug(f"=> Received {response.status}: {response_text}")
        return self.handle_response(plan, response, response_text)

    def _interpolation_context(self, root: Any, args: Mapping[str, Any], context: Any) -> InterpolationContext:
        if self.env is None:
            return InterpolationContext(root=root, args=args, context=context)
        return InterpolationContext(root=root, args=args, context=context, env=self.env)

    # =========================================================================
    # Request building
    # =========================================================================

    async def build_plan(self, ctx: InterpolationContext) -> Union[RequestPlan, GraphQLError]:
        """Resolve URL, headers and body for this invocation."""
        url = url_join(
            interpolate(self.base_url, ctx),
            interpolate(self.operation.path, ctx),
        )
        headers = self.build_headers(ctx)

        if self.method not in QUERY_STRING_METHODS and self.method not in BODY_METHODS:
            return create_error(f"Unknown HTTP Method: {self.method}", url=url, method=self.method)

        body: Body = None
        if self.operation.binary:
            try:
                body = await self._binary_body(ctx, headers)
            except UploadTooLarge as e:
                return create_error(
                    "Upload exceeds maximum size",
                    url=url,
                    method=self.method,
                    maxUploadSize=e.limit,
                )
            except UnsupportedUpload as e:
                return create_error(
                    "Binary input must be a file upload, bytes or a string",
                    url=url,
                    method=self.method,
                    inputType=e.value_type,
                )
        else:
            payload = self.build_input(ctx)
            if payload is not None:
                url, body = self.encode_payload(url, headers, payload)

        return RequestPlan(url=clean_query_string(url), method=self.method, headers=headers, body=body)

    def build_headers(self, ctx: InterpolationContext) -> dict[str, str]:
        """Global headers overlaid with operation headers, all interpolated."""
        merged = {**self.operation_headers, **self.operation.headers}
        return {name: interpolate(value, ctx) for name, value in merged.items()}

    async def _binary_body(self, ctx: InterpolationContext, headers: dict[str, str]) -> Body:
        upload = ctx.args.get("input")
        if inspect.isawaitable(upload):
            upload = await upload
        if upload is None or isinstance(upload, (bytes, str)):
            return upload
        if isinstance(upload, bytearray):
            return bytes(upload)
        if not is_file_upload(upload):
            raise UnsupportedUpload(upload)

        body = await read_upload(upload, self.max_upload_size)
        mimetype = get_upload_mimetype(upload)
        if mimetype and not find_header(headers, "content-type"):
            headers["content-type"] = mimetype
        return body

    def build_input(self, ctx: InterpolationContext) -> Any:
        """
        Structured input: ``args.input`` plus ``requestBaseBody`` defaults,
        cleaned and resolved against the declared input union.
        """
        payload = copy.deepcopy(ctx.args.get("input"))
        base_body = self.operation.request_base_body

        if base_body is not None:
            if not isinstance(payload, dict):
                payload = {}
            for key, default in base_body.items():
                if isinstance(default, str):
                    set_default_at_path(payload, key, interpolate(default, ctx))
                elif payload.get(key) is None:
                    payload[key] = copy.deepcopy(default)

        payload = clean_object(payload)
        payload = self.union_input_resolver(payload, self.input_type)
        return clean_object(payload)

    def encode_payload(self, url: str, headers: Mapping[str, str], payload: Any) -> tuple[str, Body]:
        """Place ``payload`` in the query string or the body depending on method."""
        if self.method in QUERY_STRING_METHODS:
            if isinstance(payload, Mapping):
                query = querystring.stringify(payload)
                if query:
                    url += ("&" if "?" in url else "?") + query
            return url, None

        content_type = find_header(headers, "content-type")
        if content_type and content_type.startswith(FORM_CONTENT_TYPE) and isinstance(payload, Mapping):
            return url, querystring.stringify(payload)
        return url, json_flat_stringify(payload)

    # =========================================================================
    # Response handling
    # =========================================================================

    def handle_response(self, plan: RequestPlan, response: Any, response_text: str) -> Any:
        """Parse, check status, reconcile shape and attach metadata."""
        try:
            payload = json.loads(response_text)
        except ValueError as e:
            if self.is_scalar:
                self.logger.debug(f"=> Return type is not JSON so returning {response_text!r}")
                return response_text
            return create_error(
                "Unexpected response",
                url=plan.url,
                method=plan.method,
                responseText=response_text,
                cause=str(e),
            )

        status = response.status
        if not 200 <= status < 300 and not self.is_union:
            return create_error(
                f"HTTP Error: {status}",
                url=plan.url,
                method=plan.method,
                status=status,
                statusText=response.status_text or None,
                responseJson=payload,
            )

        metadata = {
            "url": plan.url,
            "method": plan.method,
            "status": status,
            "statusText": response.status_text,
        }
        self.logger.debug("=> Adding response metadata to the response object")
        return self.assembler.assemble(payload, metadata)
