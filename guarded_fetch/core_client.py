"""
Core request engine for guarded_fetch.

HttpClient runs every call through the same linear pipeline:

    BUILD -> REQUEST-INTERCEPT -> VALIDATE -> SEND -> UNWRAP
          -> RESPONSE-INTERCEPT -> VERIFY -> CALLBACK -> RETURN

and always resolves to an Outcome. Validation errors, transport errors,
timeouts, interceptor errors and verify rejections are all converted to a
Failed outcome instead of being raised.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping, Optional, Union

from aiohttp import FormData
from pydantic import BaseModel

from .composer import coerce_options, merge_options
from .config.models import ClientSettings
from .exceptions import ResponseFailure, VerifyError
from .http.endpoint import build_endpoint, validate_endpoint
from .http.interceptors import (
    run_request_interceptors,
    run_response_interceptors,
    select_callback,
)
from .http.security import assert_metadata, assert_url
from .http.transport import AiohttpTransport, Transport
from .models.base import Credentials, Method
from .models.http import (
    HttpOptions,
    RawResponse,
    RequestContext,
    RequestOptions,
    ResponseContext,
    TransportRequest,
)
from .models.outcome import Failed, Outcome
from .utils.awaitables import call
from .utils.response import failify, outcomify

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
RAW_BODY_TYPES = (bytes, bytearray, memoryview, FormData)


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _method(method: Union[Method, str]) -> Method:
    return method if isinstance(method, Method) else Method(method.upper())


def _has_content_type(headers: Mapping[str, str]) -> bool:
    return any(name.lower() == "content-type" for name in headers)


def serialize_body(body: Any) -> Any:
    """
    Serialize a request body for the transport.

    Strings and raw payloads pass through; pydantic models and every other
    value are encoded as JSON.

    Raises:
        TypeError: If the body is not JSON serializable
    """
    match body:
        case None | str():
            return body
        case bytes() | bytearray() | memoryview() | FormData():
            return body
        case BaseModel():
            return body.model_dump_json()
        case _:
            return json.dumps(body)


def coerce_request_options(
    options: Union[RequestOptions, Mapping[str, Any], None], fields: Mapping[str, Any]
) -> RequestOptions:
    if isinstance(options, RequestOptions):
        return options.model_copy(update=dict(fields)) if fields else options
    return RequestOptions(**{**dict(options or {}), **fields})


class HttpClient:
    """
    Guarded HTTP client.

    Each client owns an immutable HttpOptions. Call options take precedence
    over the client options, which take precedence over the ClientSettings
    defaults. ``extend`` derives a new client sharing the same transport.

    Example:
        ```python
        async with HttpClient(base="https://api.example.com") as client:
            outcome = await client.get("/users", queries={"page": 1})
            if outcome.success:
                print(outcome.data)
            else:
                print(outcome.status, outcome.message)
        ```
    """

    def __init__(
        self,
        options: Union[HttpOptions, Mapping[str, Any], None] = None,
        *,
        transport: Optional[Transport] = None,
        settings: Optional[ClientSettings] = None,
        **fields: Any,
    ) -> None:
        """
        Initialize the client.

        Args:
            options: Client configuration as HttpOptions or a mapping
            transport: Transport used for every call; an AiohttpTransport
                owned by this client is created when omitted
            settings: Fallback defaults; ``ClientSettings()`` when omitted
            **fields: HttpOptions fields overriding ``options``
        """
        self._options = coerce_options(options, **fields)
        self._settings = settings or ClientSettings()
        self._owns_transport = transport is None
        self._transport: Transport = transport or AiohttpTransport()

    @property
    def options(self) -> HttpOptions:
        return self._options

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def transport(self) -> Transport:
        return self._transport

    async def __aenter__(self) -> HttpClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.close()

    async def request(
        self,
        method: Union[Method, str],
        endpoint: str,
        body: Any = None,
        options: Union[RequestOptions, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> Outcome[Any]:
        """
        Perform a request and return its Outcome.

        Args:
            method: HTTP method
            endpoint: Absolute URL or route relative to the base
            body: Request body; mappings, sequences and pydantic models are
                sent as JSON
            options: Per-call RequestOptions or a mapping of its fields
            **fields: RequestOptions fields overriding ``options``

        Returns:
            Success with the decoded data, or Failed. Never raises for
            ordinary exceptions.
        """
        try:
            context = self._build(
                _method(method), endpoint, body, coerce_request_options(options, fields)
            )
            logger.debug(f"{context.method.value} {context.endpoint}")

            context = await run_request_interceptors(
                context, self._options.interceptors.request
            )
            self._validate(context)

            raw = await self._send(context)
            outcome = await outcomify(raw)

            after = await run_response_interceptors(
                ResponseContext(
                    method=context.method,
                    endpoint=context.endpoint,
                    outcome=outcome,
                    raw=raw,
                ),
                self._options.interceptors.response,
            )
            if not after.outcome.success:
                raise ResponseFailure(raw, after.outcome, url=context.endpoint)

            verify = context.options.verify
            if verify is not None and not await call(verify, after.outcome.data):
                raise VerifyError(url=context.endpoint)

            await self._notify(after.outcome)
            return after.outcome
        except Exception as e:
            failed = failify(e)
            logger.info(
                f"{getattr(method, 'value', method)} {endpoint} failed: "
                f"{failed.status} {failed.message}"
            )
            await self._notify_failure(failed)
            return failed

    async def get(
        self,
        endpoint: str,
        options: Union[RequestOptions, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> Outcome[Any]:
        return await self.request(Method.GET, endpoint, None, options, **fields)

    async def post(
        self,
        endpoint: str,
        body: Any = None,
        options: Union[RequestOptions, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> Outcome[Any]:
        return await self.request(Method.POST, endpoint, body, options, **fields)

    async def put(
        self,
        endpoint: str,
        body: Any = None,
        options: Union[RequestOptions, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> Outcome[Any]:
        return await self.request(Method.PUT, endpoint, body, options, **fields)

    async def patch(
        self,
        endpoint: str,
        body: Any = None,
        options: Union[RequestOptions, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> Outcome[Any]:
        return await self.request(Method.PATCH, endpoint, body, options, **fields)

    async def delete(
        self,
        endpoint: str,
        options: Union[RequestOptions, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> Outcome[Any]:
        return await self.request(Method.DELETE, endpoint, None, options, **fields)

    def extend(
        self, options: Union[HttpOptions, Mapping[str, Any], None] = None, **fields: Any
    ) -> HttpClient:
        """
        Derive a client from this one.

        The child configuration is merged over this client's configuration;
        this client is left untouched. When the child supplies a base, the
        merged base is checked by the URL guard.

        Raises:
            UnsafeUrlError: If the merged base targets a forbidden destination
            InvalidUrlError: If the merged base has no host
        """
        child = coerce_options(options, **fields)
        merged = merge_options(self._options, child)

        if child.base and merged.base:
            assert_url(
                merged.base,
                bool(_first(merged.unsafe, self._settings.unsafe)),
                bool(_first(merged.localhost, self._settings.localhost)),
            )

        return HttpClient(merged, transport=self._transport, settings=self._settings)

    def _build(
        self, method: Method, route: str, body: Any, options: RequestOptions
    ) -> RequestContext:
        instance, settings = self._options, self._settings

        resolved = options.model_copy(
            update={
                "headers": {**instance.headers, **options.headers},
                "base": options.base or instance.base or settings.base,
                "timeout": _first(options.timeout, instance.timeout, settings.timeout),
                "credentials": _first(
                    options.credentials, instance.credentials, settings.credentials
                ),
                "unsafe": bool(_first(options.unsafe, instance.unsafe, settings.unsafe)),
                "localhost": bool(
                    _first(options.localhost, instance.localhost, settings.localhost)
                ),
            }
        )

        endpoint = build_endpoint(
            route,
            base=resolved.base,
            queries=resolved.queries,
            unsafe=resolved.unsafe,
            localhost=resolved.localhost,
            max_length=settings.max_url_length,
        )
        return RequestContext(method=method, endpoint=endpoint, options=resolved, body=body)

    def _validate(self, context: RequestContext) -> None:
        options = context.options
        validate_endpoint(
            context.endpoint,
            unsafe=bool(options.unsafe),
            localhost=bool(options.localhost),
            max_length=self._settings.max_url_length,
        )
        assert_metadata(options.headers)

    async def _send(self, context: RequestContext) -> RawResponse:
        options = context.options
        headers = dict(options.headers)
        body = context.body

        if (
            body not in (None, "")
            and not _has_content_type(headers)
            and not isinstance(body, RAW_BODY_TYPES)
        ):
            headers["Content-Type"] = JSON_CONTENT_TYPE

        timeout = _first(options.timeout, self._settings.timeout)
        request = TransportRequest(
            method=context.method.value,
            url=context.endpoint,
            headers=headers,
            body=serialize_body(body),
            credentials=options.credentials or Credentials.SAME_ORIGIN,
            timeout=timeout,
        )

        async with asyncio.timeout(timeout):
            return await self._transport.send(request)

    async def _notify(self, outcome: Outcome[Any]) -> None:
        callback = select_callback(self._options.interceptors.on, outcome)
        if callback is not None:
            await call(callback, outcome)

    async def _notify_failure(self, failed: Failed) -> None:
        try:
            await self._notify(failed)
        except Exception:
            logger.warning(
                f"Failure callback raised for status {failed.status}", exc_info=True
            )


def create(
    options: Union[HttpOptions, Mapping[str, Any], None] = None,
    *,
    transport: Optional[Transport] = None,
    settings: Optional[ClientSettings] = None,
    **fields: Any,
) -> HttpClient:
    """
    Create an HttpClient.

    Example:
        ```python
        api = create(base="https://api.example.com", timeout=5.0)
        users = api.extend(base="users", headers={"X-Team": "core"})
        ```
    """
    return HttpClient(options, transport=transport, settings=settings, **fields)


__all__ = [
    "HttpClient",
    "create",
    "coerce_request_options",
    "serialize_body",
]
