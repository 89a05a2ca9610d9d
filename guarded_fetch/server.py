"""
Source-aware client adapter.

SourceClient verbs accept either an endpoint or a resolver. Resolvers let a
caller substitute a local computation for a remote call while keeping the
same Outcome-returning interface:

```python
api = server(base="https://api.example.com")

remote = await api.get("/users")
local = await api.get(lambda: successify([{"id": 1}]))
created = await api.post(lambda body: f"/users?name={body['name']}", {"name": "ada"})
```
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Sequence, Union

from .config.models import ClientSettings
from .core_client import HttpClient, coerce_request_options
from .http.transport import Transport
from .models.base import Method
from .models.http import HttpOptions, RequestOptions
from .models.outcome import Outcome
from .utils.response import failify
from .utils.sources import Source, unify

SourceLike = Union[Source, str, Callable[..., Any]]
OptionsLike = Union[RequestOptions, Mapping[str, Any], None]


class SourceClient:
    """HttpClient wrapper whose verbs resolve their source through ``unify``."""

    def __init__(self, http: HttpClient) -> None:
        self.http = http

    async def __aenter__(self) -> SourceClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.http.close()

    async def _execute(
        self,
        method: Method,
        source: SourceLike,
        parameters: Sequence[Any],
        body: Any,
        options: OptionsLike,
        fields: Mapping[str, Any],
    ) -> Outcome[Any]:
        try:
            resolved = coerce_request_options(options, fields)
        except Exception as e:
            return failify(e)

        async def executor(endpoint: str) -> Outcome[Any]:
            return await self.http.request(method, endpoint, body, resolved)

        return await unify(source, executor, parameters, resolved.verify)

    async def get(
        self, source: SourceLike, options: OptionsLike = None, **fields: Any
    ) -> Outcome[Any]:
        return await self._execute(Method.GET, source, (), None, options, fields)

    async def delete(
        self, source: SourceLike, options: OptionsLike = None, **fields: Any
    ) -> Outcome[Any]:
        return await self._execute(Method.DELETE, source, (), None, options, fields)

    async def post(
        self, source: SourceLike, body: Any = None, options: OptionsLike = None, **fields: Any
    ) -> Outcome[Any]:
        return await self._execute(Method.POST, source, (body,), body, options, fields)

    async def put(
        self, source: SourceLike, body: Any = None, options: OptionsLike = None, **fields: Any
    ) -> Outcome[Any]:
        return await self._execute(Method.PUT, source, (body,), body, options, fields)

    async def patch(
        self, source: SourceLike, body: Any = None, options: OptionsLike = None, **fields: Any
    ) -> Outcome[Any]:
        return await self._execute(Method.PATCH, source, (body,), body, options, fields)

    def extend(
        self, options: Union[HttpOptions, Mapping[str, Any], None] = None, **fields: Any
    ) -> SourceClient:
        """Wrap a client extended from this one."""
        return SourceClient(self.http.extend(options, **fields))


def server(
    options: Union[HttpOptions, Mapping[str, Any], None] = None,
    *,
    transport: Optional[Transport] = None,
    settings: Optional[ClientSettings] = None,
    **fields: Any,
) -> SourceClient:
    """Create a SourceClient around a new HttpClient."""
    return SourceClient(
        HttpClient(options, transport=transport, settings=settings, **fields)
    )


__all__ = ["SourceClient", "server"]
