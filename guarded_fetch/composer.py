"""
Configuration composition for guarded_fetch clients.

``merge_options`` is a pure function: it reads a parent configuration and a
partial child override and returns a brand-new HttpOptions. Neither input is
modified.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urljoin, urlsplit

from .http.interceptors import chain
from .models.http import HttpOptions, Interceptors, OnInterceptor

INHERITED_FIELDS = ("timeout", "credentials", "unsafe", "localhost")


def coerce_options(
    options: Union[HttpOptions, Mapping[str, Any], None] = None, **fields: Any
) -> HttpOptions:
    """
    Build HttpOptions from a model, a mapping and/or keyword fields.

    Keyword fields override entries of ``options``. Only values actually
    provided count as explicit.
    """
    if isinstance(options, HttpOptions):
        if not fields:
            return options
        provided = {name: getattr(options, name) for name in options.model_fields_set}
    else:
        provided = dict(options or {})
    return HttpOptions(**{**provided, **fields})


def join_base(parent: Optional[str], child: Optional[str]) -> Optional[str]:
    """
    Resolve a child base URL against its parent.

    - empty child: the parent base
    - absolute child: replaces the parent
    - child starting with ``/``: the parent's origin followed by the child
    - anything else: resolved relative to the parent, treated as a directory

    Example:
        >>> join_base("https://api.example.com/v1", "users")
        'https://api.example.com/v1/users'
        >>> join_base("https://api.example.com/v1", "/v2")
        'https://api.example.com/v2'
    """
    if not child:
        return parent
    if not parent:
        return child
    if child.startswith(("http://", "https://")):
        return child

    if child.startswith("/"):
        parsed = urlsplit(parent)
        host = parsed.netloc.rpartition("@")[2]
        return f"{parsed.scheme}://{host}{child}"

    return urljoin(parent if parent.endswith("/") else f"{parent}/", child)


def merge_on(
    parent: Optional[OnInterceptor], child: Optional[OnInterceptor]
) -> Optional[OnInterceptor]:
    """Chain lifecycle callbacks so parent and child both fire, parent first."""
    if parent is None:
        return child
    if child is None:
        return parent

    merged = OnInterceptor(
        success=chain(parent.success, child.success),
        failure=chain(parent.failure, child.failure),
        unauthorized=chain(parent.unauthorized, child.unauthorized),
    )
    if merged.success is None and merged.failure is None and merged.unauthorized is None:
        return None
    return merged


def merge_options(parent: HttpOptions, child: HttpOptions) -> HttpOptions:
    """
    Merge a parent configuration with a child override.

    Headers are shallow-merged with the child winning. ``timeout``,
    ``credentials``, ``unsafe`` and ``localhost`` come from the child when it
    provided them explicitly (``False`` and ``0`` included). Request
    interceptors run parent first, response interceptors child first.
    """
    fields: Dict[str, Any] = {
        "headers": {**parent.headers, **child.headers},
        "interceptors": Interceptors(
            request=parent.interceptors.request + child.interceptors.request,
            response=child.interceptors.response + parent.interceptors.response,
            on=merge_on(parent.interceptors.on, child.interceptors.on),
        ),
    }

    base = join_base(parent.base, child.base)
    if base is not None:
        fields["base"] = base

    for name in INHERITED_FIELDS:
        if child.is_explicit(name):
            fields[name] = getattr(child, name)
        elif parent.is_explicit(name):
            fields[name] = getattr(parent, name)

    return HttpOptions(**fields)


__all__ = [
    "coerce_options",
    "join_base",
    "merge_on",
    "merge_options",
]
