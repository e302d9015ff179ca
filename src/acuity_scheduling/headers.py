"""
Signature extraction from explicit values or request headers.

Frameworks hand over headers in different shapes: plain dicts (possibly with
list values), or objects with a ``get(name)`` accessor (Flask/Werkzeug,
``http.client``, Fetch-like wrappers). Both are adapted to :class:`HeaderLookup`
so the resolver only deals with one interface.
"""

from collections.abc import Mapping
from typing import Any, Optional, Protocol, Sequence, Union, runtime_checkable

# Header Acuity uses for static webhook signatures
DEFAULT_SIGNATURE_HEADER = "x-acuity-signature"

HeaderValue = Union[str, Sequence[str], None]


@runtime_checkable
class HeaderGetter(Protocol):
    """Any object exposing a single-argument ``get(name)`` accessor."""

    def get(self, name: str) -> Optional[str]: ...


class HeaderLookup(Protocol):
    """Case-insensitive header lookup returning zero or more values."""

    def get_all(self, name: str) -> list[str]: ...


def _as_values(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if item is not None]
    return [str(value)]


class MappingHeaders:
    """
    Adapter for plain ``name -> value(s)`` mappings.

    Keys are stored with whatever case the caller used, so every key is
    compared case-insensitively. The first matching key wins.
    """

    def __init__(self, headers: Mapping[str, HeaderValue]):
        self._headers = headers

    def get_all(self, name: str) -> list[str]:
        target = name.lower()
        for key, value in self._headers.items():
            if key.lower() == target:
                return _as_values(value)
        return []


class GetterHeaders:
    """
    Adapter for objects with a ``get(name)`` accessor.

    Tries the name as given, then its lowercase form, covering collections
    that only index one of them.
    """

    def __init__(self, headers: HeaderGetter):
        self._headers = headers

    def get_all(self, name: str) -> list[str]:
        value = self._headers.get(name)
        if value is None:
            value = self._headers.get(name.lower())
        return _as_values(value)


def as_header_lookup(headers: Union[Mapping[str, HeaderValue], HeaderGetter]) -> HeaderLookup:
    """
    Wrap a header collection in the matching adapter.

    Raises:
        TypeError: If headers is neither a mapping nor exposes ``get``
    """
    if isinstance(headers, Mapping):
        return MappingHeaders(headers)
    if isinstance(headers, HeaderGetter):
        return GetterHeaders(headers)
    raise TypeError(
        f"Unsupported header collection type: {type(headers).__name__}"
    )


def resolve_signature(
    signature: Optional[str],
    headers: Union[Mapping[str, HeaderValue], HeaderGetter, None],
    header_name: Optional[str] = None,
) -> Optional[str]:
    """
    Resolve the claimed signature for a webhook request.

    Rules:
    1. A non-blank explicit ``signature`` wins; headers are not consulted
    2. Otherwise the first value of ``header_name`` (case-insensitive)
    3. Values are trimmed; blank or missing values resolve to None

    Args:
        signature: Signature already extracted by the caller, if any
        headers: Request headers (mapping or object with ``get``)
        header_name: Header carrying the signature.
            Default: x-acuity-signature

    Returns:
        The trimmed signature, or None when nothing was found

    Examples:
        >>> resolve_signature(None, {"X-Acuity-Signature": " abc= "})
        'abc='
        >>> resolve_signature("explicit", {"x-acuity-signature": "header"})
        'explicit'
    """
    if signature and signature.strip():
        return signature.strip()

    if headers is None:
        return None

    values = as_header_lookup(headers).get_all(header_name or DEFAULT_SIGNATURE_HEADER)
    if not values:
        return None

    resolved = values[0].strip()
    return resolved or None
