from __future__ import annotations

from typing import Mapping, Protocol


class IdentityResolver(Protocol):
    def resolve(self, headers: Mapping[str, str]) -> str | None: ...


class HeaderIdentityResolver:
    """Reads the caller id an upstream auth gateway put on the request."""

    def __init__(self, *, header_name: str) -> None:
        self._header_name = header_name

    def resolve(self, headers: Mapping[str, str]) -> str | None:
        value = headers.get(self._header_name)
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None
