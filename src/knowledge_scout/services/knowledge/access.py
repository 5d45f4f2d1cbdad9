"""Visibility rules shared by document listing, search and direct fetch."""

from __future__ import annotations

from typing import Protocol


class Readable(Protocol):
    owner_id: str
    is_private: bool
    share_token: str | None


def is_owner(document: Readable, caller_id: str | None) -> bool:
    return caller_id is not None and caller_id == document.owner_id


def can_read(
    document: Readable,
    caller_id: str | None,
    share_token: str | None = None,
) -> bool:
    if not document.is_private:
        return True
    if is_owner(document, caller_id):
        return True
    return bool(share_token) and share_token == document.share_token


def visible_share_token(document: Readable, caller_id: str | None) -> str | None:
    """Only the owner ever sees the share token, even when a token reader got in."""
    if is_owner(document, caller_id):
        return document.share_token
    return None
