"""Building the stream links and buttons the bot replies with."""

from __future__ import annotations

from collections.abc import Collection

_STREAMABLE_KINDS = ("video", "audio", "pdf")


def is_allowed(allowed_users: Collection[int], user_id: int) -> bool:
    """An empty allow-list admits everyone; otherwise the user must be listed."""
    return not allowed_users or user_id in allowed_users


def build_link(host: str, message_id: int, short_hash: str) -> str:
    """Return the stream URL of a forwarded message."""
    return f"{host}/stream/{message_id}?hash={short_hash}"


def is_streamable(mime_type: str) -> bool:
    """Tell whether a browser can play or view the file inline."""
    return any(kind in mime_type for kind in _STREAMABLE_KINDS)


def build_buttons(link: str, mime_type: str) -> list[tuple[str, str]]:
    """Return (text, url) buttons for a link.

    Links on localhost get no buttons, since such URLs are not accepted as buttons.
    """
    if "http://localhost" in link:
        return []
    buttons = [("Download", link + "&d=true")]
    if is_streamable(mime_type):
        buttons.append(("Stream", link))
    return buttons