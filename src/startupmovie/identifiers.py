from __future__ import annotations

import logging

from .errors import IdentifierError

logger = logging.getLogger(__name__)

# Characters that would let a level name escape the movies directory
_FORBIDDEN = ("/", "\\", "\x00")


def to_level_identifier(text: str, encoding: str = "utf-8", max_bytes: int = 255) -> str:
    """Convert a host-supplied level name into a bounded filename fragment.

    The encoded form is limited to ``max_bytes``. Longer names are truncated
    on a character boundary instead of rejected: a truncated name can only
    miss a clip, it cannot damage one.
    """
    if any(ch in text for ch in _FORBIDDEN):
        raise IdentifierError(f"Level name contains a path separator or NUL: {text!r}")
    try:
        raw = text.encode(encoding)
    except UnicodeEncodeError as exc:
        raise IdentifierError(f"Level name {text!r} cannot be encoded as {encoding}") from exc

    if len(raw) <= max_bytes:
        return text

    truncated = raw[:max_bytes].decode(encoding, errors="ignore")
    logger.debug("Truncated level name %r to %d bytes: %r", text, max_bytes, truncated)
    return truncated

