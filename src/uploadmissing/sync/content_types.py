"""Content-type lookup by file extension."""

from __future__ import annotations

import mimetypes

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_types = mimetypes.MimeTypes()


def content_type_for(name: str) -> str:
    """Return the MIME type for a file name, or the generic binary type."""
    content_type, _ = _types.guess_type(name, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE
