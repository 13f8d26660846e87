"""Image payloads handed to the prediction client by a capture source.

The client never touches local storage itself. Anything that produces image
bytes (a camera, a file picker, a test fixture) builds an ``ImagePayload``
and hands it over. ``payload_from_path`` is the file-based capture source.
"""

from __future__ import annotations

import logging
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"
DEFAULT_FILENAME = "photo.jpg"

# type "/" subtype, RFC 6838 restricted-name characters, optional ";param=value" pairs.
_TOKEN = r"[A-Za-z0-9][A-Za-z0-9!#$&^_.+-]{0,126}"
_MIME_RE = re.compile(rf"^{_TOKEN}/{_TOKEN}(\s*;\s*{_TOKEN}=(\"[^\"]*\"|[^;\s]+))*$")


def is_valid_mime_type(value: str) -> bool:
    """Return True if ``value`` is a syntactically valid MIME type string."""
    return bool(_MIME_RE.match(value))


@dataclass(frozen=True)
class ImagePayload:
    """Image bytes plus the media type and filename sent with them."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE
    filename: str = DEFAULT_FILENAME

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("Image payload must not be empty")
        if not is_valid_mime_type(self.mime_type):
            raise ValueError(f"Invalid MIME type: {self.mime_type!r}")
        if not self.filename:
            raise ValueError("Image payload filename must not be empty")

    def __repr__(self) -> str:
        return f"ImagePayload(size={len(self.data)}, mime_type={self.mime_type!r}, filename={self.filename!r})"


def payload_from_path(
    path: str | Path,
    mime_type: str | None = None,
    filename: str | None = None,
) -> ImagePayload:
    """Read an image file into an ``ImagePayload``.

    Args:
        path: Image file on disk.
        mime_type: Media type to send. Guessed from the extension when omitted,
            falling back to ``image/jpeg``.
        filename: Filename to send. Defaults to the file's own name.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is empty or the MIME type is invalid.
    """
    file_path = Path(path)
    data = file_path.read_bytes()

    if mime_type is None:
        guessed, _ = mimetypes.guess_type(file_path.name)
        mime_type = guessed or DEFAULT_MIME_TYPE

    logger.debug("Read %d bytes from %s (%s)", len(data), file_path, mime_type)
    return ImagePayload(data=data, mime_type=mime_type, filename=filename or file_path.name)
