"""File format detection for bank statement exports."""

from __future__ import annotations

from .models import FileType

_OFX_MARKERS: tuple[str, ...] = ("<OFX>", "OFXHEADER:", "<?OFX")


def detect_file_type(filename: str, content: str) -> FileType:
    """Classify a statement as ``csv``, ``ofx``, ``qfx`` or ``unknown``.

    Order of evidence:
    1. A ``.ofx``/``.qfx``/``.csv`` extension wins outright.
    2. An OFX header marker anywhere in the content means ``ofx``.
    3. A comma, semicolon or tab on the first line means ``csv``.
    """

    name = filename.strip().lower()
    extension = name.rsplit(".", 1)[-1] if "." in name else ""
    if extension == "ofx":
        return "ofx"
    if extension == "qfx":
        return "qfx"
    if extension == "csv":
        return "csv"

    upper = content.upper()
    if any(marker in upper for marker in _OFX_MARKERS):
        return "ofx"

    first_line = content.split("\n", 1)[0]
    if any(ch in first_line for ch in (",", ";", "\t")):
        return "csv"

    return "unknown"


__all__ = ["detect_file_type"]
