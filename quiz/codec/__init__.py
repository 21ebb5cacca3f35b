"""Codec do formato storage."""

from .storage_codec import (
    DecodeResult,
    decode,
    encode,
    encode_wire_safe,
    escape_html,
    strip_paragraphs,
    try_decode,
    unescape_html,
)

__all__ = [
    "DecodeResult",
    "decode",
    "encode",
    "encode_wire_safe",
    "escape_html",
    "unescape_html",
    "strip_paragraphs",
    "try_decode",
]
