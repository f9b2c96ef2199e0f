"""Transfer-encoding and charset decoding of a single part body."""

from __future__ import annotations

import base64
import binascii
import quopri
import re
from collections.abc import Sequence
from email.message import Message
from encodings.aliases import aliases

from .errors import CharsetConversionError
from .headers import content_type_param, first_header, raw_body

AUTO_CHARSET = "auto"
DEFAULT_TRANSFER_ENCODING = "7bit"
DEFAULT_AUTO_CHARSETS = ("ascii", "utf-8")

# ASCII whitespace and NUL only; a bare str.strip() would also eat
# non-breaking spaces that belong to the content.
_TRIM_CHARS = " \t\n\r\0\x0b"

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_NON_BASE64 = re.compile(rb"[^A-Za-z0-9+/]")


def normalize_charset_name(name: str) -> str:
    return _NON_ALNUM.sub("", name.lower())


KNOWN_CHARSETS: frozenset[str] = frozenset(
    normalize_charset_name(name) for pair in aliases.items() for name in pair
)


def resolve_charset(part: Message) -> str:
    """Declared charset of *part* if it is one we know, else ``"auto"``."""
    charset = content_type_param(part, "charset")
    if charset and normalize_charset_name(charset) in KNOWN_CHARSETS:
        return charset
    return AUTO_CHARSET


def transfer_encoding(part: Message) -> str:
    header = first_header(part, "Content-Transfer-Encoding")
    if header is None:
        return DEFAULT_TRANSFER_ENCODING
    return str(header).strip().lower()


def _lenient_b64decode(content: bytes) -> bytes:
    try:
        return base64.b64decode(content)
    except binascii.Error:
        pass
    # Broken padding or a truncated final quantum: decode what is there.
    data = _NON_BASE64.sub(b"", content)
    remainder = len(data) % 4
    if remainder == 1:
        data = data[:-1]
    elif remainder:
        data += b"=" * (4 - remainder)
    return base64.b64decode(data)


def decode_transfer(content: bytes, encoding: str) -> bytes:
    if encoding == "base64":
        return _lenient_b64decode(content)
    if encoding == "quoted-printable":
        return quopri.decodestring(content)
    return content


def convert_to_text(
    content: bytes,
    charset: str,
    auto_charsets: Sequence[str] = DEFAULT_AUTO_CHARSETS,
) -> str:
    """Decode *content* from *charset*, trying *auto_charsets* in order for ``"auto"``.

    Raises :class:`CharsetConversionError` if no candidate decodes the
    bytes cleanly.
    """
    candidates = list(auto_charsets) if charset == AUTO_CHARSET else [charset]
    for candidate in candidates:
        try:
            return content.decode(candidate)
        except (LookupError, UnicodeDecodeError):
            continue
    raise CharsetConversionError(charset, content)


def decode_body(part: Message, auto_charsets: Sequence[str] = DEFAULT_AUTO_CHARSETS) -> str:
    """Transfer-decode and charset-convert the body of *part*, trimmed."""
    content = decode_transfer(raw_body(part), transfer_encoding(part))
    text = convert_to_text(content, resolve_charset(part), auto_charsets)
    return text.strip(_TRIM_CHARS)
