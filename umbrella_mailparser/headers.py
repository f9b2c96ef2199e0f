"""Header predicates and accessors shared by the tree builder, parser and result.

The stdlib message API is loose about what a header lookup returns and
about parts that carry no headers at all.  Everything that reads headers
goes through these helpers so that looseness stays in one place.
"""

from __future__ import annotations

from collections.abc import Iterator
from email import errors
from email.message import Message
from email.headerregistry import ContentTypeHeader

from .errors import MalformedStructureError, MissingContentTypeError, UnexpectedHeaderShapeError

ENVELOPED_MEDIA_TYPE = "message/rfc822"

_BROKEN_BOUNDARY_DEFECTS = (
    errors.StartBoundaryNotFoundDefect,
    errors.CloseBoundaryNotFoundDefect,
    errors.NoBoundaryInMultipartDefect,
)

_TRANSFER_ENCODED = frozenset(
    {"base64", "quoted-printable", "x-uuencode", "uuencode", "uue", "x-uue"}
)


def has_header(part: Message, name: str) -> bool:
    if len(part) == 0:
        return False
    return name in part


def lookup_header(part: Message, name: str) -> list:
    """Return every instance of header *name*, normalized to a list.

    A missing header gives ``[]``.  A single header, a list/tuple or an
    iterator of headers are all accepted; anything else means the message
    object broke its contract and raises :class:`UnexpectedHeaderShapeError`.
    """
    if not has_header(part, name):
        return []

    value = part.get_all(name)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, Iterator):
        return list(value)
    raise UnexpectedHeaderShapeError(name, value)


def first_header(part: Message, name: str):
    """First instance of header *name*, or None.  Duplicates are ignored."""
    values = lookup_header(part, name)
    return values[0] if values else None


def content_type(part: Message) -> ContentTypeHeader:
    """Return the (first) Content-Type header of *part*.

    Raises :class:`MissingContentTypeError` when there is none; check with
    ``has_header(part, "Content-Type")`` first.
    """
    header = first_header(part, "Content-Type")
    if header is None:
        raise MissingContentTypeError("Part has no Content-Type header")
    return header


def media_type(part: Message, default: str = "text/plain") -> str:
    if not has_header(part, "Content-Type"):
        return default
    return content_type(part).content_type


def content_type_param(part: Message, name: str) -> str | None:
    if not has_header(part, "Content-Type"):
        return None
    return content_type(part).params.get(name)


def is_enveloped_email(part: Message) -> bool:
    if not has_header(part, "Content-Type"):
        return False
    return content_type(part).content_type == ENVELOPED_MEDIA_TYPE


def is_multipart(part: Message) -> bool:
    # message/rfc822 is held as a one-element list by the stdlib; it is not
    # a multipart here.
    return part.get_content_maintype() == "multipart"


def count_parts(part: Message) -> int:
    """Number of direct sub-parts of *part*.

    Raises :class:`MalformedStructureError` when the parser could not find
    the start or closing boundary of a multipart part.
    """
    if not is_multipart(part):
        return 0

    broken = [d for d in part.defects if isinstance(d, _BROKEN_BOUNDARY_DEFECTS)]
    if broken:
        raise MalformedStructureError(
            ", ".join(type(d).__name__ for d in broken)
        )

    payload = part.get_payload()
    if not isinstance(payload, list):
        raise MalformedStructureError("Multipart payload is not a list of parts")
    return len(payload)


def get_child(part: Message, index: int) -> Message:
    """Sub-part at 1-based *index*."""
    return part.get_payload(index - 1)


def raw_body(part: Message) -> bytes:
    """Body of *part* before transfer decoding.

    For ``message/*`` containers the stdlib has already split the body into
    a sub-message; it is serialized back to bytes.
    """
    payload = part.get_payload()
    if payload is None:
        return b""
    if isinstance(payload, list):
        return b"".join(sub.as_bytes() for sub in payload)

    encoding = str(first_header(part, "Content-Transfer-Encoding") or "").strip().lower()
    if encoding in _TRANSFER_ENCODED:
        return payload.encode("utf-8", "surrogateescape")
    # Unencoded bodies may carry 8-bit data; decode=True hands back the
    # original bytes instead of a charset-substituted string.
    return part.get_payload(decode=True) or b""
