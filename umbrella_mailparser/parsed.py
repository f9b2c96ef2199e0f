"""ParsedMessage — the result of parsing one raw message."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from email.message import Message
from types import MappingProxyType
from typing import Any

import structlog

from .addresses import collect_addresses, unique
from .config import DEFAULT_ADDRESS_FIELDS
from .decoding import DEFAULT_AUTO_CHARSETS, decode_body
from .errors import CharsetConversionError
from .headers import is_multipart, media_type

logger = structlog.get_logger()

Glue = Callable[[str], str]

TEXT_PLAIN = "text/plain"
TEXT_HTML = "text/html"


def no_glue(kind: str) -> str:
    return ""


@dataclass(frozen=True)
class ParsedMessage:
    """Structured view of a raw message.

    Built once by :class:`~umbrella_mailparser.parser.MessageParser`.
    ``parts`` is the pre-order list of every part (root first), including
    the parts of enveloped messages.  Body decoding is lazy and happens in
    :meth:`get_primary_content`.
    """

    raw_mail: bytes | str
    mail: Message
    parts: list[Message]
    logging_emails: list[str]
    address_index: Mapping[str, list[str]]
    enveloped_email: Message | None = None
    default_fields: Sequence[str] = tuple(DEFAULT_ADDRESS_FIELDS)
    auto_charsets: Sequence[str] = DEFAULT_AUTO_CHARSETS
    _problematic_parts: list[Message] = field(default_factory=list, init=False, repr=False)

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    @property
    def addresses(self) -> Mapping[str, list[str]]:
        """Read-only view of field name -> addresses (duplicates kept)."""
        return MappingProxyType(self.address_index)

    def get_all_email_addresses(self, fields: Sequence[str] | None = None) -> list[str]:
        """Unique addresses of the requested fields, in field then part order.

        Defaults to the fields indexed at parse time (to, from, cc, bcc).
        Fields that were not indexed are read from the parts on demand.
        """
        if fields is None:
            fields = self.default_fields

        found: list[str] = []
        for name in fields:
            name = name.lower()
            if name in self.address_index:
                found.extend(self.address_index[name])
            else:
                found.extend(collect_addresses(self.parts, [name])[name])
        return unique(found)

    # ------------------------------------------------------------------
    # Enveloped message
    # ------------------------------------------------------------------

    def get_enveloped_email(self) -> Message | None:
        return self.enveloped_email

    def has_enveloped_email(self) -> bool:
        return self.enveloped_email is not None

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def get_primary_content(self, glue: Glue | None = None) -> str | None:
        """Concatenate the HTML parts, or the plain-text parts if there is no HTML.

        Other parts (attachments, images, ...) are never included.  *glue*
        is called with ``"text/html"`` or ``"text/plain"`` and its result is
        placed between consecutive parts, e.g. ``lambda t: "<hr />"``.

        Returns None when the message has no text or HTML part at all, and
        ``""`` as soon as one part cannot be converted to UTF-8; that part
        is then listed in :meth:`get_problematic_parts`.
        """
        glue = glue or no_glue
        self._problematic_parts.clear()

        candidates = self.parts if is_multipart(self.mail) else [self.mail]

        text_buffers: list[str] = []
        html_buffers: list[str] = []
        for part in candidates:
            declared = media_type(part)
            if declared not in (TEXT_PLAIN, TEXT_HTML):
                continue

            try:
                body = decode_body(part, self.auto_charsets)
            except CharsetConversionError as exc:
                logger.warning(
                    "charset_conversion_failed",
                    charset=exc.charset,
                    media_type=declared,
                )
                self._problematic_parts.append(part)
                return ""

            if declared == TEXT_HTML:
                html_buffers.append(body)
            else:
                text_buffers.append(body)

        if html_buffers:
            return glue(TEXT_HTML).join(html_buffers)
        if text_buffers:
            return glue(TEXT_PLAIN).join(text_buffers)
        return None

    def get_problematic_parts(self) -> list[Message]:
        """Parts that failed charset conversion in the last :meth:`get_primary_content` call."""
        return list(self._problematic_parts)

    def has_problematic_parts(self) -> bool:
        return bool(self._problematic_parts)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_summary(self, glue: Glue | None = None) -> dict[str, Any]:
        """JSON-friendly digest: addresses, logging ids, envelope and primary content."""
        enveloped = self.enveloped_email
        subject = enveloped.get("Subject") if enveloped is not None else None
        content = self.get_primary_content(glue)
        return {
            "addresses": {name: list(values) for name, values in self.address_index.items()},
            "all_addresses": self.get_all_email_addresses(),
            "logging_emails": list(self.logging_emails),
            "part_count": len(self.parts),
            "media_types": [media_type(part) for part in self.parts],
            "has_enveloped_email": enveloped is not None,
            "enveloped_subject": str(subject) if subject is not None else None,
            "primary_content": content,
            "problematic_parts": len(self._problematic_parts),
        }
