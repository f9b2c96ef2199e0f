"""MessageParser — raw RFC 822 bytes to a :class:`ParsedMessage`.

Parsing is best effort.  A multipart message without its closing
boundary is repaired and re-parsed, unparseable sub-structures become
leaves, and unreadable address headers contribute no addresses.  Only a
broken header lookup contract escapes as an exception.
"""

from __future__ import annotations

from collections.abc import Sequence
from email.message import Message

import structlog

from .addresses import collect_addresses, extract_message_ids, unique
from .config import MailParserSettings
from .errors import MalformedStructureError
from .factory import PartFactory
from .headers import content_type_param, count_parts
from .parsed import ParsedMessage
from .tree import PartTreeBuilder

logger = structlog.get_logger()

_TRIM_BYTES = b" \t\n\r\0\x0b"


class MessageParser:
    """Stateless parser: every :meth:`parse` call yields an independent result."""

    def __init__(
        self,
        part_factory: PartFactory | None = None,
        settings: MailParserSettings | None = None,
        address_fields: Sequence[str] | None = None,
    ) -> None:
        self._settings = settings or MailParserSettings()
        self._part_factory = part_factory or PartFactory()
        self._tree_builder = PartTreeBuilder(self._part_factory, max_depth=self._settings.max_depth)

        self._default_fields = list(self._settings.address_fields)
        extra = [name.lower() for name in address_fields or []]
        self._indexed_fields = unique([*self._default_fields, *extra])

    def parse(self, raw_mail: bytes | str) -> ParsedMessage:
        part = self._part_factory.make_part(raw_mail)
        part = self.repair_missing_boundary(part, raw_mail)

        tree = self._tree_builder.build(part)
        parts = tree.flatten()
        enveloped = tree.get_enveloped_email()

        address_index = collect_addresses(parts, self._indexed_fields)
        logging_emails = self._logging_emails(part, address_index)

        logger.info(
            "message_parsed",
            parts=len(parts),
            addresses=sum(len(found) for found in address_index.values()),
            enveloped=enveloped is not None,
        )

        return ParsedMessage(
            raw_mail=raw_mail,
            mail=part,
            parts=parts,
            logging_emails=logging_emails,
            address_index=address_index,
            enveloped_email=enveloped,
            default_fields=tuple(self._default_fields),
            auto_charsets=tuple(self._settings.auto_charsets),
        )

    def repair_missing_boundary(self, part: Message, raw_mail: bytes | str) -> Message:
        """Re-parse *raw_mail* with a closing boundary appended if *part* lacks one.

        The stdlib parser only records a missing closing boundary as a
        defect, so the sub-parts are counted to find out whether the
        structure is usable.  Without a ``boundary`` parameter nothing can
        be done and *part* is returned unchanged.
        """
        try:
            count_parts(part)
            return part
        except MalformedStructureError as exc:
            reason = str(exc)

        boundary = content_type_param(part, "boundary")
        if not boundary:
            logger.warning("boundary_repair_not_applicable", reason=reason)
            return part

        raw = raw_mail.encode("utf-8", "surrogateescape") if isinstance(raw_mail, str) else raw_mail
        repaired = raw.strip(_TRIM_BYTES) + b"\n--" + boundary.encode("utf-8", "surrogateescape") + b"--"
        logger.info("boundary_repaired", reason=reason)
        return self._part_factory.make_part(repaired)

    def _logging_emails(self, root: Message, address_index: dict[str, list[str]]) -> list[str]:
        addresses = unique(
            address for name in self._default_fields for address in address_index.get(name, [])
        )
        return addresses + extract_message_ids(root)
