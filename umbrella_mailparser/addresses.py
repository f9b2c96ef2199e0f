"""Address and Message-ID extraction from parsed parts."""

from __future__ import annotations

from collections.abc import Iterable
from email import errors
from email.message import Message

import structlog

from .headers import first_header, lookup_header

logger = structlog.get_logger()

# Raised by the stdlib header registry on some malformed header values.
_MALFORMED_HEADER_ERRORS = (errors.HeaderParseError, IndexError, ValueError)

_MESSAGE_ID_STRIP = " \t\n\r\0\x0b<>"


def extract_addresses(part: Message, field: str) -> list[str]:
    """Lower-cased addresses from the first *field* header of *part*.

    A missing header, a header that is not an address list, or one the
    stdlib flags with an invalid-header defect contributes nothing.
    """
    try:
        header = first_header(part, field)
        if header is None:
            return []
        addresses = getattr(header, "addresses", None)
        if addresses is None:
            return []
        if any(isinstance(defect, errors.InvalidHeaderDefect) for defect in header.defects):
            logger.warning("malformed_address_header_skipped", field=field, value=str(header))
            return []
        return [address.addr_spec.lower() for address in addresses if address.addr_spec]
    except _MALFORMED_HEADER_ERRORS as exc:
        logger.warning("malformed_address_header_skipped", field=field, error=str(exc))
        return []


def collect_addresses(parts: Iterable[Message], fields: Iterable[str]) -> dict[str, list[str]]:
    """Map each field to the addresses found in it across *parts*, in part order.

    Duplicates are kept; de-duplication happens when addresses are queried.
    """
    parts = list(parts)
    index: dict[str, list[str]] = {}
    for field in fields:
        field = field.lower()
        found: list[str] = []
        for part in parts:
            found.extend(extract_addresses(part, field))
        index[field] = found
    return index


def extract_message_ids(part: Message) -> list[str]:
    """Every Message-ID of *part*, without surrounding whitespace and angle brackets."""
    try:
        headers = lookup_header(part, "message-id")
    except _MALFORMED_HEADER_ERRORS as exc:
        logger.warning("malformed_message_id_skipped", error=str(exc))
        return []

    return [str(header).strip(_MESSAGE_ID_STRIP) for header in headers]


def unique(values: Iterable[str]) -> list[str]:
    """De-duplicate *values*, keeping the first occurrence of each."""
    return list(dict.fromkeys(values))
