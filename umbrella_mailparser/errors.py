"""Exception hierarchy for the mail parser."""

from __future__ import annotations


class MailParserError(Exception):
    """Base class for all mail parser errors."""


class MissingContentTypeError(MailParserError):
    """Content-Type was requested from a part that has no such header."""


class UnexpectedHeaderShapeError(MailParserError):
    """A header lookup returned something other than None, a header or a sequence of headers."""

    def __init__(self, name: str, value: object) -> None:
        super().__init__(
            f"Unexpected return type {type(value).__name__} for header {name!r}, "
            "expected None, a header, a list or an iterator of headers"
        )
        self.name = name
        self.value = value


class MalformedStructureError(MailParserError):
    """The sub-parts of a multipart part could not be counted."""


class CharsetConversionError(MailParserError):
    """A body could not be converted from its charset to UTF-8.

    ``content`` holds the transfer-decoded bytes as they were before the
    conversion attempt.
    """

    def __init__(self, charset: str, content: bytes) -> None:
        super().__init__(f"Could not convert content from charset {charset!r}")
        self.charset = charset
        self.content = content
