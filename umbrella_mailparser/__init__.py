"""Umbrella Mail Parser — MIME part tree, enveloped messages, addresses and primary content."""

from .config import MailParserSettings
from .errors import (
    CharsetConversionError,
    MailParserError,
    MalformedStructureError,
    MissingContentTypeError,
    UnexpectedHeaderShapeError,
)
from .factory import PartFactory
from .logging import setup_logging
from .parsed import ParsedMessage
from .parser import MessageParser
from .tree import PartTree, PartTreeBuilder, PartTreeNode

__all__ = [
    "CharsetConversionError",
    "MailParserError",
    "MailParserSettings",
    "MalformedStructureError",
    "MessageParser",
    "MissingContentTypeError",
    "ParsedMessage",
    "PartFactory",
    "PartTree",
    "PartTreeBuilder",
    "PartTreeNode",
    "UnexpectedHeaderShapeError",
    "setup_logging",
]
