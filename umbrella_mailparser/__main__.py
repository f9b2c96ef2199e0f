"""Entry point for the mail parser package.

Usage::

    python -m umbrella_mailparser message.eml   # parse a file
    python -m umbrella_mailparser -             # parse stdin

Prints a JSON summary of the parsed message to stdout.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

from .config import MailParserSettings
from .logging import setup_logging
from .parser import MessageParser


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python -m umbrella_mailparser <file.eml|->", file=sys.stderr)
        return 1

    settings = MailParserSettings()
    setup_logging(settings)

    source = args[0]
    raw = sys.stdin.buffer.read() if source == "-" else Path(source).read_bytes()

    parsed = MessageParser(settings=settings).parse(raw)
    json.dump(parsed.to_summary(), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
