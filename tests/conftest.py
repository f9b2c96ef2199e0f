"""Shared test fixtures for the mail parser test suite."""

from __future__ import annotations

from email.message import Message
from email.mime.base import MIMEBase
from email.mime.message import MIMEMessage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email import encoders

import pytest

from umbrella_mailparser.config import MailParserSettings
from umbrella_mailparser.factory import PartFactory
from umbrella_mailparser.parser import MessageParser


@pytest.fixture
def settings() -> MailParserSettings:
    return MailParserSettings()


@pytest.fixture
def part_factory() -> PartFactory:
    return PartFactory()


@pytest.fixture
def parser(settings: MailParserSettings) -> MessageParser:
    return MessageParser(settings=settings)


# ------------------------------------------------------------------
# Sample EML builders
# ------------------------------------------------------------------


def _build_plain_email(
    *,
    subject: str = "Test Subject",
    from_addr: str = "sender@example.com",
    to_addr: str = "recipient@example.com",
    body: str = "Hello, World!",
    message_id: str = "<test-001@example.com>",
    cc: str | None = None,
    bcc: str | None = None,
) -> bytes:
    """Build a simple plain-text email as raw bytes."""
    msg = MIMEText(body, "plain")
    msg["Subject"] = subject
    msg["From"] = from_addr
    msg["To"] = to_addr
    msg["Message-ID"] = message_id
    msg["Date"] = "Mon, 01 Jun 2025 12:00:00 +0000"
    if cc:
        msg["Cc"] = cc
    if bcc:
        msg["Bcc"] = bcc
    return msg.as_bytes()


def _build_inner_message(*, subject: str = "Original") -> Message:
    inner = MIMEMultipart("alternative")
    inner["Subject"] = subject
    inner["From"] = "origin@example.com"
    inner["To"] = "Journal@Example.com"
    inner["Message-ID"] = "<inner-001@example.com>"
    inner.attach(MIMEText("original text", "plain"))
    inner.attach(MIMEText("<p>original html</p>", "html"))
    return inner


def _build_multipart_email(
    *,
    body_text: str = "Plain body",
    body_html: str = "<p>HTML body</p>",
    attachments: list[tuple[str, str, bytes]] | None = None,
) -> bytes:
    """Build a multipart email with text, HTML, and optional attachments."""
    msg = MIMEMultipart("mixed")
    msg["Subject"] = "Multipart Email"
    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Message-ID"] = "<multi-001@example.com>"
    msg["Date"] = "Mon, 01 Jun 2025 12:00:00 +0000"

    alt = MIMEMultipart("alternative")
    alt.attach(MIMEText(body_text, "plain"))
    alt.attach(MIMEText(body_html, "html"))
    msg.attach(alt)

    for filename, content_type, payload in attachments or []:
        maintype, subtype = content_type.split("/", 1)
        part = MIMEBase(maintype, subtype)
        part.set_payload(payload)
        encoders.encode_base64(part)
        part.add_header("Content-Disposition", "attachment", filename=filename)
        msg.attach(part)

    return msg.as_bytes()


def _build_enveloped_email(*, nested: bool = False) -> bytes:
    """Journal-style wrapper carrying the original message as message/rfc822.

    With *nested*, the original sits one multipart level deeper instead of
    directly below the root.
    """
    msg = MIMEMultipart("mixed")
    msg["Subject"] = "Journal report"
    msg["From"] = "journal@example.com"
    msg["To"] = "archive@example.com"
    msg["Message-ID"] = "<journal-001@example.com>"
    msg.attach(MIMEText("Sender: origin@example.com", "plain"))

    enveloped = MIMEMessage(_build_inner_message())
    if nested:
        wrapper = MIMEMultipart("mixed")
        wrapper.attach(enveloped)
        msg.attach(wrapper)
    else:
        msg.attach(enveloped)
    return msg.as_bytes()


ADDRESSES_EML = b"""\
Date: Mon, 04 Mar 2013 14:30:44 +0100
From: a@example.com
MIME-Version: 1.0
To: b@example.com
Cc: c@example.com
Bcc: d@example.com
Subject: Testsubject
Message-ID: <addr-001@example.com>
Content-Transfer-Encoding: 8bit

Testbody
"""

ALTERNATIVE_WITH_ATTACHMENT_EML = b"""\
MIME-Version: 1.0
Date: Tue, 19 Mar 2013 11:32:22 -0700
Subject: This is the subject line
From: a@example.com
To: b@example.com
Content-Type: multipart/mixed; boundary=047d7bb03b8e84404004d84b538e

--047d7bb03b8e84404004d84b538e
Content-Type: multipart/alternative; boundary=047d7bb03b8e84403b04d84b538c

--047d7bb03b8e84403b04d84b538c
Content-Type: text/plain; charset=ISO-8859-1

This is the text body* with styling*

--047d7bb03b8e84403b04d84b538c
Content-Type: text/html; charset=ISO-8859-1
Content-Transfer-Encoding: quoted-printable

<div dir=3D"ltr">This is the html body<b>=A0with styling</b></div>

--047d7bb03b8e84403b04d84b538c--
--047d7bb03b8e84404004d84b538e
Content-Type: application/x-font-ttf; name="example.bin"
Content-Disposition: attachment; filename="example.bin"
Content-Transfer-Encoding: base64
X-Attachment-Id: f_hehegkyx0

AAEAAAAPADAAAwDAT1MvMlFBXLsAAYF0AAAAVlBDTFRLxMEKAAGBzAAAADZjbWFwXFxQcgABdkQA
--047d7bb03b8e84404004d84b538e--
"""

TRUNCATED_EML = b"""\
From: a@example.com
To: b@example.com
Subject: Missing closing boundary
MIME-Version: 1.0
Content-Type: multipart/alternative; boundary="test-boundary"

--test-boundary
Content-Type: text/plain

first-part

--test-boundary
Content-Type: text/html

<p>second-part</p>
"""

TERMINATED_EML = TRUNCATED_EML + b"\n--test-boundary--\n"


def _two_part_alternative(media_type: str, first: str, second: str) -> bytes:
    return f"""\
From: sender@example.com
Content-Type: multipart/alternative; boundary="test-boundary"
Subject: Mail list Page
Message-Id: <74111298-6423-2943-9875-39906A7EA733@example.com>
Date: Thu, 2 May 2013 12:31:20 +0200
To: cory.cutterson@test.com, jane.crazy@example.com
Mime-Version: 1.0


--test-boundary
Content-Transfer-Encoding: 7bit
Content-Type: {media_type}

{first}

--test-boundary
Content-Transfer-Encoding: 7bit
Content-Type: {media_type}

{second}

--test-boundary--
""".encode()


@pytest.fixture
def plain_eml_bytes() -> bytes:
    return _build_plain_email()


@pytest.fixture
def multipart_eml_bytes() -> bytes:
    return _build_multipart_email(
        attachments=[
            ("report.pdf", "application/pdf", b"%PDF-1.4 fake pdf content"),
            ("data.csv", "text/csv", b"col1,col2\na,b\n"),
        ],
    )


@pytest.fixture
def enveloped_eml_bytes() -> bytes:
    return _build_enveloped_email()


@pytest.fixture
def nested_enveloped_eml_bytes() -> bytes:
    return _build_enveloped_email(nested=True)
