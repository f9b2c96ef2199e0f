"""Mail parser configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_ADDRESS_FIELDS = ["to", "from", "cc", "bcc"]
DEFAULT_MAX_DEPTH = 32


class MailParserSettings(BaseSettings):
    """Parsing limits, charset detection order and logging settings."""

    model_config = {"env_prefix": "MAILPARSER_"}

    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        ge=1,
        description="Maximum MIME nesting depth followed when building the part tree",
    )
    auto_charsets: list[str] = Field(
        default_factory=lambda: ["ascii", "utf-8"],
        description="Charsets tried in order when a part declares no usable charset",
    )
    address_fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ADDRESS_FIELDS),
        description="Address-list headers indexed for every parsed message",
    )
    log_level: str = Field(default="INFO", description="Root log level name")
    log_json: bool = Field(default=True, description="Render logs as JSON lines")

    @field_validator("address_fields")
    @classmethod
    def _lowercase_fields(cls, value: list[str]) -> list[str]:
        return [field.lower() for field in value]
