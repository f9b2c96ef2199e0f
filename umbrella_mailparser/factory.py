"""PartFactory — raw message text to a structural ``email.message.Message``."""

from __future__ import annotations

import email
import email.policy
from email.message import Message


class PartFactory:
    """Thin seam over the stdlib parser so callers can swap or mock it.

    No validation happens here: malformed input yields whatever the
    stdlib parser makes of it, with problems recorded as ``defects``.
    Only :class:`email.policy.EmailPolicy` policies are accepted, since
    header access relies on their structured header objects.
    """

    def __init__(self, policy: email.policy.EmailPolicy = email.policy.default) -> None:
        if not isinstance(policy, email.policy.EmailPolicy):
            raise TypeError(
                f"PartFactory needs an EmailPolicy, got {type(policy).__name__}"
            )
        self._policy = policy

    def make_part(self, raw: bytes | str) -> Message:
        if isinstance(raw, str):
            raw = raw.encode("utf-8", "surrogateescape")
        return email.message_from_bytes(raw, policy=self._policy)
