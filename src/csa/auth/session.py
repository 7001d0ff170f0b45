# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Signed session tokens.

A token is ``payload.signature``: the payload is the field mapping as compact,
key-sorted JSON (URL-safe base64, zlib-compressed when that is shorter) and the
signature is an HMAC over it keyed with the server secret. Decoding never
raises: callers get ``Valid``, ``Absent`` or ``Invalid``.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from itsdangerous import BadData, URLSafeSerializer

SESSION_USER_KEY = "user_id"


@dataclass(frozen=True)
class Valid:
    fields: Dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class Invalid:
    reason: str = ""


DecodeResult = Union[Valid, Absent, Invalid]


class SessionSigner:
    def __init__(self, secret_key: str, *, salt: str = "csa.session.v1") -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._serializer = URLSafeSerializer(
            secret_key=secret_key,
            salt=salt,
            serializer_kwargs={"sort_keys": True},
        )

    def encode(self, fields: Mapping[str, Any]) -> str:
        """Serialize and sign ``fields``. Same fields and key always give the same token."""
        return self._serializer.dumps(dict(fields))

    def decode(self, token: Optional[Union[str, bytes]]) -> DecodeResult:
        if not token:
            return Absent()

        if isinstance(token, str):
            try:
                raw = token.encode("utf-8")
            except UnicodeEncodeError:
                return Invalid("undecodable token")
        else:
            raw = bytes(token)

        try:
            data = self._serializer.loads(raw)
        except BadData as exc:
            return Invalid(type(exc).__name__)

        if not isinstance(data, dict):
            return Invalid("payload is not a mapping")

        # Base64 tolerates some alterations (padding bits, stray characters) that
        # still verify. Only the exact bytes we would have issued are accepted.
        canonical = self._serializer.dumps(data).encode("utf-8")
        if not hmac.compare_digest(canonical, raw):
            return Invalid("non-canonical token")

        return Valid(fields=data)


def session_user_id(result: DecodeResult) -> Optional[int]:
    """Return the integer ``user_id`` carried by a valid session, else None."""
    if not isinstance(result, Valid):
        return None
    user_id = result.fields.get(SESSION_USER_KEY)
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        return None
    return user_id
