"""Tamper-evident printable QR payloads.

A printed code carries ``base64(json({"encoded_token", "checksum"}))`` where
``encoded_token`` is a truncated HMAC of the student's secret and
``checksum`` is a shorter keyed hash of ``encoded_token``. The raw secret is
never printed, so a leaked card cannot be turned back into the database
secret. Resolving a scan hashes every active student's secret and compares,
because the HMAC is one-way.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
from typing import Callable, Iterable, Optional

from ..core.constants import QR_CHECKSUM_LENGTH, QR_HASH_LENGTH

logger = logging.getLogger(__name__)

_ENCODED_FIELD = "encoded_token"
_CHECKSUM_FIELD = "checksum"


class QRTokenCodec:
    def __init__(
        self,
        salt: str,
        active_secrets: Callable[[], Iterable[str]],
        *,
        hash_length: int = QR_HASH_LENGTH,
        checksum_length: int = QR_CHECKSUM_LENGTH,
    ):
        if not salt:
            raise ValueError("QR salt must not be empty")
        self._salt = salt.encode("utf-8")
        self._active_secrets = active_secrets
        self._hash_length = int(hash_length)
        self._checksum_length = int(checksum_length)

    def encode_for_print(self, secret_token: str) -> str:
        encoded = self._encode_token(secret_token)
        payload = {_ENCODED_FIELD: encoded, _CHECKSUM_FIELD: self._checksum(encoded)}
        raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return base64.b64encode(raw).decode("ascii")

    def decode_and_verify(self, scanned: str) -> Optional[str]:
        """Return the student's secret for a genuine code, else None. Never raises."""
        fields = self._parse(scanned)
        if fields is None:
            return None

        encoded, checksum = fields
        if not hmac.compare_digest(checksum, self._checksum(encoded)):
            return None

        return self._resolve(encoded)

    def is_valid_format(self, scanned: str) -> bool:
        """Structural check only (no checksum, no data access)."""
        return self._parse(scanned) is not None

    def _encode_token(self, secret_token: str) -> str:
        digest = hmac.new(self._salt, secret_token.encode("utf-8"), hashlib.sha256).hexdigest()
        return digest[: self._hash_length]

    def _checksum(self, encoded: str) -> str:
        digest = hmac.new(self._salt, b"checksum:" + encoded.encode("utf-8"), hashlib.sha256).hexdigest()
        return digest[: self._checksum_length]

    def _parse(self, scanned: str) -> Optional[tuple[str, str]]:
        if not isinstance(scanned, str) or not scanned.strip():
            return None
        try:
            raw = base64.b64decode(scanned.strip(), validate=True)
            data = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError):
            return None

        if not isinstance(data, dict):
            return None
        encoded = data.get(_ENCODED_FIELD)
        checksum = data.get(_CHECKSUM_FIELD)
        if not isinstance(encoded, str) or not isinstance(checksum, str):
            return None
        if len(encoded) != self._hash_length or len(checksum) != self._checksum_length:
            return None
        return encoded, checksum

    def _resolve(self, encoded: str) -> Optional[str]:
        try:
            secrets = list(self._active_secrets())
        except Exception:
            logger.exception("Could not load active student secrets while resolving a QR scan")
            return None

        # TODO: store the encoded hash next to the secret (indexed) once enrolment grows past a few thousand.
        for secret in secrets:
            if hmac.compare_digest(self._encode_token(secret), encoded):
                return secret
        return None
