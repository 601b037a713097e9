"""
Share Codec
JSON -> UTF-8 -> deflate -> base64url (no padding), and back.

The token is the only copy of shared data; nothing is stored server-side.
"""

import base64
import binascii
import json
import re
from typing import Any, Optional, Union

from pydantic import ValidationError

from shared.exceptions.sortly import ShareDecodeError
from shared.interfaces.capabilities import TextCompressor
from shared.models.sortly import SharedPayload, SortDataset
from shared.utils.app_logger import get_logger
from sortly.services.compression import ZlibTextCompressor
from sortly.services.sorter import MultiKeySorter

logger = get_logger(__name__)

BASE64URL_RE = re.compile(r"^[A-Za-z0-9_-]*$")
SHARE_PATH_PREFIX = "/s/"


def to_base64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def from_base64url(token: str) -> bytes:
    if not BASE64URL_RE.match(token):
        raise ShareDecodeError("token contains characters outside the base64url alphabet", stage="base64")
    padded = token + ("=" * (-len(token) % 4))
    try:
        data = base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, ValueError) as e:
        raise ShareDecodeError(f"invalid base64url: {e}", stage="base64") from e
    # Reject non-canonical encodings (stray bits in the final character)
    if to_base64url(data) != token:
        raise ShareDecodeError("non-canonical base64url token", stage="base64")
    return data


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def build_share_url(token: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}{SHARE_PATH_PREFIX}{token}"


class ShareCodec:
    """
    Encodes JSON-compatible payloads into URL-path-safe tokens.

    encode/decode are coroutines because the injected compressor may suspend.
    """

    def __init__(self, compressor: Optional[TextCompressor] = None):
        self.compressor = compressor or ZlibTextCompressor()

    @staticmethod
    def serialize(payload: Any) -> str:
        """Canonical compact JSON; key order preserved, non-ASCII kept as-is"""
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)

    async def encode(self, payload: Any) -> str:
        """Encode any JSON-serialisable payload into a compact URL-safe string"""
        utf8 = self.serialize(payload).encode("utf-8")
        compressed = await self.compressor.deflate(utf8)
        token = to_base64url(compressed)
        logger.debug(f"Encoded {len(utf8)} bytes of JSON into a {len(token)} char token")
        return token

    async def decode(self, token: str) -> Any:
        """
        Decode a token produced by `encode`.

        Raises:
            ShareDecodeError: on any failure; there is no partial result
        """
        compressed = from_base64url(token)

        try:
            utf8 = await self.compressor.inflate(compressed)
        except ValueError as e:
            raise ShareDecodeError(str(e), stage="inflate") from e

        try:
            text = utf8.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ShareDecodeError(f"invalid UTF-8: {e}", stage="utf8") from e

        try:
            return json.loads(text, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            raise ShareDecodeError(f"invalid JSON: {e}", stage="json") from e

    async def encode_dataset(self, dataset: Union[SortDataset, SharedPayload]) -> str:
        """Sort the dataset's rows by its rules and encode the shareable part"""
        payload = SharedPayload(
            columns=list(dataset.columns),
            rows=MultiKeySorter.sort_rows(dataset.rows, dataset.sort_rules),
            sort_rules=list(dataset.sort_rules),
            label=dataset.label or None,
        )
        return await self.encode(payload.to_payload())

    async def decode_shared_dataset(self, token: str) -> SharedPayload:
        """Decode and validate a share token; `columns` and `rows` are required"""
        decoded = await self.decode(token)
        if not isinstance(decoded, dict):
            raise ShareDecodeError("payload is not an object", stage="validate")
        missing = [field for field in ("columns", "rows") if not isinstance(decoded.get(field), list)]
        if missing:
            raise ShareDecodeError(f"missing required fields: {', '.join(missing)}", stage="validate")
        try:
            return SharedPayload.model_validate(decoded)
        except ValidationError as e:
            raise ShareDecodeError(f"invalid payload: {e.error_count()} validation errors", stage="validate") from e
