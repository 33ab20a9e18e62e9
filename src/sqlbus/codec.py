"""
Payload codecs: bytes <-> text stored in the `msg` column.
"""

import base64
import binascii
from typing import Protocol

from sqlbus.errors import DecodeError


class Codec(Protocol):
    """Protocol for payload codecs."""

    def encode(self, data: bytes) -> str:
        """Encode a payload to text that can be stored in a TEXT column."""

    def decode(self, text: str) -> bytes:
        """Decode stored text back to the payload. Raises DecodeError on bad input."""


class Base64Codec:
    """Default codec: standard base64 with ASCII output."""

    def encode(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")

    def decode(self, text: str) -> bytes:
        try:
            return base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"invalid base64 payload: {e}") from e
