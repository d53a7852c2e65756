"""JSON encoding used by the structured log formatter."""

from typing import Any

from msgspec.json import Encoder

__all__ = ("encode_json",)

_encoder = Encoder(enc_hook=repr)


def encode_json(data: Any) -> str:
    """Encode ``data`` to a JSON string, falling back to ``repr`` for unknown types."""
    return _encoder.encode(data).decode("utf-8")
