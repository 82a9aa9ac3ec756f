"""JSON encoding and decoding backed by msgspec."""

from typing import Any, Literal, overload

import msgspec

from rowspec.exceptions import SerializationError

__all__ = ("decode_json", "encode_json")


def _default_enc_hook(value: Any) -> Any:
    """Fallback encoder for values msgspec cannot encode natively.

    Args:
        value: The unsupported value.

    Returns:
        The text representation of the value.
    """
    return str(value)


_encoder = msgspec.json.Encoder(enc_hook=_default_enc_hook)
_decoder = msgspec.json.Decoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> "str | bytes":
    try:
        encoded = _encoder.encode(data)
    except (TypeError, ValueError, msgspec.EncodeError) as exc:
        msg = f"Unable to encode value of type {type(data).__name__} as JSON"
        raise SerializationError(msg) from exc
    return encoded if as_bytes else encoded.decode("utf-8")


def decode_json(data: "str | bytes", *, decode_bytes: bool = True) -> Any:
    if isinstance(data, bytes) and not decode_bytes:
        return data
    try:
        return _decoder.decode(data)
    except msgspec.DecodeError as exc:
        msg = "Unable to decode JSON payload"
        raise SerializationError(msg) from exc
