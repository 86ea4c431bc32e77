"""
Canonical JSON encoding for signed request bodies

The x-sign header is an RSA signature over the exact body bytes that go on the
wire. Bodies are therefore serialized once, in one fixed form, and the same
buffer is both signed and sent. Anything that re-renders a body (logging, dry
runs) works on a copy and never feeds back into the request.
"""

import json
from typing import Any, Optional

from .exceptions import EncodeError

_SEPARATORS = (',', ':')


def _to_plain(value: Any) -> Any:
    """Convert DTO models (anything with ``to_dict``) into plain JSON values."""
    if hasattr(value, 'to_dict') and callable(value.to_dict):
        return _to_plain(value.to_dict())
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value


def marshal(value: Any) -> bytes:
    """
    Encode a value as compact JSON without HTML escaping or trailing newline.

    Args:
        value: JSON-compatible value or DTO model

    Returns:
        bytes: Freshly allocated UTF-8 encoded JSON

    Raises:
        EncodeError: If the value is cyclic, contains NaN/Infinity or an
            unsupported type
    """
    try:
        text = json.dumps(
            _to_plain(value),
            ensure_ascii=False,
            allow_nan=False,
            separators=_SEPARATORS,
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise EncodeError(f"marshal json body: {e}", "ENCODE_ERROR") from e

    if text.endswith('\n'):
        text = text[:-1]
    return text.encode('utf-8')


def encode_body(body: Any) -> Optional[bytes]:
    """
    Prepare the request body buffer that is both signed and sent.

    Byte sequences are copied and strings are UTF-8 encoded as-is. Any other
    value is serialized with ``marshal``. ``None`` means "no body".
    """
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode('utf-8')
    return marshal(body)


def pretty_json(raw: bytes) -> Optional[str]:
    """Indented rendering of a JSON buffer, or None when it is not valid JSON."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        return None
    return json.dumps(parsed, ensure_ascii=False, indent=2)


def marshal_indent(value: Any) -> str:
    """Human readable rendering of a payload value for dry runs."""
    if value is None:
        return "<nil>"
    try:
        return json.dumps(_to_plain(value), ensure_ascii=False, indent=2)
    except (TypeError, ValueError, RecursionError) as e:
        return f"unable to marshal {type(value).__name__}: {e}"
