from typing import Any, Dict

import orjson

from .errors import DecodeError, EncodeError


def loads(blob) -> Any:
    try:
        return orjson.loads(blob)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"invalid JSON: {e}") from e


def load_object(blob) -> Dict[str, Any]:
    """Parse *blob* and require a JSON object at the top level."""
    obj = loads(blob)
    if not isinstance(obj, dict):
        raise DecodeError(f"expected JSON object, got {type(obj).__name__}")
    return obj


def dumps(o) -> bytes:
    try:
        return orjson.dumps(o)
    except orjson.JSONEncodeError as e:
        raise EncodeError(f"cannot serialise: {e}") from e
