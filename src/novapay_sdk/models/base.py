"""
Base class for NovaPay request/response data classes

Fields set to ``None`` are left out of the JSON body. The JSON key defaults to
the field name and can be overridden with ``field(metadata={'json': ...})``.
Field order is declaration order, which keeps encoded bodies stable.
"""

import dataclasses
import typing
from typing import Any, Dict, Type, TypeVar, Union

from ..exceptions import ValidationError

M = TypeVar('M', bound='Model')

_NoneType = type(None)


def json_field(name: str, **kwargs) -> Any:
    """Dataclass field serialized under a custom JSON key."""
    metadata = dict(kwargs.pop('metadata', {}) or {})
    metadata['json'] = name
    return dataclasses.field(metadata=metadata, **kwargs)


def _json_name(f: dataclasses.Field) -> str:
    return f.metadata.get('json', f.name)


def _dump(value: Any) -> Any:
    if isinstance(value, Model):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return value


def convert(tp: Any, value: Any) -> Any:
    """
    Build a value of type ``tp`` from decoded JSON.

    Supports Model subclasses, ``Optional``, ``List``, ``Dict`` and plain JSON
    types. ``Any`` passes the value through.

    Raises:
        TypeError: If the JSON value does not match the expected shape
    """
    if tp is Any or tp is object:
        return value

    origin = typing.get_origin(tp)
    if origin is Union:
        args = typing.get_args(tp)
        if value is None and _NoneType in args:
            return None
        inner = [a for a in args if a is not _NoneType]
        if len(inner) == 1:
            return convert(inner[0], value)
        return value

    if origin in (list, typing.List):
        if not isinstance(value, list):
            raise TypeError(f"expected JSON array, got {type(value).__name__}")
        (item_type,) = typing.get_args(tp) or (Any,)
        return [convert(item_type, v) for v in value]

    if origin in (dict, typing.Dict):
        if not isinstance(value, dict):
            raise TypeError(f"expected JSON object, got {type(value).__name__}")
        return dict(value)

    if isinstance(tp, type) and issubclass(tp, Model):
        return tp.from_dict(value)

    if tp is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if isinstance(tp, type) and tp in (str, int, float, bool, dict, list):
        if not isinstance(value, tp) or (tp is int and isinstance(value, bool)):
            raise TypeError(f"expected {tp.__name__}, got {type(value).__name__}")
        return value
    return value


@dataclasses.dataclass
class Model:
    """Base for JSON data classes"""

    def to_dict(self) -> Dict[str, Any]:
        """JSON object for this model, without ``None`` fields."""
        out: Dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[_json_name(f)] = _dump(value)
        return out

    @classmethod
    def from_dict(cls: Type[M], data: Any) -> M:
        """
        Build the model from a decoded JSON object. Unknown keys are ignored.

        Raises:
            TypeError: If ``data`` is not an object or a field has the wrong shape
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected JSON object for {cls.__name__}, got {type(data).__name__}")
        hints = typing.get_type_hints(cls)
        kwargs = {}
        for f in dataclasses.fields(cls):
            key = _json_name(f)
            if key not in data:
                continue
            kwargs[f.name] = convert(hints.get(f.name, Any), data[key])
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise TypeError(f"{cls.__name__}: {e}") from e


def require(ve: ValidationError, name: str, value: Any) -> None:
    """Record ``name`` as missing when ``value`` is empty."""
    if not value:
        ve.add(name, "is required")


def require_positive(ve: ValidationError, name: str, value: Any) -> None:
    if value is None or value <= 0:
        ve.add(name, "must be > 0")


def raise_if_invalid(ve: ValidationError) -> None:
    if ve.has_errors():
        raise ve
