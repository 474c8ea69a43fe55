"""Conversion between model objects and plain Python trees.

The plain trees (dicts, lists and scalars) are what the JSON, YAML and NDJSON
codecs serialize. Readings appear as their bare scalar value; there is no
kind tag on the wire, so decoding infers kinds with to_reading().

Wire shape of a measurement:

    type: <string>
    subtypes:                # omitted when empty
      - subtype: <string>    # omitted when empty
        data: {<key>: <scalar>}
        context: {<key>: <string>}   # omitted when empty; scalars decode as str
"""

from collections.abc import Mapping
from typing import Any

from nodefacts.core.errors import DecodeError
from nodefacts.core.models import (
    Measurement,
    Reading,
    ReadingKind,
    Subtype,
    to_reading,
    to_reading_with_type,
)
from nodefacts.core.snapshot import Snapshot
from nodefacts.log import get_logger

logger = get_logger(__name__)

Encodable = Measurement | Subtype | Snapshot | Reading


def subtype_to_dict(subtype: Subtype) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if subtype.name:
        result["subtype"] = subtype.name
    result["data"] = {key: reading.any() for key, reading in subtype.data.items()}
    if subtype.context:
        result["context"] = dict(subtype.context)
    return result


def measurement_to_dict(measurement: Measurement) -> dict[str, Any]:
    result: dict[str, Any] = {"type": str(measurement.type)}
    if measurement.subtypes:
        result["subtypes"] = [subtype_to_dict(st) for st in measurement.subtypes]
    return result


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if snapshot.kind:
        result["kind"] = snapshot.kind
    if snapshot.api_version:
        result["apiVersion"] = snapshot.api_version
    if snapshot.metadata:
        result["metadata"] = dict(snapshot.metadata)
    result["measurements"] = [measurement_to_dict(m) for m in snapshot.measurements]
    return result


def to_native(obj: Encodable) -> Any:
    """Convert any model object to its plain tree.

    Raises:
        TypeError: If obj is not a model object.
    """
    if isinstance(obj, Reading):
        return obj.any()
    if isinstance(obj, Subtype):
        return subtype_to_dict(obj)
    if isinstance(obj, Measurement):
        return measurement_to_dict(obj)
    if isinstance(obj, Snapshot):
        return snapshot_to_dict(obj)
    raise TypeError(f"cannot encode {type(obj).__name__}")


def reading_from_native(value: object, kind: ReadingKind | None = None) -> Reading:
    """Build a Reading from a decoded scalar.

    Args:
        value: Decoded JSON or YAML value.
        kind: Kind to coerce into. When None the kind is inferred and values
            of unsupported types fall back to their string form.

    Raises:
        DecodeError: If kind is given and value does not fit it.
    """
    if kind is None:
        reading, exact = to_reading_with_type(value)
        if not exact:
            logger.debug("decoded %s value as string", type(value).__name__)
        return reading
    try:
        return Reading.coerce(value, kind)
    except (TypeError, ValueError) as exc:
        raise DecodeError(
            f"cannot decode {value!r} as {kind} reading: {exc}",
            {"kind": kind.value},
        ) from exc


def _mapping(value: object, what: str) -> Mapping[Any, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DecodeError(f"{what} must be a mapping, got {type(value).__name__}")
    return value


def _string(value: object, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{what} must be a string, got {type(value).__name__}")
    return value


def _scalar_string(value: object, what: str) -> str:
    """Stringify a map entry; non-string scalars use the Reading rendering."""
    if value is None or isinstance(value, str):
        return _string(value, what)
    if isinstance(value, bool | int | float):
        return str(to_reading(value))
    raise DecodeError(f"{what} must be a scalar, got {type(value).__name__}")


def _string_map(value: object, what: str) -> dict[str, str]:
    return {
        str(key): _scalar_string(item, f"{what}[{key!r}]")
        for key, item in _mapping(value, what).items()
    }


def _list(value: object, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"{what} must be a list, got {type(value).__name__}")
    return value


def subtype_from_dict(data: object) -> Subtype:
    """Decode a subtype tree. Missing name, data or context become empty.

    Raises:
        DecodeError: If the tree does not have the subtype shape.
    """
    tree = _mapping(data, "subtype")
    readings = _mapping(tree.get("data"), "data")
    return Subtype(
        name=_string(tree.get("subtype"), "subtype name"),
        data={str(key): reading_from_native(value) for key, value in readings.items()},
        context=_string_map(tree.get("context"), "context"),
    )


def measurement_from_dict(data: object) -> Measurement:
    """Decode a measurement tree.

    Raises:
        DecodeError: If the tree does not have the measurement shape.
    """
    tree = _mapping(data, "measurement")
    subtypes = _list(tree.get("subtypes"), "subtypes")
    return Measurement(
        type=_string(tree.get("type"), "measurement type"),
        subtypes=[subtype_from_dict(item) for item in subtypes],
    )


def snapshot_from_dict(data: object) -> Snapshot:
    """Decode a snapshot tree.

    Raises:
        DecodeError: If the tree does not have the snapshot shape.
    """
    tree = _mapping(data, "snapshot")
    measurements = _list(tree.get("measurements"), "measurements")
    return Snapshot(
        kind=_string(tree.get("kind"), "kind"),
        api_version=_string(tree.get("apiVersion"), "apiVersion"),
        metadata=_string_map(tree.get("metadata"), "metadata"),
        measurements=[measurement_from_dict(item) for item in measurements],
    )
