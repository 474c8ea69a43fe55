"""JSON encoding for readings, measurements and snapshots.

Decoding untyped data is lossy for integer kinds: the wire carries no kind
tag, so int64, uint and uint64 readings come back as int readings (uint64
only above the int64 range). Use decode_reading_json() with an explicit kind
when the kind matters.
"""

import json
from typing import Any

from nodefacts.core.encoding.native import (
    Encodable,
    measurement_from_dict,
    reading_from_native,
    snapshot_from_dict,
    subtype_from_dict,
    to_native,
)
from nodefacts.core.errors import DecodeError
from nodefacts.core.models import Measurement, Reading, ReadingKind, Subtype
from nodefacts.core.snapshot import Snapshot


def _loads(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc


def encode_json(obj: Encodable, indent: int | None = 2) -> str:
    """Encode a model object to a JSON string.

    Args:
        obj: Reading, Subtype, Measurement or Snapshot.
        indent: Indentation width; None produces compact single-line output.

    Returns:
        JSON text. Readings appear as bare scalars.
    """
    separators = (",", ":") if indent is None else None
    return json.dumps(
        to_native(obj), indent=indent, separators=separators, ensure_ascii=False
    )


def encode_reading_json(reading: Reading) -> str:
    """Encode a single reading as its bare JSON scalar (42, "text", true)."""
    return json.dumps(reading.any(), ensure_ascii=False)


def decode_reading_json(text: str | bytes, kind: ReadingKind | None = None) -> Reading:
    """Decode a bare JSON scalar into a Reading.

    Args:
        text: JSON text holding one scalar.
        kind: Kind to decode into; inferred when None.

    Raises:
        DecodeError: On invalid JSON or a scalar that does not fit kind.
    """
    return reading_from_native(_loads(text), kind)


def decode_subtype_json(text: str | bytes) -> Subtype:
    """Decode a JSON subtype document.

    Raises:
        DecodeError: On invalid JSON or an unexpected document shape.
    """
    return subtype_from_dict(_loads(text))


def decode_measurement_json(text: str | bytes) -> Measurement:
    """Decode a JSON measurement document.

    Raises:
        DecodeError: On invalid JSON or an unexpected document shape.
    """
    return measurement_from_dict(_loads(text))


def decode_snapshot_json(text: str | bytes) -> Snapshot:
    """Decode a JSON snapshot document.

    Raises:
        DecodeError: On invalid JSON or an unexpected document shape.
    """
    return snapshot_from_dict(_loads(text))
