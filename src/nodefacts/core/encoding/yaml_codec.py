"""YAML encoding for readings, measurements and snapshots.

Uses PyYAML's safe dumper and loader. Integer kinds collapse on untyped
decode the same way they do for JSON.
"""

from typing import Any

import yaml

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

# PyYAML closes top-level plain scalars with an explicit document end marker
_DOCUMENT_END = "...\n"


def _load(text: str | bytes) -> Any:
    try:
        return yaml.safe_load(text)
    except (yaml.YAMLError, ValueError) as exc:
        raise DecodeError(f"invalid YAML: {exc}") from exc


def _dump(tree: Any) -> str:
    text: str = yaml.safe_dump(
        tree, sort_keys=False, allow_unicode=True, default_flow_style=False
    )
    return text.removesuffix(_DOCUMENT_END)


def encode_yaml(obj: Encodable) -> str:
    """Encode a model object to a YAML document.

    Args:
        obj: Reading, Subtype, Measurement or Snapshot.

    Returns:
        YAML text with keys in wire order. Readings appear as bare scalars.
    """
    return _dump(to_native(obj))


def encode_reading_yaml(reading: Reading) -> str:
    """Encode a single reading as a bare YAML scalar document."""
    return _dump(reading.any())


def decode_reading_yaml(text: str | bytes, kind: ReadingKind | None = None) -> Reading:
    """Decode a bare YAML scalar into a Reading.

    Args:
        text: YAML text holding one scalar.
        kind: Kind to decode into; inferred when None.

    Raises:
        DecodeError: On invalid YAML or a scalar that does not fit kind.
    """
    return reading_from_native(_load(text), kind)


def decode_subtype_yaml(text: str | bytes) -> Subtype:
    """Decode a YAML subtype document.

    Raises:
        DecodeError: On invalid YAML or an unexpected document shape.
    """
    return subtype_from_dict(_load(text))


def decode_measurement_yaml(text: str | bytes) -> Measurement:
    """Decode a YAML measurement document.

    Raises:
        DecodeError: On invalid YAML or an unexpected document shape.
    """
    return measurement_from_dict(_load(text))


def decode_snapshot_yaml(text: str | bytes) -> Snapshot:
    """Decode a YAML snapshot document.

    Raises:
        DecodeError: On invalid YAML or an unexpected document shape.
    """
    return snapshot_from_dict(_load(text))
