"""Serialization of measurement models to JSON, YAML and NDJSON."""

from nodefacts.core.encoding.json_codec import (
    decode_measurement_json,
    decode_reading_json,
    decode_snapshot_json,
    decode_subtype_json,
    encode_json,
    encode_reading_json,
)
from nodefacts.core.encoding.ndjson import decode_measurements, encode_measurements
from nodefacts.core.encoding.yaml_codec import (
    decode_measurement_yaml,
    decode_reading_yaml,
    decode_snapshot_yaml,
    decode_subtype_yaml,
    encode_reading_yaml,
    encode_yaml,
)

__all__ = [
    "decode_measurement_json",
    "decode_measurement_yaml",
    "decode_measurements",
    "decode_reading_json",
    "decode_reading_yaml",
    "decode_snapshot_json",
    "decode_snapshot_yaml",
    "decode_subtype_json",
    "decode_subtype_yaml",
    "encode_json",
    "encode_measurements",
    "encode_reading_json",
    "encode_reading_yaml",
    "encode_yaml",
]
