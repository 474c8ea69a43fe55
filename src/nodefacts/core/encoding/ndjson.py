"""NDJSON encoder for measurement streams."""

import json
from collections.abc import Iterable

from nodefacts.core.encoding.native import measurement_from_dict, measurement_to_dict
from nodefacts.core.errors import DecodeError
from nodefacts.core.models import Measurement


def encode_measurements(measurements: Iterable[Measurement]) -> str:
    """Encode measurements to newline-delimited JSON.

    Args:
        measurements: An iterable of Measurement objects.

    Returns:
        NDJSON string with one compact JSON object per line.
        Empty string if no measurements.
    """
    lines = [
        json.dumps(
            measurement_to_dict(measurement),
            separators=(",", ":"),
            ensure_ascii=False,
        )
        for measurement in measurements
    ]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"


def decode_measurements(text: str) -> list[Measurement]:
    """Decode newline-delimited JSON into measurements.

    Blank lines are skipped.

    Args:
        text: NDJSON produced by encode_measurements() or a compatible writer.

    Returns:
        Measurements in line order.

    Raises:
        DecodeError: If a line is not valid JSON or not a measurement object.
            The message names the 1-based line number.
    """
    measurements: list[Measurement] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            tree = json.loads(line)
        except ValueError as exc:
            raise DecodeError(
                f"line {lineno}: invalid JSON: {exc}", {"line": lineno}
            ) from exc
        try:
            measurements.append(measurement_from_dict(tree))
        except DecodeError as exc:
            raise DecodeError(
                f"line {lineno}: {exc.message}", {"line": lineno, **exc.context}
            ) from exc
    return measurements
