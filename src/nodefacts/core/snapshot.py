"""Snapshots: a header plus the measurements of one collection cycle."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from nodefacts.config import RedactionPolicy
from nodefacts.core.errors import ValidationError
from nodefacts.core.models import Measurement, MeasurementType
from nodefacts.core.ports import CollectorPort
from nodefacts.log import get_logger

logger = get_logger(__name__)

SNAPSHOT_KIND = "Snapshot"
DEFAULT_API_VERSION = "nodefacts.dev/v1alpha1"

METADATA_TIMESTAMP = "timestamp"
METADATA_VERSION = "version"


@dataclass
class Snapshot:
    """Measurements collected from one node in one cycle.

    Attributes:
        kind: Resource kind, "Snapshot" by default.
        api_version: Schema version of the document.
        metadata: Free-form header entries (timestamp, tool version).
        measurements: Collected measurements, in collection order.
    """

    kind: str = SNAPSHOT_KIND
    api_version: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    measurements: list[Measurement] = field(default_factory=list)

    def init_header(self, api_version: str, version: str = "") -> None:
        """Reset the header for a new snapshot.

        Sets kind and api_version and replaces metadata with the current UTC
        timestamp (RFC 3339, second precision) and, when given, the version.
        """
        self.kind = SNAPSHOT_KIND
        self.api_version = api_version
        now = datetime.now(UTC)
        self.metadata = {METADATA_TIMESTAMP: now.strftime("%Y-%m-%dT%H:%M:%SZ")}
        if version:
            self.metadata[METADATA_VERSION] = version

    def get_measurement(
        self, measurement_type: MeasurementType | str
    ) -> Measurement | None:
        """Return the first measurement of the given type, or None."""
        for measurement in self.measurements:
            if measurement.type == measurement_type:
                return measurement
        return None


def take_snapshot(
    collectors: Iterable[CollectorPort],
    *,
    policy: RedactionPolicy | None = None,
    api_version: str = DEFAULT_API_VERSION,
    version: str = "",
    strict: bool = False,
) -> Snapshot:
    """Run collectors in order and assemble their measurements into a Snapshot.

    Each measurement is redacted with the policy and then validated. Errors
    raised by collectors propagate unchanged.

    Args:
        collectors: Objects satisfying CollectorPort.
        policy: Redaction applied to every measurement; None skips redaction.
        api_version: Header API version.
        version: Tool version recorded in the header metadata.
        strict: Raise on the first invalid measurement instead of skipping it.

    Returns:
        Snapshot with an initialized header.

    Raises:
        ValidationError: If strict is set and a measurement is invalid.
    """
    snapshot = Snapshot()
    snapshot.init_header(api_version, version)

    for collector in collectors:
        measurement = collector.collect()
        if policy is not None:
            measurement = policy.apply(measurement)
        try:
            measurement.validate()
        except ValidationError as exc:
            if strict:
                raise
            logger.warning(
                "skipping invalid %s measurement from %s: %s",
                measurement.type or "<untyped>",
                type(collector).__name__,
                exc,
            )
            continue
        snapshot.measurements.append(measurement)

    logger.debug("snapshot holds %d measurements", len(snapshot.measurements))
    return snapshot
