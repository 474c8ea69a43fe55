"""nodefacts - typed point-in-time facts about machines and clusters.

Build measurements, diff them between snapshots and redact keys by wildcard
pattern.

Example:
    ```python
    from nodefacts import MeasurementType, compare, new_measurement, new_subtype_builder

    def cluster(version):
        return (
            new_measurement(MeasurementType.K8S)
            .with_subtype_builder(
                new_subtype_builder("cluster").set_string("version", version)
            )
            .build()
        )

    compare(cluster("1.28.0"), cluster("1.29.0"))
    # [Subtype(name="cluster", data={"version": ...})]
    ```
"""

from nodefacts.config import DEFAULT_REDACTION_POLICY, RedactionPolicy
from nodefacts.core.builder import (
    MeasurementBuilder,
    SubtypeBuilder,
    new_measurement,
    new_subtype_builder,
)
from nodefacts.core.diff import compare, compare_snapshots
from nodefacts.core.errors import (
    ConfigError,
    DecodeError,
    ErrorCode,
    IncompatibleTypesError,
    KeyNotFoundError,
    MeasurementError,
    ValidationError,
    WrongTypeError,
)
from nodefacts.core.filter import filter_in, filter_out, matches_pattern
from nodefacts.core.models import (
    Measurement,
    MeasurementType,
    Reading,
    ReadingKind,
    Subtype,
    to_reading,
    to_reading_with_type,
)
from nodefacts.core.ports import CollectorPort
from nodefacts.core.snapshot import Snapshot, take_snapshot
from nodefacts.log import get_logger

__all__ = [
    "DEFAULT_REDACTION_POLICY",
    "CollectorPort",
    "ConfigError",
    "DecodeError",
    "ErrorCode",
    "IncompatibleTypesError",
    "KeyNotFoundError",
    "Measurement",
    "MeasurementBuilder",
    "MeasurementError",
    "MeasurementType",
    "Reading",
    "ReadingKind",
    "RedactionPolicy",
    "Snapshot",
    "Subtype",
    "SubtypeBuilder",
    "ValidationError",
    "WrongTypeError",
    "compare",
    "compare_snapshots",
    "filter_in",
    "filter_out",
    "get_logger",
    "matches_pattern",
    "new_measurement",
    "new_subtype_builder",
    "take_snapshot",
    "to_reading",
    "to_reading_with_type",
]
