"""Structural diff between measurements.

The diff is one-directional: it reports what is new or changed in the newer
measurement. Keys or subtypes that only exist in the older one are not
reported.
"""

from nodefacts.core.errors import IncompatibleTypesError
from nodefacts.core.models import Measurement, Reading, Subtype
from nodefacts.core.snapshot import Snapshot
from nodefacts.log import get_logger

logger = get_logger(__name__)


def compare(old: Measurement, new: Measurement) -> list[Subtype]:
    """Compare two measurements of the same type.

    A subtype of new whose name does not appear in old is returned in full.
    For subtypes present in both, only the keys that are missing from old or
    whose reading differs are returned. Readings differ when their kinds
    differ, even if the printed values are the same.

    Old subtypes are indexed by name; when names repeat, the first one wins.

    Args:
        old: The baseline measurement.
        new: The measurement to check for changes.

    Returns:
        Fresh Subtype objects in new's order; empty when nothing changed.

    Raises:
        IncompatibleTypesError: If the measurement types differ.
    """
    if old.type != new.type:
        raise IncompatibleTypesError(
            "cannot compare different measurement types: "
            f"{str(old.type)!r} ({len(old.subtypes)} subtypes) vs "
            f"{str(new.type)!r} ({len(new.subtypes)} subtypes)",
            {"old_type": str(old.type), "new_type": str(new.type)},
        )

    old_by_name: dict[str, Subtype] = {}
    for subtype in old.subtypes:
        old_by_name.setdefault(subtype.name, subtype)

    diffs: list[Subtype] = []
    for new_subtype in new.subtypes:
        old_subtype = old_by_name.get(new_subtype.name)
        if old_subtype is None:
            diffs.append(new_subtype.copy())
            continue

        diff_data = _changed_readings(old_subtype.data, new_subtype.data)
        if diff_data:
            diffs.append(Subtype(name=new_subtype.name, data=diff_data))

    logger.debug(
        "compared %s measurements: %d of %d subtypes changed",
        new.type,
        len(diffs),
        len(new.subtypes),
    )
    return diffs


def _changed_readings(
    old: dict[str, Reading], new: dict[str, Reading]
) -> dict[str, Reading]:
    changed: dict[str, Reading] = {}
    for key, new_value in new.items():
        old_value = old.get(key)
        if old_value is None or old_value != new_value:
            changed[key] = new_value
    return changed


def compare_snapshots(old: Snapshot, new: Snapshot) -> dict[str, list[Subtype]]:
    """Compare every measurement of new against old, by measurement type.

    For each measurement type in new, the first measurement of that type is
    compared with the first measurement of the same type in old. When old has
    no measurement of that type, all of its subtypes are reported.

    Args:
        old: The baseline snapshot.
        new: The snapshot to check for drift.

    Returns:
        Mapping of measurement type to diff subtypes. Types without changes
        are omitted.
    """
    drift: dict[str, list[Subtype]] = {}
    seen: set[str] = set()
    for measurement in new.measurements:
        type_name = str(measurement.type)
        if type_name in seen:
            continue
        seen.add(type_name)
        baseline = old.get_measurement(measurement.type)
        if baseline is None:
            diffs = [subtype.copy() for subtype in measurement.subtypes]
        else:
            diffs = compare(baseline, measurement)
        if diffs:
            drift[type_name] = diffs
    return drift
