"""Fluent builders for Subtype and Measurement objects.

Example:
    ```python
    measurement = (
        new_measurement(MeasurementType.K8S)
        .with_subtype_builder(
            new_subtype_builder("cluster")
            .set_string("version", "1.28.0")
            .set_int("nodes", 3)
        )
        .build()
    )
    ```

Builders are not safe for concurrent use.
"""

from nodefacts.core.models import Measurement, MeasurementType, Reading, Subtype


class SubtypeBuilder:
    """Chainable builder for a single Subtype.

    Setting a key that already exists overwrites its reading.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._data: dict[str, Reading] = {}
        self._context: dict[str, str] = {}

    def set(self, key: str, value: Reading) -> "SubtypeBuilder":
        """Add or replace a reading."""
        self._data[key] = value
        return self

    def set_string(self, key: str, value: str) -> "SubtypeBuilder":
        return self.set(key, Reading.of_str(value))

    def set_int(self, key: str, value: int) -> "SubtypeBuilder":
        return self.set(key, Reading.of_int(value))

    def set_int64(self, key: str, value: int) -> "SubtypeBuilder":
        return self.set(key, Reading.of_int64(value))

    def set_uint(self, key: str, value: int) -> "SubtypeBuilder":
        return self.set(key, Reading.of_uint(value))

    def set_uint64(self, key: str, value: int) -> "SubtypeBuilder":
        return self.set(key, Reading.of_uint64(value))

    def set_float64(self, key: str, value: float) -> "SubtypeBuilder":
        return self.set(key, Reading.of_float64(value))

    def set_bool(self, key: str, value: bool) -> "SubtypeBuilder":
        return self.set(key, Reading.of_bool(value))

    def set_context(self, key: str, value: str) -> "SubtypeBuilder":
        """Add or replace a descriptive context entry."""
        self._context[key] = value
        return self

    def build(self) -> Subtype:
        """Return a Subtype snapshot of the current builder state.

        The builder keeps working after build(); later calls do not change
        subtypes that were already built.
        """
        return Subtype(
            name=self._name, data=dict(self._data), context=dict(self._context)
        )


class MeasurementBuilder:
    """Chainable builder for a Measurement.

    Subtypes are kept in the order they are added. Subtypes sharing a name
    are not de-duplicated.
    """

    def __init__(self, measurement_type: MeasurementType | str) -> None:
        self._type = measurement_type
        self._subtypes: list[Subtype] = []

    def with_subtype(self, subtype: Subtype) -> "MeasurementBuilder":
        self._subtypes.append(subtype)
        return self

    def with_subtype_builder(self, builder: SubtypeBuilder) -> "MeasurementBuilder":
        """Build the subtype builder and add the result."""
        self._subtypes.append(builder.build())
        return self

    def build(self) -> Measurement:
        return Measurement(type=self._type, subtypes=list(self._subtypes))


def new_subtype_builder(name: str) -> SubtypeBuilder:
    """Create a SubtypeBuilder.

    Args:
        name: Subtype name (e.g., "cluster", "gpu-0"); may be empty.

    Returns:
        A builder with no readings.
    """
    return SubtypeBuilder(name)


def new_measurement(measurement_type: MeasurementType | str) -> MeasurementBuilder:
    """Create a MeasurementBuilder.

    Args:
        measurement_type: Measurement category (e.g., MeasurementType.GPU).

    Returns:
        A builder with no subtypes.
    """
    return MeasurementBuilder(measurement_type)
