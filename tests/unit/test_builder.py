"""Tests for the fluent Subtype and Measurement builders."""

import pytest

from nodefacts.core.builder import (
    MeasurementBuilder,
    SubtypeBuilder,
    new_measurement,
    new_subtype_builder,
)
from nodefacts.core.models import Measurement, MeasurementType, Reading, Subtype


class TestSubtypeBuilder:
    """Tests for SubtypeBuilder."""

    @pytest.mark.core
    def test_new_subtype_builder_returns_builder(self) -> None:
        """new_subtype_builder returns a SubtypeBuilder."""
        assert isinstance(new_subtype_builder("cluster"), SubtypeBuilder)

    @pytest.mark.core
    def test_build_returns_named_subtype(self) -> None:
        """build() returns a Subtype with the builder's name."""
        subtype = new_subtype_builder("cluster").build()
        assert isinstance(subtype, Subtype)
        assert subtype.name == "cluster"
        assert subtype.data == {}
        assert subtype.context == {}

    @pytest.mark.core
    def test_typed_setters_store_matching_kinds(self) -> None:
        """Each typed setter wraps its value in the matching reading kind."""
        subtype = (
            new_subtype_builder("gpu")
            .set_string("model", "H100")
            .set_int("count", 8)
            .set_int64("memory", 81559)
            .set_uint("power", 700)
            .set_uint64("serial", 12345)
            .set_float64("temperature", 41.5)
            .set_bool("persistence", True)
            .build()
        )
        assert subtype.data == {
            "model": Reading.of_str("H100"),
            "count": Reading.of_int(8),
            "memory": Reading.of_int64(81559),
            "power": Reading.of_uint(700),
            "serial": Reading.of_uint64(12345),
            "temperature": Reading.of_float64(41.5),
            "persistence": Reading.of_bool(True),
        }

    @pytest.mark.core
    def test_set_accepts_reading(self) -> None:
        """set() stores a prebuilt reading as is."""
        reading = Reading.of_int64(5)
        subtype = new_subtype_builder("x").set("k", reading).build()
        assert subtype.get("k") is reading

    @pytest.mark.core
    def test_resetting_key_overwrites(self) -> None:
        """The last call for a key wins."""
        builder = new_subtype_builder("x").set_string("k", "v1")
        subtype = builder.set_string("k", "v2").build()
        assert subtype.data["k"] == Reading.of_str("v2")
        assert len(subtype.data) == 1

    @pytest.mark.core
    def test_resetting_key_can_change_kind(self) -> None:
        """Overwriting a key may replace its kind."""
        subtype = new_subtype_builder("x").set_int("k", 1).set_bool("k", False).build()
        assert subtype.data["k"] == Reading.of_bool(False)

    @pytest.mark.core
    def test_set_context(self) -> None:
        """set_context adds descriptive metadata."""
        subtype = (
            new_subtype_builder("unit")
            .set_string("state", "active")
            .set_context("source", "systemctl")
            .build()
        )
        assert subtype.context == {"source": "systemctl"}

    @pytest.mark.core
    def test_built_subtype_is_a_snapshot(self) -> None:
        """Builder calls after build() do not change built subtypes."""
        builder = new_subtype_builder("x").set_int("a", 1)
        first = builder.build()
        builder.set_int("b", 2)
        second = builder.build()
        assert first.keys() == ["a"]
        assert sorted(second.keys()) == ["a", "b"]

    @pytest.mark.core
    def test_invalid_value_raises_at_set_time(self) -> None:
        """Typed setters validate their values immediately."""
        with pytest.raises(ValueError, match="out of range"):
            new_subtype_builder("x").set_uint("k", -1)


class TestMeasurementBuilder:
    """Tests for MeasurementBuilder."""

    @pytest.mark.core
    def test_new_measurement_returns_builder(self) -> None:
        """new_measurement returns a MeasurementBuilder."""
        assert isinstance(new_measurement(MeasurementType.OS), MeasurementBuilder)

    @pytest.mark.core
    def test_build_empty_measurement(self) -> None:
        """A builder without subtypes builds an empty measurement."""
        measurement = new_measurement(MeasurementType.OS).build()
        assert isinstance(measurement, Measurement)
        assert measurement.type is MeasurementType.OS
        assert measurement.subtypes == []

    @pytest.mark.core
    def test_with_subtype_and_subtype_builder(self) -> None:
        """Subtypes and subtype builders are added in call order."""
        prebuilt = Subtype(name="grub", data={"quiet": Reading.of_str("")})
        measurement = (
            new_measurement(MeasurementType.OS)
            .with_subtype(prebuilt)
            .with_subtype_builder(new_subtype_builder("sysctl").set_string("k", "v"))
            .build()
        )
        assert measurement.subtype_names() == ["grub", "sysctl"]
        assert measurement.subtypes[0] is prebuilt
        assert measurement.subtypes[1].get_string("k") == "v"

    @pytest.mark.core
    def test_duplicate_names_are_kept(self) -> None:
        """Subtypes sharing a name are not de-duplicated."""
        measurement = (
            new_measurement(MeasurementType.SYSTEMD)
            .with_subtype_builder(new_subtype_builder("unit").set_int("n", 1))
            .with_subtype_builder(new_subtype_builder("unit").set_int("n", 2))
            .build()
        )
        assert measurement.subtype_names() == ["unit", "unit"]
        first = measurement.get_subtype("unit")
        assert first is not None
        assert first.get_int64("n") == 1

    @pytest.mark.core
    def test_accepts_string_type(self) -> None:
        """A plain string type is normalized when it is a known value."""
        assert new_measurement("SystemD").build().type is MeasurementType.SYSTEMD

    @pytest.mark.core
    def test_built_measurement_passes_validation(self) -> None:
        """A measurement built with data validates."""
        measurement = (
            new_measurement(MeasurementType.K8S)
            .with_subtype_builder(new_subtype_builder("cluster").set_int("nodes", 3))
            .build()
        )
        measurement.validate()
