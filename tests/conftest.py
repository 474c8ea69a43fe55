"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from pathlib import Path

import pytest

from nodefacts.core.builder import new_measurement, new_subtype_builder
from nodefacts.core.models import Measurement, MeasurementType, Reading, Subtype


@pytest.fixture
def cluster_subtype() -> Subtype:
    """Provide a K8s cluster subtype with mixed reading kinds."""
    return Subtype(
        name="cluster",
        data={
            "version": Reading.of_str("1.28.0"),
            "nodes": Reading.of_int(3),
            "ready": Reading.of_bool(True),
        },
    )


@pytest.fixture
def k8s_measurement(cluster_subtype: Subtype) -> Measurement:
    """Provide a K8s measurement with cluster and node subtypes."""
    return Measurement(
        type=MeasurementType.K8S,
        subtypes=[
            cluster_subtype,
            Subtype(name="node", data={"pods": Reading.of_int64(110)}),
        ],
    )


@pytest.fixture
def gpu_measurement() -> Measurement:
    """Provide a GPU measurement holding every reading kind."""
    return (
        new_measurement(MeasurementType.GPU)
        .with_subtype_builder(
            new_subtype_builder("gpu-0")
            .set_string("model", "H100")
            .set_int("gpu-count", 8)
            .set_int64("memory", 81559)
            .set_uint("power", 700)
            .set_uint64("serial", 2**64 - 1)
            .set_float64("temperature", 41.5)
            .set_bool("persistence", True)
            .set_context("source", "nvidia-smi")
        )
        .build()
    )


@pytest.fixture
def measurement_factory() -> Callable[..., Measurement]:
    """Factory fixture building a measurement from plain dicts.

    Usage:
        def test_something(measurement_factory):
            m = measurement_factory("K8s", cluster={"nodes": Reading.of_int(3)})
    """

    def _factory(
        measurement_type: MeasurementType | str, **subtypes: dict[str, Reading]
    ) -> Measurement:
        builder = new_measurement(measurement_type)
        for name, data in subtypes.items():
            subtype_builder = new_subtype_builder(name)
            for key, reading in data.items():
                subtype_builder.set(key, reading)
            builder.with_subtype_builder(subtype_builder)
        return builder.build()

    return _factory


@pytest.fixture
def policy_path(tmp_path: Path) -> Path:
    """Provide a temporary path for redaction policy files."""
    return tmp_path / "redaction.yaml"
