"""BDD step definitions for drift detection and redaction features."""

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from nodefacts.config import DEFAULT_REDACTION_POLICY, RedactionPolicy
from nodefacts.core.diff import compare
from nodefacts.core.errors import IncompatibleTypesError
from nodefacts.core.models import Measurement, Reading, Subtype

INTEGER_KINDS: dict[str, Callable[[int], Reading]] = {
    "int": Reading.of_int,
    "int64": Reading.of_int64,
    "uint": Reading.of_uint,
    "uint64": Reading.of_uint64,
}


@dataclass
class DriftScenarioContext:
    """Shared state for a single drift or redaction scenario."""

    old_type: str = "K8s"
    new_type: str = "K8s"
    old: dict[str, dict[str, Reading]] = field(default_factory=dict)
    new: dict[str, dict[str, Reading]] = field(default_factory=dict)
    diffs: list[Subtype] = field(default_factory=list)
    error: IncompatibleTypesError | None = None
    measurement: Measurement | None = None
    include: dict[str, list[str]] = field(default_factory=dict)
    exclude: dict[str, list[str]] = field(default_factory=dict)
    redacted: Measurement | None = None

    def side(self, which: str) -> dict[str, dict[str, Reading]]:
        return self.old if which == "old" else self.new

    def build(self, which: str) -> Measurement:
        measurement_type = self.old_type if which == "old" else self.new_type
        return Measurement(
            type=measurement_type,
            subtypes=[
                Subtype(name=name, data=dict(data))
                for name, data in self.side(which).items()
            ],
        )

    def diff_for(self, name: str) -> Subtype:
        for subtype in self.diffs:
            if subtype.name == name:
                return subtype
        raise AssertionError(f"no diff reported for {name!r}: {self.diffs}")


def _split(keys: str) -> list[str]:
    return [key.strip() for key in keys.split(",") if key.strip()]


@pytest.fixture
def ctx() -> DriftScenarioContext:
    """Fresh scenario context for each test."""
    return DriftScenarioContext()


# === Drift: Given ===
@given(parsers.parse('the {which} measurement type is "{measurement_type}"'))
def step_measurement_type(
    ctx: DriftScenarioContext, which: str, measurement_type: str
) -> None:
    if which == "old":
        ctx.old_type = measurement_type
    else:
        ctx.new_type = measurement_type


@given(parsers.parse('the {which} subtype "{name}" has string "{key}" = "{value}"'))
def step_string_reading(
    ctx: DriftScenarioContext, which: str, name: str, key: str, value: str
) -> None:
    ctx.side(which).setdefault(name, {})[key] = Reading.of_str(value)


@given(parsers.parse('the {which} subtype "{name}" has {kind:w} "{key}" = {value:d}'))
def step_integer_reading(
    ctx: DriftScenarioContext, which: str, name: str, kind: str, key: str, value: int
) -> None:
    ctx.side(which).setdefault(name, {})[key] = INTEGER_KINDS[kind](value)


# === Drift: When ===
@when("the measurements are compared")
def step_compare(ctx: DriftScenarioContext) -> None:
    try:
        ctx.diffs = compare(ctx.build("old"), ctx.build("new"))
    except IncompatibleTypesError as exc:
        ctx.error = exc


# === Drift: Then ===
@then(parsers.parse("{count:d} subtype is reported"))
@then(parsers.parse("{count:d} subtypes are reported"))
def step_diff_count(ctx: DriftScenarioContext, count: int) -> None:
    assert ctx.error is None
    assert len(ctx.diffs) == count


@then(parsers.parse('the diff for "{name}" has string "{key}" = "{value}"'))
def step_diff_string(
    ctx: DriftScenarioContext, name: str, key: str, value: str
) -> None:
    assert ctx.diff_for(name).data[key] == Reading.of_str(value)


@then(parsers.parse('the diff for "{name}" has {kind:w} "{key}" = {value:d}'))
def step_diff_integer(
    ctx: DriftScenarioContext, name: str, kind: str, key: str, value: int
) -> None:
    assert ctx.diff_for(name).data[key] == INTEGER_KINDS[kind](value)


@then(parsers.parse('the diff for "{name}" does not contain "{key}"'))
def step_diff_missing_key(ctx: DriftScenarioContext, name: str, key: str) -> None:
    assert not ctx.diff_for(name).has(key)


@then(parsers.parse('the comparison fails with "{message}"'))
def step_compare_fails(ctx: DriftScenarioContext, message: str) -> None:
    assert ctx.error is not None
    assert message in str(ctx.error)


# === Redaction: Given ===
@given(parsers.parse('a "{measurement_type}" subtype "{name}" with keys "{keys}"'))
def step_subtype_with_keys(
    ctx: DriftScenarioContext, measurement_type: str, name: str, keys: str
) -> None:
    ctx.measurement = Measurement(
        type=measurement_type,
        subtypes=[
            Subtype(
                name=name,
                data={key: Reading.of_str(f"{key}-value") for key in _split(keys)},
            )
        ],
    )


@given(parsers.parse('a policy including "{patterns}" for "{measurement_type}"'))
def step_policy_include(
    ctx: DriftScenarioContext, patterns: str, measurement_type: str
) -> None:
    ctx.include[measurement_type] = _split(patterns)


@given(parsers.parse('the policy excludes "{patterns}" for every type'))
def step_policy_exclude_all(ctx: DriftScenarioContext, patterns: str) -> None:
    ctx.exclude["*"] = _split(patterns)


# === Redaction: When ===
@when("the default redaction policy is applied")
def step_apply_default_policy(ctx: DriftScenarioContext) -> None:
    assert ctx.measurement is not None
    ctx.redacted = DEFAULT_REDACTION_POLICY.apply(ctx.measurement)


@when("the policy is applied")
def step_apply_policy(ctx: DriftScenarioContext) -> None:
    assert ctx.measurement is not None
    policy = RedactionPolicy.from_dict({"include": ctx.include, "exclude": ctx.exclude})
    ctx.redacted = policy.apply(ctx.measurement)


# === Redaction: Then ===
@then(parsers.parse('the subtype keeps keys "{keys}"'))
def step_keeps_keys(ctx: DriftScenarioContext, keys: str) -> None:
    assert ctx.redacted is not None
    assert ctx.redacted.subtypes[0].keys() == _split(keys)
