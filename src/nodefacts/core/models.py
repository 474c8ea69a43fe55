"""Core domain models for measurement data.

A Measurement is one snapshot from one collector category. It holds an
ordered list of Subtypes, and each Subtype maps keys to Readings: immutable
scalar wrappers that keep their kind so mixed-type maps stay typed.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import cast

from nodefacts.core.errors import (
    IncompatibleTypesError,
    KeyNotFoundError,
    ValidationError,
    WrongTypeError,
)
from nodefacts.log import get_logger

logger = get_logger(__name__)

# Kubernetes measurement keys
KEY_VERSION = "version"
KEY_NODES = "nodes"
KEY_PODS = "pods"
KEY_NAMESPACE = "namespace"
KEY_CLUSTER_NAME = "cluster-name"
KEY_READY = "ready"

# GPU measurement keys
KEY_GPU_DRIVER = "driver"
KEY_GPU_MODEL = "model"
KEY_GPU_COUNT = "gpu-count"
KEY_GPU_MEMORY = "memory"
KEY_GPU_TEMP = "temperature"
KEY_GPU_POWER = "power"
KEY_GPU_UUID = "uuid"

# OS measurement keys
KEY_OS_NAME = "name"
KEY_OS_VERSION = "os-version"
KEY_KERNEL = "kernel"
KEY_ARCH = "architecture"
KEY_HOSTNAME = "hostname"

# SystemD measurement keys
KEY_SERVICE_NAME = "service-name"
KEY_SERVICE_STATE = "state"
KEY_SERVICE_STATUS = "status"
KEY_ENABLED = "enabled"
KEY_ACTIVE = "active"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

Scalar = int | float | bool | str

# floats with a decimal exponent at or above this render in exponent form
_PLAIN_EXPONENT_LIMIT = 6


class ReadingKind(str, Enum):
    """The scalar kind held by a Reading."""

    INT = "int"
    INT64 = "int64"
    UINT = "uint"
    UINT64 = "uint64"
    FLOAT64 = "float64"
    BOOL = "bool"
    STR = "string"

    def __str__(self) -> str:
        return self.value


_INTEGER_RANGES: dict[ReadingKind, tuple[int, int]] = {
    ReadingKind.INT: (INT64_MIN, INT64_MAX),
    ReadingKind.INT64: (INT64_MIN, INT64_MAX),
    ReadingKind.UINT: (0, UINT64_MAX),
    ReadingKind.UINT64: (0, UINT64_MAX),
}


def _check_value(kind: ReadingKind, value: object) -> Scalar:
    """Validate that value fits kind and return it as the exact builtin type.

    Raises:
        TypeError: If the Python type cannot hold a value of this kind.
        ValueError: If an integer is outside the kind's range, including ints
            too large for a float64 reading.
    """
    if kind is ReadingKind.BOOL:
        if not isinstance(value, bool):
            raise TypeError(f"bool reading requires bool, got {type(value).__name__}")
        return value
    if kind is ReadingKind.STR:
        if not isinstance(value, str):
            raise TypeError(f"string reading requires str, got {type(value).__name__}")
        return str.__str__(value)
    if isinstance(value, bool):
        raise TypeError(f"{kind} reading requires a number, got bool")
    if kind is ReadingKind.FLOAT64:
        if not isinstance(value, int | float):
            raise TypeError(
                f"float64 reading requires float, got {type(value).__name__}"
            )
        try:
            return float(value)
        except OverflowError as exc:
            raise ValueError(f"{value} is out of range for float64 reading") from exc
    if not isinstance(value, int):
        raise TypeError(f"{kind} reading requires int, got {type(value).__name__}")
    low, high = _INTEGER_RANGES[kind]
    if not low <= value <= high:
        raise ValueError(f"{value} is out of range for {kind} reading")
    return int(value)


def _format_float(value: float) -> str:
    """Render a float with the shortest round-trip digits, like Go's %v.

    Plain decimal notation is used for exponents in [-4, 6); outside that
    range the mantissa keeps the shortest digits and the exponent has at
    least two digits (1e-05, 1.234567e+06, 1e+21).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    number = Decimal(repr(value)).normalize()
    exponent = number.adjusted()
    if -4 <= exponent < _PLAIN_EXPONENT_LIMIT:
        return format(number, "f")
    sign, digits, _ = number.as_tuple()
    mantissa = str(digits[0])
    if len(digits) > 1:
        mantissa += "." + "".join(map(str, digits[1:]))
    return f"{'-' if sign else ''}{mantissa}e{exponent:+03d}"


@dataclass(frozen=True, eq=False)
class Reading:
    """An immutable scalar value tagged with its kind.

    Two Readings are equal only when both kind and value match, so an int
    reading of 42 differs from an int64 reading of 42. NaN float readings
    compare equal to each other.

    Attributes:
        kind: The scalar kind; never changes after construction.
        value: The wrapped Python value.
    """

    kind: ReadingKind
    value: Scalar

    def __post_init__(self) -> None:
        kind = ReadingKind(self.kind)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "value", _check_value(kind, self.value))

    @classmethod
    def of_int(cls, value: int) -> "Reading":
        """Create an int reading."""
        return cls(ReadingKind.INT, value)

    @classmethod
    def of_int64(cls, value: int) -> "Reading":
        """Create an int64 reading."""
        return cls(ReadingKind.INT64, value)

    @classmethod
    def of_uint(cls, value: int) -> "Reading":
        """Create an unsigned int reading."""
        return cls(ReadingKind.UINT, value)

    @classmethod
    def of_uint64(cls, value: int) -> "Reading":
        """Create an unsigned int64 reading."""
        return cls(ReadingKind.UINT64, value)

    @classmethod
    def of_float64(cls, value: float) -> "Reading":
        """Create a float64 reading. Integers are converted to float."""
        return cls(ReadingKind.FLOAT64, value)

    @classmethod
    def of_bool(cls, value: bool) -> "Reading":
        """Create a bool reading."""
        return cls(ReadingKind.BOOL, value)

    @classmethod
    def of_str(cls, value: str) -> "Reading":
        """Create a string reading."""
        return cls(ReadingKind.STR, value)

    @classmethod
    def coerce(cls, value: object, kind: ReadingKind) -> "Reading":
        """Create a reading of an explicit kind from a decoded value.

        Args:
            value: A decoded native value.
            kind: The kind the value must be stored as.

        Raises:
            TypeError: If the value cannot be held by kind.
            ValueError: If an integer does not fit the kind's range.
        """
        return cls(kind, cast(Scalar, value))

    def any(self) -> Scalar:
        """Return the wrapped value as a plain Python scalar."""
        return self.value

    def __str__(self) -> str:
        if self.kind is ReadingKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is ReadingKind.FLOAT64:
            return _format_float(cast(float, self.value))
        return str(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reading):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.kind is ReadingKind.FLOAT64 and self._is_nan() and other._is_nan():
            return True
        return self.value == other.value

    def __hash__(self) -> int:
        if self._is_nan():
            return hash((self.kind, "NaN"))
        return hash((self.kind, self.value))

    def _is_nan(self) -> bool:
        return isinstance(self.value, float) and math.isnan(self.value)


def to_reading_with_type(value: object) -> tuple[Reading, bool]:
    """Convert an arbitrary value to the best-matching Reading.

    Checks, in order: bool (before int, since bool subclasses int), int within
    the int64 range, int within the uint64 range, float, str. A Reading is
    returned unchanged. Anything else falls back to a string reading of
    ``str(value)``.

    Args:
        value: Any value, usually a decoded JSON or YAML scalar.

    Returns:
        Tuple of the reading and whether the conversion was exact. The flag is
        False only for the lossy string fallback.
    """
    if isinstance(value, Reading):
        return value, True
    if isinstance(value, bool):
        return Reading.of_bool(value), True
    if isinstance(value, int):
        if INT64_MIN <= value <= INT64_MAX:
            return Reading.of_int(value), True
        if 0 <= value <= UINT64_MAX:
            return Reading.of_uint64(value), True
    elif isinstance(value, float):
        return Reading.of_float64(value), True
    elif isinstance(value, str):
        return Reading.of_str(value), True

    logger.debug("lossy reading conversion of %s value", type(value).__name__)
    return Reading.of_str(str(value)), False


def to_reading(value: object) -> Reading:
    """Convert an arbitrary value to a Reading. Never raises.

    See to_reading_with_type() for the conversion order.
    """
    reading, _ = to_reading_with_type(value)
    return reading


class MeasurementType(str, Enum):
    """Category of a measurement. Measurements of different types never compare."""

    K8S = "K8s"
    GPU = "GPU"
    OS = "OS"
    SYSTEMD = "SystemD"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "MeasurementType | None":
        """Return the member whose value equals text, or None (case sensitive)."""
        for member in cls:
            if member.value == text:
                return member
        return None


@dataclass
class Subtype:
    """A named group of homogeneous facts, such as one GPU or one systemd unit.

    Attributes:
        name: Label of the group; may be empty for single-subtype measurements.
        data: Readings keyed by fact name.
        context: Free-form descriptive metadata.
    """

    name: str = ""
    data: dict[str, Reading] = field(default_factory=dict)
    context: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Check the subtype holds data.

        Raises:
            ValidationError: If data is empty.
        """
        if not self.data:
            raise ValidationError("subtype data cannot be empty", {"name": self.name})

    def has(self, key: str) -> bool:
        return key in self.data

    def get(self, key: str) -> Reading | None:
        return self.data.get(key)

    def keys(self) -> list[str]:
        return list(self.data)

    def copy(self) -> "Subtype":
        """Return a subtype with the same name and copies of data and context."""
        return Subtype(name=self.name, data=dict(self.data), context=dict(self.context))

    def _typed_value(self, key: str, expected: str, *kinds: ReadingKind) -> Scalar:
        reading = self.data.get(key)
        if reading is None:
            raise KeyNotFoundError(key)
        if reading.kind not in kinds:
            raise WrongTypeError(key, expected, reading.kind.value)
        return reading.value

    def get_string(self, key: str) -> str:
        """Return a string value.

        Raises:
            KeyNotFoundError: If the key is absent.
            WrongTypeError: If the reading is not a string.
        """
        return cast(str, self._typed_value(key, "a string", ReadingKind.STR))

    def get_int64(self, key: str) -> int:
        """Return a signed integer value; int and int64 readings are accepted.

        Raises:
            KeyNotFoundError: If the key is absent.
            WrongTypeError: If the reading is not int or int64.
        """
        return cast(
            int,
            self._typed_value(key, "an integer", ReadingKind.INT, ReadingKind.INT64),
        )

    def get_uint64(self, key: str) -> int:
        """Return an unsigned integer value; uint and uint64 readings are accepted.

        Raises:
            KeyNotFoundError: If the key is absent.
            WrongTypeError: If the reading is not uint or uint64.
        """
        return cast(
            int,
            self._typed_value(
                key, "an unsigned integer", ReadingKind.UINT, ReadingKind.UINT64
            ),
        )

    def get_float64(self, key: str) -> float:
        """Return a float64 value. Integer readings are not widened.

        Raises:
            KeyNotFoundError: If the key is absent.
            WrongTypeError: If the reading is not float64.
        """
        return cast(float, self._typed_value(key, "a float64", ReadingKind.FLOAT64))

    def get_bool(self, key: str) -> bool:
        """Return a bool value.

        Raises:
            KeyNotFoundError: If the key is absent.
            WrongTypeError: If the reading is not a bool.
        """
        return cast(bool, self._typed_value(key, "a bool", ReadingKind.BOOL))


@dataclass
class Measurement:
    """A snapshot of one collector category.

    Subtype names are not required to be unique. Lookups return the first
    subtype with a matching name and later duplicates are kept as they are.

    Attributes:
        type: Category discriminator. Known wire values become MeasurementType
            members; unknown non-empty strings are kept as plain strings.
        subtypes: Subtypes in construction order.
    """

    type: MeasurementType | str
    subtypes: list[Subtype] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.type, MeasurementType):
            self.type = MeasurementType.parse(self.type) or self.type

    def validate(self) -> None:
        """Check the measurement has a type and only valid subtypes.

        Raises:
            ValidationError: On an empty type, no subtypes, or an invalid subtype.
        """
        if not self.type:
            raise ValidationError("measurement type cannot be empty")
        if not self.subtypes:
            raise ValidationError(
                "measurement must have at least one subtype", {"type": str(self.type)}
            )
        for i, subtype in enumerate(self.subtypes):
            try:
                subtype.validate()
            except ValidationError as exc:
                raise ValidationError(
                    f"subtype[{i}]: {exc.message}",
                    {"type": str(self.type), "index": i, **exc.context},
                ) from exc

    def get_subtype(self, name: str) -> Subtype | None:
        """Return the first subtype with the given name, or None."""
        for subtype in self.subtypes:
            if subtype.name == name:
                return subtype
        return None

    def has_subtype(self, name: str) -> bool:
        return self.get_subtype(name) is not None

    def get_or_create_subtype(self, name: str) -> Subtype:
        """Return the named subtype, appending an empty one if it does not exist."""
        subtype = self.get_subtype(name)
        if subtype is None:
            subtype = Subtype(name=name)
            self.subtypes.append(subtype)
        return subtype

    def subtype_names(self) -> list[str]:
        return [subtype.name for subtype in self.subtypes]

    def merge(self, other: "Measurement") -> None:
        """Merge other's subtypes into this measurement in place.

        Unknown subtypes are appended as copies. For subtypes present in both,
        other's readings overwrite conflicting keys; context is left unchanged.

        Args:
            other: Measurement of the same type.

        Raises:
            IncompatibleTypesError: If the types differ.
        """
        if self.type != other.type:
            raise IncompatibleTypesError(
                "cannot merge measurements of different types: "
                f"{self.type} and {other.type}",
                {"type": str(self.type), "other_type": str(other.type)},
            )
        for other_subtype in other.subtypes:
            existing = self.get_subtype(other_subtype.name)
            if existing is None:
                self.subtypes.append(other_subtype.copy())
            else:
                existing.data.update(other_subtype.data)
        logger.debug(
            "merged %d subtypes into %s measurement", len(other.subtypes), self.type
        )
