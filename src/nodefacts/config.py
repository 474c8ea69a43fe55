"""Redaction policy configuration.

A RedactionPolicy lists, per measurement type, the key patterns to keep
(``include``) and the key patterns to drop (``exclude``). The ``"*"`` entry
applies to every measurement type. Policies can be loaded from YAML:

```yaml
exclude:
  SystemD: ["*Credential*", "BusName"]
  "*": ["*password*"]
include:
  GPU: ["driver", "model", "gpu-*"]
```
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from nodefacts.core.errors import ConfigError
from nodefacts.core.filter import filter_in, filter_out
from nodefacts.core.models import Measurement, MeasurementType, Subtype
from nodefacts.log import get_logger

logger = get_logger(__name__)

ALL_TYPES = "*"

_SECTIONS = ("exclude", "include")


def _freeze(section: Mapping[str, Any], name: str) -> dict[str, tuple[str, ...]]:
    """Validate one policy section and convert its pattern lists to tuples."""
    if not isinstance(section, Mapping):
        raise ConfigError(
            f"{name} must be a mapping of measurement type to patterns",
            {"section": name},
        )
    frozen: dict[str, tuple[str, ...]] = {}
    for measurement_type, patterns in section.items():
        if isinstance(patterns, str) or not isinstance(patterns, list | tuple):
            raise ConfigError(
                f"{name}.{measurement_type} must be a list of patterns",
                {"section": name, "type": str(measurement_type)},
            )
        if not all(isinstance(p, str) for p in patterns):
            raise ConfigError(
                f"{name}.{measurement_type} patterns must be strings",
                {"section": name, "type": str(measurement_type)},
            )
        frozen[str(measurement_type)] = tuple(patterns)
    return frozen


@dataclass(frozen=True)
class RedactionPolicy:
    """Key filters applied to measurements before they leave collection.

    Attributes:
        exclude: Patterns of keys to drop, keyed by measurement type.
        include: Patterns of keys to keep, keyed by measurement type. A type
            without include patterns keeps every key not excluded.
    """

    exclude: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    include: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "RedactionPolicy":
        """Build a policy from a parsed configuration document.

        Args:
            data: Mapping with optional ``exclude`` and ``include`` sections.
                None or an empty mapping yields an empty policy.

        Raises:
            ConfigError: On unknown sections or malformed pattern lists.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError("redaction policy must be a mapping")
        unknown = sorted(set(data) - set(_SECTIONS))
        if unknown:
            raise ConfigError(
                f"unknown redaction policy sections: {', '.join(map(str, unknown))}",
                {"sections": unknown},
            )
        return cls(
            exclude=_freeze(data.get("exclude") or {}, "exclude"),
            include=_freeze(data.get("include") or {}, "include"),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RedactionPolicy":
        """Load a policy from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or parsed, or is malformed.
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(
                f"cannot read redaction policy {path}: {exc}", {"path": str(path)}
            ) from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(
                f"invalid YAML in redaction policy {path}: {exc}", {"path": str(path)}
            ) from exc
        policy = cls.from_dict(data)
        logger.debug(
            "loaded redaction policy from %s (%d exclude, %d include entries)",
            path,
            len(policy.exclude),
            len(policy.include),
        )
        return policy

    def patterns_for(
        self, measurement_type: MeasurementType | str
    ) -> tuple[list[str], list[str]]:
        """Resolve the include and exclude patterns for a measurement type.

        Returns:
            Tuple of (include patterns, exclude patterns). Patterns from the
            ``"*"`` entry come after the type-specific ones.
        """
        type_name = str(measurement_type)
        include = [*self.include.get(type_name, ()), *self.include.get(ALL_TYPES, ())]
        exclude = [*self.exclude.get(type_name, ()), *self.exclude.get(ALL_TYPES, ())]
        return include, exclude

    def apply(self, measurement: Measurement) -> Measurement:
        """Return a redacted copy of a measurement; the input is not modified.

        Include patterns narrow each subtype first, then exclude patterns
        remove keys from what is left. Subtypes left without data are kept.
        """
        include, exclude = self.patterns_for(measurement.type)
        subtypes: list[Subtype] = []
        for subtype in measurement.subtypes:
            data = filter_in(subtype.data, include) if include else subtype.data
            subtypes.append(
                Subtype(
                    name=subtype.name,
                    data=filter_out(data, exclude),
                    context=dict(subtype.context),
                )
            )
        return Measurement(type=measurement.type, subtypes=subtypes)


DEFAULT_REDACTION_POLICY = RedactionPolicy(
    exclude={
        MeasurementType.SYSTEMD.value: (
            "AllowedCPUs",
            "AllowedMemoryNodes",
            "Asserts",
            "BPFProgram",
            "BusName",
            "Id",
            "*Credential*",
        ),
        # matched against every OS subtype, not only grub and sysctl
        MeasurementType.OS.value: (
            "root",
            "/proc/sys/dev/cdrom/*",
        ),
    }
)
