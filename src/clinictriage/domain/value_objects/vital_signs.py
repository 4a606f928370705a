"""
Vital signs value object.

Each vital is range-checked on construction; the error message names the
offending vital so callers can surface it directly.
"""

import re
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional, Tuple

from ..errors import InvalidVitalSignsError

BLOOD_PRESSURE_PATTERN = re.compile(r"^(\d{2,3})/(\d{2,3})$")

# field -> (label, minimum, maximum, unit)
VITAL_RANGES: Dict[str, Tuple[str, float, float, str]] = {
    "heart_rate": ("Heart rate", 30, 250, " bpm"),
    "temperature": ("Temperature", 32, 45, "°C"),
    "oxygen_saturation": ("Oxygen saturation", 50, 100, "%"),
    "respiratory_rate": ("Respiratory rate", 5, 60, " breaths/min"),
}

_CAMEL_KEYS = {
    "heart_rate": "heartRate",
    "blood_pressure": "bloodPressure",
    "temperature": "temperature",
    "oxygen_saturation": "oxygenSaturation",
    "respiratory_rate": "respiratoryRate",
    "consciousness_level": "consciousnessLevel",
    "pain_level": "painLevel",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class VitalSigns:
    """Immutable set of vital sign readings."""

    heart_rate: float
    blood_pressure: str
    temperature: float
    oxygen_saturation: float
    respiratory_rate: float
    consciousness_level: Optional[str] = None
    pain_level: Optional[int] = None

    def __post_init__(self) -> None:
        for field_name, (label, minimum, maximum, unit) in VITAL_RANGES.items():
            value = getattr(self, field_name)
            if not _is_number(value) or value < minimum or value > maximum:
                raise InvalidVitalSignsError(
                    f"{label} must be between {minimum} and {maximum}{unit}",
                    field_name,
                    value,
                )

        if not isinstance(self.blood_pressure, str) or not BLOOD_PRESSURE_PATTERN.match(
            self.blood_pressure.strip()
        ):
            raise InvalidVitalSignsError(
                "Blood pressure must be in SYS/DIA format (e.g. 120/80)",
                "blood_pressure",
                self.blood_pressure,
            )
        object.__setattr__(self, "blood_pressure", self.blood_pressure.strip())

        if self.consciousness_level is not None:
            if not isinstance(self.consciousness_level, str) or not self.consciousness_level.strip():
                raise InvalidVitalSignsError(
                    "Consciousness level cannot be empty",
                    "consciousness_level",
                    self.consciousness_level,
                )
            object.__setattr__(
                self, "consciousness_level", self.consciousness_level.strip().lower()
            )

        if self.pain_level is not None:
            if not _is_number(self.pain_level) or self.pain_level < 0 or self.pain_level > 10:
                raise InvalidVitalSignsError(
                    "Pain level must be between 0 and 10", "pain_level", self.pain_level
                )

    @property
    def systolic(self) -> int:
        return int(self.blood_pressure.split("/")[0])

    @property
    def diastolic(self) -> int:
        return int(self.blood_pressure.split("/")[1])

    def merge(self, **changes: Any) -> "VitalSigns":
        """Return a new instance with ``changes`` applied; None values are ignored."""
        applied = {key: value for key, value in changes.items() if value is not None}
        unknown = set(applied) - set(_CAMEL_KEYS)
        if unknown:
            raise InvalidVitalSignsError(
                f"Unknown vital sign: {sorted(unknown)[0]}", sorted(unknown)[0]
            )
        return replace(self, **applied)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, omitting unset optional readings."""
        data = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            data[_CAMEL_KEYS[key]] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VitalSigns":
        """Build from a mapping with camelCase or snake_case keys."""
        kwargs: Dict[str, Any] = {}
        for snake, camel in _CAMEL_KEYS.items():
            if camel in data:
                kwargs[snake] = data[camel]
            elif snake in data:
                kwargs[snake] = data[snake]
        missing = [
            name
            for name in ("heart_rate", "blood_pressure", "temperature", "oxygen_saturation", "respiratory_rate")
            if name not in kwargs
        ]
        if missing:
            raise InvalidVitalSignsError(
                f"Missing vital sign: {missing[0]}", missing[0]
            )
        return cls(**kwargs)


def normalize_vital_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase keys to field names; snake_case keys pass through."""
    camel_to_snake = {camel: snake for snake, camel in _CAMEL_KEYS.items()}
    return {camel_to_snake.get(key, key): value for key, value in data.items()}
