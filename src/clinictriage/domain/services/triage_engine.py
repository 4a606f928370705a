"""
Rule-based automatic triage.

Rules are grouped in tiers from P1 down to P4; the first tier with any
triggered rule decides the priority. Nothing triggered means P5.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ..enums.triage import PatientPriority
from ..value_objects.vital_signs import VitalSigns


@dataclass(frozen=True)
class TriageRule:
    """A named predicate over vital signs that maps to a priority tier."""

    name: str
    priority: PatientPriority
    condition: Callable[[VitalSigns], bool]

    def applies_to(self, vitals: VitalSigns) -> bool:
        return self.condition(vitals)


def _pain(vitals: VitalSigns) -> int:
    return vitals.pain_level if vitals.pain_level is not None else 0


DEFAULT_RULES: Sequence[TriageRule] = (
    # P1 - resuscitation
    TriageRule("critical_hypoxemia", PatientPriority.P1, lambda v: v.oxygen_saturation < 90),
    TriageRule("extreme_tachycardia", PatientPriority.P1, lambda v: v.heart_rate > 140),
    TriageRule("extreme_bradycardia", PatientPriority.P1, lambda v: v.heart_rate < 40),
    TriageRule("hyperpyrexia", PatientPriority.P1, lambda v: v.temperature > 40),
    TriageRule("severe_tachypnea", PatientPriority.P1, lambda v: v.respiratory_rate > 30),
    TriageRule(
        "unconscious", PatientPriority.P1, lambda v: v.consciousness_level == "unconscious"
    ),
    # P2 - emergency
    TriageRule("hypoxemia", PatientPriority.P2, lambda v: v.oxygen_saturation < 92),
    TriageRule("tachycardia", PatientPriority.P2, lambda v: v.heart_rate > 120),
    TriageRule("bradycardia", PatientPriority.P2, lambda v: v.heart_rate < 50),
    TriageRule("high_fever", PatientPriority.P2, lambda v: v.temperature > 39),
    TriageRule("hypothermia", PatientPriority.P2, lambda v: v.temperature < 35),
    TriageRule("tachypnea", PatientPriority.P2, lambda v: v.respiratory_rate > 24),
    TriageRule("bradypnea", PatientPriority.P2, lambda v: v.respiratory_rate < 10),
    TriageRule("severe_pain", PatientPriority.P2, lambda v: _pain(v) >= 8),
    # P3 - urgent
    TriageRule("low_saturation", PatientPriority.P3, lambda v: v.oxygen_saturation < 94),
    TriageRule("elevated_heart_rate", PatientPriority.P3, lambda v: v.heart_rate > 110),
    TriageRule("low_heart_rate", PatientPriority.P3, lambda v: v.heart_rate < 55),
    TriageRule("fever", PatientPriority.P3, lambda v: v.temperature > 38.5),
    TriageRule("low_temperature", PatientPriority.P3, lambda v: v.temperature < 36),
    TriageRule("moderate_pain", PatientPriority.P3, lambda v: _pain(v) >= 6),
    # P4 - less urgent
    TriageRule("borderline_saturation", PatientPriority.P4, lambda v: v.oxygen_saturation < 96),
    TriageRule("mild_tachycardia", PatientPriority.P4, lambda v: v.heart_rate > 100),
    TriageRule("mild_pain", PatientPriority.P4, lambda v: _pain(v) >= 4),
)


class TriageEngine:
    """Computes the automatic priority of a set of vital signs."""

    def __init__(self, rules: Optional[Sequence[TriageRule]] = None) -> None:
        self._rules: List[TriageRule] = sorted(
            rules if rules is not None else DEFAULT_RULES, key=lambda rule: rule.priority
        )

    @property
    def rules(self) -> List[TriageRule]:
        return list(self._rules)

    def calculate_priority(self, vitals: VitalSigns) -> PatientPriority:
        for rule in self._rules:
            if rule.applies_to(vitals):
                return rule.priority
        return PatientPriority.P5

    def get_triggered_rules(self, vitals: VitalSigns) -> List[str]:
        """Names of every rule that fires, most severe tier first."""
        return [rule.name for rule in self._rules if rule.applies_to(vitals)]

    def explain(self, vitals: VitalSigns) -> Dict[str, object]:
        priority = self.calculate_priority(vitals)
        return {
            "priority": priority,
            "label": priority.label,
            "triggered_rules": self.get_triggered_rules(vitals),
        }

    @staticmethod
    def is_valid_for_triage(vitals: Optional[VitalSigns]) -> bool:
        """Vitals are usable when the core readings are all present."""
        if vitals is None:
            return False
        return all(
            getattr(vitals, name) is not None
            for name in ("heart_rate", "temperature", "oxygen_saturation", "respiratory_rate")
        )


_default_engine = TriageEngine()


def calculate_priority(vitals: VitalSigns) -> PatientPriority:
    """Priority under the default rule set."""
    return _default_engine.calculate_priority(vitals)
