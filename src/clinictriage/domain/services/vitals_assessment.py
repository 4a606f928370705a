"""Abnormal and critical classification of vital sign readings."""

from dataclasses import dataclass, field
from typing import List

from ..value_objects.vital_signs import VitalSigns


@dataclass(frozen=True)
class VitalsAssessment:
    is_abnormal: bool
    is_critical: bool
    findings: List[str] = field(default_factory=list)


class VitalsAssessor:
    """Flags readings outside the normal and the critical bands."""

    def assess(self, vitals: VitalSigns) -> VitalsAssessment:
        findings: List[str] = []
        critical = False
        abnormal = False

        hr = vitals.heart_rate
        if hr < 40 or hr > 130:
            critical = True
            findings.append(f"critical heart rate {hr} bpm")
        elif hr < 60 or hr > 100:
            abnormal = True
            findings.append(f"abnormal heart rate {hr} bpm")

        temp = vitals.temperature
        if temp < 35 or temp > 40:
            critical = True
            findings.append(f"critical temperature {temp}°C")
        elif temp < 36.5 or temp > 37.5:
            abnormal = True
            findings.append(f"abnormal temperature {temp}°C")

        spo2 = vitals.oxygen_saturation
        if spo2 < 90:
            critical = True
            findings.append(f"critical oxygen saturation {spo2}%")
        elif spo2 < 95:
            abnormal = True
            findings.append(f"abnormal oxygen saturation {spo2}%")

        sbp = vitals.systolic
        if sbp < 70 or sbp > 180:
            critical = True
            findings.append(f"critical systolic pressure {sbp} mmHg")
        elif sbp < 90 or sbp > 140:
            abnormal = True
            findings.append(f"abnormal systolic pressure {sbp} mmHg")

        # critical readings are also abnormal
        return VitalsAssessment(
            is_abnormal=abnormal or critical, is_critical=critical, findings=findings
        )
