from .triage_engine import TriageEngine, TriageRule
from .vitals_assessment import VitalsAssessment, VitalsAssessor

__all__ = ["TriageEngine", "TriageRule", "VitalsAssessment", "VitalsAssessor"]
