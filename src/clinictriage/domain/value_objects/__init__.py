from .vital_signs import VitalSigns

__all__ = ["VitalSigns"]
