"""Clinic triage service: patient triage domain and event pipeline."""

__version__ = "0.1.0"
