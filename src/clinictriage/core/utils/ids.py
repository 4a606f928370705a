"""Identifier generation helpers."""

import uuid


def generate_id(prefix: str) -> str:
    """Generate a prefixed unique identifier, e.g. ``patient-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"
