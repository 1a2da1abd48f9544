from __future__ import annotations

import uuid


def new_id(prefix: str) -> str:
    """Generate a string id such as ``student-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"
