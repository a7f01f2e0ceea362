"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - EmployeeId is the opaque path id handed to the upstream verbatim
    - ResponseStatus values are the literal sentences the upstream puts on the wire

Design Decisions:
    - EmployeeId wraps str, not UUID: malformed ids still reach the upstream,
      which answers 404 for them
    - str Enum: serializes to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

EmployeeId = NewType("EmployeeId", str)


# ─── Enums ───────────────────────────────────────────────────────

class ResponseStatus(str, Enum):
    """Upstream envelope status sentinel."""
    HANDLED = "Successfully processed request."
    ERROR = "Failed to process request."


class UpstreamOperation(str, Enum):
    """Upstream client operations, used in logs and error context."""
    GET_BY_ID = "get_by_id"
    GET_ALL = "get_all"
    CREATE = "create"
    DELETE = "delete"
