"""
Checkpoint Status Enumeration.
"""

import enum


class CheckpointStatus(str, enum.Enum):
    """
    Checkpoint status enumeration.

    No transition graph is enforced: any status may follow any other.
    Re-reporting the current status is rejected by the idempotency guard.
    """
    CREATED = "CREATED"
    PICKED_UP = "PICKED_UP"
    IN_TRANSIT = "IN_TRANSIT"
    AT_FACILITY = "AT_FACILITY"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    EXCEPTION = "EXCEPTION"


VALID_STATUSES = [status.value for status in CheckpointStatus]


def is_valid_status(candidate) -> bool:
    """Exact, case-sensitive membership check. No trimming is performed."""
    return isinstance(candidate, str) and candidate in VALID_STATUSES
