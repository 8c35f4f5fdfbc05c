import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from core.errors import PermissionDenied, StoreError, ValidationError

logger = logging.getLogger(__name__)

EQUIPMENT_FIELDS = {"name": "Equipment Name", "type": "Equipment Type", "equipment_id": "Equipment ID"}
LOCATION_FIELDS = {"job_name": "Job Name", "address": "Full Address"}
ENTRY_FIELDS = {
    "equipment_id": "Equipment",
    "location_id": "Location",
    "day_of_week": "Day",
    "start_hour": "Start hour",
    "end_hour": "End hour",
}


def _is_blank(value):
    # 0 is a real choice for day and hour selectors
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_fields(values: dict, required: dict):
    return [label for key, label in required.items() if _is_blank(values.get(key))]


def require_fields(values: dict, required: dict):
    missing = missing_fields(values, required)
    if missing:
        raise ValidationError("Please fill in: " + ", ".join(missing), fields=missing)


@dataclass
class MutationResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None


def run_mutation(write: Callable[[], Any], failure_message: str) -> MutationResult:
    """
    Issue one write. Failures are logged and reduced to a single message for
    the user; nothing is retried.
    """
    try:
        data = write()
    except (StoreError, PermissionDenied) as exc:
        logger.error("%s (%s)", failure_message, exc)
        return MutationResult(ok=False, error=failure_message)
    except ValidationError as exc:
        logger.info("Rejected input: %s", exc)
        return MutationResult(ok=False, error=str(exc))
    return MutationResult(ok=True, data=data)
