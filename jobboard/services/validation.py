from typing import Any, Dict

from jobboard.constants import JOB_TYPE_OPTIONS
from jobboard.schemas.jobs import JobDraft, JobUpdate
from jobboard.services.errors import JobValidationError

# field -> message shown when it is blank (checked in this order)
REQUIRED_TEXT = (
    ("title", "Job title is required"),
    ("company_name", "Company name is required"),
    ("description", "Job description is required"),
    ("location", "Location is required"),
)
JOB_TYPE_REQUIRED = "At least one job type must be selected"

# never writable through create/update
PROTECTED_FIELDS = {"id", "created_at", "updated_at", "user_id"}


def _check_job_types(tags) -> None:
    if not tags:
        raise JobValidationError(JOB_TYPE_REQUIRED)
    unknown = [t for t in tags if t not in JOB_TYPE_OPTIONS]
    if unknown:
        raise JobValidationError(f"Unknown job type: {', '.join(unknown)}")


def validate_draft(draft: JobDraft) -> Dict[str, Any]:
    """Return the cleaned insert payload or raise JobValidationError."""
    data = draft.model_dump()
    for name, message in REQUIRED_TEXT:
        value = (data.get(name) or "").strip()
        if not value:
            raise JobValidationError(message)
        data[name] = value
    _check_job_types(data.get("job_type"))
    return data


def validate_update(fields: JobUpdate) -> Dict[str, Any]:
    """
    Clean a partial update. Only fields the caller actually sent are checked,
    but a sent field may not be blanked.
    """
    data = fields.model_dump(exclude_unset=True)
    for name in PROTECTED_FIELDS:
        data.pop(name, None)

    for name, message in REQUIRED_TEXT:
        if name not in data:
            continue
        value = (data[name] or "").strip()
        if not value:
            raise JobValidationError(message)
        data[name] = value

    if "job_type" in data:
        _check_job_types(data["job_type"])
    return data
