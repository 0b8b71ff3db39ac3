# jobboard/scripts/import_jobs_jsonl.py
"""
Load job listings from a JSONL file (one job object per line) into the
database, e.g. to seed a dev board:

    JOBS_JSONL=data/jobs.jsonl JOBS_OWNER=seed-user python -m jobboard.scripts.import_jobs_jsonl
"""
import asyncio
import json
import logging
import os

from jobboard.database import Base, engine
from jobboard.schemas.jobs import JobDraft
from jobboard.services.errors import JobBoardError
from jobboard.services.job_store import SqlJobStore
from jobboard.services.validation import validate_draft

log = logging.getLogger("scripts.import_jobs")

JSONL_PATH = os.environ.get("JOBS_JSONL", "data/jobs.jsonl")
OWNER_ID = os.environ.get("JOBS_OWNER", "seed-user")


async def run(path: str = JSONL_PATH, owner_id: str = OWNER_ID) -> int:
    if not os.path.exists(path):
        log.warning("No file found at %s. Nothing to import.", path)
        return 0

    Base.metadata.create_all(bind=engine)
    store = SqlJobStore()
    added = 0
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                data = validate_draft(JobDraft.model_validate(json.loads(line)))
            except (ValueError, JobBoardError) as e:
                log.warning("line %d skipped: %s", lineno, e)
                continue
            await store.insert(data, owner_id)
            added += 1

    log.info("Imported %d jobs from %s.", added, path)
    return added


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run())
