"""
Record store: loads, saves and edits the collection of job applications.

The whole collection lives in one JSON file that is read once at startup
and, when a command changes it, rewritten in full. There is no locking, so
two invocations writing the same file at once can lose an update.
"""

import os
import json
import stat
import logging
import tempfile

from .config import today
from .models import JobApplication, JobCollection

logger = logging.getLogger(__name__)


def load_jobs(path):
    """Read the collection stored at ``path``.

    A missing file gives an empty collection. So does a file that cannot be
    parsed; that case is logged as a warning because the next save will
    replace it. Errors opening or reading an existing file propagate.
    """
    if not os.path.exists(path):
        logger.debug(f"No data file at {path}, starting empty")
        return JobCollection()

    with open(path, "rb") as f:
        raw = f.read()

    try:
        collection = _decode(raw)
    except (ValueError, KeyError, TypeError) as e:
        logger.warning(f"Could not parse {path} ({e}); treating it as empty")
        return JobCollection()

    logger.debug(f"Loaded {len(collection)} jobs from {path}")
    return collection


def _decode(raw):
    data = json.loads(raw.decode("utf-8"))

    # Older data files are a bare array of records
    if isinstance(data, list):
        records, last_id = data, 0
    elif isinstance(data, dict):
        records, last_id = data["applications"], data.get("last_id", 0)
    else:
        raise TypeError(f"expected an object or array, got {type(data).__name__}")

    if isinstance(last_id, bool) or not isinstance(last_id, int):
        raise ValueError(f"invalid last_id: {last_id!r}")

    jobs = [JobApplication.from_dict(record) for record in records]
    ids = [job.id for job in jobs]
    if len(ids) != len(set(ids)):
        raise ValueError("duplicate job ids")

    return JobCollection(jobs=jobs, last_id=max([last_id] + ids))


def dump_jobs(collection):
    """Serialize the collection to the exact bytes written by save_jobs."""
    payload = {
        "last_id": max([collection.last_id] + [job.id for job in collection]),
        "applications": [job.to_dict() for job in collection],
    }
    return (json.dumps(payload, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def save_jobs(collection, path):
    """Overwrite ``path`` with the full collection.

    The data goes to a temporary file next to ``path`` which then replaces
    it, so a concurrent reader sees either the old or the new content.
    """
    content = dump_jobs(collection)
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        prefix=".jobs-", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        match_file_mode(tmp_path, path)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    logger.debug(f"Saved {len(collection)} jobs to {path}")


def match_file_mode(tmp_path, target):
    """Give ``tmp_path`` the permissions ``target`` has, or would get if new."""
    try:
        mode = stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        mode = 0o666 & ~umask
    os.chmod(tmp_path, mode)


def add_job(collection, company, title, docs, location, date=None, timezone=""):
    """Append a new pending record with the next free id and return it."""
    job = JobApplication(
        id=collection.next_id(),
        company=company,
        title=title,
        date_submitted=date or today(timezone),
        docs_used=docs,
        location=location,
    )
    collection.jobs.append(job)
    collection.last_id = job.id
    return job


def update_job(collection, job_id, answer):
    """Set the final answer of ``job_id``. Returns False if there is none."""
    job = collection.find(job_id)
    if job is None:
        return False
    job.final_answer = answer or None
    return True


def delete_job(collection, job_id):
    """Remove ``job_id`` from the collection. Returns whether it existed."""
    remaining = [job for job in collection.jobs if job.id != job_id]
    if len(remaining) == len(collection.jobs):
        return False
    collection.last_id = collection.next_id() - 1
    collection.jobs = remaining
    return True


def list_jobs(collection):
    """Records in stored order."""
    return list(collection.jobs)


def is_duplicate(collection, company, title):
    """True if a record has the same company and title, ignoring case."""
    company, title = company.casefold(), title.casefold()
    return any(
        job.company.casefold() == company and job.title.casefold() == title
        for job in collection
    )
