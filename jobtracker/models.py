"""Job application record and the collection persisted by the store."""

from dataclasses import asdict, dataclass, field
from typing import List, Optional

PENDING_LABEL = "Pending"


@dataclass
class JobApplication:
    """One tracked application. ``final_answer`` is None while pending."""

    id: int
    company: str
    title: str
    date_submitted: str
    docs_used: str
    location: str
    final_answer: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return not self.final_answer

    @property
    def status(self) -> str:
        """Answer for display, with pending records shown as "Pending"."""
        return self.final_answer if self.final_answer else PENDING_LABEL

    def to_dict(self) -> dict:
        data = asdict(self)
        if not data["final_answer"]:
            data["final_answer"] = None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "JobApplication":
        """Build a record from its stored form.

        Raises:
            KeyError: a required field is missing.
            TypeError, ValueError: ``data`` is not a mapping or the id is
                not a positive integer.
        """
        job_id = data["id"]
        if isinstance(job_id, bool) or not isinstance(job_id, int) or job_id < 1:
            raise ValueError(f"Invalid job id: {job_id!r}")

        return cls(
            id=job_id,
            company=str(data["company"]),
            title=str(data["title"]),
            date_submitted=str(data["date_submitted"]),
            docs_used=str(data["docs_used"]),
            location=str(data["location"]),
            final_answer=data.get("final_answer") or None,
        )


@dataclass
class JobCollection:
    """All records in stored order plus the highest id ever assigned."""

    jobs: List[JobApplication] = field(default_factory=list)
    last_id: int = 0

    def __len__(self):
        return len(self.jobs)

    def __iter__(self):
        return iter(self.jobs)

    def find(self, job_id: int) -> Optional[JobApplication]:
        return next((job for job in self.jobs if job.id == job_id), None)

    def next_id(self) -> int:
        highest = max((job.id for job in self.jobs), default=0)
        return max(highest, self.last_id) + 1
