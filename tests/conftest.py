"""
Shared fixtures for the job tracker tests.

Every test runs inside its own temporary working directory with the config
directory redirected there, so nothing touches ~/.jobtracker or ./jobs.json.
"""

import os

import pytest

from jobtracker import config
from jobtracker.models import JobApplication, JobCollection


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(config, "CONFIG_FILE", str(config_dir / "config.json"))
    for name in (
        "JOBTRACKER_DATA_FILE",
        "JOBTRACKER_EXPORT_FILE",
        "JOBTRACKER_TIMEZONE",
        "JOBTRACKER_FONT",
        "JOBTRACKER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def make_job(job_id, company="Acme", title="Engineer", answer=None):
    return JobApplication(
        id=job_id,
        company=company,
        title=title,
        date_submitted="2024-01-01",
        docs_used="CV",
        location="Berlin",
        final_answer=answer,
    )


@pytest.fixture
def three_jobs():
    """Collection with ids 1-3, the last two rejected."""
    return JobCollection(
        jobs=[
            make_job(1, "Acme", "Engineer"),
            make_job(2, "Globex", "Analyst", "Rejected"),
            make_job(3, "Initech", "Developer", "Rejected"),
        ],
        last_id=3,
    )


@pytest.fixture
def data_file(tmp_path):
    return str(tmp_path / "jobs.json")


@pytest.fixture
def umask_022():
    old = os.umask(0o022)
    yield
    os.umask(old)
