"""
Bulk import of applications from a semicolon-delimited CSV export.

Expected columns, in order: Company; Job Title; Date Submitted;
Documents Used; Answer; Location. Extra trailing columns are ignored.
"""

import csv
import logging

from .errors import ParseError, ReadError
from .store import add_job, is_duplicate

logger = logging.getLogger(__name__)

DELIMITER = ";"
MIN_FIELDS = 6
TITLE_LABELS = ("job title", "title")


def is_header(fields):
    return fields[0].lower() == "company" and fields[1].lower() in TITLE_LABELS


def read_rows(path):
    """Return the usable rows of ``path`` as lists of trimmed fields.

    Rows with fewer than six fields are dropped, as is a leading header row
    (first two fields "Company" and "Job Title" or "Title", any case).

    Raises:
        ReadError: the file cannot be opened or read.
        ParseError: the content is not valid UTF-8 or not parseable CSV.
    """
    rows = []
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.reader(f, delimiter=DELIMITER, strict=True)
            for line_no, row in enumerate(reader, start=1):
                if len(row) < MIN_FIELDS:
                    logger.debug(f"Skipping line {line_no}: {len(row)} fields")
                    continue
                fields = [value.strip() for value in row]
                if not rows and is_header(fields):
                    continue
                rows.append(fields)
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8: {e}") from e
    except csv.Error as e:
        raise ParseError(f"{path}: {e}") from e
    except OSError as e:
        raise ReadError(f"Cannot read {path}: {e}") from e
    return rows


def import_from_csv(path, collection, timezone=""):
    """Merge the applications in ``path`` into ``collection``.

    Rows whose company and title already exist (ignoring case) are skipped.
    The whole file is parsed before anything is added, so a failure leaves
    ``collection`` untouched. Returns the number of records added; saving is
    left to the caller. Rows with an empty date get today's date in
    ``timezone`` (local time if empty).
    """
    rows = read_rows(path)

    added = 0
    for company, title, date_submitted, docs_used, answer, location in (
        row[:MIN_FIELDS] for row in rows
    ):
        if is_duplicate(collection, company, title):
            logger.debug(f"Skipping duplicate: {title} at {company}")
            continue

        job = add_job(
            collection,
            company,
            title,
            docs_used,
            location,
            date=date_submitted,
            timezone=timezone,
        )
        job.final_answer = answer or None
        added += 1

    logger.info(f"Imported {added} of {len(rows)} rows from {path}")
    return added
