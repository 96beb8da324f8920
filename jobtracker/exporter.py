"""
PDF report of all tracked applications.

Rows are laid out with a vertical cursor measured in millimetres from the
bottom edge of an A4 landscape page. Each page starts with the column
header; once the cursor drops under the bottom margin a new page is added
and the header drawn again. A statistics block follows the last row.
"""

import logging
import os
import tempfile
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict

from fpdf import FPDF

from .errors import ExportError
from .models import PENDING_LABEL
from .store import match_file_mode

logger = logging.getLogger(__name__)

PAGE_WIDTH = 297.0
PAGE_HEIGHT = 210.0
TOP = 190.0
BOTTOM_MARGIN = 20.0
STATS_MIN_SPACE = 40.0
LINE_HEIGHT = 6.0
HEADER_GAP = 10.0
STATS_GAP = 10.0
STATS_TITLE_GAP = 8.0

HEADER_SIZE = 12
ROW_SIZE = 10
STATS_TITLE_SIZE = 14
STATS_SIZE = 12
STATS_VALUE_X = 60.0

# (label, x position in mm)
COLUMNS = (
    ("ID", 10.0),
    ("Company", 30.0),
    ("Title", 80.0),
    ("Date", 130.0),
    ("Status", 160.0),
)
COMPANY_WIDTH = 25
TITLE_WIDTH = 25
STATUS_WIDTH = 20

BUILTIN_FONT = "Helvetica"
CUSTOM_FONT = "ReportFont"


def truncate(text, max_width):
    """Shorten ``text`` to ``max_width`` characters, ending in "..." if cut."""
    if len(text) > max_width:
        return text[: max_width - 3] + "..."
    return text


@dataclass
class ReportStatistics:
    """Counts shown in the statistics block."""

    total: int = 0
    pending: int = 0
    answers: Dict[str, int] = field(default_factory=dict)


def compute_statistics(jobs):
    """Total, pending and per-answer counts over ``jobs``."""
    stats = ReportStatistics()
    answers = Counter()
    for job in jobs:
        stats.total += 1
        if job.is_pending:
            stats.pending += 1
        else:
            answers[job.final_answer] += 1
    stats.answers = dict(answers)
    return stats


class ReportWriter:
    """Draws the report onto an FPDF document, tracking the page cursor."""

    def __init__(self, font_path=None):
        self.pdf = FPDF(orientation="L", unit="mm", format="A4")
        self.pdf.set_auto_page_break(False)
        self.pdf.set_title("Job Applications")
        self.font = BUILTIN_FONT
        if font_path:
            self.pdf.add_font(CUSTOM_FONT, "", font_path)
            self.font = CUSTOM_FONT
        self.y = TOP

    @property
    def page_count(self):
        return self.pdf.page_no()

    def text(self, x, size, value):
        if self.font == BUILTIN_FONT:
            # Core fonts only cover latin-1
            value = value.encode("latin-1", "replace").decode("latin-1")
        self.pdf.set_font(self.font, size=size)
        self.pdf.text(x, PAGE_HEIGHT - self.y, value)

    def new_page(self, with_header=True):
        self.pdf.add_page()
        self.y = TOP
        if with_header:
            for label, x in COLUMNS:
                self.text(x, HEADER_SIZE, label)
            self.y -= HEADER_GAP

    def ensure_space(self, minimum, with_header):
        if self.y < minimum:
            self.new_page(with_header)

    def advance(self, height=LINE_HEIGHT):
        self.y -= height

    def draw_jobs(self, jobs):
        self.new_page()
        for job in jobs:
            self.ensure_space(BOTTOM_MARGIN, with_header=True)
            values = (
                str(job.id),
                truncate(job.company, COMPANY_WIDTH),
                truncate(job.title, TITLE_WIDTH),
                job.date_submitted,
                truncate(job.status, STATUS_WIDTH),
            )
            for (_, x), value in zip(COLUMNS, values):
                self.text(x, ROW_SIZE, value)
            self.advance()

    def draw_statistics(self, stats):
        self.advance(STATS_GAP)
        self.ensure_space(STATS_MIN_SPACE, with_header=False)

        self.text(COLUMNS[0][1], STATS_TITLE_SIZE, "Statistics")
        self.advance(STATS_TITLE_GAP)

        rows = [
            ("Total Applications", stats.total),
            (PENDING_LABEL, stats.pending),
        ]
        rows.extend(stats.answers.items())
        for index, (label, count) in enumerate(rows):
            if index >= 2:
                self.ensure_space(BOTTOM_MARGIN, with_header=False)
            self.text(COLUMNS[0][1], STATS_SIZE, label)
            self.text(STATS_VALUE_X, STATS_SIZE, str(count))
            self.advance()

    def save(self, output_path):
        self.pdf.output(output_path)


def export_to_pdf(jobs, output_path, font_path=None):
    """
    Render ``jobs`` as a paginated report at ``output_path``.

    The document is written to a temporary file next to ``output_path`` and
    moved into place only once complete.

    Args:
        jobs: Records in stored order.
        output_path: Destination PDF path.
        font_path: Optional TrueType font; the built-in Helvetica otherwise.

    Returns:
        Number of pages written.

    Raises:
        ExportError: the font could not be loaded or the file not written.
    """
    directory = os.path.dirname(os.path.abspath(output_path))
    tmp_path = None
    try:
        writer = ReportWriter(font_path)
        writer.draw_jobs(jobs)
        writer.draw_statistics(compute_statistics(jobs))

        fd, tmp_path = tempfile.mkstemp(prefix=".report-", suffix=".pdf", dir=directory)
        os.close(fd)
        writer.save(tmp_path)
        match_file_mode(tmp_path, output_path)
        os.replace(tmp_path, output_path)
    except Exception as e:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise ExportError(str(e) or e.__class__.__name__) from e

    logger.info(f"Wrote {len(jobs)} jobs on {writer.page_count} pages to {output_path}")
    return writer.page_count
