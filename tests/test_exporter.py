"""
Tests for the PDF report (jobtracker/exporter.py).
"""

import os
import re
import stat

import pytest
from pypdf import PdfReader

from jobtracker.errors import ExportError
from jobtracker.exporter import compute_statistics, export_to_pdf, truncate

from conftest import make_job


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("Acme", 25) == "Acme"

    def test_exact_width_unchanged(self):
        assert truncate("x" * 25, 25) == "x" * 25

    def test_long_text_gets_ellipsis(self):
        result = truncate("A" * 30, 25)
        assert result == "A" * 22 + "..."
        assert len(result) == 25


class TestStatistics:
    def test_counts(self, three_jobs):
        stats = compute_statistics(three_jobs)
        assert stats.total == 3
        assert stats.pending == 1
        assert set(stats.answers.items()) == {("Rejected", 2)}

    def test_each_answer_once(self):
        jobs = [
            make_job(1, answer="Rejected"),
            make_job(2, answer="Offer"),
            make_job(3, answer="Rejected"),
            make_job(4, answer="Interview"),
            make_job(5),
        ]
        stats = compute_statistics(jobs)
        assert set(stats.answers.items()) == {
            ("Rejected", 2),
            ("Offer", 1),
            ("Interview", 1),
        }
        assert stats.pending == 1

    def test_empty(self):
        stats = compute_statistics([])
        assert (stats.total, stats.pending, stats.answers) == (0, 0, {})


class TestExport:
    def test_writes_pdf(self, tmp_path, three_jobs):
        output = tmp_path / "report.pdf"
        pages = export_to_pdf(three_jobs.jobs, str(output))
        assert pages == 1
        assert output.read_bytes().startswith(b"%PDF")

    def test_empty_collection(self, tmp_path):
        output = tmp_path / "empty.pdf"
        assert export_to_pdf([], str(output)) == 1
        assert output.exists()

    def test_paginates(self, tmp_path):
        jobs = [make_job(i, f"Company {i}", f"Title {i}") for i in range(1, 101)]
        pages = export_to_pdf(jobs, str(tmp_path / "many.pdf"))
        # 27 rows fit under each header
        assert pages == 4

    def test_statistics_get_their_own_page(self, tmp_path):
        jobs = [make_job(i, f"Company {i}", f"Title {i}") for i in range(1, 27)]
        # 26 rows leave the cursor at 24mm, under the space the stats need
        assert export_to_pdf(jobs, str(tmp_path / "stats.pdf")) == 2

    def test_non_latin_text(self, tmp_path):
        jobs = [make_job(1, "株式会社", "エンジニア", "不採用")]
        output = tmp_path / "unicode.pdf"
        export_to_pdf(jobs, str(output))
        assert output.exists()

    def test_long_fields(self, tmp_path):
        jobs = [make_job(1, "C" * 80, "T" * 80, "A" * 80)]
        export_to_pdf(jobs, str(tmp_path / "long.pdf"))

    def test_unwritable_path(self, tmp_path, three_jobs):
        output = tmp_path / "missing" / "report.pdf"
        with pytest.raises(ExportError):
            export_to_pdf(three_jobs.jobs, str(output))
        assert not output.exists()

    def test_missing_font(self, tmp_path, three_jobs):
        output = tmp_path / "report.pdf"
        with pytest.raises(ExportError):
            export_to_pdf(three_jobs.jobs, str(output), font_path=str(tmp_path / "nope.ttf"))
        assert not output.exists()

    def test_no_temp_files_left_behind(self, tmp_path, three_jobs):
        output = tmp_path / "report.pdf"
        export_to_pdf(three_jobs.jobs, str(output))
        assert [p.name for p in tmp_path.iterdir() if p.suffix == ".pdf"] == ["report.pdf"]


# ============================================================
# Rendered content
# ============================================================


HEADER_LABELS = ("ID", "Company", "Title", "Date", "Status")


def page_texts(path):
    return [page.extract_text() for page in PdfReader(str(path)).pages]


def statistics_text(path):
    text = page_texts(path)[-1]
    assert "Statistics" in text
    return text.split("Statistics", 1)[1]


class TestRenderedContent:
    def test_header_on_every_page(self, tmp_path):
        jobs = [make_job(i, f"Firm {i}", f"Role {i}") for i in range(1, 61)]
        output = tmp_path / "many.pdf"
        assert export_to_pdf(jobs, str(output)) == 3

        texts = page_texts(output)
        assert len(texts) == 3
        for text in texts:
            assert all(label in text for label in HEADER_LABELS)
        assert "Firm 28" in texts[1]
        assert "Firm 60" in texts[2]

    def test_statistics_block(self, tmp_path, three_jobs):
        output = tmp_path / "report.pdf"
        export_to_pdf(three_jobs.jobs, str(output))

        stats = statistics_text(output)
        assert re.search(r"Total Applications\s*3\b", stats)
        assert re.search(r"Pending\s*1\b", stats)
        assert re.search(r"Rejected\s*2\b", stats)

    def test_statistics_after_many_rows(self, tmp_path):
        jobs = [
            make_job(i, f"Firm {i}", f"Role {i}", None if i <= 40 else "Rejected")
            for i in range(1, 61)
        ]
        output = tmp_path / "many.pdf"
        export_to_pdf(jobs, str(output))

        stats = statistics_text(output)
        assert re.search(r"Total Applications\s*60\b", stats)
        assert re.search(r"Pending\s*40\b", stats)
        assert re.search(r"Rejected\s*20\b", stats)

    def test_long_company_truncated(self, tmp_path):
        output = tmp_path / "long.pdf"
        export_to_pdf([make_job(1, "C" * 80, "Role")], str(output))
        text = page_texts(output)[0]
        assert "C" * 22 + "..." in text
        assert "C" * 23 not in text


class TestPermissions:
    def test_new_report_follows_umask(self, tmp_path, three_jobs, umask_022):
        output = tmp_path / "report.pdf"
        export_to_pdf(three_jobs.jobs, str(output))
        assert stat.S_IMODE(os.stat(output).st_mode) == 0o644

    def test_existing_report_keeps_mode(self, tmp_path, three_jobs, umask_022):
        output = tmp_path / "report.pdf"
        export_to_pdf(three_jobs.jobs, str(output))
        os.chmod(output, 0o640)
        export_to_pdf(three_jobs.jobs, str(output))
        assert stat.S_IMODE(os.stat(output).st_mode) == 0o640
