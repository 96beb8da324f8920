import sys
import argparse
import logging
from datetime import datetime

import pytz

from .config import DATE_FORMAT, load_config, save_config, validate_timezone
from .errors import JobTrackerError
from .exporter import export_to_pdf, truncate
from .importer import import_from_csv
from .store import add_job, delete_job, list_jobs, load_jobs, save_jobs, update_job

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger("jobtracker")

# Column widths for `list`
LIST_COLUMNS = (
    ("ID", 4),
    ("Company", 20),
    ("Title", 20),
    ("Date", 12),
    ("Location", 15),
    ("Docs", 20),
    ("Answer", 15),
)
LIST_RULE_WIDTH = 115


def setup_logging(level, verbose=False):
    """Configure root logging once per invocation"""
    if verbose:
        level = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format=LOG_FORMAT,
    )


def iso_date(value):
    """argparse type for YYYY-MM-DD dates"""
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")
    return value


def format_row(values):
    return " | ".join(
        f"{value:<{width}}" for value, (_, width) in zip(values, LIST_COLUMNS)
    )


def add_command(args, config, jobs):
    job = add_job(
        jobs,
        args.company,
        args.title,
        args.docs,
        args.location,
        date=args.date,
        timezone=config.get("timezone", ""),
    )
    save_jobs(jobs, config["data_file"])
    print(f"Added job: {job.title} at {job.company} (ID: {job.id})")


def update_command(args, config, jobs):
    if update_job(jobs, args.id, args.answer):
        save_jobs(jobs, config["data_file"])
        print(f"Updated job {args.id} with final answer: {args.answer}")
    else:
        print(f"Job with ID {args.id} not found.")


def delete_command(args, config, jobs):
    if delete_job(jobs, args.id):
        save_jobs(jobs, config["data_file"])
        print(f"Deleted job: ID {args.id}")
    else:
        print(f"Job with ID {args.id} not found.")


def list_command(args, config, jobs):
    records = list_jobs(jobs)
    if not records:
        print("No jobs tracked yet.")
        return

    print(format_row([label for label, _ in LIST_COLUMNS]))
    print("-" * LIST_RULE_WIDTH)
    for job in records:
        print(
            format_row(
                [
                    job.id,
                    truncate(job.company, 20),
                    truncate(job.title, 20),
                    job.date_submitted,
                    truncate(job.location, 15),
                    truncate(job.docs_used, 20),
                    job.status,
                ]
            )
        )


def export_command(args, config, jobs):
    output = args.output or config["export_file"]
    try:
        export_to_pdf(list_jobs(jobs), output, font_path=config.get("font_path") or None)
    except JobTrackerError as e:
        logger.debug("Export failed", exc_info=True)
        print(f"Failed to export PDF: {e}", file=sys.stderr)
        return
    print(f"Exported {len(jobs)} jobs to {output}")


def import_command(args, config, jobs):
    try:
        added = import_from_csv(
            args.file, jobs, timezone=config.get("timezone", "")
        )
    except JobTrackerError as e:
        logger.debug("Import failed", exc_info=True)
        print(f"Failed to import CSV: {e}", file=sys.stderr)
        return
    save_jobs(jobs, config["data_file"])
    print(f"Imported {added} new jobs.")


def config_command(args):
    """Handle configuration command"""
    config = load_config()
    updates = {
        "data_file": args.data_file,
        "export_file": args.export_file,
        "timezone": args.timezone,
        "font_path": args.font_path,
        "log_level": args.log_level,
    }
    updates = {key: value for key, value in updates.items() if value is not None}

    if "timezone" in updates and updates["timezone"]:
        try:
            validate_timezone(updates["timezone"])
        except pytz.UnknownTimeZoneError:
            print(f"Error: Unknown timezone {updates['timezone']!r}. Configuration not updated.")
            sys.exit(1)

    if updates:
        config.update(updates)
        save_config(config)
        for key in updates:
            print(f"{key} updated.")
        return

    print("Current Configuration:")
    print(f"Data file: {config['data_file']}")
    print(f"Default export file: {config['export_file']}")
    print(f"Timezone: {config.get('timezone') or 'Local time'}")
    print(f"Report font: {config.get('font_path') or 'Helvetica (built-in)'}")
    print(f"Log level: {config['log_level']}")
    print("\nUse 'job-tracker config --help' for configuration options.")


STORE_COMMANDS = {
    "add": add_command,
    "update": update_command,
    "delete": delete_command,
    "list": list_command,
    "export": export_command,
    "import": import_command,
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog="job-tracker", description="A CLI tool to track job applications"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    add_parser = subparsers.add_parser("add", help="Add a new job application")
    add_parser.add_argument("company", help="Company applied to")
    add_parser.add_argument("title", help="Job title")
    add_parser.add_argument("docs", help="Documents submitted, e.g. 'CV, cover letter'")
    add_parser.add_argument("location", help="Job location")
    add_parser.add_argument(
        "date", nargs="?", type=iso_date, help="Date submitted (YYYY-MM-DD), default today"
    )

    update_parser = subparsers.add_parser(
        "update", help="Set the final answer of a job application"
    )
    update_parser.add_argument("--id", type=int, required=True, help="Job ID")
    update_parser.add_argument("-a", "--answer", required=True, help="Final answer")

    delete_parser = subparsers.add_parser("delete", help="Delete a job application")
    delete_parser.add_argument("--id", type=int, required=True, help="Job ID")

    subparsers.add_parser("list", help="List all job applications")

    export_parser = subparsers.add_parser("export", help="Export jobs to a PDF file")
    export_parser.add_argument(
        "-o", "--output", help="Output PDF path (default from configuration, jobs.pdf)"
    )

    import_parser = subparsers.add_parser(
        "import", help="Import jobs from a semicolon-delimited CSV file"
    )
    import_parser.add_argument("file", help="CSV file to import")

    # Config command
    config_parser = subparsers.add_parser("config", help="Configure settings")
    config_parser.add_argument("--data-file", help="Path of the JSON data file")
    config_parser.add_argument("--export-file", help="Default PDF output path")
    config_parser.add_argument(
        "--timezone", help="Timezone for default dates, e.g. Europe/Berlin"
    )
    config_parser.add_argument("--font-path", help="TrueType font for PDF reports")
    config_parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level"
    )

    return parser


def main_cli(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config()
    setup_logging(config.get("log_level", "WARNING"), args.verbose)

    if args.command == "config":
        config_command(args)
    elif args.command in STORE_COMMANDS:
        jobs = load_jobs(config["data_file"])
        STORE_COMMANDS[args.command](args, config, jobs)
    else:
        parser.print_help()


if __name__ == "__main__":
    main_cli()
