"""
JobTracker - A CLI tool to track job applications in a local JSON file, with CSV import and PDF reports.
"""

__version__ = "0.1.0"

from .tracker import main_cli

__all__ = ['main_cli']
