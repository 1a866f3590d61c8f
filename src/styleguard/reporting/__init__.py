"""Report assembly: sorting, per-file reports and merging."""

from .builder import build_file_report, merge_reports
from .models import AlignedNote, FileReport, InputFailure, Report

__all__ = [
    "AlignedNote",
    "FileReport",
    "InputFailure",
    "Report",
    "build_file_report",
    "merge_reports",
]
