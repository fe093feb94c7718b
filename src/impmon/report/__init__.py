"""Report export and session summaries."""

from impmon.report.exporter import export_report, report_filename, write_report
from impmon.report.summary import summarize_samples

__all__ = ["export_report", "report_filename", "summarize_samples", "write_report"]
