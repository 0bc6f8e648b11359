from .console_reporter import report_console, report_changes, format_warnings
from .json_reporter import report_json

__all__ = ["report_console", "report_changes", "format_warnings", "report_json"]
