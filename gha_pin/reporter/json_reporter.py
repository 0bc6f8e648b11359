"""
JSON reporter: outputs verify issues as structured JSON for programmatic use.
"""

import json
import logging

from gha_pin.commands import Issue

logger = logging.getLogger(__name__)


def report_json(issues: list[Issue]) -> str:
    """
    Format verify issues as a JSON string.

    Args:
        issues: List of Issue objects to report.

    Returns:
        A JSON string with all issues.
    """
    data = {
        "total": len(issues),
        "issues": [
            {
                "file_path": i.file_path,
                "line_number": i.line_number,
                "message": i.message,
            }
            for i in issues
        ],
    }
    output = json.dumps(data, indent=2)
    logger.info("JSON report: %d issue(s), %d bytes", len(issues), len(output))
    return output
