"""
Rewriter: regenerates a `uses:` line from an ActionUsage.

No re-parsing happens here. The line is rebuilt from the recorded indent,
separator and quote style, so rewriting a usage with its current ref and
comment yields the original bytes and leaves the file clean.
"""

import logging

from gha_pin.parser.workflow_parser import ActionUsage, USES_KEYWORD

logger = logging.getLogger(__name__)


def format_usage_line(usage: ActionUsage, ref: str, comment: str) -> str:
    value = f"{usage.spec.full_path}@{ref.lower()}"
    if usage.quote:
        value = f"{usage.quote}{value}{usage.quote}"
    separator = usage.separator or " "
    line = f"{usage.indent}{USES_KEYWORD}{separator}{value}"
    if comment:
        line = f"{line} # {comment}"
    return line


def rewrite_usage(usage: ActionUsage, ref: str, comment: str) -> bool:
    """
    Point a usage at a new ref/comment, updating its owning buffer in place.

    Returns:
        True if the line content changed (and the buffer was marked changed).
    """
    if usage.file is None:
        raise ValueError(f"usage of {usage.spec.full_path} is not attached to a file")

    new_line = format_usage_line(usage, ref, comment)
    changed = usage.file.lines[usage.line] != new_line
    if changed:
        usage.file.lines[usage.line] = new_line
        usage.file.changed = True
        logger.debug("%s:%d -> %s", usage.file.path, usage.line_number, new_line.strip())

    usage.ref = ref.lower()
    usage.comment = comment
    return changed
