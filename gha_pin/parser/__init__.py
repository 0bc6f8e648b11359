from .workflow_parser import (
    ActionSpec,
    ActionUsage,
    WorkflowFile,
    parse_uses_line,
    split_comment,
    join_comment,
    load_workflow_file,
    load_workflow_files,
    discover_workflow_files,
)

__all__ = [
    "ActionSpec",
    "ActionUsage",
    "WorkflowFile",
    "parse_uses_line",
    "split_comment",
    "join_comment",
    "load_workflow_file",
    "load_workflow_files",
    "discover_workflow_files",
]
