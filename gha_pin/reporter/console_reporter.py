"""
Console reporter: prints verify issues and change summaries to the terminal.
"""

from gha_pin.commands import ChangeSet, Issue, short_sha

# ANSI color codes for terminal output
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BOLD = "\033[1m"
RESET = "\033[0m"


def report_console(issues: list[Issue]) -> str:
    """
    Format verify issues as a colored console report.

    Args:
        issues: Issues returned by run_verify, already sorted.

    Returns:
        The formatted report string (also prints it).
    """
    if not issues:
        report = f"{GREEN}All workflows and composite actions are pinned to matching commit SHAs.{RESET}"
        print(report)
        return report

    lines = []
    for issue in issues:
        lines.append(f"{BOLD}{issue.file_path}:{issue.line_number}{RESET} {RED}{issue.message}{RESET}")
    lines.append("")
    lines.append(f"Found {BOLD}{len(issues)}{RESET} issue(s).")

    report = "\n".join(lines)
    print(report)
    return report


def report_changes(changes: ChangeSet, files_changed: int) -> str:
    """Summarize a fix/update/upgrade run. Warnings are not included."""
    lines = []

    for rec in changes.upgrade_records:
        if rec.updated:
            lines.append(f"Upgraded {rec.owner}/{rec.repo} to {rec.tag} ({short_sha(rec.commit)}).")
        else:
            lines.append(f"{rec.owner}/{rec.repo} is already at {rec.tag} ({short_sha(rec.commit)}).")

    for rec in changes.update_records:
        if rec.updated:
            lines.append(
                f"Updated {rec.owner}/{rec.repo} spec {rec.spec} to {rec.tag} ({short_sha(rec.commit)})."
            )
        else:
            lines.append(
                f"{rec.owner}/{rec.repo} spec {rec.spec} already at {rec.tag} ({short_sha(rec.commit)})."
            )

    if changes.updated == 0:
        lines.append("No changes were required.")
    else:
        lines.append(
            f"{BOLD}Updated {changes.updated} action reference(s) across {files_changed} file(s).{RESET}"
        )

    report = "\n".join(lines)
    print(report)
    return report


def format_warnings(changes: ChangeSet) -> str:
    return "\n".join(f"{YELLOW}{w}{RESET}" for w in changes.warnings)
