"""Tests for the reporters."""

import json

from gha_pin.commands import ChangeSet, Issue, UpdateRecord, UpgradeRecord
from gha_pin.reporter import format_warnings, report_changes, report_console, report_json


SHA = "08c6903cd8c0fde910a37f88322edcfb5dd907a8"


def _make_issue(**overrides):
    defaults = dict(
        file_path=".github/workflows/ci.yml",
        line_number=12,
        message="uses actions/checkout is missing a version comment",
    )
    defaults.update(overrides)
    return Issue(**defaults)


# ---------------------------------------------------------------------------
# Console reporter
# ---------------------------------------------------------------------------

class TestConsoleReporter:
    def test_includes_location_and_message(self):
        output = report_console([_make_issue()])
        assert ".github/workflows/ci.yml:12" in output
        assert "missing a version comment" in output

    def test_includes_count(self):
        output = report_console([_make_issue(), _make_issue(line_number=13)])
        assert "issue(s)" in output
        assert "2" in output

    def test_empty(self):
        output = report_console([])
        assert "pinned to matching commit SHAs" in output


class TestChangeReport:
    def test_no_changes(self):
        assert "No changes were required." in report_changes(ChangeSet(), 0)

    def test_summary_counts(self):
        output = report_changes(ChangeSet(updated=3), 2)
        assert "Updated 3 action reference(s) across 2 file(s)." in output

    def test_update_records(self):
        changes = ChangeSet(updated=1, update_records=[
            UpdateRecord("actions", "checkout", "v5", "v5.0.0", SHA, updated=1),
            UpdateRecord("actions", "cache", "v4", "v4.2.0", SHA, unchanged=2),
        ])
        output = report_changes(changes, 1)
        assert "Updated actions/checkout spec v5 to v5.0.0 (08c6903cd8c0)." in output
        assert "actions/cache spec v4 already at v4.2.0 (08c6903cd8c0)." in output

    def test_upgrade_records(self):
        changes = ChangeSet(upgrade_records=[UpgradeRecord("actions", "checkout", "v5.0.0", SHA)])
        output = report_changes(changes, 0)
        assert "actions/checkout is already at v5.0.0 (08c6903cd8c0)." in output

    def test_warnings(self):
        output = format_warnings(ChangeSet(warnings=["ci.yml:3 unable to resolve o/r version v9"]))
        assert "unable to resolve" in output


# ---------------------------------------------------------------------------
# JSON reporter
# ---------------------------------------------------------------------------

class TestJsonReporter:
    def test_valid_json(self):
        parsed = json.loads(report_json([_make_issue()]))
        assert parsed["total"] == 1
        assert parsed["issues"][0] == {
            "file_path": ".github/workflows/ci.yml",
            "line_number": 12,
            "message": "uses actions/checkout is missing a version comment",
        }

    def test_empty(self):
        assert json.loads(report_json([])) == {"total": 0, "issues": []}
