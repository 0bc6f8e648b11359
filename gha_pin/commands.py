"""
Commands: verify, fix, upgrade and update over loaded workflow files.

Each command walks the usages of every WorkflowFile, asks the TagResolver
for the commit its version spec points at and either reports a mismatch
(verify) or rewrites the line (fix/upgrade/update). Saving is left to the
caller; `save_changed` writes each modified buffer exactly once.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from gha_pin.errors import GhaPinError, UsageError
from gha_pin.parser.workflow_parser import ActionUsage, WorkflowFile, join_comment, split_comment
from gha_pin.resolver.tag_resolver import TagResolver
from gha_pin.rewriter import rewrite_usage
from gha_pin.versions import is_full_commit_sha

logger = logging.getLogger(__name__)


@dataclass
class Issue:
    """A verification problem on one `uses:` line."""
    file_path: str
    line_number: int
    message: str


@dataclass
class UpdateRecord:
    """Outcome of `update` for one (repository, spec) pair."""
    owner: str
    repo: str
    spec: str
    tag: str = ""
    commit: str = ""
    updated: int = 0
    unchanged: int = 0


@dataclass
class UpgradeRecord:
    """Outcome of `upgrade` for one repository."""
    owner: str
    repo: str
    tag: str
    commit: str
    updated: int = 0


@dataclass
class ChangeSet:
    """What a fix/update/upgrade run changed, plus per-usage warnings."""
    updated: int = 0
    warnings: list[str] = field(default_factory=list)
    update_records: list[UpdateRecord] = field(default_factory=list)
    upgrade_records: list[UpgradeRecord] = field(default_factory=list)


def short_sha(sha: str) -> str:
    return sha[:12]


def all_usages(files: Iterable[WorkflowFile]) -> list[ActionUsage]:
    return [usage for wf in files for usage in wf.uses]


def drop_ignored(files: list[WorkflowFile], ignore_repos: Iterable[str]) -> None:
    """Remove usages of ignored repositories (`owner/repo`, any case) in place."""
    ignored = {r.lower() for r in ignore_repos}
    if not ignored:
        return
    for wf in files:
        before = len(wf.uses)
        wf.uses = [u for u in wf.uses if u.spec.repo_key not in ignored]
        if len(wf.uses) != before:
            logger.info("Ignored %d usage(s) in %s via config", before - len(wf.uses), wf.path)


def save_changed(files: Iterable[WorkflowFile]) -> list[str]:
    """Write every changed buffer. Returns the paths written."""
    return [wf.path for wf in files if wf.save()]


def _location(usage: ActionUsage) -> str:
    return f"{usage.file.path}:{usage.line_number}" if usage.file else f"?:{usage.line_number}"


def _apply(usage: ActionUsage, commit: str, comment: str) -> bool:
    """Rewrite unless the usage already carries this commit and comment."""
    if commit.lower() == usage.ref.lower() and comment.lower() == usage.comment.lower():
        return False
    return rewrite_usage(usage, commit, comment)


def _parse_repo_argument(repo: str) -> str:
    target = repo.strip().lower()
    if target.count("/") != 1 or not all(target.split("/")):
        raise UsageError("repository argument must be in the form owner/repo")
    return target


def check_upgrade_arguments(repo: Optional[str], version: str, all_repos: bool) -> None:
    """Raise UsageError unless exactly one of `repo` / `--all` is given."""
    if all_repos and repo:
        raise UsageError("upgrade --all does not accept a positional repository argument")
    if not all_repos and not repo:
        raise UsageError("upgrade requires an owner/repo argument unless --all is used")
    if all_repos and version:
        raise UsageError("--version cannot be combined with --all")
    if repo:
        _parse_repo_argument(repo)


def check_update_arguments(repo: Optional[str], all_repos: bool) -> None:
    if all_repos and repo:
        raise UsageError("update --all does not accept a positional repository argument")
    if not all_repos and not repo:
        raise UsageError("update requires an owner/repo argument unless --all is used")
    if repo:
        _parse_repo_argument(repo)


# ----------------------------------------------------------------------
# verify
# ----------------------------------------------------------------------

def run_verify(resolver: TagResolver, files: list[WorkflowFile]) -> list[Issue]:
    """Check that every usage is pinned to the commit its version comment names."""
    issues = []
    for wf in files:
        for usage in wf.uses:
            name = usage.spec.full_path

            if not is_full_commit_sha(usage.ref):
                issues.append(Issue(wf.path, usage.line_number,
                                    f"uses {name} is not pinned to a full commit SHA ({usage.ref})"))
                continue

            version, _ = split_comment(usage.comment)
            if not version:
                issues.append(Issue(wf.path, usage.line_number,
                                    f"uses {name} is missing a version comment"))
                continue

            try:
                tag, commit = resolver.resolve_spec(usage.spec.owner, usage.spec.repo, version)
            except GhaPinError as e:
                issues.append(Issue(wf.path, usage.line_number,
                                    f"failed to resolve {name} spec {version}: {e}"))
                continue

            if commit.lower() != usage.ref.lower():
                issues.append(Issue(
                    wf.path, usage.line_number,
                    f"pinned SHA {usage.ref} does not match {tag} ({commit}) for {name} spec {version}",
                ))

    issues.sort(key=lambda i: (i.file_path, i.line_number))
    logger.info("Verify: %d issue(s) across %d file(s)", len(issues), len(files))
    return issues


# ----------------------------------------------------------------------
# fix
# ----------------------------------------------------------------------

def run_fix(resolver: TagResolver, files: list[WorkflowFile]) -> ChangeSet:
    """Pin every usage to the commit of its version comment (or its current tag)."""
    result = ChangeSet()
    for wf in files:
        for usage in wf.uses:
            version, suffix = split_comment(usage.comment)
            if not version:
                if is_full_commit_sha(usage.ref):
                    continue
                version, suffix = usage.ref, ""

            try:
                _, commit = resolver.resolve_spec(usage.spec.owner, usage.spec.repo, version)
            except GhaPinError as e:
                result.warnings.append(
                    f"{_location(usage)} unable to resolve {usage.spec.full_path} version {version}: {e}"
                )
                continue

            if _apply(usage, commit, join_comment(version, suffix)):
                result.updated += 1
    return result


# ----------------------------------------------------------------------
# upgrade
# ----------------------------------------------------------------------

def run_upgrade(
    resolver: TagResolver,
    files: list[WorkflowFile],
    repo: Optional[str] = None,
    version: str = "",
    all_repos: bool = False,
) -> ChangeSet:
    """
    Move one repository (or every repository) to its latest release.

    Raises:
        UsageError: On conflicting arguments or an unreferenced repository.
        GhaPinError: If a target repository cannot be resolved.
    """
    check_upgrade_arguments(repo, version, all_repos)

    groups: dict[str, list[ActionUsage]] = {}
    for usage in all_usages(files):
        groups.setdefault(usage.spec.repo_key, []).append(usage)

    targets = list(groups)
    if not all_repos:
        target = _parse_repo_argument(repo)
        if target not in groups:
            raise UsageError(f"repository {target} not referenced in workflows or composite actions")
        targets = [target]

    result = ChangeSet()
    for key in targets:
        usages = groups[key]
        owner, name = usages[0].spec.owner, usages[0].spec.repo
        tag, commit = resolver.latest_release(owner, name, version)

        record = UpgradeRecord(owner=owner, repo=name, tag=tag, commit=commit)
        for usage in usages:
            _, suffix = split_comment(usage.comment)
            if _apply(usage, commit, join_comment(tag, suffix)):
                record.updated += 1
        result.updated += record.updated
        result.upgrade_records.append(record)
    return result


# ----------------------------------------------------------------------
# update
# ----------------------------------------------------------------------

def run_update(
    resolver: TagResolver,
    files: list[WorkflowFile],
    repo: Optional[str] = None,
    all_repos: bool = False,
) -> ChangeSet:
    """Refresh pins to the newest commit that still satisfies each version comment."""
    check_update_arguments(repo, all_repos)
    target = None if all_repos else _parse_repo_argument(repo)

    result = ChangeSet()
    records: dict[str, UpdateRecord] = {}
    found = all_repos

    for usage in all_usages(files):
        if target is not None and usage.spec.repo_key != target:
            continue
        found = True

        version, suffix = split_comment(usage.comment)
        if not version:
            result.warnings.append(f"{_location(usage)} missing version comment for {usage.spec.full_path}")
            continue

        try:
            tag, commit = resolver.resolve_spec(usage.spec.owner, usage.spec.repo, version)
        except GhaPinError as e:
            result.warnings.append(
                f"{_location(usage)} unable to resolve {usage.spec.full_path} spec {version}: {e}"
            )
            continue

        key = f"{usage.spec.repo_key}|{version.lower()}"
        record = records.setdefault(
            key, UpdateRecord(owner=usage.spec.owner, repo=usage.spec.repo, spec=version)
        )
        record.tag = tag
        record.commit = commit

        if _apply(usage, commit, join_comment(version, suffix)):
            record.updated += 1
            result.updated += 1
        else:
            record.unchanged += 1

    if not found:
        raise UsageError(f"repository {target} not referenced in workflows or composite actions")

    result.update_records = [records[k] for k in sorted(records)]
    return result
