"""
Line-level parser for GitHub Actions workflow and composite action files.

Workflows are kept as plain line buffers rather than parsed YAML so that a
rewritten `uses:` line is the only byte that changes in the file. Each
remote action reference becomes an ActionUsage pointing back at its
(WorkflowFile, line index) pair.
"""

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

USES_KEYWORD = "uses:"
WORKFLOWS_DIR = Path(".github") / "workflows"
ACTIONS_DIR = Path(".github") / "actions"
WORKFLOW_SUFFIXES = (".yml", ".yaml")
ACTION_MANIFESTS = ("action.yml", "action.yaml")


@dataclass(frozen=True)
class ActionSpec:
    """A remote action, independent of its version."""
    owner: str          # e.g. "actions"
    repo: str           # e.g. "checkout"
    path: str = ""      # e.g. "init" for "github/codeql-action/init"

    @property
    def repo_key(self) -> str:
        return f"{self.owner}/{self.repo}".lower()

    @property
    def full_path(self) -> str:
        base = f"{self.owner}/{self.repo}"
        if self.path:
            base += "/" + self.path
        return base

    def same_repository(self, other: "ActionSpec") -> bool:
        return self.repo_key == other.repo_key


@dataclass
class ActionUsage:
    """One `uses: owner/repo[/path]@ref` line inside a WorkflowFile."""
    indent: str
    separator: str
    quote: str          # "", "'" or '"'
    spec: ActionSpec
    ref: str            # always lowercase
    comment: str        # text after the first unquoted '#', trimmed
    file: Optional["WorkflowFile"] = field(default=None, repr=False, compare=False)
    line: int = 0       # 0-based index into file.lines

    @property
    def line_number(self) -> int:
        return self.line + 1


@dataclass(eq=False)
class WorkflowFile:
    """An in-memory line buffer for one workflow or action manifest."""
    path: str
    lines: list[str]
    uses: list[ActionUsage] = field(default_factory=list)
    changed: bool = False

    def save(self) -> bool:
        """Write the buffer back to disk if it was modified. Returns True if written."""
        if not self.changed:
            return False
        content = "\n".join(self.lines)
        if not content.endswith("\n"):
            content += "\n"
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.info("Wrote %s", self.path)
        return True


def split_value_and_comment(text: str) -> tuple[str, str]:
    """Split `value # comment`, ignoring '#' characters inside quotes."""
    in_single = False
    in_double = False
    for i, ch in enumerate(text):
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == "#" and not in_single and not in_double:
            return text[:i].strip(), text[i + 1:].strip()
    return text.strip(), ""


def split_comment(comment: str) -> tuple[str, str]:
    """Split a comment into its leading version spec and the remaining text."""
    comment = comment.strip()
    if not comment:
        return "", ""
    version = comment.split()[0]
    return version, comment[len(version):].strip()


def join_comment(version: str, suffix: str) -> str:
    suffix = suffix.strip()
    if not version:
        return suffix
    if not suffix:
        return version
    return f"{version} {suffix}"


def parse_uses_line(line: str) -> Optional[ActionUsage]:
    """
    Parse a single line into an ActionUsage.

    Returns None when the line is not a remote action reference: no `uses:`
    keyword, local (`./`, `../`, `/`) or `docker://` references, expressions,
    a missing `@ref`, or fewer than two path segments.
    """
    idx = line.find(USES_KEYWORD)
    if idx < 0:
        return None

    indent = line[:idx]
    after = line[idx + len(USES_KEYWORD):]
    separator = after[:len(after) - len(after.lstrip(" \t"))]
    rest = after.strip()
    if not rest:
        return None

    value, comment = split_value_and_comment(rest)
    if not value:
        return None

    quote = ""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        quote = value[0]
        value = value[1:-1]

    if "${{" in value:
        logger.debug("Skipping expression uses reference: %s", value)
        return None
    if value.startswith(("./", "../", "/")) or value.startswith("docker://"):
        logger.debug("Skipping local/docker action: %s", value)
        return None

    spec_part, at, ref = value.rpartition("@")
    if not at or not ref:
        logger.debug("Skipping action without version ref: %s", value)
        return None

    pieces = spec_part.split("/")
    if len(pieces) < 2 or not pieces[0] or not pieces[1]:
        return None

    return ActionUsage(
        indent=indent,
        separator=separator,
        quote=quote,
        spec=ActionSpec(owner=pieces[0], repo=pieces[1], path="/".join(pieces[2:])),
        ref=ref.lower(),
        comment=comment.strip(),
    )


def parse_lines(path: str, lines: list[str]) -> WorkflowFile:
    """Build a WorkflowFile from already-split lines, attaching every usage."""
    wf = WorkflowFile(path=path, lines=lines)
    for idx, line in enumerate(lines):
        usage = parse_uses_line(line)
        if usage is None:
            continue
        usage.file = wf
        usage.line = idx
        wf.uses.append(usage)
    logger.debug("Parsed %s: %d usage(s)", path, len(wf.uses))
    return wf


def load_workflow_file(file_path: str) -> WorkflowFile:
    """
    Read a workflow or action manifest into a WorkflowFile.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        content = f.read()
    lines = content.replace("\r\n", "\n").split("\n")
    return parse_lines(file_path, lines)


def discover_workflow_files(root: str = ".") -> list[str]:
    """Find workflow files and composite action manifests under `root`."""
    root_p = Path(root)
    paths: list[str] = []

    workflows = root_p / WORKFLOWS_DIR
    if workflows.is_dir():
        paths.extend(
            str(p) for p in workflows.rglob("*")
            if p.is_file() and p.suffix in WORKFLOW_SUFFIXES
        )

    actions = root_p / ACTIONS_DIR
    if actions.is_dir():
        paths.extend(
            str(p) for p in actions.rglob("*")
            if p.is_file() and p.name in ACTION_MANIFESTS
        )

    paths.sort()
    logger.debug("Discovered %d workflow file(s) under %s", len(paths), root)
    return paths


def _is_excluded(path: str, root: str, patterns: Iterable[str]) -> bool:
    try:
        rel = Path(path).relative_to(root).as_posix()
    except ValueError:
        rel = Path(path).as_posix()
    return any(fnmatch.fnmatch(rel, pat) for pat in patterns)


def load_workflow_files(root: str = ".", exclude: Iterable[str] = ()) -> list[WorkflowFile]:
    """Discover and load every workflow file under `root`, minus excluded paths."""
    patterns = list(exclude)
    files = []
    for path in discover_workflow_files(root):
        if patterns and _is_excluded(path, root, patterns):
            logger.info("Excluded %s via config", path)
            continue
        files.append(load_workflow_file(path))
    logger.info(
        "Loaded %d file(s) with %d usage(s) from %s",
        len(files), sum(len(f.uses) for f in files), root,
    )
    return files
