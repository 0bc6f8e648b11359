"""Shared fixtures for all tests."""

import copy

import pytest

from gha_pin.errors import NotFoundError, TransportError
from gha_pin.parser import load_workflow_file


class FakeCatalog:
    """In-memory stand-in for GitHubClient: path -> payload or exception."""

    def __init__(self):
        self.responses = {}
        self.calls = []

    def with_json(self, path, payload):
        self.responses[path] = payload
        return self

    def with_not_found(self, path):
        self.responses[path] = NotFoundError(f"GET {path}: 404 Not Found")
        return self

    def with_error(self, path, status_code=500):
        self.responses[path] = TransportError(f"GET {path}: HTTP {status_code}", status_code=status_code)
        return self

    def with_commit(self, owner, repo, tag, sha):
        return self.with_json(
            f"repos/{owner}/{repo}/git/ref/tags/{tag}",
            {"object": {"sha": sha, "type": "commit"}},
        )

    def with_releases(self, owner, repo, releases, page=1):
        return self.with_json(
            f"repos/{owner}/{repo}/releases?per_page=100&page={page}",
            [
                r if isinstance(r, dict) else {"tag_name": r, "prerelease": False}
                for r in releases
            ],
        )

    def count(self, path):
        return self.calls.count(path)

    def get(self, path):
        self.calls.append(path)
        if path not in self.responses:
            pytest.fail(f"unexpected GET {path!r}")
        res = self.responses[path]
        if isinstance(res, Exception):
            raise res
        return copy.deepcopy(res)


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def write_workflow(tmp_path):
    """Write lines to a workflow file under tmp_path and load it back."""
    counter = {"n": 0}

    def _write(*lines, name=None):
        counter["n"] += 1
        path = tmp_path / (name or f"workflow-{counter['n']}.yml")
        path.write_text("\n".join(lines) + "\n")
        return load_workflow_file(str(path))

    return _write


@pytest.fixture
def repo_root(tmp_path):
    """A repository root with an empty .github/workflows directory."""
    (tmp_path / ".github" / "workflows").mkdir(parents=True)
    return tmp_path
