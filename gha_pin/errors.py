"""
Exception hierarchy shared by the resolver, the GitHub client and the CLI.

Only NotFoundError is recovered inside the resolver (candidate skip and
release -> tag fallback). Everything else aborts the resolution in progress
and is reported per usage by the commands.
"""

from typing import Optional


class GhaPinError(Exception):
    """Base class for every error raised by gha-pin."""


class UsageError(GhaPinError):
    """Invalid command arguments (bad repo name, conflicting flags...)."""


class TransportError(GhaPinError):
    """A catalog request failed or returned an undecodable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(TransportError):
    """The catalog answered 404 for the requested path."""

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class ResolutionError(GhaPinError):
    """A reference or version spec could not be turned into a commit."""


class ResolutionExhausted(ResolutionError):
    """No candidate, page or listing matched the requested spec."""

    def __init__(self, message: str, owner: str, repo: str, spec: str):
        super().__init__(message)
        self.owner = owner
        self.repo = repo
        self.spec = spec
