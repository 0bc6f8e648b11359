"""
Tag resolver: turns refs and version specs into verified commit SHAs.

Resolution walks the GitHub release/tag catalog through a `get(path)`
capability (see gha_pin.github.GitHubClient). Results are memoized per
resolver instance, so each distinct (repo, ref) or (repo, spec) is resolved
at most once per run.

Minor/major specs pick the first matching entry in catalog order. GitHub
lists releases and tags newest-first; the resolver relies on that ordering
and never re-sorts.
"""

import logging
from typing import Any, Iterator, Protocol
from urllib.parse import quote

from gha_pin.errors import (
    NotFoundError,
    ResolutionError,
    ResolutionExhausted,
    TransportError,
)
from gha_pin.versions import (
    SpecKind,
    classify_version_spec,
    is_full_commit_sha,
    match_version_spec,
)

logger = logging.getLogger(__name__)

LIST_PAGE_SIZE = 100


class Catalog(Protocol):
    def get(self, path: str) -> Any: ...


def _object_of(payload: Any, path: str) -> tuple[str, str]:
    obj = payload.get("object") if isinstance(payload, dict) else None
    sha = obj.get("sha") if isinstance(obj, dict) else None
    if not sha:
        raise TransportError(f"GET {path}: unexpected response shape")
    return str(sha), str(obj.get("type") or "")


class TagResolver:
    """Resolves refs and version specs against one catalog, with per-run caches."""

    def __init__(self, client: Catalog) -> None:
        self.client = client
        self._ref_cache: dict[tuple[str, str, str], str] = {}
        self._spec_cache: dict[tuple[str, str, str], tuple[str, str]] = {}

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def resolve(self, owner: str, repo: str, reference: str) -> str:
        """
        Resolve a tag or branch name to a lowercase commit SHA.

        A full commit SHA is trusted as-is and costs no request. Annotated
        tags are dereferenced iteratively until a commit is reached.

        Raises:
            NotFoundError: If the reference does not exist.
            ResolutionError: If the chain ends on a non-commit object.
        """
        if is_full_commit_sha(reference):
            return reference.lower()

        key = (owner.lower(), repo.lower(), reference)
        if key in self._ref_cache:
            logger.debug("Ref cache hit for %s/%s@%s", owner, repo, reference)
            return self._ref_cache[key]

        path = f"repos/{owner}/{repo}/git/ref/tags/{quote(reference, safe='/+')}"
        sha, object_type = _object_of(self.client.get(path), path)

        while object_type == "tag":
            path = f"repos/{owner}/{repo}/git/tags/{sha}"
            sha, object_type = _object_of(self.client.get(path), path)

        if object_type != "commit":
            raise ResolutionError(f"tag {reference} resolved to unsupported type {object_type}")

        commit = sha.lower()
        self._ref_cache[key] = commit
        logger.debug("Resolved %s/%s@%s -> %s", owner, repo, reference, commit)
        return commit

    # ------------------------------------------------------------------
    # Version specs
    # ------------------------------------------------------------------

    def resolve_spec(self, owner: str, repo: str, spec: str) -> tuple[str, str]:
        """
        Resolve a version spec (e.g. `v4`, `v4.1`, `v4.1.7`, `main`).

        Returns:
            (tag, commit): the tag that satisfied the spec and its commit.

        Raises:
            ResolutionExhausted: If no release or tag matches.
            TransportError: On any catalog failure other than 404.
        """
        spec = (spec or "").strip()
        if not spec:
            raise ResolutionError("empty version specification")

        kind, normalized = classify_version_spec(spec)
        key = (owner.lower(), repo.lower(), normalized.lower())
        if key in self._spec_cache:
            logger.debug("Spec cache hit for %s/%s#%s", owner, repo, spec)
            return self._spec_cache[key]

        if kind is SpecKind.EXACT:
            result = self._resolve_exact_spec(owner, repo, spec, normalized)
        elif kind in (SpecKind.MINOR, SpecKind.MAJOR):
            tag = self.find_latest_matching_tag(owner, repo, normalized, kind)
            result = (tag, self.resolve(owner, repo, tag))
        else:
            result = (spec, self.resolve(owner, repo, spec))

        self._spec_cache[key] = result
        logger.info("Resolved %s/%s spec %s -> %s (%s)", owner, repo, spec, result[0], result[1][:12])
        return result

    def _resolve_exact_spec(self, owner: str, repo: str, original: str, normalized: str) -> tuple[str, str]:
        candidates = [normalized, original]
        if original[:1] in ("v", "V"):
            candidates.append(original[1:])

        seen: set[str] = set()
        for candidate in candidates:
            candidate = candidate.strip()
            if not candidate or candidate.lower() in seen:
                continue
            seen.add(candidate.lower())
            try:
                return candidate, self.resolve(owner, repo, candidate)
            except NotFoundError:
                logger.debug("Tag %s not found in %s/%s, trying next candidate", candidate, owner, repo)

        raise ResolutionExhausted(
            f"no release found for {owner}/{repo} with tag {original}",
            owner=owner, repo=repo, spec=original,
        )

    def _iter_listing(self, owner: str, repo: str, listing: str) -> Iterator[dict]:
        """Yield entries of a paged listing ("releases" or "tags") in catalog order."""
        page = 1
        while True:
            path = f"repos/{owner}/{repo}/{listing}?per_page={LIST_PAGE_SIZE}&page={page}"
            try:
                entries = self.client.get(path)
            except NotFoundError:
                logger.debug("No %s listing for %s/%s", listing, owner, repo)
                return
            if not isinstance(entries, list):
                raise TransportError(f"GET {path}: unexpected response shape")
            for entry in entries:
                if isinstance(entry, dict):
                    yield entry
            if len(entries) < LIST_PAGE_SIZE:
                return
            page += 1

    def find_latest_matching_tag(self, owner: str, repo: str, normalized: str, kind: SpecKind) -> str:
        """First non-prerelease release, then first tag, whose name satisfies the spec."""
        for release in self._iter_listing(owner, repo, "releases"):
            if release.get("prerelease"):
                continue
            name = str(release.get("tag_name") or "")
            if name and match_version_spec(name, normalized, kind):
                return name

        for tag in self._iter_listing(owner, repo, "tags"):
            name = str(tag.get("name") or "")
            if name and match_version_spec(name, normalized, kind):
                return name

        raise ResolutionExhausted(
            f"no release found matching {normalized} for {owner}/{repo}",
            owner=owner, repo=repo, spec=normalized,
        )

    # ------------------------------------------------------------------
    # Latest release
    # ------------------------------------------------------------------

    def latest_release(self, owner: str, repo: str, override: str = "") -> tuple[str, str]:
        """
        Pick the version an `upgrade` should move to.

        With `override`, that spec is resolved. Otherwise the latest release
        is used, falling back to the newest tag when the repository has no
        releases.
        """
        if override:
            return self.resolve_spec(owner, repo, override)

        try:
            release = self.client.get(f"repos/{owner}/{repo}/releases/latest")
            tag = release.get("tag_name") if isinstance(release, dict) else None
            if tag:
                return tag, self.resolve(owner, repo, tag)
        except NotFoundError:
            logger.debug("No latest release for %s/%s, falling back to tags", owner, repo)

        path = f"repos/{owner}/{repo}/tags?per_page=1"
        tags = self.client.get(path)
        if not isinstance(tags, list):
            raise TransportError(f"GET {path}: unexpected response shape")
        if not tags:
            raise ResolutionExhausted(
                f"no release or tag found for {owner}/{repo}",
                owner=owner, repo=repo, spec="latest",
            )
        newest = tags[0] if isinstance(tags[0], dict) else {}
        name = newest.get("name")
        sha = (newest.get("commit") or {}).get("sha")
        if not name or not sha:
            raise TransportError(f"GET {path}: unexpected response shape")
        return name, str(sha).lower()
