"""Per-file commit history read from the git repository that holds the content root

A single pass over the commit graph buckets every commit under the paths its
first-parent diff touches; later lookups are dictionary reads.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Optional

from git import Repo
from git.diff import NULL_TREE
from git.exc import GitError, InvalidGitRepositoryError, NoSuchPathError
from git.objects import Commit as GitCommit

from mdsite.core.models import Commit
from mdsite.errors import HistoryLookupError


log = logging.getLogger(__name__)


def _to_commit(commit: GitCommit) -> Commit:
    summary = commit.summary
    if isinstance(summary, bytes):
        summary = summary.decode("utf-8", "replace")
    return Commit(hash=commit.hexsha, time=commit.committed_datetime, summary=summary or None)


def _changed_paths(commit: GitCommit) -> set[str]:
    """Repository-relative paths touched by commit relative to its first parent (or the empty tree)."""
    if commit.parents:
        diffs = commit.parents[0].diff(commit)
    else:
        diffs = commit.diff(NULL_TREE)
    paths: set[str] = set()
    for d in diffs:
        paths.update(p for p in (d.a_path, d.b_path) if p)
    return paths


class HistoryIndex:
    """Commits that modified each file, newest first, as of the branch tip at first use."""

    def __init__(self, content_root: Path, rev: str = "HEAD"):
        self.content_root = Path(content_root)
        self.rev = rev
        self._prefix: Optional[PurePosixPath] = None
        self._buckets: Optional[dict[str, list[Commit]]] = None
        self._error: Optional[HistoryLookupError] = None

    def _open(self) -> Repo:
        try:
            repo = Repo(self.content_root, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise HistoryLookupError(self.content_root, f"not a git repository: {e}") from e
        if repo.working_tree_dir is None:
            repo.close()
            raise HistoryLookupError(self.content_root, "repository has no working tree")
        work = Path(repo.working_tree_dir).resolve()
        try:
            self._prefix = PurePosixPath(self.content_root.resolve().relative_to(work).as_posix())
        except ValueError as e:
            repo.close()
            raise HistoryLookupError(self.content_root, f"outside the working tree {work}") from e
        return repo

    def _walk(self) -> dict[str, list[Commit]]:
        repo = self._open()
        try:
            commits = list(repo.iter_commits(self.rev))
            # stable: rev-list order is kept among equal timestamps
            commits.sort(key=lambda c: c.committed_date, reverse=True)
            buckets: dict[str, list[Commit]] = {}
            for commit in commits:
                record = _to_commit(commit)
                for path in _changed_paths(commit):
                    buckets.setdefault(path, []).append(record)
        except (GitError, ValueError) as e:
            raise HistoryLookupError(self.content_root, f"cannot read history at {self.rev}: {e}") from e
        finally:
            repo.close()
        log.debug("indexed %d commits touching %d paths", len(commits), len(buckets))
        return buckets

    def _index(self) -> dict[str, list[Commit]]:
        if self._error is not None:
            raise self._error
        if self._buckets is None:
            try:
                self._buckets = self._walk()
            except HistoryLookupError as e:
                self._error = e
                raise
        return self._buckets

    def commits_for(self, path: str) -> list[Commit]:
        """Commits whose first-parent diff touched the content-root-relative path, newest first.

        An untracked or never-modified path yields []. Raises HistoryLookupError when
        the repository cannot be read.
        """
        buckets = self._index()
        key = str(self._prefix / PurePosixPath(path.lstrip("/")))
        return list(buckets.get(key, []))
