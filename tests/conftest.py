"""Root test configuration: throwaway git-backed content trees"""

from pathlib import Path

import pytest
from git import Actor, Repo


AUTHOR = Actor("Test Author", "author@example.com")


class ContentRepo:
    """A content root inside a fresh git repository, with deterministic commit times."""

    def __init__(self, workdir: Path, content: str = ""):
        self.workdir = workdir
        self.root = workdir / content if content else workdir
        self.root.mkdir(parents=True, exist_ok=True)
        self.repo = Repo.init(workdir)
        self._prefix = f"{content}/" if content else ""

    def write(self, rel: str, text: str) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def commit(self, message: str, when: int, *paths: str, tz: str = "+0000", parents=None):
        """Stage content-relative paths and commit at unix time `when` (on HEAD unless parents are given)."""
        if paths:
            self.repo.index.add([self._prefix + p for p in paths])
        date = f"{when} {tz}"
        return self.repo.index.commit(
            message, parent_commits=parents,
            author=AUTHOR, committer=AUTHOR, author_date=date, commit_date=date,
        )

    def remove(self, message: str, when: int, *paths: str):
        """Delete content-relative paths from the tree and commit."""
        self.repo.index.remove([self._prefix + p for p in paths], working_tree=True)
        return self.commit(message, when)


@pytest.fixture(name="content_repo")
def content_repo_fixture(tmp_path):
    """Content root == repository working tree."""
    return ContentRepo(tmp_path / "site")


@pytest.fixture(name="nested_content_repo")
def nested_content_repo_fixture(tmp_path):
    """Content root is the `content/` subdirectory of the working tree."""
    return ContentRepo(tmp_path / "repo", content="content")
