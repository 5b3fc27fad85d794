import shutil
import subprocess
from pathlib import Path

import pytest

BASE_CHANGELOG = """\
# Changelog

## Unversioned

- Minor: Existing entry. (#1)

## 2.4.5

- Bugfix: Released fix. (#2)
"""

HEAD_CHANGELOG = """\
# Changelog

## Unversioned

- Minor: Existing entry. (#1)
- Minor: Added cool feature. (#4770)

## 2.4.5

- Bugfix: Released fix. (#2)
- Bugfix: Sneaky late fix. (#4771)
"""


def _run_git(args, cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        text=True,
        capture_output=True,
        check=True,
    )


@pytest.fixture
def changelog_repo(tmp_path):
    """
    A git repository with two commits touching CHANGELOG.md.

    Returns (repo_path, base_sha, head_sha).
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    repo.mkdir()

    _run_git(["init"], cwd=repo)
    _run_git(["config", "user.name", "changelog-checker"], cwd=repo)
    _run_git(["config", "user.email", "changelog-checker@example.com"], cwd=repo)
    _run_git(["config", "commit.gpgsign", "false"], cwd=repo)

    (repo / "CHANGELOG.md").write_text(BASE_CHANGELOG, encoding="utf-8")
    _run_git(["add", "CHANGELOG.md"], cwd=repo)
    _run_git(["commit", "-m", "base"], cwd=repo)
    base = _run_git(["rev-parse", "HEAD"], cwd=repo).stdout.strip()

    (repo / "CHANGELOG.md").write_text(HEAD_CHANGELOG, encoding="utf-8")
    _run_git(["commit", "-am", "add entries"], cwd=repo)
    head = _run_git(["rev-parse", "HEAD"], cwd=repo).stdout.strip()

    return repo, base, head
