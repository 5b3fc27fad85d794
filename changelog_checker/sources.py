# changelog_checker/sources.py
import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import httpx

from .errors import GitError, GitHubError, SourceError
from .models import PullRequestFile

logger = logging.getLogger(__name__)

PER_PAGE = 100


class ChangelogSource(ABC):
    """
    Where the changelog diff and its post-change contents come from.
    """

    changelog_path: str

    @abstractmethod
    def fetch_patch(self) -> Optional[str]:
        """
        Return the unified diff of the changelog, or None if it was not changed.
        """

    @abstractmethod
    def fetch_content(self) -> str:
        """
        Return the full text of the changelog after the change.
        """

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _run_git(args: list[str], cwd: Optional[str] = None) -> subprocess.CompletedProcess:
    cmd = ["git", *args]
    logger.debug("Running git command: %s", " ".join(cmd))
    try:
        completed = subprocess.run(cmd, cwd=cwd, check=False, text=True, capture_output=True)
    except OSError as exc:
        raise GitError(f"failed to execute git: {exc}") from exc

    if completed.returncode != 0:
        stderr = completed.stderr.strip()
        raise GitError(f"git command failed: {' '.join(cmd)}: {stderr}")

    return completed


class LocalGitSource(ChangelogSource):
    def __init__(
        self,
        base_ref: str,
        head_ref: Optional[str] = None,
        changelog_path: str = "CHANGELOG.md",
        repo_path: str = ".",
    ):
        self.base_ref = base_ref
        self.head_ref = head_ref
        self.changelog_path = changelog_path
        self.repo_path = repo_path

    def fetch_patch(self) -> Optional[str]:
        refs = [self.base_ref] if self.head_ref is None else [self.base_ref, self.head_ref]
        args = ["diff", "--no-color", "--no-ext-diff", *refs, "--", self.changelog_path]
        patch = _run_git(args, cwd=self.repo_path).stdout
        return patch or None

    def fetch_content(self) -> str:
        if self.head_ref is not None:
            return _run_git(["show", f"{self.head_ref}:{self.changelog_path}"], cwd=self.repo_path).stdout

        path = Path(self.repo_path) / self.changelog_path
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SourceError(f"failed to read {path}: {exc}") from exc


class GitHubPullRequestSource(ChangelogSource):
    """
    Reads the changelog patch of a pull request from the GitHub REST API.

    repo is the owner and repository name (e.g. Chatterino/chatterino2).
    """

    def __init__(
        self,
        repo: str,
        pr_number: int,
        changelog_path: str = "CHANGELOG.md",
        api_url: str = "https://api.github.com",
        token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 20.0,
        user_agent: str = "changelog-checker",
    ):
        self.repo = repo
        self.pr_number = pr_number
        self.changelog_path = changelog_path
        self.api_url = api_url.rstrip("/")

        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
        }
        if token:
            headers["Authorization"] = f"token {token}"

        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self.client.headers.update(headers)
        self._file: Optional[PullRequestFile] = None

    def _get(self, url: str, **kwargs) -> httpx.Response:
        try:
            resp = self.client.get(url, **kwargs)
            logger.info("GET %s status: %s", url, resp.status_code)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GitHubError(f"GitHub returned {exc.response.status_code} for {url}") from exc
        except httpx.HTTPError as exc:
            raise GitHubError(f"request to {url} failed: {exc}") from exc
        return resp

    def list_files(self) -> list[PullRequestFile]:
        url = f"{self.api_url}/repos/{self.repo}/pulls/{self.pr_number}/files"
        files: list[PullRequestFile] = []
        page = 1

        while True:
            resp = self._get(url, params={"per_page": PER_PAGE, "page": page})
            try:
                batch = resp.json()
                files.extend(PullRequestFile.model_validate(item) for item in batch)
            # pydantic's ValidationError is a ValueError, like a JSON decode error
            except (TypeError, ValueError) as exc:
                raise GitHubError(f"unexpected response from {url}: {exc}") from exc

            if len(batch) < PER_PAGE:
                return files
            page += 1

    def fetch_patch(self) -> Optional[str]:
        self._file = next((f for f in self.list_files() if f.filename == self.changelog_path), None)
        if self._file is None:
            logger.info("%s was not changed in %s#%s", self.changelog_path, self.repo, self.pr_number)
            return None
        return self._file.patch

    def fetch_content(self) -> str:
        if self._file is None:
            self.fetch_patch()
        if self._file is None or not self._file.raw_url:
            raise GitHubError(f"no raw contents for {self.changelog_path} in {self.repo}#{self.pr_number}")
        return self._get(self._file.raw_url).text

    def close(self) -> None:
        self.client.close()
