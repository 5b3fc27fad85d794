# changelog_checker/errors.py


class ChangelogCheckerError(Exception):
    """Base class for all changelog-checker errors."""


class DiffParseError(ChangelogCheckerError):
    """Raised when the changelog diff is not a well-formed unified diff."""


class SourceError(ChangelogCheckerError):
    """Raised when the diff or the changelog contents cannot be retrieved."""


class GitError(SourceError):
    """Raised when a local git command fails."""


class GitHubError(SourceError):
    """Raised when the GitHub API cannot be queried."""
