"""
Command-line interface for changelog-checker.

The backend (local git or a GitHub pull request) is picked once from the
sub-command; the rest of the run does not care where the diff came from.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .checker import check
from .config import Settings, get_settings, setup_logging
from .errors import ChangelogCheckerError
from .report import build_report, render_json, render_text
from .sources import ChangelogSource, GitHubPullRequestSource, LocalGitSource

logger = logging.getLogger(__name__)


def build_arg_parser(settings: Settings) -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--changelog-path",
        default=settings.changelog_path,
        help="Path to the changelog, relative to the repository root (default: %(default)s).",
    )
    common.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=settings.strict,
        help="Fail if any entry was added outside the unreleased section (default: %(default)s).",
    )
    common.add_argument(
        "--unreleased",
        action="append",
        metavar="NAME",
        help=(
            "Section name that accepts new entries; can be given multiple times "
            f"(default: {', '.join(settings.unreleased_categories)})."
        ),
    )
    common.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON.",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )

    parser = argparse.ArgumentParser(
        prog="changelog-checker",
        description="Report which changelog sections a change added entries to.",
    )
    subparsers = parser.add_subparsers(dest="mode", required=True)

    github = subparsers.add_parser(
        "github",
        parents=[common],
        help="Check the changelog of a GitHub pull request.",
        description="Check the changelog of a GitHub pull request.",
    )
    github.add_argument("repo", help="Owner and repository name, e.g. Chatterino/chatterino2.")
    github.add_argument("pr", type=int, help="Pull request number, e.g. 4938.")

    local = subparsers.add_parser(
        "local",
        parents=[common],
        help="Check the changelog diff between two local git refs.",
        description="Check the changelog diff between two local git refs.",
    )
    local.add_argument("base", help="Ref to diff from, e.g. origin/master.")
    local.add_argument(
        "head",
        nargs="?",
        help="Ref to diff to (default: the working tree).",
    )
    local.add_argument(
        "--repo-path",
        default=".",
        help="Path to the git repository (default: current directory).",
    )

    return parser


def make_source(args: argparse.Namespace, settings: Settings) -> ChangelogSource:
    if args.mode == "github":
        return GitHubPullRequestSource(
            repo=args.repo,
            pr_number=args.pr,
            changelog_path=args.changelog_path,
            api_url=settings.github_api_url,
            token=settings.github_token,
            timeout=settings.http_timeout,
            user_agent=settings.user_agent,
        )

    return LocalGitSource(
        base_ref=args.base,
        head_ref=args.head,
        changelog_path=args.changelog_path,
        repo_path=args.repo_path,
    )


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    parser = build_arg_parser(settings)
    args = parser.parse_args(argv)

    setup_logging(settings.log_level, verbosity=args.verbose)

    unreleased = args.unreleased or settings.unreleased_categories
    source = make_source(args, settings)

    try:
        with source:
            entries = check(source)
    except KeyboardInterrupt:
        return 130
    except ChangelogCheckerError as exc:
        logger.debug("Check failed", exc_info=True)
        print(f"changelog-checker: error checking changelog entries: {exc}", file=sys.stderr)
        return 1

    report = build_report(entries, strict=args.strict, unreleased=unreleased)

    if args.json:
        print(render_json(report))
    else:
        for line in render_text(report):
            print(line)

    return 0 if report.ok else 1


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
