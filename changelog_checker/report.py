# changelog_checker/report.py
from typing import Iterable

from .models import AddedEntry, CheckReport


def build_report(entries: list[AddedEntry], strict: bool, unreleased: Iterable[str]) -> CheckReport:
    unreleased = sorted(set(unreleased))
    violations = [e for e in entries if e.category not in unreleased]

    return CheckReport(
        entries=entries,
        strict=strict,
        unreleased_categories=unreleased,
        violations=violations,
        ok=not (strict and violations),
    )


def render_text(report: CheckReport) -> list[str]:
    if not report.entries:
        return ["No changelog entries were added"]

    lines = []
    for entry in report.entries:
        if report.strict and entry.category not in report.unreleased_categories:
            lines.append(
                f"ERROR: Entry '{entry.text}' was added to already-released category "
                f"'{entry.category}' (line {entry.line_number})"
            )
        else:
            lines.append(
                f"Entry '{entry.text}' was added to category '{entry.category}' (line {entry.line_number})"
            )

    if not report.ok:
        lines.append("ERROR: At least one changelog entry was added in the wrong place")

    return lines


def render_json(report: CheckReport) -> str:
    return report.model_dump_json(by_alias=True, indent=2)
