from typing import Optional

from pydantic import BaseModel, Field


class AddedEntry(BaseModel):
    # Section heading the entry landed under, e.g. "Unversioned" or "2.4.5"
    category: str
    # Full text of the added line, e.g. "- Added cool feature. (#4770)"
    text: str
    # 1-indexed line number in the post-change changelog
    line_number: int = Field(..., alias="lineNumber")

    model_config = {"populate_by_name": True, "frozen": True}


class PullRequestFile(BaseModel):
    filename: str
    status: Optional[str] = None
    # GitHub leaves out the patch for binary and oversized diffs
    patch: str = ""
    raw_url: Optional[str] = None

    model_config = {"extra": "ignore"}


class CheckReport(BaseModel):
    entries: list[AddedEntry]
    strict: bool
    unreleased_categories: list[str] = Field(..., alias="unreleasedCategories")
    violations: list[AddedEntry]
    ok: bool

    model_config = {"populate_by_name": True}
