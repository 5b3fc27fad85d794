import pytest

from changelog_checker.diff_parser import AddedLine, Hunk, parse_added_lines, parse_hunks, split_lines
from changelog_checker.errors import DiffParseError


def test_single_hunk_addition_after_context():
    patch = """\
@@ -1,4 +1,5 @@
 ## Unreleased
+- new item
 - old item
 ## 1.0.0
 - released item
"""
    assert parse_added_lines(patch) == [AddedLine(1, "- new item")]


def test_removed_lines_do_not_advance_target_cursor():
    patch = """\
@@ -1,4 +1,4 @@
 ## Unreleased
-- old item
+- reworded item
 ## 1.0.0
+- late item
"""
    assert parse_added_lines(patch) == [
        AddedLine(1, "- reworded item"),
        AddedLine(3, "- late item"),
    ]


def test_two_hunks_reset_cursor_from_header():
    patch = """\
@@ -1,3 +1,4 @@
 ## Unreleased
+- a
 - x
 - y
@@ -20,3 +21,4 @@
 ## 1.0.0
+- b
 - z
"""
    hunks = parse_hunks(patch)
    assert [h.start for h in hunks] == [1, 21]
    assert hunks[0] == Hunk(1, (AddedLine(1, "- a"),))
    assert hunks[1] == Hunk(21, (AddedLine(21, "- b"),))
    assert parse_added_lines(patch) == [AddedLine(1, "- a"), AddedLine(21, "- b")]


def test_git_file_headers_are_not_additions():
    patch = """\
diff --git a/CHANGELOG.md b/CHANGELOG.md
new file mode 100644
index 0000000..3b18e51
--- /dev/null
+++ b/CHANGELOG.md
@@ -0,0 +1,2 @@
+## Unreleased
+- first
"""
    assert parse_added_lines(patch) == [
        AddedLine(0, "## Unreleased"),
        AddedLine(1, "- first"),
    ]


def test_header_without_count():
    assert parse_added_lines("@@ -0,0 +1 @@\n+# Changelog\n") == [AddedLine(0, "# Changelog")]


def test_hunk_header_section_text_is_ignored():
    patch = "@@ -90,7 +90,8 @@ ## 2.4.5\n context\n+- entry\n"
    assert parse_added_lines(patch) == [AddedLine(90, "- entry")]


def test_no_newline_marker_is_ignored():
    patch = """\
@@ -1,2 +1,3 @@
 ## Unreleased
-- old
\\ No newline at end of file
+- old
+- new
"""
    assert parse_added_lines(patch) == [AddedLine(1, "- old"), AddedLine(2, "- new")]


def test_blank_context_line_advances_cursor():
    patch = "@@ -1,3 +1,4 @@\n ## Unreleased\n\n+- new\n - x\n"
    assert parse_added_lines(patch) == [AddedLine(2, "- new")]


def test_patch_without_hunks_is_empty():
    assert parse_hunks("") == []
    assert parse_added_lines("diff --git a/CHANGELOG.md b/CHANGELOG.md\n") == []


@pytest.mark.parametrize(
    "header",
    [
        "@@ -1,2 @@",
        "@@ -1,2 +a,3 @@",
        "@@ garbage",
    ],
)
def test_malformed_hunk_header_is_fatal(header):
    with pytest.raises(DiffParseError):
        parse_added_lines(f" ## Unreleased\n{header}\n+- entry\n")


def test_added_positions_strictly_increase_and_start_in_range():
    patch = """\
@@ -3,4 +3,6 @@
 - a
+- b
+- c
 - d
-- e
+- f
 - g
@@ -40,2 +42,3 @@
 - h
+- i
 - j
"""
    positions = [a.line_no for a in parse_added_lines(patch)]
    assert positions == sorted(set(positions))

    first = parse_added_lines(patch)[0].line_no
    assert 3 - 1 <= first <= 3 - 1 + 6 - 1


def test_lines_split_on_newline_only():
    assert split_lines("a\u2028b\x0cc\r\nd\x85e\n\nf") == ["a\u2028b\x0cc", "d\x85e", "", "f"]
    assert split_lines("") == []
    assert split_lines("only\n") == ["only"]


def test_unicode_separators_stay_inside_added_line():
    patch = "@@ -1,1 +1,2 @@\n ## Unreleased\n+- a\u2028b\n@@ -2,1 +3,2 @@\n ## 1.0.0\n+- late\n"
    assert parse_added_lines(patch) == [AddedLine(1, "- a\u2028b"), AddedLine(3, "- late")]
