"""
Tests for the line, inline, block and heading rules
"""

import pytest
from jira_org_markup.blocks import BlockKind, match_jira_fence_open, match_org_fence_open, is_org_fence_close
from jira_org_markup.headings import HeadingAnnotation, parse_jira_heading, parse_org_heading
from jira_org_markup.inline import InlineSpan, jira_to_org_inline, org_to_jira_inline
from jira_org_markup.lines import (LineKind, ListKind, ListStack, classify_jira_list_line,
                                   classify_org_list_line)


class TestLineClassifier:
    """Test list line classification"""

    def test_jira_marker_run_is_depth(self):
        """Test the marker run length gives the depth"""
        line = classify_jira_list_line("*** Sub-sub-item")
        assert line.kind is LineKind.UNORDERED_ITEM
        assert line.depth == 3
        assert line.content == "Sub-sub-item"

    def test_jira_mixed_marker(self):
        """Test the last marker character gives the item kind"""
        line = classify_jira_list_line("*# step")
        assert line.kind is LineKind.ORDERED_ITEM
        assert line.depth == 2

    def test_jira_bold_is_not_a_list(self):
        """Test bold text at line start is not a bullet"""
        assert classify_jira_list_line("*bold* text") is None
        assert classify_jira_list_line("plain") is None

    def test_jira_rule(self):
        """Test horizontal rule"""
        assert classify_jira_list_line("----").kind is LineKind.RULE

    def test_org_indentation_is_depth(self):
        """Test two spaces of indentation per level"""
        assert classify_org_list_line("- top").depth == 1
        assert classify_org_list_line("  - second").depth == 2
        assert classify_org_list_line("   - still second").depth == 2
        assert classify_org_list_line("    12. third").depth == 3

    def test_org_heading_is_not_a_list(self):
        """Test an unindented asterisk is a heading, not a bullet"""
        assert classify_org_list_line("* heading") is None
        assert classify_org_list_line("  * bullet").kind is LineKind.UNORDERED_ITEM


class TestListStack:
    """Test list nesting state"""

    def test_sibling_numbering(self):
        """Test counters advance per sibling"""
        stack = ListStack()
        assert stack.push_item(1, ListKind.ORDERED).counter == 1
        assert stack.push_item(1, ListKind.ORDERED).counter == 2

    def test_sublist_restarts(self):
        """Test a new sublist starts at 1"""
        stack = ListStack()
        stack.push_item(1, ListKind.ORDERED)
        stack.push_item(2, ListKind.ORDERED)
        stack.push_item(2, ListKind.ORDERED)
        stack.push_item(1, ListKind.ORDERED)
        assert stack.push_item(2, ListKind.ORDERED).counter == 1

    def test_marker_run(self):
        """Test Jira marker run follows the nesting path"""
        stack = ListStack()
        stack.push_item(1, ListKind.ORDERED)
        stack.push_item(2, ListKind.UNORDERED)
        assert stack.jira_marker_run() == "#*"

    def test_missing_levels_use_parent_kinds(self):
        """Test skipped levels are filled from the parent kinds"""
        stack = ListStack()
        stack.push_item(3, ListKind.UNORDERED, [ListKind.ORDERED, ListKind.UNORDERED])
        assert stack.jira_marker_run() == "#**"

    def test_blank_line_then_top_level(self):
        """Test a top-level item after a blank line starts a new list"""
        stack = ListStack()
        stack.push_item(1, ListKind.ORDERED)
        stack.mark_blank()
        assert stack.push_item(1, ListKind.ORDERED).counter == 1

    def test_reset(self):
        """Test reset forgets every level"""
        stack = ListStack()
        stack.push_item(1, ListKind.UNORDERED)
        stack.reset()
        assert stack.levels == []


class TestInlineEngine:
    """Test inline span detection"""

    def test_spans_are_tagged(self):
        """Test each span carries its rule kind"""
        spans = jira_to_org_inline.spans("*a* and {{b}} and _c_")
        assert [(s.kind, s.content) for s in spans] == [
            ("bold", "a"), ("code", "b"), ("italic", "c")]

    def test_span_positions(self):
        """Test span delimiters and offsets"""
        span = jira_to_org_inline.spans("x +u+")[0]
        assert span == InlineSpan(kind="underline", open="+", close="+", content="u", start=2, end=5)

    def test_shortest_span(self):
        """Test the shortest span between delimiters is taken"""
        assert jira_to_org_inline.convert("_a_ b _c_") == "/a/ b /c/"

    def test_org_link_span(self):
        """Test links expose url and description"""
        span = org_to_jira_inline.spans("[[https://example.com][Example]]")[0]
        assert span.kind == "link"
        assert span.url == "https://example.com"
        assert span.content == "Example"

    def test_org_underline_not_converted_twice(self):
        """Test Org underline output is not picked up as Jira italic"""
        assert org_to_jira_inline.convert("_u_ /i/") == "+u+ _i_"

    def test_no_spans_in_plain_text(self):
        """Test plain text produces a single token"""
        assert jira_to_org_inline.tokenize("nothing here") == ["nothing here"]


class TestBlocks:
    """Test fence recognition"""

    def test_jira_code_fence(self):
        """Test code fence with language"""
        block = match_jira_fence_open("{code:python}")
        assert block.kind is BlockKind.CODE
        assert block.language == "python"
        assert block.org_open() == "#+begin_src python"

    def test_jira_code_fence_with_title_only(self):
        """Test code fence whose parameters name no language"""
        block = match_jira_fence_open("{code:title=Foo.java|borderStyle=solid}")
        assert block.language is None
        assert block.org_open() == "#+begin_src"

    def test_jira_noformat(self):
        """Test noformat fence"""
        block = match_jira_fence_open("{noformat}")
        assert block.kind is BlockKind.EXAMPLE
        assert block.org_close() == "#+end_example"

    def test_not_a_fence(self):
        """Test inline code is not a fence"""
        assert match_jira_fence_open("{code} inline") is None
        assert match_org_fence_open("#+TITLE: x") is None

    def test_org_header_arguments(self):
        """Test header arguments are not taken as the language"""
        assert match_org_fence_open("#+begin_src emacs-lisp :results silent").language == "emacs-lisp"
        assert match_org_fence_open("#+begin_src :tangle yes").language is None

    def test_org_close_must_match_kind(self):
        """Test an end line of another block kind does not close"""
        block = match_org_fence_open("#+begin_src")
        assert not is_org_fence_close("#+end_example", block)
        assert is_org_fence_close("  #+END_SRC", block)


class TestHeadings:
    """Test heading parsing"""

    @pytest.mark.parametrize("line, expected", [
        ("h1. Title", (1, "Title")),
        ("h6. Deep", (6, "Deep")),
        ("h7. Nope", None),
        ("h1.Title", None),
    ])
    def test_jira_headings(self, line, expected):
        """Test Jira heading levels"""
        assert parse_jira_heading(line) == expected

    @pytest.mark.parametrize("line, expected", [
        ("*** Title", (1, "Title")),
        ("******** Six", (6, "Six")),
        ("********* Seven", (6, "Seven")),
        ("** Outline", None),
        ("***no space", None),
    ])
    def test_org_headings(self, line, expected):
        """Test Org heading levels with the clamp policy"""
        assert parse_org_heading(line) == expected

    def test_org_heading_passthrough(self):
        """Test passthrough policy for deep headings"""
        assert parse_org_heading("********* Seven", "passthrough") is None

    def test_annotation_render(self):
        """Test rendering an annotation under a base level"""
        annotation = HeadingAnnotation(line=0, offset=0, level=2, text="Details")
        assert annotation.render(2) == "**** Details"
