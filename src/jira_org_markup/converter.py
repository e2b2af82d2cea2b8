"""
Jira <-> Org converter for jira-org-markup
Converts JIRA markup syntax to Org-mode markup and back
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .blocks import (Block, JIRA_BQ_RE, is_jira_fence_close, is_org_fence_close,
                     match_jira_fence_open, match_org_fence_open)
from .headings import (CLAMP, HeadingAnnotation, parse_jira_heading, parse_org_heading,
                       render_jira_heading, validate_heading_overflow)
from .inline import convert_inline_jira_to_org, convert_inline_org_to_jira
from .lines import (LineKind, ListKind, ListStack, classify_jira_list_line,
                    classify_org_list_line, render_org_item)

logger = logging.getLogger(__name__)


@dataclass
class OrgConversion:
    """Org text produced from Jira markup, with heading levels on the side"""
    text: str
    headings: List[HeadingAnnotation] = field(default_factory=list)

    def __str__(self) -> str:
        return self.text

    def heading_level_at(self, offset: int) -> Optional[int]:
        """
        Semantic heading level of the line starting at offset

        Args:
            offset: Character offset of a line start in self.text

        Returns:
            Level 1-6, or None if no heading line starts there
        """
        for heading in self.headings:
            if heading.offset == offset:
                return heading.level
        return None

    def render(self, base_level: int) -> str:
        """
        Materialize heading asterisks for an outline at base_level

        A Jira h1. under a subtree at level 2 becomes "*** ".

        Args:
            base_level: Outline depth of the heading that will contain the text

        Returns:
            Org text with concrete heading lines
        """
        if base_level < 0:
            raise ValueError(f"Base heading level must not be negative: {base_level}")
        lines = self.text.split('\n')
        for heading in self.headings:
            lines[heading.line] = heading.render(base_level)
        return '\n'.join(lines)


def _split_lines(text: str) -> List[str]:
    return text.replace('\r\n', '\n').replace('\r', '\n').split('\n')


def _line_offsets(lines: List[str]) -> List[int]:
    offsets = []
    position = 0
    for line in lines:
        offsets.append(position)
        position += len(line) + 1
    return offsets


def _close_unterminated(blocks: List[Block], output: List[str], org: bool):
    for block in reversed(blocks):
        logger.warning(f"Unterminated {block.kind.value} block, closing it at end of input")
        output.append(block.org_close() if org else block.jira_close())


def convert_jira_to_org_document(jira_text: Optional[str]) -> OrgConversion:
    """
    Convert JIRA markup to Org markup, keeping heading levels as metadata

    Heading lines are emitted as bare text. Their Jira level is recorded in
    OrgConversion.headings together with the line start offset so the caller
    can pick the asterisk depth that fits its own outline.

    Args:
        jira_text: JIRA markup text to convert

    Returns:
        OrgConversion with the converted text and heading annotations
    """
    if not jira_text:
        return OrgConversion(text="")

    output: List[str] = []
    headings: List[HeadingAnnotation] = []
    stack = ListStack()
    blocks: List[Block] = []

    for raw in _split_lines(jira_text):
        # Inside a fence only the closing fence is recognized, and inside a
        # quote also the opening of a verbatim block
        if blocks:
            block = blocks[-1]
            nested = None if block.verbatim else match_jira_fence_open(raw)
            if is_jira_fence_close(raw, block):
                output.append(block.org_close())
                blocks.pop()
            elif block.verbatim:
                output.append(raw)
            elif nested and nested.verbatim:
                blocks.append(nested)
                output.append(nested.org_open())
            else:
                output.append(convert_inline_jira_to_org(raw))
            continue

        opened = match_jira_fence_open(raw)
        if opened:
            stack.reset()
            blocks.append(opened)
            output.append(opened.org_open())
            continue

        if not raw.strip():
            stack.mark_blank()
            output.append('')
            continue

        heading = parse_jira_heading(raw)
        if heading:
            stack.reset()
            level, text = heading
            text = convert_inline_jira_to_org(text)
            headings.append(HeadingAnnotation(line=len(output), offset=0, level=level, text=text))
            output.append(text)
            continue

        quote = JIRA_BQ_RE.match(raw)
        if quote:
            stack.reset()
            output.extend([
                '#+begin_quote',
                convert_inline_jira_to_org(quote.group(1)),
                '#+end_quote',
            ])
            continue

        item = classify_jira_list_line(raw)
        if item and item.kind is LineKind.RULE:
            stack.reset()
            output.append('-----')
            continue
        if item:
            parent_kinds = [ListKind.from_jira_marker(m) for m in item.marker[:-1]]
            level = stack.push_item(item.depth, item.list_kind, parent_kinds)
            output.append(render_org_item(level, item.depth, convert_inline_jira_to_org(item.content)))
            continue

        stack.reset()
        output.append(convert_inline_jira_to_org(raw))

    _close_unterminated(blocks, output, org=True)

    offsets = _line_offsets(output)
    for heading in headings:
        heading.offset = offsets[heading.line]

    logger.debug(f"Converted {len(output)} lines from JIRA to Org ({len(headings)} headings)")
    return OrgConversion(text='\n'.join(output), headings=headings)


def convert_jira_to_org(jira_text: Optional[str], base_level: Optional[int] = None) -> str:
    """
    Convenience function to convert JIRA markup to Org

    Args:
        jira_text: JIRA markup text to convert
        base_level: Outline depth to render headings under. If None, heading
            lines are left as bare text.

    Returns:
        Converted Org text
    """
    document = convert_jira_to_org_document(jira_text)
    if base_level is None:
        return document.text
    return document.render(base_level)


def convert_org_to_jira(org_text: Optional[str], heading_overflow: str = CLAMP) -> str:
    """
    Convert Org markup to JIRA markup

    Args:
        org_text: Org text to convert
        heading_overflow: What to do with headings deeper than h6,
            "clamp" or "passthrough"

    Returns:
        Converted JIRA markup

    Raises:
        ValueError: If heading_overflow is not a known policy
    """
    validate_heading_overflow(heading_overflow)
    if not org_text:
        return ""

    output: List[str] = []
    stack = ListStack()
    blocks: List[Block] = []

    for raw in _split_lines(org_text):
        if blocks:
            block = blocks[-1]
            nested = None if block.verbatim else match_org_fence_open(raw)
            if is_org_fence_close(raw, block):
                output.append(block.jira_close())
                blocks.pop()
            elif block.verbatim:
                output.append(raw)
            elif nested and nested.verbatim:
                blocks.append(nested)
                output.append(nested.jira_open())
            else:
                output.append(convert_inline_org_to_jira(raw))
            continue

        opened = match_org_fence_open(raw)
        if opened:
            stack.reset()
            blocks.append(opened)
            output.append(opened.jira_open())
            continue

        if not raw.strip():
            stack.mark_blank()
            output.append('')
            continue

        heading = parse_org_heading(raw, heading_overflow)
        if heading:
            stack.reset()
            level, text = heading
            output.append(render_jira_heading(level, convert_inline_org_to_jira(text)))
            continue

        item = classify_org_list_line(raw)
        if item and item.kind is LineKind.RULE:
            stack.reset()
            output.append('----')
            continue
        if item:
            stack.push_item(item.depth, item.list_kind)
            output.append(f"{stack.jira_marker_run()} {convert_inline_org_to_jira(item.content)}")
            continue

        stack.reset()
        output.append(convert_inline_org_to_jira(raw))

    _close_unterminated(blocks, output, org=False)

    logger.debug(f"Converted {len(output)} lines from Org to JIRA")
    return '\n'.join(output)
