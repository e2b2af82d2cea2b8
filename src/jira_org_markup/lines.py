"""
Line classification and list nesting for jira-org-markup
"""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)

JIRA_LIST_RE = re.compile(r'^\s*([#*]+)\s+(.*)$')
JIRA_DASH_ITEM_RE = re.compile(r'^\s*-\s+(.*)$')
JIRA_RULE_RE = re.compile(r'^\s*-{4}\s*$')

ORG_LIST_RE = re.compile(r'^( *)([-+*]|\d+[.)])\s+(.*)$')
ORG_RULE_RE = re.compile(r'^\s*-{5,}\s*$')


class LineKind(Enum):
    """Kinds of list-level lines; fences, headings and blanks are matched by their own modules"""
    ORDERED_ITEM = "ordered_item"
    UNORDERED_ITEM = "unordered_item"
    RULE = "rule"


class ListKind(Enum):
    """List flavour of one nesting level"""
    ORDERED = "ordered"
    UNORDERED = "unordered"

    @property
    def jira_marker(self) -> str:
        return '#' if self is ListKind.ORDERED else '*'

    @classmethod
    def from_jira_marker(cls, marker: str) -> 'ListKind':
        return cls.ORDERED if marker == '#' else cls.UNORDERED


@dataclass
class Line:
    """A classified input line"""
    raw: str
    kind: LineKind
    content: str = ''
    marker: str = ''
    depth: int = 0

    @property
    def list_kind(self) -> Optional[ListKind]:
        if self.kind is LineKind.ORDERED_ITEM:
            return ListKind.ORDERED
        if self.kind is LineKind.UNORDERED_ITEM:
            return ListKind.UNORDERED
        return None


def classify_jira_list_line(raw: str) -> Optional[Line]:
    """
    Classify a Jira line as a list item or horizontal rule

    The length of the marker run is the nesting depth, nothing else: a line
    starting with "*** " is a depth-3 bullet, Jira has no asterisk headings.

    Args:
        raw: Line of Jira markup

    Returns:
        Classified Line, or None if the line is neither a list item nor a rule
    """
    if JIRA_RULE_RE.match(raw):
        return Line(raw=raw, kind=LineKind.RULE, marker='----')

    match = JIRA_LIST_RE.match(raw)
    if match:
        marker, content = match.groups()
        kind = (LineKind.ORDERED_ITEM if marker[-1] == '#'
                else LineKind.UNORDERED_ITEM)
        return Line(raw=raw, kind=kind, content=content,
                    marker=marker, depth=len(marker))

    match = JIRA_DASH_ITEM_RE.match(raw)
    if match:
        return Line(raw=raw, kind=LineKind.UNORDERED_ITEM,
                    content=match.group(1), marker='-', depth=1)

    return None


def classify_org_list_line(raw: str) -> Optional[Line]:
    """
    Classify an Org line as a list item or horizontal rule

    Args:
        raw: Line of Org markup

    Returns:
        Classified Line, or None if the line is neither a list item nor a rule
    """
    if ORG_RULE_RE.match(raw):
        return Line(raw=raw, kind=LineKind.RULE, marker='-----')

    match = ORG_LIST_RE.match(raw)
    if not match:
        return None

    indent, bullet, content = match.groups()
    # Unindented "* " is an Org heading, not a bullet
    if bullet == '*' and not indent:
        return None

    depth = len(indent) // 2 + 1
    kind = LineKind.ORDERED_ITEM if bullet[0].isdigit() else LineKind.UNORDERED_ITEM
    return Line(raw=raw, kind=kind, content=content, marker=bullet, depth=depth)


@dataclass
class ListLevel:
    """One active nesting level"""
    kind: ListKind
    counter: int = 0


class ListStack:
    """
    Active list contexts, one entry per nesting depth

    Built fresh for every conversion. Each depth numbers its own items, so
    changing the list kind at one depth leaves the other depths untouched.
    """

    def __init__(self):
        self.levels: List[ListLevel] = []
        self.after_blank = False

    def reset(self):
        """Forget every active list"""
        if self.levels:
            logger.debug(f"Closing list context at depth {len(self.levels)}")
        self.levels = []
        self.after_blank = False

    def mark_blank(self):
        """Record a blank line without closing any list"""
        if self.levels:
            self.after_blank = True

    def push_item(self, depth: int, kind: ListKind,
                  parent_kinds: Optional[List[ListKind]] = None) -> ListLevel:
        """
        Register a list item and return the level it belongs to

        Args:
            depth: Nesting depth of the item, starting at 1
            kind: Kind of the item itself
            parent_kinds: Kinds of the enclosing levels, used when the item
                opens levels that are not active yet

        Returns:
            The ListLevel of the item with its counter already advanced
        """
        if depth == 1 and self.after_blank:
            self.levels = []
        self.after_blank = False

        del self.levels[depth:]
        while len(self.levels) < depth - 1:
            index = len(self.levels)
            if parent_kinds and index < len(parent_kinds):
                parent_kind = parent_kinds[index]
            else:
                parent_kind = kind
            self.levels.append(ListLevel(kind=parent_kind))

        if len(self.levels) == depth and self.levels[-1].kind is kind:
            level = self.levels[-1]
        else:
            del self.levels[depth - 1:]
            level = ListLevel(kind=kind)
            self.levels.append(level)

        level.counter += 1
        return level

    def jira_marker_run(self) -> str:
        """Jira marker run describing the current nesting path"""
        return ''.join(level.kind.jira_marker for level in self.levels)


def render_org_item(level: ListLevel, depth: int, content: str) -> str:
    """
    Render an Org list item

    Args:
        level: List level the item belongs to
        depth: Nesting depth, starting at 1
        content: Already converted item text

    Returns:
        Org list line indented by two spaces per level below the first
    """
    indent = ' ' * ((depth - 1) * 2)
    if level.kind is ListKind.ORDERED:
        bullet = f"{level.counter}."
    else:
        bullet = '-'
    return f"{indent}{bullet} {content}"
