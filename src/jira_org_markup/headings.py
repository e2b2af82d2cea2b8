"""
Heading level translation for jira-org-markup

Org heading depth depends on where the text ends up in the outline, so
Jira headings are not turned into asterisks here. The Jira level travels
next to the text as a HeadingAnnotation and whoever embeds the text adds
its own base depth.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

JIRA_HEADING_RE = re.compile(r'^\s*h([1-6])\.\s+(.*)$')
ORG_HEADING_RE = re.compile(r'^(\*+)\s+(.*)$')

# "***" is the shallowest heading inside an issue subtree and maps to h1.
ORG_HEADING_OFFSET = 2
MIN_JIRA_LEVEL = 1
MAX_JIRA_LEVEL = 6

CLAMP = 'clamp'
PASSTHROUGH = 'passthrough'
HEADING_OVERFLOW_POLICIES = (CLAMP, PASSTHROUGH)


@dataclass
class HeadingAnnotation:
    """Semantic level of one converted heading line"""
    line: int
    offset: int
    level: int
    text: str

    def render(self, base_level: int) -> str:
        """Render the heading with concrete asterisks below base_level"""
        return f"{'*' * (base_level + self.level)} {self.text}"


def validate_heading_overflow(policy: str) -> str:
    """
    Check an out-of-range heading policy name

    Raises:
        ValueError: If the policy is unknown
    """
    if policy not in HEADING_OVERFLOW_POLICIES:
        raise ValueError(
            f"Unknown heading overflow policy: {policy} "
            f"(expected one of: {', '.join(HEADING_OVERFLOW_POLICIES)})")
    return policy


def parse_jira_heading(line: str) -> Optional[Tuple[int, str]]:
    """
    Parse a Jira "hN. text" line

    Args:
        line: Line of Jira markup

    Returns:
        Tuple of (level, text) or None if the line is not a heading
    """
    match = JIRA_HEADING_RE.match(line)
    if not match:
        return None
    return int(match.group(1)), match.group(2)


def parse_org_heading(line: str, heading_overflow: str = CLAMP) -> Optional[Tuple[int, str]]:
    """
    Parse an Org heading into a Jira level

    Headings with fewer than three asterisks are outline structure above the
    converted text and are not treated as headings. Levels beyond h6 are
    capped with the "clamp" policy and left as text with "passthrough".

    Args:
        line: Line of Org markup
        heading_overflow: Either "clamp" or "passthrough"

    Returns:
        Tuple of (level, text) or None if the line is not converted as a heading
    """
    match = ORG_HEADING_RE.match(line)
    if not match:
        return None

    level = len(match.group(1)) - ORG_HEADING_OFFSET
    if level < MIN_JIRA_LEVEL:
        return None
    if level > MAX_JIRA_LEVEL:
        if heading_overflow == PASSTHROUGH:
            return None
        level = MAX_JIRA_LEVEL
    return level, match.group(2)


def render_jira_heading(level: int, text: str) -> str:
    """Render a Jira heading line"""
    return f"h{level}. {text}"
