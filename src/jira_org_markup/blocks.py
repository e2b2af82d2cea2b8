"""
Fenced block translation for jira-org-markup
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

JIRA_CODE_RE = re.compile(r'^\s*\{code(?::(?P<params>[^}]*))?\}\s*$')
JIRA_NOFORMAT_RE = re.compile(r'^\s*\{noformat(?::[^}]*)?\}\s*$')
JIRA_QUOTE_RE = re.compile(r'^\s*\{quote\}\s*$')
JIRA_BQ_RE = re.compile(r'^\s*bq\.\s+(.*)$')

ORG_BEGIN_RE = re.compile(
    r'^\s*#\+begin_(?P<kind>src|example|quote)\b(?:[ \t]+(?P<lang>\S+))?.*$',
    re.IGNORECASE)
ORG_END_RE = re.compile(r'^\s*#\+end_(?P<kind>src|example|quote)\s*$', re.IGNORECASE)


class BlockKind(Enum):
    """Fenced region flavours"""
    CODE = "src"
    EXAMPLE = "example"
    QUOTE = "quote"

    @property
    def jira_tag(self) -> str:
        return {
            BlockKind.CODE: 'code',
            BlockKind.EXAMPLE: 'noformat',
            BlockKind.QUOTE: 'quote',
        }[self]


@dataclass
class Block:
    """A fenced region"""
    kind: BlockKind
    language: Optional[str] = None

    @property
    def verbatim(self) -> bool:
        """Code and example bodies are never converted"""
        return self.kind is not BlockKind.QUOTE

    def org_open(self) -> str:
        if self.language:
            return f"#+begin_{self.kind.value} {self.language}"
        return f"#+begin_{self.kind.value}"

    def org_close(self) -> str:
        return f"#+end_{self.kind.value}"

    def jira_open(self) -> str:
        if self.language:
            return f"{{{self.kind.jira_tag}:{self.language}}}"
        return f"{{{self.kind.jira_tag}}}"

    def jira_close(self) -> str:
        return f"{{{self.kind.jira_tag}}}"


def _code_language(params: Optional[str]) -> Optional[str]:
    """Pick the language out of "{code:java|title=Foo}" style parameters"""
    if not params:
        return None
    for param in params.split('|'):
        param = param.strip()
        if param and '=' not in param:
            return param
    return None


def match_jira_fence_open(line: str) -> Optional[Block]:
    """
    Recognize a Jira line opening a fenced block

    Args:
        line: Line of Jira markup

    Returns:
        A new Block, or None if the line opens nothing
    """
    match = JIRA_CODE_RE.match(line)
    if match:
        return Block(kind=BlockKind.CODE, language=_code_language(match.group('params')))
    if JIRA_NOFORMAT_RE.match(line):
        return Block(kind=BlockKind.EXAMPLE)
    if JIRA_QUOTE_RE.match(line):
        return Block(kind=BlockKind.QUOTE)
    return None


def is_jira_fence_close(line: str, block: Block) -> bool:
    """Check whether a Jira line closes the open block"""
    return line.strip() == block.jira_close()


def match_org_fence_open(line: str) -> Optional[Block]:
    """
    Recognize an Org "#+begin_" line

    Args:
        line: Line of Org markup

    Returns:
        A new Block, or None if the line opens nothing
    """
    match = ORG_BEGIN_RE.match(line)
    if not match:
        return None
    kind = BlockKind(match.group('kind').lower())
    language = match.group('lang') if kind is BlockKind.CODE else None
    # Header arguments such as ":results output" are not a language
    if language and language.startswith(':'):
        language = None
    return Block(kind=kind, language=language)


def is_org_fence_close(line: str, block: Block) -> bool:
    """Check whether an Org line closes the open block"""
    match = ORG_END_RE.match(line)
    return bool(match) and match.group('kind').lower() == block.kind.value
