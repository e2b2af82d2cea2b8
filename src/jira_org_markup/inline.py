"""
Inline formatting substitution for jira-org-markup

Every direction has a single table of rules. Matches are tagged with their
rule and rendered in one pass, so the output of one rule is never seen by
another one. Org underline and Jira italic share "_".
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

URL_PATTERN = r'\b[a-zA-Z][a-zA-Z0-9+.-]*://[^\s\[\]|]+'
MASK = "\x00"


@dataclass(frozen=True)
class InlineRule:
    """A single inline substitution rule"""
    kind: str
    pattern: str
    open: str = ''
    close: str = ''
    target_open: str = ''
    target_close: str = ''
    verbatim: bool = False
    passthrough: bool = False

    @property
    def protected(self) -> bool:
        """Spans whose inside is off limits to emphasis rules"""
        return self.passthrough or self.verbatim or self.kind == 'link'


@dataclass
class InlineSpan:
    """A substring matched by one inline rule"""
    kind: str
    open: str
    close: str
    content: str
    start: int
    end: int
    url: Optional[str] = None


def emphasis_rule(kind: str, delimiter: str, target: str) -> InlineRule:
    """
    Build a rule for a symmetric single-character delimiter

    The opening delimiter must not follow a word character and must be
    followed by a non-space; the closing one mirrors that. Content is the
    shortest non-empty span on the line.

    Args:
        kind: Rule name, also used as regex group name
        delimiter: Source delimiter character
        target: Delimiter to emit instead

    Returns:
        InlineRule
    """
    d = re.escape(delimiter)
    pattern = (rf'(?P<{kind}>(?<!\w){d}'
               rf'(?P<{kind}_body>[^\s{d}](?:.*?[^\s{d}])?)'
               rf'{d}(?!\w))')
    return InlineRule(kind=kind, pattern=pattern, open=delimiter, close=delimiter,
                      target_open=target, target_close=target)


def passthrough_rule(kind: str, pattern: str) -> InlineRule:
    """Build a rule whose matches are emitted unchanged"""
    return InlineRule(kind=kind, pattern=rf'(?P<{kind}>(?P<{kind}_body>{pattern}))',
                      passthrough=True)


JIRA_TO_ORG_RULES = [
    # Jira links are left as they are, Org has no use for their text
    passthrough_rule('jira_link', r'\[[^\[\]\n]*\|[^\[\]\n]+\]'
                                  r'|\[~[^\[\]\n]+\]'
                                  r'|\[[a-zA-Z][a-zA-Z0-9+.-]*:[^\[\]\n]+\]'),
    passthrough_rule('url', URL_PATTERN),
    InlineRule(kind='code', pattern=r'(?P<code>\{\{(?P<code_body>.+?)\}\})',
               open='{{', close='}}', target_open='~', target_close='~',
               verbatim=True),
    emphasis_rule('bold', '*', '*'),
    emphasis_rule('italic', '_', '/'),
    emphasis_rule('underline', '+', '_'),
    emphasis_rule('strikethrough', '-', '+'),
]

ORG_TO_JIRA_RULES = [
    InlineRule(kind='link',
               pattern=r'(?P<link>\[\[(?P<link_body>[^\[\]\n]+)\]'
                       r'(?:\[(?P<link_desc>[^\[\]\n]+)\])?\])',
               open='[[', close=']]'),
    passthrough_rule('url', URL_PATTERN),
    InlineRule(kind='code',
               pattern=r'(?P<code>(?<!\w)~(?P<code_body>[^\s~](?:.*?[^\s~])?)~(?!\w))',
               open='~', close='~', target_open='{{', target_close='}}',
               verbatim=True),
    InlineRule(kind='verbatim',
               pattern=r'(?P<verbatim>(?<!\w)=(?P<verbatim_body>[^\s=](?:.*?[^\s=])?)=(?!\w))',
               open='=', close='=', target_open='{{', target_close='}}',
               verbatim=True),
    emphasis_rule('bold', '*', '*'),
    emphasis_rule('italic', '/', '_'),
    emphasis_rule('underline', '_', '+'),
    emphasis_rule('strikethrough', '+', '-'),
]


class InlineConverter:
    """
    Applies one direction's rule table to single lines of text

    Links, URLs and code spans are found first. Emphasis rules then run over
    the line with those spans masked out, so an emphasis delimiter can wrap a
    code span but never open or close inside one.
    """

    def __init__(self, rules: List[InlineRule]):
        self.rules = rules
        self.protected_rules = [rule for rule in rules if rule.protected]
        self.emphasis_rules = [rule for rule in rules if not rule.protected]
        self.protected_pattern = re.compile('|'.join(rule.pattern for rule in self.protected_rules))
        self.emphasis_pattern = re.compile('|'.join(rule.pattern for rule in self.emphasis_rules))

    def _rule_for(self, match: re.Match, rules: List[InlineRule]) -> InlineRule:
        for rule in rules:
            if match.group(rule.kind) is not None:
                return rule
        raise LookupError(f"No inline rule matched {match.group(0)!r}")

    def _span(self, rule: InlineRule, match: re.Match, text: str) -> InlineSpan:
        body = f"{rule.kind}_body"
        span = InlineSpan(
            kind=rule.kind,
            open=rule.open,
            close=rule.close,
            content=text[match.start(body):match.end(body)],
            start=match.start(),
            end=match.end(),
        )
        if rule.kind == 'link':
            span.url = span.content
            span.content = match.group('link_desc') or span.url
        return span

    def tokenize(self, text: str) -> List[Union[str, InlineSpan]]:
        """
        Split a line into literal text and top-level matched spans

        Args:
            text: Single line of source markup

        Returns:
            List of plain strings and InlineSpan objects in source order
        """
        protected = [self._span(self._rule_for(match, self.protected_rules), match, text)
                     for match in self.protected_pattern.finditer(text)]

        # Same-length mask keeps emphasis match offsets valid in the source line
        masked = text
        for span in protected:
            masked = masked[:span.start] + MASK * (span.end - span.start) + masked[span.end:]

        emphasis = [self._span(self._rule_for(match, self.emphasis_rules), match, text)
                    for match in self.emphasis_pattern.finditer(masked)]

        spans = emphasis + [
            span for span in protected
            if not any(outer.start <= span.start and span.end <= outer.end for outer in emphasis)
        ]
        spans.sort(key=lambda span: span.start)

        tokens: List[Union[str, InlineSpan]] = []
        position = 0
        for span in spans:
            if span.start > position:
                tokens.append(text[position:span.start])
            tokens.append(span)
            position = span.end

        if position < len(text):
            tokens.append(text[position:])
        return tokens

    def spans(self, text: str) -> List[InlineSpan]:
        """Return only the matched spans of a line"""
        return [token for token in self.tokenize(text)
                if isinstance(token, InlineSpan)]

    def render_span(self, span: InlineSpan) -> str:
        rule = next(rule for rule in self.rules if rule.kind == span.kind)
        if rule.passthrough:
            return span.content
        if span.kind == 'link':
            if span.content == span.url:
                return f"[{span.url}]"
            return f"[{self.convert(span.content)}|{span.url}]"
        if rule.verbatim:
            return f"{rule.target_open}{span.content}{rule.target_close}"
        # Nested emphasis is converted from the source text, never from output
        return f"{rule.target_open}{self.convert(span.content)}{rule.target_close}"

    def convert(self, text: str) -> str:
        """
        Convert the inline markup of a single line

        Args:
            text: Line of source markup

        Returns:
            Line in the target dialect; unmatched delimiters stay literal
        """
        if not text:
            return text
        parts = []
        for token in self.tokenize(text):
            if isinstance(token, InlineSpan):
                parts.append(self.render_span(token))
            else:
                parts.append(token)
        return ''.join(parts)


jira_to_org_inline = InlineConverter(JIRA_TO_ORG_RULES)
org_to_jira_inline = InlineConverter(ORG_TO_JIRA_RULES)


def convert_inline_jira_to_org(text: str) -> str:
    """Convert Jira inline formatting of one line to Org"""
    return jira_to_org_inline.convert(text)


def convert_inline_org_to_jira(text: str) -> str:
    """Convert Org inline formatting and links of one line to Jira"""
    return org_to_jira_inline.convert(text)
