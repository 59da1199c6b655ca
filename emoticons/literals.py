"""Literal span protection — keep backtick-fenced text away from emoji rewriting.

Chat users write `code` and ```blocks``` that must reach the reader exactly
as typed. Text is split into spans; fenced spans carry a protected kind and
are skipped by every rewrite step, then restored with their original
delimiters.

Handles:
- `inline` → <pre class="rtf-single">inline</pre>
- ```block``` → <pre class="rtf-multi">block</pre>
- <pre>...</pre> blocks produced by earlier filters are kept verbatim

A fence only opens at the start of the text or after whitespace. Unterminated
fences simply do not match and stay as they are.
"""

import html as _html
import re
from dataclasses import dataclass


TEXT = "text"        # plain text, still subject to rewriting
MARKUP = "markup"    # already rendered markup, never rescanned
SINGLE = "single"    # `...` literal
MULTI = "multi"      # ```...``` literal
PRE = "pre"          # <pre>...</pre> block from earlier filters, kept verbatim

_FENCES = {SINGLE: "`", MULTI: "```"}

_SINGLE_RE = re.compile(r'(?:^|(?<=\s))`([^`\n]+)`')
_MULTI_RE = re.compile(r'(?:^|(?<=\s))```([^`]+)```')
_PRE_RE = re.compile(r"(<pre\b[^>]*>.*?</pre>)", re.DOTALL | re.IGNORECASE)

_MASKED_RE = re.compile(r'(?:^|(?<=\s))<pre class="rtf-(single|multi)">(.*?)</pre>', re.DOTALL)


@dataclass(frozen=True)
class Span:
    text: str
    kind: str = TEXT

    @property
    def protected(self) -> bool:
        return self.kind in _FENCES or self.kind == PRE

    def render(self) -> str:
        """Final form, with backtick delimiters restored for literals."""
        if self.kind in _FENCES:
            fence = _FENCES[self.kind]
            return f"{fence}{self.text}{fence}"
        return self.text

    def masked(self) -> str:
        """Intermediate form, with literals wrapped in their marker container.

        Literal content is HTML-escaped so a pasted </pre> cannot close the
        container early.
        """
        if self.kind in _FENCES:
            return f'<pre class="rtf-{self.kind}">{_html.escape(self.text, quote=False)}</pre>'
        return self.text


def _split(text: str, pattern: re.Pattern, kind: str, at_start: bool) -> list[Span]:
    # A piece that does not begin the message is preceded by a literal span,
    # so '^' must not match at its first character.
    haystack = text if at_start else "\x00" + text
    offset = 0 if at_start else 1

    spans = []
    last_end = offset
    for match in pattern.finditer(haystack):
        if match.start() > last_end:
            spans.append(Span(haystack[last_end:match.start()]))
        spans.append(Span(match.group(1), kind))
        last_end = match.end()
    if last_end < len(haystack):
        spans.append(Span(haystack[last_end:]))
    return spans


def split_literals(text: str) -> list[Span]:
    """Split text into plain and protected spans.

    <pre> blocks already present in the HTML are taken out first, then
    single-backtick spans, then triple-backtick spans in whatever plain text
    remains.
    """
    if not text:
        return []

    spans = [Span(text)]
    for pattern, kind in ((_PRE_RE, PRE), (_SINGLE_RE, SINGLE), (_MULTI_RE, MULTI)):
        pieces = []
        for i, span in enumerate(spans):
            if span.protected:
                pieces.append(span)
            else:
                pieces.extend(_split(span.text, pattern, kind, at_start=(i == 0)))
        spans = pieces
    return spans


def join_spans(spans: list[Span]) -> str:
    return "".join(span.render() for span in spans)


def mask(text: str) -> str:
    """Replace fenced literals with their <pre class="rtf-*"> containers."""
    return "".join(span.masked() for span in split_literals(text))


def unmask(text: str) -> str:
    """Turn <pre class="rtf-*"> containers back into backtick fences."""
    def _restore(match: re.Match) -> str:
        fence = _FENCES[match.group(1)]
        return f"{fence}{_html.unescape(match.group(2))}{fence}"

    return _MASKED_RE.sub(_restore, text)
