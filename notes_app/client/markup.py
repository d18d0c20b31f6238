"""
Lightweight markup detection and plain-text rendering.

Content is stored verbatim; only the presentation layer looks at markup.
"""

import re
from typing import List, Pattern

MARKUP_PATTERNS: List[Pattern[str]] = [
    re.compile(r"^#{1,6}\s", re.MULTILINE),   # headings
    re.compile(r"\*\*.*\*\*"),                # bold
    re.compile(r"\*.*\*"),                    # italic
    re.compile(r"`.*`"),                      # inline code
    re.compile(r"```[\s\S]*```"),             # fenced code block
    re.compile(r"^\s*[-*+]\s", re.MULTILINE), # bullet list
    re.compile(r"^\s*\d+\.\s", re.MULTILINE), # numbered list
    re.compile(r"\[.*\]\(.*\)"),              # link
    re.compile(r"^\s*>", re.MULTILINE),       # blockquote
]

_FENCE = re.compile(r"^[ \t]*```.*\n?", re.MULTILINE)
_HEADING = re.compile(r"^#{1,6}[ \t]+(.*)$", re.MULTILINE)
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"(?<![*\w])\*(?!\s)(.+?)(?<!\s)\*(?![*\w])")
_INLINE_CODE = re.compile(r"`([^`]+)`")
_LINK = re.compile(r"\[([^\]]*)\]\(([^)]*)\)")
_BULLET = re.compile(r"^([ \t]*)[-*+][ \t]+", re.MULTILINE)
_QUOTE = re.compile(r"^[ \t]*>[ \t]?", re.MULTILINE)


def has_markup_syntax(content: str) -> bool:
    """True when the content looks like it uses lightweight markup."""
    return any(pattern.search(content) for pattern in MARKUP_PATTERNS)


def render_markup(content: str) -> str:
    """
    Render markup as terminal-friendly plain text.

    Headings become upper case, emphasis and code markers are dropped,
    bullets become "•", quotes are indented with a bar and links read
    "text <url>". Numbered lists are left as they are.
    """
    text = _FENCE.sub("", content)
    text = _HEADING.sub(lambda m: m.group(1).upper(), text)
    text = _LINK.sub(lambda m: f"{m.group(1)} <{m.group(2)}>", text)
    text = _BOLD.sub(r"\1", text)
    text = _ITALIC.sub(r"\1", text)
    text = _INLINE_CODE.sub(r"\1", text)
    text = _BULLET.sub(r"\1• ", text)
    text = _QUOTE.sub("│ ", text)
    return text.strip("\n")
