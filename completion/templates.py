"""
Structured snippet templates.

A snippet string such as ``frac{${1:num}}{${2}}$0`` is split into literal
segments interleaved with placeholder slots, so wrapping a selection is an
operation on slots instead of regex surgery on the raw string.
"""

import re
from dataclasses import dataclass
from typing import List, Pattern, Union

# ${1}, ${1:label} (braced) or $1 (bare)
PLACEHOLDER_RE: Pattern[str] = re.compile(r"\$\{(\d+):?([^}]*)\}|\$(\d+)")

ESCAPED_BACKSLASH = "\\\\"


@dataclass(frozen=True)
class Placeholder:
    """One placeholder slot of a snippet template."""

    index: int
    default: str = ""
    braced: bool = True


Segment = Union[str, Placeholder]


def unescape_first_backslash(text: str) -> str:
    """Collapse the first doubled backslash to a single one."""
    return text.replace(ESCAPED_BACKSLASH, "\\", 1)


class SnippetTemplate:
    """A snippet parsed into literal text and placeholder slots."""

    def __init__(self, segments: List[Segment]):
        self.segments = segments

    @classmethod
    def parse(cls, text: str) -> "SnippetTemplate":
        """Split ``text`` into literal segments and placeholders."""
        segments: List[Segment] = []
        position = 0
        for match in PLACEHOLDER_RE.finditer(text):
            if match.start() > position:
                segments.append(text[position:match.start()])
            if match.group(1) is not None:
                segments.append(Placeholder(int(match.group(1)), match.group(2)))
            else:
                segments.append(Placeholder(int(match.group(3)), braced=False))
            position = match.end()
        if position < len(text):
            segments.append(text[position:])
        return cls(segments)

    @property
    def placeholders(self) -> List[Placeholder]:
        return [segment for segment in self.segments if isinstance(segment, Placeholder)]

    def has_braced_placeholder(self) -> bool:
        """True if the template takes an argument (``${N...}`` syntax)."""
        return any(placeholder.braced for placeholder in self.placeholders)

    def render_wrapped(self, content: str) -> str:
        """Render the template with ``content`` in its first braced slot.

        Remaining braced slots keep only their default label, bare ``$N``
        markers are dropped and the first doubled backslash of the literal
        text is unescaped. ``content`` itself is inserted verbatim.
        """
        parts: List[str] = []
        filled = False
        unescaped = False
        for segment in self.segments:
            if isinstance(segment, Placeholder):
                if segment.braced and not filled:
                    parts.append(content)
                    filled = True
                elif segment.braced:
                    parts.append(segment.default)
                continue
            if not unescaped and ESCAPED_BACKSLASH in segment:
                segment = unescape_first_backslash(segment)
                unescaped = True
            parts.append(segment)
        return "".join(parts)

    def __str__(self) -> str:
        parts = []
        for segment in self.segments:
            if isinstance(segment, Placeholder):
                if not segment.braced:
                    parts.append(f"${segment.index}")
                elif segment.default:
                    parts.append(f"${{{segment.index}:{segment.default}}}")
                else:
                    parts.append(f"${{{segment.index}}}")
            else:
                parts.append(segment)
        return "".join(parts)
