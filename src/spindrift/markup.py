"""Lightweight inline markup to HTML.

Supports ``_emphasis_``, ``**strong**``, ``[links](href)`` and backtick code
spans. Every source line becomes one paragraph. Unmatched markup is left as
literal text; conversion never raises.
"""

from __future__ import annotations

import re

PARAGRAPH_TEMPLATE = '<p class="droplet-text">{}</p>\n'

EM_PATTERN = r"_(?P<em_text>.*?)_"
STRONG_PATTERN = r"\*\*(?P<strong_text>.*?)\*\*"
LINK_PATTERN = r"\[(?P<a_text>.*?)\]\((?P<a_href>.*?)\)"
# Opening and closing runs must be the same length and unescaped.
CODE_INLINE_PATTERN = r"(?<![\\`])(?P<ticks>`+)(?P<inline_pre>.+?)(?<![\\`])(?P=ticks)(?!`)"
ESCAPED_BACKTICK_PATTERN = r"\\`"


class MarkupConverter:
    """Converts markup documents to HTML paragraphs.

    Patterns are compiled once per instance, so a single converter can be
    shared across threads for a whole build.
    """

    def __init__(self) -> None:
        self._em = re.compile(EM_PATTERN)
        self._strong = re.compile(STRONG_PATTERN)
        self._link = re.compile(LINK_PATTERN)
        self._code = re.compile(CODE_INLINE_PATTERN)
        self._escaped_backtick = re.compile(ESCAPED_BACKTICK_PATTERN)

    def convert(self, raw: str) -> str:
        """Convert a markup document to HTML.

        Args:
            raw: The markup text. Surrounding whitespace is stripped before
                the document is split into lines.

        Returns:
            One ``<p>`` element per line, each followed by a newline. An
            empty document yields an empty string.
        """
        text = raw.strip()
        if not text:
            return ""
        return "".join(
            PARAGRAPH_TEMPLATE.format(self.convert_line(line)) for line in text.split("\n")
        )

    def convert_line(self, line: str) -> str:
        """Apply escaping and inline formatting to a single line."""
        # Ampersands first, otherwise the entities below get escaped twice.
        line = line.replace("&", "&amp;")
        line = line.replace(">", "&gt;")
        line = line.replace("<", "&lt;")

        line = self._em.sub(r"<em>\g<em_text></em>", line)
        line = self._strong.sub(r"<strong>\g<strong_text></strong>", line)
        line = self._link.sub(r'<a href="\g<a_href>">\g<a_text></a>', line)
        line = self._code.sub(r"<code>\g<inline_pre></code>", line)
        return self._escaped_backtick.sub("`", line)
