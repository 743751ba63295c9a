"""Table of contents built from a page's level >= 2 headings."""

import html
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class TocItem:
    """
    One heading in the table of contents.

    Attributes:
        title: Heading text
        id: Anchor id assigned by AssignHeaderId
        level: Heading level minus one (h2 -> 1, h3 -> 2, ...)
    """

    title: str
    id: str
    level: int


@dataclass
class Toc:
    """Ordered outline of headings, rendered as nested lists."""

    items: List[TocItem] = field(default_factory=list)

    def add_item(self, title: str, id: str, level: int) -> None:
        self.items.append(TocItem(title=title, id=id, level=level))

    def is_empty(self) -> bool:
        return not self.items

    def to_html(self) -> str:
        """
        Render the outline as nested <ul> lists.

        Opens one list per level step down, closes one per level step up, and
        separates siblings with </li><li>.
        """
        parts: List[str] = []
        prev_level = 0

        for item in self.items:
            parts.extend("<ul><li>" for _ in range(prev_level, item.level))
            parts.extend("</li></ul>" for _ in range(item.level, prev_level))
            if item.level <= prev_level:
                parts.append("</li><li>")

            parts.append(f'<a href="#{html.escape(item.id)}">{html.escape(item.title)}</a>')
            prev_level = item.level

        parts.extend("</li></ul>" for _ in range(prev_level))
        return "".join(parts)
