"""
Front Matter Parsing

Parses the YAML block at the top of a Markdown page into a FrontMatter record
and merges it into the rendering context.

Example front matter:

    ---
    create: 2024-01-05
    update: 2024-02-10
    tags: [python, notes]
    flags: [crypto]
    password: hunter2
    highlights:
      - delim: ["\\\\[\\\\[", "\\\\]\\\\]"]
        style: "color: red"
    ---
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import yaml

from marksite.contexts.rendering.context import Flag, HighlightRule, RenderingContext
from marksite.contexts.rendering.exceptions import HeaderParseError

# Singular spellings accepted for list-valued keys
KEY_ALIASES = {
    "tag": "tags",
    "flag": "flags",
    "highlight": "highlights",
}


@dataclass
class FrontMatter:
    """
    Parsed front matter of one page.

    Attributes:
        create_date: Creation date (YYYY-MM-DD)
        last_update_date: Last update date (YYYY-MM-DD)
        tags: Page tags
        flags: Publication flags
        password: Page-level password for crypto pages
        highlights: Code highlight rules, applied in order
    """

    create_date: str
    last_update_date: str
    tags: List[str] = field(default_factory=list)
    flags: List[Flag] = field(default_factory=list)
    password: Optional[str] = None
    highlights: List[HighlightRule] = field(default_factory=list)

    def merge_into(self, ctx: RenderingContext) -> None:
        ctx.create_date = self.create_date
        ctx.last_update_date = self.last_update_date
        ctx.tags = list(self.tags)
        ctx.flags = list(self.flags)
        ctx.highlights = list(self.highlights)
        if self.password is not None:
            ctx.password = self.password


def _format_date(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _parse_flags(raw: Any, header: str) -> List[Flag]:
    flags = []
    for item in _as_list(raw):
        try:
            flags.append(Flag(str(item).lower()))
        except ValueError as e:
            allowed = ", ".join(f.value for f in Flag)
            raise HeaderParseError(
                f"Unknown flag '{item}' (allowed: {allowed})", header_snippet=header
            ) from e
    return flags


def _parse_highlights(raw: Any, header: str) -> List[HighlightRule]:
    rules = []
    for item in _as_list(raw):
        if not isinstance(item, dict) or "delim" not in item or "style" not in item:
            raise HeaderParseError(
                "Highlight rules need 'delim' and 'style' keys", header_snippet=header
            )
        delim = item["delim"]
        if not isinstance(delim, list) or len(delim) != 2 or not all(delim):
            raise HeaderParseError(
                f"Highlight 'delim' must be a pair of non-empty strings, got: {delim!r}",
                header_snippet=header,
            )
        rule = HighlightRule(delim=(str(delim[0]), str(delim[1])), style=str(item["style"]))
        try:
            rule.pattern
        except re.error as e:
            raise HeaderParseError(
                f"Highlight 'delim' is not a valid regular expression pair: {delim!r}",
                header_snippet=header,
                original_error=e,
            ) from e
        rules.append(rule)
    return rules


def parse_front_matter(header: str) -> FrontMatter:
    """
    Parse front matter YAML text.

    Args:
        header: Text between the --- fences

    Returns:
        FrontMatter with defaults for the optional keys

    Raises:
        HeaderParseError: If the YAML is invalid, not a mapping, lacks create/update,
                          names an unknown flag, or holds a malformed highlight rule
    """
    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as e:
        raise HeaderParseError("Front matter is not valid YAML", header, original_error=e) from e

    if not isinstance(data, dict):
        raise HeaderParseError("Front matter must be a mapping", header_snippet=header)

    data: Dict[str, Any] = {KEY_ALIASES.get(key, key): value for key, value in data.items()}

    missing = [key for key in ("create", "update") if data.get(key) is None]
    if missing:
        raise HeaderParseError(
            f"Front matter is missing required keys: {', '.join(missing)}", header_snippet=header
        )

    password = data.get("password")

    return FrontMatter(
        create_date=_format_date(data["create"]),
        last_update_date=_format_date(data["update"]),
        tags=[str(tag) for tag in _as_list(data.get("tags"))],
        flags=_parse_flags(data.get("flags"), header),
        password=str(password) if password is not None else None,
        highlights=_parse_highlights(data.get("highlights"), header),
    )
