"""YAML frontmatter for converted markdown documents."""

import datetime
from typing import Any, Dict, Optional

import yaml


def build_frontmatter_data(
    title: str,
    source: str,
    content_type: str,
    extra: Optional[Dict[str, Any]] = None,
    date: Optional[datetime.date] = None,
) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "title": title,
        "source": source,
        "date": (date or datetime.date.today()).isoformat(),
        "type": content_type,
    }
    data.update(extra or {})
    return data


def add_frontmatter(content: str, data: Dict[str, Any]) -> str:
    """Prefix markdown with a `---` delimited YAML block.

    A block already at the top of `content` is merged rather than stacked;
    keys in `data` win.
    """
    existing, body = parse_frontmatter(content)
    merged = {**existing, **data}
    header = yaml.safe_dump(merged, sort_keys=False, allow_unicode=True, default_flow_style=False)
    body = body if body.endswith("\n") else body + "\n"
    return f"---\n{header}---\n{body}"


def parse_frontmatter(document: str) -> tuple[Dict[str, Any], str]:
    """Split a document into (frontmatter data, body). Documents without a block return ({}, document)."""
    if not document.startswith("---\n"):
        return {}, document
    end = document.find("\n---\n", 4)
    if end == -1:
        return {}, document
    data = yaml.safe_load(document[4:end + 1]) or {}
    return data, document[end + 5:]
