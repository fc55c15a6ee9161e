"""Front-matter parsing for content documents."""

from __future__ import annotations

FrontMatter = dict[str, str | list[str]]

_DELIMITER = "---"


def split_frontmatter(text: str) -> tuple[FrontMatter, str]:
    """Separate the front-matter block from the document body.

    The block must open on the very first line with ``---`` and close
    with another ``---`` line. Anything else (including an unterminated
    block) is treated as having no front-matter.

    Returns:
        The parsed front-matter and the remaining body text.
    """
    text = text.removeprefix("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != _DELIMITER:
        return {}, text

    for i in range(1, len(lines)):
        if lines[i].strip() == _DELIMITER:
            raw = "".join(lines[1:i])
            body = "".join(lines[i + 1 :])
            return _parse_block(raw), body

    return {}, text


def parse_frontmatter(text: str) -> FrontMatter:
    """Extract front-matter key/values from a document."""
    fm, _ = split_frontmatter(text)
    return fm


def as_list(value: str | list[str] | None) -> list[str]:
    """Normalize a front-matter value to a list of strings."""
    if value is None:
        return []
    if isinstance(value, list):
        return [v for v in value if v]
    return [value] if value else []


def as_bool(value: str | list[str] | None) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "on", "1")
    return False


def _parse_block(raw: str) -> FrontMatter:
    """Simple key-value parser for scalar values and YAML-style lists."""
    result: FrontMatter = {}
    current_key: str | None = None
    current_list: list[str] | None = None

    for line in raw.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue

        # List item under a key
        if line.lstrip().startswith("- ") and current_key is not None:
            if current_list is None:
                current_list = []
            current_list.append(_unquote(line.strip().removeprefix("- ")))
            continue

        # Flush previous list
        if current_list is not None and current_key is not None:
            result[current_key] = current_list
        current_list = None
        current_key = None

        if ":" not in line:
            continue

        key, _, value = line.partition(":")
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if not value:
            # Might be a list header
            current_key = key
        elif value.startswith("[") and value.endswith("]"):
            items = [_unquote(v.strip()) for v in value[1:-1].split(",")]
            result[key] = [v for v in items if v]
        else:
            result[key] = _unquote(value)

    # Flush trailing list
    if current_list is not None and current_key is not None:
        result[current_key] = current_list

    return result


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value
