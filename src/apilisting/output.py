from pathlib import Path

from apilisting.models import APIListing, TokenKind


def to_json(listing: APIListing, indent: int = 2) -> str:
    """Serialize *listing* with camelCase keys; unset link ids are omitted."""
    return listing.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


def write_json(listing: APIListing, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(to_json(listing) + "\n", encoding="utf-8")
    return out


def render_text(listing: APIListing) -> str:
    """
    Source-like text of the listing: token values concatenated, with a line
    break for every NewLine token.
    """
    lines: list[str] = []
    current: list[str] = []
    for token in listing.tokens:
        if token.kind == TokenKind.NEW_LINE:
            lines.append("".join(current))
            current = []
        else:
            current.append(token.value)
    if current:
        lines.append("".join(current))
    return "\n".join(lines)
