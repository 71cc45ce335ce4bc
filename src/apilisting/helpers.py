import re
from pathlib import Path
from typing import Iterable

import pathspec

_WHITESPACE_RE = re.compile(r"\s+")


def make_id(text: str) -> str:
    """
    Return the stable identifier for *text*: every whitespace run becomes a
    single ``-``. Used for type ids (fully qualified names) and for callable
    definition ids (normalized signatures).
    """
    return _WHITESPACE_RE.sub("-", text.strip())


def normalize_text(text: str) -> str:
    """Collapse whitespace runs inside source snippets to single spaces."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def empty_spec() -> pathspec.PathSpec:
    return pathspec.PathSpec.from_lines("gitwildmatch", [])


def build_spec(patterns: Iterable[str]) -> pathspec.PathSpec:
    return pathspec.PathSpec.from_lines("gitwildmatch", list(patterns))


def parse_gitignore(gitignore_path: str | Path, root_dir: str | Path) -> pathspec.PathSpec:
    """
    Parse the .gitignore at *gitignore_path* into a PathSpec whose patterns are
    relative to *root_dir*, so nested .gitignore files keep their scope:
      - '/pat'      -> '<subdir>/pat'
      - 'pat'       -> '<subdir>/**/pat'
      - 'dir/pat'   -> '<subdir>/dir/pat'
    Negations are preserved.
    """
    gitignore_file = Path(gitignore_path)
    if not gitignore_file.is_file():
        return empty_spec()

    base = gitignore_file.parent.resolve()
    try:
        rel_dir = base.relative_to(Path(root_dir).resolve()).as_posix()
    except ValueError:
        return empty_spec()
    prefix = "" if rel_dir in ("", ".") else f"{rel_dir}/"

    def _rewrite(pat: str) -> str:
        pat = pat.replace("\\", "/")
        if pat.startswith("/"):
            return prefix + pat.lstrip("/")
        if "/" in pat.rstrip("/"):
            return prefix + pat
        return f"{prefix}**/{pat}" if prefix else pat

    lines: list[str] = []
    for raw in gitignore_file.read_text(encoding="utf-8", errors="replace").splitlines():
        raw = raw.rstrip()
        if not raw or raw.lstrip().startswith("#"):
            continue
        if raw.startswith("!"):
            lines.append("!" + _rewrite(raw[1:]))
        else:
            lines.append(_rewrite(raw))

    return build_spec(lines)
