import os
import shutil
import tempfile
import zipfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

import pathspec

from apilisting.helpers import build_spec, empty_spec, parse_gitignore
from apilisting.logger import logger
from apilisting.settings import ListingSettings

ARCHIVE_SUFFIXES = (".jar", ".zip")


@dataclass
class SourceSet:
    """Files to analyse: paths are relative to *root* and "/" separated."""

    root: Path
    paths: list[str] = field(default_factory=list)


def extract_archive(archive: Path, dest: Path) -> None:
    """
    Extract *archive* into *dest*, entries sorted by name. Entries that would
    land outside *dest* are skipped.
    """
    dest = dest.resolve()
    dest.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive) as zf:
        for info in sorted(zf.infolist(), key=lambda i: i.filename):
            target = (dest / info.filename).resolve()
            if target != dest and dest not in target.parents:
                logger.warning(
                    "Skipping archive entry outside destination",
                    archive=str(archive),
                    entry=info.filename,
                )
                continue
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, open(target, "wb") as out:
                shutil.copyfileobj(src, out)


def _gitignore_spec(root: Path, dirs: Iterable[Path]) -> pathspec.PathSpec:
    spec = empty_spec()
    for directory in dirs:
        gi_path = directory / ".gitignore"
        if gi_path.is_file():
            try:
                spec = spec + parse_gitignore(gi_path, root_dir=root)
            except OSError as exc:
                logger.warning("Failed to read .gitignore", path=str(gi_path), exc=exc)
    return spec


def is_excluded(rel_path: str, settings: ListingSettings) -> bool:
    """Path-based filters that do not need the file system."""
    parts = rel_path.split("/")
    if parts[-1] in settings.excluded_file_names:
        return True
    if any(part in settings.ignored_dirs for part in parts[:-1]):
        return True
    return any(fragment in rel_path for fragment in settings.excluded_path_fragments)


def collect_source_files(
    root: Path,
    settings: ListingSettings,
    extensions: Iterable[str],
) -> list[str]:
    """
    Walk *root* iteratively and return the sorted relative paths of every
    file with one of *extensions* that survives the configured filters.
    .gitignore files are applied to the directory they live in and below.
    """
    root = root.resolve()
    suffixes = {ext.lower() for ext in extensions}
    extra_spec = build_spec(settings.exclude_patterns)

    found: list[str] = []
    # Stack elements: (abs_dir, effective gitignore spec)
    stack: list[Tuple[Path, pathspec.PathSpec]] = [(root, empty_spec())]
    while stack:
        directory, parent_spec = stack.pop()
        spec = parent_spec
        if settings.respect_gitignore:
            spec = parent_spec + _gitignore_spec(root, [directory])

        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as exc:
            logger.warning("Unable to list directory", path=str(directory), exc=exc)
            continue

        for entry in entries:
            rel_path = Path(entry.path).relative_to(root).as_posix()
            if entry.is_dir(follow_symlinks=False):
                if entry.name in settings.ignored_dirs:
                    continue
                if spec.match_file(rel_path + "/") or extra_spec.match_file(rel_path + "/"):
                    continue
                stack.append((Path(entry.path), spec))
                continue
            if not entry.is_file():
                continue
            if os.path.splitext(entry.name)[1].lower() not in suffixes:
                continue
            if is_excluded(rel_path, settings):
                continue
            if spec.match_file(rel_path) or extra_spec.match_file(rel_path):
                continue
            found.append(rel_path)

    return sorted(found)


@contextmanager
def open_sources(
    source: Path,
    settings: ListingSettings,
    extensions: Iterable[str],
    workdir: Optional[Path] = None,
) -> Iterator[SourceSet]:
    """
    Yield the SourceSet for *source*: a directory, a single source file or a
    sources archive. Archives are extracted into a temporary directory that
    is removed when the context exits.
    """
    source = Path(source)
    extensions = list(extensions)
    if not source.exists():
        raise ValueError(f"Source path does not exist: {source}")

    if source.is_dir():
        yield SourceSet(root=source.resolve(), paths=collect_source_files(source, settings, extensions))
        return

    suffix = source.suffix.lower()
    if suffix in ARCHIVE_SUFFIXES:
        with tempfile.TemporaryDirectory(prefix="apilisting-", dir=workdir) as tmp:
            tmp_root = Path(tmp)
            logger.debug("Extracting sources archive", archive=str(source), dest=tmp)
            extract_archive(source, tmp_root)
            yield SourceSet(
                root=tmp_root.resolve(),
                paths=collect_source_files(tmp_root, settings, extensions),
            )
        return

    if suffix in {ext.lower() for ext in extensions}:
        yield SourceSet(root=source.parent.resolve(), paths=[source.name])
        return

    raise ValueError(f"Unsupported source: {source} (expected a directory, source file or .jar/.zip)")
