import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Type

from apilisting.logger import logger
from apilisting.parsers import AbstractSourceParser, ParsedFile


class ProcessFileStatus(Enum):
    PARSED_FILE = "parsed_file"
    UNSUPPORTED = "unsupported"
    ERROR = "error"


@dataclass
class ProcessFileResult:
    status: ProcessFileStatus
    rel_path: str
    duration: float
    parsed_file: Optional[ParsedFile] = None
    exception: Optional[Exception] = None


@dataclass
class ScanResult:
    """Outcome of parsing a SourceSet; ``parsed`` is sorted by path."""

    parsed: list[ParsedFile] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    unsupported: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


def default_num_workers() -> int:
    cpus = os.cpu_count()
    return max(1, cpus - 1) if cpus else 4


def _process_file(
    root: Path, rel_path: str, parser_map: dict[str, Type[AbstractSourceParser]]
) -> ProcessFileResult:
    start = time.perf_counter()
    parser_cls = parser_map.get(os.path.splitext(rel_path)[1].lower())
    if parser_cls is None:
        return ProcessFileResult(
            status=ProcessFileStatus.UNSUPPORTED,
            rel_path=rel_path,
            duration=time.perf_counter() - start,
        )
    try:
        parsed_file = parser_cls(str(root), rel_path).parse()
    except Exception as exc:
        return ProcessFileResult(
            status=ProcessFileStatus.ERROR,
            rel_path=rel_path,
            duration=time.perf_counter() - start,
            exception=exc,
        )
    return ProcessFileResult(
        status=ProcessFileStatus.PARSED_FILE,
        rel_path=rel_path,
        duration=time.perf_counter() - start,
        parsed_file=parsed_file,
    )


def scan_sources(
    root: Path,
    rel_paths: list[str],
    parser_map: dict[str, Type[AbstractSourceParser]],
    num_workers: Optional[int] = None,
) -> ScanResult:
    """
    Parse every file in *rel_paths* on a thread pool. Files are independent:
    a file that fails to parse is logged and skipped, the rest still count.
    """
    start_time = time.perf_counter()
    result = ScanResult()
    workers = num_workers or default_num_workers()
    logger.debug("number of workers", count=workers, files=len(rel_paths))

    parsed: list[ParsedFile] = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(_process_file, root, rel_path, parser_map)
            for rel_path in rel_paths
        ]
        for future in as_completed(futures):
            res = future.result()
            if res.status is ProcessFileStatus.PARSED_FILE and res.parsed_file is not None:
                parsed.append(res.parsed_file)
            elif res.status is ProcessFileStatus.UNSUPPORTED:
                result.unsupported.append(res.rel_path)
            else:
                line = getattr(res.exception, "line", None)
                logger.warning(
                    "Failed to parse file; skipped",
                    path=res.rel_path,
                    line=line,
                    error=str(res.exception),
                )
                result.failed.append(res.rel_path)

    # completion order is not deterministic
    result.parsed = sorted(parsed, key=lambda f: f.path)
    result.failed.sort()
    result.unsupported.sort()
    result.elapsed_seconds = time.perf_counter() - start_time
    logger.debug(
        "scan finished",
        parsed=len(result.parsed),
        failed=len(result.failed),
        elapsed=round(result.elapsed_seconds, 3),
    )
    return result
