from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import apilisting.lang  # noqa: F401  (registers parsers)
from apilisting.analyser import ASTAnalyser
from apilisting.discovery import open_sources
from apilisting.logger import logger
from apilisting.models import APIListing
from apilisting.parsers import SourceParserRegistry
from apilisting.scanner import ScanResult, scan_sources
from apilisting.settings import ListingSettings


@dataclass
class ListingResult:
    listing: APIListing
    scan: ScanResult


def generate_listing(
    settings: ListingSettings, source: Optional[str | Path] = None
) -> ListingResult:
    """
    Discover the sources under *source* (or ``settings.source_path``), parse
    them and render the API listing. The listing name defaults to the
    source's file or directory name.
    """
    source = source if source is not None else settings.source_path
    if not source:
        raise ValueError("A source path is required to generate a listing.")
    source = Path(source)
    name = settings.review_name or source.resolve().name

    extra_extensions = {
        lang: lang_settings.extra_extensions
        for lang, lang_settings in settings.languages.items()
    }
    parser_map = SourceParserRegistry.get_parser_map(extra_extensions)

    with open_sources(source, settings, parser_map.keys()) as sources:
        logger.info("Parsing sources", source=str(source), files=len(sources.paths))
        scan = scan_sources(
            sources.root, sources.paths, parser_map, num_workers=settings.num_workers
        )

    listing = ASTAnalyser(indent_width=settings.indent_width).analyse(name, scan.parsed)
    logger.info(
        "API listing generated",
        name=name,
        files=len(scan.parsed),
        failed=len(scan.failed),
        tokens=len(listing.tokens),
    )
    return ListingResult(listing=listing, scan=scan)
