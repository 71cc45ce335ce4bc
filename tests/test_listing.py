import pytest
import zipfile
from pathlib import Path

from apilisting.listing import generate_listing
from apilisting.output import render_text
from apilisting.settings import ListingSettings

SAMPLES_DIR = Path(__file__).parent / "lang" / "java" / "samples"


# Tests
def test_generate_listing_from_directory():
    result = generate_listing(ListingSettings(source_path=str(SAMPLES_DIR)))

    assert result.listing.name == "samples"
    assert result.scan.failed == []
    assert [f.path for f in result.scan.parsed][0] == "com/example/api/Customer.java"
    assert "public class Person {" in render_text(result.listing)


def test_generate_listing_from_jar(tmp_path: Path):
    jar = tmp_path / "acme-1.0-sources.jar"
    with zipfile.ZipFile(jar, "w") as zf:
        zf.writestr("com/acme/Api.java", "package com.acme;\npublic class Api {\n    public Api() { }\n}\n")
        zf.writestr("com/acme/Broken.java", "package com.acme;\npublic class Broken {\n")

    result = generate_listing(ListingSettings(review_name="acme"), source=jar)

    assert result.listing.name == "acme"
    assert result.scan.failed == ["com/acme/Broken.java"]
    assert render_text(result.listing) == "public class Api {\n    public Api() { }\n}"


def test_generate_listing_extra_extensions(tmp_path: Path):
    (tmp_path / "Legacy.jav").write_text("public class Legacy { }\n", encoding="utf-8")
    settings = ListingSettings(languages={"java": {"extra_extensions": [".jav"]}})

    result = generate_listing(settings, source=tmp_path)
    assert [p.text for p in result.listing.navigation] == ["(default package)"]


def test_generate_listing_requires_source():
    with pytest.raises(ValueError):
        generate_listing(ListingSettings())
