import json
from pathlib import Path

from apilisting.models import APIListing, ChildItem, Token, TokenKind, TypeKind
from apilisting.output import render_text, to_json, write_json


# Helpers
def _listing() -> APIListing:
    listing = APIListing(name="demo")
    listing.tokens.extend(
        [
            Token(kind=TokenKind.KEYWORD, value="class"),
            Token(kind=TokenKind.WHITESPACE, value=" "),
            Token(kind=TokenKind.TYPE_NAME, value="Demo", navigate_to_id="pkg.Demo"),
            Token(kind=TokenKind.WHITESPACE, value=" "),
            Token(kind=TokenKind.PUNCTUATION, value="{"),
            Token(kind=TokenKind.NEW_LINE, value=""),
            Token(kind=TokenKind.PUNCTUATION, value="}"),
            Token(kind=TokenKind.NEW_LINE, value=""),
        ]
    )
    package = ChildItem(id="pkg", text="pkg", kind=TypeKind.PACKAGE)
    package.add_child_item(ChildItem(id="pkg.Demo", text="Demo", kind=TypeKind.CLASS))
    listing.add_child_item(package)
    return listing


# Tests
def test_to_json_uses_camel_case_keys():
    data = json.loads(to_json(_listing()))

    assert data["name"] == "demo"
    assert data["tokens"][0] == {"kind": "Keyword", "value": "class"}
    assert data["tokens"][2] == {
        "kind": "TypeName",
        "value": "Demo",
        "navigateToId": "pkg.Demo",
    }
    assert data["navigation"] == [
        {
            "id": "pkg",
            "text": "pkg",
            "kind": "package",
            "childItems": [
                {"id": "pkg.Demo", "text": "Demo", "kind": "class", "childItems": []}
            ],
        }
    ]


def test_json_round_trip():
    listing = _listing()
    restored = APIListing.model_validate_json(to_json(listing))
    assert restored == listing


def test_write_json_creates_directories(tmp_path: Path):
    out = write_json(_listing(), tmp_path / "nested" / "listing.json")
    assert out.is_file()
    assert json.loads(out.read_text(encoding="utf-8"))["name"] == "demo"


def test_render_text():
    assert render_text(_listing()) == "class Demo {\n}"
    assert render_text(APIListing(name="empty")) == ""
