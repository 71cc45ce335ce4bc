from apilisting.analyser import ASTAnalyser
from apilisting.listing import ListingResult, generate_listing
from apilisting.models import APIListing, ChildItem, Token, TokenKind, TypeKind
from apilisting.output import render_text, to_json, write_json
from apilisting.settings import ListingSettings, load_settings

__all__ = [
    "APIListing",
    "ASTAnalyser",
    "ChildItem",
    "ListingResult",
    "ListingSettings",
    "Token",
    "TokenKind",
    "TypeKind",
    "generate_listing",
    "load_settings",
    "render_text",
    "to_json",
    "write_json",
]
