from enum import Enum
from typing import Iterable, List, Optional

from apilisting.declarations import DeclarationRenderer
from apilisting.logger import logger
from apilisting.models import APIListing, ChildItem, TypeKind
from apilisting.navigation import NavigationTree
from apilisting.parsers import ParsedFile, ParsedType
from apilisting.registry import KnownTypeRegistry, RegistryBuilder
from apilisting.tokens import TokenBuffer
from apilisting.typerender import TypeRenderer


class AnalyserState(str, Enum):
    IDLE = "idle"
    BUILDING_REGISTRY = "building_registry"
    RENDERING = "rendering"
    DONE = "done"


class ASTAnalyser:
    """
    Two-phase walk over parsed files.

    The registry phase sees every file before the rendering phase starts, so
    a type used in one file links to its declaration in any other file.
    Rendering visits files by path and types in source order; inside a type
    the order is header, enum constants, fields, constructors, methods,
    nested types, closing brace.

    An analyser instance produces exactly one listing.
    """

    def __init__(self, indent_width: int = 4) -> None:
        self.indent_width = indent_width
        self.state = AnalyserState.IDLE
        self.registry: Optional[KnownTypeRegistry] = None

    def analyse(self, name: str, parsed_files: Iterable[ParsedFile]) -> APIListing:
        if self.state is not AnalyserState.IDLE:
            raise RuntimeError(f"Analyser already used (state: {self.state.value})")

        files: List[ParsedFile] = sorted(parsed_files, key=lambda f: f.path)

        self.state = AnalyserState.BUILDING_REGISTRY
        builder = RegistryBuilder().add_files(files)
        self.registry = builder.build()
        navigation = NavigationTree(builder.build_package_nodes())
        logger.debug(
            "Known type registry built",
            types=len(self.registry),
            packages=len(builder.package_names),
            collisions=len(self.registry.collisions),
        )

        self.state = AnalyserState.RENDERING
        listing = APIListing(name=name)
        tokens = TokenBuffer(listing.tokens, indent_width=self.indent_width)
        renderer = DeclarationRenderer(TypeRenderer(self.registry), navigation)
        for parsed_file in files:
            for decl in parsed_file.types:
                self._visit_type(
                    renderer, decl, tokens, 0, navigation.package(decl.package)
                )

        for root in navigation.roots():
            if root.child_items:
                listing.add_child_item(root)

        self.state = AnalyserState.DONE
        logger.debug(
            "API listing rendered",
            name=name,
            files=len(files),
            tokens=len(listing.tokens),
        )
        return listing

    def _visit_type(
        self,
        renderer: DeclarationRenderer,
        decl: ParsedType,
        tokens: TokenBuffer,
        depth: int,
        nav_parent: ChildItem,
    ) -> None:
        nav_node = renderer.render_type_header(decl, tokens, depth, nav_parent)
        if nav_node is None:
            # hidden type: nothing below it is part of the API either
            return

        member_depth = depth + 1
        if decl.kind == TypeKind.ENUM:
            renderer.render_enum_constants(decl.enum_constants, tokens, member_depth)
        for field in decl.fields:
            renderer.render_field(field, tokens, member_depth)
        for ctor in decl.constructors:
            renderer.render_constructor(ctor, decl, tokens, member_depth)
        for method in decl.methods:
            renderer.render_method(method, decl, tokens, member_depth)
        for nested in decl.nested_types:
            self._visit_type(renderer, nested, tokens, member_depth, nav_node)

        renderer.render_type_closing(tokens, depth)
