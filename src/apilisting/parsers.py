import inspect
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Type, Union

from apilisting.models import AccessLevel, TypeKind


class SourceParseError(Exception):
    """Raised when a source file cannot be turned into declarations."""

    def __init__(self, path: str, message: str, line: Optional[int] = None) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.line = line


# ---------------------------------------------------------------------------
# Type references
#
# A closed set of variants; every variant carries a ``kind`` tag that the
# type renderer dispatches on.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrimitiveTypeRef:
    kind: ClassVar[str] = "primitive"
    name: str


@dataclass(frozen=True)
class VoidTypeRef:
    kind: ClassVar[str] = "void"
    name: str = "void"


@dataclass(frozen=True)
class ReferenceTypeRef:
    kind: ClassVar[str] = "reference"
    name: str  # possibly qualified, e.g. "Map.Entry"
    arguments: tuple["TypeRef", ...] = ()


@dataclass(frozen=True)
class ArrayTypeRef:
    kind: ClassVar[str] = "array"
    element: "TypeRef"
    dimensions: int = 1


@dataclass(frozen=True)
class TypeParameterRef:
    kind: ClassVar[str] = "type_parameter"
    name: str
    bounds: tuple["TypeRef", ...] = ()


@dataclass(frozen=True)
class WildcardTypeRef:
    kind: ClassVar[str] = "wildcard"
    text: str  # "?", "? extends Number", ...


@dataclass(frozen=True)
class UnsupportedTypeRef:
    kind: ClassVar[str] = "unsupported"
    text: str
    node_type: str


TypeRef = Union[
    PrimitiveTypeRef,
    VoidTypeRef,
    ReferenceTypeRef,
    ArrayTypeRef,
    TypeParameterRef,
    WildcardTypeRef,
    UnsupportedTypeRef,
]


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass
class ParsedParameter:
    type: TypeRef
    name: str
    varargs: bool = False


@dataclass
class ParsedDeclarator:
    name: str
    initializer: Optional[str] = None
    initializer_is_string: bool = False


@dataclass
class ParsedField:
    access: AccessLevel
    type: TypeRef
    modifiers: List[str] = field(default_factory=list)
    declarators: List[ParsedDeclarator] = field(default_factory=list)


@dataclass
class ParsedCallable:
    """A constructor (``return_type is None``) or a method."""

    name: str
    access: AccessLevel
    signature: str  # whitespace-normalized declaration text, used for ids
    modifiers: List[str] = field(default_factory=list)
    type_parameters: List[TypeParameterRef] = field(default_factory=list)
    return_type: Optional[TypeRef] = None
    parameters: List[ParsedParameter] = field(default_factory=list)
    throws: List[TypeRef] = field(default_factory=list)

    @property
    def is_constructor(self) -> bool:
        return self.return_type is None


@dataclass
class ParsedEnumConstant:
    name: str
    arguments: Optional[str] = None  # argument text without the parentheses


@dataclass
class ParsedType:
    kind: TypeKind
    name: str
    fqn: str
    package: str
    access: AccessLevel
    modifiers: List[str] = field(default_factory=list)
    type_parameters: List[TypeParameterRef] = field(default_factory=list)
    extends: List[TypeRef] = field(default_factory=list)
    implements: List[TypeRef] = field(default_factory=list)
    enum_constants: List[ParsedEnumConstant] = field(default_factory=list)
    fields: List[ParsedField] = field(default_factory=list)
    constructors: List[ParsedCallable] = field(default_factory=list)
    methods: List[ParsedCallable] = field(default_factory=list)
    nested_types: List["ParsedType"] = field(default_factory=list)


@dataclass
class ParsedFile:
    path: str  # relative, "/" separated
    package: str = ""
    types: List[ParsedType] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


class AbstractSourceParser(ABC):
    """
    Turns one source file into a ParsedFile. Concrete subclasses register
    themselves for their file extensions.
    """

    language: ClassVar[str]
    extensions: ClassVar[tuple[str, ...]]
    root: str
    rel_path: str
    source_bytes: bytes
    parser: Any

    def __init_subclass__(cls, **kw):
        super().__init_subclass__(**kw)
        if not inspect.isabstract(cls):
            if not getattr(cls, "extensions", None):
                raise ValueError(f"{cls.__name__} missing `extensions`")
            SourceParserRegistry.register_parser(cls)

    def __init__(self, root: str, rel_path: str) -> None:
        self.root = root
        self.rel_path = rel_path
        self.source_bytes = b""

    @abstractmethod
    def _build_file(self, root_node: Any) -> ParsedFile: ...

    def parse(self) -> ParsedFile:
        file_path = os.path.join(self.root, self.rel_path)
        with open(file_path, "rb") as fh:
            self.source_bytes = fh.read()

        tree = self.parser.parse(self.source_bytes)
        return self._build_file(tree.root_node)


class SourceParserRegistry:
    """
    Registry mapping languages and file extensions to parser implementations.
    """

    _parsers: List[Type[AbstractSourceParser]] = []

    @classmethod
    def register_parser(cls, parser: Type[AbstractSourceParser]) -> None:
        if parser not in cls._parsers:
            cls._parsers.append(parser)

    @classmethod
    def get_parser_map(
        cls, extra_extensions: Optional[Dict[str, List[str]]] = None
    ) -> Dict[str, Type[AbstractSourceParser]]:
        """
        Return ``{".ext": parser_cls}``. *extra_extensions* maps a language
        name to additional extensions handled by that language's parser.
        """
        parser_map: Dict[str, Type[AbstractSourceParser]] = {}
        for parser_cls in cls._parsers:
            for ext in parser_cls.extensions:
                parser_map[ext.lower()] = parser_cls
            for ext in (extra_extensions or {}).get(parser_cls.language, []):
                if not ext.startswith("."):
                    ext = f".{ext}"
                parser_map[ext.lower()] = parser_cls
        return parser_map


def get_node_text(node) -> str:
    """
    Get text of the tree sitter node
    """
    if not node or not node.text:
        return ""

    return node.text.decode("utf-8")
