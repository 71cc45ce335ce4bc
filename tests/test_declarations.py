from apilisting.declarations import DeclarationRenderer, definition_id
from apilisting.models import AccessLevel, TokenKind, TypeKind
from apilisting.navigation import NavigationTree
from apilisting.parsers import (
    ParsedCallable,
    ParsedDeclarator,
    ParsedEnumConstant,
    ParsedField,
    ParsedParameter,
    ParsedType,
    PrimitiveTypeRef,
    ReferenceTypeRef,
    TypeParameterRef,
)
from apilisting.registry import KnownTypeRegistry
from apilisting.tokens import TokenBuffer
from apilisting.typerender import TypeRenderer


# Helpers
def _renderer(known=None):
    navigation = NavigationTree()
    renderer = DeclarationRenderer(TypeRenderer(KnownTypeRegistry(known or {})), navigation)
    return renderer, navigation


def _text(tokens: TokenBuffer) -> str:
    return "".join("\n" if t.kind == TokenKind.NEW_LINE else t.value for t in tokens.tokens)


def _owner(**kwargs) -> ParsedType:
    defaults = dict(
        kind=TypeKind.CLASS,
        name="Repo",
        fqn="com.example.Repo",
        package="com.example",
        access=AccessLevel.PUBLIC,
        modifiers=["public"],
    )
    defaults.update(kwargs)
    return ParsedType(**defaults)


# Tests
def test_method_with_type_parameters_and_throws():
    renderer, _ = _renderer()
    owner = _owner()
    method = ParsedCallable(
        name="load",
        access=AccessLevel.PUBLIC,
        signature="public <K, V> Map<K, V> load(String path, int limit) throws IOException, TimeoutException",
        modifiers=["public"],
        type_parameters=[TypeParameterRef("K"), TypeParameterRef("V")],
        return_type=ReferenceTypeRef("Map", (ReferenceTypeRef("K"), ReferenceTypeRef("V"))),
        parameters=[
            ParsedParameter(ReferenceTypeRef("String"), "path"),
            ParsedParameter(PrimitiveTypeRef("int"), "limit"),
        ],
        throws=[ReferenceTypeRef("IOException"), ReferenceTypeRef("TimeoutException")],
    )
    tokens = TokenBuffer()

    assert renderer.render_method(method, owner, tokens, 1) is True
    assert _text(tokens) == (
        "    public <K, V> Map<K, V> load(String path, int limit) "
        "throws IOException, TimeoutException { }\n"
    )

    values = [t.value for t in tokens.tokens]
    # type parameters come before the parameter list, throws after it
    assert values.index("<") < values.index("(") < values.index(")") < values.index("throws")
    # no trailing separators
    assert values[values.index(")") - 1] == "limit"
    assert values[values.index("{") - 2] == "TimeoutException"

    throws = next(t for t in tokens.tokens if t.value == "throws")
    assert throws.kind == TokenKind.KEYWORD

    name = next(t for t in tokens.tokens if t.kind == TokenKind.MEMBER_NAME)
    assert name.value == "load"
    assert name.navigate_to_id == definition_id(owner, method)
    assert name.navigate_to_id.startswith("com.example.Repo.public-<K,-V>-Map<K,-V>-load(")


def test_hidden_declarations_render_nothing():
    renderer, navigation = _renderer()
    owner = _owner()
    tokens = TokenBuffer()

    private_field = ParsedField(
        access=AccessLevel.PRIVATE,
        type=PrimitiveTypeRef("int"),
        modifiers=["private"],
        declarators=[ParsedDeclarator("count")],
    )
    package_method = ParsedCallable(
        name="reset",
        access=AccessLevel.PACKAGE_PRIVATE,
        signature="void reset()",
        return_type=PrimitiveTypeRef("void"),
    )
    private_type = _owner(name="Cache", fqn="com.example.Repo.Cache", access=AccessLevel.PRIVATE)
    parent = navigation.package("com.example")

    assert renderer.render_field(private_field, tokens, 1) is False
    assert renderer.render_method(package_method, owner, tokens, 1) is False
    assert renderer.render_type_header(private_type, tokens, 1, parent) is None
    assert len(tokens) == 0
    assert parent.child_items == []


def test_field_with_several_declarators():
    renderer, _ = _renderer()
    field = ParsedField(
        access=AccessLevel.PUBLIC,
        type=ReferenceTypeRef("String"),
        modifiers=["public", "static", "final"],
        declarators=[
            ParsedDeclarator("A", '"a"', True),
            ParsedDeclarator("B"),
            ParsedDeclarator("C", "PREFIX + 1"),
        ],
    )
    tokens = TokenBuffer()
    renderer.render_field(field, tokens, 0)

    assert _text(tokens) == 'public static final String A = "a", B, C = PREFIX + 1;\n'
    kinds = {t.value: t.kind for t in tokens.tokens}
    assert kinds['"a"'] == TokenKind.STRING_LITERAL
    assert kinds["PREFIX + 1"] == TokenKind.TEXT
    assert kinds["A"] == TokenKind.MEMBER_NAME


def test_type_header_and_closing():
    renderer, navigation = _renderer(known={"Base": "com.example.Base"})
    decl = _owner(
        type_parameters=[TypeParameterRef("T")],
        extends=[ReferenceTypeRef("Base")],
        implements=[ReferenceTypeRef("Runnable"), ReferenceTypeRef("Closeable")],
    )
    parent = navigation.package("com.example")
    tokens = TokenBuffer()

    node = renderer.render_type_header(decl, tokens, 0, parent)
    renderer.render_type_closing(tokens, 0)

    assert _text(tokens) == (
        "public class Repo<T> extends Base implements Runnable, Closeable {\n}\n"
    )
    assert node is not None
    assert node.id == "com.example.Repo"
    assert node.text == "Repo"
    assert node.kind == TypeKind.CLASS
    assert parent.child_items == [node]

    name = next(t for t in tokens.tokens if t.value == "Repo")
    assert name.kind == TokenKind.TYPE_NAME
    assert name.navigate_to_id == node.id
    base = next(t for t in tokens.tokens if t.value == "Base")
    assert base.navigate_to_id == "com.example.Base"


def test_enum_constants_end_with_semicolon():
    renderer, _ = _renderer()
    tokens = TokenBuffer()
    renderer.render_enum_constants(
        [
            ParsedEnumConstant("ARIN", '"whois.arin.net"'),
            ParsedEnumConstant("NONE", ""),
            ParsedEnumConstant("UNKNOWN"),
        ],
        tokens,
        1,
    )
    assert _text(tokens) == (
        '    ARIN("whois.arin.net"),\n'
        "    NONE(),\n"
        "    UNKNOWN;\n"
    )


def test_constructor_has_no_return_type():
    renderer, _ = _renderer()
    owner = _owner()
    ctor = ParsedCallable(
        name="Repo",
        access=AccessLevel.PROTECTED,
        signature="protected Repo(String... names)",
        modifiers=["protected"],
        parameters=[ParsedParameter(ReferenceTypeRef("String"), "names", varargs=True)],
    )
    tokens = TokenBuffer()
    renderer.render_constructor(ctor, owner, tokens, 1)

    assert _text(tokens) == "    protected Repo(String... names) { }\n"
    assert definition_id(owner, ctor) == "com.example.Repo.protected-Repo(String...-names)"
