import pytest

from apilisting.models import AccessLevel, TypeKind
from apilisting.navigation import DEFAULT_PACKAGE, NavigationTree
from apilisting.parsers import ParsedFile, ParsedType
from apilisting.registry import KnownTypeRegistry, RegistryBuilder


# Helpers
def _type(name, package="com.example", outer=None, access=AccessLevel.PUBLIC, nested=()):
    prefix = outer or package
    fqn = f"{prefix}.{name}" if prefix else name
    return ParsedType(
        kind=TypeKind.CLASS,
        name=name,
        fqn=fqn,
        package=package,
        access=access,
        nested_types=list(nested),
    )


# Tests
def test_registry_collects_visible_types_and_packages():
    entry = _type("Entry", outer="com.example.Cache.Hidden")
    hidden = _type("Hidden", outer="com.example.Cache", access=AccessLevel.PRIVATE, nested=[entry])
    node = _type("Node", outer="com.example.Cache", access=AccessLevel.PROTECTED)
    cache = _type("Cache", nested=[hidden, node])
    helper = _type("Helper", package="com.example.util", access=AccessLevel.PACKAGE_PRIVATE)

    builder = RegistryBuilder().add_files(
        [
            ParsedFile(path="com/example/Cache.java", package="com.example", types=[cache]),
            ParsedFile(path="com/example/util/Helper.java", package="com.example.util", types=[helper]),
        ]
    )
    registry = builder.build()

    assert dict(registry) == {
        "Cache": "com.example.Cache",
        "Node": "com.example.Cache.Node",
    }
    # types below a hidden type are skipped together with it
    assert "Entry" not in registry
    assert builder.package_names == ["com.example"]


def test_registry_is_read_only():
    registry = RegistryBuilder().add_files(
        [ParsedFile(path="A.java", types=[_type("A", package="")])]
    ).build()

    assert isinstance(registry, KnownTypeRegistry)
    assert registry.lookup("A") == "A"
    assert registry.lookup("Missing") is None
    with pytest.raises(TypeError):
        registry["B"] = "B"  # type: ignore[index]


def test_name_collisions_last_declaration_wins():
    first = ParsedFile(path="a/Item.java", package="a", types=[_type("Item", package="a")])
    second = ParsedFile(path="b/Item.java", package="b", types=[_type("Item", package="b")])

    registry = RegistryBuilder().add_files([first, second]).build()

    assert registry["Item"] == "b.Item"
    assert len(registry.collisions) == 1
    collision = registry.collisions[0]
    assert (collision.name, collision.loser_id, collision.winner_id) == ("Item", "a.Item", "b.Item")


def test_package_nodes():
    builder = RegistryBuilder().add_files(
        [
            ParsedFile(path="Main.java", types=[_type("Main", package="")]),
            ParsedFile(path="z/Z.java", package="z", types=[_type("Z", package="z")]),
        ]
    )
    nodes = builder.build_package_nodes()

    assert nodes[""].text == DEFAULT_PACKAGE
    assert nodes[""].id == "(default-package)"
    assert nodes["z"].kind == TypeKind.PACKAGE

    tree = NavigationTree(nodes)
    assert [n.text for n in tree.roots()] == [DEFAULT_PACKAGE, "z"]
    assert tree.package("z") is nodes["z"]
