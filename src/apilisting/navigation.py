from typing import Dict, List, Optional

from apilisting.helpers import make_id
from apilisting.models import ChildItem, TypeKind
from apilisting.parsers import ParsedType

DEFAULT_PACKAGE = "(default package)"


def make_package_node(package_name: str) -> ChildItem:
    text = package_name or DEFAULT_PACKAGE
    return ChildItem(id=make_id(text), text=text, kind=TypeKind.PACKAGE)


def make_type_node(decl: ParsedType) -> ChildItem:
    return ChildItem(id=make_id(decl.fqn), text=decl.name, kind=decl.kind)


class NavigationTree:
    """
    Package nodes keyed by package name. Type nodes hang below the package
    node (top-level types) or the node of their enclosing type.
    """

    def __init__(self, packages: Optional[Dict[str, ChildItem]] = None) -> None:
        self._packages: Dict[str, ChildItem] = dict(packages or {})

    def package(self, package_name: str) -> ChildItem:
        node = self._packages.get(package_name)
        if node is None:
            node = make_package_node(package_name)
            self._packages[package_name] = node
        return node

    def add_type(self, decl: ParsedType, parent: ChildItem) -> ChildItem:
        node = make_type_node(decl)
        parent.add_child_item(node)
        return node

    def roots(self) -> List[ChildItem]:
        """Package nodes sorted by their display text."""
        return sorted(self._packages.values(), key=lambda item: item.text)
