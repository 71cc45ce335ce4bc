from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional

from apilisting.helpers import make_id
from apilisting.logger import logger
from apilisting.models import ChildItem
from apilisting.navigation import make_package_node
from apilisting.parsers import ParsedFile, ParsedType
from apilisting.visibility import is_included


@dataclass(frozen=True)
class NameCollision:
    """Two visible types share a simple name; ``winner_id`` is kept."""

    name: str
    loser_id: str
    winner_id: str


class KnownTypeRegistry(Mapping):
    """
    Read-only mapping of simple type name to stable id. Built once by
    RegistryBuilder before rendering starts.
    """

    def __init__(
        self, types: Dict[str, str], collisions: Iterable[NameCollision] = ()
    ) -> None:
        self._types = MappingProxyType(dict(types))
        self.collisions: tuple[NameCollision, ...] = tuple(collisions)

    def __getitem__(self, name: str) -> str:
        return self._types[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def lookup(self, name: str) -> Optional[str]:
        return self._types.get(name)


class RegistryBuilder:
    """
    First pass over every parsed file: records each visible type (nested
    ones included) and the packages that hold them.

    When two declarations share a simple name, the one added last wins.
    Files should therefore be added in a deterministic order.
    """

    def __init__(self) -> None:
        self._types: Dict[str, str] = {}
        self._collisions: List[NameCollision] = []
        self._packages: List[str] = []

    def add_files(self, parsed_files: Iterable[ParsedFile]) -> "RegistryBuilder":
        for parsed_file in parsed_files:
            self.add_file(parsed_file)
        return self

    def add_file(self, parsed_file: ParsedFile) -> None:
        for decl in parsed_file.types:
            self._add_type(decl)

    def _add_type(self, decl: ParsedType) -> None:
        if not is_included(decl.access):
            return

        type_id = make_id(decl.fqn)
        previous = self._types.get(decl.name)
        if previous is not None and previous != type_id:
            logger.debug(
                "Known type name collision; last declaration wins",
                name=decl.name,
                previous=previous,
                current=type_id,
            )
            self._collisions.append(
                NameCollision(name=decl.name, loser_id=previous, winner_id=type_id)
            )
        self._types[decl.name] = type_id

        if decl.package not in self._packages:
            self._packages.append(decl.package)

        for nested in decl.nested_types:
            self._add_type(nested)

    @property
    def package_names(self) -> List[str]:
        return list(self._packages)

    def build(self) -> KnownTypeRegistry:
        return KnownTypeRegistry(self._types, self._collisions)

    def build_package_nodes(self) -> Dict[str, ChildItem]:
        """Fresh, not yet attached navigation nodes, one per package."""
        return {name: make_package_node(name) for name in self._packages}
