from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from typing import List, Optional

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TokenKind(str, Enum):
    KEYWORD = "Keyword"
    PUNCTUATION = "Punctuation"
    WHITESPACE = "Whitespace"
    NEW_LINE = "NewLine"
    TYPE_NAME = "TypeName"
    MEMBER_NAME = "MemberName"
    TEXT = "Text"
    STRING_LITERAL = "StringLiteral"


class TypeKind(str, Enum):
    # Values double as the declaration keyword for class/interface/enum
    PACKAGE = "package"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    UNKNOWN = "unknown"


class AccessLevel(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PACKAGE_PRIVATE = "package"
    PRIVATE = "private"


# ---------------------------------------------------------------------------
# Listing containers
# ---------------------------------------------------------------------------


class Token(BaseModel):
    """Smallest unit of the rendered listing."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: TokenKind
    value: str
    navigate_to_id: Optional[str] = Field(default=None, alias="navigateToId")


class ChildItem(BaseModel):
    """
    Navigation node. Package nodes sit at the root, type nodes nest below
    their package or their enclosing type.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    text: str
    kind: TypeKind = TypeKind.UNKNOWN
    child_items: List["ChildItem"] = Field(default_factory=list, alias="childItems")

    def add_child_item(self, item: "ChildItem") -> None:
        self.child_items.append(item)


class APIListing(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    tokens: List[Token] = Field(default_factory=list)
    navigation: List[ChildItem] = Field(default_factory=list)

    def add_child_item(self, item: ChildItem) -> None:
        self.navigation.append(item)

    def iter_navigation(self):
        """Depth-first walk over every navigation node."""
        stack = list(reversed(self.navigation))
        while stack:
            item = stack.pop()
            yield item
            stack.extend(reversed(item.child_items))
