from typing import Callable, Iterable, List, Optional, TypeVar

from apilisting.models import Token, TokenKind

T = TypeVar("T")


class TokenBuffer:
    """
    Append-only writer over a token list. All rendering goes through one
    buffer, so the order of calls is the order of the listing.
    """

    def __init__(self, tokens: Optional[List[Token]] = None, indent_width: int = 4) -> None:
        self.tokens: List[Token] = tokens if tokens is not None else []
        self.indent_width = indent_width

    def __len__(self) -> int:
        return len(self.tokens)

    def add(self, kind: TokenKind, value: str, navigate_to_id: Optional[str] = None) -> None:
        self.tokens.append(Token(kind=kind, value=value, navigate_to_id=navigate_to_id))

    def keyword(self, value: str) -> None:
        self.add(TokenKind.KEYWORD, value)

    def punctuation(self, value: str) -> None:
        self.add(TokenKind.PUNCTUATION, value)

    def space(self) -> None:
        self.add(TokenKind.WHITESPACE, " ")

    def newline(self) -> None:
        self.add(TokenKind.NEW_LINE, "")

    def indent(self, depth: int) -> None:
        if depth > 0:
            self.add(TokenKind.WHITESPACE, " " * (depth * self.indent_width))

    def type_name(self, value: str, navigate_to_id: Optional[str] = None) -> None:
        self.add(TokenKind.TYPE_NAME, value, navigate_to_id)

    def member_name(self, value: str, navigate_to_id: Optional[str] = None) -> None:
        self.add(TokenKind.MEMBER_NAME, value, navigate_to_id)

    def text(self, value: str) -> None:
        self.add(TokenKind.TEXT, value)

    def string_literal(self, value: str) -> None:
        self.add(TokenKind.STRING_LITERAL, value)

    def separated(
        self,
        items: Iterable[T],
        render: Callable[[T], None],
        separator: str = ",",
    ) -> None:
        """Render *items* with ``<separator> `` between them, none trailing."""
        for idx, item in enumerate(items):
            if idx:
                self.punctuation(separator)
                self.space()
            render(item)
