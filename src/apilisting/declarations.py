from typing import List, Optional

from apilisting.helpers import make_id
from apilisting.models import ChildItem
from apilisting.navigation import NavigationTree
from apilisting.parsers import (
    ParsedCallable,
    ParsedDeclarator,
    ParsedEnumConstant,
    ParsedField,
    ParsedParameter,
    ParsedType,
)
from apilisting.tokens import TokenBuffer
from apilisting.typerender import TypeRenderer
from apilisting.visibility import is_included


class DeclarationRenderer:
    """
    Renders single declarations. Every ``render_*`` method applies the
    visibility filter first and emits nothing for hidden declarations.
    ``depth`` is the nesting level of the line being written.
    """

    def __init__(self, type_renderer: TypeRenderer, navigation: NavigationTree) -> None:
        self.types = type_renderer
        self.navigation = navigation

    def render_type_header(
        self, decl: ParsedType, tokens: TokenBuffer, depth: int, nav_parent: ChildItem
    ) -> Optional[ChildItem]:
        """
        Write ``modifiers kind Name<T> extends X implements Y, Z {`` and attach
        the type's navigation node under *nav_parent*. Returns the new node,
        or None when the type is not visible.
        """
        if not is_included(decl.access):
            return None

        nav_node = self.navigation.add_type(decl, nav_parent)

        tokens.indent(depth)
        self._modifiers(decl.modifiers, tokens)
        tokens.keyword(decl.kind.value)
        tokens.space()
        tokens.type_name(decl.name, nav_node.id)
        self.types.render_type_parameters(decl.type_parameters, tokens)

        if decl.extends:
            tokens.space()
            tokens.keyword("extends")
            tokens.space()
            self.types.render_list(decl.extends, tokens)

        if decl.implements:
            tokens.space()
            tokens.keyword("implements")
            tokens.space()
            self.types.render_list(decl.implements, tokens)

        tokens.space()
        tokens.punctuation("{")
        tokens.newline()
        return nav_node

    def render_enum_constants(
        self, constants: List[ParsedEnumConstant], tokens: TokenBuffer, depth: int
    ) -> None:
        last = len(constants) - 1
        for idx, constant in enumerate(constants):
            tokens.indent(depth)
            tokens.member_name(constant.name)
            if constant.arguments is not None:
                tokens.punctuation("(")
                if constant.arguments:
                    tokens.text(constant.arguments)
                tokens.punctuation(")")
            tokens.punctuation(";" if idx == last else ",")
            tokens.newline()

    def render_field(self, field: ParsedField, tokens: TokenBuffer, depth: int) -> bool:
        if not is_included(field.access):
            return False

        tokens.indent(depth)
        self._modifiers(field.modifiers, tokens)
        self.types.render(field.type, tokens)
        tokens.space()
        tokens.separated(field.declarators, lambda d: self._declarator(d, tokens))
        tokens.punctuation(";")
        tokens.newline()
        return True

    def render_constructor(
        self, ctor: ParsedCallable, owner: ParsedType, tokens: TokenBuffer, depth: int
    ) -> bool:
        return self._render_callable(ctor, owner, tokens, depth)

    def render_method(
        self, method: ParsedCallable, owner: ParsedType, tokens: TokenBuffer, depth: int
    ) -> bool:
        return self._render_callable(method, owner, tokens, depth)

    def render_type_closing(self, tokens: TokenBuffer, depth: int) -> None:
        tokens.indent(depth)
        tokens.punctuation("}")
        tokens.newline()

    # Helpers
    def _render_callable(
        self, decl: ParsedCallable, owner: ParsedType, tokens: TokenBuffer, depth: int
    ) -> bool:
        if not is_included(decl.access):
            return False

        tokens.indent(depth)
        self._modifiers(decl.modifiers, tokens)
        if self.types.render_type_parameters(decl.type_parameters, tokens):
            tokens.space()
        if decl.return_type is not None:
            self.types.render(decl.return_type, tokens)
            tokens.space()

        tokens.member_name(decl.name, definition_id(owner, decl))
        tokens.punctuation("(")
        tokens.separated(decl.parameters, lambda p: self._parameter(p, tokens))
        tokens.punctuation(")")
        tokens.space()

        if decl.throws:
            tokens.keyword("throws")
            tokens.space()
            self.types.render_list(decl.throws, tokens)
            tokens.space()

        # bodies are never rendered
        tokens.punctuation("{")
        tokens.space()
        tokens.punctuation("}")
        tokens.newline()
        return True

    def _parameter(self, param: ParsedParameter, tokens: TokenBuffer) -> None:
        self.types.render(param.type, tokens)
        if param.varargs:
            tokens.punctuation("...")
        tokens.space()
        tokens.text(param.name)

    def _declarator(self, declarator: ParsedDeclarator, tokens: TokenBuffer) -> None:
        tokens.member_name(declarator.name)
        if declarator.initializer is None:
            return
        tokens.space()
        tokens.punctuation("=")
        tokens.space()
        if declarator.initializer_is_string:
            tokens.string_literal(declarator.initializer)
        else:
            tokens.text(declarator.initializer)

    @staticmethod
    def _modifiers(modifiers: List[str], tokens: TokenBuffer) -> None:
        for modifier in modifiers:
            tokens.keyword(modifier)
            tokens.space()


def definition_id(owner: ParsedType, decl: ParsedCallable) -> str:
    """Id of a constructor or method: owner name plus normalized signature."""
    return make_id(f"{owner.fqn}.{decl.signature}")
