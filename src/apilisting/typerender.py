from typing import Callable, Dict, Iterable, Optional

from apilisting.logger import logger
from apilisting.parsers import (
    ArrayTypeRef,
    PrimitiveTypeRef,
    ReferenceTypeRef,
    TypeParameterRef,
    TypeRef,
    UnsupportedTypeRef,
    VoidTypeRef,
    WildcardTypeRef,
)
from apilisting.registry import KnownTypeRegistry
from apilisting.tokens import TokenBuffer


class TypeRenderer:
    """
    Renders type references into tokens. Names found in the registry carry
    the id of their declaration so viewers can link to it.
    """

    def __init__(self, registry: KnownTypeRegistry) -> None:
        self.registry = registry
        self._handlers: Dict[str, Callable[[TypeRef, TokenBuffer], None]] = {
            ArrayTypeRef.kind: self._render_array,
            PrimitiveTypeRef.kind: self._render_literal,
            VoidTypeRef.kind: self._render_literal,
            ReferenceTypeRef.kind: self._render_reference,
            TypeParameterRef.kind: self._render_type_parameter,
            WildcardTypeRef.kind: self._render_wildcard,
        }

    def render(self, type_ref: TypeRef, tokens: TokenBuffer) -> None:
        handler = self._handlers.get(type_ref.kind)
        if handler is None:
            logger.warning(
                "Unrecognized type shape; omitted from listing",
                kind=type_ref.kind,
                node_type=getattr(type_ref, "node_type", None),
                text=getattr(type_ref, "text", None),
            )
            return
        handler(type_ref, tokens)

    def render_type_parameters(
        self, params: Iterable[TypeParameterRef], tokens: TokenBuffer
    ) -> bool:
        """Render ``<A, B extends C>``; returns False when there are none."""
        params = list(params)
        if not params:
            return False
        tokens.punctuation("<")
        tokens.separated(params, lambda p: self.render(p, tokens))
        tokens.punctuation(">")
        return True

    def render_list(self, refs: Iterable[TypeRef], tokens: TokenBuffer) -> None:
        tokens.separated(refs, lambda ref: self.render(ref, tokens))

    def _link(self, name: str) -> Optional[str]:
        return self.registry.lookup(name)

    def _render_array(self, type_ref: ArrayTypeRef, tokens: TokenBuffer) -> None:
        self.render(type_ref.element, tokens)
        for _ in range(type_ref.dimensions):
            tokens.punctuation("[]")

    def _render_literal(self, type_ref: PrimitiveTypeRef | VoidTypeRef, tokens: TokenBuffer) -> None:
        tokens.type_name(type_ref.name)

    def _render_reference(self, type_ref: ReferenceTypeRef, tokens: TokenBuffer) -> None:
        tokens.type_name(type_ref.name, self._link(type_ref.name))
        if not type_ref.arguments:
            return
        tokens.punctuation("<")
        self.render_list(type_ref.arguments, tokens)
        tokens.punctuation(">")

    def _render_type_parameter(self, type_ref: TypeParameterRef, tokens: TokenBuffer) -> None:
        tokens.type_name(type_ref.name, self._link(type_ref.name))
        if not type_ref.bounds:
            return
        tokens.space()
        tokens.keyword("extends")
        tokens.space()
        for idx, bound in enumerate(type_ref.bounds):
            if idx:
                tokens.space()
                tokens.punctuation("&")
                tokens.space()
            self.render(bound, tokens)

    def _render_wildcard(self, type_ref: WildcardTypeRef, tokens: TokenBuffer) -> None:
        tokens.type_name(type_ref.text, self._link(type_ref.text))
