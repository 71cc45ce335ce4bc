import threading
from typing import Callable, List, Optional

import tree_sitter as ts
import tree_sitter_java as tsjava

from apilisting.helpers import normalize_text
from apilisting.logger import logger
from apilisting.models import AccessLevel, TypeKind
from apilisting.parsers import (
    AbstractSourceParser,
    ArrayTypeRef,
    ParsedCallable,
    ParsedDeclarator,
    ParsedEnumConstant,
    ParsedField,
    ParsedFile,
    ParsedParameter,
    ParsedType,
    PrimitiveTypeRef,
    ReferenceTypeRef,
    SourceParseError,
    TypeParameterRef,
    TypeRef,
    UnsupportedTypeRef,
    VoidTypeRef,
    WildcardTypeRef,
    get_node_text,
)

JAVA_LANGUAGE = ts.Language(tsjava.language())

# tree-sitter parsers are not safe to share between threads
_local = threading.local()


def _get_parser() -> ts.Parser:
    parser = getattr(_local, "parser", None)
    if parser is None:
        parser = ts.Parser(JAVA_LANGUAGE)
        _local.parser = parser
    return parser


TYPE_DECLARATIONS = {
    "class_declaration": TypeKind.CLASS,
    "interface_declaration": TypeKind.INTERFACE,
    "enum_declaration": TypeKind.ENUM,
}

ANNOTATIONS = ("marker_annotation", "annotation")

ACCESS_MODIFIERS = {
    "public": AccessLevel.PUBLIC,
    "protected": AccessLevel.PROTECTED,
    "private": AccessLevel.PRIVATE,
}

# Syntax nodes inside a type body that never contribute to the API listing
IGNORED_MEMBERS = {
    "{",
    "}",
    ";",
    ",",
    "line_comment",
    "block_comment",
    "block",
    "static_initializer",
    "record_declaration",
    "annotation_type_declaration",
    "compact_constructor_declaration",
}


class JavaSourceParser(AbstractSourceParser):
    language = "java"
    extensions = (".java",)

    def __init__(self, root: str, rel_path: str) -> None:
        super().__init__(root, rel_path)
        self.parser = _get_parser()
        self.package_name = ""
        # Node-type -> type-reference builder
        self._type_builders: dict[str, Callable[[ts.Node], TypeRef]] = {
            "type_identifier": self._reference_type,
            "scoped_type_identifier": self._reference_type,
            "generic_type": self._generic_type,
            "array_type": self._array_type,
            "annotated_type": self._annotated_type,
            "integral_type": self._primitive_type,
            "floating_point_type": self._primitive_type,
            "boolean_type": self._primitive_type,
            "void_type": self._void_type,
            "wildcard": self._wildcard_type,
        }

    def _build_file(self, root_node: ts.Node) -> ParsedFile:
        if root_node.has_error:
            error_node = _find_error(root_node)
            line = error_node.start_point[0] + 1 if error_node is not None else None
            raise SourceParseError(self.rel_path, "source contains syntax errors", line)

        self.package_name = self._extract_package_name(root_node)
        parsed_file = ParsedFile(
            path=self.rel_path.replace("\\", "/"),
            package=self.package_name,
        )
        for child in root_node.children:
            if child.type in TYPE_DECLARATIONS:
                parsed_file.types.append(self._handle_type(child, None))
            elif child.type not in (
                "package_declaration",
                "import_declaration",
                "line_comment",
                "block_comment",
                ";",
            ):
                logger.debug(
                    "Skipping unsupported top-level node",
                    path=self.rel_path,
                    node_type=child.type,
                    line=child.start_point[0] + 1,
                )
        return parsed_file

    def _extract_package_name(self, root_node: ts.Node) -> str:
        for node in root_node.children:
            if node.type == "package_declaration":
                ident = next(
                    (
                        c
                        for c in node.named_children
                        if c.type in ("identifier", "scoped_identifier")
                    ),
                    None,
                )
                if ident is not None:
                    return normalize_text(get_node_text(ident)).replace(" ", "")
        return ""

    # --- declarations ---------------------------------------------------
    def _handle_type(self, node: ts.Node, outer: Optional[ParsedType]) -> ParsedType:
        kind = TYPE_DECLARATIONS[node.type]
        name = get_node_text(node.child_by_field_name("name"))
        if outer is not None:
            fqn = f"{outer.fqn}.{name}"
        elif self.package_name:
            fqn = f"{self.package_name}.{name}"
        else:
            fqn = name

        modifiers = _modifiers(node)
        decl = ParsedType(
            kind=kind,
            name=name,
            fqn=fqn,
            package=self.package_name,
            access=_access_level(modifiers, outer),
            modifiers=modifiers,
            type_parameters=self._type_parameters(node),
        )

        superclass = node.child_by_field_name("superclass")
        if superclass is not None and superclass.named_children:
            decl.extends.append(self._type_ref(superclass.named_children[0]))

        extends_interfaces = next(
            (c for c in node.children if c.type == "extends_interfaces"), None
        )
        if extends_interfaces is not None:
            decl.extends.extend(self._type_list(extends_interfaces))

        interfaces = node.child_by_field_name("interfaces")
        if interfaces is not None:
            decl.implements.extend(self._type_list(interfaces))

        body = node.child_by_field_name("body")
        if body is not None:
            self._handle_body(body, decl)
        return decl

    def _handle_body(self, body: ts.Node, decl: ParsedType) -> None:
        for child in body.children:
            if child.type == "enum_constant":
                decl.enum_constants.append(self._enum_constant(child))
            elif child.type == "enum_body_declarations":
                self._handle_body(child, decl)
            elif child.type in ("field_declaration", "constant_declaration"):
                decl.fields.extend(self._fields(child, decl))
            elif child.type == "constructor_declaration":
                decl.constructors.append(self._callable(child, decl, constructor=True))
            elif child.type == "method_declaration":
                decl.methods.append(self._callable(child, decl, constructor=False))
            elif child.type in TYPE_DECLARATIONS:
                decl.nested_types.append(self._handle_type(child, decl))
            elif child.type not in IGNORED_MEMBERS:
                logger.debug(
                    "Skipping unsupported member node",
                    path=self.rel_path,
                    owner=decl.fqn,
                    node_type=child.type,
                    line=child.start_point[0] + 1,
                )

    def _enum_constant(self, node: ts.Node) -> ParsedEnumConstant:
        name = get_node_text(node.child_by_field_name("name"))
        args_node = node.child_by_field_name("arguments")
        arguments: Optional[str] = None
        if args_node is not None:
            arguments = normalize_text(get_node_text(args_node)[1:-1])
        return ParsedEnumConstant(name=name, arguments=arguments)

    def _fields(self, node: ts.Node, owner: ParsedType) -> List[ParsedField]:
        """
        One ParsedField per run of declarators sharing the same type.
        ``int a[], b;`` declares an ``int[]`` and an ``int``, so it yields
        two fields.
        """
        modifiers = _modifiers(node)
        access = _access_level(modifiers, owner)
        base_type = self._type_ref(node.child_by_field_name("type"))

        fields: List[ParsedField] = []
        for declarator in node.children_by_field_name("declarator"):
            value = declarator.child_by_field_name("value")
            parsed = ParsedDeclarator(
                name=get_node_text(declarator.child_by_field_name("name")),
                initializer=(
                    normalize_text(get_node_text(value)) if value is not None else None
                ),
                initializer_is_string=(
                    value is not None and value.type == "string_literal"
                ),
            )
            field_type = _with_dimensions(base_type, declarator)
            if fields and fields[-1].type == field_type:
                fields[-1].declarators.append(parsed)
            else:
                fields.append(
                    ParsedField(
                        access=access,
                        type=field_type,
                        modifiers=list(modifiers),
                        declarators=[parsed],
                    )
                )
        return fields

    def _callable(
        self, node: ts.Node, owner: ParsedType, *, constructor: bool
    ) -> ParsedCallable:
        modifiers = _modifiers(node)
        name = get_node_text(node.child_by_field_name("name"))
        return_type = (
            None
            if constructor
            # ``int f()[]`` returns ``int[]``
            else _with_dimensions(self._type_ref(node.child_by_field_name("type")), node)
        )

        parameters: List[ParsedParameter] = []
        params_node = node.child_by_field_name("parameters")
        if params_node is not None:
            for param in params_node.named_children:
                parsed = self._parameter(param)
                if parsed is not None:
                    parameters.append(parsed)

        throws_node = next((c for c in node.children if c.type == "throws"), None)
        throws = (
            [self._type_ref(c) for c in throws_node.named_children if c.type not in ANNOTATIONS]
            if throws_node is not None
            else []
        )

        return ParsedCallable(
            name=name,
            access=_access_level(modifiers, owner),
            signature=self._signature(node, modifiers, name, params_node, throws_node),
            modifiers=modifiers,
            type_parameters=self._type_parameters(node),
            return_type=return_type,
            parameters=parameters,
            throws=throws,
        )

    def _parameter(self, node: ts.Node) -> Optional[ParsedParameter]:
        if node.type == "formal_parameter":
            type_ref = _with_dimensions(self._type_ref(node.child_by_field_name("type")), node)
            return ParsedParameter(
                type=type_ref, name=get_node_text(node.child_by_field_name("name"))
            )
        if node.type == "spread_parameter":
            type_node = next(
                (
                    c
                    for c in node.named_children
                    if c.type not in ("modifiers", "variable_declarator", "identifier") + ANNOTATIONS
                ),
                None,
            )
            declarator = next(
                (c for c in node.named_children if c.type == "variable_declarator"), None
            )
            if declarator is not None:
                name = get_node_text(declarator.child_by_field_name("name"))
            else:
                ident = next((c for c in node.named_children if c.type == "identifier"), None)
                name = get_node_text(ident)
            return ParsedParameter(type=self._type_ref(type_node), name=name, varargs=True)
        # receiver parameters (``Foo this``) and comments
        return None

    def _signature(
        self,
        node: ts.Node,
        modifiers: List[str],
        name: str,
        params_node: Optional[ts.Node],
        throws_node: Optional[ts.Node],
    ) -> str:
        """
        Whitespace-normalized declaration text without annotations and body,
        e.g. ``public static <T> T max(T a, T b) throws Exception``.
        """
        parts: List[str] = list(modifiers)
        type_params = node.child_by_field_name("type_parameters")
        if type_params is not None:
            parts.append(get_node_text(type_params))
        return_type = node.child_by_field_name("type")
        if return_type is not None:
            parts.append(get_node_text(return_type))
        params = get_node_text(params_node) if params_node is not None else "()"
        parts.append(f"{name}{params}")
        if throws_node is not None:
            parts.append(get_node_text(throws_node))
        return normalize_text(" ".join(parts))

    # --- types ----------------------------------------------------------
    def _type_parameters(self, node: ts.Node) -> List[TypeParameterRef]:
        params_node = node.child_by_field_name("type_parameters")
        if params_node is None:
            return []
        params: List[TypeParameterRef] = []
        for param in params_node.named_children:
            if param.type != "type_parameter":
                continue
            ident = next(
                (c for c in param.named_children if c.type in ("type_identifier", "identifier")),
                None,
            )
            bound = next((c for c in param.named_children if c.type == "type_bound"), None)
            bounds = (
                tuple(self._type_ref(c) for c in bound.named_children if c.type not in ANNOTATIONS)
                if bound is not None
                else ()
            )
            params.append(TypeParameterRef(name=get_node_text(ident), bounds=bounds))
        return params

    def _type_list(self, node: ts.Node) -> List[TypeRef]:
        type_list = next((c for c in node.named_children if c.type == "type_list"), node)
        return [
            self._type_ref(c)
            for c in type_list.named_children
            if c.type not in ANNOTATIONS + ("line_comment", "block_comment")
        ]

    def _type_ref(self, node: Optional[ts.Node]) -> TypeRef:
        if node is None:
            return UnsupportedTypeRef(text="", node_type="missing")
        builder = self._type_builders.get(node.type)
        if builder is None:
            return UnsupportedTypeRef(
                text=normalize_text(get_node_text(node)), node_type=node.type
            )
        return builder(node)

    def _reference_type(self, node: ts.Node) -> TypeRef:
        return ReferenceTypeRef(name=normalize_text(get_node_text(node)).replace(" ", ""))

    def _generic_type(self, node: ts.Node) -> TypeRef:
        name_node = next(
            (
                c
                for c in node.named_children
                if c.type in ("type_identifier", "scoped_type_identifier")
            ),
            None,
        )
        args_node = next((c for c in node.named_children if c.type == "type_arguments"), None)
        if name_node is None:
            return UnsupportedTypeRef(
                text=normalize_text(get_node_text(node)), node_type=node.type
            )
        arguments = (
            tuple(
                self._type_ref(c)
                for c in args_node.named_children
                if c.type not in ("line_comment", "block_comment")
            )
            if args_node is not None
            else ()
        )
        return ReferenceTypeRef(
            name=normalize_text(get_node_text(name_node)).replace(" ", ""),
            arguments=arguments,
        )

    def _array_type(self, node: ts.Node) -> TypeRef:
        element = self._type_ref(node.child_by_field_name("element"))
        dimensions = _count_dimensions(node) or 1
        if isinstance(element, ArrayTypeRef):
            return ArrayTypeRef(
                element=element.element, dimensions=element.dimensions + dimensions
            )
        return ArrayTypeRef(element=element, dimensions=dimensions)

    def _annotated_type(self, node: ts.Node) -> TypeRef:
        inner = next(
            (c for c in reversed(node.named_children) if c.type not in ANNOTATIONS), None
        )
        return self._type_ref(inner)

    def _primitive_type(self, node: ts.Node) -> TypeRef:
        return PrimitiveTypeRef(name=get_node_text(node))

    def _void_type(self, node: ts.Node) -> TypeRef:
        return VoidTypeRef()

    def _wildcard_type(self, node: ts.Node) -> TypeRef:
        return WildcardTypeRef(text=normalize_text(get_node_text(node)))


# Helpers
def _count_dimensions(node: ts.Node) -> int:
    """Number of ``[]`` pairs in the ``dimensions`` field of *node*."""
    dims_node = node.child_by_field_name("dimensions")
    if dims_node is None:
        dims_node = next((c for c in node.children if c.type == "dimensions"), None)
    if dims_node is None:
        return 0
    return sum(1 for c in dims_node.children if c.type == "[")


def _with_dimensions(type_ref: TypeRef, node: ts.Node) -> TypeRef:
    """
    Fold C-style dimensions written after a name (``int a[]``,
    ``String args[]``, ``int f()[]``) into *type_ref*.
    """
    extra = _count_dimensions(node)
    if not extra:
        return type_ref
    if isinstance(type_ref, ArrayTypeRef):
        return ArrayTypeRef(element=type_ref.element, dimensions=type_ref.dimensions + extra)
    return ArrayTypeRef(element=type_ref, dimensions=extra)


def _modifiers(node: ts.Node) -> List[str]:
    """Modifier keywords of a declaration, annotations excluded."""
    mods = next((c for c in node.children if c.type == "modifiers"), None)
    if mods is None:
        return []
    return [
        get_node_text(c)
        for c in mods.children
        if c.type not in ANNOTATIONS + ("line_comment", "block_comment")
    ]


def _access_level(modifiers: List[str], owner: Optional[ParsedType]) -> AccessLevel:
    for modifier in modifiers:
        if modifier in ACCESS_MODIFIERS:
            return ACCESS_MODIFIERS[modifier]
    # Interface members are implicitly public
    if owner is not None and owner.kind == TypeKind.INTERFACE:
        return AccessLevel.PUBLIC
    return AccessLevel.PACKAGE_PRIVATE


def _find_error(node: ts.Node) -> Optional[ts.Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        stack.extend(reversed(current.children))
    return None
