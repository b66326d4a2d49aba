"""Fact extraction using tree-sitter.

Parses one TSX/JSX/TS/JS unit and walks the tree once, collecting:
- Property shapes (interfaces and object type aliases)
- Component declarations and whether they render markup
- Markup elements with their attributes
- Import and export edges
"""

from dataclasses import dataclass, field
from pathlib import Path

import structlog
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser

from ui_compliance.models import (
    ComponentDecl,
    ExportEdge,
    ImportEdge,
    MarkupAttribute,
    MarkupElement,
    PropertyField,
    PropertyShape,
    StructuralFacts,
    UnitKind,
    UnrecognizedNode,
)

logger = structlog.get_logger()


INTERACTIVE_TAGS = frozenset({
    "button", "a", "input", "select", "textarea", "summary",
    # Design-system components
    "Button", "IconButton", "Input", "Select", "TextArea",
    "Checkbox", "Radio", "Switch", "Link",
})

FORM_FIELD_TAGS = frozenset({"input", "select", "textarea", "Input", "Select", "TextArea"})

CLICK_ATTRIBUTES = ("onClick", "onPress", "onMouseDown")
KEYBOARD_ATTRIBUTES = ("onKeyDown", "onKeyUp", "onKeyPress")
NAME_ATTRIBUTES = ("aria-label", "aria-labelledby", "title")

MARKUP_NODE_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})
FUNCTION_NODE_TYPES = frozenset({"arrow_function", "function_expression", "function"})

# Declarations the walk sees but does not model
UNINTERPRETED_DECLARATIONS = frozenset({
    "class_declaration",
    "abstract_class_declaration",
    "enum_declaration",
    "internal_module",
    "ambient_declaration",
})


@dataclass
class _PendingElement:
    start_byte: int
    tag: str
    attributes: tuple[MarkupAttribute, ...]
    line: int
    column: int
    opening_text: str
    has_text: bool


@dataclass
class _PendingComponent:
    start_byte: int
    end_byte: int
    name: str
    result_type: str | None
    renders_markup: bool
    line: int
    signature: str | None
    signature_line: int = 0
    signature_column: int = 0


@dataclass
class _Collector:
    """Mutable state of one walk."""

    source: bytes
    path: str
    shapes: list[PropertyShape] = field(default_factory=list)
    components: list[_PendingComponent] = field(default_factory=list)
    elements: list[_PendingElement] = field(default_factory=list)
    imports: list[ImportEdge] = field(default_factory=list)
    exports: list[ExportEdge] = field(default_factory=list)
    unrecognized: list[UnrecognizedNode] = field(default_factory=list)


class FactExtractor:
    """Extracts StructuralFacts from UI component source text."""

    def __init__(self):
        self._logger = logger.bind(component="FactExtractor")
        self._languages: dict[str, Language] = {}

    def _language_for(self, kind: UnitKind) -> Language:
        """Lazily load and cache the grammar for a unit kind."""
        name = "typescript" if kind == UnitKind.TS else "tsx"
        if name not in self._languages:
            if name == "typescript":
                self._languages[name] = Language(tstypescript.language_typescript())
            else:
                self._languages[name] = Language(tstypescript.language_tsx())
            self._logger.debug("Tree-sitter grammar loaded", grammar=name)
        return self._languages[name]

    def extract(self, text: str, path: str = "<string>.tsx") -> StructuralFacts:
        """Parse source text and collect its structural facts.

        Args:
            text: Source text of the unit
            path: Path used for grammar selection and reporting

        Returns:
            StructuralFacts; empty with ``parse_error`` set if the text
            does not parse cleanly
        """
        kind = UnitKind.from_path(path)
        source = text.encode("utf-8")

        try:
            # A Parser is not shared between threads; the Language is.
            parser = Parser(self._language_for(kind))
            tree = parser.parse(source)
        except Exception as e:
            self._logger.error("Parser failed", file=path, error=str(e))
            return StructuralFacts.empty(path, error=f"Parser failed: {e}")

        root = tree.root_node
        if root.has_error:
            line = _first_error_line(root)
            self._logger.debug("Source has syntax errors", file=path, line=line)
            return StructuralFacts.empty(path, error=f"Syntax error near line {line}", line=line)

        collector = _Collector(source=source, path=path)
        try:
            self._walk(root, collector)
        except Exception as e:
            self._logger.error("Fact extraction failed", file=path, error=str(e))
            return StructuralFacts.empty(path, error=f"Fact extraction failed: {e}")

        return self._finish(collector)

    def extract_file(self, file_path: str | Path) -> StructuralFacts:
        """Extract facts from a file on disk."""
        path = Path(file_path)
        if not path.exists():
            return StructuralFacts.empty(str(path), error=f"File not found: {path}")
        return self.extract(path.read_text(encoding="utf-8"), str(path))

    # -- Walk ---------------------------------------------------------------

    def _walk(self, node: Node, c: _Collector) -> None:
        """Single recursive walk dispatching on node type."""
        handler = self._handlers.get(node.type)
        if handler is not None:
            handler(self, node, c)
        elif node.type in UNINTERPRETED_DECLARATIONS:
            c.unrecognized.append(UnrecognizedNode(node.type, _line(node)))

        for child in node.children:
            self._walk(child, c)

    def _on_interface(self, node: Node, c: _Collector) -> None:
        name = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        if name is None or body is None:
            c.unrecognized.append(UnrecognizedNode(node.type, _line(node)))
            return
        c.shapes.append(PropertyShape(
            name=_text(name, c.source),
            fields=self._shape_fields(body, c),
            line=_line(node),
        ))

    def _on_type_alias(self, node: Node, c: _Collector) -> None:
        name = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name is None or value is None:
            c.unrecognized.append(UnrecognizedNode(node.type, _line(node)))
            return
        # Unions, mapped types and the like are not property shapes
        if value.type != "object_type":
            return
        c.shapes.append(PropertyShape(
            name=_text(name, c.source),
            fields=self._shape_fields(value, c),
            line=_line(node),
        ))

    def _shape_fields(self, body: Node, c: _Collector) -> tuple[PropertyField, ...]:
        fields = []
        for member in body.named_children:
            if member.type != "property_signature":
                continue
            name = member.child_by_field_name("name")
            type_node = member.child_by_field_name("type")
            child_types = {child.type for child in member.children}
            type_text = None
            if type_node is not None:
                type_text = _text(type_node, c.source).lstrip(":").strip()
            fields.append(PropertyField(
                name=_text(name, c.source) if name else "",
                type_text=type_text,
                readonly="readonly" in child_types,
                optional="?" in child_types,
                line=_line(member),
                raw_text=_text(member, c.source),
                column=_column(member, c.source),
            ))
        return tuple(fields)

    def _on_function_declaration(self, node: Node, c: _Collector) -> None:
        name = node.child_by_field_name("name")
        if name is None:
            return
        component_name = _text(name, c.source)
        if not _is_component_name(component_name):
            return

        params = node.child_by_field_name("parameters")
        return_type = node.child_by_field_name("return_type")
        signature = None
        if params is not None:
            signature = c.source[name.start_byte:params.end_byte].decode("utf-8", errors="replace")

        c.components.append(_PendingComponent(
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            name=component_name,
            result_type=_type_text(return_type, c.source),
            renders_markup=_contains_markup(node.child_by_field_name("body")),
            line=_line(node),
            signature=signature,
            signature_line=_line(name),
            signature_column=_column(name, c.source),
        ))

    def _on_variable_declarator(self, node: Node, c: _Collector) -> None:
        name = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name is None or name.type != "identifier" or value is None:
            return
        component_name = _text(name, c.source)
        if not _is_component_name(component_name):
            return

        function = _component_function(value)
        if function is None:
            return

        signature_node = _signature_start(function)
        result_type = _type_text(node.child_by_field_name("type"), c.source)
        if result_type is None:
            result_type = _type_text(function.child_by_field_name("return_type"), c.source)

        c.components.append(_PendingComponent(
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            name=component_name,
            result_type=result_type,
            renders_markup=_contains_markup(function.child_by_field_name("body")),
            line=_line(node),
            signature=_function_signature(function, c.source),
            signature_line=_line(signature_node),
            signature_column=_column(signature_node, c.source),
        ))

    def _on_opening_element(self, node: Node, c: _Collector) -> None:
        name = node.child_by_field_name("name")
        if name is None:
            # Fragment
            return

        attributes = []
        for child in node.named_children:
            if child.type == "jsx_attribute":
                attributes.append(_attribute(child, c.source))

        if node.type == "jsx_opening_element":
            has_text = _has_text_content(node.parent, c.source)
        else:
            has_text = False

        c.elements.append(_PendingElement(
            start_byte=node.start_byte,
            tag=_text(name, c.source),
            attributes=tuple(attributes),
            line=_line(node),
            column=_column(node, c.source),
            opening_text=_text(node, c.source),
            has_text=has_text,
        ))

    def _on_import(self, node: Node, c: _Collector) -> None:
        source = node.child_by_field_name("source")
        if source is None:
            c.unrecognized.append(UnrecognizedNode(node.type, _line(node)))
            return

        names: list[str] = []
        default_name = None
        namespace = None
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    default_name = _text(part, c.source)
                elif part.type == "namespace_import":
                    ident = _first_named(part, "identifier")
                    namespace = _text(ident, c.source) if ident else None
                elif part.type == "named_imports":
                    for specifier in part.named_children:
                        if specifier.type != "import_specifier":
                            continue
                        bound = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                        if bound is not None:
                            names.append(_text(bound, c.source))

        c.imports.append(ImportEdge(
            source=_text(source, c.source).strip("'\""),
            names=tuple(names),
            line=_line(node),
            default_name=default_name,
            namespace=namespace,
        ))

    def _on_export(self, node: Node, c: _Collector) -> None:
        is_default = any(child.type == "default" for child in node.children)
        line = _line(node)

        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            for name in _declared_names(declaration, c.source):
                c.exports.append(ExportEdge(name=name, line=line, default=is_default))
            return

        value = node.child_by_field_name("value")
        if value is not None:
            name = _text(value, c.source) if value.type == "identifier" else "default"
            c.exports.append(ExportEdge(name=name, line=line, default=True))
            return

        clause = _first_named(node, "export_clause")
        if clause is not None:
            for specifier in clause.named_children:
                if specifier.type == "export_specifier":
                    specifier_name = specifier.child_by_field_name("name")
                    if specifier_name is not None:
                        c.exports.append(ExportEdge(name=_text(specifier_name, c.source), line=line))
            return

        # export * from '...'
        if node.child_by_field_name("source") is None:
            c.unrecognized.append(UnrecognizedNode(node.type, line))

    _handlers = {
        "interface_declaration": _on_interface,
        "type_alias_declaration": _on_type_alias,
        "function_declaration": _on_function_declaration,
        "variable_declarator": _on_variable_declarator,
        "jsx_opening_element": _on_opening_element,
        "jsx_self_closing_element": _on_opening_element,
        "import_statement": _on_import,
        "export_statement": _on_export,
    }

    # -- Finish -------------------------------------------------------------

    def _finish(self, c: _Collector) -> StructuralFacts:
        """Resolve cross-references and freeze the collected facts."""
        labelled_ids = set()
        for pending in c.elements:
            if pending.tag == "label":
                for attr in pending.attributes:
                    if attr.name == "htmlFor" and attr.value:
                        labelled_ids.add(attr.value)

        elements = [_build_element(p, labelled_ids) for p in c.elements]
        exported = {e.name for e in c.exports}

        components = []
        for pending in c.components:
            nested = tuple(
                element for p, element in zip(c.elements, elements)
                if pending.start_byte <= p.start_byte < pending.end_byte
            )
            components.append(ComponentDecl(
                name=pending.name,
                result_type=pending.result_type,
                renders_markup=pending.renders_markup,
                line=pending.line,
                signature=pending.signature,
                signature_line=pending.signature_line,
                signature_column=pending.signature_column,
                exported=pending.name in exported,
                elements=nested,
            ))

        facts = StructuralFacts(
            path=c.path,
            property_shapes=tuple(c.shapes),
            components=tuple(components),
            elements=tuple(elements),
            imports=tuple(c.imports),
            exports=tuple(c.exports),
            unrecognized=tuple(c.unrecognized),
        )
        self._logger.debug(
            "Facts extracted",
            file=c.path,
            shapes=len(facts.property_shapes),
            components=len(facts.components),
            elements=len(facts.elements),
        )
        return facts


def _build_element(pending: _PendingElement, labelled_ids: set[str]) -> MarkupElement:
    names = {attr.name for attr in pending.attributes}
    has_click = any(a in names for a in CLICK_ATTRIBUTES)

    has_name = pending.has_text or any(a in names for a in NAME_ATTRIBUTES)
    if not has_name and _is_component_name(pending.tag):
        # Design-system components render their own label
        has_name = "label" in names
    if not has_name and pending.tag == "input":
        input_type = next((a.value for a in pending.attributes if a.name == "type"), None)
        has_name = input_type in ("submit", "button", "reset") and "value" in names
    if not has_name and pending.tag in FORM_FIELD_TAGS:
        element_id = next((a.value for a in pending.attributes if a.name == "id"), None)
        has_name = element_id is not None and element_id in labelled_ids

    return MarkupElement(
        tag=pending.tag,
        attributes=pending.attributes,
        line=pending.line,
        column=pending.column,
        opening_text=pending.opening_text,
        interactive=pending.tag in INTERACTIVE_TAGS or has_click,
        has_accessible_name=has_name,
        has_keyboard_handler=any(a in names for a in KEYBOARD_ATTRIBUTES),
        has_click_handler=has_click,
        has_text=pending.has_text,
    )


# -- Node helpers -----------------------------------------------------------

def _text(node: Node | None, source: bytes) -> str:
    """Text of a node, sliced on the encoded source."""
    if node is None:
        return ""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _line(node: Node) -> int:
    return node.start_point[0] + 1  # 1-indexed


def _column(node: Node, source: bytes) -> int:
    """Character (not byte) column of a node."""
    line_start = source.rfind(b"\n", 0, node.start_byte) + 1
    return len(source[line_start:node.start_byte].decode("utf-8", errors="replace"))


def _first_named(node: Node, node_type: str) -> Node | None:
    for child in node.named_children:
        if child.type == node_type:
            return child
    return None


def _first_error_line(root: Node) -> int:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return _line(node)
        stack.extend(reversed(node.children))
    return 1


def _is_component_name(name: str) -> bool:
    return bool(name) and name[0].isupper()


def _type_text(node: Node | None, source: bytes) -> str | None:
    if node is None:
        return None
    return _text(node, source).lstrip(":").strip() or None


def _contains_markup(node: Node | None) -> bool:
    """Sentinel check: any markup node below ``node``."""
    if node is None:
        return False
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in MARKUP_NODE_TYPES:
            return True
        stack.extend(current.children)
    return False


def _component_function(value: Node) -> Node | None:
    """The function behind a component initializer.

    Handles direct arrow/function expressions and wrapping calls such as
    ``forwardRef(...)`` or ``memo(...)``.
    """
    if value.type in FUNCTION_NODE_TYPES:
        return value
    if value.type == "call_expression":
        arguments = value.child_by_field_name("arguments")
        if arguments is None:
            return None
        for arg in arguments.named_children:
            found = _component_function(arg)
            if found is not None:
                return found
    if value.type == "parenthesized_expression" and value.named_children:
        return _component_function(value.named_children[0])
    return None


def _parameters(function: Node) -> Node | None:
    return function.child_by_field_name("parameters") or function.child_by_field_name("parameter")


def _signature_start(function: Node) -> Node:
    return _parameters(function) or function


def _function_signature(function: Node, source: bytes) -> str | None:
    """Text a return type annotation attaches to.

    For arrow functions this spans the parameters through ``=>``.
    """
    params = _parameters(function)
    if params is None:
        return None
    if function.type == "arrow_function":
        for child in function.children:
            if child.type == "=>":
                return source[params.start_byte:child.end_byte].decode("utf-8", errors="replace")
    return _text(params, source)


def _attribute(node: Node, source: bytes) -> MarkupAttribute:
    named = node.named_children
    name = _text(named[0], source) if named else ""
    value = None
    if len(named) > 1:
        value_node = named[-1]
        raw = _text(value_node, source)
        if value_node.type == "string":
            value = raw[1:-1]
        elif value_node.type == "jsx_expression":
            value = raw[1:-1].strip()
            # className={"..."} and className={'...'}
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"`":
                value = value[1:-1]
        else:
            value = raw
    return MarkupAttribute(
        name=name,
        value=value,
        raw_text=_text(node, source),
        line=_line(node),
        column=_column(node, source),
    )


def _has_text_content(element: Node | None, source: bytes) -> bool:
    """Non-blank text or expression children, looking into nested elements."""
    if element is None:
        return False
    for child in element.named_children:
        if child.type == "jsx_text" and _text(child, source).strip():
            return True
        if child.type == "jsx_expression" and child.named_children:
            if any(c.type != "comment" for c in child.named_children):
                return True
        if child.type == "jsx_element" and _has_text_content(child, source):
            return True
    return False


def _declared_names(declaration: Node, source: bytes) -> list[str]:
    name = declaration.child_by_field_name("name")
    if name is not None:
        return [_text(name, source)]
    names = []
    for child in declaration.named_children:
        if child.type == "variable_declarator":
            child_name = child.child_by_field_name("name")
            if child_name is not None:
                names.append(_text(child_name, source))
    return names
