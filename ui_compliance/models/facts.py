"""Structural facts extracted from one source unit.

Facts are a closed set of tagged variants. Every variant carries a
``kind`` tag so consumers can dispatch exhaustively; declaration-like
nodes the extractor cannot interpret become ``UnrecognizedNode``.
"""

from dataclasses import dataclass, field
from enum import Enum


class FactKind(str, Enum):
    """Tag of a structural fact."""

    PROPERTY_SHAPE = "property_shape"
    COMPONENT = "component"
    MARKUP_ELEMENT = "markup_element"
    IMPORT = "import"
    EXPORT = "export"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class PropertyField:
    """A field of a declared property shape."""

    name: str
    type_text: str | None
    readonly: bool
    optional: bool
    line: int
    raw_text: str
    column: int = 0

    @property
    def untyped(self) -> bool:
        return self.type_text is None or self.type_text.strip() == "any"


@dataclass(frozen=True)
class PropertyShape:
    """An interface or object type alias."""

    name: str
    fields: tuple[PropertyField, ...]
    line: int
    kind: FactKind = FactKind.PROPERTY_SHAPE

    @property
    def is_props(self) -> bool:
        return self.name.endswith("Props")

    @property
    def mutable_fields(self) -> list[PropertyField]:
        return [f for f in self.fields if not f.readonly]


@dataclass(frozen=True)
class MarkupAttribute:
    """One attribute on a markup element."""

    name: str
    value: str | None  # Quotes stripped for string literals; raw for expressions
    raw_text: str
    line: int
    column: int = 0


@dataclass(frozen=True)
class MarkupElement:
    """An opening or self-closing markup tag."""

    tag: str
    attributes: tuple[MarkupAttribute, ...]
    line: int
    column: int
    opening_text: str
    interactive: bool = False
    has_accessible_name: bool = False
    has_keyboard_handler: bool = False
    has_click_handler: bool = False
    has_text: bool = False
    kind: FactKind = FactKind.MARKUP_ELEMENT

    def attribute(self, name: str) -> MarkupAttribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def has_attribute(self, *names: str) -> bool:
        return any(self.attribute(n) is not None for n in names)

    @property
    def class_attribute(self) -> MarkupAttribute | None:
        return self.attribute("className") or self.attribute("class")

    @property
    def class_tokens(self) -> list[str]:
        attr = self.class_attribute
        if attr is None or attr.value is None:
            return []
        return attr.value.split()


@dataclass(frozen=True)
class ComponentDecl:
    """A component-like declaration (upper-case name)."""

    name: str
    result_type: str | None
    renders_markup: bool
    line: int
    signature: str | None = None  # Text the return type annotation attaches to
    signature_line: int = 0
    signature_column: int = 0
    exported: bool = False
    elements: tuple[MarkupElement, ...] = ()
    kind: FactKind = FactKind.COMPONENT

    @property
    def has_result_type(self) -> bool:
        return bool(self.result_type)


@dataclass(frozen=True)
class ImportEdge:
    """An import declaration."""

    source: str
    names: tuple[str, ...]
    line: int
    default_name: str | None = None
    namespace: str | None = None
    kind: FactKind = FactKind.IMPORT

    @property
    def bound_names(self) -> list[str]:
        names = list(self.names)
        if self.default_name:
            names.append(self.default_name)
        if self.namespace:
            names.append(self.namespace)
        return names


@dataclass(frozen=True)
class ExportEdge:
    """An exported binding."""

    name: str
    line: int
    default: bool = False
    kind: FactKind = FactKind.EXPORT


@dataclass(frozen=True)
class UnrecognizedNode:
    """A declaration-like node whose shape the walk did not understand."""

    node_type: str
    line: int
    kind: FactKind = FactKind.UNRECOGNIZED


Fact = PropertyShape | ComponentDecl | MarkupElement | ImportEdge | ExportEdge | UnrecognizedNode


@dataclass(frozen=True)
class StructuralFacts:
    """Everything the extractor learned about one unit."""

    path: str
    property_shapes: tuple[PropertyShape, ...] = ()
    components: tuple[ComponentDecl, ...] = ()
    elements: tuple[MarkupElement, ...] = ()
    imports: tuple[ImportEdge, ...] = ()
    exports: tuple[ExportEdge, ...] = ()
    unrecognized: tuple[UnrecognizedNode, ...] = ()
    parse_error: str | None = None
    parse_error_line: int = 1

    @classmethod
    def empty(cls, path: str, error: str | None = None, line: int = 1) -> "StructuralFacts":
        return cls(path=path, parse_error=error, parse_error_line=line)

    @property
    def ok(self) -> bool:
        return self.parse_error is None

    def all_facts(self) -> list[Fact]:
        """All facts in a single list, grouped by kind."""
        facts: list[Fact] = []
        facts.extend(self.property_shapes)
        facts.extend(self.components)
        facts.extend(self.elements)
        facts.extend(self.imports)
        facts.extend(self.exports)
        facts.extend(self.unrecognized)
        return facts

    def by_kind(self, kind: FactKind) -> list[Fact]:
        return [f for f in self.all_facts() if f.kind == kind]

    def elements_with_tag(self, *tags: str) -> list[MarkupElement]:
        return [e for e in self.elements if e.tag in tags]

    def imported_names(self) -> set[str]:
        names: set[str] = set()
        for edge in self.imports:
            names.update(edge.bound_names)
        return names

    def imports_from(self, source: str) -> list[ImportEdge]:
        return [edge for edge in self.imports if edge.source == source]

    def declared_names(self) -> set[str]:
        return {c.name for c in self.components}
