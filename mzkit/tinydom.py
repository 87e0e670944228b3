"""A small XML document model: elements, character data, parsing and printing."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from typing import IO, Any, AnyStr
from xml.parsers import expat

_WHITESPACE = " \t\n\r\f\v"
_CHUNK_SIZE = 1024

_ESCAPES = {'"': "&quot;", "<": "&lt;", ">": "&gt;", "&": "&amp;"}
_UNESCAPES = {"quot": '"', "lt": "<", "gt": ">", "amp": "&"}
_ESCAPE_RE = re.compile(r'["<>&]')
_UNESCAPE_RE = re.compile(r"&(quot|lt|gt|amp);")

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class TinyDomError(RuntimeError):
    """Raised for malformed documents and unparsable attribute values."""


class Node:
    """Base of every node in a document tree."""

    def __init__(self, parent: Element | None = None) -> None:
        self._parent: Element | None = None
        if parent is not None:
            parent.add_child(self)

    @property
    def parent(self) -> Element | None:
        return self._parent

    def reparent(self, parent: Element | None) -> None:
        """Move this node to the end of another element's children, or detach it."""
        if self._parent is not None:
            self._parent.remove_child(self)
        if parent is not None:
            parent.add_child(self)


@dataclass
class Attribute:
    """A single key/value attribute of an element."""

    key: str
    data: str


class Element(Node):
    """An element with a name, ordered attributes and ordered children."""

    def __init__(self, name: str = "", parent: Element | None = None) -> None:
        self.name = name
        self._attributes: list[Attribute] = []
        self._children: list[Node] = []
        super().__init__(parent)

    def __repr__(self) -> str:
        return f"Element({self.name!r})"

    @property
    def attributes(self) -> tuple[Attribute, ...]:
        return tuple(self._attributes)

    @property
    def children(self) -> tuple[Node, ...]:
        return tuple(self._children)

    def _find_attribute(self, key: str) -> int | None:
        return next(
            (i for i, attr in enumerate(self._attributes) if attr.key == key), None
        )

    def attribute(self, key: str, default: str = "") -> str:
        """Return the attribute's text, or ``default`` if it is absent."""
        index = self._find_attribute(key)
        return default if index is None else self._attributes[index].data

    def have_attribute(self, key: str) -> bool:
        return self._find_attribute(key) is not None

    def clear_attribute(self, key: str) -> None:
        index = self._find_attribute(key)
        if index is not None:
            del self._attributes[index]

    def set_attribute(self, key: str, data: str) -> None:
        """Set an attribute, keeping its position if it already exists."""
        index = self._find_attribute(key)
        if index is None:
            self._attributes.append(Attribute(key, data))
        else:
            self._attributes[index] = Attribute(key, data)

    def set_attribute_value(self, key: str, value: Any) -> None:
        """Store a value as attribute text."""
        if isinstance(value, bool):
            text = "1" if value else "0"
        elif isinstance(value, float):
            text = format(value, "g")
        else:
            text = str(value)
        self.set_attribute(key, text)

    def attribute_value(self, key: str, default: Any) -> Any:
        """Return the attribute converted to the type of ``default``.

        Absent attributes yield ``default``; text that does not convert
        entirely raises :class:`TinyDomError`.
        """
        if not self.have_attribute(key):
            return default
        text = self.attribute(key)
        if isinstance(default, str):
            return text
        try:
            return _convert(text.lstrip(_WHITESPACE), type(default))
        except ValueError:
            raise TinyDomError(f"error parsing attribute value: {key}") from None

    def add_child(self, child: Node | None, before: Node | None = None) -> None:
        """Append ``child``, or insert it ahead of ``before`` when that is a child."""
        if child is None:
            return
        if child._parent is not None:
            child._parent.remove_child(child)
        index = None
        if before is not None:
            index = next(
                (i for i, node in enumerate(self._children) if node is before), None
            )
        if index is None:
            self._children.append(child)
        else:
            self._children.insert(index, child)
        child._parent = self

    def remove_child(self, child: Node | None) -> None:
        if child is None:
            return
        for i, node in enumerate(self._children):
            if node is child:
                del self._children[i]
                child._parent = None
                return


class CharacterData(Node):
    """A run of text inside an element."""

    def __init__(self, value: str = "", parent: Element | None = None) -> None:
        self.value = value
        super().__init__(parent)

    def __repr__(self) -> str:
        return f"CharacterData({self.value!r})"

    def trimmed_value(self) -> str:
        return self.value.strip(_WHITESPACE)


def _convert(text: str, kind: type) -> Any:
    if kind is bool:
        if _INT_RE.fullmatch(text) and int(text) in (0, 1):
            return bool(int(text))
        raise ValueError(text)
    if kind is int:
        if _INT_RE.fullmatch(text):
            return int(text)
        raise ValueError(text)
    if kind is float:
        if _FLOAT_RE.fullmatch(text):
            return float(text)
        raise ValueError(text)
    if text != text.rstrip(_WHITESPACE) or not text:
        raise ValueError(text)
    return kind(text)


def escape(text: str) -> str:
    """Replace the characters ``" < > &`` with XML entities."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], text)


def unescape(text: str) -> str:
    """Replace the entities produced by :func:`escape` with their characters."""
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPES[m.group(1)], text)


class _TreeBuilder:
    def __init__(self) -> None:
        self.root: Element | None = None
        self.stack: list[Element] = []
        self.skipped = 0

    def start(self, name: str, attrs: list[str]) -> None:
        parent = self.stack[-1] if self.stack else None
        element = Element(name, parent)
        for key, data in zip(attrs[::2], attrs[1::2]):
            element.set_attribute(key, data)
        if self.root is None:
            self.root = element
        self.stack.append(element)

    def end(self, name: str) -> None:
        self.stack.pop()

    def characters(self, data: str) -> None:
        current = self.stack[-1]
        children = current._children
        if children and isinstance(children[-1], CharacterData):
            children[-1].value += data
        else:
            CharacterData(data, current)

    @staticmethod
    def default(data: str) -> None:
        if data.strip(_WHITESPACE):
            raise TinyDomError(f"unexpected input: '{data}'")

    def skip(self, *args: Any) -> None:
        """Count comments, declarations and processing instructions left out of the tree."""
        self.skipped += 1


def parse(stream: IO[AnyStr]) -> Element:
    """Read an XML document from a text or binary stream and return its root."""
    builder = _TreeBuilder()
    parser = expat.ParserCreate()
    parser.ordered_attributes = True
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.characters
    parser.CommentHandler = builder.skip
    parser.ProcessingInstructionHandler = builder.skip
    parser.XmlDeclHandler = builder.skip
    parser.StartDoctypeDeclHandler = builder.skip
    parser.EndDoctypeDeclHandler = builder.skip
    parser.DefaultHandler = builder.default

    try:
        while True:
            chunk = stream.read(_CHUNK_SIZE)
            final = len(chunk) < _CHUNK_SIZE
            parser.Parse(chunk, final)
            if final:
                break
    except expat.ExpatError as exc:
        raise TinyDomError(
            f"parse error at line {exc.lineno}, column {exc.offset}: "
            f"{expat.ErrorString(exc.code)}"
        ) from None

    if builder.root is None:
        raise TinyDomError("document has no root element")
    return builder.root


def parse_string(text: str | bytes) -> Element:
    """Parse an XML document held in a string or bytes."""
    if isinstance(text, bytes):
        return parse(io.BytesIO(text))
    return parse(io.StringIO(text))


def _unparse_node(node: Node, stream: IO[str], indent: int) -> None:
    if isinstance(node, Element):
        _unparse_element(node, stream, indent)
    elif isinstance(node, CharacterData):
        text = node.trimmed_value()
        if text:
            stream.write(" " * indent + escape(text) + "\n")


def _unparse_element(element: Element, stream: IO[str], indent: int) -> None:
    pad = " " * indent
    name = escape(element.name)
    stream.write(pad + "<" + name)
    for attr in element._attributes:
        stream.write(f' {escape(attr.key)}="{escape(attr.data)}"')

    children = element._children
    if not children:
        stream.write("/>\n")
    elif (
        len(children) == 1
        and isinstance(children[0], CharacterData)
        and len(children[0].value) < 50
    ):
        stream.write(f">{escape(children[0].trimmed_value())}</{name}>\n")
    else:
        stream.write(">\n")
        for child in children:
            _unparse_node(child, stream, indent + 2)
        stream.write(f"{pad}</{name}>\n")


def unparse(element: Element, stream: IO[str]) -> None:
    """Write ``element`` and its descendants as indented XML text."""
    _unparse_element(element, stream, 0)


def unparse_to_string(element: Element) -> str:
    """Return ``element`` and its descendants as indented XML text."""
    out = io.StringIO()
    unparse(element, out)
    return out.getvalue()