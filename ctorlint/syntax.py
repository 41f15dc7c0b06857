"""
Immutable views of C# constructor declarations.

ConstructorDeclaration and Parameter are built from tree-sitter nodes but
keep no reference back into the tree: every piece of source they cover is
held as text. A declaration can therefore be rebuilt with different
parameter trivia, re-measured, and serialised again while the original
stays valid for every other consumer.

Source layout of a declaration, in order::

    header                         "public Point("
    parameters[0].leading_trivia   ""
    parameters[0].text             "int x"
    separators[0]                  ","
    parameters[1].leading_trivia   " "
    parameters[1].text             "int y"
    tail                           ") { }"

A parameter's leading trivia is the run of whitespace directly in front of
it. Everything else between two parameters (the comma and any comments)
belongs to the separator.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional, Tuple

from .types import Point

_WHITESPACE = b" \t\r\n\f\v"
_SKIPPED_LIST_CHILDREN = {"(", ")", "comment"}


def iter_nodes_of_kind(root, kind: str) -> Iterator:
    """Yield every node of the given kind at or below root, in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == kind:
            yield node
        stack.extend(reversed(node.children))


def detect_newline(source: bytes) -> str:
    """Return the line break style used by the document."""
    return "\r\n" if b"\r\n" in source else "\n"


def advance_point(point: Point, text: str) -> Point:
    """Return the point reached after writing text starting at point."""
    data = text.encode('utf-8')
    newlines = data.count(b"\n")
    if not newlines:
        return (point[0], point[1] + len(data))
    return (point[0] + newlines, len(data) - data.rfind(b"\n") - 1)


def _split_trailing_whitespace(gap: bytes) -> Tuple[bytes, bytes]:
    stripped = gap.rstrip(_WHITESPACE)
    return stripped, gap[len(stripped):]


def _line_indent(source: bytes, byte_offset: int) -> str:
    line_start = source.rfind(b"\n", 0, byte_offset) + 1
    prefix = source[line_start:byte_offset]
    return prefix[:len(prefix) - len(prefix.lstrip(b" \t"))].decode('utf-8')


def _node_text(source: bytes, node) -> str:
    return source[node.start_byte:node.end_byte].decode('utf-8')


def _parameter_chunks(parameter_list) -> List[list]:
    """Group the children of a parameter_list into one node run per parameter.

    Newer grammars hide `params T[] xs` behind an inline rule, so its tokens
    show up as direct children of the list rather than under a single node.
    """
    chunks, current = [], []
    for child in parameter_list.children:
        if child.type in _SKIPPED_LIST_CHILDREN:
            continue
        if child.type == ",":
            if current:
                chunks.append(current)
            current = []
            continue
        current.append(child)
    if current:
        chunks.append(current)
    return chunks


def _parameter_name(chunk, source: bytes) -> Optional[str]:
    if len(chunk) == 1:
        name_node = chunk[0].child_by_field_name('name')
        if name_node is not None:
            return _node_text(source, name_node)
        chunk = chunk[0].children
    identifiers = [n for n in chunk if n.type == 'identifier']
    return _node_text(source, identifiers[-1]) if identifiers else None


def find_parameter_list(node):
    """Return the parameter_list child of a constructor node, or None."""
    parameter_list = node.child_by_field_name('parameters')
    if parameter_list is not None:
        return parameter_list
    return next((c for c in node.children if c.type == 'parameter_list'), None)


@dataclass(frozen=True)
class Parameter:
    """One entry of a constructor's parameter list."""
    text: str
    leading_trivia: str
    start_byte: int
    end_byte: int
    start_point: Point
    end_point: Point
    name: Optional[str] = None

    @property
    def end_line(self) -> int:
        """0-based row on which the parameter's span ends."""
        return self.end_point[0]

    def with_leading_trivia(self, trivia: str) -> 'Parameter':
        """Copy of this parameter with its leading whitespace replaced.

        The copy's positions are stale until it is placed into a
        declaration with ConstructorDeclaration.with_parameters().
        """
        return replace(self, leading_trivia=trivia)


@dataclass(frozen=True)
class ConstructorDeclaration:
    """Immutable view of one constructor_declaration node."""
    name: str
    start_byte: int
    end_byte: int
    start_point: Point
    header: str
    parameters: Tuple[Parameter, ...]
    separators: Tuple[str, ...]
    tail: str
    indent: str = ""
    newline: str = "\n"
    needs_formatting: bool = False

    @classmethod
    def from_node(cls, node, source: bytes, newline: Optional[str] = None) -> 'ConstructorDeclaration':
        """Build a declaration view from a tree-sitter constructor node.

        Args:
            node: constructor_declaration node
            source: the UTF-8 bytes the tree was parsed from
            newline: line break to use for inserted breaks (default: detected)
        """
        parameter_list = find_parameter_list(node)
        if parameter_list is None:
            raise ValueError(f"constructor at byte {node.start_byte} has no parameter list")

        name_node = node.child_by_field_name('name')
        common = dict(
            name=_node_text(source, name_node) if name_node is not None else "",
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            start_point=tuple(node.start_point),
            indent=_line_indent(source, node.start_byte),
            newline=newline or detect_newline(source),
        )

        chunks = _parameter_chunks(parameter_list)
        if not chunks:
            open_end = parameter_list.children[0].end_byte
            return cls(
                header=source[node.start_byte:open_end].decode('utf-8'),
                parameters=(),
                separators=(),
                tail=source[open_end:node.end_byte].decode('utf-8'),
                **common,
            )

        header = b""
        parameters, separators = [], []
        previous_end = node.start_byte
        for index, chunk in enumerate(chunks):
            start, end = chunk[0].start_byte, chunk[-1].end_byte
            before, leading = _split_trailing_whitespace(source[previous_end:start])
            if index == 0:
                header = before
            else:
                separators.append(before.decode('utf-8'))

            parameters.append(Parameter(
                text=source[start:end].decode('utf-8'),
                leading_trivia=leading.decode('utf-8'),
                start_byte=start,
                end_byte=end,
                start_point=tuple(chunk[0].start_point),
                end_point=tuple(chunk[-1].end_point),
                name=_parameter_name(chunk, source),
            ))
            previous_end = end

        return cls(
            header=header.decode('utf-8'),
            parameters=tuple(parameters),
            separators=tuple(separators),
            tail=source[previous_end:node.end_byte].decode('utf-8'),
            **common,
        )

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)

    @property
    def parameter_names(self) -> List[Optional[str]]:
        return [p.name for p in self.parameters]

    def to_source(self) -> str:
        """Serialise the declaration back to source text."""
        parts = [self.header]
        for index, parameter in enumerate(self.parameters):
            if index:
                parts.append(self.separators[index - 1])
            parts.append(parameter.leading_trivia)
            parts.append(parameter.text)
        parts.append(self.tail)
        return "".join(parts)

    def with_parameters(self, parameters: Iterable[Parameter]) -> 'ConstructorDeclaration':
        """New declaration with the parameter list replaced.

        Parameter positions are recomputed from the new text, as if the
        declaration had been written at the same start point.
        """
        parameters = tuple(parameters)
        if len(parameters) != len(self.parameters):
            raise ValueError(
                f"expected {len(self.parameters)} parameters for '{self.name}', got {len(parameters)}"
            )

        offset = self.start_byte + len(self.header.encode('utf-8'))
        point = advance_point(self.start_point, self.header)
        placed = []
        for index, parameter in enumerate(parameters):
            if index:
                separator = self.separators[index - 1]
                offset += len(separator.encode('utf-8'))
                point = advance_point(point, separator)
            offset += len(parameter.leading_trivia.encode('utf-8'))
            point = advance_point(point, parameter.leading_trivia)

            start_byte, start_point = offset, point
            offset += len(parameter.text.encode('utf-8'))
            point = advance_point(point, parameter.text)
            placed.append(replace(
                parameter,
                start_byte=start_byte,
                end_byte=offset,
                start_point=start_point,
                end_point=point,
            ))

        return replace(
            self,
            parameters=tuple(placed),
            end_byte=offset + len(self.tail.encode('utf-8')),
        )

    def with_formatting_annotation(self, needs_formatting: bool = True) -> 'ConstructorDeclaration':
        """Copy flagged (or unflagged) for the normalizer."""
        return replace(self, needs_formatting=needs_formatting)
