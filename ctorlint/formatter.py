"""
Normalizers for rewritten syntax.

Rules perform the smallest structural edit they can (insert a line break,
drop a space) and flag the result as needing formatting. A normalizer then
computes the final whitespace for the flagged node. Keeping the two apart
lets each be tested on its own.
"""

from typing import Dict, Optional
from abc import ABC, abstractmethod

from .syntax import ConstructorDeclaration

PARAMETER_INDENT_STYLES = ("indent", "align")


class Formatter(ABC):
    """Abstract base class for node normalizers."""

    @abstractmethod
    def format(self, node: ConstructorDeclaration, **options) -> ConstructorDeclaration:
        """Normalize a flagged node and return the result."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the formatter can be used."""
        pass


class ConstructorParameterFormatter(Formatter):
    """Re-indents the wrapped parameters of a constructor declaration.

    Every parameter whose leading trivia holds line breaks keeps as many line
    breaks, followed by the computed indentation. Parameters that share
    a line with their predecessor are left alone, as are unflagged nodes.

    Options:
        indent_size: spaces per indentation level (default 4)
        use_tabs: indent with a tab instead of spaces (default False)
        parameter_indent: "indent" (declaration indent plus one level) or
            "align" (line up under the first parameter when it sits on the
            header line)
    """

    def format(self, node: ConstructorDeclaration, indent_size: int = 4, use_tabs: bool = False,
               parameter_indent: str = "indent", **options) -> ConstructorDeclaration:
        if not node.needs_formatting:
            return node

        indent = self.parameter_indent(node, indent_size, use_tabs, parameter_indent)
        parameters = []
        for parameter in node.parameters:
            if "\n" in parameter.leading_trivia:
                line_breaks = parameter.leading_trivia.count("\n")
                parameter = parameter.with_leading_trivia(node.newline * line_breaks + indent)
            parameters.append(parameter)

        return node.with_parameters(parameters).with_formatting_annotation(False)

    def parameter_indent(self, node: ConstructorDeclaration, indent_size: int = 4,
                         use_tabs: bool = False, style: str = "indent") -> str:
        """Indentation placed in front of a wrapped parameter."""
        if style not in PARAMETER_INDENT_STYLES:
            raise ValueError(f"Unknown parameter_indent style: {style!r}")

        if style == "align" and node.parameters and "\n" not in node.parameters[0].leading_trivia:
            line = node.header + node.parameters[0].leading_trivia
            if "\n" not in node.header:
                return node.indent + " " * len(line)
            last_line = line.rsplit("\n", 1)[1]
            leading = last_line[:len(last_line) - len(last_line.lstrip(" \t"))]
            return leading + " " * (len(last_line) - len(leading))

        unit = "\t" if use_tabs else " " * indent_size
        return node.indent + unit

    def is_available(self) -> bool:
        """Always available."""
        return True


class NoOpFormatter(Formatter):
    """No-operation formatter that returns nodes unchanged."""

    def format(self, node: ConstructorDeclaration, **options) -> ConstructorDeclaration:
        """Return node unchanged."""
        return node

    def is_available(self) -> bool:
        """Always available."""
        return True


# Registry of formatters by language
_formatters: Dict[str, Formatter] = {
    "csharp": ConstructorParameterFormatter(),
}


def get_formatter(language: str) -> Optional[Formatter]:
    """Get formatter for a language."""
    return _formatters.get(language)


def format_node(node: ConstructorDeclaration, language: str, **options) -> ConstructorDeclaration:
    """
    Normalize a node for a specific language.

    Args:
        node: Node flagged with needs_formatting
        language: Language identifier
        **options: Formatter-specific options

    Returns:
        Normalized node (or the original if no formatter is available)
    """
    formatter = get_formatter(language)
    if formatter and formatter.is_available():
        return formatter.format(node, **options)
    return node


def register_formatter(language: str, formatter: Formatter) -> None:
    """Register a formatter for a language."""
    _formatters[language] = formatter


def list_available_formatters() -> Dict[str, bool]:
    """List all languages and whether formatters are available."""
    return {lang: formatter.is_available() for lang, formatter in _formatters.items()}
