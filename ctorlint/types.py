"""
Core types for the ctorlint engine.

This module provides shared dataclasses and types used across the engine,
adapters, and rules.
"""

import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Literal, Optional, Protocol, Tuple
from abc import ABC, abstractmethod


# Type aliases for clarity
Severity = Literal["info", "warn", "error"]
Priority = Literal["P0", "P1", "P2", "P3"]
Point = Tuple[int, int]  # (row, column) 0-based, column in bytes


class AnalysisCancelled(Exception):
    """Raised when the host cancels an in-flight analysis or fix run."""


@dataclass(frozen=True)
class Edit:
    """A suggested edit to fix an issue."""
    start_byte: int
    end_byte: int
    replacement: str


@dataclass(frozen=True)
class Diagnostic:
    """A rule violation located inside a single syntax node.

    Carries no file information; the rule turns it into a Finding.
    """
    rule: str
    message: str
    severity: Severity
    start_byte: int
    end_byte: int
    parameter_index: int
    parameter_name: Optional[str] = None


@dataclass(frozen=True)
class Finding:
    """A finding represents an issue detected by a rule."""
    rule: str
    message: str
    file: str
    start_byte: int
    end_byte: int
    severity: Severity
    autofix: Optional[List[Edit]] = None
    meta: Optional[Dict[str, Any]] = None

    def _replace(self, **kwargs):
        """Provide NamedTuple-like _replace method for compatibility."""
        return replace(self, **kwargs)


@dataclass(frozen=True)
class RuleMeta:
    """Metadata about a rule.

    Attributes:
        id: Unique rule identifier (e.g., "style.constructor_arguments")
        category: Rule category for grouping
        priority: P0..P3 priority level
        autofix_safety: Whether autofix is safe/caution/suggest-only
        title: Short human-readable title
        description: Human-readable description
        langs: List of supported languages
    """
    id: str
    category: str
    priority: Priority
    autofix_safety: Literal["safe", "caution", "suggest-only"]
    title: str = ""
    description: str = ""
    langs: List[str] = None  # ["csharp"]

    def __post_init__(self):
        if self.langs is None:
            object.__setattr__(self, 'langs', [])


@dataclass(frozen=True)
class Requires:
    """Represents requirements that a rule needs to run."""
    raw_text: bool = False
    syntax: bool = True


@dataclass
class RuleContext:
    """Context passed to rules during execution."""
    file_path: str
    text: str
    tree: Any
    adapter: 'LanguageAdapter'  # Forward reference
    config: Dict[str, Any]
    cancel_event: Optional[threading.Event] = None

    def __post_init__(self):
        self._source = None

    @property
    def source(self) -> bytes:
        """UTF-8 encoded text; tree-sitter offsets index into this."""
        if self._source is None:
            self._source = self.text.encode('utf-8')
        return self._source

    @property
    def language(self):
        """Get language from adapter."""
        return self.adapter.language_id if self.adapter else None

    def check_cancelled(self) -> None:
        """Raise AnalysisCancelled if the host asked to stop."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise AnalysisCancelled(self.file_path)


class Rule(Protocol):
    """Protocol for all rules in the engine.

    Rules analyze code and return findings. They should be stateless and thread-safe.
    """
    meta: RuleMeta
    requires: Requires

    def visit(self, ctx: RuleContext) -> Iterable[Finding]:
        """Visit a file and return findings.

        Args:
            ctx: Rule context containing file path, text, tree, adapter, and config

        Returns:
            Iterable of findings for this file
        """
        ...


class LanguageAdapter(ABC):
    """Abstract base class for language adapters."""

    @property
    @abstractmethod
    def language_id(self) -> str:
        """Return the language identifier (e.g., 'csharp')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> Tuple[str, ...]:
        """Return supported file extensions (e.g., ('.cs',))."""
        pass

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Parse text and return a Tree-sitter tree, or None if no parser is available."""
        pass

    @abstractmethod
    def list_files(self, paths: List[str]) -> List[str]:
        """List all files matching this adapter's extensions in the given paths."""
        pass
