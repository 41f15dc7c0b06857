"""
Suppression system for ctorlint rules.

A finding is dropped when the line it starts on carries a comment such as::

    public Point(int x, int y, int z) // ctorlint: ignore[style.constructor_arguments]

Patterns are comma separated and may use globs (``style.*``).
"""

import re
import fnmatch
from typing import Dict, List, Set, Tuple

from .types import Finding

_IGNORE_PATTERN = re.compile(r'(?://|/\*)\s*ctorlint:\s*ignore\s*\[\s*([^\]]*)\]', re.IGNORECASE)
_MALFORMED_PATTERN = re.compile(r'(?://|/\*)\s*ctorlint:\s*ignore\b(?!\s*\[[^\]]*\])', re.IGNORECASE)


def suppression_hint(rule_id: str) -> str:
    """Comment text that suppresses the given rule on a line."""
    return f"// ctorlint: ignore[{rule_id}]"


class SuppressionParser:
    """Parser for ctorlint suppression comments."""

    def __init__(self, text: str):
        self.text = text
        self.source = text.encode('utf-8')
        self.lines = text.split('\n')
        self._parse_suppressions()

    def _parse_suppressions(self):
        """Parse all suppression comments in the text."""
        self.line_suppressions: Dict[int, Set[str]] = {}  # line_number -> {rule_patterns}

        for line_num, line in enumerate(self.lines, 1):
            patterns = self._extract_suppression_patterns(line)
            if patterns:
                self.line_suppressions[line_num] = patterns

    def _extract_suppression_patterns(self, line: str) -> Set[str]:
        """Extract suppression patterns from a line."""
        patterns = set()

        for match in _IGNORE_PATTERN.finditer(line):
            for pattern in match.group(1).split(','):
                pattern = pattern.strip()
                if pattern:
                    patterns.add(pattern)

        return patterns

    def is_suppressed(self, rule_id: str, start_byte: int) -> bool:
        """Check if a rule finding should be suppressed."""
        line_num = self._byte_to_line(start_byte)

        for pattern in self.line_suppressions.get(line_num, ()):
            if rule_id == pattern or fnmatch.fnmatch(rule_id, pattern):
                return True

        return False

    def _byte_to_line(self, byte_offset: int) -> int:
        """Convert byte offset to 1-based line number."""
        if byte_offset <= 0:
            return 1
        return self.source.count(b'\n', 0, byte_offset) + 1


def filter_suppressed_findings(findings: List[Finding], text: str) -> List[Finding]:
    """Filter out suppressed findings from a list."""
    if not findings:
        return findings

    parser = SuppressionParser(text)
    return [f for f in findings if not parser.is_suppressed(f.rule, f.start_byte)]


def validate_suppression_patterns(text: str) -> List[Tuple[int, str]]:
    """
    Validate suppression comments in text and return any errors.

    Returns:
        List of (line_number, error_message) tuples
    """
    errors = []

    for line_num, line in enumerate(text.split('\n'), 1):
        for match in _IGNORE_PATTERN.finditer(line):
            if not match.group(1).strip():
                errors.append((line_num, "Empty suppression pattern"))
        if _MALFORMED_PATTERN.search(line):
            errors.append((line_num, "Suppression comment without [rule] list"))

    return errors
