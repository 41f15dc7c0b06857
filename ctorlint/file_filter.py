"""
File filtering for the ctorlint engine.

Generated code is never analyzed or fixed. A file counts as generated when:
- it sits in a build output or generated-sources directory (bin, obj, ...)
- its name carries a generated-code suffix (.Designer.cs, .g.cs, ...)
- its leading comment block holds an <auto-generated> marker

Usage:
    from ctorlint.file_filter import should_analyze_file

    if not should_analyze_file(file_path, text):
        return [], 0.0
"""

import re
from functools import lru_cache
from typing import FrozenSet, Optional


# ============================================================================
# VENDOR / GENERATED DIRECTORY EXCLUSIONS
# ============================================================================
EXCLUDED_DIRS: FrozenSet[str] = frozenset([
    # Build output
    "bin",
    "obj",

    # Package managers / dependencies
    "packages",
    "node_modules",
    "__pycache__",

    # Generated sources
    "generated",
    "auto-generated",
    "autogen",
    "__generated__",
])


# ============================================================================
# GENERATED FILE NAMES
# ============================================================================
# WinForms/WPF designers, source generators and XAML build output
GENERATED_SUFFIXES: FrozenSet[str] = frozenset([
    ".designer.cs",
    ".generated.cs",
    ".g.cs",
    ".g.i.cs",
])

GENERATED_PREFIXES: FrozenSet[str] = frozenset([
    "temporarygeneratedfile_",
])


# ============================================================================
# GENERATED HEADER COMMENTS
# ============================================================================
# Comments and blank lines at the top of the file, before any code
_LEADING_COMMENTS = re.compile(r'\A(?:\s*(?://[^\n]*|/\*.*?\*/))*', re.DOTALL)
_GENERATED_MARKER = re.compile(r'<\s*auto-?generated', re.IGNORECASE)


@lru_cache(maxsize=4096)
def is_excluded_dir(name: str) -> bool:
    """Check if a directory name is never walked (hidden, build output, generated)."""
    return name.startswith('.') or name.lower() in EXCLUDED_DIRS


@lru_cache(maxsize=4096)
def is_generated_path(file_path: str) -> bool:
    """Check if a file name marks generated code."""
    name = re.split(r'[/\\]', file_path)[-1].lower()
    return any(name.endswith(suffix) for suffix in GENERATED_SUFFIXES) or \
        any(name.startswith(prefix) for prefix in GENERATED_PREFIXES)


def has_generated_header(text: str) -> bool:
    """Check if the leading comment block of text carries an <auto-generated> marker."""
    header = _LEADING_COMMENTS.match(text.lstrip("\ufeff"))
    return bool(header and _GENERATED_MARKER.search(header.group(0)))


def should_analyze_file(file_path: str, text: Optional[str] = None) -> bool:
    """
    Central decision point: should this file be analyzed and fixed?

    Args:
        file_path: Path to the file
        text: File content (optional, for the header check)

    Returns:
        True if the file should be analyzed, False if it is generated code
    """
    if is_generated_path(file_path):
        return False

    if text is not None and has_generated_header(text):
        return False

    return True
