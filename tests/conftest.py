"""
Shared fixtures for ctorlint tests.
"""

import pytest

from ctorlint.csharp_adapter import CSharpAdapter
from ctorlint.syntax import ConstructorDeclaration


@pytest.fixture
def adapter():
    return CSharpAdapter()


@pytest.fixture
def parse_constructors(adapter):
    """Parse C# source and return its constructor declarations in document order."""

    def _parse(code: str, newline=None):
        tree = adapter.parse(code)
        if not tree:
            pytest.skip("Tree-sitter parser not available")
        source = code.encode('utf-8')
        return [
            ConstructorDeclaration.from_node(node, source, newline=newline)
            for node in adapter.iter_constructors(tree)
        ]

    return _parse


@pytest.fixture
def write_cs(tmp_path):
    """Write a C# file under tmp_path and return its path."""

    def _write(name: str, code: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(code)
        return path

    return _write
