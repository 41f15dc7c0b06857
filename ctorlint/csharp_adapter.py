"""
C# language adapter for tree-sitter.
"""
import logging
import os
import threading
from typing import List, Tuple, Any, Optional, Iterator

import tree_sitter
import tree_sitter_c_sharp

from .file_filter import is_excluded_dir, is_generated_path
from .types import LanguageAdapter
from .syntax import iter_nodes_of_kind

logger = logging.getLogger(__name__)

CONSTRUCTOR_KIND = "constructor_declaration"


class CSharpAdapter(LanguageAdapter):
    """Tree-sitter adapter for C# language."""

    def __init__(self):
        self._language = None
        self._local = threading.local()

    @property
    def language_id(self) -> str:
        """Return the language identifier."""
        return "csharp"

    @property
    def file_extensions(self) -> Tuple[str, ...]:
        """Return supported file extensions."""
        return (".cs",)

    def _get_parser(self) -> Optional[tree_sitter.Parser]:
        """Get or create the tree-sitter parser for the calling thread.

        Parsers are not safe to share between threads, so each worker
        thread of the runner gets its own.
        """
        parser = getattr(self._local, 'parser', None)
        if parser is not None:
            return parser

        try:
            if self._language is None:
                self._language = tree_sitter.Language(tree_sitter_c_sharp.language())
            parser = tree_sitter.Parser(self._language)
        except (ValueError, TypeError) as e:
            logger.warning(f"Could not initialize C# parser: {e}")
            return None

        self._local.parser = parser
        logger.debug("C# parser initialized for thread %s", threading.current_thread().name)
        return parser

    def parse(self, text: str) -> Any:
        """Parse text and return a Tree-sitter tree."""
        parser = self._get_parser()
        if parser is None:
            return None

        return parser.parse(text.encode('utf-8'))

    def list_files(self, paths: List[str]) -> List[str]:
        """List all C# files in the given paths, leaving out generated code."""
        cs_files = []

        for path in paths:
            if os.path.isfile(path):
                if any(path.endswith(ext) for ext in self.file_extensions):
                    cs_files.append(os.path.abspath(path))
            elif os.path.isdir(path):
                for root, dirs, files in os.walk(path):
                    dirs[:] = sorted(d for d in dirs if not is_excluded_dir(d))

                    for file in sorted(files):
                        if any(file.endswith(ext) for ext in self.file_extensions) and not is_generated_path(file):
                            cs_files.append(os.path.abspath(os.path.join(root, file)))
            else:
                logger.warning(f"Path '{path}' does not exist")

        return sorted(set(cs_files))

    def iter_constructors(self, tree: Any) -> Iterator[Any]:
        """Iterate over constructor_declaration nodes in document order."""
        if tree is None:
            return

        root_node = tree.root_node if hasattr(tree, 'root_node') else tree
        yield from iter_nodes_of_kind(root_node, CONSTRUCTOR_KIND)


# Create default instance
default_csharp_adapter = CSharpAdapter()
