"""
Source parsing.

Wraps tree-sitter so the rest of the package sees one ParsedUnit per
source file. The grammar is chosen from the file suffix.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict

import tree_sitter_javascript as ts_javascript
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser, Tree

_GRAMMARS: Dict[str, Callable[[], object]] = {
    ".js":  ts_javascript.language,
    ".jsx": ts_javascript.language,
    ".mjs": ts_javascript.language,
    ".cjs": ts_javascript.language,
    ".ts":  ts_typescript.language_typescript,
    ".mts": ts_typescript.language_typescript,
    ".cts": ts_typescript.language_typescript,
    ".tsx": ts_typescript.language_tsx,
}

SUPPORTED_SUFFIXES = tuple(_GRAMMARS)


@lru_cache(maxsize=None)
def _language(suffix: str) -> Language:
    return Language(_GRAMMARS[suffix]())


@dataclass(frozen=True)
class ParsedUnit:
    """One parsed source unit: tree plus the exact bytes it was parsed from."""

    tree: Tree
    source: bytes
    suffix: str

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def parse_source(source: str, suffix: str = ".js") -> ParsedUnit:
    """
    Parse JavaScript or TypeScript source.

    Raises ValueError for suffixes without a grammar. Syntax errors do not
    raise: tree-sitter recovers and marks ERROR nodes in the tree.
    """
    suffix = suffix.lower()
    if suffix not in _GRAMMARS:
        raise ValueError(f"Unsupported file type: {suffix}")

    encoded = source.encode("utf-8")
    parser = Parser(_language(suffix))
    return ParsedUnit(tree=parser.parse(encoded), source=encoded, suffix=suffix)
