"""
Deterministic identifiers for tree nodes.

Three names are derived per tree:
- identifier: camelCase form of a node label, unique among its siblings
- symbol: identifier made unique across the whole tree (used for emitted fixtures)
- path key: identifiers from the top-level node down to a leaf, joined with '.'

Path keys identify scenarios across regenerations, so they depend on labels and
ancestry only. Reordering siblings never changes a key; relabelling a node does.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Set

from scenariotree.core.tree.models import Node, Position, Tree

STOPWORDS = frozenset({"a", "an", "the", "is", "are"})
FALLBACK_IDENTIFIER = "node"
KEY_SEPARATOR = "."

_WORD_RE = re.compile(r"[A-Za-z0-9]+")


def _camelize(words: Sequence[str]) -> str:
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(word[:1].upper() + word[1:] for word in tail)


def normalize_label(label: str, stopwords: Iterable[str] = STOPWORDS) -> str:
    """Turn a label into an alphanumeric camelCase identifier.

    >>> normalize_label("given the id is not null")
    'givenIdNotNull'
    """
    drop = {word.lower() for word in stopwords}
    words = [word for word in _WORD_RE.findall(label) if word.lower() not in drop]
    identifier = _camelize(words)
    if not identifier:
        return FALLBACK_IDENTIFIER
    if identifier[0].isdigit():
        return f"n{identifier}"
    return identifier


class NamingEngine:
    """Derives identifiers, symbols and path keys for one tree."""

    def __init__(self, tree: Tree, *, stopwords: Optional[Iterable[str]] = None):
        self.tree = tree
        self.stopwords = frozenset(STOPWORDS if stopwords is None else stopwords)
        self._identifiers: Dict[Position, str] = {}
        self._symbols: Dict[Position, str] = {}
        self._assign_identifiers(tree.children, ())
        self._assign_symbols()

    # =========================================================================
    # Identifiers
    # =========================================================================

    def _assign_identifiers(self, siblings: Sequence[Node], parent: Position) -> None:
        bases = [normalize_label(node.label, self.stopwords) for node in siblings]
        counts = Counter(bases)
        names = [f"{base}{idx}" if counts[base] > 1 else base for idx, base in enumerate(bases, start=1)]

        # Suffixing can itself collide (e.g. "whenX1" next to a suffixed "whenX").
        while len(set(names)) != len(names):
            counts = Counter(names)
            names = [f"{name}N{idx}" if counts[name] > 1 else name for idx, name in enumerate(names, start=1)]

        for idx, (node, name) in enumerate(zip(siblings, names), start=1):
            position = parent + (idx,)
            self._identifiers[position] = name
            self._assign_identifiers(node.children, position)

    def identifier(self, position: Position) -> str:
        return self._identifiers[position]

    def identifiers(self) -> Dict[Position, str]:
        """All identifiers keyed by position, in pre-order."""
        return {position: self._identifiers[position] for position, _ in self.tree.walk()}

    # =========================================================================
    # Symbols
    # =========================================================================

    def _assign_symbols(self) -> None:
        counts = Counter(self._identifiers.values())
        used: Set[str] = set()
        # Pre-order guarantees a parent's symbol exists before its children need it.
        for position, _ in self.tree.walk():
            name = self._identifiers[position]
            parent = position[:-1]
            if counts[name] > 1 and parent:
                name = self._symbols[parent] + name[:1].upper() + name[1:]
            candidate = name
            extra = 2
            while candidate in used:
                candidate = f"{name}{extra}"
                extra += 1
            used.add(candidate)
            self._symbols[position] = candidate

    def symbol(self, position: Position) -> str:
        return self._symbols[position]

    # =========================================================================
    # Path keys
    # =========================================================================

    def chain(self, position: Position) -> List[str]:
        """Identifiers of every node from the top level down to ``position``."""
        return [self._identifiers[position[:i]] for i in range(1, len(position) + 1)]

    def path_key(self, position: Position) -> str:
        return KEY_SEPARATOR.join(self.chain(position))


__all__ = ["FALLBACK_IDENTIFIER", "KEY_SEPARATOR", "NamingEngine", "STOPWORDS", "normalize_label"]
