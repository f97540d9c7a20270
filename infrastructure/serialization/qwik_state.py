"""Resolver for the serialized state blob embedded in server-rendered pages.

The analytics site renders its pages with Qwik. All the data a page was
built from ships inside one ``<script type="qwik/json">`` block as a flat
``objs`` array. Containers in that array refer to other entries through
base-36 index strings, so ``{"runes": "1cp"}`` means "the value of runes is
``objs[int("1cp", 36)]``". The graph may contain cycles.

Nodes are kept as a flat list and references are followed by index with a
fixed depth bound; a cyclic object graph is never built.
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Collection, List, Optional
import logging

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

STATE_SCRIPT_TYPE = "qwik/json"
MAX_DEPTH = 6

# Qwik writes indices in lowercase base 36. int(s, 36) alone would also take
# signs, underscores and surrounding whitespace, hence the explicit pattern.
_REF_PATTERN = re.compile(r"[0-9a-z]+")

NodePredicate = Callable[[Any], bool]


def extract_state_block(html: str) -> Optional[str]:
    """Raw JSON text of the page's serialized-state script, or None."""
    soup = BeautifulSoup(html, "html.parser")
    script = soup.find("script", attrs={"type": STATE_SCRIPT_TYPE})
    if script is None:
        return None
    text = script.string if script.string is not None else script.get_text()
    return text or None


class SerializedState:
    """Arena of nodes plus depth-bounded reference resolution."""

    def __init__(self, nodes: List[Any], max_depth: int = MAX_DEPTH) -> None:
        self.nodes = nodes
        self.max_depth = max_depth

    def __len__(self) -> int:
        return len(self.nodes)

    @classmethod
    def parse(cls, text: str) -> Optional["SerializedState"]:
        """Build from the JSON document: ``{"objs": [...]}`` or a bare array."""
        try:
            doc = json.loads(text)
        except (TypeError, ValueError) as exc:
            logger.warning(f"Serialized state is not valid JSON: {exc}")
            return None
        nodes = doc.get("objs") if isinstance(doc, dict) else doc
        if not isinstance(nodes, list) or not nodes:
            logger.warning("Serialized state has no node array")
            return None
        return cls(nodes)

    @classmethod
    def from_html(cls, html: str) -> Optional["SerializedState"]:
        block = extract_state_block(html)
        if block is None:
            logger.warning("No serialized state block found in page")
            return None
        return cls.parse(block)

    # ── References ──────────────────────────────────────────────────────

    def index_of(self, ref: str) -> Optional[int]:
        """Node index a reference string points at, None for plain strings."""
        if not _REF_PATTERN.fullmatch(ref):
            return None
        idx = int(ref, 36)
        return idx if idx < len(self.nodes) else None

    def resolve_ref(self, value: Any) -> Any:
        """One hop: the referenced node, or ``value`` unchanged."""
        if not isinstance(value, str):
            return value
        idx = self.index_of(value)
        return value if idx is None else self.nodes[idx]

    def deep_resolve(self, node: Any, depth: int = 0) -> Any:
        """Replace references with the values they point at, recursively.

        Every container level and every reference hop costs one unit of
        depth. Past ``max_depth`` the node is returned as-is, so cycles
        terminate with a partially resolved value.
        """
        if depth > self.max_depth:
            return node
        if isinstance(node, dict):
            return {k: self.deep_resolve(v, depth + 1) for k, v in node.items()}
        if isinstance(node, list):
            return [self.deep_resolve(v, depth + 1) for v in node]
        if isinstance(node, str):
            idx = self.index_of(node)
            if idx is None:
                return node
            return self.deep_resolve(self.nodes[idx], depth + 1)
        return node

    def expand(self, value: Any) -> Any:
        """Resolve a value that is still a bare reference.

        Extractors walk nested payloads key by key; long chains can outrun
        the depth bound of a single ``deep_resolve`` call, so each step gets
        a fresh budget.
        """
        if isinstance(value, str):
            return self.deep_resolve(value)
        return value

    # ── Root discovery ──────────────────────────────────────────────────

    def find_all(self, predicate: NodePredicate, limit: Optional[int] = None) -> List[int]:
        found: List[int] = []
        for idx, node in enumerate(self.nodes):
            if predicate(node):
                found.append(idx)
                if limit is not None and len(found) >= limit:
                    break
        return found

    def find_root(self, signature: Collection[str]) -> Optional[int]:
        """Index of the first object whose keys include every key in ``signature``."""
        wanted = set(signature)
        matches = self.find_all(lambda n: isinstance(n, dict) and wanted.issubset(n.keys()), limit=1)
        return matches[0] if matches else None

    def resolve_root(self, signature: Collection[str]) -> Optional[dict]:
        idx = self.find_root(signature)
        if idx is None:
            logger.warning(f"No node matches signature {sorted(signature)}")
            return None
        return self.deep_resolve(self.nodes[idx])
