"""
Mindmap Generator
=================
Turns document text into a leveled node graph:
  1. Heading extraction  (markdown `#` headings, structured documents)
  2. Concept extraction  (capitalised keywords, unstructured selections)
  3. Structure building  (parent assignment + synthesized root)

Each generator owns its node-id counter; use one instance per generation run
when runs must stay independent.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from mindmap_service.core.errors import InputTooLargeError
from mindmap_service.schemas.mindmap import (
    Connection,
    GraphMetadata,
    MindmapGraph,
    Node,
)

logger = logging.getLogger(__name__)

# Labels never span a line terminator, so CRLF lines do not match.
HEADING_RE = re.compile(r"^(#{1,6})\s+([^\r\n]+)$")

CONCEPT_STOP_WORDS = frozenset(
    {"The", "And", "Or", "But", "For", "With", "From", "This", "That"}
)
MAX_CONCEPTS = 10
CONCEPT_WORDS_PER_NODE = 3

ROOT_TEXT = "Document"


def empty_graph() -> MindmapGraph:
    """Canonical graph for a source that yielded nothing."""
    return MindmapGraph(
        nodes=[],
        connections=[],
        metadata=GraphMetadata(
            source_type="empty",
            generated_at=datetime.now(timezone.utc),
            node_count=0,
        ),
    )


class MindmapGenerator:
    """Extracts nodes from text and links them into a hierarchy."""

    def __init__(self, max_lines: Optional[int] = None) -> None:
        self._node_id_counter = 0
        self._max_lines = max_lines

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # ENTRY POINTS
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def generate_from_headings(self, content: Any) -> MindmapGraph:
        """Build a mindmap from the markdown headings of a whole document."""
        logger.info("[MINDMAP] Generating from headings...")
        self._check_size(content)
        graph = self.build_graph(self.extract_headings(content))
        logger.info(f"[MINDMAP] ✓ Generated {graph.metadata.node_count} nodes from headings")
        return graph

    def generate_from_selection(self, selected_text: Any) -> MindmapGraph:
        """Build a flat mindmap from the key concepts of a selected fragment."""
        logger.info("[MINDMAP] Generating from selection...")
        self._check_size(selected_text)
        graph = self.build_graph(self.extract_concepts(selected_text))
        logger.info(f"[MINDMAP] ✓ Generated {graph.metadata.node_count} nodes from selection")
        return graph

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # EXTRACTION
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def extract_headings(self, content: Any) -> List[Node]:
        """
        One node per markdown heading line (`#` to `######`).
        Returns [] for non-string or blank input instead of raising.
        """
        if not isinstance(content, str) or not content.strip():
            logger.warning(f"[MINDMAP] No heading source (got {type(content).__name__})")
            return []

        headings: List[Node] = []
        for index, line in enumerate(content.split("\n")):
            match = HEADING_RE.match(line)
            if not match:
                continue
            headings.append(
                Node(
                    id=self._next_node_id(),
                    text=match.group(2).strip(),
                    level=len(match.group(1)),
                    type="heading",
                    line_number=index + 1,
                )
            )

        logger.debug(f"[MINDMAP] Found {len(headings)} headings")
        return headings

    def extract_concepts(self, text: Any) -> List[Node]:
        """
        One level-1 node per line that carries capitalised keywords.
        Only the first MAX_CONCEPTS qualifying lines are kept.
        """
        if not isinstance(text, str) or not text.strip():
            logger.warning("[MINDMAP] No selection to extract concepts from")
            return []

        concepts: List[Node] = []
        for index, line in enumerate(text.split("\n")):
            if len(concepts) >= MAX_CONCEPTS:
                break
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            keywords = [word for word in stripped.split() if _is_keyword(word)]
            if not keywords:
                continue
            concepts.append(
                Node(
                    id=self._next_node_id(),
                    text=" ".join(keywords[:CONCEPT_WORDS_PER_NODE]),
                    level=1,
                    type="concept",
                    line_number=index + 1,
                )
            )

        logger.debug(f"[MINDMAP] Found {len(concepts)} concepts")
        return concepts

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # STRUCTURE
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def build_graph(self, items: Sequence[Node]) -> MindmapGraph:
        """
        Link a flat leveled list into a hierarchy.

        Every item is attached to the *first* item of the level directly above
        it, not to its nearest preceding ancestor; items whose parent level is
        absent stay orphans. A "Document" root is synthesized when no item sits
        at level 1.
        """
        if not items:
            return empty_graph()

        nodes: List[Node] = []
        connections: List[Connection] = []

        root: Optional[Node] = None
        if not any(item.level == 1 for item in items):
            root = Node(id=self._next_node_id(), text=ROOT_TEXT, level=0, type="root")
            nodes.append(root)

        by_level = _group_by_level(items)
        for level in sorted(by_level):
            for item in by_level[level]:
                nodes.append(item)
                parent = _find_parent(item, by_level.get(level - 1, []), root)
                if parent is not None:
                    connections.append(Connection(from_=parent.id, to=item.id))

        return MindmapGraph(
            nodes=nodes,
            connections=connections,
            metadata=GraphMetadata(
                source_type=items[0].type or "unknown",
                generated_at=datetime.now(timezone.utc),
                node_count=len(nodes),
            ),
        )

    # ── helpers ──────────────────────────────────────────────────────────────

    def _next_node_id(self) -> str:
        self._node_id_counter += 1
        return f"node_{self._node_id_counter}"

    def _check_size(self, text: Any) -> None:
        if not self._max_lines or not isinstance(text, str):
            return
        line_count = text.count("\n") + 1
        if line_count > self._max_lines:
            logger.warning(f"[MINDMAP] Rejected input of {line_count} lines")
            raise InputTooLargeError(line_count, self._max_lines)


def _is_keyword(word: str) -> bool:
    return (
        len(word) > 2
        and "A" <= word[0] <= "Z"
        and word not in CONCEPT_STOP_WORDS
    )


def _group_by_level(items: Sequence[Node]) -> Dict[int, List[Node]]:
    groups: Dict[int, List[Node]] = {}
    for item in items:
        groups.setdefault(item.level, []).append(item)
    return groups


def _find_parent(item: Node, candidates: List[Node], root: Optional[Node]) -> Optional[Node]:
    if item.level == 1 and root is not None:
        return root
    return candidates[0] if candidates else None
