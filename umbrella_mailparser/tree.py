"""Part tree: the MIME structure of a message, with enveloped messages spliced in."""

from __future__ import annotations

from dataclasses import dataclass, field
from email.message import Message

import structlog

from .config import DEFAULT_MAX_DEPTH
from .errors import MalformedStructureError
from .factory import PartFactory
from .headers import count_parts, get_child, is_enveloped_email, is_multipart, raw_body

logger = structlog.get_logger()


@dataclass
class PartTreeNode:
    """One MIME part plus the parts nested below it."""

    part: Message
    is_enveloped: bool = False
    children: list[PartTreeNode] = field(default_factory=list)

    def add_child(self, node: PartTreeNode) -> None:
        self.children.append(node)


@dataclass
class PartTree:
    root: PartTreeNode

    def flatten(self) -> list[Message]:
        """All parts in pre-order (node first, then each child's subtree), root included."""
        parts: list[Message] = []
        self._flatten_into(self.root, parts)
        return parts

    def get_enveloped_email(self) -> Message | None:
        """The first enveloped message directly below the root.

        Deeper levels are not searched: a forwarded message inside a
        forwarded message is part of :meth:`flatten` but is not returned here.
        """
        for child in self.root.children:
            if child.is_enveloped:
                return child.part
        return None

    def has_enveloped_email(self) -> bool:
        return self.get_enveloped_email() is not None

    def _flatten_into(self, node: PartTreeNode, parts: list[Message]) -> None:
        parts.append(node.part)
        for child in node.children:
            self._flatten_into(child, parts)


class PartTreeBuilder:
    """Build a :class:`PartTree` from a root part, depth first.

    Headerless sub-parts are dropped.  A ``message/rfc822`` sub-part is
    re-parsed from its body with the :class:`PartFactory` and attached as
    an enveloped node, since its own boundaries have nothing to do with
    its container's.  Parts whose children cannot be counted, and parts at
    ``max_depth``, become childless leaves.
    """

    def __init__(self, part_factory: PartFactory, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._part_factory = part_factory
        self._max_depth = max_depth

    def build(self, root: Message) -> PartTree:
        node = PartTreeNode(part=root, is_enveloped=is_enveloped_email(root))
        return PartTree(root=self._build_node(node, depth=0))

    def _build_node(self, node: PartTreeNode, depth: int) -> PartTreeNode:
        part = node.part
        if len(part) == 0:
            return node

        try:
            part_count = count_parts(part)
        except MalformedStructureError as exc:
            logger.debug("part_children_uncountable", reason=str(exc))
            return node

        if part_count and depth >= self._max_depth:
            logger.warning("part_tree_depth_limit_reached", max_depth=self._max_depth)
            return node

        for index in range(1, part_count + 1):
            child = get_child(part, index)

            if len(child) == 0:
                logger.debug("headerless_part_dropped", index=index, depth=depth)
                continue

            if is_multipart(child):
                node.add_child(self._build_node(PartTreeNode(part=child), depth + 1))
            elif is_enveloped_email(child):
                enveloped = self._part_factory.make_part(raw_body(child))
                logger.debug("enveloped_email_found", index=index, depth=depth)
                node.add_child(
                    self._build_node(PartTreeNode(part=enveloped, is_enveloped=True), depth + 1)
                )
            else:
                node.add_child(PartTreeNode(part=child))

        return node
