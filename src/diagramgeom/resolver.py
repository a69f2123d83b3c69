"""Cumulative transform resolution along an element's ancestor chain.

The element tree itself belongs to the caller. This module only needs, per
node, a ``parent`` link (or an ``ancestors()`` method returning nearest parent
first) and, on transform-capable nodes, a ``transform`` attribute holding a
``TransformList`` or ``None``.
"""
from __future__ import annotations

import weakref
from typing import Any, Iterable, List, Optional

from .affine import AffineTransform
from .transforms import TransformList


def is_transform_capable(node: Any) -> bool:
    if getattr(node, "transform_capable", True) is False:
        return False
    return hasattr(node, "transform")


def ancestors_of(node: Any) -> List[Any]:
    """Ancestors from the nearest parent up to the root."""
    method = getattr(node, "ancestors", None)
    if callable(method):
        return list(method())
    chain: List[Any] = []
    cursor = getattr(node, "parent", None)
    while cursor is not None:
        chain.append(cursor)
        cursor = getattr(cursor, "parent", None)
    return chain


def _own_transform(node: Any) -> Optional[TransformList]:
    if not is_transform_capable(node):
        return None
    transform = node.transform
    if isinstance(transform, str):
        return TransformList.parse(transform)
    return transform


def cumulative_transform_list(node: Any) -> TransformList:
    """Concatenate transform ops root-first, ending with the node's own ops."""
    result = TransformList()
    lineage = list(reversed(ancestors_of(node)))
    lineage.append(node)
    for element in lineage:
        transform = _own_transform(element)
        if transform:
            result.extend(transform)
    return result


def cumulative_transform(node: Any) -> AffineTransform:
    """Map from the node's local coordinates to the root container's coordinates.

    ``T_root ∘ ... ∘ T_parent ∘ T_self``; nodes without a transform (or that are
    not transform-capable) leave the mapping unchanged.
    """
    lineage = list(reversed(ancestors_of(node)))
    lineage.append(node)
    m = AffineTransform.identity()
    for element in lineage:
        transform = _own_transform(element)
        if not transform:
            continue
        m = m.concatenating(transform.to_affine())
    return m


class GraphicNode:
    """Minimal in-memory element tree node.

    Children are owned by their parent; the parent link is a weak reference and
    is only used for lookups.
    """

    transform_capable = True

    def __init__(
        self,
        name: str = "g",
        transform: Optional[TransformList | str] = None,
        children: Optional[Iterable["GraphicNode"]] = None,
        *,
        transform_capable: Optional[bool] = None,
    ) -> None:
        self.name = name
        if isinstance(transform, str):
            transform = TransformList.parse(transform)
        self.transform: Optional[TransformList] = transform
        if transform_capable is not None:
            self.transform_capable = transform_capable
        self.children: List[GraphicNode] = []
        self._parent: Optional[weakref.ReferenceType] = None
        for child in children or ():
            self.add_child(child)

    @property
    def parent(self) -> Optional["GraphicNode"]:
        return self._parent() if self._parent is not None else None

    def add_child(self, child: "GraphicNode") -> "GraphicNode":
        if child.parent is not None:
            child.parent.children.remove(child)
        child._parent = weakref.ref(self)
        self.children.append(child)
        return child

    def ancestors(self) -> List["GraphicNode"]:
        chain: List[GraphicNode] = []
        cursor = self.parent
        while cursor is not None:
            chain.append(cursor)
            cursor = cursor.parent
        return chain

    def root(self) -> "GraphicNode":
        cursor = self
        while cursor.parent is not None:
            cursor = cursor.parent
        return cursor

    def is_descendant_of(self, other: "GraphicNode") -> bool:
        return any(ancestor is other for ancestor in self.ancestors())

    def cumulative_transform(self) -> AffineTransform:
        return cumulative_transform(self)

    def __repr__(self) -> str:
        transform = self.transform.to_svg() if self.transform else ""
        return f"GraphicNode({self.name!r}, {transform!r})"
