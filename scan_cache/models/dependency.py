"""Dependency tree models for scan-cache.

A dependency tree is built by the caller (usually an IDE integration) from its
build tool, and handed to the scanner. Organizational nodes such as scopes or
modules are marked as metadata and are never scanned themselves.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr

from scan_cache.constants import COMPONENT_SCHEME_SEPARATOR


class ComponentPrefix(Enum):
    """Package schemes understood by the scan service."""

    GAV = "gav://"
    NPM = "npm://"
    PYPI = "pypi://"
    GO = "go://"

    def __str__(self) -> str:
        return self.value


def strip_component_prefix(component_id: str) -> str:
    """Strip the package scheme from a component identifier.

    Args:
        component_id: Identifier such as "npm://left-pad:1.3.0".

    Returns:
        The normalized identifier ("left-pad:1.3.0"). Identifiers without a
        scheme are returned unchanged.
    """
    _, separator, rest = component_id.partition(COMPONENT_SCHEME_SEPARATOR)
    if not separator:
        return component_id
    return rest


class DependencyTreeNode(BaseModel):
    """A node in a project's dependency tree.

    Each node owns its children. The parent link is a back-reference used for
    ancestor queries only and is not part of the serialized form.
    """

    identifier: str = Field(description="Display identifier, e.g. 'left-pad:1.3.0'")
    component_id: Optional[str] = Field(
        default=None,
        description="Scheme-prefixed component identifier, e.g. 'npm://left-pad:1.3.0'",
    )
    is_metadata: bool = Field(
        default=False,
        description="True for organizational nodes that are not scannable components",
    )
    children: list["DependencyTreeNode"] = Field(
        default_factory=list,
        description="Child dependencies, in order",
    )

    model_config = {"extra": "forbid"}

    _parent: Optional["DependencyTreeNode"] = PrivateAttr(default=None)

    def model_post_init(self, context: Any) -> None:
        for child in self.children:
            child._parent = self

    def __str__(self) -> str:
        return self.identifier

    @property
    def parent(self) -> Optional["DependencyTreeNode"]:
        """The node this node was added under, or None for a root."""
        return self._parent

    @property
    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return len(self.children) == 0

    @property
    def cache_key(self) -> str:
        """Normalized identifier used to look this component up in the cache."""
        return strip_component_prefix(self.component_id or self.identifier)

    def add(self, child: "DependencyTreeNode") -> "DependencyTreeNode":
        """Append a child node and link it back to this node.

        Args:
            child: Node to add.

        Returns:
            The added child.
        """
        self.children.append(child)
        child._parent = self
        return child

    def set_prefix(self, prefix: ComponentPrefix) -> None:
        """Derive missing component identifiers from the given package scheme.

        Applies to this node and all of its descendants. Metadata nodes and
        nodes that already carry a component identifier are left untouched.

        Args:
            prefix: Package scheme of the project's components.
        """
        for node in self.iter_nodes():
            if not node.is_metadata and node.component_id is None:
                node.component_id = f"{prefix}{node.identifier}"

    def iter_nodes(self) -> list["DependencyTreeNode"]:
        """Get this node and all of its descendants in depth-first order.

        Returns:
            Flat list of nodes, starting with this node.
        """
        result: list[DependencyTreeNode] = []
        stack: list[DependencyTreeNode] = [self]
        while stack:
            node = stack.pop()
            result.append(node)
            stack.extend(reversed(node.children))
        return result
