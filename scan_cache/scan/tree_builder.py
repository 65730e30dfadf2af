"""Reduction of a dependency tree to the flat set of components to scan."""

from __future__ import annotations

import structlog

from scan_cache.cache.artifact_cache import ArtifactCache
from scan_cache.models.artifact import Artifact
from scan_cache.models.dependency import DependencyTreeNode

log = structlog.get_logger("scan_cache.scan")


class ScanTreeBuilder:
    """Builds the flat scan tree sent to the scan service.

    Traversal rules:

    - Metadata nodes are transparent: their children are visited, the nodes
      themselves never reach the scan tree.
    - On a full scan every component is scanned. On a quick scan, components
      already in the cache are skipped, but their children are still visited
      since a cached parent says nothing about its dependencies.
    - Direct dependencies that are scanned get an empty artifact in the cache
      right away, replacing any earlier results. Components the service
      reports nothing for are then not scanned again by the next quick scan,
      and a full scan drops findings the service no longer reports.
    """

    def __init__(self, cache: ArtifactCache) -> None:
        self._cache = cache

    def build_scan_tree(
        self, root: DependencyTreeNode, quick_scan: bool
    ) -> DependencyTreeNode:
        """Create a flat tree of all components that need a scan.

        Args:
            root: Root of the project's dependency tree.
            quick_scan: True to skip components already in the cache.

        Returns:
            Synthetic root whose children are the components to scan, one
            node per component id. A leaf result means nothing to scan.
        """
        scan_tree = DependencyTreeNode(
            identifier=root.identifier,
            component_id=root.component_id,
            is_metadata=True,
        )
        seen: set[str] = set()

        stack: list[DependencyTreeNode] = list(reversed(root.children))
        while stack:
            node = stack.pop()
            children = list(reversed(node.children))

            if node.is_metadata:
                stack.extend(children)
                continue

            key = node.cache_key
            if not quick_scan or not self._cache.contains(key):
                if self._is_direct_dependency(node, root):
                    self._cache.add(Artifact.placeholder(key))
                if key not in seen:
                    seen.add(key)
                    component_id = node.component_id or node.identifier
                    scan_tree.add(
                        DependencyTreeNode(identifier=key, component_id=component_id)
                    )
            stack.extend(children)

        log.debug(
            "scan.tree_reduced",
            quick_scan=quick_scan,
            components=len(scan_tree.children),
        )
        return scan_tree

    @staticmethod
    def _is_direct_dependency(
        node: DependencyTreeNode, root: DependencyTreeNode
    ) -> bool:
        parent = node.parent
        return parent is None or parent is root or parent.is_metadata
