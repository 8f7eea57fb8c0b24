from __future__ import annotations

import logging
from typing import Iterable

from gatewayforge.domain.models import EndpointDescriptor
from gatewayforge.paths.normalize import ROOT_PATH, path_key, resource_name, segment_path
from gatewayforge.tree.model import PathNode, ResourceTree

logger = logging.getLogger(__name__)


def build_resource_tree(endpoints: Iterable[EndpointDescriptor]) -> ResourceTree:
    """
    Fold every endpoint path into one prefix tree.

    /person/users/api/auth and /person/users/api/profile share the nodes
    /person, /person/users and /person/users/api; each prefix exists once
    no matter how many endpoints (or verbs) reach it.
    """
    tree = ResourceTree()

    for ep in endpoints:
        segments = segment_path(ep.path)

        for i in range(1, len(segments) + 1):
            prefix = tuple(segments[:i])
            key = path_key(prefix)
            parent = ROOT_PATH if i == 1 else path_key(prefix[:-1])

            if key not in tree:
                tree.add_node(
                    key,
                    PathNode(
                        segments=prefix,
                        last_segment=prefix[-1],
                        parent_path=parent,
                        identifier=resource_name(prefix),
                    ),
                )
            tree.attach(key, parent)

    logger.debug("resource tree built: %d nodes", len(tree))
    return tree


def find_identifier_collisions(tree: ResourceTree) -> dict[str, list[str]]:
    """Resource names claimed by more than one distinct path, e.g. a_b <- /a/b, /a_b."""
    by_name: dict[str, list[str]] = {}
    for key, node in tree.depth_ordered():
        by_name.setdefault(node.identifier, []).append(key)
    return {name: keys for name, keys in by_name.items() if len(keys) > 1}
