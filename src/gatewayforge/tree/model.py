from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from gatewayforge.paths.normalize import ROOT_PATH


@dataclass
class PathNode:
    segments: tuple[str, ...]
    last_segment: str
    parent_path: str
    identifier: str
    children: set[str] = field(default_factory=set)

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def is_top_level(self) -> bool:
        return self.parent_path == ROOT_PATH


@dataclass
class ResourceTree:
    nodes: dict[str, PathNode]
    root_children: set[str]

    def __init__(self) -> None:
        self.nodes = {}
        self.root_children = set()

    def __contains__(self, key: str) -> bool:
        return key in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, key: str) -> Optional[PathNode]:
        return self.nodes.get(key)

    def add_node(self, key: str, node: PathNode) -> PathNode:
        # de-dupe by normalized path; first insert wins
        if key not in self.nodes:
            self.nodes[key] = node
        return self.nodes[key]

    def attach(self, key: str, parent_path: str) -> None:
        if parent_path == ROOT_PATH:
            self.root_children.add(key)
        else:
            self.nodes[parent_path].children.add(key)

    def parent_of(self, node: PathNode) -> Optional[PathNode]:
        if node.is_top_level:
            return None
        return self.nodes[node.parent_path]

    def depth_ordered(self) -> Iterator[tuple[str, PathNode]]:
        """Shallow nodes first; identifier (then path) breaks ties so output is stable."""
        yield from sorted(
            self.nodes.items(),
            key=lambda kv: (kv[1].depth, kv[1].identifier, kv[0]),
        )
