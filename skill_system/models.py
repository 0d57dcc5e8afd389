from typing import List, Literal, Optional, Set
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict


NodeType = Literal["skill", "url"]


class MalformedGraph(ValueError):
    """Raised when a tree breaks one of the graph invariants."""


class WBNode(BaseModel):
    """A single node in the graph: a skill, or a learning resource (url)."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: NodeType
    name: str


class Link(BaseModel):
    """A directed edge.

    skill -> url means "is prerequisite to", url -> skill means "teaches".
    """

    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str


class Tree(BaseModel):
    """A graph snapshot: either the universal tree or a path subgraph.

    Trees are never patched in place; refetching replaces the whole value.
    """

    model_config = ConfigDict(frozen=True)

    nodes: List[WBNode] = []
    links: List[Link] = []

    def node_ids(self) -> Set[str]:
        return {node.id for node in self.nodes}

    def get_node(self, node_id: str) -> Optional[WBNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def is_well_formed(self) -> bool:
        """
        True iff node and link ids are unique and every link points
        at nodes that exist in this tree.
        """
        return not find_violations(self, check_urls=False)


def _is_literal_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def find_violations(tree: Tree, check_urls: bool = True) -> List[str]:
    """Collects every invariant violation in the tree as a readable message."""
    problems = []

    node_ids = set()
    for node in tree.nodes:
        if node.id in node_ids:
            problems.append(f"duplicate node id '{node.id}'")
        node_ids.add(node.id)
        if check_urls and node.type == "url" and not _is_literal_url(node.name):
            problems.append(f"url node '{node.id}' has non-URL name '{node.name}'")

    link_ids = set()
    for link in tree.links:
        if link.id in link_ids:
            problems.append(f"duplicate link id '{link.id}'")
        link_ids.add(link.id)
        # Dangling endpoints are reported per side
        if link.source not in node_ids:
            problems.append(f"link '{link.id}' has unknown source '{link.source}'")
        if link.target not in node_ids:
            problems.append(f"link '{link.id}' has unknown target '{link.target}'")

    return problems


def validate_tree(tree: Tree) -> Tree:
    """
    Strict check used when graph validation is switched on.
    Returns the tree unchanged, or raises MalformedGraph listing the problems.
    """
    problems = find_violations(tree)
    if problems:
        raise MalformedGraph("; ".join(problems))
    return tree
