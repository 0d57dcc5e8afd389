from typing import List

from pydantic import BaseModel, ConfigDict

from .models import Tree, WBNode


RECOMMENDED_LIMIT = 5


class SearchOutcome(BaseModel):
    """
    Result of running a search.

    `active` is False when the query was blank, which is different from an
    active search that matched nothing.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    active: bool
    results: List[WBNode] = []

    @property
    def no_results(self) -> bool:
        return self.active and not self.results


def node_is_match(node: WBNode, query: str) -> bool:
    """Case-insensitive substring match on the node name. Skills and urls both match."""
    return query.lower() in node.name.lower()


def search_nodes(query: str, tree: Tree) -> List[WBNode]:
    """
    Returns the nodes of `tree` whose name contains `query`, in tree order.
    A blank query returns an empty list.
    """
    query = query.strip()
    if not query:
        return []
    return [node for node in tree.nodes if node_is_match(node, query)]


def run_search(query: str, tree: Tree) -> SearchOutcome:
    term = query.strip()
    if not term:
        return SearchOutcome(query=term, active=False)
    return SearchOutcome(query=term, active=True, results=search_nodes(term, tree))


def recommended_nodes(tree: Tree, limit: int = RECOMMENDED_LIMIT) -> List[WBNode]:
    # Shown while no search is active
    return list(tree.nodes[:limit])
