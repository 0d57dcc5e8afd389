import logging
from typing import Optional

from .errors import TreeUnavailable
from .models import Tree
from .selection import Event, SelectionState, SearchConfirmed, TreeReplaced, reduce

logger = logging.getLogger(__name__)


class SkillTreesStore:
    """
    Holds the universal tree, the state of its initial fetch, and the
    current selection state.

    One instance is created by the application factory and passed to whoever
    needs it. The universal tree is read-only for consumers and is only ever
    replaced wholesale by `load`.
    """

    def __init__(self, tree_client):
        self.tree_client = tree_client
        self.universal_tree: Optional[Tree] = None
        self.is_loading = False
        self.load_error: Optional[TreeUnavailable] = None
        self.state = SelectionState()

    async def load(self) -> Optional[Tree]:
        """
        Fetches the universal tree. On failure the previous tree is dropped
        and the error is kept in `load_error` instead of being raised.
        Either way the search, the selected target and the path are reset,
        and clicked nodes missing from the new tree are dropped.
        """
        self.is_loading = True
        try:
            tree = await self.tree_client.fetch_universal_tree()
        except TreeUnavailable as e:
            logger.error("Universal tree unavailable: %s", e)
            self.universal_tree = None
            self.load_error = e
            self.dispatch(TreeReplaced(tree=None))
            return None
        finally:
            self.is_loading = False

        logger.info(
            "Loaded universal tree with %d nodes and %d links",
            len(tree.nodes),
            len(tree.links),
        )
        self.universal_tree = tree
        self.load_error = None
        self.dispatch(TreeReplaced(tree=tree))
        return tree

    def dispatch(self, event: Event) -> SelectionState:
        self.state = reduce(self.state, event)
        return self.state

    def confirm_search(self, term: str) -> SelectionState:
        return self.dispatch(SearchConfirmed(query=term, tree=self.universal_tree))
