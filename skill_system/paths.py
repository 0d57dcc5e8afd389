import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .errors import PathRequestFailed
from .models import Tree
from .selection import PathFailed, PathRequested, PathResolved

logger = logging.getLogger(__name__)


class PathOutcome(BaseModel):
    """
    What happened to one path request.

    `applied` is True only when the returned tree became the active path.
    A response that arrived after a newer search or path request is dropped
    and reported as `stale`.
    """

    model_config = ConfigDict(frozen=True)

    requested: bool = True
    applied: bool = False
    stale: bool = False
    tree: Optional[Tree] = None
    error: Optional[str] = None


class PathRequestOrchestrator:
    """Requests the learning path from the entry node to the selected result."""

    def __init__(self, store, tree_client, entry_node_id: str):
        if not entry_node_id:
            raise ValueError("An entry node id is required to request paths.")
        self.store = store
        self.tree_client = tree_client
        self.entry_node_id = entry_node_id

    async def request_path(self) -> PathOutcome:
        target_id = self.store.state.selected_target_id
        if target_id is None:
            return PathOutcome(requested=False)

        token = self.store.dispatch(PathRequested()).request_token
        logger.info(
            "Requesting path %s -> %s (token %d)", self.entry_node_id, target_id, token
        )

        try:
            tree = await self.tree_client.fetch_path(self.entry_node_id, target_id)
        except PathRequestFailed as e:
            logger.error("Error generating path: %s", e)
            return self._fail(token, str(e))
        except Exception as e:
            # Nothing may escape with path_pending still set
            logger.exception("Unexpected error generating path")
            return self._fail(token, f"Failed to fetch path: {e}")

        state = self.store.dispatch(PathResolved(token=token, tree=tree))
        if state.request_token != token:
            logger.info("Discarding stale path response for token %d", token)
            return PathOutcome(tree=tree, stale=True)
        return PathOutcome(tree=tree, applied=True)

    def _fail(self, token: int, reason: str) -> PathOutcome:
        state = self.store.dispatch(PathFailed(token=token, reason=reason))
        return PathOutcome(error=reason, stale=state.request_token != token)
