"""
Selection state for the search page.

The highlighted set on the chart comes from three places: nodes the user
clicked, nodes matched by the last confirmed search, and the nodes of the
active learning path. All of it lives in one immutable SelectionState and is
changed only by `reduce(state, event)`, so it can be driven and tested without
any UI around it.

Precedence: while a path is active only the path nodes are highlighted;
otherwise the highlight is manual clicks plus search matches.
"""

from typing import FrozenSet, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from .models import Tree, WBNode
from .search import SearchOutcome, run_search


class SelectionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = ""
    search_active: bool = False
    search_results: List[WBNode] = []
    manual_ids: FrozenSet[str] = frozenset()
    search_ids: FrozenSet[str] = frozenset()
    path_tree: Optional[Tree] = None
    selected_target_id: Optional[str] = None
    # Bumped whenever in-flight path responses must be discarded
    request_token: int = 0
    path_pending: bool = False
    path_error: Optional[str] = None

    @property
    def path_ids(self) -> FrozenSet[str]:
        if self.path_tree is None:
            return frozenset()
        return frozenset(self.path_tree.node_ids())


# --- Events ---


class QueryEdited(BaseModel):
    """The search textbox changed. Does not run a search."""

    text: str


class SearchConfirmed(BaseModel):
    """The user confirmed the search (Enter)."""

    model_config = ConfigDict(frozen=True)

    query: str
    tree: Optional[Tree] = None


class ManualToggled(BaseModel):
    node_id: str


class ResultSelected(BaseModel):
    node_id: str


class PathRequested(BaseModel):
    pass


class PathResolved(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: int
    tree: Tree


class PathFailed(BaseModel):
    token: int
    reason: str


class TreeReplaced(BaseModel):
    """The universal tree was fetched again, or could not be."""

    model_config = ConfigDict(frozen=True)

    tree: Optional[Tree] = None


Event = Union[
    QueryEdited,
    SearchConfirmed,
    ManualToggled,
    ResultSelected,
    PathRequested,
    PathResolved,
    PathFailed,
    TreeReplaced,
]


def effective_highlighted_ids(state: SelectionState) -> FrozenSet[str]:
    """The node ids the chart draws as selected."""
    path_ids = state.path_ids
    if path_ids:
        return path_ids
    return state.manual_ids | state.search_ids


def _confirm_search(state: SelectionState, event: SearchConfirmed) -> SelectionState:
    if event.tree is None:
        outcome = SearchOutcome(query=event.query.strip(), active=False)
    else:
        outcome = run_search(event.query, event.tree)
    if not outcome.active:
        # Blank search or no tree loaded: nothing is searched and the current path stays
        return state.model_copy(
            update={
                "search_active": False,
                "search_results": [],
                "search_ids": frozenset(),
            }
        )
    return state.model_copy(
        update={
            "query": event.query,
            "search_active": True,
            "search_results": outcome.results,
            "search_ids": frozenset(node.id for node in outcome.results),
            "path_tree": None,
            "selected_target_id": None,
            "request_token": state.request_token + 1,
            "path_pending": False,
            "path_error": None,
        }
    )


def _edit_query(state: SelectionState, event: QueryEdited) -> SelectionState:
    if event.text.strip():
        return state.model_copy(update={"query": event.text})
    return state.model_copy(
        update={
            "query": event.text,
            "search_active": False,
            "search_results": [],
            "search_ids": frozenset(),
        }
    )


def _toggle_manual(state: SelectionState, event: ManualToggled) -> SelectionState:
    if event.node_id in state.manual_ids:
        manual_ids = state.manual_ids - {event.node_id}
    else:
        manual_ids = state.manual_ids | {event.node_id}
    return state.model_copy(update={"manual_ids": manual_ids})


def _select_result(state: SelectionState, event: ResultSelected) -> SelectionState:
    if event.node_id not in {node.id for node in state.search_results}:
        return state
    # Clearing the path brings the search highlights back
    return state.model_copy(
        update={
            "selected_target_id": event.node_id,
            "search_ids": frozenset(node.id for node in state.search_results),
            "path_tree": None,
            "request_token": state.request_token + 1,
            "path_pending": False,
            "path_error": None,
        }
    )


def _request_path(state: SelectionState, event: PathRequested) -> SelectionState:
    if state.selected_target_id is None:
        return state
    # Stale highlights must not linger while the request is in flight.
    # The result list stays so the user can retry or pick another target.
    return state.model_copy(
        update={
            "search_ids": frozenset(),
            "path_tree": None,
            "request_token": state.request_token + 1,
            "path_pending": True,
            "path_error": None,
        }
    )


def _resolve_path(state: SelectionState, event: PathResolved) -> SelectionState:
    if event.token != state.request_token:
        return state
    return state.model_copy(
        update={
            "path_tree": event.tree,
            "selected_target_id": None,
            "path_pending": False,
            "path_error": None,
        }
    )


def _fail_path(state: SelectionState, event: PathFailed) -> SelectionState:
    if event.token != state.request_token:
        return state
    return state.model_copy(
        update={
            "path_tree": None,
            "path_pending": False,
            "path_error": event.reason,
        }
    )


def _replace_tree(state: SelectionState, event: TreeReplaced) -> SelectionState:
    # Results, target and path may point at nodes the new tree no longer has
    known_ids = event.tree.node_ids() if event.tree is not None else set()
    return state.model_copy(
        update={
            "search_active": False,
            "search_results": [],
            "search_ids": frozenset(),
            "manual_ids": state.manual_ids & known_ids,
            "path_tree": None,
            "selected_target_id": None,
            "request_token": state.request_token + 1,
            "path_pending": False,
            "path_error": None,
        }
    )


_HANDLERS = {
    QueryEdited: _edit_query,
    SearchConfirmed: _confirm_search,
    ManualToggled: _toggle_manual,
    ResultSelected: _select_result,
    PathRequested: _request_path,
    PathResolved: _resolve_path,
    PathFailed: _fail_path,
    TreeReplaced: _replace_tree,
}


def reduce(state: SelectionState, event: Event) -> SelectionState:
    """Applies one event and returns the next state. Never mutates `state`."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown selection event: {type(event).__name__}")
    return handler(state, event)
