# api/routers/search.py

from fastapi import APIRouter, Depends, HTTPException, Request

from skill_system.models import Tree
from skill_system.paths import PathRequestOrchestrator
from skill_system.search import recommended_nodes
from skill_system.selection import (
    ManualToggled,
    QueryEdited,
    ResultSelected,
    effective_highlighted_ids,
)
from skill_system.store import SkillTreesStore

from .. import schemas
from ..chart import build_chart

TREE_UNAVAILABLE_DETAIL = "There was an error fetching the universal tree"


# --- Dependencies ---


def get_store(request: Request) -> SkillTreesStore:
    return request.app.state.store


def get_orchestrator(request: Request) -> PathRequestOrchestrator:
    return request.app.state.orchestrator


def require_universal_tree(store: SkillTreesStore = Depends(get_store)) -> Tree:
    if store.universal_tree is None:
        raise HTTPException(status_code=503, detail=TREE_UNAVAILABLE_DETAIL)
    return store.universal_tree


# --- View helpers ---


def result_summary(count: int) -> str:
    return f"{count} result{'s' if count != 1 else ''} found"


def build_session_view(store: SkillTreesStore) -> schemas.SessionView:
    """
    Flattens the store into what the page renders.
    Highlighted ids are sorted so the response is stable.
    """
    state = store.state
    tree = store.universal_tree

    summary = None
    no_results = None
    if state.search_active:
        summary = result_summary(len(state.search_results))
        if not state.search_results:
            no_results = f'No results found for "{state.query}"'

    recommended = []
    if tree is not None and not state.search_active:
        recommended = recommended_nodes(tree)

    return schemas.SessionView(
        is_loading=store.is_loading,
        error=str(store.load_error) if store.load_error else None,
        query=state.query,
        search_active=state.search_active,
        search_results=state.search_results,
        result_summary=summary,
        no_results_message=no_results,
        recommended=recommended,
        selected_target_id=state.selected_target_id,
        path_tree=state.path_tree,
        path_pending=state.path_pending,
        path_error=state.path_error,
        highlighted_node_ids=sorted(effective_highlighted_ids(state)),
    )


# --- Router ---

router = APIRouter(tags=["Search"])


@router.get("/tree", response_model=Tree)
async def read_universal_tree(tree: Tree = Depends(require_universal_tree)):
    """
    The complete graph of skills and urls.
    """
    return tree


@router.post("/tree/reload", response_model=schemas.SessionView)
async def reload_universal_tree(store: SkillTreesStore = Depends(get_store)):
    """
    Fetches the universal tree again and replaces the current one.
    """
    await store.load()
    if store.universal_tree is None:
        raise HTTPException(status_code=503, detail=TREE_UNAVAILABLE_DETAIL)
    return build_session_view(store)


@router.get("/state", response_model=schemas.SessionView)
async def read_session(store: SkillTreesStore = Depends(get_store)):
    return build_session_view(store)


@router.put("/query", response_model=schemas.SessionView)
async def edit_query(edit: schemas.QueryEdit, store: SkillTreesStore = Depends(get_store)):
    """
    Records the search box content. Clearing the box ends the active search.
    """
    store.dispatch(QueryEdited(text=edit.text))
    return build_session_view(store)


@router.post("/search", response_model=schemas.SessionView)
async def confirm_search(
    search: schemas.SearchRequest,
    store: SkillTreesStore = Depends(get_store),
    _tree: Tree = Depends(require_universal_tree),
):
    """
    Runs the search and highlights the matches. Clears any active path.
    """
    store.dispatch(QueryEdited(text=search.term))
    store.confirm_search(search.term)
    return build_session_view(store)


@router.post("/nodes/{node_id}/toggle", response_model=schemas.SessionView)
async def toggle_node(node_id: str, store: SkillTreesStore = Depends(get_store)):
    """
    Selects or deselects a node clicked on the chart.
    """
    store.dispatch(ManualToggled(node_id=node_id))
    return build_session_view(store)


@router.post("/results/{node_id}/select", response_model=schemas.SessionView)
async def select_result(node_id: str, store: SkillTreesStore = Depends(get_store)):
    """
    Picks a search result as the target of the next learning path.
    """
    if node_id not in {node.id for node in store.state.search_results}:
        raise HTTPException(
            status_code=404, detail=f"'{node_id}' is not among the current search results"
        )
    store.dispatch(ResultSelected(node_id=node_id))
    return build_session_view(store)


@router.post("/path", response_model=schemas.PathResponse)
async def generate_path(
    store: SkillTreesStore = Depends(get_store),
    orchestrator: PathRequestOrchestrator = Depends(get_orchestrator),
):
    """
    Generates the learning path from the entry node to the selected result.
    Does nothing when no result is selected.
    """
    if store.state.path_pending:
        raise HTTPException(status_code=409, detail="A learning path is already being generated")

    outcome = await orchestrator.request_path()
    return schemas.PathResponse(
        requested=outcome.requested,
        applied=outcome.applied,
        stale=outcome.stale,
        error=outcome.error,
        session=build_session_view(store),
    )


@router.get("/chart", response_model=schemas.ChartView)
async def read_chart(
    store: SkillTreesStore = Depends(get_store),
    tree: Tree = Depends(require_universal_tree),
):
    return build_chart(tree, effective_highlighted_ids(store.state))
