from pydantic import BaseModel, Field
from typing import List, Optional

from skill_system.models import Tree, WBNode


class SearchRequest(BaseModel):
    term: str = Field(description="The text typed in the search box.")


class QueryEdit(BaseModel):
    text: str = Field(description="The current content of the search box.")


class SessionView(BaseModel):
    """Everything the search page needs to draw itself."""

    is_loading: bool
    error: Optional[str] = None
    query: str
    search_active: bool
    search_results: List[WBNode]
    result_summary: Optional[str] = None
    no_results_message: Optional[str] = None
    recommended: List[WBNode]
    selected_target_id: Optional[str] = None
    path_tree: Optional[Tree] = None
    path_pending: bool
    path_error: Optional[str] = None
    highlighted_node_ids: List[str]


class PathResponse(BaseModel):
    requested: bool
    applied: bool
    stale: bool
    error: Optional[str] = None
    session: SessionView


class ChartNode(BaseModel):
    id: str
    type: str
    name: str
    fill: str
    radius: float
    selected: bool


class ChartLink(BaseModel):
    id: str
    source: str
    target: str
    color: str


class ChartView(BaseModel):
    nodes: List[ChartNode]
    links: List[ChartLink]
