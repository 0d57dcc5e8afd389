# api/chart.py
# Colours and sizes for drawing the universal tree. Layout and animation are
# left to the browser; this only decides how each node and link looks.

from typing import AbstractSet

from skill_system.models import Tree, WBNode
from . import schemas

RADIUS = 7
MINOR_RADIUS = RADIUS / 2
ACTIVE_SKILL_FILL = "hsl(315 100% 60%)"
INACTIVE_SKILL_FILL = "hsl(240 100% 30%)"
ACTIVE_MODULE_FILL = "hsl(180 100% 50%)"
INACTIVE_MODULE_FILL = "hsl(60 10% 20%)"
INACTIVE_LINK_COLOR = "hsl(60 10% 20%)"


def get_node_fill(node: WBNode, selected_ids: AbstractSet[str]) -> str:
    is_selected = node.id in selected_ids
    if node.type == "skill":
        return ACTIVE_SKILL_FILL if is_selected else INACTIVE_SKILL_FILL
    if node.type == "url":
        return ACTIVE_MODULE_FILL if is_selected else INACTIVE_MODULE_FILL
    return INACTIVE_SKILL_FILL


def get_node_radius(node: WBNode) -> float:
    return RADIUS if node.type in ("skill", "url") else MINOR_RADIUS


def build_chart(tree: Tree, selected_ids: AbstractSet[str]) -> schemas.ChartView:
    """
    Builds the drawable view of `tree` with `selected_ids` highlighted.
    Links are always drawn in the inactive colour.
    """
    nodes = [
        schemas.ChartNode(
            id=node.id,
            type=node.type,
            name=node.name,
            fill=get_node_fill(node, selected_ids),
            radius=get_node_radius(node),
            selected=node.id in selected_ids,
        )
        for node in tree.nodes
    ]
    links = [
        schemas.ChartLink(
            id=link.id,
            source=link.source,
            target=link.target,
            color=INACTIVE_LINK_COLOR,
        )
        for link in tree.links
    ]
    return schemas.ChartView(nodes=nodes, links=links)
