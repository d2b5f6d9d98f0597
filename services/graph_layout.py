"""
Graph assembly for study-plan flows.

Nodes are placed on a fixed grid by their index so the graph UI can render
them without running its own layout first. Positions depend on nothing but
the index, so the same ordering always yields the same layout.
"""
import logging
from typing import Dict, List, Tuple

from services.schemas import Position, StudyEdge, StudyGraph, StudyNode

logger = logging.getLogger(__name__)

COLUMNS_PER_ROW = 3
BASE_X = 150
BASE_Y = 100
COLUMN_SPACING = 300
ROW_SPACING = 200


def grid_position(index: int) -> Dict[str, int]:
    """Grid coordinates for the node at ``index``"""
    return {
        'x': BASE_X + (index % COLUMNS_PER_ROW) * COLUMN_SPACING,
        'y': BASE_Y + (index // COLUMNS_PER_ROW) * ROW_SPACING,
    }


def layout_nodes(nodes: List[StudyNode]) -> List[StudyNode]:
    """Return copies of ``nodes`` with grid positions and non-empty ids"""
    placed = []
    for index, node in enumerate(nodes):
        placed.append(node.model_copy(update={
            'id': node.id or f'node-{index + 1}',
            'position': Position(**grid_position(index)),
        }))
    return placed


def prune_edges(nodes: List[StudyNode], edges: List[StudyEdge]) -> Tuple[List[StudyEdge], int]:
    """
    Keep only edges whose endpoints are both present in ``nodes``.

    Returns the kept edges (with ids filled in) and the number dropped.
    """
    node_ids = {node.id for node in nodes}
    kept = []
    dropped = 0
    for edge in edges:
        if edge.source not in node_ids or edge.target not in node_ids:
            dropped += 1
            continue
        kept.append(edge if edge.id else edge.model_copy(
            update={'id': f'e{edge.source}-{edge.target}'}
        ))
    return kept, dropped


def assemble_graph(graph: StudyGraph) -> StudyGraph:
    """Lay out the graph's nodes on the grid and drop dangling edges"""
    nodes = layout_nodes(graph.nodes)
    edges, dropped = prune_edges(nodes, graph.edges)
    if dropped:
        logger.info("Dropped %d edge(s) referencing unknown nodes", dropped)
    return graph.model_copy(update={'nodes': nodes, 'edges': edges})


def layout_flow_data(flow_data: dict) -> dict:
    """
    Apply the grid to a loosely shaped ``{nodes, edges}`` flow dict, as
    returned inside topic breakdowns where nodes carry ``data.label``.
    """
    nodes = [n for n in (flow_data or {}).get('nodes') or [] if isinstance(n, dict)]
    placed = []
    for index, node in enumerate(nodes):
        node_id = str(node.get('id') or f'node-{index + 1}')
        placed.append({**node, 'id': node_id, 'position': grid_position(index)})

    node_ids = {node['id'] for node in placed}
    edges = []
    for edge in (flow_data or {}).get('edges') or []:
        if not isinstance(edge, dict):
            continue
        source, target = str(edge.get('source', '')), str(edge.get('target', ''))
        if source in node_ids and target in node_ids:
            edges.append({**edge, 'id': str(edge.get('id') or f'e{source}-{target}'),
                          'source': source, 'target': target})
    return {'nodes': placed, 'edges': edges}
