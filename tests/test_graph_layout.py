from services.graph_layout import (
    assemble_graph,
    grid_position,
    layout_flow_data,
    prune_edges,
)
from services.schemas import StudyEdge, StudyGraph, StudyNode


def _graph(node_count, edges=()):
    return StudyGraph(
        nodes=[{'id': str(i + 1), 'label': f'Topic {i + 1}'} for i in range(node_count)],
        edges=[{'source': s, 'target': t} for s, t in edges],
    )


def test_grid_positions_wrap_every_three_nodes():
    assert [grid_position(i) for i in range(5)] == [
        {'x': 150, 'y': 100},
        {'x': 450, 'y': 100},
        {'x': 750, 'y': 100},
        {'x': 150, 'y': 300},
        {'x': 450, 'y': 300},
    ]


def test_assemble_overrides_model_positions():
    graph = StudyGraph(nodes=[
        {'id': 'a', 'label': 'A', 'position': {'x': 9999, 'y': -5}},
        {'id': 'b', 'label': 'B'},
    ])
    placed = assemble_graph(graph)
    assert [(n.position.x, n.position.y) for n in placed.nodes] == [(150, 100), (450, 100)]


def test_layout_depends_only_on_index():
    first = assemble_graph(_graph(4))
    second = assemble_graph(_graph(4))
    assert [n.position for n in first.nodes] == [n.position for n in second.nodes]


def test_missing_node_ids_are_filled():
    graph = StudyGraph(nodes=[{'label': 'A'}, {'id': 'x', 'label': 'B'}])
    placed = assemble_graph(graph)
    assert [n.id for n in placed.nodes] == ['node-1', 'x']


def test_dangling_edges_are_dropped():
    graph = _graph(3, edges=[('1', '2'), ('2', '3'), ('3', '99'), ('0', '1')])
    placed = assemble_graph(graph)
    assert [(e.source, e.target) for e in placed.edges] == [('1', '2'), ('2', '3')]
    node_ids = {n.id for n in placed.nodes}
    assert all(e.source in node_ids and e.target in node_ids for e in placed.edges)


def test_edge_ids_are_derived_when_missing():
    nodes = [StudyNode(id='1', label='A'), StudyNode(id='2', label='B')]
    kept, dropped = prune_edges(nodes, [StudyEdge(source='1', target='2'),
                                        StudyEdge(id='keep', source='2', target='1')])
    assert dropped == 0
    assert [e.id for e in kept] == ['e1-2', 'keep']


def test_assemble_does_not_mutate_input():
    graph = _graph(2, edges=[('1', '7')])
    assemble_graph(graph)
    assert len(graph.edges) == 1
    assert graph.nodes[0].position.x == 0


def test_layout_flow_data_positions_loose_nodes():
    flow = {
        'nodes': [{'id': 1, 'data': {'label': 'A'}}, {'data': {'label': 'B'}}, 'junk'],
        'edges': [{'source': 1, 'target': 'node-2'}, {'source': '1', 'target': 'zzz'}, None],
    }
    laid_out = layout_flow_data(flow)
    assert [n['id'] for n in laid_out['nodes']] == ['1', 'node-2']
    assert laid_out['nodes'][1]['position'] == {'x': 450, 'y': 100}
    assert laid_out['nodes'][0]['data'] == {'label': 'A'}
    assert laid_out['edges'] == [{'source': '1', 'target': 'node-2', 'id': 'e1-node-2'}]


def test_layout_flow_data_handles_empty_input():
    assert layout_flow_data({}) == {'nodes': [], 'edges': []}
    assert layout_flow_data(None) == {'nodes': [], 'edges': []}


def test_assemble_is_idempotent():
    once = assemble_graph(_graph(4, edges=[('1', '2'), ('4', 'x')]))
    assert assemble_graph(once) == once
