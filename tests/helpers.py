def edge_set(G):
    return {(e.v, e.w, e.name) for e in G.edges()}


def assert_graphs_equal(G1, G2, check_labels=True, check_hierarchy=True):
    assert G1.is_directed() == G2.is_directed()
    assert G1.is_multigraph() == G2.is_multigraph()
    assert G1.is_compound() == G2.is_compound()
    assert set(G1.nodes()) == set(G2.nodes())
    assert edge_set(G1) == edge_set(G2)
    assert G1.node_count() == G2.node_count()
    assert G1.edge_count() == G2.edge_count()
    if check_labels:
        assert G1.graph() == G2.graph()
        for v in G1.nodes():
            assert G1.node(v) == G2.node(v), f"node {v} label differs"
        for e in G1.edges():
            assert G1.edge(e) == G2.edge(e), f"edge {e} label differs"
    if check_hierarchy and G1.is_compound():
        for v in G1.nodes():
            assert G1.parent(v) == G2.parent(v), f"parent of {v} differs"
