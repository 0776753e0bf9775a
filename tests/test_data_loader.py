# tests/test_data_loader.py
import os
import pickle

import networkx as nx
import pytest

from data_loader import build_graph_from_edges, describe_graph, load_graph, read_edge_list


def test_read_edge_list_skips_comments_and_malformed_lines(edge_list_file):
    edges, skipped = read_edge_list(edge_list_file)
    assert edges == [("10", "20"), ("10", "30"), ("20", "30"), ("30", "40"), ("20", "10")]
    assert skipped == 1


def test_read_edge_list_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_edge_list(tmp_path / "missing.txt")


def test_build_graph_assigns_dense_ids_in_first_seen_order():
    G = build_graph_from_edges([("b", "a"), ("a", "c"), ("c", "b")])
    assert sorted(G.nodes()) == [0, 1, 2]
    assert [G.nodes[n]['label'] for n in range(3)] == ["b", "a", "c"]
    assert G.number_of_edges() == 3


def test_build_graph_is_undirected_and_collapses_duplicates():
    G = build_graph_from_edges([("1", "2"), ("2", "1"), ("1", "2")])
    assert isinstance(G, nx.Graph)
    assert not G.is_directed()
    assert G.number_of_edges() == 1
    assert G.has_edge(1, 0)


def test_load_graph_without_cache(edge_list_file, tmp_path):
    G = load_graph(edge_list_file, cache_file=tmp_path / "cache.pkl", use_cache=False)
    assert G.number_of_nodes() == 4
    assert G.number_of_edges() == 4
    assert not (tmp_path / "cache.pkl").exists()


def test_load_graph_writes_and_reuses_cache(edge_list_file, tmp_path, capsys):
    cache_file = tmp_path / "cache" / "graph.pkl"
    first = load_graph(edge_list_file, cache_file=cache_file)
    assert cache_file.exists()

    capsys.readouterr()
    second = load_graph(edge_list_file, cache_file=cache_file)
    assert "from cache" in capsys.readouterr().out
    assert set(second.edges()) == set(first.edges())
    assert dict(second.nodes(data='label')) == dict(first.nodes(data='label'))


def test_load_graph_rebuilds_stale_cache(edge_list_file, tmp_path, capsys):
    cache_file = tmp_path / "graph.pkl"
    load_graph(edge_list_file, cache_file=cache_file)
    stat = edge_list_file.stat()
    os.utime(cache_file, (stat.st_atime - 100, stat.st_mtime - 100))

    capsys.readouterr()
    load_graph(edge_list_file, cache_file=cache_file)
    assert "older than" in capsys.readouterr().out


def test_load_graph_recovers_from_corrupt_cache(edge_list_file, tmp_path):
    cache_file = tmp_path / "graph.pkl"
    cache_file.write_bytes(b"not a pickle")
    G = load_graph(edge_list_file, cache_file=cache_file)
    assert G.number_of_nodes() == 4


def test_load_graph_recovers_from_unsupported_pickle_protocol(edge_list_file, tmp_path, capsys):
    cache_file = tmp_path / "graph.pkl"
    cache_file.write_bytes(b"\x80\x09garbage")
    G = load_graph(edge_list_file, cache_file=cache_file)
    assert G.number_of_nodes() == 4
    assert "Cache loading failed" in capsys.readouterr().out


@pytest.mark.parametrize("cached", [{"x": 1}, nx.DiGraph([(0, 1)])])
def test_load_graph_rebuilds_when_cache_is_not_an_undirected_graph(edge_list_file, tmp_path, cached):
    cache_file = tmp_path / "graph.pkl"
    cache_file.write_bytes(pickle.dumps(cached))
    G = load_graph(edge_list_file, cache_file=cache_file)
    assert isinstance(G, nx.Graph) and not G.is_directed()
    assert G.number_of_edges() == 4
    with open(cache_file, "rb") as f:
        assert isinstance(pickle.load(f), nx.Graph)


def test_describe_graph(disconnected_graph):
    stats = describe_graph(disconnected_graph)
    assert stats['nodes'] == 7
    assert stats['edges'] == 5
    assert stats['connected_components'] == 3
    assert stats['largest_component_size'] == 3
    assert stats['isolated_nodes'] == 1
    assert stats['max_degree'] == 2


def test_describe_empty_graph(empty_graph):
    stats = describe_graph(empty_graph)
    assert stats['nodes'] == 0
    assert stats['connected_components'] == 0
    assert stats['largest_component_size'] == 0
