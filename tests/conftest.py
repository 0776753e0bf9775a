# tests/conftest.py
import matplotlib
import networkx as nx
import pytest

matplotlib.use("Agg")


@pytest.fixture
def empty_graph():
    return nx.Graph()


@pytest.fixture
def two_node_graph():
    """Single edge A-B (A=0, B=1)."""
    G = nx.Graph()
    G.add_edge(0, 1)
    return G


@pytest.fixture
def triangle_graph():
    return nx.cycle_graph(3)


@pytest.fixture
def star_graph():
    """Center 0 with leaves 1..5."""
    return nx.star_graph(5)


@pytest.fixture
def disconnected_graph():
    """Path 0-1-2, triangle 3-4-5 and isolated node 6."""
    G = nx.Graph()
    G.add_edges_from([(0, 1), (1, 2), (3, 4), (4, 5), (5, 3)])
    G.add_node(6)
    return G


@pytest.fixture
def random_graph():
    return nx.gnm_random_graph(60, 150, seed=7)


@pytest.fixture
def edge_list_file(tmp_path):
    """SNAP-style edge list: comment header, a malformed line, a duplicate edge."""
    path = tmp_path / "edges.txt"
    path.write_text(
        "# Directed graph (each unordered pair of nodes is saved once)\n"
        "# FromNodeId\tToNodeId\n"
        "10\t20\n"
        "10\t30\n"
        "20\t30\n"
        "30\t40\n"
        "this line is malformed\n"
        "\n"
        "20\t10\n"
    )
    return path
