"""
Data loading module for co-purchase centrality analysis.
Handles parsing of the edge-list file, graph caching and graph validation.
"""

import pickle
from datetime import datetime
from pathlib import Path

import networkx as nx
import numpy as np
from tqdm import tqdm

from config import EDGES_FILE, GRAPH_CACHE_FILE


def read_edge_list(edges_file):
    """
    Read (source, target) token pairs from a whitespace-separated edge list.

    Lines starting with '#' are comments. Any other line that does not
    split into exactly two tokens is skipped.

    Args:
        edges_file: Path to the edge-list text file

    Returns:
        tuple: (list of (source, target) pairs, number of skipped lines)
    """
    edges_file = Path(edges_file)
    if not edges_file.exists():
        raise FileNotFoundError(f"Edge list not found at {edges_file}")

    edges = []
    skipped = 0
    with open(edges_file, 'r') as f:
        for line in tqdm(f, desc="   Reading edges", unit=" lines", leave=False):
            if line.startswith('#'):
                continue
            tokens = line.split()
            if len(tokens) != 2:
                if tokens:
                    skipped += 1
                continue
            edges.append((tokens[0], tokens[1]))

    return edges, skipped


def build_graph_from_edges(edges):
    """
    Build an undirected graph with dense integer node ids.

    Ids are assigned in first-seen order; the original token is stored in
    the 'label' node attribute. Repeated edges collapse into one.

    Args:
        edges: Iterable of (source_token, target_token) pairs

    Returns:
        nx.Graph: Undirected graph with nodes 0..V-1
    """
    G = nx.Graph()
    node_map = {}

    for source, target in edges:
        for token in (source, target):
            if token not in node_map:
                node_id = len(node_map)
                node_map[token] = node_id
                G.add_node(node_id, label=token)
        G.add_edge(node_map[source], node_map[target])

    return G


def load_graph(edges_file=EDGES_FILE, cache_file=GRAPH_CACHE_FILE, use_cache=True):
    """Load the co-purchase graph, from the pickle cache when available"""
    print("=" * 80)
    print("PHASE 1: LOADING GRAPH")
    print("=" * 80)

    edges_file = Path(edges_file)
    cache_file = Path(cache_file) if cache_file is not None else None

    cache_is_fresh = (
        cache_file is not None
        and cache_file.exists()
        and (not edges_file.exists() or cache_file.stat().st_mtime >= edges_file.stat().st_mtime)
    )
    if use_cache and cache_file is not None and cache_file.exists() and not cache_is_fresh:
        print(f"\n  ⚠ Graph cache {cache_file} is older than {edges_file}, rebuilding...")

    if use_cache and cache_is_fresh:
        cache_time = datetime.fromtimestamp(cache_file.stat().st_mtime)
        print(f"\nLoading graph from cache {cache_file} (created: {cache_time.strftime('%Y-%m-%d %H:%M:%S')})...")
        try:
            with open(cache_file, 'rb') as f:
                G = pickle.load(f)
            if not isinstance(G, nx.Graph) or G.is_directed():
                raise ValueError(f"cache holds {type(G).__name__}, expected an undirected networkx Graph")
            print(f"✓ Graph loaded from cache")
            print(f"  - Nodes: {G.number_of_nodes():,}")
            print(f"  - Edges: {G.number_of_edges():,}")
            return G
        except (OSError, pickle.UnpicklingError, EOFError, ValueError, AttributeError, ImportError) as e:
            print(f"  ⚠ Cache loading failed: {e}")
            print("  Building graph from scratch...")

    print(f"\nLoading edges from {edges_file}...")
    edges, skipped = read_edge_list(edges_file)
    print(f"  - Edge lines read: {len(edges):,}")
    if skipped:
        print(f"  ⚠ Skipped {skipped:,} malformed lines")

    G = build_graph_from_edges(edges)
    print(f"✓ Graph constructed:")
    print(f"  - Nodes: {G.number_of_nodes():,}")
    print(f"  - Edges: {G.number_of_edges():,}")

    if use_cache and cache_file is not None:
        print(f"\n  Saving graph to cache: {cache_file}")
        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(cache_file, 'wb') as f:
                pickle.dump(G, f, protocol=pickle.HIGHEST_PROTOCOL)
            print(f"  ✓ Graph cached successfully")
        except OSError as e:
            print(f"  ⚠ Cache saving failed: {e}")

    return G


def describe_graph(G):
    """Print and return basic structural statistics of the graph"""
    print("\nValidating graph properties...")

    num_nodes = G.number_of_nodes()
    stats = {
        'nodes': num_nodes,
        'edges': G.number_of_edges(),
        'density': nx.density(G) if num_nodes > 1 else 0.0,
        'self_loops': nx.number_of_selfloops(G),
    }

    components = list(nx.connected_components(G)) if num_nodes > 0 else []
    stats['connected_components'] = len(components)
    stats['largest_component_size'] = len(max(components, key=len)) if components else 0

    degrees = [d for _, d in G.degree()]
    stats['mean_degree'] = float(np.mean(degrees)) if degrees else 0.0
    stats['median_degree'] = float(np.median(degrees)) if degrees else 0.0
    stats['max_degree'] = int(np.max(degrees)) if degrees else 0
    stats['isolated_nodes'] = sum(1 for d in degrees if d == 0)

    print(f"  - Nodes: {stats['nodes']:,}")
    print(f"  - Edges: {stats['edges']:,}")
    print(f"  - Density: {stats['density']:.6f}")
    print(f"  - Self-loops: {stats['self_loops']:,}")
    print(f"  - Connected components: {stats['connected_components']:,}")
    print(f"    Largest component size: {stats['largest_component_size']:,} nodes")
    print(f"\n  Degree statistics:")
    print(f"  - Mean: {stats['mean_degree']:.2f}")
    print(f"  - Median: {stats['median_degree']:.2f}")
    print(f"  - Max: {stats['max_degree']}")
    print(f"  - Isolated nodes: {stats['isolated_nodes']:,}")

    return stats
