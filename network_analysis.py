"""
Network analysis module for co-purchase centrality analysis.
Computes degree centrality, sampled closeness centrality and local
clustering coefficients, and ranks nodes by score.

Every metric reads an undirected networkx.Graph without modifying it;
only ``nodes()``, ``neighbors(node)``, ``has_edge(u, v)`` and networkx's
single-source shortest path search are used.
Work is split into node partitions; each partition is processed
independently (optionally in a multiprocessing.Pool) and the partial
maps are merged in a single pass afterwards.
"""

import math
from itertools import combinations
from multiprocessing import Pool

import networkx as nx
import numpy as np
from tqdm import tqdm

from config import CONFIG


class NonComparableScoreError(ValueError):
    """Raised when a NaN score reaches the ranking step."""


# ---------------------------------------------------------------------------
# Parallel execution helpers
# ---------------------------------------------------------------------------

# Read-only graph handed to each worker process once, by the pool initializer
_WORKER_GRAPH = None


def _init_worker(graph):
    global _WORKER_GRAPH
    _WORKER_GRAPH = graph


def _run_partition(args):
    func, chunk = args
    return func(_WORKER_GRAPH, chunk)


def partition_nodes(nodes, n_parts):
    """
    Split nodes into at most n_parts contiguous, disjoint, non-empty chunks.

    Args:
        nodes: Sequence of node identifiers
        n_parts: Requested number of chunks (values below 1 are treated as 1)

    Returns:
        list: List of node lists covering every input node exactly once
    """
    nodes = list(nodes)
    if not nodes:
        return []

    n_parts = max(1, min(n_parts, len(nodes)))
    base, extra = divmod(len(nodes), n_parts)

    chunks = []
    start = 0
    for i in range(n_parts):
        end = start + base + (1 if i < extra else 0)
        chunks.append(nodes[start:end])
        start = end
    return chunks


def merge_partial_results(partials):
    """
    Combine independent partial metric maps into one map.

    Args:
        partials: Iterable of dicts (node -> score), one per partition

    Returns:
        dict: Union of all partial maps

    Raises:
        ValueError: If a node appears in more than one partial map
    """
    merged = {}
    for partial in partials:
        for node, score in partial.items():
            if node in merged:
                raise ValueError(f"Node {node!r} was produced by more than one partition")
            merged[node] = score
    return merged


def _resolve_n_jobs(n_jobs, num_items):
    if n_jobs is None:
        if num_items < CONFIG['parallel_min_nodes']:
            return 1
        return CONFIG['n_jobs']
    return max(1, int(n_jobs))


def _map_partitions(func, graph, items, n_jobs, desc, show_progress):
    """Run func(graph, chunk) over partitions of items and merge the results."""
    n_jobs = _resolve_n_jobs(n_jobs, len(items))
    chunks = partition_nodes(items, n_jobs * CONFIG['chunks_per_job'])

    if n_jobs <= 1 or len(chunks) <= 1:
        partials = [func(graph, chunk) for chunk in tqdm(chunks, desc=desc, disable=not show_progress)]
    else:
        tasks = [(func, chunk) for chunk in chunks]
        with Pool(processes=min(n_jobs, len(chunks)), initializer=_init_worker, initargs=(graph,)) as pool:
            partials = list(tqdm(pool.imap_unordered(_run_partition, tasks),
                                 total=len(tasks), desc=desc, disable=not show_progress))

    return merge_partial_results(partials)


# ---------------------------------------------------------------------------
# Degree centrality
# ---------------------------------------------------------------------------

def _degree_partition(graph, nodes):
    return {node: sum(1 for _ in graph.neighbors(node)) for node in nodes}


def compute_degree_centrality(graph, n_jobs=None, show_progress=False):
    """
    Count the edges incident to every node.

    Args:
        graph: Undirected graph (nodes / neighbors / has_edge)
        n_jobs: Worker processes (None = CONFIG['n_jobs'] on large graphs)
        show_progress: Display a tqdm progress bar

    Returns:
        dict: node -> degree, one entry per node
    """
    nodes = list(graph.nodes())
    return _map_partitions(_degree_partition, graph, nodes, n_jobs,
                           "Degree centrality", show_progress)


# ---------------------------------------------------------------------------
# Closeness centrality (sampled)
# ---------------------------------------------------------------------------

def sample_nodes(graph, sample_size, seed=None):
    """
    Draw min(sample_size, |V|) distinct nodes uniformly at random.

    Args:
        graph: Undirected graph
        sample_size: Number of nodes requested
        seed: Optional seed; None draws from a fresh random source

    Returns:
        list: Sampled node identifiers
    """
    if sample_size < 0:
        raise ValueError(f"sample_size must be non-negative, got {sample_size}")

    nodes = list(graph.nodes())
    size = min(sample_size, len(nodes))
    if size == 0:
        return []

    rng = np.random.default_rng(seed)
    indices = rng.choice(len(nodes), size=size, replace=False)
    return [nodes[i] for i in indices]


def bfs_distances(graph, source):
    """Hop distance from source to every node in its connected component."""
    return dict(nx.single_source_shortest_path_length(graph, source))


def closeness_from_source(graph, source):
    """
    Closeness of a single source from its own BFS: reached / total distance.

    The reached count includes the source itself. A source that reaches
    nothing but itself (total distance 0) scores 0.0.
    """
    distances = bfs_distances(graph, source)
    total_distance = sum(distances.values())
    if total_distance == 0:
        return 0.0
    return len(distances) / total_distance


def _closeness_partition(graph, sources):
    return {source: closeness_from_source(graph, source) for source in sources}


def compute_closeness_centrality(graph, sample_size, n_jobs=None, seed=None, show_progress=False):
    """
    Approximate closeness centrality from a random sample of BFS sources.

    Only the sampled nodes receive a score; each score comes from that
    node's own breadth-first traversal rather than all-pairs shortest paths.

    Args:
        graph: Undirected graph
        sample_size: Number of sources to sample (all nodes if larger than |V|)
        n_jobs: Worker processes (None = CONFIG['n_jobs'] on large graphs)
        seed: Optional seed for a reproducible sample
        show_progress: Display a tqdm progress bar

    Returns:
        dict: sampled node -> closeness score
    """
    sources = sample_nodes(graph, sample_size, seed=seed)
    if not sources:
        return {}

    # Each source is a full BFS, so size the pool by graph size, not sample size
    if n_jobs is None:
        n_jobs = _resolve_n_jobs(None, sum(1 for _ in graph.nodes()))

    return _map_partitions(_closeness_partition, graph, sources, n_jobs,
                           "Closeness centrality", show_progress)


# ---------------------------------------------------------------------------
# Clustering coefficient
# ---------------------------------------------------------------------------

def local_clustering(graph, node):
    """
    Fraction of neighbor pairs that are themselves connected.

    Self-loops are ignored. Nodes with fewer than two neighbors score 0.0.
    """
    neighbors = [n for n in graph.neighbors(node) if n != node]
    degree = len(neighbors)
    if degree < 2:
        return 0.0

    triangles = sum(1 for u, v in combinations(neighbors, 2) if graph.has_edge(u, v))
    return 2.0 * triangles / (degree * (degree - 1))


def _clustering_partition(graph, nodes):
    return {node: local_clustering(graph, node) for node in nodes}


def compute_clustering_coefficient(graph, n_jobs=None, show_progress=False):
    """
    Compute the local clustering coefficient of every node.

    Args:
        graph: Undirected graph
        n_jobs: Worker processes (None = CONFIG['n_jobs'] on large graphs)
        show_progress: Display a tqdm progress bar

    Returns:
        dict: node -> clustering coefficient, one entry per node
    """
    nodes = list(graph.nodes())
    return _map_partitions(_clustering_partition, graph, nodes, n_jobs,
                           "Clustering coefficient", show_progress)


def compute_all_metrics(graph, sample_size, n_jobs=None, seed=None, show_progress=False):
    """
    Compute the three metric maps for a graph.

    Returns:
        dict: {'degree': ..., 'closeness': ..., 'clustering': ...}
    """
    return {
        'degree': compute_degree_centrality(graph, n_jobs=n_jobs, show_progress=show_progress),
        'closeness': compute_closeness_centrality(graph, sample_size, n_jobs=n_jobs, seed=seed,
                                                  show_progress=show_progress),
        'clustering': compute_clustering_coefficient(graph, n_jobs=n_jobs, show_progress=show_progress),
    }


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

def top_central_nodes(centrality, top_n):
    """
    Select the top_n highest-scoring nodes.

    Ties are broken by ascending node identifier so the ranking is
    deterministic.

    Args:
        centrality: dict mapping node -> score
        top_n: Maximum number of entries to return

    Returns:
        list: (node, score) tuples sorted by descending score

    Raises:
        NonComparableScoreError: If any score is NaN
        ValueError: If top_n is negative
    """
    if top_n < 0:
        raise ValueError(f"top_n must be non-negative, got {top_n}")

    for node, score in centrality.items():
        if math.isnan(score):
            raise NonComparableScoreError(f"Score for node {node!r} is NaN and cannot be ranked")

    ranked = sorted(centrality.items(), key=lambda item: (-item[1], item[0]))
    return [(node, score) for node, score in ranked[:top_n]]
