"""
Configuration module for co-purchase centrality analysis.
Contains all paths, directories, and configuration parameters.
"""

from multiprocessing import cpu_count
from pathlib import Path

# Set up paths
DATA_DIR = Path("data")
EDGES_FILE = DATA_DIR / "amazon0302.txt"
GRAPH_CACHE_FILE = DATA_DIR / "graph_cache.pkl"

# Output files - all outputs go to results/ unless overridden on the command line
RESULTS_DIR = Path("results")
RESULTS_FILE_NAME = "centrality_results.csv"
TOP_NODES_FILE_NAME = "top_nodes.csv"
REPORT_FILE_NAME = "report.txt"
SUMMARY_FILE_NAME = "centrality_summary.txt"
CLOSENESS_PLOT_NAME = "closeness.png"
CLUSTERING_PLOT_NAME = "clustering.png"

# Configuration
CONFIG = {
    'sample_size': 150,  # Sampled BFS sources for approximate closeness
    'top_n': 10,  # Nodes reported by normalized closeness
    'n_jobs': min(8, cpu_count()),  # Worker processes for the parallel metrics
    'parallel_min_nodes': 10000,  # Smaller graphs run in-process when n_jobs is not given
    'chunks_per_job': 4,  # Node partitions handed to each worker
    'seed': None,  # None = fresh random sample on every run
    'max_plot_bars': 2000,  # Bar charts are down-sampled beyond this many ranks
}
