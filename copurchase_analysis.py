"""
Co-purchase Network Centrality Analysis

This script loads an undirected co-purchase graph from an edge list and
computes structural importance metrics for every product:
- Degree centrality (number of co-purchase links)
- Approximate closeness centrality (BFS from a random sample of products)
- Local clustering coefficient (triangle density around each product)

Products are ranked by normalized closeness; results are written as CSV
tables, a plain-text report, a summary file and distribution plots.
"""

import argparse
import sys
import time
from datetime import datetime
from pathlib import Path

from config import CONFIG, EDGES_FILE, GRAPH_CACHE_FILE, RESULTS_DIR, REPORT_FILE_NAME
from data_loader import load_graph, describe_graph
from network_analysis import compute_all_metrics, top_central_nodes
from results_handler import create_results_dataframe, analyze_results, generate_report, save_results
from utils import UndefinedNormalizationError, log_message, normalize_centrality_values
from visualization import create_visualizations


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Degree, closeness and clustering analysis of a co-purchase network."
    )
    parser.add_argument(
        "--edges",
        type=Path,
        default=EDGES_FILE,
        help=f"Whitespace-separated edge list (default: {EDGES_FILE})",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=RESULTS_DIR,
        help=f"Directory to write CSVs, report and figures (default: {RESULTS_DIR})",
    )
    parser.add_argument(
        "--sample-size",
        type=int,
        default=CONFIG['sample_size'],
        help=f"Number of BFS sources for approximate closeness (default: {CONFIG['sample_size']})",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=CONFIG['top_n'],
        help=f"Number of top nodes to report (default: {CONFIG['top_n']})",
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        default=None,
        help="Worker processes (default: automatic, based on graph size)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=CONFIG['seed'],
        help="Seed for the closeness sample (default: fresh random sample)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help=f"Rebuild the graph instead of using {GRAPH_CACHE_FILE}",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip the distribution plots",
    )

    args = parser.parse_args(argv)
    if args.sample_size < 0:
        parser.error("--sample-size must be non-negative")
    if args.top_n < 0:
        parser.error("--top-n must be non-negative")
    return args


def main(argv=None):
    """Main execution function"""
    args = parse_args(argv)

    print("\n" + "=" * 80)
    print("CO-PURCHASE NETWORK CENTRALITY ANALYSIS")
    print("=" * 80)
    print(f"\nExecution started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")

    # Phase 1: Load graph
    cache_file = GRAPH_CACHE_FILE if args.edges == EDGES_FILE else args.edges.with_suffix('.pkl')
    G = load_graph(args.edges, cache_file=cache_file, use_cache=not args.no_cache)
    graph_stats = describe_graph(G)

    # Phase 2: Compute metrics
    print("\n" + "=" * 80)
    print("PHASE 2: COMPUTING METRICS")
    print("=" * 80)
    start_time = time.time()

    print(f"\nComputing degree, closeness (sample size = {args.sample_size}) and clustering...")
    metrics = compute_all_metrics(G, args.sample_size, n_jobs=args.n_jobs, seed=args.seed,
                                  show_progress=True)
    degree_centrality = metrics['degree']
    closeness_centrality = metrics['closeness']
    clustering_coefficient = metrics['clustering']
    print(f"   ✓ Degree centrality computed for {len(degree_centrality):,} nodes")
    print(f"   ✓ Closeness centrality computed for {len(closeness_centrality):,} sampled nodes")
    print(f"   ✓ Clustering coefficient computed for {len(clustering_coefficient):,} nodes")

    try:
        normalized_closeness = normalize_centrality_values(closeness_centrality)
    except UndefinedNormalizationError as e:
        print(f"\n⚠ {e}")
        print("  Every sampled node is isolated; try a larger --sample-size or a different --seed.")
        return 1

    top_nodes = top_central_nodes(normalized_closeness, args.top_n)

    elapsed = time.time() - start_time
    log_message(f"Time elapsed for computation: {elapsed:.2f} seconds")

    # Phase 3: Analyze results
    results_df = create_results_dataframe(G, degree_centrality, closeness_centrality,
                                          clustering_coefficient, normalized_closeness)
    analyze_results(results_df, top_nodes)

    # Phase 4: Visualizations
    if not args.no_plots:
        create_visualizations(normalized_closeness, clustering_coefficient, args.output_dir)

    # Phase 5: Save results
    report_file = generate_report(degree_centrality, normalized_closeness, clustering_coefficient,
                                  args.output_dir / REPORT_FILE_NAME)
    print(f"\n✓ Report saved to {report_file}")
    run_info = {
        'edges_file': str(args.edges),
        'sample_size': args.sample_size,
        'sampled_nodes': len(closeness_centrality),
        'seed': args.seed,
        'n_jobs': args.n_jobs if args.n_jobs is not None else 'auto',
        'elapsed_seconds': elapsed,
    }
    save_results(results_df, top_nodes, graph_stats, run_info, args.output_dir)

    # Final summary
    print("\n" + "=" * 80)
    print("ANALYSIS COMPLETE")
    print("=" * 80)
    print(f"\n✓ Analyzed {G.number_of_nodes():,} products with {G.number_of_edges():,} co-purchase links")
    print(f"✓ Results saved to: {args.output_dir}/")
    print(f"\nTop {len(top_nodes)} Central Nodes:")
    for node, centrality in top_nodes:
        print(f"  Node: {node}, Centrality: {centrality}")
    print("\n" + "=" * 80 + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
