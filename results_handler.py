"""
Results handling module for co-purchase centrality analysis.
Handles result tables, console analysis, the plain-text report and file saving.
"""

from datetime import datetime
from pathlib import Path

import numpy as np
import pandas as pd

from config import (
    RESULTS_DIR,
    RESULTS_FILE_NAME,
    TOP_NODES_FILE_NAME,
    REPORT_FILE_NAME,
    SUMMARY_FILE_NAME,
    CLOSENESS_PLOT_NAME,
    CLUSTERING_PLOT_NAME,
)

METRIC_COLUMNS = ['degree', 'closeness', 'normalized_closeness', 'clustering_coefficient']


def create_results_dataframe(G, degree_centrality, closeness_centrality,
                             clustering_coefficient, normalized_closeness):
    """
    Create one row per node with every metric.

    Closeness columns are NaN for nodes that were not sampled.

    Returns:
        pd.DataFrame: Columns ['node', 'label', 'degree', 'clustering_coefficient',
                      'closeness', 'normalized_closeness'], sorted by node
    """
    nodes = sorted(G.nodes())
    results_df = pd.DataFrame({'node': nodes})

    labels = {node: data.get('label', str(node)) for node, data in G.nodes(data=True)}
    results_df['label'] = results_df['node'].map(labels)
    results_df['degree'] = results_df['node'].map(degree_centrality)
    results_df['clustering_coefficient'] = results_df['node'].map(clustering_coefficient).astype(float)
    results_df['closeness'] = results_df['node'].map(closeness_centrality).astype(float)
    results_df['normalized_closeness'] = results_df['node'].map(normalized_closeness).astype(float)

    return results_df


def _top_nodes_dataframe(results_df, top_nodes):
    rows = []
    by_node = results_df.set_index('node')
    for rank, (node, score) in enumerate(top_nodes, start=1):
        row = by_node.loc[node]
        rows.append({
            'rank': rank,
            'node': node,
            'label': row['label'],
            'normalized_closeness': score,
            'closeness': row['closeness'],
            'degree': row['degree'],
            'clustering_coefficient': row['clustering_coefficient'],
        })
    return pd.DataFrame(rows, columns=['rank', 'node', 'label', 'normalized_closeness',
                                       'closeness', 'degree', 'clustering_coefficient'])


def analyze_results(results_df, top_nodes):
    """Analyze and display key results"""
    print("\n" + "=" * 80)
    print("PHASE 3: ANALYZING RESULTS")
    print("=" * 80)

    print(f"\n1. Top {len(top_nodes)} Nodes by Normalized Closeness:")
    print("   " + "-" * 76)
    print(f"   {'Rank':<6} {'Node':<10} {'Label':<14} {'Norm. Closeness':<17} {'Degree':<8} {'Clustering':<10}")
    print("   " + "-" * 76)
    top_df = _top_nodes_dataframe(results_df, top_nodes)
    for _, row in top_df.iterrows():
        print(f"   {row['rank']:<6} {row['node']:<10} {str(row['label']):<14} "
              f"{row['normalized_closeness']:<17.8f} {row['degree']:<8} {row['clustering_coefficient']:<10.4f}")

    print("\n2. Metric Distributions:")
    print("   " + "-" * 76)
    for metric, stats in metric_statistics(results_df).items():
        if stats is None:
            print(f"\n   {metric.upper()}: no values")
            continue
        print(f"\n   {metric.upper()} ({stats['count']:,} values):")
        print(f"     Mean:   {stats['mean']:.8f}")
        print(f"     Median: {stats['median']:.8f}")
        print(f"     Std:    {stats['std']:.8f}")
        print(f"     Min:    {stats['min']:.8f}")
        print(f"     Max:    {stats['max']:.8f}")
        print(f"     Percentiles:", end="")
        for p in [50, 75, 90, 95, 99]:
            print(f" {p}th={stats['percentiles'][p]:.8f}", end="")
        print()


def metric_statistics(results_df):
    """Summary statistics per metric column, ignoring unsampled (NaN) rows"""
    statistics = {}
    for metric in METRIC_COLUMNS:
        values = results_df[metric].dropna().to_numpy(dtype=float)
        if len(values) == 0:
            statistics[metric] = None
            continue
        statistics[metric] = {
            'count': len(values),
            'mean': float(np.mean(values)),
            'median': float(np.median(values)),
            'std': float(np.std(values)),
            'min': float(np.min(values)),
            'max': float(np.max(values)),
            'percentiles': {p: float(np.percentile(values, p)) for p in [25, 50, 75, 90, 95, 99]},
        }
    return statistics


def generate_report(degree_centrality, closeness_centrality, clustering_coefficient, output_path):
    """
    Write every metric map to a plain-text report.

    One 'Node: <id>, <Metric>: <value>' line per entry, nodes ascending.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        f.write("Degree Centrality:\n")
        for node in sorted(degree_centrality):
            f.write(f"Node: {node}, Degree Centrality: {degree_centrality[node]}\n")

        f.write("\nCloseness Centrality:\n")
        for node in sorted(closeness_centrality):
            f.write(f"Node: {node}, Closeness Centrality: {closeness_centrality[node]}\n")

        f.write("\nClustering Coefficients:\n")
        for node in sorted(clustering_coefficient):
            f.write(f"Node: {node}, Clustering Coefficient: {clustering_coefficient[node]}\n")

    return output_path


def save_results(results_df, top_nodes, graph_stats, run_info, output_dir=RESULTS_DIR):
    """Save result tables and the summary file"""
    print("\n" + "=" * 80)
    print("PHASE 5: SAVING RESULTS")
    print("=" * 80)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / RESULTS_FILE_NAME
    top_nodes_file = output_dir / TOP_NODES_FILE_NAME
    summary_file = output_dir / SUMMARY_FILE_NAME

    print(f"\n1. Saving full results to {results_file}...")
    results_df.to_csv(results_file, index=False)
    print(f"   ✓ Saved {len(results_df):,} nodes with metric scores")

    print(f"\n2. Saving top {len(top_nodes)} nodes to {top_nodes_file}...")
    top_df = _top_nodes_dataframe(results_df, top_nodes)
    top_df.to_csv(top_nodes_file, index=False)
    print(f"   ✓ Saved top {len(top_df)} nodes")

    print(f"\n3. Creating summary in {summary_file}...")
    with open(summary_file, 'w') as f:
        f.write("=" * 80 + "\n")
        f.write("CO-PURCHASE NETWORK CENTRALITY ANALYSIS\n")
        f.write("=" * 80 + "\n")
        f.write(f"\nAnalysis Date: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write(f"Edge list: {run_info.get('edges_file', 'n/a')}\n")

        f.write("\n" + "-" * 80 + "\n")
        f.write("GRAPH INFORMATION\n")
        f.write("-" * 80 + "\n")
        f.write(f"Nodes: {graph_stats['nodes']:,}\n")
        f.write(f"Edges: {graph_stats['edges']:,}\n")
        f.write(f"Density: {graph_stats['density']:.6f}\n")
        f.write(f"Connected components: {graph_stats['connected_components']:,}\n")
        f.write(f"  Largest component size: {graph_stats['largest_component_size']:,} nodes\n")
        f.write(f"Isolated nodes: {graph_stats['isolated_nodes']:,}\n")

        f.write("\n" + "-" * 80 + "\n")
        f.write("PARAMETERS\n")
        f.write("-" * 80 + "\n")
        f.write(f"Closeness sample size: {run_info['sample_size']}\n")
        f.write(f"Sampled nodes scored: {run_info['sampled_nodes']}\n")
        f.write(f"Seed: {run_info['seed']}\n")
        f.write(f"Worker processes: {run_info['n_jobs']}\n")
        f.write(f"Computation time: {run_info['elapsed_seconds']:.2f} seconds\n")

        f.write("\n" + "-" * 80 + "\n")
        f.write(f"TOP {len(top_nodes)} NODES (by normalized closeness)\n")
        f.write("-" * 80 + "\n")
        f.write(f"\n{'Rank':<6} {'Node':<10} {'Label':<14} {'Norm. Closeness':<17} {'Degree':<8} {'Clustering':<10}\n")
        f.write("-" * 80 + "\n")
        for _, row in top_df.iterrows():
            f.write(f"{row['rank']:<6} {row['node']:<10} {str(row['label']):<14} "
                    f"{row['normalized_closeness']:<17.10f} {row['degree']:<8} "
                    f"{row['clustering_coefficient']:<10.6f}\n")

        f.write("\n" + "-" * 80 + "\n")
        f.write("METRIC DISTRIBUTIONS\n")
        f.write("-" * 80 + "\n")
        for metric, stats in metric_statistics(results_df).items():
            f.write(f"\n{metric.upper().replace('_', ' ')}:\n")
            if stats is None:
                f.write("  No values\n")
                continue
            f.write(f"  Count:      {stats['count']:,}\n")
            f.write(f"  Mean:       {stats['mean']:.10f}\n")
            f.write(f"  Median:     {stats['median']:.10f}\n")
            f.write(f"  Std Dev:    {stats['std']:.10f}\n")
            f.write(f"  Min:        {stats['min']:.10f}\n")
            f.write(f"  Max:        {stats['max']:.10f}\n")

        f.write("\n" + "-" * 80 + "\n")
        f.write("OUTPUT FILES\n")
        f.write("-" * 80 + "\n")
        f.write(f"\n1. {results_file}\n")
        f.write(f"   - All metrics for every node\n")
        f.write(f"\n2. {top_nodes_file}\n")
        f.write(f"   - Top nodes by normalized closeness\n")
        f.write(f"\n3. {output_dir / REPORT_FILE_NAME}\n")
        f.write(f"   - Plain-text listing of every metric map\n")
        f.write(f"\n4. {CLOSENESS_PLOT_NAME}, {CLUSTERING_PLOT_NAME}\n")
        f.write(f"   - Distribution plots (if generated)\n")

        f.write("\n" + "=" * 80 + "\n")
        f.write("END OF SUMMARY\n")
        f.write("=" * 80 + "\n")

    print(f"   ✓ Summary saved")

    return {'results': results_file, 'top_nodes': top_nodes_file, 'summary': summary_file}
