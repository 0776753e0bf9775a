"""
Visualization module for co-purchase centrality analysis.
Handles creation of metric distribution bar charts.
"""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from config import CONFIG, RESULTS_DIR, CLOSENESS_PLOT_NAME, CLUSTERING_PLOT_NAME


def _downsample(values, max_bars):
    """Keep evenly spaced ranks so very long series still show their shape."""
    if max_bars is None or len(values) <= max_bars:
        return np.arange(len(values)), values
    ranks = np.linspace(0, len(values) - 1, max_bars).round().astype(int)
    return ranks, values[ranks]


def _plot_sorted_bars(values, title, output_path, ylabel):
    values = np.sort(np.asarray(values, dtype=float))[::-1]
    ranks, heights = _downsample(values, CONFIG['max_plot_bars'])

    sns.set_style("whitegrid")
    fig, ax = plt.subplots(figsize=(8, 6))
    if len(heights) > 0:
        width = (ranks[1] - ranks[0]) if len(ranks) > 1 else 1
        ax.bar(ranks, heights, width=width, align='edge', color='steelblue')
        ax.set_xlim(0, len(values))
        ax.set_ylim(0, heights.max() if heights.max() > 0 else 1.0)
    ax.set_title(title, fontsize=14)
    ax.set_xlabel('Node rank')
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3, axis='y')

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return output_path


def visualize_centrality(centrality, title, output_path):
    """
    Bar chart of the positive centrality scores, highest first.

    Args:
        centrality: dict mapping node -> score
        title: Chart title
        output_path: Image file to write
    """
    values = [value for value in centrality.values() if value > 0.0]
    output_path = _plot_sorted_bars(values, title, output_path, 'Centrality')
    print(f"   ✓ Centrality visualization saved to {output_path}")
    return output_path


def visualize_clustering_coefficient(clustering_coefficient, title, output_path):
    """Bar chart of every clustering coefficient, highest first."""
    values = list(clustering_coefficient.values())
    output_path = _plot_sorted_bars(values, title, output_path, 'Clustering coefficient')
    print(f"   ✓ Clustering coefficient visualization saved to {output_path}")
    return output_path


def create_visualizations(normalized_closeness, clustering_coefficient, output_dir=RESULTS_DIR):
    """
    Create the closeness and clustering plots.

    Returns:
        list: Paths of the plots that were written
    """
    print("\n" + "=" * 80)
    print("PHASE 4: CREATING VISUALIZATIONS")
    print("=" * 80)
    print()

    output_dir = Path(output_dir)
    written = []

    try:
        written.append(visualize_centrality(
            normalized_closeness, "Normalized Closeness Centrality", output_dir / CLOSENESS_PLOT_NAME))
        written.append(visualize_clustering_coefficient(
            clustering_coefficient, "Clustering Coefficients", output_dir / CLUSTERING_PLOT_NAME))
    except (OSError, ValueError) as e:
        print(f"\n⚠ Could not create visualizations: {e}")

    return written
