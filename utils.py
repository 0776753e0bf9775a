"""
Utility module for centrality analysis.
Handles score normalization and timestamped console messages.
"""

import math
from datetime import datetime


class UndefinedNormalizationError(ValueError):
    """Raised when a metric map has no positive maximum to rescale by."""


def log_message(message, file=None):
    """Print and optionally write message to file"""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    formatted_msg = f"[{timestamp}] {message}"
    print(formatted_msg)
    if file:
        file.write(formatted_msg + "\n")


def normalize_centrality_values(centrality):
    """
    Rescale every score by the largest score in the map.

    The node holding the maximum maps to exactly 1.0 and every other node
    lands in [0, 1].

    Args:
        centrality: dict mapping node -> score

    Returns:
        dict: New map with normalized scores (empty input gives an empty map)

    Raises:
        UndefinedNormalizationError: If a score is NaN or the maximum is not
            strictly positive (e.g. every sampled node was isolated)
    """
    if not centrality:
        return {}

    nan_nodes = [node for node, value in centrality.items() if math.isnan(value)]
    if nan_nodes:
        raise UndefinedNormalizationError(
            f"Cannot normalize: {len(nan_nodes)} node(s) have NaN scores (first: {nan_nodes[0]!r})"
        )

    max_centrality = max(centrality.values())
    if max_centrality <= 0:
        raise UndefinedNormalizationError(
            f"Cannot normalize: maximum score is {max_centrality}, expected a positive value"
        )

    return {node: value / max_centrality for node, value in centrality.items()}
