"""
Hierarchical Clustering Module

This module computes the two independent clusterings behind a two-way
clustered heatmap:

- Experiments: distances between replicates (rows of the transposed table)
- Proteins: distances between proteins (rows of the normalized table)

Each distance matrix is clustered agglomeratively (Ward's minimum-variance
linkage by default) and the dendrogram leaf order is kept so the heatmap rows
and columns can be permuted to match the trees.

Distances and linkage are delegated to SciPy. Ward linkage is computed from
the condensed Euclidean distance matrix, which SciPy updates with the
Lance-Williams recurrence. Ties are resolved by SciPy's nearest-neighbour
chain algorithm, which is deterministic for a given input order.
"""

from dataclasses import dataclass
from typing import Callable, List, Union

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import dendrogram, is_monotonic, linkage
from scipy.spatial.distance import pdist, squareform


Metric = Union[str, Callable[[np.ndarray, np.ndarray], float]]


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class ClusteringConfig:
    """Configuration for distance computation and hierarchical clustering.

    Attributes
    ----------
    distance_metric : str or callable
        Any metric accepted by scipy.spatial.distance.pdist
    linkage_method : str
        Linkage criterion passed to scipy.cluster.hierarchy.linkage
    optimal_ordering : bool
        Reorder leaves so adjacent leaves are as similar as possible.
        Changes only the drawing order, not the merges.
    """

    distance_metric: Metric = 'euclidean'
    linkage_method: str = 'ward'
    optimal_ordering: bool = False


@dataclass
class ClusterTree:
    """Binary merge tree produced by agglomerative clustering."""

    labels: List[str]
    linkage_matrix: np.ndarray
    leaf_order: List[int]

    @property
    def ordered_labels(self) -> List[str]:
        """Labels in dendrogram leaf order (left to right)."""
        return [self.labels[i] for i in self.leaf_order]

    @property
    def merge_heights(self) -> np.ndarray:
        return self.linkage_matrix[:, 2]

    @property
    def n_leaves(self) -> int:
        return len(self.labels)

    def is_monotonic(self) -> bool:
        """True when merge heights never decrease from first to last merge."""
        return bool(is_monotonic(self.linkage_matrix))

    def to_merge_table(self) -> pd.DataFrame:
        """
        Merge sequence as a DataFrame.

        Clusters are numbered as in SciPy: 0..n-1 are the original leaves and
        n+i is the cluster formed at merge step i. Leaf ids are also shown as
        labels for readability.
        """
        n = self.n_leaves

        def _name(idx: int) -> str:
            return self.labels[idx] if idx < n else f"cluster_{idx}"

        rows = []
        for step, (left, right, height, size) in enumerate(self.linkage_matrix):
            left, right = int(left), int(right)
            rows.append({
                'step': step + 1,
                'cluster_id': n + step,
                'left': _name(left),
                'right': _name(right),
                'height': height,
                'size': int(size),
            })
        return pd.DataFrame(rows)


@dataclass
class ClusteringResult:
    """Distance matrices and cluster trees for both heatmap axes."""

    experiment_distances: pd.DataFrame
    protein_distances: pd.DataFrame
    experiment_tree: ClusterTree
    protein_tree: ClusterTree


# =============================================================================
# DISTANCES
# =============================================================================

def compute_distance_matrix(data: pd.DataFrame, metric: Metric = 'euclidean') -> pd.DataFrame:
    """
    Pairwise distances between the rows of `data`.

    Parameters
    ----------
    data : pd.DataFrame
        Rows are the entities to compare, columns are the feature vector
    metric : str or callable
        Distance metric (default Euclidean)

    Returns
    -------
    pd.DataFrame
        Symmetric square matrix labelled by the row index, zero diagonal
    """
    condensed = pdist(data.values.astype(float), metric=metric)
    return pd.DataFrame(squareform(condensed), index=data.index, columns=data.index)


def compute_experiment_distances(normalized: pd.DataFrame, metric: Metric = 'euclidean') -> pd.DataFrame:
    """Distances between replicates, each described by its values over all proteins."""
    return compute_distance_matrix(normalized.T, metric=metric)


def compute_protein_distances(normalized: pd.DataFrame, metric: Metric = 'euclidean') -> pd.DataFrame:
    """Distances between proteins, each described by its values over all replicates."""
    return compute_distance_matrix(normalized, metric=metric)


# =============================================================================
# CLUSTERING
# =============================================================================

def cluster_distance_matrix(
    distance_matrix: pd.DataFrame,
    method: str = 'ward',
    optimal_ordering: bool = False,
) -> ClusterTree:
    """
    Agglomerative hierarchical clustering of a square distance matrix.

    Parameters
    ----------
    distance_matrix : pd.DataFrame
        Symmetric distance matrix with zero diagonal
    method : str
        Linkage criterion ('ward', 'average', 'complete', ...)
    optimal_ordering : bool
        Passed through to scipy's linkage

    Returns
    -------
    ClusterTree
        Linkage matrix (N-1 merges) and the dendrogram leaf order
    """
    if distance_matrix.shape[0] < 2:
        raise ValueError(
            f"At least 2 entities are needed for clustering, got {distance_matrix.shape[0]}"
        )

    finite = np.isfinite(distance_matrix.values)
    if not finite.all():
        bad_rows = distance_matrix.index[~finite.all(axis=1)].tolist()
        raise ValueError(
            f"Distance matrix has non-finite values for {len(bad_rows)} entities: "
            f"{bad_rows[:5]}{'...' if len(bad_rows) > 5 else ''}. "
            "NaN z-scores come from constant rows kept by the 'propagate' "
            "zero_variance policy; use 'drop' or 'raise' before clustering."
        )

    condensed = squareform(distance_matrix.values, checks=True)
    linkage_matrix = linkage(condensed, method=method, optimal_ordering=optimal_ordering)

    dendro = dendrogram(linkage_matrix, no_plot=True)
    leaf_order = [int(i) for i in dendro['leaves']]

    return ClusterTree(
        labels=[str(label) for label in distance_matrix.index],
        linkage_matrix=linkage_matrix,
        leaf_order=leaf_order,
    )


def run_hierarchical_clustering(
    normalized: pd.DataFrame, config: ClusteringConfig = None
) -> ClusteringResult:
    """
    Cluster both axes of a normalized table.

    Parameters
    ----------
    normalized : pd.DataFrame
        Row-normalized table, proteins as rows and replicates as columns
    config : ClusteringConfig, optional
        Uses defaults (Euclidean, Ward) if not provided

    Returns
    -------
    ClusteringResult
    """
    if config is None:
        config = ClusteringConfig()

    print("=== HIERARCHICAL CLUSTERING ===")
    print(f"Metric: {config.distance_metric}, linkage: {config.linkage_method}")

    undefined = normalized.index[normalized.isna().any(axis=1)].tolist()
    if undefined:
        raise ValueError(
            f"{len(undefined)} proteins have undefined z-scores and cannot be clustered: "
            f"{undefined[:5]}{'...' if len(undefined) > 5 else ''}. "
            "These are constant rows kept by the 'propagate' zero_variance policy; "
            "use 'drop' to remove them before clustering."
        )

    experiment_distances = compute_experiment_distances(normalized, metric=config.distance_metric)
    protein_distances = compute_protein_distances(normalized, metric=config.distance_metric)

    experiment_tree = cluster_distance_matrix(
        experiment_distances, method=config.linkage_method,
        optimal_ordering=config.optimal_ordering,
    )
    print(f"✓ Clustered {experiment_tree.n_leaves} experiments: {experiment_tree.ordered_labels}")

    protein_tree = cluster_distance_matrix(
        protein_distances, method=config.linkage_method,
        optimal_ordering=config.optimal_ordering,
    )
    print(f"✓ Clustered {protein_tree.n_leaves} proteins")

    return ClusteringResult(
        experiment_distances=experiment_distances,
        protein_distances=protein_distances,
        experiment_tree=experiment_tree,
        protein_tree=protein_tree,
    )
