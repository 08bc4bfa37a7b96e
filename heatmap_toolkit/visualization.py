"""
Visualization Module for Heatmap Analysis Toolkit

Static and interactive two-way clustered heatmaps of the normalized protein
table. Rows and columns are permuted by the protein and experiment cluster
trees, and values are coloured on a discrete blue-white-red diverging scale
centred on each protein's own mean (z = 0).
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import plotly.graph_objs as go
import seaborn as sns
from matplotlib.colors import LinearSegmentedColormap, ListedColormap, to_hex
from plotly.subplots import make_subplots
from scipy.cluster.hierarchy import dendrogram

from .clustering import ClusteringResult


# SciPy dendrogram coordinates place leaf i at 5 + 10 * i
_LEAF_SPACING = 10


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class HeatmapConfig:
    """Configuration for heatmap rendering.

    Attributes
    ----------
    n_colors : int
        Number of discrete bins in the diverging colour scale
    colors : tuple of str
        Low, middle and high colours of the scale
    figsize : tuple
        Static figure size in inches
    show_dendrograms : bool
        Draw the cluster trees alongside the heatmap
    interactive : bool
        Also build the interactive HTML heatmap
    """

    n_colors: int = 25
    colors: Tuple[str, str, str] = ('blue', 'white', 'red')
    figsize: Tuple[int, int] = (8, 10)
    show_dendrograms: bool = True
    interactive: bool = True
    title: str = 'Clustered protein expression (row z-score)'
    dpi: int = 150
    interactive_width: int = 800
    interactive_height: int = 900


# =============================================================================
# COLOUR SCALE
# =============================================================================

def create_diverging_colormap(
    n_colors: int = 25, colors: Sequence[str] = ('blue', 'white', 'red')
) -> ListedColormap:
    """
    Discrete diverging colormap interpolated through `colors`.

    Parameters
    ----------
    n_colors : int
        Number of bins
    colors : sequence of str
        Anchor colours, evenly spaced from low to high

    Returns
    -------
    ListedColormap with exactly `n_colors` entries
    """
    if n_colors < 2:
        raise ValueError(f"n_colors must be at least 2, got {n_colors}")
    ramp = LinearSegmentedColormap.from_list('diverging_ramp', list(colors), N=n_colors)
    return ListedColormap(ramp(np.arange(n_colors)), name='diverging')


def colormap_to_plotly_scale(cmap: ListedColormap) -> List[List]:
    """Convert a discrete colormap to a stepped plotly colorscale."""
    n = cmap.N
    scale = []
    for i in range(n):
        color = to_hex(cmap(i))
        scale.append([i / n, color])
        scale.append([(i + 1) / n, color])
    return scale


def _symmetric_limit(values: np.ndarray) -> float:
    """Largest absolute finite value, so 0 maps to the middle colour."""
    finite = np.abs(values[np.isfinite(values)])
    return float(finite.max()) if finite.size else 1.0


# =============================================================================
# STATIC HEATMAP
# =============================================================================

def plot_clustered_heatmap(
    normalized: pd.DataFrame,
    clustering: ClusteringResult,
    config: Optional[HeatmapConfig] = None,
    output_file: Optional[str] = None,
    show: bool = True,
):
    """
    Two-way clustered heatmap with dendrograms using seaborn's clustermap.

    The precomputed protein (row) and experiment (column) linkages are passed
    straight through so the drawing uses exactly the clustering computed by
    the clustering module.

    Parameters
    ----------
    normalized : pd.DataFrame
        Row z-score normalized table
    clustering : ClusteringResult
        Output of run_hierarchical_clustering()
    config : HeatmapConfig, optional
        Rendering options
    output_file : str, optional
        Save the figure here (format from the extension)
    show : bool
        Call plt.show() after drawing

    Returns
    -------
    seaborn.matrix.ClusterGrid
    """
    if config is None:
        config = HeatmapConfig()

    cmap = create_diverging_colormap(config.n_colors, config.colors)
    limit = _symmetric_limit(normalized.values)

    g = sns.clustermap(
        normalized,
        row_linkage=clustering.protein_tree.linkage_matrix,
        col_linkage=clustering.experiment_tree.linkage_matrix,
        cmap=cmap,
        vmin=-limit,
        vmax=limit,
        figsize=config.figsize,
        linewidths=0.0,
        yticklabels=normalized.shape[0] <= 60,
        dendrogram_ratio=(0.2, 0.15) if config.show_dendrograms else (0.01, 0.01),
        cbar_kws={"label": "Row z-score"},
    )

    if not config.show_dendrograms:
        g.ax_row_dendrogram.set_visible(False)
        g.ax_col_dendrogram.set_visible(False)

    g.ax_heatmap.set_xlabel("Experiment")
    g.ax_heatmap.set_ylabel("Protein")
    g.figure.suptitle(config.title, fontsize=12, fontweight="bold", y=1.02)

    if output_file:
        g.savefig(output_file, dpi=config.dpi, bbox_inches="tight")
        print(f"✓ Saved clustered heatmap to {output_file}")

    if show:
        plt.show()

    return g


# =============================================================================
# INTERACTIVE HEATMAP
# =============================================================================

def _dendrogram_traces(linkage_matrix: np.ndarray, orientation: str) -> List[go.Scatter]:
    """Line traces for a dendrogram drawn above ('top') or left of ('left') the heatmap."""
    dendro = dendrogram(linkage_matrix, no_plot=True)
    traces = []
    for icoord, dcoord in zip(dendro['icoord'], dendro['dcoord']):
        if orientation == 'top':
            x, y = icoord, dcoord
        else:
            x, y = [-d for d in dcoord], icoord
        traces.append(go.Scatter(
            x=x, y=y, mode='lines',
            line=dict(color='#444444', width=1),
            hoverinfo='skip', showlegend=False,
        ))
    return traces


def build_interactive_heatmap(
    normalized: pd.DataFrame,
    clustering: ClusteringResult,
    config: Optional[HeatmapConfig] = None,
) -> go.Figure:
    """
    Build a plotly clustered heatmap with optional dendrograms.

    Proteins are drawn bottom to top and experiments left to right in leaf
    order. Hovering a cell shows the protein, experiment and z-score.
    """
    if config is None:
        config = HeatmapConfig()

    row_labels = clustering.protein_tree.ordered_labels
    col_labels = clustering.experiment_tree.ordered_labels
    ordered = normalized.copy()
    ordered.index = ordered.index.astype(str)
    ordered.columns = ordered.columns.astype(str)
    ordered = ordered.loc[row_labels, col_labels]

    x_pos = [_LEAF_SPACING / 2 + _LEAF_SPACING * i for i in range(len(col_labels))]
    y_pos = [_LEAF_SPACING / 2 + _LEAF_SPACING * i for i in range(len(row_labels))]

    values = ordered.values.astype(float)
    hover_text = [
        [f"Protein: {protein}<br>Experiment: {experiment}<br>z-score: {value:.3f}"
         for experiment, value in zip(col_labels, row)]
        for protein, row in zip(row_labels, values)
    ]

    cmap = create_diverging_colormap(config.n_colors, config.colors)
    limit = _symmetric_limit(values)

    heatmap = go.Heatmap(
        z=values,
        x=x_pos,
        y=y_pos,
        text=hover_text,
        hoverinfo='text',
        colorscale=colormap_to_plotly_scale(cmap),
        zmin=-limit,
        zmax=limit,
        colorbar=dict(title='Row z-score'),
    )

    if config.show_dendrograms:
        fig = make_subplots(
            rows=2, cols=2,
            column_widths=[0.2, 0.8],
            row_heights=[0.15, 0.85],
            horizontal_spacing=0.005,
            vertical_spacing=0.005,
            specs=[[None, {}], [{}, {}]],
        )
        for trace in _dendrogram_traces(clustering.experiment_tree.linkage_matrix, 'top'):
            fig.add_trace(trace, row=1, col=2)
        for trace in _dendrogram_traces(clustering.protein_tree.linkage_matrix, 'left'):
            fig.add_trace(trace, row=2, col=1)
        fig.add_trace(heatmap, row=2, col=2)

        x_range = [0, _LEAF_SPACING * len(col_labels)]
        y_range = [0, _LEAF_SPACING * len(row_labels)]
        fig.update_xaxes(range=x_range, showticklabels=False, showgrid=False, zeroline=False, row=1, col=2)
        fig.update_yaxes(showticklabels=False, showgrid=False, zeroline=False, row=1, col=2)
        fig.update_xaxes(showticklabels=False, showgrid=False, zeroline=False, row=2, col=1)
        fig.update_yaxes(range=y_range, showticklabels=False, showgrid=False, zeroline=False, row=2, col=1)
        heatmap_cell = dict(row=2, col=2)
    else:
        fig = go.Figure(data=[heatmap])
        x_range = [0, _LEAF_SPACING * len(col_labels)]
        y_range = [0, _LEAF_SPACING * len(row_labels)]
        heatmap_cell = {}

    fig.update_xaxes(range=x_range, tickvals=x_pos, ticktext=col_labels,
                     title_text='Experiment', **heatmap_cell)
    fig.update_yaxes(range=y_range, tickvals=y_pos, ticktext=row_labels, side='right',
                     showticklabels=len(row_labels) <= 60, **heatmap_cell)

    fig.update_layout(
        title=config.title,
        width=config.interactive_width,
        height=config.interactive_height,
        plot_bgcolor='white',
        showlegend=False,
    )
    return fig


def plot_interactive_heatmap(
    normalized: pd.DataFrame,
    clustering: ClusteringResult,
    config: Optional[HeatmapConfig] = None,
    output_file: Optional[str] = None,
) -> go.Figure:
    """
    Build the interactive heatmap and optionally write it as standalone HTML.

    The HTML embeds plotly.js so it opens offline.
    """
    fig = build_interactive_heatmap(normalized, clustering, config)
    if output_file:
        fig.write_html(output_file, include_plotlyjs=True, full_html=True)
        print(f"✓ Saved interactive heatmap to {output_file}")
    return fig
