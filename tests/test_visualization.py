"""
Tests for visualization functions: colour scale, static clustermap and
interactive plotly heatmap.
"""

from unittest.mock import patch

import matplotlib.pyplot as plt
import numpy as np
import plotly.graph_objs as go
import pytest

from heatmap_toolkit.clustering import run_hierarchical_clustering
from heatmap_toolkit.visualization import (
    HeatmapConfig,
    build_interactive_heatmap,
    colormap_to_plotly_scale,
    create_diverging_colormap,
    plot_clustered_heatmap,
    plot_interactive_heatmap,
)


@pytest.fixture
def clustering(synthetic_normalized):
    return run_hierarchical_clustering(synthetic_normalized)


class TestDivergingColormap:
    """Test the blue-white-red colour scale"""

    def test_default_has_25_bins(self):
        cmap = create_diverging_colormap()
        assert cmap.N == 25

    def test_endpoints_and_midpoint(self):
        cmap = create_diverging_colormap(25)
        np.testing.assert_allclose(cmap(0)[:3], (0.0, 0.0, 1.0), atol=1e-6)
        np.testing.assert_allclose(cmap(12)[:3], (1.0, 1.0, 1.0), atol=1e-6)
        np.testing.assert_allclose(cmap(24)[:3], (1.0, 0.0, 0.0), atol=1e-6)

    def test_custom_colors(self):
        cmap = create_diverging_colormap(5, colors=("green", "black", "magenta"))
        assert cmap.N == 5
        np.testing.assert_allclose(cmap(2)[:3], (0.0, 0.0, 0.0), atol=1e-6)

    def test_too_few_bins(self):
        with pytest.raises(ValueError):
            create_diverging_colormap(1)

    def test_plotly_scale_is_stepped(self):
        scale = colormap_to_plotly_scale(create_diverging_colormap(25))

        assert len(scale) == 50
        assert scale[0] == [0.0, "#0000ff"]
        assert scale[-1] == [1.0, "#ff0000"]
        positions = [position for position, _ in scale]
        assert positions == sorted(positions)


class TestHeatmapConfig:

    def test_defaults(self):
        config = HeatmapConfig()
        assert config.n_colors == 25
        assert config.colors == ('blue', 'white', 'red')
        assert config.show_dendrograms is True
        assert config.interactive is True


class TestStaticHeatmap:
    """Test the seaborn clustermap rendering"""

    def test_uses_precomputed_leaf_order(self, synthetic_normalized, clustering):
        with patch('matplotlib.pyplot.show'):
            g = plot_clustered_heatmap(synthetic_normalized, clustering, show=False)

        assert g.dendrogram_row.reordered_ind == clustering.protein_tree.leaf_order
        assert g.dendrogram_col.reordered_ind == clustering.experiment_tree.leaf_order
        assert list(g.data2d.columns) == clustering.experiment_tree.ordered_labels
        plt.close('all')

    def test_saves_file(self, synthetic_normalized, clustering, tmp_path):
        output_file = tmp_path / "heatmap.png"
        g = plot_clustered_heatmap(
            synthetic_normalized, clustering, output_file=str(output_file), show=False
        )
        assert output_file.exists()
        assert output_file.stat().st_size > 0
        plt.close(g.figure)

    def test_without_dendrograms(self, synthetic_normalized, clustering):
        config = HeatmapConfig(show_dendrograms=False)
        g = plot_clustered_heatmap(synthetic_normalized, clustering, config, show=False)
        assert not g.ax_row_dendrogram.get_visible()
        assert not g.ax_col_dendrogram.get_visible()
        plt.close(g.figure)

    def test_show_is_called(self, synthetic_normalized, clustering):
        with patch('matplotlib.pyplot.show') as mock_show:
            plot_clustered_heatmap(synthetic_normalized, clustering, show=True)
        mock_show.assert_called_once()
        plt.close('all')


class TestInteractiveHeatmap:
    """Test the plotly heatmap"""

    @staticmethod
    def _heatmap_trace(fig):
        heatmaps = [trace for trace in fig.data if isinstance(trace, go.Heatmap)]
        assert len(heatmaps) == 1
        return heatmaps[0]

    def test_values_in_leaf_order(self, synthetic_normalized, clustering):
        fig = build_interactive_heatmap(synthetic_normalized, clustering)
        heat = self._heatmap_trace(fig)

        expected = synthetic_normalized.loc[
            clustering.protein_tree.ordered_labels,
            clustering.experiment_tree.ordered_labels,
        ].values
        np.testing.assert_allclose(np.asarray(heat.z, dtype=float), expected)

    def test_axis_labels_follow_clustering(self, synthetic_normalized, clustering):
        fig = build_interactive_heatmap(synthetic_normalized, clustering)
        heat = self._heatmap_trace(fig)

        xaxis = fig.layout[heat.xaxis.replace('x', 'xaxis')]
        yaxis = fig.layout[heat.yaxis.replace('y', 'yaxis')]
        assert list(xaxis.ticktext) == clustering.experiment_tree.ordered_labels
        assert list(yaxis.ticktext) == clustering.protein_tree.ordered_labels

    def test_dendrogram_traces(self, synthetic_normalized, clustering):
        fig = build_interactive_heatmap(synthetic_normalized, clustering)
        lines = [trace for trace in fig.data if isinstance(trace, go.Scatter)]
        # One U-shaped line per merge on each axis
        assert len(lines) == 5 + 39

    def test_without_dendrograms(self, synthetic_normalized, clustering):
        config = HeatmapConfig(show_dendrograms=False)
        fig = build_interactive_heatmap(synthetic_normalized, clustering, config)

        assert len(fig.data) == 1
        assert list(fig.layout.xaxis.ticktext) == clustering.experiment_tree.ordered_labels

    def test_hover_text(self, synthetic_normalized, clustering):
        fig = build_interactive_heatmap(synthetic_normalized, clustering)
        heat = self._heatmap_trace(fig)

        first_protein = clustering.protein_tree.ordered_labels[0]
        first_experiment = clustering.experiment_tree.ordered_labels[0]
        assert f"Protein: {first_protein}" in heat.text[0][0]
        assert f"Experiment: {first_experiment}" in heat.text[0][0]

    def test_colour_range_is_symmetric(self, synthetic_normalized, clustering):
        heat = self._heatmap_trace(build_interactive_heatmap(synthetic_normalized, clustering))
        assert heat.zmin == -heat.zmax
        assert heat.zmax == pytest.approx(np.abs(synthetic_normalized.values).max())

    def test_writes_html(self, synthetic_normalized, clustering, tmp_path):
        output_file = tmp_path / "heatmap.html"
        plot_interactive_heatmap(synthetic_normalized, clustering, output_file=str(output_file))

        html = output_file.read_text(encoding="utf-8")
        assert "<html>" in html
        assert "plotly" in html.lower()
