"""
Clustered Heatmap Analysis Pipeline

Runs the full procedure in order:

    acquire -> load & rename -> select -> normalize -> distance -> cluster -> render

Each step is a plain function in its own module; this module only wires them
together, records the configuration and collects every intermediate result.
"""

import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import matplotlib.pyplot as plt

from .clustering import ClusteringConfig, run_hierarchical_clustering
from .data_import import (
    DEFAULT_COLUMN_NAMES,
    download_dataset,
    load_protein_table,
    select_measurement_columns,
)
from .export import (
    _print_export_summary,
    export_analysis_results,
    export_timestamped_config,
)
from .normalization import zscore_normalize_rows
from .validation import check_normalized_rows
from .visualization import (
    HeatmapConfig,
    plot_clustered_heatmap,
    plot_interactive_heatmap,
)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class AnalysisConfig:
    """Configuration for a complete clustered heatmap analysis.

    If `data_url` is set the file is downloaded to `data_file` when it is not
    already there; otherwise `data_file` must exist.
    """

    # Input
    data_file: str = 'data/protein_expression.csv'
    data_url: Optional[str] = None
    column_names: List[str] = field(default_factory=lambda: list(DEFAULT_COLUMN_NAMES))

    # Normalization
    zero_variance_policy: str = 'raise'  # 'raise', 'drop' or 'propagate'

    # Output
    output_dir: str = 'results'
    output_prefix: str = 'heatmap_analysis'
    static_format: str = 'png'
    export_results: bool = True
    show_plots: bool = False

    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    heatmap: HeatmapConfig = field(default_factory=HeatmapConfig)

    @property
    def prefix_path(self) -> str:
        return os.path.join(self.output_dir, self.output_prefix)


def config_to_dict(config: AnalysisConfig) -> Dict[str, Any]:
    """Flatten an AnalysisConfig (including nested configs) to one level."""
    flat = asdict(config)
    flat.update(flat.pop('clustering'))
    flat.update(flat.pop('heatmap'))
    return flat


# =============================================================================
# PIPELINE
# =============================================================================

def run_heatmap_analysis(config: Optional[AnalysisConfig] = None) -> Dict[str, Any]:
    """
    Run the complete clustered heatmap analysis.

    Parameters
    ----------
    config : AnalysisConfig, optional
        Analysis settings. Uses defaults if not provided.

    Returns
    -------
    results : dict
        Dictionary with the raw, selected and normalized tables, the
        normalization check, the clustering result, figures and the paths
        of every file written
    """
    if config is None:
        config = AnalysisConfig()

    print("=" * 80)
    print("CLUSTERED HEATMAP ANALYSIS", flush=True)
    print("=" * 80, flush=True)

    results: Dict[str, Any] = {}
    output_files: Dict[str, str] = {}

    # 1. Acquire
    if config.data_url:
        print("\n1. Acquiring data file...", flush=True)
        download_dataset(config.data_url, config.data_file)
    else:
        print(f"\n1. Using local data file {config.data_file}", flush=True)

    # 2. Load & rename
    print("\n2. Loading protein table...", flush=True)
    raw_table = load_protein_table(config.data_file, column_names=config.column_names)
    results['raw_table'] = raw_table

    # 3. Select
    print("\n3. Selecting replicate measurement columns...", flush=True)
    n_measurements = len(config.column_names) - 2
    selected = select_measurement_columns(raw_table, n_measurements=n_measurements)
    print(f"   Measurement columns: {list(selected.columns)}", flush=True)
    results['selected_table'] = selected

    # 4. Normalize
    print("\n4. Normalizing proteins (row z-score)...", flush=True)
    normalized = zscore_normalize_rows(selected, zero_variance=config.zero_variance_policy)
    results['normalized_table'] = normalized
    results['normalization_check'] = check_normalized_rows(normalized)

    # 5-6. Distance and cluster
    print("\n5. Computing distances and clustering...", flush=True)
    clustering = run_hierarchical_clustering(normalized, config.clustering)
    results['clustering'] = clustering
    print(f"   Experiment merge heights monotonic: {clustering.experiment_tree.is_monotonic()}", flush=True)
    print(f"   Protein merge heights monotonic: {clustering.protein_tree.is_monotonic()}", flush=True)

    # 7. Render
    print("\n6. Rendering heatmaps...", flush=True)
    os.makedirs(config.output_dir, exist_ok=True)
    static_file = f"{config.prefix_path}_heatmap.{config.static_format}"
    results['clustermap'] = plot_clustered_heatmap(
        normalized, clustering, config.heatmap,
        output_file=static_file, show=config.show_plots,
    )
    output_files['static_heatmap'] = static_file

    if config.heatmap.interactive:
        html_file = f"{config.prefix_path}_heatmap.html"
        results['interactive_figure'] = plot_interactive_heatmap(
            normalized, clustering, config.heatmap, output_file=html_file,
        )
        output_files['interactive_heatmap'] = html_file

    # 8. Export
    if config.export_results:
        print(f"\n7. Exporting results to {config.prefix_path}...", flush=True)
        output_files.update(
            export_analysis_results(normalized, clustering, output_prefix=config.prefix_path)
        )
        output_files['configuration'] = export_timestamped_config(
            config_to_dict(config),
            output_prefix=config.prefix_path,
            computed_values={
                'Proteins clustered': normalized.shape[0],
                'Experiment leaf order': clustering.experiment_tree.ordered_labels,
            },
        )
        _print_export_summary(output_files)

    results['output_files'] = output_files

    print("\n" + "=" * 80, flush=True)
    print(" Clustered heatmap analysis complete", flush=True)
    print("=" * 80, flush=True)

    # Figures stay available through the results dict
    plt.close('all')

    return results
