"""
Heatmap Analysis Toolkit
========================

A small Python library for turning a protein expression table (control and
treated replicates) into a two-way hierarchically clustered heatmap. The
workflow standardizes every protein across its replicates, clusters both the
experiments and the proteins with Ward linkage on Euclidean distances, and
renders the result as a static image and an interactive HTML page.

QUICK START EXAMPLE:
-------------------
    import heatmap_toolkit as htk

    # 1. Load data (fixed column schema: identifier, 6 replicates, statistic)
    table = htk.load_protein_table('protein_expression.csv')

    # 2. Select and normalize
    selected = htk.select_measurement_columns(table)
    normalized = htk.zscore_normalize_rows(selected)

    # 3. Cluster experiments and proteins
    clustering = htk.run_hierarchical_clustering(normalized)

    # 4. Render
    htk.plot_clustered_heatmap(normalized, clustering, output_file='heatmap.png')
    htk.plot_interactive_heatmap(normalized, clustering, output_file='heatmap.html')

    # Or everything at once
    results = htk.run_heatmap_analysis(htk.AnalysisConfig(data_file='protein_expression.csv'))

MODULE OVERVIEW:
===============

data_import
    Purpose: Download the CSV, load it with the fixed column names, select measurements
    Key functions: download_dataset(), load_protein_table(), select_measurement_columns()

normalization
    Purpose: Row-wise z-score standardization
    Key functions: zscore_normalize_rows(), calculate_normalization_stats()

clustering
    Purpose: Distance matrices and Ward hierarchical clustering for both axes
    Key functions: compute_distance_matrix(), cluster_distance_matrix(), run_hierarchical_clustering()

visualization
    Purpose: Diverging colour scale, static clustermap, interactive plotly heatmap
    Key functions: create_diverging_colormap(), plot_clustered_heatmap(), plot_interactive_heatmap()

validation
    Purpose: Column schema, identifier and zero-variance checks; normalization sanity check
    Key functions: validate_column_schema(), find_zero_variance_rows(), check_normalized_rows()

export
    Purpose: Export intermediate tables and timestamped configuration files
    Key functions: export_analysis_results(), export_timestamped_config()

pipeline
    Purpose: Run every stage in order from one configuration object
    Key functions: run_heatmap_analysis(), AnalysisConfig()

ERROR HANDLING:
==============
- ColumnSchemaError: The CSV does not have exactly the expected columns
- DuplicateIdentifierError: A protein identifier appears more than once
- ZeroVarianceError: A protein is constant across replicates and cannot be z-scored
"""

from . import data_import         # Data acquisition and loading
from . import normalization       # Row z-score normalization
from . import clustering          # Distances and hierarchical clustering
from . import visualization       # Static and interactive heatmaps
from . import validation          # Data validation and error checking
from . import export              # Results export and configuration management
from . import pipeline            # End-to-end analysis

__version__ = "1.0.0"

from .data_import import (
    DEFAULT_COLUMN_NAMES,
    download_dataset,
    load_protein_table,
    select_measurement_columns,
)

from .normalization import (
    zscore_normalize_rows,
    calculate_normalization_stats,
)

from .clustering import (
    ClusteringConfig,
    ClusterTree,
    ClusteringResult,
    compute_distance_matrix,
    compute_experiment_distances,
    compute_protein_distances,
    cluster_distance_matrix,
    run_hierarchical_clustering,
)

from .validation import (
    validate_column_schema,
    find_zero_variance_rows,
    check_normalized_rows,
    ColumnSchemaError,
    DuplicateIdentifierError,
    ZeroVarianceError,
)

from .visualization import (
    HeatmapConfig,
    create_diverging_colormap,
    plot_clustered_heatmap,
    build_interactive_heatmap,
    plot_interactive_heatmap,
)

from .export import (
    export_analysis_results,
    export_timestamped_config,
)

from .pipeline import (
    AnalysisConfig,
    config_to_dict,
    run_heatmap_analysis,
)

__all__ = [
    # MODULES
    "data_import",
    "normalization",
    "clustering",
    "visualization",
    "validation",
    "export",
    "pipeline",

    # DATA LOADING
    "DEFAULT_COLUMN_NAMES",
    "download_dataset",
    "load_protein_table",
    "select_measurement_columns",

    # NORMALIZATION
    "zscore_normalize_rows",
    "calculate_normalization_stats",

    # CLUSTERING
    "ClusteringConfig",
    "ClusterTree",
    "ClusteringResult",
    "compute_distance_matrix",
    "compute_experiment_distances",
    "compute_protein_distances",
    "cluster_distance_matrix",
    "run_hierarchical_clustering",

    # VALIDATION
    "validate_column_schema",
    "find_zero_variance_rows",
    "check_normalized_rows",
    "ColumnSchemaError",
    "DuplicateIdentifierError",
    "ZeroVarianceError",

    # VISUALIZATION
    "HeatmapConfig",
    "create_diverging_colormap",
    "plot_clustered_heatmap",
    "build_interactive_heatmap",
    "plot_interactive_heatmap",

    # EXPORT
    "export_analysis_results",
    "export_timestamped_config",

    # PIPELINE
    "AnalysisConfig",
    "config_to_dict",
    "run_heatmap_analysis",
]
