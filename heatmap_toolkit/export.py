"""
Export Module for Heatmap Analysis Toolkit

This module exports the intermediate tables behind a clustered heatmap
(normalized values, distance matrices, merge sequences, leaf orders) and
writes timestamped configuration files so an analysis can be rerun with the
same settings.
"""

import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from .clustering import ClusteringResult


RULE = "# " + "=" * 77

# Section layout of the exported configuration file
CONFIG_SECTIONS = [
    (1, "INPUT FILES AND PATHS", ["data_url", "data_file", "column_names"]),
    (2, "NORMALIZATION STRATEGY", ["zero_variance_policy"]),
    (3, "CLUSTERING CONFIGURATION", ["distance_metric", "linkage_method", "optimal_ordering"]),
    (
        4,
        "VISUALIZATION SETTINGS",
        [
            "n_colors", "colors", "figsize", "show_dendrograms",
            "interactive", "title", "dpi", "static_format",
        ],
    ),
    (5, "OUTPUT AND EXPORT SETTINGS", ["output_dir", "output_prefix", "export_results", "show_plots"]),
]


def export_analysis_results(
    normalized_data: pd.DataFrame,
    clustering: ClusteringResult,
    output_prefix: str = "heatmap_analysis",
) -> Dict[str, str]:
    """
    Export the normalized table and both clusterings as CSV files.

    Parameters:
    -----------
    normalized_data : pd.DataFrame
        Row z-score normalized table
    clustering : ClusteringResult
        Distance matrices and cluster trees for both axes
    output_prefix : str
        Prefix (optionally including a directory) for output filenames

    Returns:
    --------
    dict
        Dictionary of exported files
    """
    print("Exporting analysis results...")

    prefix_dir = os.path.dirname(output_prefix)
    if prefix_dir:
        os.makedirs(prefix_dir, exist_ok=True)

    exported_files = {}

    normalized_file = f"{output_prefix}_normalized_data.csv"
    normalized_data.to_csv(normalized_file, index_label="Protein")
    exported_files["normalized_data"] = normalized_file

    axes = [
        ("experiment", clustering.experiment_distances, clustering.experiment_tree),
        ("protein", clustering.protein_distances, clustering.protein_tree),
    ]
    for axis_name, distances, tree in axes:
        distance_file = f"{output_prefix}_{axis_name}_distances.csv"
        distances.to_csv(distance_file)
        exported_files[f"{axis_name}_distances"] = distance_file

        merge_file = f"{output_prefix}_{axis_name}_merges.csv"
        tree.to_merge_table().to_csv(merge_file, index=False)
        exported_files[f"{axis_name}_merges"] = merge_file

    leaf_order_file = f"{output_prefix}_leaf_order.csv"
    _leaf_order_table(clustering).to_csv(leaf_order_file, index=False)
    exported_files["leaf_order"] = leaf_order_file

    print(f"✓ Exported {len(exported_files)} files with prefix '{output_prefix}'")
    return exported_files


def _leaf_order_table(clustering: ClusteringResult) -> pd.DataFrame:
    """Long-format table of heatmap positions for both axes."""
    rows = []
    for axis_name, tree in [("experiment", clustering.experiment_tree),
                            ("protein", clustering.protein_tree)]:
        for position, label in enumerate(tree.ordered_labels):
            rows.append({"axis": axis_name, "position": position, "label": label})
    return pd.DataFrame(rows)


def export_timestamped_config(
    config_dict: Dict[str, Any],
    output_prefix: str = "heatmap_analysis",
    analysis_description: str = "Clustered heatmap analysis",
    computed_values: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Export analysis configuration as a timestamped Python file.

    Parameters:
    -----------
    config_dict : dict
        Dictionary containing all configuration parameters
    output_prefix : str
        Prefix for the configuration filename
    analysis_description : str
        Description of the analysis type
    computed_values : dict, optional
        Additional computed values to include as comments

    Returns:
    --------
    str
        Path to the exported configuration file
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    config_file = f"{output_prefix}_config_{timestamp}.py"

    print(f"Exporting analysis configuration to: {config_file}")

    lines = [
        RULE,
        "# CLUSTERED HEATMAP ANALYSIS CONFIGURATION",
        f"# Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"# Analysis: {analysis_description}",
        RULE,
        "",
    ]
    for section_number, section_name, param_names in CONFIG_SECTIONS:
        lines.extend(_config_section_lines(section_number, section_name, config_dict, param_names))

    if computed_values:
        lines.extend([RULE, "# COMPUTED VALUES (for reference)", RULE])
        lines.extend(f"# {key}: {value}" for key, value in computed_values.items())

    with open(config_file, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")

    return config_file


def _config_section_lines(
    section_number: int,
    section_name: str,
    config_dict: Dict[str, Any],
    param_names: List[str],
) -> List[str]:
    """Header and ``name = value`` lines for one config section; absent params are skipped."""
    lines = [RULE, f"# {section_number}. {section_name}", RULE]
    lines.extend(
        f"{param} = {config_dict[param]!r}" for param in param_names if param in config_dict
    )
    lines.append("")
    return lines


def _print_export_summary(exported_files: Dict[str, str]) -> None:
    """Print a summary of exported files."""

    descriptions = {
        "normalized_data": "Row z-score normalized protein table",
        "experiment_distances": "Experiment distance matrix",
        "experiment_merges": "Experiment merge sequence",
        "protein_distances": "Protein distance matrix",
        "protein_merges": "Protein merge sequence",
        "leaf_order": "Heatmap row/column order",
        "static_heatmap": "Clustered heatmap image",
        "interactive_heatmap": "Interactive heatmap (HTML)",
        "configuration": "Python configuration (timestamped)",
    }

    print("\n" + "=" * 60)
    print("✓ All analysis results exported successfully!")
    print("Files created:")
    for key, path in exported_files.items():
        print(f"  • {path} - {descriptions.get(key, key)}")
    print("=" * 60)

    if "configuration" in exported_files:
        print("\nREPRODUCIBILITY TIP:")
        print(f"Load the settings with: exec(open('{exported_files['configuration']}').read())")
