"""
Example clustered heatmap analysis.

Edit the configuration block and run:  python example_analysis.py
Set DATA_URL to fetch the table from a remote location; the file is only
downloaded when DATA_FILE does not exist yet.
"""

import heatmap_toolkit as htk

# =============================================================================
# CONFIGURATION
# =============================================================================
DATA_URL = None
DATA_FILE = 'example_data/protein_expression_example.csv'
OUTPUT_DIR = 'results'
OUTPUT_PREFIX = 'example_heatmap'

config = htk.AnalysisConfig(
    data_url=DATA_URL,
    data_file=DATA_FILE,
    output_dir=OUTPUT_DIR,
    output_prefix=OUTPUT_PREFIX,
    zero_variance_policy='raise',
    clustering=htk.ClusteringConfig(distance_metric='euclidean', linkage_method='ward'),
    heatmap=htk.HeatmapConfig(n_colors=25, colors=('blue', 'white', 'red'), figsize=(7, 8)),
)

if __name__ == '__main__':
    results = htk.run_heatmap_analysis(config)

    clustering = results['clustering']
    print("\nExperiment order:", clustering.experiment_tree.ordered_labels)
    print(clustering.experiment_tree.to_merge_table().to_string(index=False))
