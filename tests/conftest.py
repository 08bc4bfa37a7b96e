"""
Pytest configuration and fixtures for heatmap_toolkit tests
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from heatmap_toolkit.data_import import DEFAULT_COLUMN_NAMES


MEASUREMENT_COLUMNS = DEFAULT_COLUMN_NAMES[1:7]


@pytest.fixture
def golden_raw_table():
    """
    4 proteins x (6 replicates + P.Value) with hand-computable z-scores.

    Every row has three low and three high values, so each normalized value
    is +/- sqrt(5/6):
      P1, P2: low in controls, high in treated (identical after scaling)
      P3:     high in controls, low in treated
      P4:     alternating
    """
    data = {
        "Control.1": [0.0, 0.0, 1.0, 0.0],
        "Control.2": [0.0, 0.0, 1.0, 1.0],
        "Control.3": [0.0, 0.0, 1.0, 0.0],
        "Treated.1": [1.0, 2.0, 0.0, 1.0],
        "Treated.2": [1.0, 2.0, 0.0, 0.0],
        "Treated.3": [1.0, 2.0, 0.0, 1.0],
        "P.Value": [0.01, 0.02, 0.03, 0.5],
    }
    df = pd.DataFrame(data, index=pd.Index(["P1", "P2", "P3", "P4"], name="Protein"))
    return df


@pytest.fixture
def synthetic_protein_table():
    """
    Create 40 proteins with a clear control vs treated structure.

    Each protein has its own baseline, a treatment effect of +/-2 and small
    replicate noise, plus a trailing P.Value column.
    """
    np.random.seed(42)
    n_proteins = 40

    baseline = np.random.normal(20, 2, n_proteins)
    effect = np.random.choice([-2.0, 2.0], n_proteins)
    noise = np.random.normal(0, 0.3, (n_proteins, 6))

    values = np.empty((n_proteins, 6))
    values[:, :3] = baseline[:, None]
    values[:, 3:] = (baseline + effect)[:, None]
    values += noise

    df = pd.DataFrame(
        values,
        index=pd.Index([f"P{i:05d}" for i in range(n_proteins)], name="Protein"),
        columns=MEASUREMENT_COLUMNS,
    )
    df["P.Value"] = np.random.uniform(0.001, 0.5, n_proteins)
    return df


@pytest.fixture
def golden_csv_file(golden_raw_table, tmp_path):
    """Write the golden table as an 8-column CSV."""
    path = tmp_path / "golden.csv"
    golden_raw_table.to_csv(path)
    return str(path)


@pytest.fixture
def synthetic_csv_file(synthetic_protein_table, tmp_path):
    """Write the synthetic table as an 8-column CSV."""
    path = tmp_path / "protein_expression.csv"
    synthetic_protein_table.to_csv(path)
    return str(path)


@pytest.fixture
def synthetic_normalized(synthetic_protein_table):
    """Row z-scores of the synthetic measurements (computed directly with pandas)."""
    selected = synthetic_protein_table.iloc[:, :6]
    return selected.sub(selected.mean(axis=1), axis=0).div(selected.std(axis=1, ddof=1), axis=0)
