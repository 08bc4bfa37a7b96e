"""
Normalization Module for Heatmap Analysis Toolkit

Row-wise z-score standardization so that each protein is displayed relative to
its own mean across the replicates.
"""

import warnings

import pandas as pd

from .validation import ZeroVarianceError, find_zero_variance_rows


ZERO_VARIANCE_POLICIES = ("raise", "drop", "propagate")


def zscore_normalize_rows(
    data: pd.DataFrame, zero_variance: str = "raise"
) -> pd.DataFrame:
    """
    Standardize each protein (row) to mean 0 and sample standard deviation 1.

    The table is transposed so that proteins become columns, each column is
    centred on its mean and divided by its sample standard deviation (ddof=1),
    and the result is transposed back.

    Parameters:
    -----------
    data : pd.DataFrame
        Measurement table, proteins as rows and replicates as columns
    zero_variance : str, default "raise"
        How to treat constant rows, which have no defined z-score:
        - "raise": raise ZeroVarianceError naming the proteins
        - "drop": remove them with a warning
        - "propagate": keep them; their values become NaN

    Returns:
    --------
    pd.DataFrame : Normalized table with the same labels as the input
    """
    if zero_variance not in ZERO_VARIANCE_POLICIES:
        raise ValueError(
            f"Unknown zero_variance policy '{zero_variance}'. "
            f"Choose from {list(ZERO_VARIANCE_POLICIES)}"
        )

    constant_rows = find_zero_variance_rows(data)
    if constant_rows:
        message = (
            f"{len(constant_rows)} proteins have zero variance across replicates: "
            f"{constant_rows[:5]}{'...' if len(constant_rows) > 5 else ''}"
        )
        if zero_variance == "raise":
            raise ZeroVarianceError(message)
        elif zero_variance == "drop":
            warnings.warn(f"{message}. Dropping them before normalization.")
            data = data.drop(index=constant_rows)
        else:
            warnings.warn(f"{message}. Their normalized values will be NaN.")

    transposed = data.T
    standardized = (transposed - transposed.mean()) / transposed.std(ddof=1)
    normalized = standardized.T

    print(f"✓ Z-score normalized {normalized.shape[0]} proteins across {normalized.shape[1]} replicates")
    return normalized


def calculate_normalization_stats(normalized: pd.DataFrame) -> pd.DataFrame:
    """Per-protein mean and sample standard deviation after normalization."""
    return pd.DataFrame(
        {
            "mean": normalized.mean(axis=1),
            "std": normalized.std(axis=1, ddof=1),
        }
    )
