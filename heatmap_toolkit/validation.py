"""
Data Validation Module for Heatmap Analysis Toolkit

Functions for validating the protein table against the expected column schema,
detecting rows that cannot be standardized, and sanity-checking normalized
data. Errors carry interpretable messages so a misaligned input file is caught
before any clustering is done.
"""

import numpy as np
import pandas as pd
from typing import Dict, List, Sequence


class ColumnSchemaError(Exception):
    """Custom exception for input files whose columns don't match the expected names."""
    def __init__(self, message):
        super().__init__(message)


class DuplicateIdentifierError(Exception):
    """Custom exception for protein identifiers that appear more than once."""
    def __init__(self, message):
        super().__init__(message)


class ZeroVarianceError(Exception):
    """Custom exception for proteins with constant measurements (cannot be z-scored)."""
    def __init__(self, message):
        super().__init__(message)


def validate_column_schema(
    columns: Sequence[str], expected_names: Sequence[str], source: str = "input file"
) -> None:
    """
    Check that a table has exactly as many columns as the fixed name list.

    Columns are renamed by position, so a count mismatch would silently shift
    every measurement into the wrong replicate.

    Raises:
    -------
    ColumnSchemaError: If the column count differs from len(expected_names)
    """
    n_found = len(columns)
    n_expected = len(expected_names)
    if n_found != n_expected:
        raise ColumnSchemaError(
            f"Column count mismatch in {source}: found {n_found} columns "
            f"{list(columns)}, expected {n_expected} columns "
            f"{list(expected_names)}. Check that the file contains one identifier "
            f"column, the replicate measurements and the trailing statistic column."
        )


def validate_unique_identifiers(index: pd.Index) -> None:
    """Raise DuplicateIdentifierError if any protein identifier is repeated."""
    duplicated = index[index.duplicated()].unique().tolist()
    if duplicated:
        raise DuplicateIdentifierError(
            f"Found {len(duplicated)} duplicated protein identifiers: "
            f"{duplicated[:5]}{'...' if len(duplicated) > 5 else ''}"
        )


def find_zero_variance_rows(data: pd.DataFrame) -> List[str]:
    """
    Identify proteins whose measurements are constant across all replicates.

    Parameters:
    -----------
    data : pd.DataFrame
        Measurement table (proteins as rows, replicates as columns)

    Returns:
    --------
    List[str] : Identifiers of rows whose values are all equal (or all missing)

    Notes:
    ------
    The sample standard deviation of a constant float row is not always exactly
    zero (e.g. six copies of 0.1), so rows are compared by their spread
    relative to the magnitude of their values instead.
    """
    spread = data.max(axis=1) - data.min(axis=1)
    scale = data.abs().max(axis=1)
    tolerance = np.finfo(float).eps * scale * data.shape[1]
    constant = (spread <= tolerance) | spread.isna()
    return data.index[constant].tolist()


def check_normalized_rows(
    normalized: pd.DataFrame, tolerance: float = 1e-9, verbose: bool = True
) -> Dict:
    """
    Post-hoc sanity check that each normalized row has mean 0 and SD 1.

    Rows that are entirely NaN (constant rows propagated through normalization)
    are reported as warnings rather than failures.

    Parameters:
    -----------
    normalized : pd.DataFrame
        Row z-score normalized table
    tolerance : float, default 1e-9
        Absolute tolerance for the mean and standard deviation checks
    verbose : bool, default True
        Whether to print the validation summary

    Returns:
    --------
    Dict containing validation results and diagnostic information
    """
    results = {
        'is_valid': True,
        'errors': [],
        'warnings': [],
        'diagnostics': {}
    }

    row_means = normalized.mean(axis=1)
    row_stds = normalized.std(axis=1, ddof=1)

    undefined_rows = normalized.index[normalized.isna().all(axis=1)].tolist()
    defined = ~normalized.index.isin(undefined_rows)

    bad_mean = normalized.index[defined & ~np.isclose(row_means, 0.0, atol=tolerance, rtol=0)].tolist()
    bad_std = normalized.index[defined & ~np.isclose(row_stds, 1.0, atol=tolerance, rtol=0)].tolist()

    if bad_mean:
        results['errors'].append(
            f"{len(bad_mean)} rows have a mean further than {tolerance} from 0: {bad_mean[:5]}"
        )
        results['is_valid'] = False
    if bad_std:
        results['errors'].append(
            f"{len(bad_std)} rows have a standard deviation further than {tolerance} from 1: {bad_std[:5]}"
        )
        results['is_valid'] = False
    if undefined_rows:
        results['warnings'].append(
            f"{len(undefined_rows)} rows could not be normalized (zero variance): {undefined_rows[:5]}"
        )

    results['diagnostics'] = {
        'rows_checked': int(defined.sum()),
        'rows_undefined': len(undefined_rows),
        'max_abs_mean': float(row_means[defined].abs().max()) if defined.any() else 0.0,
        'max_abs_std_deviation': float((row_stds[defined] - 1).abs().max()) if defined.any() else 0.0,
        'undefined_rows': undefined_rows,
    }

    if verbose:
        print("NORMALIZATION SANITY CHECK")
        print("=" * 50)
        status = "✓ PASSED" if results['is_valid'] else "✗ FAILED"
        print(f"{status}: {results['diagnostics']['rows_checked']} rows checked")
        for error in results['errors']:
            print(f"  ERROR: {error}")
        for warning in results['warnings']:
            print(f"  WARNING: {warning}")

    return results
