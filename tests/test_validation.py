"""
Tests for the validation module - column schema, identifiers and
normalization sanity checks.
"""

import numpy as np
import pandas as pd
import pytest

import heatmap_toolkit as htk
from heatmap_toolkit.validation import validate_unique_identifiers


class TestColumnSchema:
    """Test validation of the fixed column name list."""

    def test_matching_count_passes(self):
        htk.validate_column_schema(list("abcdefgh"), htk.DEFAULT_COLUMN_NAMES)

    def test_mismatch_message_names_both_counts(self):
        with pytest.raises(htk.ColumnSchemaError) as excinfo:
            htk.validate_column_schema(list("abcdefg"), htk.DEFAULT_COLUMN_NAMES, source="data.csv")

        message = str(excinfo.value)
        assert "data.csv" in message
        assert "found 7 columns" in message
        assert "expected 8 columns" in message


class TestUniqueIdentifiers:

    def test_unique_index_passes(self):
        validate_unique_identifiers(pd.Index(["P1", "P2", "P3"]))

    def test_duplicates_reported(self):
        with pytest.raises(htk.DuplicateIdentifierError, match="1 duplicated"):
            validate_unique_identifiers(pd.Index(["P1", "P2", "P1"]))


class TestZeroVarianceRows:
    """Test detection of rows that cannot be standardized."""

    def test_no_constant_rows(self, golden_raw_table):
        assert htk.find_zero_variance_rows(golden_raw_table.iloc[:, :6]) == []

    def test_constant_rows_found(self):
        data = pd.DataFrame(
            [[1.0, 1.0, 1.0], [1.0, 2.0, 3.0], [5.0, 5.0, 5.0]],
            index=["flat_a", "varied", "flat_b"],
        )
        assert htk.find_zero_variance_rows(data) == ["flat_a", "flat_b"]

    def test_constant_rows_not_exact_in_binary(self):
        """Constant rows whose std has rounding residue are still detected"""
        data = pd.DataFrame(
            [[0.1] * 6, [20.35] * 6, [1 / 3] * 6, [0.0] * 6, [20.35, 20.51, 20.29, 18.76, 18.94, 18.70]],
            index=["tenth", "decimal", "third", "zeros", "varied"],
        )
        assert htk.find_zero_variance_rows(data) == ["tenth", "decimal", "third", "zeros"]

    def test_all_missing_row_is_constant(self):
        data = pd.DataFrame(
            [[np.nan, np.nan, np.nan], [1.0, 2.0, 3.0]], index=["missing", "varied"]
        )
        assert htk.find_zero_variance_rows(data) == ["missing"]


class TestCheckNormalizedRows:
    """Test the post-normalization sanity check."""

    def test_normalized_data_passes(self, synthetic_normalized):
        results = htk.check_normalized_rows(synthetic_normalized, verbose=False)

        assert results['is_valid'] is True
        assert results['errors'] == []
        assert results['diagnostics']['rows_checked'] == 40
        assert results['diagnostics']['max_abs_mean'] < 1e-9

    def test_raw_data_fails(self, synthetic_protein_table):
        results = htk.check_normalized_rows(synthetic_protein_table.iloc[:, :6], verbose=False)

        assert results['is_valid'] is False
        assert len(results['errors']) == 2

    def test_undefined_rows_are_warnings(self, synthetic_normalized):
        with_nan = synthetic_normalized.copy()
        with_nan.iloc[0, :] = np.nan

        results = htk.check_normalized_rows(with_nan, verbose=False)

        assert results['is_valid'] is True
        assert len(results['warnings']) == 1
        assert results['diagnostics']['undefined_rows'] == [with_nan.index[0]]
        assert results['diagnostics']['rows_checked'] == 39

    def test_verbose_output(self, synthetic_normalized, capsys):
        htk.check_normalized_rows(synthetic_normalized, verbose=True)
        captured = capsys.readouterr()
        assert "NORMALIZATION SANITY CHECK" in captured.out
        assert "PASSED" in captured.out
