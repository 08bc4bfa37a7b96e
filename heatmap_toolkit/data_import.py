"""
Data Import Module for Heatmap Analysis Toolkit

Functions for fetching the protein expression CSV, loading it with the fixed
column schema, and selecting the replicate measurement columns.
"""

import os
import warnings
from datetime import datetime
from typing import List, Optional, Sequence

import pandas as pd
import requests

from .validation import (
    ColumnSchemaError,
    validate_column_schema,
    validate_unique_identifiers,
)


# Identifier column, 3 control replicates, 3 treated replicates, trailing statistic
DEFAULT_COLUMN_NAMES: List[str] = [
    "Protein",
    "Control.1",
    "Control.2",
    "Control.3",
    "Treated.1",
    "Treated.2",
    "Treated.3",
    "P.Value",
]

N_MEASUREMENT_COLUMNS = 6


def download_dataset(
    url: str,
    destination: str,
    log_file: Optional[str] = None,
    timeout: int = 30,
) -> str:
    """
    Download a remote CSV file to local storage unless it is already present.

    The file body is written verbatim. Each download appends one record to a
    plain-text log file with the source URL, destination filename, working
    directory and retrieval timestamp. There is no retry: any network or HTTP
    error propagates to the caller.

    Parameters:
    -----------
    url : str
        Remote location of the CSV file
    destination : str
        Local path the file is written to
    log_file : str, optional
        Path of the download log. Defaults to '<destination>.download.log'
    timeout : int
        Request timeout in seconds

    Returns:
    --------
    str : Path to the local copy
    """
    if os.path.exists(destination):
        print(f"✓ Using existing data file: {destination}")
        return destination

    print(f"Downloading {url} ...")
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()

    dest_dir = os.path.dirname(destination)
    if dest_dir:
        os.makedirs(dest_dir, exist_ok=True)

    with open(destination, "wb") as f:
        f.write(response.content)

    if log_file is None:
        log_file = f"{destination}.download.log"

    with open(log_file, "a", encoding="utf-8") as f:
        f.write(
            f"source_url = {url!r}\n"
            f"destination = {os.path.basename(destination)!r}\n"
            f"working_directory = {os.getcwd()!r}\n"
            f"downloaded_at = {datetime.now().strftime('%Y-%m-%d %H:%M:%S')!r}\n\n"
        )

    print(f"✓ Downloaded {len(response.content)} bytes to {destination}")
    print(f"✓ Download recorded in {log_file}")
    return destination


def load_protein_table(
    file_path: str,
    column_names: Sequence[str] = DEFAULT_COLUMN_NAMES,
    validate: bool = True,
) -> pd.DataFrame:
    """
    Load the protein CSV and assign the fixed column names by position.

    The first column becomes the (unique) row index; the remaining columns are
    renamed in order, so the file layout must match `column_names` exactly.

    Parameters:
    -----------
    file_path : str
        Path to the CSV file (header row present)
    column_names : sequence of str
        Names for every column in the file, identifier first
    validate : bool, default True
        Reject files whose column count differs from len(column_names).
        When False a mismatch that pandas can still label is only warned
        about (extra trailing columns are dropped).

    Returns:
    --------
    pd.DataFrame : Table indexed by protein identifier

    Raises:
    -------
    FileNotFoundError: If the file does not exist
    ColumnSchemaError: On a column count mismatch
    DuplicateIdentifierError: If an identifier appears more than once
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Protein file not found: {file_path}")

    raw = pd.read_csv(file_path)
    column_names = list(column_names)

    if validate:
        validate_column_schema(raw.columns, column_names, source=file_path)
    elif len(raw.columns) != len(column_names):
        if len(raw.columns) < len(column_names):
            validate_column_schema(raw.columns, column_names, source=file_path)
        warnings.warn(
            f"{file_path} has {len(raw.columns)} columns but {len(column_names)} names "
            f"were given; keeping the first {len(column_names)} columns."
        )
        raw = raw.iloc[:, :len(column_names)]

    raw.columns = column_names
    table = raw.set_index(column_names[0])
    validate_unique_identifiers(table.index)

    print(f"✓ Loaded protein table: {table.shape[0]} proteins x {table.shape[1]} columns")
    return table


def select_measurement_columns(
    table: pd.DataFrame, n_measurements: int = N_MEASUREMENT_COLUMNS
) -> pd.DataFrame:
    """
    Keep only the first `n_measurements` columns (the replicate measurements).

    Selection is positional, so applying it to an already-selected table
    returns the same table.
    """
    if table.shape[1] < n_measurements:
        raise ColumnSchemaError(
            f"Expected at least {n_measurements} measurement columns, "
            f"found {table.shape[1]}: {list(table.columns)}"
        )
    return table.iloc[:, :n_measurements].copy()
