"""
Threshold estimates across several grid sizes.

A sweep runs one ThresholdEstimator per grid size and collects the summaries
in a DataFrame. Sweeps run as separate jobs can be merged afterwards with
combine_sweep_results().
"""

import glob
import time
from pathlib import Path
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

from .estimator import ThresholdEstimator

SWEEP_COLUMNS = ['grid_size', 'trials', 'mean', 'stddev',
                 'confidence_lo', 'confidence_hi', 'elapsed_seconds']


def run_sweep(
    grid_sizes: Iterable[int],
    trials: int,
    seed: Optional[int] = None,
    n_jobs: int = 1,
    verbose: bool = False,
) -> pd.DataFrame:
    """
    Estimate the percolation threshold for each grid size.

    Args:
        grid_sizes: Grid side lengths to evaluate
        trials: Number of trials per grid size
        seed: Base seed; each size gets an independent child seed
        n_jobs: Worker processes per estimator
        verbose: Print progress

    Returns:
        DataFrame with one row per grid size, sorted by grid size
    """
    grid_sizes = list(grid_sizes)
    child_seeds = np.random.SeedSequence(seed).spawn(len(grid_sizes))

    rows = []
    for grid_size, child in zip(grid_sizes, child_seeds):
        t0 = time.time()
        est = ThresholdEstimator(
            grid_size,
            trials,
            seed=int(child.generate_state(1)[0]),
            n_jobs=n_jobs,
            verbose=verbose,
        )
        row = est.summary()
        row['elapsed_seconds'] = time.time() - t0
        rows.append(row)

        if verbose:
            print(f"  n={grid_size}: mean={row['mean']:.6f} stddev={row['stddev']:.6f}")

    if not rows:
        return pd.DataFrame(columns=SWEEP_COLUMNS)

    df = pd.DataFrame(rows, columns=SWEEP_COLUMNS)
    return df.sort_values('grid_size').reset_index(drop=True)


def save_sweep(df: pd.DataFrame, output_file: Union[str, Path]) -> Path:
    """
    Write sweep results to CSV.

    Args:
        df: DataFrame returned by run_sweep()
        output_file: Output CSV path

    Returns:
        Path of the written file
    """
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_file, index=False)
    return output_file


def combine_sweep_results(
    results_dir: Union[str, Path],
    output_file: Union[str, Path],
) -> pd.DataFrame:
    """
    Combine sweep_*.csv files from separate runs into one CSV.

    Files that cannot be read or lack the required columns are skipped.

    Args:
        results_dir: Directory containing sweep_*.csv files
        output_file: Path for combined output CSV

    Returns:
        Combined DataFrame (empty if nothing valid was found)
    """
    results_dir = Path(results_dir)
    output_file = Path(output_file)

    files = sorted(glob.glob(str(results_dir / "sweep_*.csv")))
    if not files:
        print(f"No sweep result files found in {results_dir}")
        return pd.DataFrame()

    print(f"Found {len(files)} sweep result files")

    dfs = []
    failed_files = []
    required = ['grid_size', 'trials', 'mean', 'stddev']

    for path in files:
        try:
            df = pd.read_csv(path)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError):
            failed_files.append(path)
            continue

        missing = [col for col in required if col not in df.columns]
        if missing or len(df) == 0:
            failed_files.append(path)
            continue
        dfs.append(df)

    if failed_files:
        print(f"Warning: Failed to load {len(failed_files)} files")

    if not dfs:
        print("No valid data to combine")
        return pd.DataFrame()

    combined_df = pd.concat(dfs, ignore_index=True)
    combined_df = combined_df.sort_values(['grid_size', 'trials']).reset_index(drop=True)
    save_sweep(combined_df, output_file)

    print(f"Combined {len(combined_df)} rows into {output_file}")
    return combined_df
