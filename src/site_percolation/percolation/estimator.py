"""
Monte Carlo estimate of the site percolation threshold.

Each trial opens uniformly random sites of a fresh PercolationGrid until it
percolates and records the fraction of open sites. The estimator reports the
sample mean, the sample standard deviation and a 95% confidence interval of
those fractions.
"""

import time
import multiprocessing
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from ..errors import InvalidArgumentError
from .grid import PercolationGrid

CONFIDENCE_95 = 1.96


def run_trial(grid_size: int, rng: np.random.Generator) -> float:
    """
    Run one trial and return its percolation threshold.

    Args:
        grid_size: Side length of the grid
        rng: Random generator used to pick sites

    Returns:
        Fraction of open sites at the moment the grid first percolates
    """
    grid = PercolationGrid(grid_size)
    while not grid.percolates():
        row = int(rng.integers(grid_size)) + 1
        col = int(rng.integers(grid_size)) + 1
        grid.open(row, col)
    return grid.number_of_open_sites() / (grid_size * grid_size)


def _trial_worker(args: Tuple[int, int, np.random.SeedSequence]) -> Tuple[int, float]:
    """Pool worker: run trial `index` with its own child seed."""
    index, grid_size, seed_seq = args
    return index, run_trial(grid_size, np.random.default_rng(seed_seq))


def _check_positive(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidArgumentError(f"{name} must be at least 1, got {value}")
    return int(value)


def _check_seed(seed: Any) -> Optional[int]:
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)) or seed < 0:
        raise InvalidArgumentError(f"Seed must be a non-negative integer, got {seed!r}")
    return int(seed)


class ThresholdEstimator:
    """
    Repeated percolation trials on grids of a fixed size.

    All trials run in the constructor. Every trial draws from its own
    generator spawned from SeedSequence(seed), so a given seed yields the
    same thresholds whatever n_jobs is.

    Example:
        est = ThresholdEstimator(200, 100, seed=1)
        print(est.mean(), est.confidence_lo(), est.confidence_hi())
    """

    def __init__(self, grid_size: int, trials: int, seed: Optional[int] = None,
                 n_jobs: int = 1, verbose: bool = False):
        """
        Run `trials` independent trials on grid_size-by-grid_size grids.

        Args:
            grid_size: Side length of each grid
            trials: Number of trials
            seed: Seed for reproducible runs (default: fresh entropy)
            n_jobs: Number of worker processes (1 runs in-process)
            verbose: Print progress while running

        Raises:
            InvalidArgumentError: If grid_size, trials or n_jobs is < 1, or the
                seed is negative
        """
        self.grid_size = _check_positive("Grid size", grid_size)
        self.trials = _check_positive("Number of trials", trials)
        self.n_jobs = _check_positive("Number of jobs", n_jobs)
        self.seed = _check_seed(seed)
        self.verbose = verbose
        self.elapsed_seconds = 0.0

        self._thresholds = np.full(self.trials, np.nan)
        self._run()

    def _run(self) -> None:
        t0 = time.time()
        child_seqs = np.random.SeedSequence(self.seed).spawn(self.trials)
        args_list = [(i, self.grid_size, child_seqs[i]) for i in range(self.trials)]

        if self.verbose:
            print(f"Running {self.trials} trials on a {self.grid_size}x{self.grid_size} grid "
                  f"with {self.n_jobs} job(s)...")

        if self.n_jobs == 1:
            results = map(_trial_worker, args_list)
            self._collect(results)
        else:
            n_workers = min(self.n_jobs, self.trials)
            with multiprocessing.Pool(processes=n_workers) as pool:
                self._collect(pool.imap_unordered(_trial_worker, args_list))

        self.elapsed_seconds = time.time() - t0
        if self.verbose:
            print(f"Finished {self.trials} trials in {self.elapsed_seconds:.2f}s")

    def _collect(self, results) -> None:
        step = max(1, self.trials // 10)
        for done, (index, threshold) in enumerate(results, start=1):
            self._thresholds[index] = threshold
            if self.verbose and (done % step == 0 or done == self.trials):
                print(f"  Progress: {done}/{self.trials} ({done / self.trials * 100:.0f}%)")

    # --- Statistics ---

    @property
    def thresholds(self) -> np.ndarray:
        """Per-trial thresholds (a copy)."""
        return self._thresholds.copy()

    def mean(self) -> float:
        """Sample mean of the percolation threshold."""
        return float(np.mean(self._thresholds))

    def stddev(self) -> float:
        """
        Sample standard deviation (Bessel-corrected) of the threshold.

        NaN when only one trial was run.
        """
        if self.trials < 2:
            return float('nan')
        return float(np.std(self._thresholds, ddof=1))

    def _half_width(self) -> float:
        return CONFIDENCE_95 * self.stddev() / np.sqrt(self.trials)

    def confidence_lo(self) -> float:
        """Low endpoint of the 95% confidence interval."""
        return self.mean() - self._half_width()

    def confidence_hi(self) -> float:
        """High endpoint of the 95% confidence interval."""
        return self.mean() + self._half_width()

    def summary(self) -> Dict[str, Any]:
        return {
            'grid_size': self.grid_size,
            'trials': self.trials,
            'mean': self.mean(),
            'stddev': self.stddev(),
            'confidence_lo': self.confidence_lo(),
            'confidence_hi': self.confidence_hi(),
        }

    # --- Persistence ---

    def save(self, filename: Union[str, Path]) -> None:
        """
        Save thresholds and run parameters to an .npz file.

        Args:
            filename: Path to output .npz file
        """
        np.savez(
            filename,
            grid_size=self.grid_size,
            trials=self.trials,
            seed=-1 if self.seed is None else self.seed,
            thresholds=self._thresholds,
        )

    @classmethod
    def load(cls, filename: Union[str, Path]) -> 'ThresholdEstimator':
        """
        Load an estimator saved with save() without re-running any trial.

        Args:
            filename: Path to input .npz file
        """
        with np.load(filename) as dump:
            grid_size = int(dump['grid_size'])
            trials = int(dump['trials'])
            seed = int(dump['seed'])
            thresholds = np.asarray(dump['thresholds'], dtype=np.float64)

        est = cls.__new__(cls)
        est.grid_size = grid_size
        est.trials = trials
        est.seed = None if seed < 0 else seed
        est.n_jobs = 1
        est.verbose = False
        est.elapsed_seconds = 0.0
        est._thresholds = thresholds
        return est

    def __repr__(self) -> str:
        return f"ThresholdEstimator(grid_size={self.grid_size}, trials={self.trials})"
