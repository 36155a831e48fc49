"""
Site Percolation - Monte Carlo estimation of the site percolation threshold.

This package provides tools for:
- An incremental percolation model on n-by-n grids (union-find, no backwash)
- Repeated random trials and threshold statistics
- Sweeps over grid sizes driven by a YAML run config
"""

__version__ = "1.0.0"

from .errors import PercolationError, InvalidArgumentError, OutOfRangeError
from .percolation import PercolationGrid, ThresholdEstimator

__all__ = ['PercolationError', 'InvalidArgumentError', 'OutOfRangeError',
           'PercolationGrid', 'ThresholdEstimator']
