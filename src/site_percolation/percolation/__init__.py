"""Site percolation model and threshold estimation."""

from .union_find import UnionFind
from .grid import PercolationGrid, SiteStatus
from .estimator import ThresholdEstimator, run_trial
from .sweep import run_sweep, save_sweep, combine_sweep_results

__all__ = ['UnionFind', 'PercolationGrid', 'SiteStatus', 'ThresholdEstimator', 'run_trial',
           'run_sweep', 'save_sweep', 'combine_sweep_results']
