"""Tests for threshold estimation."""

import math

import numpy as np
import pytest

from site_percolation.errors import InvalidArgumentError
from site_percolation.percolation.estimator import ThresholdEstimator, run_trial


class TestRunTrial:
    """Tests for a single trial."""

    def test_single_site(self):
        """Test a one-site trial always has threshold one."""
        rng = np.random.default_rng(0)

        assert run_trial(1, rng) == 1.0

    def test_threshold_in_unit_interval(self):
        """Test trial thresholds lie in (0, 1]."""
        rng = np.random.default_rng(1)
        for _ in range(20):
            threshold = run_trial(8, rng)
            assert 0 < threshold <= 1

    def test_two_by_two_needs_two_sites(self):
        """Test a 2x2 trial percolates after two or three sites."""
        rng = np.random.default_rng(2)
        for _ in range(20):
            assert run_trial(2, rng) in (0.5, 0.75)


class TestThresholdEstimator:
    """Tests for ThresholdEstimator."""

    @pytest.mark.parametrize("grid_size,trials", [(0, 10), (10, 0), (-1, 5), (5, -3)])
    def test_invalid_arguments(self, grid_size, trials):
        """Test that sizes and trial counts below one are rejected."""
        with pytest.raises(InvalidArgumentError):
            ThresholdEstimator(grid_size, trials)

    def test_invalid_jobs(self):
        """Test that a job count below one is rejected."""
        with pytest.raises(InvalidArgumentError):
            ThresholdEstimator(5, 5, n_jobs=0)

    @pytest.mark.parametrize("seed", [-1, -100, 1.5, "7", True])
    def test_invalid_seed(self, seed):
        """Test that negative or non-integer seeds are rejected."""
        with pytest.raises(InvalidArgumentError):
            ThresholdEstimator(5, 5, seed=seed)

    def test_zero_seed(self):
        """Test that zero is a valid seed."""
        est = ThresholdEstimator(3, 3, seed=0)

        assert est.seed == 0

    def test_statistics(self):
        """Test mean and confidence interval on a 20x20 grid."""
        est = ThresholdEstimator(20, 100, seed=42)

        assert 0 < est.mean() < 1
        assert est.confidence_lo() <= est.mean() <= est.confidence_hi()
        assert est.stddev() > 0
        assert len(est.thresholds) == 100

    def test_mean_near_known_threshold(self):
        """Test the mean lands near the known threshold 0.5927."""
        est = ThresholdEstimator(30, 200, seed=3)

        assert est.mean() == pytest.approx(0.5927, abs=0.03)

    def test_confidence_interval_width(self):
        """Test the interval is mean plus or minus 1.96 standard errors."""
        est = ThresholdEstimator(10, 50, seed=5)
        half = 1.96 * est.stddev() / math.sqrt(50)

        assert est.confidence_lo() == pytest.approx(est.mean() - half)
        assert est.confidence_hi() == pytest.approx(est.mean() + half)

    def test_stddev_matches_numpy(self):
        """Test mean and stddev match numpy on the thresholds."""
        est = ThresholdEstimator(6, 30, seed=11)

        assert est.stddev() == pytest.approx(np.std(est.thresholds, ddof=1))
        assert est.mean() == pytest.approx(np.mean(est.thresholds))

    def test_single_trial_stddev_is_nan(self):
        """Test stddev is NaN with a single trial."""
        est = ThresholdEstimator(5, 1, seed=0)

        assert 0 < est.mean() <= 1
        assert math.isnan(est.stddev())
        assert math.isnan(est.confidence_lo())

    def test_seed_is_reproducible(self):
        """Test the same seed gives the same thresholds."""
        a = ThresholdEstimator(10, 20, seed=123)
        b = ThresholdEstimator(10, 20, seed=123)

        np.testing.assert_array_equal(a.thresholds, b.thresholds)

    def test_parallel_matches_sequential(self):
        """Test worker processes reproduce the sequential thresholds."""
        sequential = ThresholdEstimator(8, 12, seed=9, n_jobs=1)
        parallel = ThresholdEstimator(8, 12, seed=9, n_jobs=2)

        np.testing.assert_array_equal(sequential.thresholds, parallel.thresholds)

    def test_thresholds_is_a_copy(self):
        """Test that mutating the returned thresholds has no effect."""
        est = ThresholdEstimator(4, 5, seed=1)
        values = est.thresholds
        values[:] = 0

        assert est.mean() > 0

    def test_summary(self):
        """Test the summary dictionary."""
        est = ThresholdEstimator(5, 10, seed=4)
        summary = est.summary()

        assert summary['grid_size'] == 5
        assert summary['trials'] == 10
        assert summary['mean'] == est.mean()
        assert summary['confidence_hi'] == est.confidence_hi()

    def test_verbose_prints_progress(self, capsys):
        """Test verbose runs print progress lines."""
        ThresholdEstimator(4, 10, seed=1, verbose=True)
        out = capsys.readouterr().out

        assert "Running 10 trials" in out
        assert "Progress: 10/10" in out

    def test_save_and_load(self, tmp_path):
        """Test thresholds and parameters survive an .npz round trip."""
        est = ThresholdEstimator(6, 15, seed=77)
        path = tmp_path / "thresholds.npz"
        est.save(path)

        loaded = ThresholdEstimator.load(path)

        assert loaded.grid_size == 6
        assert loaded.trials == 15
        assert loaded.seed == 77
        np.testing.assert_array_equal(loaded.thresholds, est.thresholds)
        assert loaded.confidence_lo() == est.confidence_lo()

    def test_save_without_seed(self, tmp_path):
        """Test an unseeded run loads back without a seed."""
        est = ThresholdEstimator(3, 4)
        path = tmp_path / "unseeded.npz"
        est.save(path)

        assert ThresholdEstimator.load(path).seed is None

    def test_load_releases_file(self, tmp_path):
        """Test the .npz file can be removed right after loading."""
        est = ThresholdEstimator(4, 6, seed=12)
        path = tmp_path / "released.npz"
        est.save(path)

        loaded = ThresholdEstimator.load(path)
        path.unlink()

        assert not path.exists()
        np.testing.assert_array_equal(loaded.thresholds, est.thresholds)
