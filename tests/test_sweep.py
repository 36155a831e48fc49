"""Tests for grid-size sweeps."""

import pandas as pd

from site_percolation.percolation.sweep import (
    SWEEP_COLUMNS, run_sweep, save_sweep, combine_sweep_results
)


class TestRunSweep:
    """Tests for run_sweep."""

    def test_one_row_per_size(self):
        """Test a sweep yields one sorted row per grid size."""
        df = run_sweep([8, 4, 6], trials=10, seed=1)

        assert list(df.columns) == SWEEP_COLUMNS
        assert list(df['grid_size']) == [4, 6, 8]
        assert (df['trials'] == 10).all()
        assert ((df['mean'] > 0) & (df['mean'] < 1)).all()
        assert (df['confidence_lo'] <= df['confidence_hi']).all()

    def test_reproducible(self):
        """Test a seeded sweep is reproducible."""
        a = run_sweep([5, 7], trials=8, seed=21)
        b = run_sweep([5, 7], trials=8, seed=21)

        pd.testing.assert_series_equal(a['mean'], b['mean'])

    def test_empty(self):
        """Test an empty sweep has the expected columns."""
        df = run_sweep([], trials=5)

        assert df.empty
        assert list(df.columns) == SWEEP_COLUMNS


class TestSaveAndCombine:
    """Tests for writing and merging sweep CSVs."""

    def test_save_creates_directories(self, tmp_path):
        """Test saving creates missing parent directories."""
        df = run_sweep([3], trials=4, seed=2)
        output = save_sweep(df, tmp_path / "nested" / "sweep_a.csv")

        assert output.exists()
        assert len(pd.read_csv(output)) == 1

    def test_combine(self, tmp_path, capsys):
        """Test combining sweep CSVs skips invalid files."""
        save_sweep(run_sweep([6], trials=5, seed=1), tmp_path / "sweep_b.csv")
        save_sweep(run_sweep([3, 4], trials=5, seed=2), tmp_path / "sweep_a.csv")
        (tmp_path / "sweep_bad.csv").write_text("foo,bar\n1,2\n")

        output = tmp_path / "combined.csv"
        combined = combine_sweep_results(tmp_path, output)
        out = capsys.readouterr().out

        assert list(combined['grid_size']) == [3, 4, 6]
        assert output.exists()
        assert "Failed to load 1 files" in out

    def test_combine_nothing_found(self, tmp_path, capsys):
        """Test combining an empty directory returns an empty frame."""
        combined = combine_sweep_results(tmp_path, tmp_path / "out.csv")

        assert combined.empty
        assert "No sweep result files" in capsys.readouterr().out
