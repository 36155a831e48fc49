"""
Command-line interface for site_percolation.

Commands:
    site-perc estimate GRID_SIZE TRIALS [--seed S] [--jobs J] [--save out.npz]
    site-perc sweep --config run.yaml
    site-perc combine --results-dir results/ --output thresholds.csv
    site-perc percolate N --site ROW COL [--site ROW COL ...]
"""

import click
from pathlib import Path

from .. import __version__
from ..errors import InvalidArgumentError, OutOfRangeError


@click.group()
@click.version_option(version=__version__)
def cli():
    """Site Percolation - Monte Carlo estimation of the percolation threshold."""
    pass


@cli.command('estimate')
@click.argument('grid_size', type=int)
@click.argument('trials', type=int)
@click.option('--seed', type=int, default=None, help='Random seed for reproducible runs')
@click.option('--jobs', '-j', 'n_jobs', default=1, show_default=True,
              help='Number of worker processes')
@click.option('--save', 'save_file', type=click.Path(), help='Save thresholds to .npz file')
@click.option('--verbose', '-v', is_flag=True, help='Print progress')
def estimate(grid_size, trials, seed, n_jobs, save_file, verbose):
    """Estimate the threshold from TRIALS trials on a GRID_SIZE x GRID_SIZE grid."""
    from ..percolation.estimator import ThresholdEstimator

    try:
        est = ThresholdEstimator(grid_size, trials, seed=seed, n_jobs=n_jobs, verbose=verbose)
    except InvalidArgumentError as e:
        raise click.UsageError(str(e))

    click.echo(f"mean                    = {est.mean()}")
    click.echo(f"stddev                  = {est.stddev()}")
    click.echo(f"95% confidence interval = [{est.confidence_lo()}, {est.confidence_hi()}]")

    if save_file:
        est.save(save_file)
        click.echo(f"Saved thresholds to {save_file}")


@cli.command('sweep')
@click.option('--config', '-c', 'config_file', required=True, type=click.Path(exists=True),
              help='Run config YAML file')
@click.option('--output', '-o', 'output_file', type=click.Path(),
              help='Output CSV (default: from config)')
@click.option('--verbose', '-v', is_flag=True, help='Print progress')
def sweep(config_file, output_file, verbose):
    """Estimate the threshold for every grid size in a run config."""
    from ..run.config import RunConfig
    from ..percolation.sweep import run_sweep, save_sweep

    try:
        config = RunConfig.from_yaml(config_file)
    except ValueError as e:
        raise click.UsageError(f"Invalid run config {config_file}: {e}")

    click.echo(f"Run: {config.run_name}")
    click.echo(f"  Grid sizes: {config.grid_sizes}")
    click.echo(f"  Trials: {config.trials}, seed: {config.seed}, jobs: {config.n_jobs}")

    df = run_sweep(
        config.grid_sizes,
        config.trials,
        seed=config.seed,
        n_jobs=config.n_jobs,
        verbose=verbose,
    )

    output_file = Path(output_file) if output_file else config.scores_csv
    save_sweep(df, output_file)

    click.echo("")
    click.echo(df[['grid_size', 'trials', 'mean', 'stddev',
                   'confidence_lo', 'confidence_hi']].to_string(index=False))
    click.echo(f"\n✓ Saved to {output_file}")


@cli.command('combine')
@click.option('--results-dir', '-r', required=True, type=click.Path(exists=True),
              help='Directory containing sweep_*.csv files')
@click.option('--output', '-o', 'output_file', required=True, type=click.Path(),
              help='Combined output CSV')
def combine(results_dir, output_file):
    """Combine sweep CSVs from separate runs."""
    from ..percolation.sweep import combine_sweep_results

    df = combine_sweep_results(results_dir, output_file)
    if df.empty:
        raise SystemExit(1)


@cli.command('percolate')
@click.argument('n', type=int)
@click.option('--site', '-s', 'sites', type=(int, int), multiple=True,
              help='Site to open as ROW COL (repeatable, opened in order)')
def percolate(n, sites):
    """Open SITES on an N x N grid and show the result."""
    from ..percolation.grid import PercolationGrid

    try:
        grid = PercolationGrid(n)
    except InvalidArgumentError as e:
        raise click.BadParameter(str(e), param_hint='N')

    for row, col in sites:
        try:
            grid.open(row, col)
        except OutOfRangeError as e:
            raise click.BadParameter(str(e), param_hint='--site')

    click.echo(grid.render())
    click.echo(f"Open sites: {grid.number_of_open_sites()}")
    click.echo(f"Percolates: {grid.percolates()}")


if __name__ == '__main__':
    cli()
