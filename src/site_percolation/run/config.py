"""
Run configuration for threshold sweeps.

The RunConfig loads a YAML run definition: which grid sizes to evaluate, how
many trials to run for each, and where to write the results.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import InvalidArgumentError


class RunConfig:
    """
    Loads and validates a run configuration YAML.

    Example:
        config = RunConfig.from_yaml('config/threshold_scan.yaml')
        print(config.run_name)
        print(config.grid_sizes)
    """

    def __init__(self, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise ValueError("Run config must be a mapping")
        self._data = data
        self._validate()

    @classmethod
    def from_yaml(cls, path: str) -> 'RunConfig':
        """Load run config from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Run config not found: {path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        return cls(data)

    def _validate(self):
        """Validate required config sections and values."""
        required_sections = ['run_name', 'grid', 'trials']
        for section in required_sections:
            if section not in self._data:
                raise ValueError(f"Missing required config section: '{section}'")

        for section in ('grid', 'trials'):
            if not isinstance(self._data[section], dict):
                raise ValueError(f"Config section '{section}' must be a mapping")
        output = self._data.get('output', {})
        if not isinstance(output, dict):
            raise ValueError("Config section 'output' must be a mapping")

        sizes = self._data['grid'].get('sizes')
        if not isinstance(sizes, list):
            raise InvalidArgumentError(f"grid.sizes must be a list, got {sizes!r}")
        if not sizes:
            raise ValueError("Config section 'grid' must list at least one size")
        for size in sizes:
            _require_positive_int('grid.sizes', size)

        _require_positive_int('trials.count', self._data['trials'].get('count'))
        _require_positive_int('trials.n_jobs', self.n_jobs)

        seed = self.seed
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int) or seed < 0):
            raise InvalidArgumentError(f"trials.seed must be a non-negative integer, got {seed!r}")

    # --- Properties ---

    @property
    def run_name(self) -> str:
        return self._data['run_name']

    @property
    def grid_sizes(self) -> List[int]:
        return [int(s) for s in self._data['grid']['sizes']]

    @property
    def trials(self) -> int:
        return int(self._data['trials']['count'])

    @property
    def seed(self) -> Optional[int]:
        return self._data['trials'].get('seed')

    @property
    def n_jobs(self) -> int:
        return self._data['trials'].get('n_jobs', 1)

    # --- Output paths ---

    @property
    def base_dir(self) -> Path:
        return Path(self._data.get('output', {}).get('base_dir', '.'))

    @property
    def scores_csv(self) -> Path:
        default = f"sweep_{self.run_name}.csv"
        return self.base_dir / self._data.get('output', {}).get('scores_csv', default)


def _require_positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")
