import json
from pathlib import Path
from typing import Any

from line_sim.config.core import SimulationConfig


def load_simulation_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Loads the raw simulation configuration.
    If no path is provided, looks for simulation_config.json in the config directory.
    """
    if config_path is None:
        # Default to the file next to this script
        final_path = Path(__file__).parent / "simulation_config.json"
    else:
        final_path = Path(config_path)

    with open(final_path) as f:
        data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError(f"Expected dict from {final_path}, got {type(data)}")
        return data


def load_config(
    config_path: str | Path | None = None, **overrides: Any
) -> SimulationConfig:
    """
    Builds a validated SimulationConfig from a JSON file.
    Overrides set to None are ignored so argparse namespaces can be passed through.
    """
    data = load_simulation_config(config_path)
    config = SimulationConfig.from_dict(data)
    changes = {k: v for k, v in overrides.items() if v is not None}
    if changes:
        config = config.with_overrides(**changes)
    return config.validate()
