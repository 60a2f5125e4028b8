"""JSON serialization and deserialization for simulation configs."""

import json
from dataclasses import asdict
from typing import Any

from dacite import from_dict, Config as DaciteConfig

from src.config.experiment import SimulationConfig

# Tuples come back from JSON as lists; floats may be written as integers.
_DACITE_CONFIG = DaciteConfig(
    cast=[tuple, float],
    check_types=True,
    strict=True,
)


def config_to_json(config: SimulationConfig) -> str:
    """Serialize a SimulationConfig to a JSON string.

    Uses sorted keys and 2-space indent for human readability and diffability.
    """
    return json.dumps(config_to_dict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> SimulationConfig:
    """Deserialize a JSON string to a SimulationConfig.

    Uses dacite with strict=True to reject unknown keys (catches schema drift).
    Missing keys fall back to the dataclass defaults.
    """
    return config_from_dict(json.loads(json_str))


def config_to_dict(config: SimulationConfig) -> dict[str, Any]:
    """JSON-native dictionary of a SimulationConfig (tags as a list).

    This is the form embedded in run summaries and written by
    config_to_json, so both compare equal to a parsed config file.
    """
    d = asdict(config)
    d["tags"] = list(config.tags)
    return d


def config_from_dict(d: dict[str, Any]) -> SimulationConfig:
    """Reconstruct a SimulationConfig from a plain dictionary."""
    return from_dict(
        data_class=SimulationConfig,
        data=d,
        config=_DACITE_CONFIG,
    )
