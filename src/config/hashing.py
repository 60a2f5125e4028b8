"""Config fingerprints for labelling sweep outputs.

Two fingerprints exist. The outcome hash covers only what changes trial
Results (field geometry and density, the jump sweep, hop budget, master
seed), so a rerun on another machine with a different worker pool lands
under the same key. The full hash covers every field and identifies one
specific invocation.
"""

import hashlib
import json
from dataclasses import asdict
from typing import Any

from src.config.experiment import SimulationConfig

# Execution and labelling settings: they never change a Result
EXECUTION_ONLY_FIELDS = ("scheduler", "description", "tags")


def _drop_path(tree: dict[str, Any], dotted: str) -> None:
    """Delete the entry named by a dotted path such as "scheduler.workers".

    Paths that do not resolve (missing key, or a non-dict on the way) are
    ignored, so exclusion lists can name optional sections.
    """
    *parents, leaf = dotted.split(".")
    node: Any = tree
    for key in parents:
        node = node.get(key) if isinstance(node, dict) else None
    if isinstance(node, dict):
        node.pop(leaf, None)


def config_hash(config: Any, exclude_fields: list[str] | None = None) -> str:
    """16-hex-digit SHA-256 fingerprint of a config dataclass.

    The dataclass is flattened with asdict(), the excluded dotted paths are
    removed, and the rest is serialized as compact key-sorted ASCII JSON so
    equal configs always produce byte-identical input.

    Args:
        config: SimulationConfig or any of its sub-configs.
        exclude_fields: Dotted paths to leave out of the fingerprint.
    """
    tree = asdict(config)
    for dotted in exclude_fields or ():
        _drop_path(tree, dotted)
    payload = json.dumps(tree, sort_keys=True, ensure_ascii=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


def outcome_config_hash(config: SimulationConfig) -> str:
    """Fingerprint of the inputs that determine trial Results."""
    return config_hash(config, exclude_fields=list(EXECUTION_ONLY_FIELDS))


def full_config_hash(config: SimulationConfig) -> str:
    """Fingerprint of the whole config, execution settings included."""
    return config_hash(config)
