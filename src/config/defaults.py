"""Anchor configuration: single source of truth for default simulation parameters."""

from src.config.experiment import SimulationConfig

# Anchor config with all default values: density=0.002375, field 1000 with
# padding 80, jump sweep 6.8..75 step 0.05, one trial, max_hop=100000, seed=42.
ANCHOR_CONFIG = SimulationConfig()
