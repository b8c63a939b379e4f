"""Loading and numeric helpers for albioncalc."""

from .loader import load_game_data, load_sample_data, load_tables, load_yaml
from .numeric import round_half_up

__all__ = ["load_game_data", "load_sample_data", "load_tables", "load_yaml", "round_half_up"]
