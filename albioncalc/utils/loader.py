"""Configuration loader utilities for albioncalc."""

from __future__ import annotations

import os
import yaml
from typing import Any

from albioncalc.errors import DataFormatError

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
TABLES_ENV_VAR = "ALBIONCALC_TABLES"
DEFAULT_TABLES_PATH = os.path.join(DATA_DIR, "tables.yaml")
SAMPLE_INDEX_PATH = os.path.join(DATA_DIR, "sample_index.yaml")


def load_yaml(path: str) -> Any:
    """Load a YAML configuration file.

    JSON is a subset of YAML, so generated ``*.json`` indexes load too.
    """

    with open(path, "r", encoding="utf-8") as file:
        try:
            return yaml.safe_load(file)
        except yaml.YAMLError as exc:
            raise DataFormatError(f"Could not parse {path}: {exc}") from exc


def load_mapping(path: str) -> dict:
    data = load_yaml(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DataFormatError(f"{path} must contain a mapping at the top level")
    return data


def resolve_tables_path(path: str | None = None) -> str:
    """Explicit path, then $ALBIONCALC_TABLES, then the bundled tables."""

    if path:
        return path
    return os.environ.get(TABLES_ENV_VAR) or DEFAULT_TABLES_PATH


def load_tables(path: str | None = None):
    from albioncalc.core.tables import GameTables

    resolved = resolve_tables_path(path)
    try:
        return GameTables.from_dict(load_mapping(resolved))
    except DataFormatError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DataFormatError(f"Malformed tables file {resolved}: {exc!r}") from exc


def load_game_data(items_path: str, spells_path: str | None = None, pools_path: str | None = None,
                   resolved_spells_path: str | None = None):
    """Load an item index plus optional spell definitions and pool files.

    Each file is a mapping keyed by id. ``resolved_spells_path`` points at a
    pre-resolved spell index (``id -> {components: [...]}``) and
    ``pools_path`` at pre-resolved weapon pools (``id -> [entries]``).
    """
    from albioncalc.core.data import GameData

    items = load_mapping(items_path)
    spells = load_mapping(spells_path) if spells_path else {}
    pools = load_mapping(pools_path) if pools_path else {}
    resolved = load_mapping(resolved_spells_path) if resolved_spells_path else {}
    return GameData.from_dicts(items=items, spells=spells, resolved_spells=resolved, resolved_pools=pools)


def load_sample_data():
    """Load the small demo index that ships with the package."""
    from albioncalc.core.data import GameData

    raw = load_mapping(SAMPLE_INDEX_PATH)
    return GameData.from_dicts(items=raw.get("items", {}), spells=raw.get("spells", {}))
