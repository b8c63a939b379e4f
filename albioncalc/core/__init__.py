"""Core calculation logic for albioncalc."""

from .crafting import (CraftingBonusInput, artifact_type, compute_resource_return, crafting_profit, journal_profit,
                       parse_item_id, profit_margin, resource_return_rate, roi, station_fee_per_100)
from .damage import DamageResult, evaluate_auto_attack, evaluate_spell_damage
from .data import GameData, ItemRecord, ResistanceProfile
from .engine import Engine
from .focus import FocusCostInput, compute_focus_cost, lookup_fce
from .item_power import ItemPowerInput, SpecInvestment, compute_item_power
from .player import CharacterProgression
from .rotation import aggregate_rotation
from .spell_book import SpellBook
from .spell_pool import SpellPoolCache, resolve_spell_pool, slot_options
from .tables import GameTables

__all__ = [
    "Engine",
    "GameData",
    "GameTables",
    "ItemRecord",
    "ResistanceProfile",
    "SpellBook",
    "SpellPoolCache",
    "resolve_spell_pool",
    "slot_options",
    "DamageResult",
    "evaluate_spell_damage",
    "evaluate_auto_attack",
    "aggregate_rotation",
    "ItemPowerInput",
    "SpecInvestment",
    "compute_item_power",
    "FocusCostInput",
    "compute_focus_cost",
    "lookup_fce",
    "CraftingBonusInput",
    "compute_resource_return",
    "resource_return_rate",
    "crafting_profit",
    "station_fee_per_100",
    "profit_margin",
    "roi",
    "journal_profit",
    "parse_item_id",
    "artifact_type",
    "CharacterProgression",
]
