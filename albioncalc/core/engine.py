"""Engine facade: one object holding the loaded indexes, tables and pool cache."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from albioncalc.utils.loader import load_game_data, load_sample_data, load_tables

from . import crafting, damage, focus, item_power, rotation
from .data import DamagePacket, GameData, SpellPoolEntry
from .spell_book import SpellBook
from .spell_pool import SpellPoolCache, slot_options
from .tables import GameTables

logger = logging.getLogger(__name__)


class Engine:
    def __init__(self, data: GameData, tables: GameTables):
        self.data = data
        self.tables = tables
        self.spell_book = SpellBook(data.spells, data.resolved_spells)
        self.pools = SpellPoolCache(data.items, data.resolved_pools)
        logger.info("Engine ready: %d items, %d spells (%d pre-resolved)",
                    len(data.items), len(data.spells), len(data.resolved_spells))

    @classmethod
    def from_files(cls, items_path, spells_path=None, pools_path=None, resolved_spells_path=None,
                   tables_path=None) -> 'Engine':
        data = load_game_data(items_path, spells_path, pools_path, resolved_spells_path)
        return cls(data, load_tables(tables_path))

    @classmethod
    def with_sample_data(cls, tables_path=None) -> 'Engine':
        return cls(load_sample_data(), load_tables(tables_path))

    # --- Combat track ---

    def resolve_spell_pool(self, weapon_id: str) -> List[SpellPoolEntry]:
        return self.pools.get(weapon_id)

    def slot_options(self, weapon_id: str, slot: int) -> List[SpellPoolEntry]:
        return slot_options(self.pools.get(weapon_id), slot)

    def resolve_damage_packets(self, spell_id: str) -> List[DamagePacket]:
        return self.spell_book.resolve_packets(spell_id)

    def evaluate_spell_damage(self, weapon_id, item_power, spell_id, armor, magic_resist,
                              **modifiers) -> damage.DamageResult:
        return damage.evaluate_spell_damage(self.data.items, self.spell_book, weapon_id, item_power,
                                            spell_id, armor, magic_resist, **modifiers)

    def evaluate_auto_attack(self, weapon_id, item_power, armor, magic_resist,
                             **modifiers) -> damage.DamageResult:
        return damage.evaluate_auto_attack(self.data.items, weapon_id, item_power, armor, magic_resist,
                                           **modifiers)

    def evaluate_rotation(self, weapon_id: str, item_power: float, spell_ids: Sequence[Optional[str]],
                          include_autos: bool = True, profile_names: Optional[Sequence[str]] = None,
                          **modifiers) -> rotation.RotationResult:
        """Burst/sustain per resistance profile (cloth, leather, plate unless named)."""
        return rotation.aggregate_rotation(self.data.items, self.spell_book, weapon_id, item_power, spell_ids,
                                           self.tables.profiles(profile_names), include_autos, **modifiers)

    # --- Progression track ---

    def compute_item_power(self, inputs: item_power.ItemPowerInput) -> item_power.ItemPowerBreakdown:
        return item_power.compute_item_power(inputs, self.tables.progression)

    def compute_focus_cost(self, inputs: focus.FocusCostInput, category: str, subcategory: str,
                           tier: Optional[int] = None, enchantment: int = 0, is_artifact: bool = False,
                           is_crystal: bool = False, item_id: Optional[str] = None) -> focus.FocusCostBreakdown:
        rates = focus.lookup_fce(self.tables.focus, category, subcategory, tier, enchantment,
                                 is_artifact, is_crystal, item_id=item_id)
        return focus.compute_focus_cost(inputs, rates, self.tables.focus)

    # --- Crafting track ---

    def compute_resource_return(self, inputs: crafting.CraftingBonusInput) -> crafting.ResourceReturnBreakdown:
        return crafting.compute_resource_return(inputs, self.tables.crafting)

    def station_fee(self, fee_per_100: float, item_tier: int) -> float:
        return crafting.station_fee_per_100(fee_per_100, item_tier, self.tables.crafting)

    def profit_with_station_fee(self, sell_price: float, material_cost: float, quantity: float,
                                fee_per_100: float, item_id: str) -> float:
        """Profit for ``quantity`` crafts of ``item_id``; the tier comes from the id."""
        tier = crafting.parse_item_id(item_id).tier
        return crafting.profit_with_per_100_fee(sell_price, material_cost, quantity, fee_per_100, tier,
                                                self.tables.crafting)
