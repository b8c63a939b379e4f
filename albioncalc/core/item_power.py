"""Item power from tier plus destiny board (mastery / specialization) levels.

    final = base(tier) + board + board * modifier(tier)
    board = mastery * 0.2 + equipped_spec * 2.0 + sum(spec * mutual_rate)

Every invested specialization of the mastery, the equipped one included,
contributes mutual IP. Only the equipped one contributes unique IP.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Mapping, Optional, Tuple

from albioncalc.utils.numeric import round_half_up

from .tables import ProgressionTables

logger = logging.getLogger(__name__)

SLOTS = ('mainhand', 'offhand', 'armor', 'gathering')
SIMPLE_TYPES = ('simple', '2.simple', '3.simple')


@dataclass(frozen=True)
class SpecInvestment:
    level: float
    equipment_type: str = 'simple'


@dataclass(frozen=True)
class ItemPowerInput:
    item_tier: str
    equipment_type: str
    mastery_level: float
    equipped_spec_id: str
    equipped_spec_level: float
    specs_in_mastery: Mapping[str, SpecInvestment] = field(default_factory=dict)
    slot: str = 'mainhand'


@dataclass(frozen=True)
class SpecContribution:
    spec_id: str
    level: float
    unique_ip: float
    mutual_ip: float


@dataclass
class ItemPowerBreakdown:
    base_ip: float
    mastery_ip: float
    unique_ip: float
    mutual_ip: float
    destiny_board_total: float
    mastery_modifier_percent: float
    mastery_modifier_bonus: float
    final_ip: int
    by_specialization: List[SpecContribution] = field(default_factory=list)


def mutual_ip_rate(equipment_type: str, slot: Optional[str], tables: ProgressionTables) -> float:
    """IP per level a specialization of ``equipment_type`` shares with the item."""
    rates = tables.mutual_ip_rates
    kind = (equipment_type or '').lower()

    if slot == 'offhand':
        if 'artifact' in kind or 'avalonian' in kind:
            return rates['offhand_artifact']
        return rates['offhand_simple']

    if slot == 'armor':
        if kind in SIMPLE_TYPES:
            return rates['armor_simple']
        if kind == 'royal': return rates['armor_royal']
        if 'artifact' in kind: return rates['armor_artifact']
        if kind == 'avalonian': return rates['armor_avalonian']
        if kind == 'misty': return rates['armor_misty']
        if kind == 'crystal': return rates['armor_crystal']

    if slot in (None, 'mainhand'):
        if kind in SIMPLE_TYPES:
            return rates['weapon_simple']
        if 'artifact' in kind: return rates['weapon_artifact']
        if kind == 'avalonian': return rates['weapon_avalonian']
        if kind == 'crystal': return rates['weapon_crystal']

    if slot == 'gathering':
        return rates['gathering_simple']

    return rates['default']


def compute_item_power(inputs: ItemPowerInput, tables: ProgressionTables) -> ItemPowerBreakdown:
    base_ip = tables.base_ip(inputs.item_tier)
    mastery_ip = inputs.mastery_level * tables.mastery_ip_per_level
    unique_ip = inputs.equipped_spec_level * tables.unique_ip_per_level

    equipped_mutual = inputs.equipped_spec_level * mutual_ip_rate(inputs.equipment_type, inputs.slot, tables)
    rows = [SpecContribution(inputs.equipped_spec_id, inputs.equipped_spec_level, unique_ip, equipped_mutual)]
    mutual_ip = equipped_mutual

    for spec_id, spec in inputs.specs_in_mastery.items():
        if spec_id == inputs.equipped_spec_id:
            continue
        spec_mutual = spec.level * mutual_ip_rate(spec.equipment_type, inputs.slot, tables)
        mutual_ip += spec_mutual
        rows.append(SpecContribution(spec_id, spec.level, 0.0, spec_mutual))

    board = mastery_ip + unique_ip + mutual_ip
    modifier = tables.mastery_modifier(inputs.item_tier)
    modifier_bonus = board * modifier

    return ItemPowerBreakdown(
        base_ip=base_ip,
        mastery_ip=mastery_ip,
        unique_ip=unique_ip,
        mutual_ip=mutual_ip,
        destiny_board_total=board,
        mastery_modifier_percent=modifier * 100,
        mastery_modifier_bonus=modifier_bonus,
        final_ip=round_half_up(base_ip + board + modifier_bonus),
        by_specialization=rows,
    )


def ip_difference(current: ItemPowerInput, tables: ProgressionTables, **changes) -> int:
    """Final IP gained (or lost) by applying ``changes`` to ``current``."""
    target = replace(current, **changes)
    return compute_item_power(target, tables).final_ip - compute_item_power(current, tables).final_ip


def ip_per_level(inputs: ItemPowerInput, spec_id: str, tables: ProgressionTables) -> int:
    if spec_id == inputs.equipped_spec_id:
        return ip_difference(inputs, tables, equipped_spec_level=inputs.equipped_spec_level + 1)

    specs = dict(inputs.specs_in_mastery)
    spec = specs.get(spec_id, SpecInvestment(0))
    specs[spec_id] = replace(spec, level=spec.level + 1)
    return ip_difference(inputs, tables, specs_in_mastery=specs)


def find_optimal_spec(inputs: ItemPowerInput, spec_ids: Iterable[str],
                      tables: ProgressionTables) -> Optional[Tuple[str, int]]:
    """Spec whose next level adds the most final IP, or None if none gains any.

    Ties keep the first candidate.
    """
    best: Optional[Tuple[str, int]] = None
    for spec_id in spec_ids:
        gain = ip_per_level(inputs, spec_id, tables)
        if gain > (best[1] if best else 0):
            best = (spec_id, gain)
    logger.debug("Best next specialization: %s", best)
    return best
