"""Damage evaluation for one spell cast or one auto-attack."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from albioncalc.errors import UnknownItemError
from albioncalc.utils.numeric import round_half_up

from .data import MAGIC, PHYSICAL, TRUE, DamagePacket, ItemRecord
from .spell_book import SpellBook

logger = logging.getLogger(__name__)

PF_BY_HANDS = {
    '1h': 1.0825,
    '2h': 1.0918,
}
AOE_MULTIPLIER_CAP = 1.56


@dataclass(frozen=True)
class EvaluatedPacket:
    packet: DamagePacket
    per_packet: int
    total: int

    @property
    def label(self):
        return self.packet.label


@dataclass
class DamageResult:
    packets: List[EvaluatedPacket] = field(default_factory=list)
    total: int = 0
    debug: Dict[str, Any] = field(default_factory=dict)


def power_factor(item: ItemRecord) -> float:
    return PF_BY_HANDS['2h' if item.is_two_handed else '1h']


def ip_multiplier(item_power: float, two_handed: bool) -> float:
    pf = PF_BY_HANDS['2h' if two_handed else '1h']
    return pf ** (item_power / 100)


def mitigation(resistance: float) -> float:
    """Fraction of raw damage that lands through ``resistance``."""
    return 100 / (100 + max(0, resistance))


def packet_mitigation(damage_type: str, armor: float, magic_resist: float) -> float:
    if damage_type == TRUE:
        return 1.0
    if damage_type == MAGIC:
        return mitigation(magic_resist)
    return mitigation(armor)


def aoe_multiplier(targets_hit: int, bonus_per_target: Optional[float]) -> float:
    if not bonus_per_target:
        return 1.0
    return min(AOE_MULTIPLIER_CAP, 1 + (targets_hit - 1) * bonus_per_target)


def get_weapon(items: Mapping[str, ItemRecord], weapon_id: str) -> ItemRecord:
    item = items.get(weapon_id)
    if item is None:
        raise UnknownItemError(weapon_id)
    return item


def _debug_bundle(item, item_power, armor, magic_resist, ability_bonus, disarray):
    pf = power_factor(item)
    return {
        'ip_multiplier': pf ** (item_power / 100),
        'ap': item.ability_power,
        'pf': pf,
        'mitigation_used': {
            PHYSICAL: mitigation(armor),
            MAGIC: mitigation(magic_resist),
        },
        'ability_bonus': ability_bonus,
        'disarray_multiplier': disarray,
    }


def evaluate_packets(packets, item: ItemRecord, item_power: float, armor: float, magic_resist: float,
                     ability_bonus: float = 1.0, targets_hit: int = 1, disarray: float = 1.0) -> List[EvaluatedPacket]:
    scale = (item.ability_power / 100) * ip_multiplier(item_power, item.is_two_handed)
    evaluated = []
    for packet in packets:
        raw = packet.base * scale
        per_packet = round_half_up(
            raw
            * packet_mitigation(packet.damage_type, armor, magic_resist)
            * ability_bonus
            * aoe_multiplier(targets_hit, packet.aoe_bonus_per_target)
            * disarray
        )
        evaluated.append(EvaluatedPacket(packet, per_packet, per_packet * packet.count))
    return evaluated


def evaluate_spell_damage(items: Mapping[str, ItemRecord], spell_book: SpellBook, weapon_id: str,
                          item_power: float, spell_id: str, armor: float, magic_resist: float,
                          ability_bonus: float = 1.0, targets_hit: int = 1,
                          disarray_attacker: float = 1.0, disarray_target: float = 1.0) -> DamageResult:
    """Damage of one cast of ``spell_id`` with ``weapon_id`` at ``item_power``.

    Raises UnknownItemError when the weapon is missing. A spell missing from
    the spell book evaluates to no packets and a zero total.
    """
    item = get_weapon(items, weapon_id)
    disarray = disarray_attacker * disarray_target
    debug = _debug_bundle(item, item_power, armor, magic_resist, ability_bonus, disarray)

    if spell_id not in spell_book:
        logger.debug("No damage data for spell %s", spell_id)
        debug['missing_spell'] = spell_id
        return DamageResult([], 0, debug)

    packets = evaluate_packets(spell_book.resolve_packets(spell_id), item, item_power, armor, magic_resist,
                               ability_bonus, targets_hit, disarray)
    return DamageResult(packets, sum(p.total for p in packets), debug)


def evaluate_auto_attack(items: Mapping[str, ItemRecord], weapon_id: str, item_power: float, armor: float,
                         magic_resist: float, ability_bonus: float = 1.0, disarray_attacker: float = 1.0,
                         disarray_target: float = 1.0) -> DamageResult:
    item = get_weapon(items, weapon_id)
    disarray = disarray_attacker * disarray_target
    base = item.attack_damage if item.attack_damage is not None else 0.0
    packet = DamagePacket('Auto Attack', base, PHYSICAL, 1)
    packets = evaluate_packets([packet], item, item_power, armor, magic_resist, ability_bonus, 1, disarray)
    return DamageResult(packets, packets[0].total,
                        _debug_bundle(item, item_power, armor, magic_resist, ability_bonus, disarray))
