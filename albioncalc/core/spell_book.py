"""Spell effect resolution: nested effect graphs -> flat damage packets."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .data import (AttributeChange, AttributeChangeOverTime, DamagePacket, SpellDefinition,
                   ValueOverride, map_damage_type)

logger = logging.getLogger(__name__)

AREA_PREFIX = 'Area: '
AURA_PREFIX = 'Aura: '
APPLIED_PREFIX = 'Applied: '


def build_hit_values(base: float, count: int, overrides: Sequence[ValueOverride]) -> List[float]:
    """Per-hit magnitudes for a multi-hit effect.

    Hit ``i`` (1-based) takes the override with the largest threshold <= i,
    ``overrides`` being sorted ascending. With no match the base is used.
    """
    values = []
    for i in range(1, count + 1):
        match = None
        for entry in overrides:
            if entry.min_charges <= i:
                match = entry
        values.append(abs(match.value) if match else base)
    return values


def extract_direct_packets(nodes: Sequence[AttributeChange], label: str, count: Optional[int] = None,
                           interval: Optional[float] = None) -> List[DamagePacket]:
    packets = []
    count = max(1, count or 1)
    for node in nodes:
        if not node.is_damage:
            continue
        base = abs(node.change)
        damage_type = map_damage_type(node.effect_type)
        aoe = node.aoe_bonus or None

        if node.overrides and count > 1:
            hit_values = build_hit_values(base, count, node.overrides)
            if len(set(hit_values)) == 1:
                packets.append(DamagePacket(label, hit_values[0], damage_type, count, interval, aoe))
            else:
                for idx, value in enumerate(hit_values):
                    packets.append(DamagePacket(f"{label} Hit {idx + 1}", value, damage_type, 1, interval, aoe))
            continue

        packets.append(DamagePacket(label, base, damage_type, count, interval, aoe))
    return packets


def extract_dot_packets(nodes: Sequence[AttributeChangeOverTime], label: str) -> List[DamagePacket]:
    # DoT ticks carry their own count/interval; the channel context does not apply.
    packets = []
    for node in nodes:
        if not node.is_damage:
            continue
        packets.append(DamagePacket(
            label,
            abs(node.change),
            map_damage_type(node.effect_type),
            max(1, node.count),
            node.interval or None,
            node.aoe_bonus or None,
        ))
    return packets


class SpellBook:
    """Read-only view over spell definitions and a pre-resolved spell index.

    ``resolved`` entries (already flattened upstream) take precedence over
    ``definitions``. Ids found in neither are non-damaging spells as far as
    the engine is concerned and resolve to no packets.
    """

    def __init__(self, definitions: Optional[Mapping[str, SpellDefinition]] = None,
                 resolved: Optional[Mapping[str, Sequence[DamagePacket]]] = None):
        self.definitions: Mapping[str, SpellDefinition] = definitions or {}
        self.resolved: Mapping[str, Sequence[DamagePacket]] = resolved or {}

    def __contains__(self, spell_id):
        return spell_id in self.resolved or spell_id in self.definitions

    def resolve_packets(self, spell_id: str) -> List[DamagePacket]:
        if spell_id in self.resolved:
            return list(self.resolved[spell_id])
        if spell_id not in self.definitions:
            logger.debug("Spell %s not in spell index, treating as non-damaging", spell_id)
            return []
        return self._expand(spell_id, set())

    def resolve_all(self) -> Dict[str, Tuple[DamagePacket, ...]]:
        """Flatten every known definition; each id gets its own visited set."""
        index = {spell_id: tuple(self._expand(spell_id, set())) for spell_id in self.definitions}
        index.update({k: tuple(v) for k, v in self.resolved.items()})
        return index

    def _expand(self, spell_id, visited, count=None, interval=None) -> List[DamagePacket]:
        spell = self.definitions.get(spell_id)
        if spell is None:
            return []
        if spell_id in visited:
            logger.debug("Spell %s already expanded in this resolution, skipping", spell_id)
            return []
        visited.add(spell_id)

        packets = extract_direct_packets(spell.direct, 'Direct', count, interval)
        packets += extract_dot_packets(spell.over_time, 'DoT')

        for channel in spell.channels:
            packets += extract_direct_packets(channel.direct, 'Channel', channel.count, channel.interval)
            packets += extract_dot_packets(channel.over_time, 'Channel DoT')
            for target in channel.apply_spells:
                nested = self._expand(target, visited, channel.count, channel.interval)
                packets += [p.prefixed(APPLIED_PREFIX) for p in nested]

        for refs, prefix in ((spell.areas, AREA_PREFIX), (spell.auras, AURA_PREFIX),
                             (spell.apply_spells, APPLIED_PREFIX)):
            for target in refs:
                packets += [p.prefixed(prefix) for p in self._expand(target, visited)]

        return packets
