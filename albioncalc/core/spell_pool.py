"""Weapon spell-pool resolution (inherited reference pool + add/remove)."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .data import ItemRecord, SpellPoolEntry

logger = logging.getLogger(__name__)

ABILITY_SLOTS = (1, 2, 3)


def resolve_spell_pool(weapon_id: str, items: Mapping[str, ItemRecord], visited=None) -> List[SpellPoolEntry]:
    """Expand a weapon's spell list against its reference chain.

    Removals apply to the inherited pool before additions, so re-adding a
    removed id inserts it fresh at the end. A weapon already on the current
    resolution path contributes nothing.
    """
    if visited is None:
        visited = set()
    if weapon_id in visited:
        logger.debug("Spell pool reference cycle at %s", weapon_id)
        return []
    visited.add(weapon_id)

    item = items.get(weapon_id)
    if item is None:
        return []

    spell_list = item.spell_list
    pool: List[SpellPoolEntry] = []
    if spell_list.reference:
        pool = resolve_spell_pool(spell_list.reference, items, visited)

    if spell_list.remove:
        to_remove = set(spell_list.remove)
        pool = [entry for entry in pool if entry.spell_id not in to_remove]

    for added in spell_list.add:
        for idx, existing in enumerate(pool):
            if existing.spell_id == added.spell_id:
                pool[idx] = replace(
                    existing,
                    slots=added.slots if added.slots else existing.slots,
                    tag=added.tag if added.tag else existing.tag,
                )
                break
        else:
            pool.append(added)

    return pool


def is_passive(entry: SpellPoolEntry) -> bool:
    if entry.spell_id.startswith('PASSIVE_'): return True
    return bool(entry.tag) and 'PASSIVE' in entry.tag.upper()


def slot_options(pool: Sequence[SpellPoolEntry], slot: int) -> List[SpellPoolEntry]:
    """Active spells selectable in ability slot ``slot`` (empty slots = any)."""
    return [e for e in pool if not is_passive(e) and (not e.slots or slot in e.slots)]


class SpellPoolCache:
    """Lazily filled per-weapon pool cache owned by one engine instance.

    Item tables never change during a process lifetime, so entries are never
    invalidated.
    """

    def __init__(self, items: Mapping[str, ItemRecord],
                 resolved: Optional[Mapping[str, Sequence[SpellPoolEntry]]] = None):
        self.items = items
        self._pools: Dict[str, Tuple[SpellPoolEntry, ...]] = {k: tuple(v) for k, v in (resolved or {}).items()}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._pools)

    def __contains__(self, weapon_id):
        return weapon_id in self._pools

    def get(self, weapon_id: str) -> List[SpellPoolEntry]:
        pool = self._pools.get(weapon_id)
        if pool is None:
            if weapon_id not in self.items:
                return []
            pool = tuple(resolve_spell_pool(weapon_id, self.items))
            with self._lock:
                pool = self._pools.setdefault(weapon_id, pool)
            logger.debug("Cached spell pool for %s (%d spells)", weapon_id, len(pool))
        return list(pool)
