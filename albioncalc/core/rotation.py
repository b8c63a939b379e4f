"""Burst / sustain totals of a weapon rotation against several armor profiles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from albioncalc.utils.numeric import round_half_up

from .damage import evaluate_auto_attack, evaluate_spell_damage, get_weapon
from .data import ItemRecord, ResistanceProfile
from .spell_book import SpellBook
from .spell_pool import ABILITY_SLOTS

logger = logging.getLogger(__name__)

# Two autos are assumed to land inside one burst window.
AUTO_ATTACKS_PER_BURST = 2
# Sustain window is 10s against a 3s burst window.
SUSTAIN_WINDOW_RATIO = 10 / 3
MAX_ROTATION_SPELLS = len(ABILITY_SLOTS)


@dataclass
class ProfileRotation:
    profile: ResistanceProfile
    spells: List[Tuple[str, int]] = field(default_factory=list)
    auto_attack: int = 0
    burst: int = 0
    sustain: int = 0

    @property
    def label(self):
        return self.profile.label


@dataclass
class RotationResult:
    weapon_id: str
    spell_ids: List[str]
    include_autos: bool
    profiles: List[ProfileRotation] = field(default_factory=list)

    def by_label(self) -> Dict[str, ProfileRotation]:
        return {row.label: row for row in self.profiles}


def aggregate_rotation(items: Mapping[str, ItemRecord], spell_book: SpellBook, weapon_id: str,
                       item_power: float, spell_ids: Sequence[Optional[str]],
                       profiles: Sequence[ResistanceProfile], include_autos: bool = True,
                       ability_bonus: float = 1.0, targets_hit: int = 1) -> RotationResult:
    """Sum up to three spells (plus autos) for each resistance profile.

    ``spell_ids`` holds one entry per ability slot; ``None`` marks an empty
    slot. Profiles are evaluated independently.
    """
    if len(spell_ids) > MAX_ROTATION_SPELLS:
        raise ValueError(f"A rotation holds at most {MAX_ROTATION_SPELLS} spells, got {len(spell_ids)}")
    get_weapon(items, weapon_id)

    selected = [spell_id for spell_id in spell_ids if spell_id]
    n_profiles = len(profiles)

    spell_totals = np.zeros((len(selected), n_profiles), dtype=np.int64)
    auto_totals = np.zeros(n_profiles, dtype=np.int64)

    for col, profile in enumerate(profiles):
        for row, spell_id in enumerate(selected):
            result = evaluate_spell_damage(items, spell_book, weapon_id, item_power, spell_id,
                                           profile.armor, profile.magic_resist,
                                           ability_bonus=ability_bonus, targets_hit=targets_hit)
            spell_totals[row, col] = result.total
        if include_autos:
            auto = evaluate_auto_attack(items, weapon_id, item_power, profile.armor, profile.magic_resist,
                                        ability_bonus=ability_bonus)
            auto_totals[col] = auto.total

    burst = spell_totals.sum(axis=0) + AUTO_ATTACKS_PER_BURST * auto_totals

    result = RotationResult(weapon_id, selected, include_autos)
    for col, profile in enumerate(profiles):
        burst_total = int(burst[col])
        result.profiles.append(ProfileRotation(
            profile=profile,
            spells=[(spell_id, int(spell_totals[row, col])) for row, spell_id in enumerate(selected)],
            auto_attack=int(auto_totals[col]),
            burst=burst_total,
            sustain=round_half_up(burst_total * SUSTAIN_WINDOW_RATIO),
        ))
        logger.debug("Rotation %s vs %s: burst=%d", weapon_id, profile.label, burst_total)
    return result
