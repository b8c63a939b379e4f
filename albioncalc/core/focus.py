"""Focus cost after Focus Cost Efficiency (FCE).

Every ``halving_threshold`` points of FCE halve the focus cost, with no cap:

    actual = base / 2 ** (total_fce / 10000)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from albioncalc.errors import UnknownCategoryError

from .crafting import artifact_type, parse_item_id
from .tables import FCECategory, FocusTables

logger = logging.getLogger(__name__)

GEAR = 'gear'
FOOD = 'food'
POTION = 'potion'
REFINING = 'refining'
FOCUS_CATEGORIES = (GEAR, FOOD, POTION, REFINING)


@dataclass(frozen=True)
class FocusCostInput:
    mastery_level: float
    spec_level: float
    other_spec_levels: Sequence[float] = field(default_factory=tuple)


@dataclass
class FocusCostBreakdown:
    base_focus: float
    mastery_fce: float
    unique_fce: float
    mutual_fce: float
    total_fce: float
    reduction_factor: float
    actual_cost: float

    @property
    def percent_of_base(self):
        if not self.base_focus:
            return 0.0
        return self.actual_cost / self.base_focus * 100


@dataclass
class FocusComparison:
    current_cost: float
    target_cost: float
    savings: float
    savings_percent: float


@dataclass
class DailyFocusBudget:
    total_focus_needed: float
    focus_covered: float
    affordable_crafts: int
    can_afford: bool


def lookup_fce(tables: FocusTables, category: str, subcategory: str, tier: Optional[int] = None,
               enchantment: int = 0, is_artifact: bool = False, is_crystal: bool = False,
               item_id: Optional[str] = None) -> FCECategory:
    """Base focus and per-level FCE rates for one craftable.

    Artifact and crystal gear keep the subcategory's base focus but use their
    own unique/mutual rates (crystal wins when both are set). Refining base
    focus depends on ``tier`` and is scaled by the enchantment multiplier.

    When ``item_id`` is given it fills in a missing tier or enchantment, and
    an artifact suffix on its base id sets ``is_artifact``.
    """
    if item_id:
        parsed = parse_item_id(item_id)
        if tier is None:
            tier = parsed.tier
        enchantment = enchantment or parsed.enchantment
        is_artifact = is_artifact or artifact_type(parsed.base_id) is not None

    key = (subcategory or '').lower()

    if category == GEAR:
        data = tables.gear.get(key)
        if data is None:
            raise UnknownCategoryError(f"gear/{subcategory}")
        if is_crystal:
            return replace(data, spec_unique_fce=tables.crystal_rates[0], spec_mutual_fce=tables.crystal_rates[1])
        if is_artifact:
            return replace(data, spec_unique_fce=tables.artifact_rates[0], spec_mutual_fce=tables.artifact_rates[1])
        return data

    if category in (FOOD, POTION):
        data = getattr(tables, category).get(key)
        if data is None:
            raise UnknownCategoryError(f"{category}/{subcategory}")
        return data

    if category == REFINING:
        material = tables.refining.get(key)
        if material is None or tier not in material.base_focus_by_tier:
            raise UnknownCategoryError(f"refining/{subcategory} T{tier}")
        multiplier = tables.refining_enchant_multiplier.get(enchantment, 1.0)
        return FCECategory(
            base_focus=material.base_focus_by_tier[tier] * multiplier,
            spec_unique_fce=material.spec_unique_fce,
            spec_mutual_fce=material.spec_mutual_fce,
        )

    raise UnknownCategoryError(category)


def compute_focus_cost(inputs: FocusCostInput, rates: FCECategory, tables: FocusTables) -> FocusCostBreakdown:
    mastery_fce = inputs.mastery_level * tables.mastery_fce_per_level
    unique_fce = inputs.spec_level * rates.spec_unique_fce
    mutual_fce = sum(inputs.other_spec_levels) * rates.spec_mutual_fce
    total = mastery_fce + unique_fce + mutual_fce

    reduction = 2 ** (total / tables.halving_threshold)
    logger.debug("FCE %.1f -> reduction x%.3f", total, reduction)
    return FocusCostBreakdown(
        base_focus=rates.base_focus,
        mastery_fce=mastery_fce,
        unique_fce=unique_fce,
        mutual_fce=mutual_fce,
        total_fce=total,
        reduction_factor=reduction,
        actual_cost=rates.base_focus / reduction,
    )


def compare_focus_costs(current: FocusCostInput, rates: FCECategory, tables: FocusTables,
                        **changes) -> FocusComparison:
    """Focus saved per craft by moving from ``current`` to ``current`` + ``changes``."""
    before = compute_focus_cost(current, rates, tables).actual_cost
    after = compute_focus_cost(replace(current, **changes), rates, tables).actual_cost
    savings = before - after
    return FocusComparison(before, after, savings, savings / before * 100 if before else 0.0)


def fce_for_cost_fraction(fraction: float, tables: FocusTables) -> float:
    """FCE needed to bring the cost down to ``fraction`` of base (0 < fraction <= 1)."""
    if not 0 < fraction <= 1:
        raise ValueError(f"fraction must be in (0, 1], got {fraction}")
    return math.log2(1 / fraction) * tables.halving_threshold


def daily_focus_budget(cost_per_craft: float, crafts_per_day: int, tables: FocusTables,
                       focus_per_day: Optional[float] = None) -> DailyFocusBudget:
    if cost_per_craft <= 0:
        raise ValueError(f"cost_per_craft must be positive, got {cost_per_craft}")
    pool = tables.premium_focus_per_day if focus_per_day is None else focus_per_day
    needed = cost_per_craft * crafts_per_day
    return DailyFocusBudget(
        total_focus_needed=needed,
        focus_covered=min(needed, pool),
        affordable_crafts=int(pool // cost_per_craft),
        can_afford=needed <= pool,
    )
