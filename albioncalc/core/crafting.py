"""Resource return rate (RRR) and silver economics for crafting and refining."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

from .tables import CraftingTables

logger = logging.getLogger(__name__)

# Checked in order; the first match wins.
ARTIFACT_PATTERNS = (
    ('avalonian', re.compile(r'_AVALON$', re.IGNORECASE)),
    ('elder', re.compile(r'_SET1$|_UNDEAD$|_ELDER$', re.IGNORECASE)),
    ('keeper', re.compile(r'_SET2$|_KEEPER$', re.IGNORECASE)),
    ('morgana', re.compile(r'_SET3$|_MORGANA$', re.IGNORECASE)),
    ('heretic', re.compile(r'_SET4$|_HELL$|_HERETIC$', re.IGNORECASE)),
)

_TIER_RE = re.compile(r'T(\d+)')
_LEVEL_RE = re.compile(r'_LEVEL(\d+)', re.IGNORECASE)
_LEVEL_SUFFIX_RE = re.compile(r'_LEVEL\d+(@\d+)?', re.IGNORECASE)
_DOT_ENCHANT_RE = re.compile(r'\.\d+$')
_LEADING_INT_RE = re.compile(r'\s*([+-]?\d+)')


@dataclass(frozen=True)
class CraftingBonusInput:
    zone_quality: int = 1
    hideout_power: int = 1
    use_city_bonus: bool = False
    use_focus: bool = False
    is_on_island: bool = False


@dataclass
class ResourceReturnBreakdown:
    zone_quality_bonus: float
    hideout_power_bonus: float
    city_bonus: float
    focus_bonus: float
    island_penalty: float
    total_bonus: float
    rate: float


def resource_return_rate(total_bonus: float) -> float:
    """Saturating return rate: approaches but never reaches 1."""
    if total_bonus <= 0:
        return 0.0
    return total_bonus / (1 + total_bonus)


def compute_resource_return(inputs: CraftingBonusInput, tables: CraftingTables) -> ResourceReturnBreakdown:
    zone = tables.zone_quality_bonus.get(inputs.zone_quality, 0.0)
    hideout = tables.hideout_power_bonus.get(inputs.hideout_power, 0.0)
    city = tables.city_bonus if inputs.use_city_bonus else 0.0
    focus = tables.focus_bonus if inputs.use_focus else 0.0
    island = tables.island_penalty if inputs.is_on_island else 0.0

    total = zone + hideout + city + focus + island
    return ResourceReturnBreakdown(zone, hideout, city, focus, island, total, resource_return_rate(total))


def total_bonus(inputs: CraftingBonusInput, tables: CraftingTables) -> float:
    return compute_resource_return(inputs, tables).total_bonus


def legacy_flat_return_rate(city: str, category: str, use_focus: bool, tables: CraftingTables) -> float:
    """Flat per-city rate from the old crafting page.

    Doubled with focus and capped at ``legacy_focus_cap``. Gives different
    numbers than ``resource_return_rate`` for the same setup; never combine
    the two.
    """
    rates = tables.legacy_city_rates.get(city, {})
    rate = rates.get(category, rates.get('all', 0.0))
    if use_focus:
        rate = min(rate * 2, tables.legacy_focus_cap)
    return rate


def effective_material_cost(requirements: Iterable[Tuple[str, float]], prices: Mapping[str, float],
                            rate: float) -> float:
    """Silver spent on ``(material_id, amount)`` requirements after returns.

    Materials without a price count as free.
    """
    cost = 0.0
    for material_id, amount in requirements:
        price = prices.get(material_id, 0.0)
        if not price:
            logger.debug("No price for %s", material_id)
        cost += price * amount * (1 - rate)
    return cost


# --- Silver economics ---

@dataclass(frozen=True)
class ParsedItemId:
    base_id: str
    tier: int
    enchantment: int


@dataclass
class JournalProfit:
    profit: float
    fills_needed: int


def _leading_int(text, fallback=0):
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else fallback


def parse_item_id(item_id: str) -> ParsedItemId:
    """Split ``T6_2H_CLAYMORE@2`` style ids into base id, tier and enchantment.

    Enchantment may be written as ``_LEVEL<n>``, ``@<n>`` or ``.<n>``. Ids
    without a ``T<n>`` part are tier 1.
    """
    tier_match = _TIER_RE.search(item_id)
    tier = int(tier_match.group(1)) if tier_match else 1

    level_match = _LEVEL_RE.search(item_id)
    if level_match:
        return ParsedItemId(_LEVEL_SUFFIX_RE.sub('', item_id, count=1), tier, int(level_match.group(1)))
    if '@' in item_id:
        parts = item_id.split('@')
        return ParsedItemId(parts[0], tier, _leading_int(parts[1]))
    if _DOT_ENCHANT_RE.search(item_id):
        parts = item_id.split('.')
        return ParsedItemId(parts[0], tier, _leading_int(parts[1]))
    return ParsedItemId(item_id, tier, 0)


def artifact_type(item_id: str) -> Optional[str]:
    for name, pattern in ARTIFACT_PATTERNS:
        if pattern.search(item_id):
            return name
    return None


def crafting_profit(sell_price: float, material_cost: float, quantity: float, station_fee: float) -> float:
    """Profit when the station fee is a fraction of the gross sale."""
    gross = sell_price * quantity
    return gross - material_cost * quantity - gross * station_fee


def station_fee_per_100(fee_per_100: float, item_tier: int, tables: CraftingTables) -> float:
    """Silver per craft for a station posting ``fee_per_100`` silver per 100 nutrition."""
    nutrition = tables.nutrition_by_tier.get(item_tier, tables.default_nutrition)
    return fee_per_100 / 100 * nutrition


def profit_with_per_100_fee(sell_price: float, material_cost: float, quantity: float, fee_per_100: float,
                            item_tier: int, tables: CraftingTables) -> float:
    fee = station_fee_per_100(fee_per_100, item_tier, tables)
    return (sell_price - material_cost - fee) * quantity


def profit_margin(sell_price: float, total_cost: float) -> float:
    """Margin over cost in percent; 0 when nothing was spent."""
    if total_cost == 0:
        return 0.0
    return (sell_price - total_cost) / total_cost * 100


def roi(profit: float, investment: float) -> float:
    if investment == 0:
        return 0.0
    return profit / investment * 100


def journal_profit(fame_required: float, silver_value: float, fame_per_activity: float,
                   journal_cost: float) -> JournalProfit:
    """Journal return when each fill earns ``fame_per_activity`` fame.

    Silver value and journal cost both scale with the fills needed. With no
    fame per activity ``fills_needed`` is 0.
    """
    fills = math.ceil(fame_required / fame_per_activity) if fame_per_activity > 0 else 0
    return JournalProfit(profit=(silver_value - journal_cost) * fills, fills_needed=fills)
