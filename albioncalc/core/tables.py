"""Progression, focus and crafting tables (loaded once, never mutated)."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from albioncalc.errors import DataFormatError

from .data import ResistanceProfile


def _frozen(mapping) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


def _require(raw, key):
    if key not in raw:
        raise DataFormatError(f"tables: missing section '{key}'")
    return raw[key]


@dataclass(frozen=True)
class ProgressionTables:
    base_ip_by_tier: Mapping[str, float]
    mastery_modifier_by_tier: Mapping[str, float]
    mutual_ip_rates: Mapping[str, float]
    mastery_ip_per_level: float = 0.2
    unique_ip_per_level: float = 2.0
    default_base_ip: float = 700.0

    def base_ip(self, tier: str) -> float:
        return self.base_ip_by_tier.get(tier, self.default_base_ip)

    def mastery_modifier(self, tier: str) -> float:
        return self.mastery_modifier_by_tier.get(tier, 0.0)

    @classmethod
    def from_dict(cls, raw):
        return cls(
            base_ip_by_tier=_frozen(_require(raw, 'base_ip_by_tier')),
            mastery_modifier_by_tier=_frozen(_require(raw, 'mastery_modifier_by_tier')),
            mutual_ip_rates=_frozen(_require(raw, 'mutual_ip_rates')),
            mastery_ip_per_level=float(raw.get('mastery_ip_per_level', 0.2)),
            unique_ip_per_level=float(raw.get('unique_ip_per_level', 2.0)),
            default_base_ip=float(raw.get('default_base_ip', 700)),
        )


@dataclass(frozen=True)
class FCECategory:
    """Focus cost data for one craftable category."""

    base_focus: float
    spec_unique_fce: float
    spec_mutual_fce: float
    bonus_city: Optional[str] = None

    @classmethod
    def from_dict(cls, raw):
        return cls(
            base_focus=float(raw['base_focus']),
            spec_unique_fce=float(raw['spec_unique_fce']),
            spec_mutual_fce=float(raw['spec_mutual_fce']),
            bonus_city=raw.get('bonus_city'),
        )


@dataclass(frozen=True)
class RefiningFCE:
    base_focus_by_tier: Mapping[int, float]
    spec_unique_fce: float
    spec_mutual_fce: float


@dataclass(frozen=True)
class FocusTables:
    gear: Mapping[str, FCECategory]
    food: Mapping[str, FCECategory]
    potion: Mapping[str, FCECategory]
    refining: Mapping[str, RefiningFCE]
    artifact_rates: Tuple[float, float] = (15.0, 30.0)
    crystal_rates: Tuple[float, float] = (2.15, 30.0)
    refining_enchant_multiplier: Mapping[int, float] = field(default_factory=lambda: _frozen({0: 1.0}))
    halving_threshold: float = 10000.0
    mastery_fce_per_level: float = 30.0
    premium_focus_per_day: float = 10000.0

    @classmethod
    def from_dict(cls, raw):
        refining = {}
        for material, entry in _require(raw, 'refining').items():
            refining[material] = RefiningFCE(
                base_focus_by_tier=_frozen({int(k): float(v) for k, v in entry['base_focus'].items()}),
                spec_unique_fce=float(entry['spec_unique_fce']),
                spec_mutual_fce=float(entry['spec_mutual_fce']),
            )
        artifact = raw.get('artifact', {})
        crystal = raw.get('crystal', {})
        return cls(
            gear=_frozen({k: FCECategory.from_dict(v) for k, v in _require(raw, 'gear').items()}),
            food=_frozen({k: FCECategory.from_dict(v) for k, v in raw.get('food', {}).items()}),
            potion=_frozen({k: FCECategory.from_dict(v) for k, v in raw.get('potion', {}).items()}),
            refining=_frozen(refining),
            artifact_rates=(float(artifact.get('spec_unique_fce', 15)), float(artifact.get('spec_mutual_fce', 30))),
            crystal_rates=(float(crystal.get('spec_unique_fce', 2.15)), float(crystal.get('spec_mutual_fce', 30))),
            refining_enchant_multiplier=_frozen(
                {int(k): float(v) for k, v in raw.get('refining_enchant_multiplier', {0: 1.0}).items()}),
            halving_threshold=float(raw.get('halving_threshold', 10000)),
            mastery_fce_per_level=float(raw.get('mastery_fce_per_level', 30)),
            premium_focus_per_day=float(raw.get('premium_focus_per_day', 10000)),
        )


@dataclass(frozen=True)
class CraftingTables:
    zone_quality_bonus: Mapping[int, float]
    hideout_power_bonus: Mapping[int, float]
    city_bonus: float = 0.15
    focus_bonus: float = 0.59
    island_penalty: float = -0.18
    legacy_city_rates: Mapping[str, Mapping[str, float]] = field(default_factory=lambda: _frozen({}))
    legacy_focus_cap: float = 0.5
    nutrition_by_tier: Mapping[int, float] = field(default_factory=lambda: _frozen({}))
    default_nutrition: float = 48.0

    @classmethod
    def from_dict(cls, raw):
        legacy = raw.get('legacy', {})
        station = raw.get('station', {})
        return cls(
            zone_quality_bonus=_frozen({int(k): float(v) for k, v in _require(raw, 'zone_quality_bonus').items()}),
            hideout_power_bonus=_frozen({int(k): float(v) for k, v in _require(raw, 'hideout_power_bonus').items()}),
            city_bonus=float(raw.get('city_bonus', 0.15)),
            focus_bonus=float(raw.get('focus_bonus', 0.59)),
            island_penalty=float(raw.get('island_penalty', -0.18)),
            legacy_city_rates=_frozen({city: _frozen(rates) for city, rates in legacy.get('city_rates', {}).items()}),
            legacy_focus_cap=float(legacy.get('focus_cap', 0.5)),
            nutrition_by_tier=_frozen({int(k): float(v) for k, v in station.get('nutrition_by_tier', {}).items()}),
            default_nutrition=float(station.get('default_nutrition', 48)),
        )


@dataclass(frozen=True)
class GameTables:
    progression: ProgressionTables
    focus: FocusTables
    crafting: CraftingTables
    resistance_profiles: Mapping[str, ResistanceProfile]
    rotation_profiles: Tuple[str, ...] = ('cloth', 'leather', 'plate')

    def profiles(self, names=None):
        return [self.resistance_profiles[name] for name in (names or self.rotation_profiles)]

    @classmethod
    def from_dict(cls, raw: Dict):
        profiles = {}
        for name, entry in _require(raw, 'resistance_profiles').items():
            profiles[name] = ResistanceProfile(
                label=str(entry.get('label', name)),
                armor=float(entry['armor']),
                magic_resist=float(entry['magic_resist']),
            )
        rotation = tuple(raw.get('rotation_profiles', ('cloth', 'leather', 'plate')))
        for name in rotation:
            if name not in profiles:
                raise DataFormatError(f"tables: rotation profile '{name}' is not defined")
        return cls(
            progression=ProgressionTables.from_dict(_require(raw, 'progression')),
            focus=FocusTables.from_dict(_require(raw, 'focus')),
            crafting=CraftingTables.from_dict(_require(raw, 'crafting')),
            resistance_profiles=_frozen(profiles),
            rotation_profiles=rotation,
        )
