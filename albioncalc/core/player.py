"""Per-character destiny board levels."""

from __future__ import annotations

import json
import logging
import math
import uuid
from typing import Dict, Iterable, Mapping, Optional

from albioncalc.errors import DataFormatError

from .focus import FocusCostInput
from .item_power import ItemPowerInput, SpecInvestment

logger = logging.getLogger(__name__)

MAX_MASTERY_LEVEL = 100
MAX_SPEC_LEVEL = 120


def _clamp(level, upper):
    return max(0, min(upper, level))


def _parse_levels(raw, key):
    """Imported ``{id: level}`` map; numeric strings are accepted."""
    levels = raw.get(key) or {}
    if not isinstance(levels, dict):
        raise DataFormatError(f"Character '{key}' must be a mapping")
    parsed = {}
    for level_id, level in levels.items():
        if isinstance(level, bool):
            raise DataFormatError(f"Character {key}[{level_id}]: {level!r} is not a level")
        try:
            value = float(level)
        except (TypeError, ValueError) as exc:
            raise DataFormatError(f"Character {key}[{level_id}]: {level!r} is not a level") from exc
        if math.isnan(value):
            raise DataFormatError(f"Character {key}[{level_id}]: level is NaN")
        parsed[level_id] = value
    return parsed


class CharacterProgression:
    """Mastery and specialization levels of one character.

    Levels are clamped here, on every write. The calculators take whatever
    they are given.
    """

    def __init__(self, name: str, masteries: Optional[Mapping[str, float]] = None,
                 specializations: Optional[Mapping[str, float]] = None, character_id: Optional[str] = None):
        self.character_id = character_id or uuid.uuid4().hex
        self.name = name
        self.masteries: Dict[str, float] = {}
        self.specializations: Dict[str, float] = {}

        for mastery_id, level in (masteries or {}).items():
            self.set_mastery(mastery_id, level)
        for spec_id, level in (specializations or {}).items():
            self.set_specialization(spec_id, level)

    def set_mastery(self, mastery_id: str, level: float) -> float:
        clamped = _clamp(level, MAX_MASTERY_LEVEL)
        if clamped != level:
            logger.debug("Mastery %s level %s clamped to %s", mastery_id, level, clamped)
        self.masteries[mastery_id] = clamped
        return clamped

    def set_specialization(self, spec_id: str, level: float) -> float:
        clamped = _clamp(level, MAX_SPEC_LEVEL)
        if clamped != level:
            logger.debug("Specialization %s level %s clamped to %s", spec_id, level, clamped)
        self.specializations[spec_id] = clamped
        return clamped

    def level_up_specialization(self, spec_id: str, levels: float = 1) -> float:
        return self.set_specialization(spec_id, self.specialization_level(spec_id) + levels)

    def mastery_level(self, mastery_id: str) -> float:
        return self.masteries.get(mastery_id, 0)

    def specialization_level(self, spec_id: str) -> float:
        return self.specializations.get(spec_id, 0)

    # --- Calculator inputs ---

    def item_power_input(self, item_tier: str, equipment_type: str, mastery_id: str, equipped_spec_id: str,
                         spec_types: Mapping[str, str], slot: str = 'mainhand') -> ItemPowerInput:
        """``spec_types`` lists every specialization of the mastery and its equipment type."""
        return ItemPowerInput(
            item_tier=item_tier,
            equipment_type=equipment_type,
            mastery_level=self.mastery_level(mastery_id),
            equipped_spec_id=equipped_spec_id,
            equipped_spec_level=self.specialization_level(equipped_spec_id),
            specs_in_mastery={spec_id: SpecInvestment(self.specialization_level(spec_id), kind)
                              for spec_id, kind in spec_types.items()},
            slot=slot,
        )

    def focus_input(self, mastery_id: str, spec_id: str, other_spec_ids: Iterable[str]) -> FocusCostInput:
        return FocusCostInput(
            mastery_level=self.mastery_level(mastery_id),
            spec_level=self.specialization_level(spec_id),
            other_spec_levels=tuple(self.specialization_level(other) for other in other_spec_ids
                                    if other != spec_id),
        )

    # --- Import / export ---

    def to_dict(self):
        return {
            'id': self.character_id,
            'name': self.name,
            'masteries': dict(self.masteries),
            'specializations': dict(self.specializations),
        }

    @classmethod
    def from_dict(cls, raw):
        if not isinstance(raw, dict) or 'name' not in raw:
            raise DataFormatError("Character data needs at least a 'name'")
        return cls(
            name=str(raw['name']),
            masteries=_parse_levels(raw, 'masteries'),
            specializations=_parse_levels(raw, 'specializations'),
            character_id=raw.get('id'),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, text: str) -> 'CharacterProgression':
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DataFormatError(f"Invalid character JSON: {exc}") from exc
        return cls.from_dict(raw)
