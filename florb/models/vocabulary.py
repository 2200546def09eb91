#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Vocabulary models - Rarity tiers, palettes, weights and effects as one config object.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# RarityVocabulary.rank: Returns the 0-based rank of a tier, rejecting unknown tiers.
# RarityVocabulary.palette_for: Returns the color palette of a tier.
# RarityVocabulary.require_effect: Rejects effects outside the catalog.
# RarityVocabulary.gathering_for: Returns world map gathering stats of a tier.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# GatheringEffect: Radius, duration and throughput of a placed Florb.
# RarityVocabulary: Immutable bundle of tiers, palettes, weights, effects and gathering stats.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# dataclasses: Data structures.
# typing: Type hints.
# florb.exceptions.FlorbValidationError: Domain validation error.

from dataclasses import dataclass, field
from typing import Dict, Tuple

from florb.exceptions import FlorbValidationError


@dataclass(frozen=True)
class GatheringEffect:
    """Stats a placed Florb gets from its rarity"""
    radius: float
    duration_hours: float
    throughput_multiplier: float


@dataclass(frozen=True)
class RarityVocabulary:
    """
    One versioned set of rarity configuration.

    Tiers are ordered from most common to rarest. Effects map each effect name
    to its independent inclusion probability, in catalog order. The intensity
    curve rescales the normalized tier rank to [intensity_floor, 1.0] and
    raises it to intensity_exponent.
    """
    name: str
    tiers: Tuple[str, ...]
    palettes: Dict[str, Tuple[str, ...]]
    default_weights: Dict[str, float]
    effects: Dict[str, float]
    intensity_floor: float = 0.2
    intensity_exponent: float = 0.7
    gathering: Dict[str, GatheringEffect] = field(default_factory=dict)

    def __post_init__(self):
        if not self.tiers:
            raise ValueError(f"Vocabulary {self.name!r} has no tiers")
        missing = [tier for tier in self.tiers if not self.palettes.get(tier)]
        if missing:
            raise ValueError(f"Vocabulary {self.name!r} has no palette for {missing}")
        if not 0.0 <= self.intensity_floor <= 1.0:
            raise ValueError("intensity_floor must lie in [0, 1]")
        if self.intensity_exponent <= 0:
            raise ValueError("intensity_exponent must be positive")

    def rank(self, tier: str) -> int:
        try:
            return self.tiers.index(tier)
        except ValueError:
            raise FlorbValidationError(
                f"Unknown rarity {tier!r}. Expected one of: {', '.join(self.tiers)}"
            ) from None

    def palette_for(self, tier: str) -> Tuple[str, ...]:
        self.rank(tier)
        return self.palettes[tier]

    def require_effect(self, effect: str) -> str:
        if effect not in self.effects:
            raise FlorbValidationError(
                f"Unknown special effect {effect!r}. Expected one of: {', '.join(self.effects)}"
            )
        return effect

    def gathering_for(self, tier: str) -> GatheringEffect:
        self.rank(tier)
        try:
            return self.gathering[tier]
        except KeyError:
            raise FlorbValidationError(
                f"Rarity {tier!r} has no gathering stats in vocabulary {self.name!r}"
            ) from None
