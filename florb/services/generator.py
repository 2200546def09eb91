#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Attribute generator - Rarity sampling, special effects and gradient overlays.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# sample_rarity: Weighted random rarity tier.
# sample_special_effects: Independent per-effect rolls.
# intensity_for: Deterministic blend intensity of a tier.
# build_gradient: Gradient config from custom colors or the tier palette.
# generate_florb_id: Public opaque Florb identifier.
# generate_florb: Full attribute bundle for one Florb.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# logger: Logger instance.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# math: Finite checks.
# random: Weighted selection and sampling without replacement.
# secrets: Random hex for public ids.
# logging: Logging.
# typing: Type hints.
# florb.constants: Gradient and id constants, default vocabulary.
# florb.exceptions: Validation errors and request parsing.
# florb.models: Request, gradient and vocabulary models.

import math
import random
import secrets
import logging
from typing import Any, List, Mapping, Optional, Sequence

from florb.constants import (
    DEFAULT_VOCABULARY, FLORB_ID_HEX_BYTES, FLORB_ID_PREFIX, GRADIENT_DIRECTIONS,
    MAX_PALETTE_DRAW, MIN_GRADIENT_COLORS, MIN_PALETTE_DRAW,
)
from florb.exceptions import FlorbValidationError, parse_model
from florb.models.florb import GeneratedFlorb, GenerateFlorbRequest, GradientConfig
from florb.models.vocabulary import RarityVocabulary

logger = logging.getLogger(__name__)


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.SystemRandom()


def _weight_table(weights: Mapping[str, Any], vocabulary: RarityVocabulary) -> List[float]:
    """Validate a weight mapping and return weights in tier order"""
    unknown = [tier for tier in weights if tier not in vocabulary.tiers]
    if unknown:
        raise FlorbValidationError(
            f"Unknown rarity in weights: {', '.join(map(str, unknown))}"
        )

    table = []
    for tier in vocabulary.tiers:
        weight = weights.get(tier, 0)
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise FlorbValidationError(f"Weight for {tier} must be a number, got {weight!r}")
        if not math.isfinite(weight) or weight < 0:
            raise FlorbValidationError(f"Weight for {tier} must be finite and non-negative, got {weight}")
        table.append(float(weight))

    if sum(table) <= 0:
        raise FlorbValidationError("Rarity weights must have a positive total")
    return table


def sample_rarity(
    weights: Optional[Mapping[str, float]] = None,
    *,
    vocabulary: RarityVocabulary = DEFAULT_VOCABULARY,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Draw one rarity tier with probability weight / total.

    Tiers are walked in vocabulary order over half-open cumulative intervals,
    so a draw in [0, total) always lands on a tier. Tiers missing from
    `weights` or weighted zero are never returned.
    """
    table = _weight_table(vocabulary.default_weights if weights is None else weights, vocabulary)
    tiers = [tier for tier, weight in zip(vocabulary.tiers, table) if weight > 0]
    positive = [weight for weight in table if weight > 0]
    return _rng(rng).choices(tiers, weights=positive, k=1)[0]


def sample_special_effects(
    *,
    vocabulary: RarityVocabulary = DEFAULT_VOCABULARY,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Roll each catalog effect independently; the result may be empty"""
    rng = _rng(rng)
    return [
        effect
        for effect, probability in vocabulary.effects.items()
        if rng.random() < probability
    ]


def intensity_for(rarity: str, *, vocabulary: RarityVocabulary = DEFAULT_VOCABULARY) -> float:
    """
    Blend intensity of a tier.

    The rank is normalized to [0, 1], rescaled to [intensity_floor, 1.0] and
    bent by a power curve (exponent < 1 lifts the low tiers less than the
    high ones). Rounded to two decimals; non-decreasing in rank.
    """
    rank = vocabulary.rank(rarity)
    span = len(vocabulary.tiers) - 1
    normalized = rank / span if span else 1.0
    base = vocabulary.intensity_floor + normalized * (1.0 - vocabulary.intensity_floor)
    return round(base ** vocabulary.intensity_exponent, 2)


def build_gradient(
    rarity: str,
    custom_colors: Optional[Sequence[str]] = None,
    *,
    vocabulary: RarityVocabulary = DEFAULT_VOCABULARY,
    rng: Optional[random.Random] = None,
) -> GradientConfig:
    """
    Build a gradient for `rarity`.

    Custom colors are used verbatim. Otherwise 3-5 colors are drawn from the
    tier palette without replacement; the count is clamped to the palette
    size rather than raising.
    """
    palette = vocabulary.palette_for(rarity)
    if isinstance(custom_colors, str):
        raise FlorbValidationError("Custom colors must be a list of color strings, not a single string")
    if custom_colors is not None and len(custom_colors) < MIN_GRADIENT_COLORS:
        raise FlorbValidationError(
            f"Custom gradient needs at least {MIN_GRADIENT_COLORS} colors, got {len(custom_colors)}"
        )

    rng = _rng(rng)
    if custom_colors is not None:
        colors = list(custom_colors)
    else:
        count = min(rng.randint(MIN_PALETTE_DRAW, MAX_PALETTE_DRAW), len(palette))
        colors = rng.sample(palette, count)

    return parse_model(GradientConfig, {
        "colors": colors,
        "direction": rng.choice(GRADIENT_DIRECTIONS),
        "intensity": intensity_for(rarity, vocabulary=vocabulary),
    })


def generate_florb_id() -> str:
    """Public id, distinct from any storage key"""
    return f"{FLORB_ID_PREFIX}{secrets.token_hex(FLORB_ID_HEX_BYTES)}"


def _describe(rarity: str, effects: Sequence[str]) -> str:
    if not effects:
        return f"A {rarity.lower()} rarity florb with no special effects."
    return f"A {rarity.lower()} rarity florb with {', '.join(effects).lower()} effects."


def generate_florb(
    overrides: Any = None,
    *,
    vocabulary: RarityVocabulary = DEFAULT_VOCABULARY,
    rng: Optional[random.Random] = None,
    **fields: Any,
) -> GeneratedFlorb:
    """
    Generate the attributes of one Florb.

    `overrides` is a GenerateFlorbRequest (or a mapping of its fields); the
    same fields may also be passed as keyword arguments, which win. All
    overrides are validated before anything is drawn, so the call either
    returns a complete GeneratedFlorb or raises FlorbValidationError.
    """
    request = parse_model(GenerateFlorbRequest, overrides)
    if fields:
        request = parse_model(
            GenerateFlorbRequest, {**request.model_dump(exclude_unset=True), **fields}
        )

    if request.rarity is not None:
        vocabulary.rank(request.rarity)
    if request.force_special_effect is not None:
        vocabulary.require_effect(request.force_special_effect)
    if request.rarity_weights is not None:
        _weight_table(request.rarity_weights, vocabulary)
    if request.custom_colors is not None and len(request.custom_colors) < MIN_GRADIENT_COLORS:
        raise FlorbValidationError(
            f"Custom gradient needs at least {MIN_GRADIENT_COLORS} colors, got {len(request.custom_colors)}"
        )

    rng = _rng(rng)
    rarity = request.rarity or sample_rarity(request.rarity_weights, vocabulary=vocabulary, rng=rng)

    if request.force_special_effect is not None:
        special_effects = [request.force_special_effect]
    else:
        special_effects = sample_special_effects(vocabulary=vocabulary, rng=rng)

    gradient = request.custom_gradient or build_gradient(
        rarity, request.custom_colors, vocabulary=vocabulary, rng=rng
    )

    florb = GeneratedFlorb(
        florb_id=generate_florb_id(),
        name=f"{rarity} Florb",
        rarity=rarity,
        special_effects=special_effects,
        gradient_config=gradient.model_copy(deep=True),
        description=_describe(rarity, special_effects),
        tags=[rarity.lower(), *(effect.lower() for effect in special_effects)],
    )
    logger.debug(f"Generated {florb.florb_id}: {rarity} with {special_effects or 'no effects'}")
    return florb
