#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Constants - Centralized configuration values and rarity vocabularies.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# get_vocabulary: Returns a rarity vocabulary by name.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# GRADIENT_DIRECTIONS: Allowed gradient directions.
# MIN_PALETTE_DRAW / MAX_PALETTE_DRAW: Range of colors drawn from a palette.
# FLORB_ID_PREFIX: Prefix of the public Florb identifier.
# CLASSIC_VOCABULARY: 4-tier Common..Legendary scheme (canonical).
# SPECTRUM_VOCABULARY: 7-tier Grey..Red scheme.
# VOCABULARIES: All known vocabularies by name.
# ... (various other constants)

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# typing: Type hints.
# florb.models.vocabulary: Vocabulary containers.
# florb.exceptions.FlorbValidationError: Domain validation error.

from typing import Optional

from florb.exceptions import FlorbValidationError
from florb.models.vocabulary import GatheringEffect, RarityVocabulary


# Gradient Generation
GRADIENT_DIRECTIONS = ("horizontal", "vertical", "diagonal", "radial")
MIN_GRADIENT_COLORS = 2  # Downstream renderers need at least two stops
MIN_PALETTE_DRAW = 3
MAX_PALETTE_DRAW = 5  # Clamped to the palette size

# Identifiers
FLORB_ID_PREFIX = "florb_"
FLORB_ID_HEX_BYTES = 8  # 16 hex characters
PLACED_FLORB_ID_PREFIX = "placed_"
RESOURCE_NODE_ID_PREFIX = "resource_"

# Batch Generation & Listing
BATCH_MIN_COUNT = 1
BATCH_MAX_COUNT = 100
PAGE_DEFAULT_LIMIT = 20
PAGE_MAX_LIMIT = 100

# Florb Documents
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

# Base Images
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp")
DEFAULT_BASE_IMAGES = (
    "default_orb.png",
    "default_crystal.png",
)

# World Map
RESOURCE_NODE_MIN_AMOUNT = 1
RESOURCE_NODE_MAX_AMOUNT = 1000
LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)
COORDINATE_PRECISION = 6

# MongoDB Collections
FLORBS_COLLECTION = "florbs"
RESOURCE_NODES_COLLECTION = "resource_nodes"
PLACED_FLORBS_COLLECTION = "placed_florbs"
PLAYER_RESOURCES_COLLECTION = "player_resources"
GATHERING_ANALYTICS_COLLECTION = "gathering_analytics"


# Classic Vocabulary - 4 tiers, each palette gains saturation with rarity
CLASSIC_VOCABULARY = RarityVocabulary(
    name="classic",
    tiers=("Common", "Rare", "Epic", "Legendary"),
    palettes={
        "Common": ("#B0B0B0", "#C0C0C0", "#D0D0D0", "#E0E0E0"),  # Low saturation, lighter tones
        "Rare": ("#4A7C59", "#5B8C6B", "#6B9C7B", "#7BAC8B"),  # Moderate saturation, natural tones
        "Epic": ("#7744AA", "#8855BB", "#9966CC", "#AA77DD"),  # High saturation, rich colors
        "Legendary": (  # Full rainbow spectrum
            "#FF0033", "#00FF33", "#3300FF", "#FFFF00",
            "#FF3300", "#33FF00", "#0033FF", "#FF00FF",
        ),
    },
    default_weights={
        "Common": 70,     # 70% - Basic florbs
        "Rare": 20,       # 20% - Harder to find
        "Epic": 8,        # 8% - Quite valuable
        "Legendary": 2,   # 2% - Collector's items
    },
    effects={
        "Holo": 0.10,
        "Foil": 0.08,
        "Shimmer": 0.05,
        "Glow": 0.03,
    },
    intensity_floor=0.2,
    intensity_exponent=0.7,
    gathering={
        "Common": GatheringEffect(radius=50, duration_hours=1, throughput_multiplier=0.5),
        "Rare": GatheringEffect(radius=100, duration_hours=4, throughput_multiplier=1.0),
        "Epic": GatheringEffect(radius=200, duration_hours=12, throughput_multiplier=2.0),
        "Legendary": GatheringEffect(radius=500, duration_hours=48, throughput_multiplier=5.0),
    },
)

# Spectrum Vocabulary - 7 color-named tiers, linear intensity
SPECTRUM_VOCABULARY = RarityVocabulary(
    name="spectrum",
    tiers=("Grey", "White", "Green", "Blue", "Purple", "Orange", "Red"),
    palettes={
        "Grey": ("#404040", "#606060", "#505050", "#454545"),  # Dull greys
        "White": ("#E8E8E8", "#F5F5F5", "#EFEFEF", "#E0E0E0"),  # Soft whites
        "Green": ("#228B22", "#32CD32", "#90EE90", "#00FF7F"),  # Natural greens
        "Blue": ("#1E90FF", "#4169E1", "#00BFFF", "#87CEEB"),  # Ocean blues
        "Purple": ("#8A2BE2", "#9932CC", "#DA70D6", "#FF00FF"),  # Rich purples
        "Orange": ("#FF4500", "#FF6347", "#FFA500", "#FFD700"),  # Fiery oranges and golds
        "Red": ("#DC143C", "#FF0000", "#FF1493", "#FF69B4", "#FF6347", "#FFD700"),  # Reds with golden accents
    },
    default_weights={
        "Grey": 45,     # 45% - Plain, everyday florbs
        "White": 30,    # 30%
        "Green": 15,    # 15% - Noticeable but not rare
        "Blue": 7,      # 7% - Actually rare
        "Purple": 2.5,  # 2.5% - Epic
        "Orange": 0.8,  # 0.8% - Legendary
        "Red": 0.2,     # 0.2% - Mythic (1 in 500)
    },
    effects={
        "Holographic": 0.10,
        "Foil": 0.15,
        "Rainbow": 0.05,
        "Glitch": 0.02,
        "Animated": 0.03,
        "Prismatic": 0.05,
    },
    intensity_floor=0.3,
    intensity_exponent=1.0,
)

VOCABULARIES = {
    CLASSIC_VOCABULARY.name: CLASSIC_VOCABULARY,
    SPECTRUM_VOCABULARY.name: SPECTRUM_VOCABULARY,
}

DEFAULT_VOCABULARY = CLASSIC_VOCABULARY


def get_vocabulary(name: Optional[str] = None) -> RarityVocabulary:
    """Look up a vocabulary by name, defaulting to the classic scheme"""
    if name is None:
        return DEFAULT_VOCABULARY
    try:
        return VOCABULARIES[name.lower()]
    except KeyError:
        raise FlorbValidationError(
            f"Unknown rarity vocabulary {name!r}. Expected one of: {', '.join(VOCABULARIES)}"
        ) from None
