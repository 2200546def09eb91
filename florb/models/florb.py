#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Florb models - Gradient, generation requests and stored Florb documents.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# FlorbDocument.from_mongo: Builds a FlorbDocument from a raw MongoDB document.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# GradientDirection: Literal type of allowed gradient directions.
# GradientConfig: Colors, direction and blend intensity of a Florb overlay.
# GenerateFlorbRequest: Overrides for generating a single Florb.
# BatchGenerateFlorbRequest: Parameters for generating many Florbs.
# CreateFlorbRequest: Caller-designed Florb.
# UpdateFlorbRequest: Partial update of a stored Florb.
# GeneratedFlorb: Attribute bundle produced by the generator.
# FlorbDocument: Stored Florb including storage id and timestamps.
# FlorbPage: One page of listed Florbs.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# pydantic: Data validation.
# datetime: Time handling.
# typing: Type hints.
# florb.constants: Length and count limits.

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from florb.constants import (
    BATCH_MAX_COUNT, BATCH_MIN_COUNT, DESCRIPTION_MAX_LENGTH, MIN_GRADIENT_COLORS,
    NAME_MAX_LENGTH,
)


GradientDirection = Literal["horizontal", "vertical", "diagonal", "radial"]


class GradientConfig(BaseModel):
    """Gradient overlay of a Florb"""
    colors: List[str] = Field(..., min_length=MIN_GRADIENT_COLORS)
    direction: GradientDirection
    intensity: float = Field(..., ge=0, le=1)  # 0-1 blend intensity


class GenerateFlorbRequest(BaseModel):
    """
    Overrides for a single generated Florb.

    Every field is optional. Anything left unset is generated: rarity is
    sampled from `rarity_weights` (or the vocabulary defaults), effects are
    rolled independently and the gradient is built from the rarity palette
    (or `custom_colors` when given). `custom_gradient` wins over both.
    """
    base_image_path: Optional[str] = Field(None, min_length=1)
    rarity: Optional[str] = None
    force_special_effect: Optional[str] = None
    custom_gradient: Optional[GradientConfig] = None
    custom_colors: Optional[List[str]] = None
    rarity_weights: Optional[Dict[str, float]] = None


class BatchGenerateFlorbRequest(BaseModel):
    count: int = Field(..., ge=BATCH_MIN_COUNT, le=BATCH_MAX_COUNT)
    base_image_paths: Optional[List[str]] = Field(None, min_length=1)  # Random pick from discovered images if unset
    rarity_weights: Optional[Dict[str, float]] = None


class CreateFlorbRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    base_image_path: str = Field(..., min_length=1)
    rarity: str
    special_effects: List[str] = []
    gradient_config: Optional[GradientConfig] = None
    custom_colors: Optional[List[str]] = None
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    tags: List[str] = []


class UpdateFlorbRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    rarity: Optional[str] = None
    special_effects: Optional[List[str]] = None
    gradient_config: Optional[GradientConfig] = None
    custom_colors: Optional[List[str]] = None
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    tags: Optional[List[str]] = None


class GeneratedFlorb(BaseModel):
    """Attribute bundle handed to persistence; carries no storage identity"""
    florb_id: str
    name: str
    rarity: str
    special_effects: List[str]
    gradient_config: GradientConfig
    description: str
    tags: List[str]


class FlorbDocument(BaseModel):
    """Florb as stored in the florbs collection"""
    id: str
    florb_id: str
    name: str
    base_image_path: str
    rarity: str
    special_effects: List[str] = []
    gradient_config: Optional[GradientConfig] = None
    custom_colors: Optional[List[str]] = None
    description: Optional[str] = None
    tags: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "FlorbDocument":
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class FlorbPage(BaseModel):
    florbs: List[FlorbDocument]
    total: int
    page: int
    total_pages: int
