#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# World map models - Resource nodes, placed Florbs and player economy.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# validate_position: Checks a (latitude, longitude) pair against map bounds.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# ResourceType: Enum of gatherable resources.
# Position: (latitude, longitude) tuple type.
# ResourceAmounts: Crystal, energy and metal amounts.
# ResourceNode: Gatherable node on the world map.
# PlacedFlorbData: Florb snapshot stored with a placement.
# PlacedFlorb: Florb placed on the map with rarity-derived gathering stats.
# PlaceFlorbRequest: Places a stored Florb by its public id.
# PlayerResources: A player's resource balances.
# GatheringAnalytics: One recorded gathering event.
# BulkUpdateResult: Outcome of a bulk update.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# pydantic: Data validation.
# datetime: Time handling.
# typing: Type hints.
# enum: Enumerations.
# florb.constants: Map bounds.
# florb.models.florb.GradientConfig: Gradient snapshot.

from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from enum import Enum

from florb.constants import LATITUDE_RANGE, LONGITUDE_RANGE
from florb.models.florb import GradientConfig


class ResourceType(str, Enum):
    CRYSTAL = "crystal"
    ENERGY = "energy"
    METAL = "metal"


Position = Tuple[float, float]


def validate_position(position: Position) -> Position:
    """Reject coordinates outside [-90, 90] x [-180, 180]"""
    latitude, longitude = position
    if not LATITUDE_RANGE[0] <= latitude <= LATITUDE_RANGE[1]:
        raise ValueError(f"Invalid latitude: {latitude}")
    if not LONGITUDE_RANGE[0] <= longitude <= LONGITUDE_RANGE[1]:
        raise ValueError(f"Invalid longitude: {longitude}")
    return position


class ResourceAmounts(BaseModel):
    crystal: float = Field(0, ge=0)
    energy: float = Field(0, ge=0)
    metal: float = Field(0, ge=0)


class ResourceNode(BaseModel):
    id: str
    position: Position  # (latitude, longitude)
    type: ResourceType
    amount: float = Field(..., ge=0)

    @field_validator("position")
    @classmethod
    def check_position(cls, v: Position) -> Position:
        return validate_position(v)


class PlacedFlorbData(BaseModel):
    florb_id: str
    name: str
    base_image_path: str
    rarity: str
    special_effects: List[str] = []
    gradient_config: Optional[GradientConfig] = None


class PlacedFlorb(BaseModel):
    id: str
    user_id: str
    florb_data: PlacedFlorbData
    position: Position
    placed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    gathering_radius: float = Field(..., ge=0)
    duration: float = Field(..., ge=0)  # Hours
    effectiveness: float = Field(..., ge=0)  # Throughput multiplier
    last_gathered: Optional[datetime] = None
    total_gathered: Optional[ResourceAmounts] = None

    @field_validator("position")
    @classmethod
    def check_position(cls, v: Position) -> Position:
        return validate_position(v)


class PlaceFlorbRequest(BaseModel):
    florb_id: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=LATITUDE_RANGE[0], le=LATITUDE_RANGE[1])
    longitude: float = Field(..., ge=LONGITUDE_RANGE[0], le=LONGITUDE_RANGE[1])


class PlayerResources(ResourceAmounts):
    user_id: str
    updated_at: Optional[datetime] = None


class GatheringAnalytics(BaseModel):
    user_id: str
    gathered: ResourceAmounts
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class BulkUpdateResult(BaseModel):
    success: bool = True
    updated: int = 0
