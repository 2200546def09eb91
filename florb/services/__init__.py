"""Florb Services Package"""

from florb.services.florb_service import FlorbService
from florb.services.world_map import WorldMapService

__all__ = [
    "FlorbService",
    "WorldMapService",
]
