#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# World map service - Resource nodes, Florb placement and the gathering economy.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# WorldMapService.generate_resource_nodes: Scatters random resource nodes across the map.
# WorldMapService.get_all_resource_nodes: Returns every resource node.
# WorldMapService.update_resource_nodes: Bulk update of resource nodes by id.
# WorldMapService.export_resource_data: Dumps resource nodes for migration.
# WorldMapService.get_placed_florbs: A user's placed Florbs.
# WorldMapService.get_placed_florb_count: Number of a user's placed Florbs.
# WorldMapService.place_florb: Places a Florb with rarity-derived gathering stats.
# WorldMapService.place_stored_florb: Places a stored Florb looked up by its public id.
# WorldMapService.update_placed_florbs: Bulk update of a user's placed Florbs.
# WorldMapService.get_player_resources: Balances, created zeroed on first access.
# WorldMapService.update_player_resources: Overwrites balances.
# WorldMapService.record_gathering_analytics: Stores one gathering event.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# logger: Logger instance.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# random: Node scattering.
# uuid: Node and placement ids.
# logging: Logging.
# datetime: Timestamps.
# typing: Type hints.
# pymongo: Bulk write operations.
# florb.config: Settings.
# florb.constants: Map bounds, amounts, id prefixes and collection names.
# florb.database.Database: DB access.
# florb.exceptions: Errors and request parsing.
# florb.models.world: World map models.
# florb.models.vocabulary.RarityVocabulary: Gathering stats per tier.

import random
import uuid
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from pymongo import UpdateOne

from florb.config import Settings, get_settings
from florb.constants import (
    COORDINATE_PRECISION, FLORBS_COLLECTION, GATHERING_ANALYTICS_COLLECTION, LATITUDE_RANGE,
    LONGITUDE_RANGE, PLACED_FLORB_ID_PREFIX, PLACED_FLORBS_COLLECTION,
    PLAYER_RESOURCES_COLLECTION, RESOURCE_NODE_ID_PREFIX, RESOURCE_NODE_MAX_AMOUNT,
    RESOURCE_NODE_MIN_AMOUNT, RESOURCE_NODES_COLLECTION,
)
from florb.database import Database
from florb.exceptions import FlorbNotFoundError, FlorbValidationError, parse_model
from florb.models.world import (
    BulkUpdateResult, GatheringAnalytics, PlacedFlorb, PlacedFlorbData, PlaceFlorbRequest,
    PlayerResources, ResourceAmounts, ResourceNode, ResourceType,
)
from florb.models.vocabulary import RarityVocabulary

logger = logging.getLogger(__name__)


def _strip_id(doc: dict) -> dict:
    doc = dict(doc)
    doc.pop("_id", None)
    return doc


class WorldMapService:
    """Resource-gathering economy layered on top of placed Florbs"""

    def __init__(
        self,
        vocabulary: Optional[RarityVocabulary] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.vocabulary = vocabulary or self.settings.vocabulary
        self.rng = rng or random.SystemRandom()

    # =========================================================================
    # Resource Nodes
    # =========================================================================

    async def generate_resource_nodes(self, count: Optional[int] = None) -> List[ResourceNode]:
        """Scatter `count` nodes with random position, type and amount"""
        count = self.settings.default_resource_node_count if count is None else count
        if count < 1:
            raise FlorbValidationError("count must be at least 1")

        resource_types = list(ResourceType)
        nodes = [
            ResourceNode(
                id=f"{RESOURCE_NODE_ID_PREFIX}{uuid.uuid4().hex}",
                position=(
                    round(self.rng.uniform(*LATITUDE_RANGE), COORDINATE_PRECISION),
                    round(self.rng.uniform(*LONGITUDE_RANGE), COORDINATE_PRECISION),
                ),
                type=self.rng.choice(resource_types),
                amount=self.rng.randint(RESOURCE_NODE_MIN_AMOUNT, RESOURCE_NODE_MAX_AMOUNT),
            )
            for _ in range(count)
        ]

        db = Database.get_db()
        await db[RESOURCE_NODES_COLLECTION].insert_many(
            [node.model_dump(mode="json") for node in nodes]
        )
        logger.info(f"Generated {len(nodes)} resource nodes")
        return nodes

    async def get_all_resource_nodes(self) -> List[ResourceNode]:
        db = Database.get_db()
        cursor = db[RESOURCE_NODES_COLLECTION].find({})
        return [ResourceNode.model_validate(_strip_id(doc)) async for doc in cursor]

    async def update_resource_nodes(self, updates: Iterable[Any]) -> BulkUpdateResult:
        """Bulk $set by node id; unknown ids are skipped"""
        nodes = [parse_model(ResourceNode, update) for update in updates]
        if not nodes:
            return BulkUpdateResult(updated=0)

        db = Database.get_db()
        result = await db[RESOURCE_NODES_COLLECTION].bulk_write([
            UpdateOne({"id": node.id}, {"$set": node.model_dump(mode="json")})
            for node in nodes
        ])
        return BulkUpdateResult(updated=result.modified_count)

    async def export_resource_data(self) -> List[ResourceNode]:
        return await self.get_all_resource_nodes()

    # =========================================================================
    # Placed Florbs
    # =========================================================================

    async def get_placed_florbs(self, user_id: str) -> List[PlacedFlorb]:
        db = Database.get_db()
        cursor = db[PLACED_FLORBS_COLLECTION].find({"user_id": user_id})
        return [PlacedFlorb.model_validate(_strip_id(doc)) async for doc in cursor]

    async def get_placed_florb_count(self, user_id: str) -> int:
        db = Database.get_db()
        return await db[PLACED_FLORBS_COLLECTION].count_documents({"user_id": user_id})

    async def place_florb(self, user_id: str, florb_data: Any, position: Any) -> PlacedFlorb:
        """
        Place a Florb on the map.

        Gathering radius, duration and effectiveness come from the
        vocabulary's gathering table for the Florb's rarity.
        """
        data = parse_model(PlacedFlorbData, florb_data)
        stats = self.vocabulary.gathering_for(data.rarity)

        placed = parse_model(PlacedFlorb, {
            "id": f"{PLACED_FLORB_ID_PREFIX}{uuid.uuid4().hex}",
            "user_id": user_id,
            "florb_data": data,
            "position": position,
            "gathering_radius": stats.radius,
            "duration": stats.duration_hours,
            "effectiveness": stats.throughput_multiplier,
        })

        db = Database.get_db()
        await db[PLACED_FLORBS_COLLECTION].insert_one(placed.model_dump())
        logger.info(f"User {user_id} placed {data.florb_id} ({data.rarity}) at {placed.position}")
        return placed

    async def place_stored_florb(self, user_id: str, data: Any) -> PlacedFlorb:
        """Look up a stored Florb by its public id and place it"""
        request = parse_model(PlaceFlorbRequest, data)

        db = Database.get_db()
        doc = await db[FLORBS_COLLECTION].find_one({"florb_id": request.florb_id})
        if not doc:
            raise FlorbNotFoundError(f"Florb {request.florb_id} not found")

        return await self.place_florb(
            user_id,
            {
                "florb_id": doc["florb_id"],
                "name": doc["name"],
                "base_image_path": doc["base_image_path"],
                "rarity": doc["rarity"],
                "special_effects": doc.get("special_effects", []),
                "gradient_config": doc.get("gradient_config"),
            },
            (request.latitude, request.longitude),
        )

    async def update_placed_florbs(self, user_id: str, updates: Iterable[Any]) -> BulkUpdateResult:
        """Bulk $set scoped to the user; placements of other users are never touched"""
        placed = []
        for update in updates:
            if isinstance(update, dict):
                update = {**_strip_id(update), "user_id": user_id}
            placed.append(parse_model(PlacedFlorb, update))
        if not placed:
            return BulkUpdateResult(updated=0)

        db = Database.get_db()
        result = await db[PLACED_FLORBS_COLLECTION].bulk_write([
            UpdateOne(
                {"id": item.id, "user_id": user_id},
                {"$set": item.model_dump(include=item.model_fields_set - {"id", "user_id"})},
            )
            for item in placed
        ])
        return BulkUpdateResult(updated=result.modified_count)

    # =========================================================================
    # Player Resources
    # =========================================================================

    async def get_player_resources(self, user_id: str) -> PlayerResources:
        db = Database.get_db()
        doc = await db[PLAYER_RESOURCES_COLLECTION].find_one({"user_id": user_id})
        if doc:
            return PlayerResources.model_validate(_strip_id(doc))

        resources = PlayerResources(user_id=user_id, updated_at=datetime.now(timezone.utc))
        await db[PLAYER_RESOURCES_COLLECTION].insert_one(resources.model_dump())
        logger.info(f"Created resource balances for {user_id}")
        return resources

    async def update_player_resources(self, user_id: str, resources: Any) -> PlayerResources:
        amounts = parse_model(ResourceAmounts, resources)

        db = Database.get_db()
        await db[PLAYER_RESOURCES_COLLECTION].update_one(
            {"user_id": user_id},
            {"$set": {**amounts.model_dump(), "updated_at": datetime.now(timezone.utc)}},
            upsert=True,
        )
        return await self.get_player_resources(user_id)

    async def record_gathering_analytics(
        self, user_id: str, gathered: Any, timestamp: Optional[datetime] = None
    ) -> GatheringAnalytics:
        record = parse_model(GatheringAnalytics, {
            "user_id": user_id,
            "gathered": parse_model(ResourceAmounts, gathered),
            "timestamp": timestamp or datetime.now(timezone.utc),
        })

        db = Database.get_db()
        await db[GATHERING_ANALYTICS_COLLECTION].insert_one(record.model_dump())
        return record
