#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Florb service - Persists generated and custom Florbs in MongoDB.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# FlorbService.generate_florb: Generates one Florb and stores it.
# FlorbService.batch_generate_florbs: Generates and stores up to 100 Florbs.
# FlorbService.create_florb: Stores a caller-designed Florb.
# FlorbService.get_all_florbs: Paginated listing, newest first.
# FlorbService.get_florb_by_id: Lookup by storage id.
# FlorbService.get_florb_by_florb_id: Lookup by public Florb id.
# FlorbService.update_florb: Partial update.
# FlorbService.delete_florb: Removes a Florb.
# FlorbService.get_florbs_by_rarity: All Florbs of one tier.
# FlorbService.get_florbs_with_effect: All Florbs carrying one effect.
# FlorbService.get_rarity_stats: Count of Florbs per tier.
# FlorbService.get_base_images: Image files available as Florb bases.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# logger: Logger instance.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# asyncio: Concurrent count and find.
# math: Page count.
# random: Base image selection.
# logging: Logging.
# datetime: Timestamps.
# pathlib: Base image discovery.
# typing: Type hints.
# bson: ObjectId handling.
# pymongo: ReturnDocument.
# florb.config: Settings.
# florb.constants: Limits and collection names.
# florb.database.Database: DB access.
# florb.exceptions: Validation errors and request parsing.
# florb.models.florb: Request and document models.
# florb.models.vocabulary.RarityVocabulary: Active rarity scheme.
# florb.services.generator: Attribute generation.

import asyncio
import math
import random
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from florb.config import Settings, get_settings
from florb.constants import (
    DEFAULT_BASE_IMAGES, FLORBS_COLLECTION, IMAGE_EXTENSIONS, PAGE_DEFAULT_LIMIT, PAGE_MAX_LIMIT,
)
from florb.database import Database
from florb.exceptions import FlorbValidationError, parse_model
from florb.models.florb import (
    BatchGenerateFlorbRequest, CreateFlorbRequest, FlorbDocument, FlorbPage,
    GeneratedFlorb, GenerateFlorbRequest, UpdateFlorbRequest,
)
from florb.models.vocabulary import RarityVocabulary
from florb.services import generator

logger = logging.getLogger(__name__)


def _object_id(florb_id: str) -> ObjectId:
    try:
        return ObjectId(florb_id)
    except (InvalidId, TypeError):
        raise FlorbValidationError(f"Invalid Florb id: {florb_id!r}") from None


class FlorbService:
    """
    Persistence collaborator of the attribute generator.

    Generated attributes are stored with a base image, timestamps and the
    storage-assigned `_id`. The rarity vocabulary comes from settings unless
    one is passed in.
    """

    def __init__(
        self,
        vocabulary: Optional[RarityVocabulary] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.vocabulary = vocabulary or self.settings.vocabulary
        self.rng = rng or random.SystemRandom()

    @property
    def collection(self):
        return Database.get_db()[FLORBS_COLLECTION]

    def _document(self, florb: GeneratedFlorb, base_image_path: str) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        return {
            **florb.model_dump(),
            "base_image_path": base_image_path,
            "created_at": now,
            "updated_at": now,
        }

    def _check_rarity_and_effects(self, rarity: Optional[str], effects: Optional[List[str]]) -> None:
        if rarity is not None:
            self.vocabulary.rank(rarity)
        for effect in effects or []:
            self.vocabulary.require_effect(effect)

    async def generate_florb(self, data: Any = None) -> FlorbDocument:
        """Generate one Florb, picking a random base image when none is given"""
        request = parse_model(GenerateFlorbRequest, data)
        florb = generator.generate_florb(request, vocabulary=self.vocabulary, rng=self.rng)

        base_image_path = request.base_image_path or self.rng.choice(self.get_base_images())
        doc = self._document(florb, base_image_path)

        result = await self.collection.insert_one(doc)
        logger.info(f"Generated florb {florb.florb_id} ({florb.rarity})")
        return FlorbDocument.from_mongo({**doc, "_id": result.inserted_id})

    async def batch_generate_florbs(self, data: Any) -> List[FlorbDocument]:
        """
        Generate `count` Florbs with rarities drawn from optional custom weights.

        Everything is generated before the single insert, so invalid weights
        fail without writing anything.
        """
        request = parse_model(BatchGenerateFlorbRequest, data)
        if request.count > self.settings.max_batch_size:
            raise FlorbValidationError(
                f"Cannot generate more than {self.settings.max_batch_size} florbs at once"
            )

        images = request.base_image_paths or self.get_base_images()
        docs = []
        for _ in range(request.count):
            rarity = generator.sample_rarity(
                request.rarity_weights, vocabulary=self.vocabulary, rng=self.rng
            )
            florb = generator.generate_florb(
                {"rarity": rarity}, vocabulary=self.vocabulary, rng=self.rng
            )
            docs.append(self._document(florb, self.rng.choice(images)))

        result = await self.collection.insert_many(docs)
        logger.info(f"Batch generated {len(docs)} florbs")
        return [
            FlorbDocument.from_mongo({**doc, "_id": inserted_id})
            for doc, inserted_id in zip(docs, result.inserted_ids)
        ]

    async def create_florb(self, data: Any) -> FlorbDocument:
        """Store a caller-designed Florb; the gradient is built when not supplied"""
        request = parse_model(CreateFlorbRequest, data)
        self._check_rarity_and_effects(request.rarity, request.special_effects)

        gradient = request.gradient_config or generator.build_gradient(
            request.rarity, request.custom_colors, vocabulary=self.vocabulary, rng=self.rng
        )
        now = datetime.now(timezone.utc)
        doc = {
            **request.model_dump(exclude={"gradient_config"}),
            "florb_id": generator.generate_florb_id(),
            "gradient_config": gradient.model_dump(),
            "created_at": now,
            "updated_at": now,
        }

        result = await self.collection.insert_one(doc)
        logger.info(f"Created florb {doc['florb_id']} ({request.rarity})")
        return FlorbDocument.from_mongo({**doc, "_id": result.inserted_id})

    async def get_all_florbs(
        self, page: int = 1, limit: int = PAGE_DEFAULT_LIMIT, rarity: Optional[str] = None
    ) -> FlorbPage:
        """List Florbs newest first; `limit` is capped at 100"""
        if page < 1:
            raise FlorbValidationError("page must be at least 1")
        if limit < 1:
            raise FlorbValidationError("limit must be at least 1")
        limit = min(limit, PAGE_MAX_LIMIT)
        self._check_rarity_and_effects(rarity, None)

        query = {"rarity": rarity} if rarity else {}
        cursor = (
            self.collection.find(query)
            .sort("created_at", -1)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        docs, total = await asyncio.gather(
            cursor.to_list(length=limit),
            self.collection.count_documents(query),
        )

        return FlorbPage(
            florbs=[FlorbDocument.from_mongo(doc) for doc in docs],
            total=total,
            page=page,
            total_pages=math.ceil(total / limit),
        )

    async def get_florb_by_id(self, florb_id: str) -> Optional[FlorbDocument]:
        doc = await self.collection.find_one({"_id": _object_id(florb_id)})
        return FlorbDocument.from_mongo(doc) if doc else None

    async def get_florb_by_florb_id(self, florb_id: str) -> Optional[FlorbDocument]:
        doc = await self.collection.find_one({"florb_id": florb_id})
        return FlorbDocument.from_mongo(doc) if doc else None

    async def update_florb(self, florb_id: str, data: Any) -> Optional[FlorbDocument]:
        """Apply only the supplied fields; returns None when the Florb does not exist"""
        object_id = _object_id(florb_id)
        request = parse_model(UpdateFlorbRequest, data)
        self._check_rarity_and_effects(request.rarity, request.special_effects)

        update_data = request.model_dump(exclude_none=True)
        update_data["updated_at"] = datetime.now(timezone.utc)

        doc = await self.collection.find_one_and_update(
            {"_id": object_id},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        logger.info(f"Updated florb {florb_id}: {sorted(update_data)}")
        return FlorbDocument.from_mongo(doc)

    async def delete_florb(self, florb_id: str) -> bool:
        result = await self.collection.delete_one({"_id": _object_id(florb_id)})
        deleted = result.deleted_count > 0
        if deleted:
            logger.info(f"Deleted florb {florb_id}")
        return deleted

    async def get_florbs_by_rarity(self, rarity: str) -> List[FlorbDocument]:
        self._check_rarity_and_effects(rarity, None)
        cursor = self.collection.find({"rarity": rarity}).sort("created_at", -1)
        return [FlorbDocument.from_mongo(doc) async for doc in cursor]

    async def get_florbs_with_effect(self, effect: str) -> List[FlorbDocument]:
        self._check_rarity_and_effects(None, [effect])
        cursor = self.collection.find({"special_effects": effect}).sort("created_at", -1)
        return [FlorbDocument.from_mongo(doc) async for doc in cursor]

    async def get_rarity_stats(self) -> Dict[str, int]:
        """Count Florbs per tier; every tier of the vocabulary is present"""
        pipeline = [{"$group": {"_id": "$rarity", "count": {"$sum": 1}}}]

        stats = {tier: 0 for tier in self.vocabulary.tiers}
        async for row in self.collection.aggregate(pipeline):
            if row["_id"] is None:
                continue
            stats[row["_id"]] = row["count"]
        return stats

    def get_base_images(self) -> List[str]:
        """
        Image files in the configured base directory.

        Falls back to the two default images when the directory is missing or
        holds no images.
        """
        base_dir = Path(self.settings.florb_base_dir)
        fallback = [f"{base_dir.as_posix()}/{name}" for name in DEFAULT_BASE_IMAGES]

        try:
            images = sorted(
                f"{base_dir.as_posix()}/{entry.name}"
                for entry in base_dir.iterdir()
                if entry.is_file() and entry.suffix.lower() in IMAGE_EXTENSIONS
            )
        except OSError as e:
            logger.warning(f"Could not read base image directory {base_dir}: {e}. Using fallback images.")
            return fallback

        if not images:
            logger.warning(f"No image files found in {base_dir}. Using fallback images.")
            return fallback
        return images
