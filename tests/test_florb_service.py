"""
Tests for FlorbService

Unit tests for Florb persistence with a mocked MongoDB.
"""

import random
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bson import ObjectId

from florb.config import Settings
from florb.constants import FLORBS_COLLECTION, SPECTRUM_VOCABULARY
from florb.exceptions import FlorbValidationError
from florb.models.florb import FlorbDocument, FlorbPage
from florb.services.florb_service import FlorbService


class FakeCursor:
    """Minimal stand-in for a motor cursor."""

    def __init__(self, docs):
        self.docs = list(docs)
        self.calls = []

    def sort(self, *args):
        self.calls.append(("sort", args))
        return self

    def skip(self, n):
        self.calls.append(("skip", n))
        return self

    def limit(self, n):
        self.calls.append(("limit", n))
        return self

    async def to_list(self, length=None):
        return self.docs[:length]

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self.docs:
            yield doc


def stored_florb(**overrides):
    now = datetime.now(timezone.utc)
    doc = {
        "_id": ObjectId(),
        "florb_id": "florb_0123456789abcdef",
        "name": "Rare Florb",
        "base_image_path": "src/assets/florb_base/orb.png",
        "rarity": "Rare",
        "special_effects": ["Holo"],
        "gradient_config": {"colors": ["#4A7C59", "#5B8C6B", "#6B9C7B"], "direction": "radial", "intensity": 0.59},
        "description": "A rare rarity florb with holo effects.",
        "tags": ["rare", "holo"],
        "created_at": now,
        "updated_at": now,
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def settings(tmp_path):
    (tmp_path / "orb.png").write_bytes(b"")
    (tmp_path / "crystal.webp").write_bytes(b"")
    (tmp_path / "notes.txt").write_text("not an image")
    return Settings(florb_base_dir=str(tmp_path))


@pytest.fixture
def collection():
    return AsyncMock()


@pytest.fixture
def mock_db(collection):
    with patch("florb.services.florb_service.Database") as mock_database:
        mock_database.get_db.return_value = {FLORBS_COLLECTION: collection}
        yield mock_database


class TestFlorbGeneration:
    """Tests for generating and creating Florbs."""

    @pytest.fixture
    def service(self, settings, mock_db):
        return FlorbService(rng=random.Random(21), settings=settings)

    # =========================================================================
    # Single Generation Tests
    # =========================================================================

    @pytest.mark.asyncio
    async def test_generate_florb_with_base_image(self, service, collection):
        """Generated Florb should be stored with the requested base image."""
        inserted_id = ObjectId()
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=inserted_id))

        florb = await service.generate_florb({"base_image_path": "custom/orb.png", "rarity": "Epic"})

        assert isinstance(florb, FlorbDocument)
        assert florb.id == str(inserted_id)
        assert florb.rarity == "Epic"
        assert florb.base_image_path == "custom/orb.png"
        assert florb.created_at == florb.updated_at

        stored = collection.insert_one.call_args[0][0]
        assert stored["florb_id"] == florb.florb_id
        assert stored["gradient_config"]["intensity"] == 0.8

    @pytest.mark.asyncio
    async def test_generate_florb_picks_discovered_image(self, service, collection, settings):
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))

        florb = await service.generate_florb()

        assert florb.base_image_path in service.get_base_images()
        assert florb.base_image_path.startswith(settings.florb_base_dir)

    @pytest.mark.asyncio
    async def test_generate_florb_invalid_override_writes_nothing(self, service, collection):
        collection.insert_one = AsyncMock()

        with pytest.raises(FlorbValidationError):
            await service.generate_florb({"rarity": "Mythic"})

        collection.insert_one.assert_not_called()

    # =========================================================================
    # Batch Generation Tests
    # =========================================================================

    @pytest.mark.asyncio
    async def test_batch_generate(self, service, collection):
        """All Florbs should be written in a single insert."""
        collection.insert_many = AsyncMock(
            side_effect=lambda docs: MagicMock(inserted_ids=[ObjectId() for _ in docs])
        )

        florbs = await service.batch_generate_florbs({
            "count": 25,
            "base_image_paths": ["a.png", "b.png"],
            "rarity_weights": {"Epic": 1, "Legendary": 1},
        })

        assert len(florbs) == 25
        collection.insert_many.assert_called_once()
        assert len(collection.insert_many.call_args[0][0]) == 25
        assert {f.rarity for f in florbs} <= {"Epic", "Legendary"}
        assert {f.base_image_path for f in florbs} <= {"a.png", "b.png"}
        assert len({f.florb_id for f in florbs}) == 25

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_data", [
        {"count": 0},
        {"count": 101},
        {"count": 5, "rarity_weights": {"Common": 0}},
        {"count": 5, "rarity_weights": {"Mythic": 3}},
        {"count": 5, "base_image_paths": []},
    ])
    async def test_batch_generate_rejects_invalid_requests(self, service, collection, request_data):
        collection.insert_many = AsyncMock()

        with pytest.raises(FlorbValidationError):
            await service.batch_generate_florbs(request_data)

        collection.insert_many.assert_not_called()

    @pytest.mark.asyncio
    async def test_batch_generate_respects_configured_limit(self, tmp_path, mock_db, collection):
        service = FlorbService(settings=Settings(florb_base_dir=str(tmp_path), max_batch_size=10))
        collection.insert_many = AsyncMock()

        with pytest.raises(FlorbValidationError):
            await service.batch_generate_florbs({"count": 11})

        collection.insert_many.assert_not_called()

    # =========================================================================
    # Create Tests
    # =========================================================================

    @pytest.mark.asyncio
    async def test_create_florb_builds_gradient(self, service, collection):
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))

        florb = await service.create_florb({
            "name": "My Florb",
            "base_image_path": "orb.png",
            "rarity": "Legendary",
            "special_effects": ["Glow"],
            "tags": ["custom"],
        })

        assert florb.name == "My Florb"
        assert florb.florb_id.startswith("florb_")
        assert florb.gradient_config.intensity == 1.0
        assert florb.special_effects == ["Glow"]

    @pytest.mark.asyncio
    async def test_create_florb_with_custom_colors(self, service, collection):
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))

        florb = await service.create_florb({
            "name": "Duo",
            "base_image_path": "orb.png",
            "rarity": "Common",
            "custom_colors": ["#010101", "#020202"],
        })

        assert florb.gradient_config.colors == ["#010101", "#020202"]
        assert florb.custom_colors == ["#010101", "#020202"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_data", [
        {"name": "", "base_image_path": "orb.png", "rarity": "Rare"},
        {"name": "x", "base_image_path": "orb.png", "rarity": "Mythic"},
        {"name": "x", "base_image_path": "orb.png", "rarity": "Rare", "special_effects": ["Sparkle"]},
        {"name": "x" * 101, "base_image_path": "orb.png", "rarity": "Rare"},
        {"name": "x", "base_image_path": "orb.png", "rarity": "Rare", "description": "d" * 501},
    ])
    async def test_create_florb_validation(self, service, collection, request_data):
        collection.insert_one = AsyncMock()

        with pytest.raises(FlorbValidationError):
            await service.create_florb(request_data)

        collection.insert_one.assert_not_called()


class TestFlorbQueries:
    """Tests for listing, lookup, update and delete."""

    @pytest.fixture
    def service(self, settings, mock_db):
        return FlorbService(settings=settings)

    # =========================================================================
    # Listing Tests
    # =========================================================================

    @pytest.mark.asyncio
    async def test_get_all_florbs_paginates(self, service, collection):
        docs = [stored_florb(florb_id=f"florb_{i:016x}") for i in range(3)]
        cursor = FakeCursor(docs)
        collection.find = MagicMock(return_value=cursor)
        collection.count_documents = AsyncMock(return_value=45)

        page = await service.get_all_florbs(page=3, limit=20, rarity="Rare")

        assert isinstance(page, FlorbPage)
        assert page.total == 45
        assert page.page == 3
        assert page.total_pages == 3
        assert [f.florb_id for f in page.florbs] == [d["florb_id"] for d in docs]

        collection.find.assert_called_once_with({"rarity": "Rare"})
        collection.count_documents.assert_called_once_with({"rarity": "Rare"})
        assert ("sort", ("created_at", -1)) in cursor.calls
        assert ("skip", 40) in cursor.calls
        assert ("limit", 20) in cursor.calls

    @pytest.mark.asyncio
    async def test_get_all_florbs_caps_limit(self, service, collection):
        cursor = FakeCursor([])
        collection.find = MagicMock(return_value=cursor)
        collection.count_documents = AsyncMock(return_value=0)

        page = await service.get_all_florbs(limit=1000)

        assert ("limit", 100) in cursor.calls
        assert page.total_pages == 0
        collection.find.assert_called_once_with({})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [{"page": 0}, {"limit": 0}, {"rarity": "Mythic"}])
    async def test_get_all_florbs_validation(self, service, kwargs):
        with pytest.raises(FlorbValidationError):
            await service.get_all_florbs(**kwargs)

    # =========================================================================
    # Lookup Tests
    # =========================================================================

    @pytest.mark.asyncio
    async def test_get_florb_by_id(self, service, collection):
        doc = stored_florb()
        collection.find_one = AsyncMock(return_value=doc)

        florb = await service.get_florb_by_id(str(doc["_id"]))

        assert florb.id == str(doc["_id"])
        collection.find_one.assert_called_once_with({"_id": doc["_id"]})

    @pytest.mark.asyncio
    async def test_get_florb_by_id_missing(self, service, collection):
        collection.find_one = AsyncMock(return_value=None)
        assert await service.get_florb_by_id(str(ObjectId())) is None

    @pytest.mark.asyncio
    async def test_get_florb_by_id_rejects_malformed_id(self, service, collection):
        collection.find_one = AsyncMock()

        with pytest.raises(FlorbValidationError):
            await service.get_florb_by_id("not-an-object-id")

        collection.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_florb_by_florb_id(self, service, collection):
        doc = stored_florb()
        collection.find_one = AsyncMock(return_value=doc)

        florb = await service.get_florb_by_florb_id(doc["florb_id"])

        assert florb.florb_id == doc["florb_id"]
        collection.find_one.assert_called_once_with({"florb_id": doc["florb_id"]})

    # =========================================================================
    # Update / Delete Tests
    # =========================================================================

    @pytest.mark.asyncio
    async def test_update_florb_sets_only_supplied_fields(self, service, collection):
        doc = stored_florb(name="Renamed")
        collection.find_one_and_update = AsyncMock(return_value=doc)

        florb = await service.update_florb(str(doc["_id"]), {"name": "Renamed"})

        assert florb.name == "Renamed"
        update = collection.find_one_and_update.call_args[0][1]["$set"]
        assert set(update) == {"name", "updated_at"}

    @pytest.mark.asyncio
    async def test_update_florb_missing(self, service, collection):
        collection.find_one_and_update = AsyncMock(return_value=None)
        assert await service.update_florb(str(ObjectId()), {"tags": ["x"]}) is None

    @pytest.mark.asyncio
    async def test_update_florb_rejects_unknown_effect(self, service, collection):
        collection.find_one_and_update = AsyncMock()

        with pytest.raises(FlorbValidationError):
            await service.update_florb(str(ObjectId()), {"special_effects": ["Sparkle"]})

        collection.find_one_and_update.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_florb(self, service, collection):
        collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
        assert await service.delete_florb(str(ObjectId())) is True

        collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=0))
        assert await service.delete_florb(str(ObjectId())) is False

    # =========================================================================
    # Filter / Stats Tests
    # =========================================================================

    @pytest.mark.asyncio
    async def test_get_florbs_by_rarity(self, service, collection):
        collection.find = MagicMock(return_value=FakeCursor([stored_florb(rarity="Epic")]))

        florbs = await service.get_florbs_by_rarity("Epic")

        assert [f.rarity for f in florbs] == ["Epic"]
        collection.find.assert_called_once_with({"rarity": "Epic"})

    @pytest.mark.asyncio
    async def test_get_florbs_with_effect(self, service, collection):
        collection.find = MagicMock(return_value=FakeCursor([stored_florb(), stored_florb()]))

        florbs = await service.get_florbs_with_effect("Holo")

        assert len(florbs) == 2
        collection.find.assert_called_once_with({"special_effects": "Holo"})

    @pytest.mark.asyncio
    async def test_get_florbs_with_unknown_effect(self, service):
        with pytest.raises(FlorbValidationError):
            await service.get_florbs_with_effect("Sparkle")

    @pytest.mark.asyncio
    async def test_get_rarity_stats_fills_missing_tiers(self, service, collection):
        collection.aggregate = MagicMock(return_value=FakeCursor([
            {"_id": "Common", "count": 12},
            {"_id": "Legendary", "count": 1},
            {"_id": None, "count": 4},
        ]))

        stats = await service.get_rarity_stats()

        assert stats == {"Common": 12, "Rare": 0, "Epic": 0, "Legendary": 1}

    @pytest.mark.asyncio
    async def test_get_rarity_stats_spectrum(self, settings, mock_db, collection):
        service = FlorbService(vocabulary=SPECTRUM_VOCABULARY, settings=settings)
        collection.aggregate = MagicMock(return_value=FakeCursor([]))

        stats = await service.get_rarity_stats()

        assert list(stats) == list(SPECTRUM_VOCABULARY.tiers)
        assert set(stats.values()) == {0}


class TestBaseImages:
    """Tests for base image discovery."""

    def test_discovers_images_only(self, settings):
        images = FlorbService(settings=settings).get_base_images()

        base = settings.florb_base_dir.replace("\\", "/")
        assert images == [f"{base}/crystal.webp", f"{base}/orb.png"]

    def test_missing_directory_falls_back(self, tmp_path):
        missing = tmp_path / "missing"
        images = FlorbService(settings=Settings(florb_base_dir=str(missing))).get_base_images()

        assert [image.rsplit("/", 1)[-1] for image in images] == ["default_orb.png", "default_crystal.png"]

    def test_empty_directory_falls_back(self, tmp_path):
        images = FlorbService(settings=Settings(florb_base_dir=str(tmp_path))).get_base_images()
        assert len(images) == 2
