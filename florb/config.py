#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Configuration - Loads application settings from environment variables.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# Settings.validate_rarity_vocabulary: Rejects unknown vocabulary names.
# Settings.vocabulary: Returns the configured RarityVocabulary.
# get_settings: Returns cached Settings instance.
# configure_logging: Sets up root logging from settings.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# Settings: Configuration model matching environment variables.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# pydantic_settings: Settings management.
# pydantic: Field validation.
# functools.lru_cache: Caching.
# logging: Logging.
# typing: Type hints.
# florb.constants: Vocabulary lookup and batch limits.
# florb.models.vocabulary.RarityVocabulary: Return type of Settings.vocabulary.

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional
import logging

from florb.constants import BATCH_MAX_COUNT, VOCABULARIES, get_vocabulary
from florb.models.vocabulary import RarityVocabulary


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "florb"

    # Generation
    rarity_vocabulary: str = "classic"
    florb_base_dir: str = "src/assets/florb_base"
    max_batch_size: int = BATCH_MAX_COUNT

    # World Map
    default_resource_node_count: int = 100

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", case_sensitive=False
    )

    @field_validator("rarity_vocabulary")
    @classmethod
    def validate_rarity_vocabulary(cls, v: str) -> str:
        name = v.strip().lower()
        if name not in VOCABULARIES:
            raise ValueError(f"rarity_vocabulary must be one of: {', '.join(VOCABULARIES)}")
        return name

    @field_validator("max_batch_size")
    @classmethod
    def validate_max_batch_size(cls, v: int) -> int:
        if not 1 <= v <= BATCH_MAX_COUNT:
            raise ValueError(f"max_batch_size must be between 1 and {BATCH_MAX_COUNT}")
        return v

    @property
    def vocabulary(self) -> RarityVocabulary:
        """Resolve the configured vocabulary name"""
        return get_vocabulary(self.rarity_vocabulary)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for scripts and host applications"""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
