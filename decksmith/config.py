from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from decksmith.models.card import Platform

DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKSMITH_")

    app_name: str = "decksmith"
    debug: bool = False
    log_level: str = "INFO"

    card_database_path: Path = DATA_DIR / "default-cards.json"
    scryfall_bulk_api: str = "https://api.scryfall.com/bulk-data"

    # Platform whose versions the API resolves decklists to
    default_platform: Platform = Platform.ARENA


settings = Settings()


# =============================================================================
# RANDOM SELECTOR SALTS
# =============================================================================

# Salts for deck transformations that make arbitrary choices. Changing one
# reshuffles every deck's choices for that transformation.
BASIC_LAND_SALT = 0x3C71A9E2B05D48F6
RANDOM_BASIC_LAND_SALT = 0x9A0E6B17C4F2D385
RANDOM_LAND_SET_SALT = 0x61D8F03B7E2A9C14
