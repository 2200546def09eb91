#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Generate Florbs Script - Batch-generates Florbs and prints the rarity distribution.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# generate_florbs: Asks for a count, generates that many Florbs and prints stats.
# main: Entry point that runs the async generate_florbs function.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# None

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# asyncio: For running async code.
# os: For path handling.
# sys: For making the florb package importable.
# pathlib: For path handling.
# dotenv: For loading .env file.
# florb: Database, settings, errors and Florb service.

import asyncio
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from florb.config import configure_logging, get_settings
from florb.database import Database
from florb.exceptions import FlorbValidationError
from florb.services.florb_service import FlorbService


async def generate_florbs() -> None:
    """Generate a batch of Florbs with the configured vocabulary."""
    settings = get_settings()
    raw_count = input(f"How many florbs? (1-{settings.max_batch_size}): ")
    try:
        count = int(raw_count)
    except ValueError:
        print(f"Not a number: {raw_count!r}")
        return

    try:
        await Database.connect()
    except Exception as e:
        print(f"Failed to connect to MongoDB: {e}")
        return

    try:
        service = FlorbService()
        try:
            florbs = await service.batch_generate_florbs({"count": count})
        except FlorbValidationError as e:
            print(f"Invalid request: {e}")
            return

        for florb in florbs:
            effects = ", ".join(florb.special_effects) or "-"
            print(f"  {florb.florb_id}  {florb.rarity:<10} {effects}")

        print("\nRarity distribution across the collection:")
        for rarity, total in (await service.get_rarity_stats()).items():
            print(f"  - {rarity}: {total}")
    finally:
        await Database.disconnect()


def main() -> None:
    """Entry point for the script."""
    configure_logging()
    print("=" * 60)
    print("FLORB - Batch Generate Script")
    print("=" * 60)
    asyncio.run(generate_florbs())


if __name__ == "__main__":
    main()
