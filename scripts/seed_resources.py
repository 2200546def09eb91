#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Seed Resources Script - Scatters random resource nodes across the world map.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# seed_resources: Connects to MongoDB and inserts RESOURCE_NODE_COUNT nodes.
# main: Entry point that runs the async seed_resources function.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# RESOURCE_NODE_COUNT: Number of nodes to create, from environment or settings.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# asyncio: For running async code.
# collections: Counting nodes per resource type.
# os: For reading environment variables.
# sys: For making the florb package importable.
# pathlib: For path handling.
# dotenv: For loading .env file.
# florb: Database, settings and world map service.

import asyncio
import os
import sys
from collections import Counter
from pathlib import Path
from dotenv import load_dotenv

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from florb.config import configure_logging, get_settings
from florb.database import Database
from florb.services.world_map import WorldMapService

RESOURCE_NODE_COUNT = int(os.getenv("RESOURCE_NODE_COUNT", get_settings().default_resource_node_count))


async def seed_resources() -> None:
    """Insert RESOURCE_NODE_COUNT random resource nodes after confirmation."""
    settings = get_settings()
    print(f"Connecting to MongoDB: {settings.mongodb_database}...")

    try:
        await Database.connect()
    except Exception as e:
        print(f"Failed to connect to MongoDB: {e}")
        return

    try:
        service = WorldMapService()
        existing = await service.get_all_resource_nodes()
        print(f"Found {len(existing)} existing resource nodes.")

        confirm = input(f"Create {RESOURCE_NODE_COUNT} new resource nodes? (yes/no): ")
        if confirm.lower() != "yes":
            print("Operation cancelled.")
            return

        nodes = await service.generate_resource_nodes(RESOURCE_NODE_COUNT)
        by_type = Counter(node.type.value for node in nodes)
        print("Seeding complete!")
        for resource_type, count in sorted(by_type.items()):
            print(f"  - {resource_type}: {count} nodes")
    finally:
        await Database.disconnect()
        print("Disconnected from MongoDB.")


def main() -> None:
    """Entry point for the script."""
    configure_logging()
    print("=" * 60)
    print("FLORB - Seed World Map Resources Script")
    print("=" * 60)
    asyncio.run(seed_resources())


if __name__ == "__main__":
    main()
