#   ______ _      ____  _____  ____
#  |  ____| |    / __ \|  __ \|  _ \
#  | |__  | |   | |  | | |__) | |_) |
#  |  __| | |   | |  | |  _  /|  _ <
#  | |    | |___| |__| | | \ \| |_) |
#  |_|    |______\____/|_|  \_\____/
#

# Export Resources Script - Dumps all resource nodes to a JSON file for migration.

# --------------------------------------------------------------------------
#                                  Functions
# --------------------------------------------------------------------------
# export_resources: Reads every resource node and writes EXPORT_PATH.
# main: Entry point that runs the async export_resources function.

# --------------------------------------------------------------------------
#                            Variables and others
# --------------------------------------------------------------------------
# EXPORT_PATH: Output file, from environment or resource_nodes.json.

# --------------------------------------------------------------------------
#                                   imports
# --------------------------------------------------------------------------
# asyncio: For running async code.
# json: For writing the export.
# os: For reading environment variables.
# sys: For making the florb package importable.
# datetime: Export timestamp.
# pathlib: For path handling.
# dotenv: For loading .env file.
# florb: Database and world map service.

import asyncio
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from dotenv import load_dotenv

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from florb.config import configure_logging
from florb.database import Database
from florb.services.world_map import WorldMapService

EXPORT_PATH = Path(os.getenv("EXPORT_PATH", "resource_nodes.json"))


async def export_resources() -> None:
    """Write all resource nodes with an export timestamp to EXPORT_PATH."""
    try:
        await Database.connect()
    except Exception as e:
        print(f"Failed to connect to MongoDB: {e}")
        return

    try:
        nodes = await WorldMapService().export_resource_data()
        payload = {
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "count": len(nodes),
            "resources": [node.model_dump(mode="json") for node in nodes],
        }
        EXPORT_PATH.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Exported {len(nodes)} resource nodes to {EXPORT_PATH}")
    finally:
        await Database.disconnect()


def main() -> None:
    """Entry point for the script."""
    configure_logging()
    asyncio.run(export_resources())


if __name__ == "__main__":
    main()
