import asyncio
import sys

from backend.app.core.logging import setup_logging
from backend.app.db import init_models
from backend.app.db.base import engine


if __name__ == "__main__":
    setup_logging()
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    # --reset drops every table first - DEV MODE ONLY
    asyncio.run(init_models(engine, drop_existing="--reset" in sys.argv))
