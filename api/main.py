# api/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from skill_system.paths import PathRequestOrchestrator
from skill_system.store import SkillTreesStore
from .config import Settings, load_settings
from .routers import search
from .tree_client import SkillTreeClient


def create_app(
    settings: Optional[Settings] = None,
    tree_client: Optional[SkillTreeClient] = None,
):
    # This is the composition root: the client, the store and the path
    # orchestrator are built once here and reach the routes via Depends.
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)

    if tree_client is None:
        tree_client = SkillTreeClient(
            settings.base_url,
            timeout=settings.http_timeout_seconds,
            strict=settings.strict_graph_validation,
        )

    store = SkillTreesStore(tree_client)
    orchestrator = PathRequestOrchestrator(store, tree_client, settings.entry_node_id)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The universal tree is fetched once per process
        await store.load()
        yield
        await tree_client.aclose()

    app = FastAPI(
        title="SkillForge Search",
        description="Search the skill tree and generate learning paths.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.orchestrator = orchestrator

    app.include_router(search.router)

    # Also expose the same routes under /api for the frontend
    app.include_router(search.router, prefix="/api")

    return app


# For production, uvicorn can be told to use the factory: uvicorn api.main:create_app --factory
app = create_app()
