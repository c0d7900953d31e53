"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from text2cards_core.api import routes
from text2cards_core.generation.generator import FlashcardGenerator
from text2cards_core.model_adapters import BaseModelInvoker, create_invoker
from text2cards_core.persistence.base import GenerationStore
from text2cards_core.persistence.memory import InMemoryGenerationStore
from text2cards_core.settings import Settings


def create_app(
    settings: Settings | None = None,
    store: GenerationStore | None = None,
    invoker: BaseModelInvoker | None = None,
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Runtime configuration, read from the environment if omitted
        store: Generation store; SQL-backed when ``database_url`` is set,
            in-memory otherwise
        invoker: Model invoker; selected from the settings if omitted

    Returns:
        Configured FastAPI application
    """
    resolved_settings = settings or Settings()

    engine = None
    if store is None:
        if resolved_settings.database_url:
            from text2cards_core.persistence.database import (
                SqlAlchemyGenerationStore,
                create_session_maker,
            )

            engine, session_maker = create_session_maker(
                resolved_settings.database_url, echo=resolved_settings.debug
            )
            store = SqlAlchemyGenerationStore(session_maker)
        else:
            store = InMemoryGenerationStore()

    resolved_invoker = invoker or create_invoker(resolved_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Create tables on startup and release the HTTP client on shutdown."""
        if engine is not None:
            from text2cards_core.persistence.database import init_db

            await init_db(engine)
        yield
        await resolved_invoker.aclose()
        if engine is not None:
            await engine.dispose()

    app = FastAPI(
        title="text2cards API",
        description="API for generating flashcards from free-form text",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = resolved_settings
    app.state.store = store
    app.state.generator = FlashcardGenerator(store, resolved_invoker)

    app.include_router(routes.router, prefix="/api/v1", tags=["generations"])
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "text2cards_core.api.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
