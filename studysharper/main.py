from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from studysharper.core.config import get_settings
from studysharper.core.logging import setup_logging
from studysharper.routers import system, flashcards, sets, study


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Proxy des requêtes flashcards vers le backend StudySharper",
    )

    # Middleware CORS
    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],  # fallback si mal configuré
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(system.router)
    app.include_router(sets.router)
    app.include_router(study.router)
    app.include_router(flashcards.router)

    # Redirect root → docs
    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(url="/docs")

    return app


app = create_app()
