"""
FastAPI application factory.

Kept separate from routes so the app instance can be imported cleanly
by uvicorn without triggering route registration side effects.
"""

from dotenv import load_dotenv
load_dotenv()  # Must run before settings are read from ACADEMY_* variables

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from academy.config import GameSettings, load_settings
from academy.engine import AcademyEngine
from api.routes import router


def create_app(settings: GameSettings | None = None) -> FastAPI:
    app = FastAPI(
        title="Youth Academy Simulator",
        description="Season-based youth football academy management simulation",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    # One game per app instance; the engine is not thread-safe, so run a single worker
    app.state.engine = AcademyEngine(settings or load_settings())

    return app


app = create_app()
