"""Main FastAPI application for the Spotify co-playlist service."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coplaylist.actions import router as actions_router
from coplaylist.admin import router as admin_router
from coplaylist.admin import token_router as admin_token_router
from coplaylist.auth import router as auth_router
from coplaylist.constants import APP_DESCRIPTION, APP_TITLE, APP_VERSION, Routes
from coplaylist.genres import router as genres_router
from coplaylist.leaderboard import router as leaderboard_router
from coplaylist.logging import configure_logging
from coplaylist.middleware import RateLimitMiddleware, RequestIDMiddleware, SecurityHeadersMiddleware
from coplaylist.playback import router as playback_router
from coplaylist.session import router as session_router
from coplaylist.settings import get_settings
from coplaylist.spotify.exceptions import SpotifyClientError
from coplaylist.store.exceptions import StoreError
from coplaylist.store.factory import create_store

logger = logging.getLogger(__name__)


class CoPlaylistApp:
    """Application container — configures middleware, routers, error handlers and lifespan."""

    app: FastAPI

    def __init__(self) -> None:
        configure_logging(get_settings().LOG_LEVEL)
        self.app = FastAPI(
            title=APP_TITLE,
            description=APP_DESCRIPTION,
            version=APP_VERSION,
            lifespan=self._lifespan,
        )
        self._setup_middleware()
        self._setup_exception_handlers()
        self._setup_routers()

    @staticmethod
    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Open the key-value store on startup and close it on shutdown.

        A store already placed on ``app.state`` is used as-is and left open.
        """
        owned = getattr(app.state, "store", None) is None
        if owned:
            app.state.store = create_store(get_settings())
        if not await app.state.store.ping():
            logger.warning("Key-value store did not answer ping at startup")
        try:
            yield
        finally:
            if owned:
                await app.state.store.close()
                app.state.store = None

    def _setup_middleware(self) -> None:
        settings = get_settings()

        # Last added runs outermost: CORS, then request id, security headers, rate limit.
        self.app.add_middleware(RateLimitMiddleware, auth_limit=settings.RATE_LIMIT_AUTH_PER_MINUTE)
        self.app.add_middleware(SecurityHeadersMiddleware)
        self.app.add_middleware(RequestIDMiddleware)

        origins = [o.strip() for o in settings.CORS_ALLOWED_ORIGINS.split(",") if o.strip()]
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _setup_exception_handlers(self) -> None:
        @self.app.exception_handler(RequestValidationError)
        async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
            """Malformed or missing request data is a 400, not FastAPI's default 422."""
            return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

        @self.app.exception_handler(StoreError)
        async def store_error(request: Request, exc: StoreError) -> JSONResponse:
            logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
            return JSONResponse(status_code=503, content={"detail": "Storage backend unavailable"})

        @self.app.exception_handler(SpotifyClientError)
        async def spotify_error(request: Request, exc: SpotifyClientError) -> JSONResponse:
            logger.warning("Spotify call failed on %s: %s", request.url.path, exc)
            return JSONResponse(status_code=502, content={"detail": str(exc)})

    def _setup_routers(self) -> None:
        self.app.include_router(leaderboard_router, prefix=Routes.LEADERBOARD.prefix, tags=[Routes.LEADERBOARD.tag])
        self.app.include_router(playback_router, prefix=Routes.CURRENT_SONG.prefix, tags=[Routes.CURRENT_SONG.tag])
        self.app.include_router(session_router, prefix=Routes.SESSION.prefix, tags=[Routes.SESSION.tag])
        self.app.include_router(admin_token_router, prefix=Routes.ADMIN_TOKEN.prefix, tags=[Routes.ADMIN_TOKEN.tag])
        self.app.include_router(admin_router, prefix=Routes.ADMIN.prefix, tags=[Routes.ADMIN.tag])
        self.app.include_router(genres_router, prefix=Routes.GENRE_TRACKER.prefix, tags=[Routes.GENRE_TRACKER.tag])
        self.app.include_router(actions_router, prefix=Routes.LOG_ACTION.prefix, tags=[Routes.LOG_ACTION.tag])
        self.app.include_router(auth_router, prefix=Routes.AUTH.prefix, tags=[Routes.AUTH.tag])

        @self.app.get(Routes.HEALTH)
        async def health_check(request: Request) -> dict[str, str]:
            """Health check endpoint; reports whether the store answers."""
            store_ok = await request.app.state.store.ping()
            return {"status": "healthy" if store_ok else "degraded"}

        @self.app.get("/")
        async def root() -> dict[str, str]:
            """Root endpoint."""
            return {"message": APP_TITLE, "version": APP_VERSION}


_application = CoPlaylistApp()
app: FastAPI = _application.app
