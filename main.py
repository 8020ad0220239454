import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from dal.kv_dal import KeyValueDAL
from routes.export_route import router as export_router
from routes.item_route import router as item_router
from routes.session_route import router as session_router
from services.image_store import ImageStore
from services.session_persistence import SessionPersistence
from services.session_store import SessionStore
from utils.database_init import AsyncDatabaseInitializer

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(
    level=getattr(logging, (os.getenv("LOG_LEVEL") or "INFO").upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the SQLite key/value store (kept across restarts at DATABASE_DIR/app.db)
      - the on-disk image store (DATABASE_DIR/images)
      - the annotation session, restored from the key/value store
    and attach them to `app.state`.
    """
    db_initializer = AsyncDatabaseInitializer()
    await db_initializer.ensure_database()
    app.state.db_initializer = db_initializer

    app.state.image_store = ImageStore(db_initializer.images_dir)

    persistence = SessionPersistence(KeyValueDAL(db_initializer))
    app.state.session_store = await SessionStore.restore(persistence)

    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(lifespan=lifespan)

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports whether the session store is ready.
        """
        store = getattr(request.app.state, "session_store", None)
        return {
            "ok": True,
            "db_initialized": hasattr(request.app.state, "db_initializer"),
            "items": len(store.snapshot()) if store is not None else 0,
        }

    app.include_router(session_router)
    app.include_router(item_router)
    app.include_router(export_router)

    return app


app = create_app()
