from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from artisans import router as artisans_router
from catalog import router as catalog_router
from charts import router as charts_router
from chat import router as chat_router
from core import config, db
from core.errors import install_error_handlers
from core.logging import configure_logging
from core.middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from inquiries import router as inquiries_router
from subscriptions import router as subscriptions_router
from users import router as users_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # One asyncpg pool per process, handed to routes through `db.get_db`.
    app.state.db = await db.connect()
    try:
        yield
    finally:
        await db.disconnect(app.state.db)


app = FastAPI(title="Artisan Registry API", lifespan=lifespan)

# Added innermost first; CORS wraps everything so 429s still carry its headers.
app.add_middleware(GZipMiddleware, minimum_size=config.gzip_min_bytes())
app.add_middleware(
    RateLimitMiddleware,
    max_requests=config.rate_limit_max(),
    window_s=config.rate_limit_window_s(),
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

app.include_router(artisans_router.router, tags=["artisans"])
app.include_router(catalog_router.router, tags=["catalog"])
app.include_router(charts_router.router, tags=["charts"])
app.include_router(users_router.router, tags=["users"])
app.include_router(inquiries_router.router, tags=["inquiries"])
app.include_router(chat_router.router, tags=["chat"])
app.include_router(subscriptions_router.router, tags=["subscriptions"])

_upload_root = Path(config.upload_dir())
_upload_root.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(_upload_root)), name="uploads")


@app.get("/health")
async def health(database: db.Database = Depends(db.get_db)) -> dict:
    return {"status": "ok", "database": await database.ping()}


@app.get("/")
def root() -> dict:
    return {"message": "artisan-registry api"}
