from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from auth import router as auth_router
from brands import router as brands_router
from categories import router as categories_router
from colors import router as colors_router
from core import config, db, errors, logs
from products import router as products_router
from sub_categories import router as sub_categories_router

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    logs.configure_logging()
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title=config.app_name(), lifespan=lifespan)

# Allow the admin frontend to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.install_handlers(app)

app.include_router(auth_router.router, prefix=API_PREFIX, tags=["auth"])
app.include_router(categories_router.router, prefix=API_PREFIX, tags=["categories"])
app.include_router(sub_categories_router.router, prefix=API_PREFIX, tags=["sub categories"])
app.include_router(brands_router.router, prefix=API_PREFIX, tags=["brands"])
app.include_router(colors_router.router, prefix=API_PREFIX, tags=["colors"])
app.include_router(products_router.router, prefix=API_PREFIX, tags=["products"])

# Uploaded images; public URLs are built by core.storage.public_url.
app.mount(
    "/storage",
    StaticFiles(directory=config.storage_root(), check_dir=False),
    name="storage",
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": f"{config.app_name()} api"}
