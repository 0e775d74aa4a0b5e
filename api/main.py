"""
Crypto Market Index API - read-only JSON over the stored runs for the dashboard.

    uvicorn api.main:app --port 8000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import ensure_directories, settings
from database import close_engine, create_tables, init_engine
from .routes import router

TITLE = "Crypto Market Index"
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_directories()
    await init_engine()
    await create_tables()
    yield
    await close_engine()


app = FastAPI(
    title=TITLE,
    description="Fear & Greed Index, Altcoin Season Score and monitored crypto news",
    version=VERSION,
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.API_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {"name": TITLE, "version": VERSION, "status": "running", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT)
