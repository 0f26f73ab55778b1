"""
Population & Road WebGIS API - FastAPI Application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_map_config
from app.routers import datasets, map_view
from app.services.dataset_loader import load_datasets
from app.services.map_session import MapSession, set_current_session

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Load both datasets once; a failed one is simply unavailable
    region_data, road_data = load_datasets(get_map_config())
    if region_data is not None or road_data is not None:
        set_current_session(MapSession(region_data, road_data))
    yield


app = FastAPI(
    title="Population & Road WebGIS API",
    description="Cascading region filters, population choropleth, heatmap points and road classes",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for frontend communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",              # Local dev
        "http://localhost:8501",              # Streamlit
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "message": "Population & Road WebGIS API"}


@app.get("/health")
async def health_check():
    """Detailed health check"""
    return {
        "status": "healthy",
        "api_version": "0.1.0",
    }


# Include routers
app.include_router(datasets.router, prefix="/api/datasets", tags=["datasets"])
app.include_router(map_view.router, prefix="/api/map", tags=["map"])
