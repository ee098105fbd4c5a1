from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skitour_scout import __version__
from skitour_scout.api.endpoints import conditions, intel, elevation, resorts, health
from skitour_scout.observability.logger import setup_logging

setup_logging()

app = FastAPI(
    title="SkitourScout Condition Engine",
    description="Weather, avalanche bulletin and web report aggregation with route scoring",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(conditions.router, prefix="/api", tags=["conditions"])
app.include_router(intel.router, prefix="/api", tags=["intel"])
app.include_router(elevation.router, prefix="/api", tags=["elevation"])
app.include_router(resorts.router, prefix="/api", tags=["resorts"])
app.include_router(health.router, prefix="/api", tags=["health"])


@app.get("/")
async def root():
    return {"message": "SkitourScout Condition Engine", "version": __version__}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
