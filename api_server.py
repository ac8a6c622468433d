# ========================
# api_server.py
# ========================

"""
FastAPI Server for the EV Insights Pipeline

Serves filter options and dashboard views over HTTP for the presentation
layer. The dataset is parsed once at startup and reloaded on request.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from ev_insights import __version__
from ev_insights.pipeline import DataPipeline, FilterSpec, VIEW_NAMES
from ev_insights.utils.config import Config
from ev_insights.utils.data_generator import DataGenerator
from ev_insights.utils.logging_setup import setup_logging

# Configuration
config = Config()

# Setup logging
setup_logging(log_level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="EV Insights API",
    description="Filter options and aggregate views over EV registration data",
    version=__version__
)

# Add CORS middleware to allow frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Constants
VIEW_NOT_FOUND_MSG = "View not found"


def initialize_pipeline() -> DataPipeline:
    """Load the configured dataset, generating a sample one if it is missing."""
    pipeline = DataPipeline(config=config)

    if not Path(pipeline.input_file).exists():
        logger.warning(f"Input file {pipeline.input_file} missing, generating sample data")
        DataGenerator(seed=42).generate_dataset(
            file_path=pipeline.input_file,
            num_rows=config.DEFAULT_SAMPLE_ROWS,
            error_rate=config.SAMPLE_ERROR_RATE
        )

    if not pipeline.validate_input():
        logger.error("Starting with an empty dataset")
        return pipeline

    try:
        pipeline.load()
    except (OSError, ValueError) as e:
        logger.error(f"Could not load {pipeline.input_file}, starting with an empty dataset: {e}")
    return pipeline


# Global pipeline state
pipeline = initialize_pipeline()
loaded_at = datetime.now().isoformat()


def build_filter_spec(year_min: Optional[int],
                      year_max: Optional[int],
                      manufacturers: Optional[List[str]],
                      vehicle_types: Optional[List[str]],
                      states: Optional[List[str]]) -> FilterSpec:
    """Translate query parameters into a FilterSpec, defaulting to the dataset bounds."""
    low, high = pipeline.filter_options['year_range']
    try:
        return FilterSpec(
            year_range=(year_min if year_min is not None else low,
                        year_max if year_max is not None else high),
            manufacturers=manufacturers or (),
            vehicle_types=vehicle_types or (),
            states=states or (),
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "EV Insights API",
        "version": __version__,
        "endpoints": {
            "options": "/filters/options - Selectable filter values",
            "dashboard": "/dashboard - All views for a filter",
            "view": "/views/{name} - A single view for a filter",
            "reload": "/reload - Re-read the input file",
            "health": "/health - Health check",
            "api_docs": "/docs - API documentation"
        },
        "views": VIEW_NAMES,
        "filter_parameters": ["year_min", "year_max", "manufacturers", "vehicle_types", "states"],
        "api_docs_url": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "dataset_version": pipeline.dataset_version,
        "vehicles": len(pipeline.vehicles),
        "loaded_at": loaded_at
    }


@app.get("/filters/options")
async def get_options():
    """Year bounds, manufacturers and states available for filtering."""
    options = pipeline.filter_options
    return {
        "year_range": list(options['year_range']),
        "manufacturers": options['manufacturers'],
        "states": options['states'],
        "vehicle_types": ["BEV", "PHEV"]
    }


@app.get("/dashboard")
async def get_dashboard(
    year_min: Optional[int] = Query(None, description="Earliest model year (inclusive)"),
    year_max: Optional[int] = Query(None, description="Latest model year (inclusive)"),
    manufacturers: Optional[List[str]] = Query(None, description="Makes to include"),
    vehicle_types: Optional[List[str]] = Query(None, description="BEV and/or PHEV"),
    states: Optional[List[str]] = Query(None, description="States to include")
) -> Dict[str, Any]:
    """
    Compute every dashboard view for the given filters.

    Returns:
        dict: KPIs plus one entry per view
    """
    spec = build_filter_spec(year_min, year_max, manufacturers, vehicle_types, states)
    return pipeline.build_dashboard(spec)


@app.get("/views/{name}")
async def get_view(
    name: str,
    year_min: Optional[int] = Query(None, description="Earliest model year (inclusive)"),
    year_max: Optional[int] = Query(None, description="Latest model year (inclusive)"),
    manufacturers: Optional[List[str]] = Query(None, description="Makes to include"),
    vehicle_types: Optional[List[str]] = Query(None, description="BEV and/or PHEV"),
    states: Optional[List[str]] = Query(None, description="States to include")
):
    """Return a single named view for the given filters."""
    if name not in VIEW_NAMES:
        raise HTTPException(status_code=404, detail=VIEW_NOT_FOUND_MSG)

    spec = build_filter_spec(year_min, year_max, manufacturers, vehicle_types, states)
    dashboard = pipeline.build_dashboard(spec)
    return {"view": name, "filters": dashboard['filters'], "data": dashboard[name]}


@app.post("/reload")
async def reload_dataset():
    """Re-read the input file and replace the dataset."""
    global loaded_at

    if not pipeline.validate_input():
        raise HTTPException(status_code=500, detail="Input file validation failed")

    try:
        pipeline.load()
    except (OSError, ValueError) as e:
        logger.error(f"Reload failed: {e}")
        raise HTTPException(status_code=500, detail=f"Reload failed: {str(e)}")

    loaded_at = datetime.now().isoformat()
    return {
        "status": "reloaded",
        "dataset_version": pipeline.dataset_version,
        "parse_stats": pipeline.parse_stats
    }


def start_server(host: str = config.API_HOST, port: int = config.API_PORT, reload: bool = False):
    """Start the FastAPI server."""
    logger.info(f"Starting EV Insights API server on {host}:{port}")
    uvicorn.run(
        "api_server:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


if __name__ == "__main__":
    start_server()
