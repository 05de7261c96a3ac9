"""
WorldMap Backend API

FastAPI server providing:
- REST API for rendering world maps (JSON)
- HTML map pages
- Tool calls that read and edit world files
"""

import os
import sys
import html
import logging
from typing import Optional, Any
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Add map_client to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'map_client'))

from worldmap import AppConfig, MapFailure, MapToolExecutor, MAP_TOOLS, World, render_map
from worldmap.errors import WorldFileError

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


config = AppConfig.from_env(load_env_file=False)


def get_config() -> AppConfig:
    return config


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting WorldMap Backend (worlds in {config.data_path.resolve()})")
    yield
    logger.info("WorldMap Backend shutdown")


app = FastAPI(
    title="WorldMap API",
    description="ASCII world maps for text-adventure backends",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models
class ToolCallRequest(BaseModel):
    arguments: dict[str, Any] = Field(default_factory=dict)


def load_world(world_name: str, cfg: AppConfig) -> World:
    """Load a world file from the data directory, or 404."""
    path = cfg.world_path(world_name)
    if not path.exists():
        raise HTTPException(status_code=404, detail=f"World not found: {world_name}")

    try:
        return World.load_json(path)
    except WorldFileError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=str(e))


# REST API Endpoints
@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "WorldMap Backend",
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/api/config")
async def get_app_config(cfg: AppConfig = Depends(get_config)):
    """Get the effective configuration."""
    return {
        "data_dir": cfg.data_dir,
        "default_radius": cfg.default_radius,
        "tools": [tool["name"] for tool in MAP_TOOLS],
    }


@app.get("/api/worlds")
async def list_worlds(cfg: AppConfig = Depends(get_config)):
    """List world files in the data directory."""
    if not cfg.data_path.exists():
        return {"worlds": []}
    return {"worlds": sorted(p.stem for p in cfg.data_path.glob("*.json"))}


@app.get("/api/worlds/{world_name}/map")
async def get_map(
    world_name: str,
    center_id: Optional[str] = None,
    radius: Optional[int] = Query(None, ge=0),
    player_location_id: Optional[str] = None,
    cfg: AppConfig = Depends(get_config),
):
    """Render a world map as JSON."""
    world = load_world(world_name, cfg)

    result = render_map(
        world.snapshot(),
        center_id=center_id,
        radius=radius if radius is not None else cfg.default_radius,
        player_location_id=player_location_id,
    )

    if not result.success:
        raise HTTPException(
            status_code=404,
            detail={"error": result.error.value, "message": result.message},
        )

    return result.to_dict()


@app.get("/worlds/{world_name}/map", response_class=HTMLResponse)
async def get_map_page(
    world_name: str,
    center_id: Optional[str] = None,
    radius: Optional[int] = Query(None, ge=0),
    player_location_id: Optional[str] = None,
    cfg: AppConfig = Depends(get_config),
):
    """Render a world map as an HTML page."""
    world = load_world(world_name, cfg)

    result = render_map(
        world.snapshot(),
        center_id=center_id,
        radius=radius if radius is not None else cfg.default_radius,
        player_location_id=player_location_id,
    )

    if result.success:
        body = f'<pre class="ascii-box">{html.escape(result.ascii)}</pre>'
        footer = f"<p>{len(result.nodes)} locations, {len(result.connections)} connections</p>"
    elif result.error is MapFailure.EMPTY_WORLD:
        body = '<p class="empty">No map data available. Create some locations first.</p>'
        footer = ""
    else:
        body = f'<p class="empty">{html.escape(result.message)}</p>'
        footer = ""

    title = html.escape(world.name)
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{title} - Map</title>
  <style>
    body {{ font-family: sans-serif; margin: 2em; }}
    .ascii-box {{ font-family: monospace; line-height: 1.1; background: #1e1e1e; color: #d4d4d4; padding: 1em; display: inline-block; }}
    .empty {{ color: #696969; }}
  </style>
</head>
<body>
  <h1>{title}</h1>
  {body}
  {footer}
</body>
</html>"""


@app.get("/api/tools")
async def list_tools():
    """Get tool definitions."""
    return {"tools": MAP_TOOLS}


@app.post("/api/worlds/{world_name}/tools/{tool_name}")
async def call_tool(
    world_name: str,
    tool_name: str,
    request: ToolCallRequest,
    cfg: AppConfig = Depends(get_config),
):
    """Run a map tool against a world. Mutating tools save the world file."""
    path = cfg.world_path(world_name)
    if path.exists():
        world = load_world(world_name, cfg)
    else:
        world = World(name=path.stem)

    executor = MapToolExecutor(
        world,
        world_path=path,
        auto_save=True,
        default_radius=cfg.default_radius,
    )
    result = executor.execute_tool(tool_name, request.arguments)

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=config.port,
        reload=True,
    )
