"""
Pytest configuration and fixtures for the backend API tests.
"""

import sys
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

# Add project paths
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "map_client"))
sys.path.insert(0, str(project_root / "backend"))

import main
from worldmap import AppConfig, World


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """A world directory holding one small saved world."""
    world = World(name="harbor")
    world.add_location("Pier", "Salt-stained planks", location_id="pier")
    world.add_location("Market", location_id="market")
    world.add_location("Beacon", location_id="lighthouse")
    world.connect_locations("pier", "market", "north")
    world.connect_locations("pier", "lighthouse", "east")
    world.save_json(tmp_path / "harbor.json")

    World(name="void").save_json(tmp_path / "void.json")
    return tmp_path


@pytest.fixture
def app_config(data_dir) -> AppConfig:
    return AppConfig(data_dir=str(data_dir))


@pytest.fixture
async def client(app_config):
    """HTTP client bound to the app, with the test config injected."""
    main.app.dependency_overrides[main.get_config] = lambda: app_config
    async with AsyncClient(transport=ASGITransport(app=main.app), base_url="http://test") as c:
        yield c
    main.app.dependency_overrides.clear()
