"""In-memory storefront backend simulator (FastAPI)."""

from storefront.simulator.main import app
from storefront.simulator.store import SimulatorError, SimulatorStore, get_simulator_store

__all__ = ["app", "SimulatorError", "SimulatorStore", "get_simulator_store"]
