from src.simulation_engine.models import EpisodeReport, SimulationReport
from src.simulation_engine.season_simulator import SeasonSimulator, build_demo_season

__all__ = ["EpisodeReport", "SeasonSimulator", "SimulationReport", "build_demo_season"]
