from __future__ import annotations

from functools import lru_cache

from tripplanner.adapters.config import PlannerRuntimeConfig
from tripplanner.adapters.persistence import TextTransitRepository
from tripplanner.app.services.route_planner_service import RoutePlannerService


@lru_cache(maxsize=1)
def get_route_planner_service() -> RoutePlannerService:
    # One service per process so every request shares the published snapshot.
    cfg = PlannerRuntimeConfig.from_env()
    repository = TextTransitRepository(base_path=cfg.data_path, encoding=cfg.encoding)
    return RoutePlannerService(repository=repository, options=cfg.search)
