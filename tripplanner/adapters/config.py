from __future__ import annotations

import os
from dataclasses import dataclass

from tripplanner.domain.algorithms.search import SearchOptions


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


def _env_float(name: str) -> float | None:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else None


@dataclass(frozen=True, slots=True)
class PlannerRuntimeConfig:
    data_path: str
    encoding: str
    search: SearchOptions

    @staticmethod
    def from_env() -> "PlannerRuntimeConfig":
        defaults = SearchOptions()
        search = SearchOptions(
            max_results=_env_int("ROUTE_MAX_RESULTS", defaults.max_results),
            max_segments=_env_int("ROUTE_MAX_SEGMENTS", defaults.max_segments),
            horizon_s=_env_int("ROUTE_HORIZON_S", defaults.horizon_s),
            max_labels_per_stop=_env_int(
                "ROUTE_MAX_LABELS_PER_STOP", defaults.max_labels_per_stop
            ),
            max_expansions=_env_int("ROUTE_MAX_EXPANSIONS", defaults.max_expansions),
            time_budget_s=_env_float("ROUTE_TIME_BUDGET_S"),
            wrap_days=_env_bool("ROUTE_WRAP_DAYS", defaults.wrap_days),
        )

        return PlannerRuntimeConfig(
            data_path=(os.getenv("TRANSIT_DATA_PATH") or "data/sample").strip(),
            encoding=(os.getenv("TRANSIT_DATA_ENCODING") or "iso-8859-1").strip(),
            search=search,
        )
