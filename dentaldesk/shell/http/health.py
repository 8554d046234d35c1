"""
Health endpoints for the clinic API.

- /health: every check plus version and uptime
- /health/ready: only the checks that clinic traffic depends on
- /health/live: answers while the process runs

Checks, in report order:
- startup: the lifespan handler loaded the rules and ran migrations
- database: the clinic store answers a query
- website: the public site is not switched off (informational only)

An informational check can make /health report "degraded" but never
takes the process out of rotation.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from dentaldesk.domain.entities import FeatureToggles


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class CheckResult:
    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0.0
    critical: bool = True

    @property
    def blocks_traffic(self) -> bool:
        return self.critical and self.status != HealthStatus.HEALTHY

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "latency_ms": round(self.latency_ms, 3),
            "critical": self.critical,
        }


def _ms_since(started: float) -> float:
    return (time.monotonic() - started) * 1000


def overall_status(results: list[CheckResult]) -> HealthStatus:
    if any(r.blocks_traffic for r in results):
        return HealthStatus.UNHEALTHY
    if any(r.status != HealthStatus.HEALTHY for r in results):
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


class ClinicHealth:
    """
    Health state of one API process.

    The database ping and the toggle reader are wired in by the lifespan
    handler; until then the database check reports the store as missing.
    """

    def __init__(
        self,
        database_ping: Callable[[], None] | None = None,
        read_toggles: Callable[[], FeatureToggles] | None = None,
    ) -> None:
        self.database_ping = database_ping
        self.read_toggles = read_toggles
        self._started_at: float | None = None
        self._migrations: list[str] = []

    def mark_started(self, migrations: list[str] | None = None) -> None:
        self._started_at = time.monotonic()
        self._migrations = list(migrations or [])

    @property
    def uptime_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return time.monotonic() - self._started_at

    def check_startup(self) -> CheckResult:
        if self._started_at is None:
            return CheckResult(
                name="startup",
                status=HealthStatus.UNHEALTHY,
                message="Rules and migrations not loaded yet",
            )
        if self._migrations:
            message = f"Started after applying {', '.join(self._migrations)}"
        else:
            message = "Started; schema already current"
        return CheckResult(name="startup", status=HealthStatus.HEALTHY, message=message)

    def check_database(self) -> CheckResult:
        if self.database_ping is None:
            return CheckResult(
                name="database",
                status=HealthStatus.UNHEALTHY,
                message="No clinic store configured",
            )
        started = time.monotonic()
        try:
            self.database_ping()
        except Exception as e:
            return CheckResult(
                name="database",
                status=HealthStatus.UNHEALTHY,
                message=f"Clinic store error: {e!s}",
                latency_ms=_ms_since(started),
            )
        return CheckResult(
            name="database",
            status=HealthStatus.HEALTHY,
            message="Clinic store reachable",
            latency_ms=_ms_since(started),
        )

    def check_website(self) -> CheckResult:
        if self.read_toggles is None:
            return CheckResult(
                name="website",
                status=HealthStatus.HEALTHY,
                message="Feature toggles not monitored",
                critical=False,
            )
        try:
            toggles = self.read_toggles()
        except Exception as e:
            return CheckResult(
                name="website",
                status=HealthStatus.DEGRADED,
                message=f"Feature toggles unreadable: {e!s}",
                critical=False,
            )
        if not toggles.website_enabled:
            return CheckResult(
                name="website",
                status=HealthStatus.DEGRADED,
                message="Public website is switched off",
                critical=False,
            )
        return CheckResult(
            name="website",
            status=HealthStatus.HEALTHY,
            message="Public website is on",
            critical=False,
        )

    def run(self) -> list[CheckResult]:
        return [self.check_startup(), self.check_database(), self.check_website()]


_health = ClinicHealth()


def get_clinic_health() -> ClinicHealth:
    return _health


def configure_health(
    database_ping: Callable[[], None],
    read_toggles: Callable[[], FeatureToggles] | None = None,
) -> None:
    _health.database_ping = database_ping
    _health.read_toggles = read_toggles


def mark_startup_complete(migrations: list[str] | None = None) -> None:
    _health.mark_started(migrations)


# --- FastAPI Router ---


def create_health_router(
    version: str = "0.0.0",
    health: ClinicHealth | None = None,
) -> APIRouter:
    """
    Create the health router.

    Args:
        version: DentalDesk version reported by /health
        health: Health state to report (the process-wide one if None)
    """
    router = APIRouter(tags=["health"])
    state = health or get_clinic_health()

    @router.get(
        "/health",
        response_model=None,
        responses={
            200: {"description": "Healthy, or degraded by an informational check"},
            503: {"description": "A check that clinic traffic depends on is failing"},
        },
    )
    def health_report() -> JSONResponse:
        results = state.run()
        overall = overall_status(results)
        code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if overall == HealthStatus.UNHEALTHY
            else status.HTTP_200_OK
        )
        return JSONResponse(
            content={
                "status": overall.value,
                "version": version,
                "uptime_seconds": state.uptime_seconds,
                "checks": [r.to_dict() for r in results],
            },
            status_code=code,
        )

    @router.get(
        "/health/ready",
        response_model=None,
        responses={
            200: {"description": "Ready for clinic traffic"},
            503: {"description": "Not ready"},
        },
    )
    def readiness() -> JSONResponse:
        blocking = [r.name for r in state.run() if r.blocks_traffic]
        return JSONResponse(
            content={"ready": not blocking, "blocking": blocking},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE if blocking else status.HTTP_200_OK,
        )

    @router.get("/health/live", response_model=None)
    def liveness() -> JSONResponse:
        return JSONResponse(content={"alive": True, "uptime_seconds": state.uptime_seconds})

    return router
