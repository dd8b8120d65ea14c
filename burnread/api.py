"""HTTP API for BurnRead.

Routes:
- POST /api/messages        create a secret
- GET  /api/messages/{id}   read (and destroy) a secret
- GET  /health              liveness and storage reachability
- GET  /metrics             message counters and request latencies
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import Settings, get_settings
from .lifecycle import CleanupScheduler
from .monitoring.health import HealthCheck
from .safety.validation import ValidationError
from .security.rate_limiter import RateLimitExceeded
from .service import SecretNotFoundError, SecretService

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal Server Error"
TOO_MANY_REQUESTS = "Too many requests"
INVALID_BODY = "Invalid request body"


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _too_many_requests(e: RateLimitExceeded) -> JSONResponse:
    response = _error(429, TOO_MANY_REQUESTS, retry_after=e.retry_after)
    response.headers["Retry-After"] = str(e.retry_after)
    return response


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[SecretService] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Application settings (loaded from the environment if None)
        service: Prebuilt secret service (built from settings if None)

    Returns:
        Configured application
    """
    settings = settings or get_settings()
    service = service or SecretService.from_settings(settings)
    health = HealthCheck(storage=service.storage)
    scheduler = CleanupScheduler(service.cleanup, settings.cleanup_interval)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        scheduler.start()
        logger.info(f"BurnRead started with {service.storage.name} storage")
        yield
        await scheduler.stop()
        await service.close()
        logger.info("BurnRead stopped")

    app = FastAPI(
        title="BurnRead",
        description="Self-destructing secret sharing",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service = service
    app.state.health = health
    app.state.scheduler = scheduler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=settings.cors_allowed_methods,
        allow_headers=settings.cors_allowed_headers,
        max_age=settings.cors_max_age,
    )

    @app.post("/api/messages")
    async def create_message(request: Request):
        start = time.perf_counter()
        client_ip = _client_ip(request)
        try:
            try:
                body = await request.json()
            except ValueError:
                return _error(400, INVALID_BODY)
            if not isinstance(body, dict):
                return _error(400, INVALID_BODY)

            secret_id = await service.create_message(
                body.get("message", ""),
                ttl=body.get("ttl"),
                client_ip=client_ip,
            )
            return JSONResponse(status_code=201, content={"id": secret_id})
        except ValidationError as e:
            return _error(400, e.reason)
        except RateLimitExceeded as e:
            return _too_many_requests(e)
        except Exception:
            logger.exception("Error creating message")
            service.audit.log_access_denied(client_ip, "INTERNAL_ERROR")
            return _error(500, INTERNAL_ERROR)
        finally:
            service.metrics.record_latency(
                "create_message", (time.perf_counter() - start) * 1000
            )

    @app.get("/api/messages/{secret_id}")
    async def read_message(secret_id: str, request: Request):
        start = time.perf_counter()
        client_ip = _client_ip(request)
        try:
            message = await service.read_message(secret_id, client_ip=client_ip)
            return {"message": message}
        except SecretNotFoundError as e:
            return _error(404, str(e))
        except RateLimitExceeded as e:
            return _too_many_requests(e)
        except Exception:
            logger.exception(f"Error reading message {secret_id}")
            service.audit.log_access_denied(client_ip, "INTERNAL_ERROR")
            return _error(500, INTERNAL_ERROR)
        finally:
            service.metrics.record_latency(
                "read_message", (time.perf_counter() - start) * 1000
            )

    @app.get("/health")
    async def get_health():
        status = await health.check_health()
        return JSONResponse(
            status_code=200 if health.is_healthy else 503,
            content=status,
        )

    @app.get("/metrics")
    async def get_metrics(format: str = "json"):
        if format == "prometheus":
            return PlainTextResponse(
                service.metrics.to_prometheus(),
                media_type="text/plain; version=0.0.4",
            )
        return service.metrics.snapshot()

    return app
