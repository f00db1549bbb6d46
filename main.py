import sys
import time
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skycast.api import v1_router
from skycast.api.health import health_router
from skycast.api.relay import relay_router
from skycast.config.config import config
from skycast.exceptions import InputError, JobSchedulingError, SkyCastError, StorageError
from skycast.services.schedule_service import schedule_service
from skycast.services.weather_orchestrator import build_orchestrator
from skycast.utils.logging_config import setup_logging

setup_logging()
logger = structlog.get_logger(__name__)

# Domain errors that escape a route; anything unlisted is an upstream problem
ERROR_STATUS = {
    InputError: 400,
    StorageError: 500,
    JobSchedulingError: 503,
}


def _error_body(message: str, status_code: int) -> dict:
    return {"error": message, "status_code": status_code, "timestamp": time.time()}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Start the job scheduler and the orchestrator that schedules on it.

    On shutdown the pending tier-downgrade retry and the auto refresh timer are
    dropped before the scheduler stops.
    """
    logger.info("Starting SkyCast", hosting_scheme=config.hosting_scheme, storage=config.storage_backend)

    try:
        schedule_service.start()
        app.state.schedule_service = schedule_service
        app.state.orchestrator = build_orchestrator(schedule_service)
        yield

    except Exception as e:
        logger.error("SkyCast failed to start", error=str(e))
        raise

    finally:
        orchestrator = getattr(app.state, "orchestrator", None)
        if orchestrator is not None:
            orchestrator.shutdown()
        await schedule_service.stop()
        logger.info("SkyCast stopped")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="SkyCast API",
        description="""
        ## SkyCast API

        Weatherstack reports for free-text locations.

        - `/api/weather` relays requests to Weatherstack's HTTP-only endpoint for
          clients served over HTTPS
        - `/api/v1/weather` runs the query pipeline: historical requests rejected
          by the plan are retried once with live data
        - `/api/v1/settings` stores the access key and toggles historical mode
          and auto refresh

        Routes under `/api/v1` take a Bearer token when one is configured.
        """,
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its duration; query strings carry access keys and are left out."""
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "HTTP request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                process_time=time.time() - start_time,
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            "HTTP request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            client_ip=request.client.host if request.client else "unknown",
            process_time=process_time,
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.exception_handler(SkyCastError)
    async def skycast_exception_handler(request: Request, exc: SkyCastError):
        """Map domain errors that escape a route to a JSON error."""
        status_code = next(
            (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
            502,
        )
        logger.warning(
            "Request failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
            status_code=status_code,
        )
        return JSONResponse(status_code=status_code, content=_error_body(str(exc), status_code))

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning("HTTP exception", path=request.url.path, status_code=exc.status_code, detail=exc.detail)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.detail, exc.status_code))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception", path=request.url.path, error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body("An unexpected error occurred. Please try again later.", 500),
        )

    app.include_router(health_router)
    app.include_router(relay_router)
    app.include_router(v1_router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "SkyCast API",
            "version": "1.0.0",
            "hosting_scheme": config.hosting_scheme,
            "relay": "/api/weather",
            "docs": "/docs",
        }

    return app


app = create_app()


def main():
    logger.info(
        f"Starting SkyCast server in {config.environment} environment",
        host=config.api_host,
        port=config.api_port,
    )

    try:
        uvicorn.run(
            app,
            host=config.api_host,
            port=config.api_port,
            log_level=config.log_level.lower(),
            access_log=False,
            server_header=False,
            date_header=False,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error("Server failed to start", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
