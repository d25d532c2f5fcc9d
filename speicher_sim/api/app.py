from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import SimulationError
from .routes import battery_router, calculation_router, runs_router


async def simulation_error_handler(request: Request, exc: SimulationError) -> JSONResponse:
    """Map calculation errors to HTTP 422 with a stable ``kind`` field."""
    return JSONResponse(status_code=422, content={"detail": str(exc), "kind": exc.kind})


def create_app() -> FastAPI:
    """
    Instantiate the FastAPI application and register routers.

    Registers the domain routers (calculation, battery, runs), CORS
    middleware and the handler turning ``SimulationError`` into HTTP 422.

    Returns:
        FastAPI: Configured application instance.

    Example:
        ```python
        app = create_app()
        uvicorn.run(app, host="0.0.0.0", port=8000)
        ```
    """
    app = FastAPI(
        title="Speicher-Simulation API",
        version="0.1.0",
        description="Stündliche Energiebilanz von PV-Anlagen mit Batteriespeicher.",
    )

    from fastapi.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SimulationError, simulation_error_handler)

    app.include_router(calculation_router)
    app.include_router(battery_router)
    app.include_router(runs_router)

    return app


app = create_app()
