"""
N-Game Solver Server
FastAPI front end for the brute-force 24-game solver
"""

import logging
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nsolver import InvariantViolation, __version__

from .config import settings
from .schemas import ErrorPayload, HealthResponse, SolveRequest, SolveResponse
from .services.solver_service import InputTooLongError, solver_service

# Configure logging
logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(title="N-Game Solver Server", version=__version__)

# Add CORS middleware for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify allowed origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, error_code: str, message: str, details=None) -> JSONResponse:
    """Build an error response body"""
    payload = ErrorPayload(code=error_code, message=message, details=details)
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(InputTooLongError)
async def input_too_long_handler(request, exc: InputTooLongError):
    return error_response(
        422, "INPUT_TOO_LONG", str(exc),
        details={"length": exc.length, "max_length": exc.max_length},
    )


@app.exception_handler(InvariantViolation)
async def invariant_violation_handler(request, exc: InvariantViolation):
    logger.error(f"Search aborted: {exc}", exc_info=True)
    return error_response(500, "SOLVER_ABORTED", str(exc))


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(version=__version__, timestamp=datetime.now(timezone.utc))


@app.post("/solve", response_model=SolveResponse)
def solve(request: SolveRequest):
    """Run the solver; executed in the threadpool since the search is CPU bound"""
    logger.info(f"Solve request: numbers={request.numbers} text={request.text!r} target={request.target}")
    return solver_service.solve(request)


@app.get("/limits")
async def get_limits():
    """Expose the input policy so clients can validate before posting"""
    return {
        "max_input_length": solver_service.max_input_length,
        "default_target": settings.default_target,
        "default_mode": settings.default_mode,
    }


def run() -> None:
    logger.info("Starting N-Game Solver Server...")
    logger.info(f"Environment: {settings.environment}")
    uvicorn.run(
        "server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug and settings.is_development,
        log_level="info" if not settings.debug else "debug"
    )


if __name__ == "__main__":
    run()
