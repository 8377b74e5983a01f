"""
FastAPI application and API routes for Keypad Calc.

The API is stateless: the keypad sends its current display with each
request and receives the next display back.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from keypad_calc import __version__
from keypad_calc.accumulator import apply_token
from keypad_calc.config import settings
from keypad_calc.evaluator import ERROR_TOKEN, evaluate, format_result
from keypad_calc.keymap import key_to_token
from keypad_calc.models import (
    DisplayState,
    EvaluateRequest,
    InvalidTokenError,
    KeyRequest,
    KeyResult,
    PressRequest,
)


app = FastAPI(
    title=settings.app_name,
    description="Keypad calculator with chained left-to-right evaluation",
    version=__version__,
)

# CORS middleware for a browser keypad
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/api/v1/config")
async def get_config():
    """Get public configuration."""
    return {
        "app_name": settings.app_name,
        "decimal_places": settings.decimal_places,
        "error_token": ERROR_TOKEN,
        "initial_display": "0",
    }


# =============================================================================
# Keypad API
# =============================================================================

@app.post("/api/v1/press", response_model=DisplayState)
async def press(request: PressRequest):
    """Apply a keypad token to the given display."""
    try:
        display = apply_token(request.display, request.token)
    except InvalidTokenError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return DisplayState(display=display, is_error=display == ERROR_TOKEN)


@app.post("/api/v1/keys", response_model=KeyResult)
async def press_key(request: KeyRequest):
    """Apply a keyboard key; unmapped keys leave the display unchanged."""
    token = key_to_token(request.key)
    if token is None:
        return KeyResult(
            display=request.display,
            is_error=request.display == ERROR_TOKEN,
            ignored=True,
        )

    display = apply_token(request.display, token)
    return KeyResult(display=display, is_error=display == ERROR_TOKEN)


@app.post("/api/v1/evaluate", response_model=DisplayState)
async def evaluate_expression(request: EvaluateRequest):
    """Evaluate a chained expression and format it for the display."""
    display = format_result(evaluate(request.expression))
    return DisplayState(display=display, is_error=display == ERROR_TOKEN)
