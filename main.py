import logging
import sys

from config import get_settings
from database import engine, Base
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from routers import auth

# Fails here, before anything is served, when the JWT secrets are missing
settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Auto-create tables (or manage migrations externally)
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Attendance Auth")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def flatten_validation_errors(errors) -> dict:
    """
    Group pydantic errors into form-level and per-field messages.

    Errors located on the body itself (model rules, missing or malformed JSON)
    are form errors; everything else is keyed by its dotted field path.
    """
    form_errors = []
    field_errors = {}
    for err in errors:
        if err.get("type") == "json_invalid":
            loc = []
        else:
            loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        if loc:
            field_errors.setdefault(".".join(loc), []).append(message)
        else:
            form_errors.append(message)
    return {"formErrors": form_errors, "fieldErrors": field_errors}


# Exception handler for Pydantic validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "status": "error",
            "error": flatten_validation_errors(exc.errors()),
        },
    )

# Exception handler for HTTPException, including routing 404/405
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "error": exc.detail},
        headers=exc.headers,
    )

app.include_router(
    auth.router,
    prefix="/auth",
    tags=["auth"],
)
