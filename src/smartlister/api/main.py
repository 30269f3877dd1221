"""Smart Lister — FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the REST API routes, the cookie-based access
gate, and the ``main()`` CLI function that mounts the Gradio UI and
launches the uvicorn server.

Architecture
------------
- **Generation** is performed by
  :class:`~smartlister.core.listing_model.GeminiListingModel`, created in
  the lifespan handler and stored on ``app.state``.
- **Access** is granted by :class:`~smartlister.core.license_store.LicenseStore`.
  A successful login only sets a cookie flag; there is no server-side
  session store, and later requests trust the cookie.
- **The UI** is a Gradio Blocks app mounted at ``/app`` by :func:`mount_ui`.
  It reaches the generation endpoint over HTTP like any other client.

Endpoints
---------
========  ==================  ==========================================
Method    Path                Purpose
========  ==================  ==========================================
GET       ``/``               Redirect to ``/app`` or ``/login``
GET       ``/login``          Serve the license login page
POST      ``/api/login``      Check a license key and set the cookie
POST      ``/api/logout``     Clear the cookie
GET       ``/api/config``     Model name and upload limits
POST      ``/api/generate``   Generate listing copy
GET       ``/health``         Liveness probe
========  ==================  ==========================================

Usage
-----
CLI (installed entry point)::

    smartlister

Direct invocation::

    python -m smartlister.api.main
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from smartlister import __version__
from smartlister.api.models import ErrorResponse, GenerateRequest, ListingResponse, LoginRequest
from smartlister.api.prompt_builder import SYSTEM_INSTRUCTION, build_user_prompt, decode_images
from smartlister.core.config import config
from smartlister.core.license_store import LicenseStore, LicenseStoreError
from smartlister.core.listing_model import GeminiListingModel

logger = logging.getLogger(__name__)

SESSION_COOKIE_VALUE = "valid"

# ---------------------------------------------------------------------------
# Application lifecycle — generation backend and license store.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Creates the :class:`GeminiListingModel` (no network traffic yet)
        and opens the license database.

    On shutdown:
        Releases the Gemini client.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    # --- Startup -----------------------------------------------------------
    app.state.listing_model = GeminiListingModel(config)
    app.state.license_store = LicenseStore(config.license_db_path)
    if not app.state.listing_model.available:
        logger.warning("GEMINI_API_KEY is not set; generation requests will fail.")
    logger.info("Listing model and license store initialised.")

    yield  # Application runs here.

    # --- Shutdown ----------------------------------------------------------
    app.state.listing_model.close()
    logger.info("Listing model released on shutdown.")


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Smart Lister",
    description="Marketplace listing copy from product photos and keywords.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Helpers.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str, raw: str | None = None) -> JSONResponse:
    """Build an ``{"error": ..., "raw"?: ...}`` JSON response."""
    body = ErrorResponse(error=message, raw=raw)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def is_licensed(request: Request) -> bool:
    """Return True if the request carries the licensed cookie flag."""
    return request.cookies.get(config.session_cookie_name) == SESSION_COOKIE_VALUE


# ---------------------------------------------------------------------------
# Page routes.
# ---------------------------------------------------------------------------


@app.get("/", include_in_schema=False)
async def index(request: Request) -> RedirectResponse:
    """Send licensed browsers to the UI and everyone else to the login page."""
    if is_licensed(request):
        return RedirectResponse(url="/app", status_code=303)
    return RedirectResponse(url="/login", status_code=303)


@app.get("/login", response_class=HTMLResponse, include_in_schema=False)
async def login_page() -> HTMLResponse:
    """Serve the license login page.

    Raises:
        404 JSON error if ``login.html`` is missing from the templates dir.
    """
    login_path = config.templates_dir / "login.html"
    if login_path.exists():
        return HTMLResponse(content=login_path.read_text(encoding="utf-8"))
    return _error(404, "login.html not found")


# ---------------------------------------------------------------------------
# Access gate.
# ---------------------------------------------------------------------------


@app.post("/api/login")
async def login(req: LoginRequest) -> JSONResponse:
    """Check a license key and mark the browser as licensed.

    The key must exist, be active, and expire in the future.  On success a
    ``session_token=valid`` cookie is set for ``session_max_age_days``.

    Returns:
        ``{"success": true}`` with the cookie, or an error body:
        400 for a blank key, 401 for an unusable key, 500 if the license
        database cannot be read.
    """
    key = req.license_key.strip()
    if not key:
        return _error(400, "Please enter your license key.")

    store: LicenseStore = app.state.license_store
    try:
        record = store.find_active(key)
    except LicenseStoreError:
        return _error(500, "An error occurred while checking the license key.")

    if record is None:
        logger.info("Rejected login with an unknown, inactive or expired key")
        return _error(401, "The license key is invalid, deactivated or expired.")

    response = JSONResponse(content={"success": True})
    response.set_cookie(
        key=config.session_cookie_name,
        value=SESSION_COOKIE_VALUE,
        max_age=config.session_max_age_seconds,
        path="/",
        samesite="lax",
    )
    logger.info("License accepted; expires %s", record.expires_at.isoformat())
    return response


@app.post("/api/logout")
async def logout() -> JSONResponse:
    """Clear the licensed cookie."""
    response = JSONResponse(content={"success": True})
    response.delete_cookie(key=config.session_cookie_name, path="/")
    return response


# ---------------------------------------------------------------------------
# API routes.
# ---------------------------------------------------------------------------


@app.get("/api/config")
async def get_config() -> dict:
    """Return the model name and upload limits for clients.

    Returns:
        Dictionary with keys ``version``, ``model``, ``max_images``,
        ``max_image_dimension`` and ``max_image_bytes``.
    """
    return {
        "version": __version__,
        "model": config.gemini_model,
        "max_images": config.max_images,
        "max_image_dimension": config.max_image_dimension,
        "max_image_bytes": config.max_image_bytes,
    }


@app.post(
    "/api/generate",
    responses={
        200: {"model": ListingResponse},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_listing(req: GenerateRequest):
    """Generate listing copy from product images and/or keywords.

    This endpoint:

    1. Drops empty images, trims the keyword, and requires at least one.
    2. Enforces the image count limit and decodes every image.
    3. Compiles the user prompt and calls the listing model.
    4. Parses the model's reply as JSON and returns it unchanged.

    Args:
        req: Validated :class:`GenerateRequest` payload.

    Returns:
        The parsed listing object, or an ``{"error": ...}`` body with
        400 for bad input and 500 for backend or parse failures.  A parse
        failure also carries the model's ``raw`` text.
    """
    # --- Validate input ----------------------------------------------------
    images = [image for image in (req.images or []) if image]
    keyword = (req.keyword or "").strip()

    if not images and not keyword:
        return _error(400, "Either images or keyword is required.")

    if len(images) > config.max_images:
        return _error(400, f"At most {config.max_images} images can be sent at once.")

    try:
        image_parts = decode_images(images)
    except ValueError as e:
        return _error(400, str(e))

    # --- Call the model ----------------------------------------------------
    prompt = build_user_prompt(keyword, has_images=bool(image_parts))
    listing_model: GeminiListingModel = app.state.listing_model

    try:
        text = await listing_model.generate(
            prompt,
            image_parts,
            system_instruction=SYSTEM_INSTRUCTION,
        )
    except Exception:
        logger.exception("Error in /api/generate")
        return _error(500, "An unexpected error occurred.")

    # --- Parse the reply ---------------------------------------------------
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Model reply was not valid JSON (%d chars)", len(text))
        return _error(500, "The model response could not be parsed as JSON.", raw=text)

    return JSONResponse(content=parsed)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


# ---------------------------------------------------------------------------
# UI mounting and CLI entry point.
# ---------------------------------------------------------------------------


def _licensed_user(request: Request) -> str | None:
    """Gradio auth dependency: a user name for licensed browsers, else None."""
    return "licensed" if is_licensed(request) else None


def mount_ui(target: FastAPI) -> FastAPI:
    """Mount the Gradio UI at ``/app`` behind the license cookie.

    Args:
        target: The FastAPI application to mount onto.

    Returns:
        The application with the UI mounted.
    """
    import gradio as gr

    from smartlister.ui.app import create_ui

    return gr.mount_gradio_app(target, create_ui(), path="/app", auth_dependency=_licensed_user)


def main() -> None:
    """Mount the UI and launch the uvicorn ASGI server.

    Reads host and port from :data:`~smartlister.core.config.config` (which
    loads from ``SMARTLISTER_SERVER_HOST`` and ``SMARTLISTER_SERVER_PORT``
    environment variables).  Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``smartlister`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting Smart Lister %s on %s:%s", __version__, config.server_host, config.server_port)

    uvicorn.run(
        mount_ui(app),
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
