from __future__ import annotations

import argparse
import logging
from pathlib import Path, PurePath
from urllib.parse import quote

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from .config import IMAGES_MOUNT, TEMPLATES_DIR, ConfigError, Settings, load_settings, resolve_config_path
from .log import LOG_FORMAT, configure_logging
from .scanner import load_all_images
from .scheduler import RotationScheduler
from .selection import SelectionState

logger = logging.getLogger(__name__)


class ImageOutsideRootError(ValueError):
    """Raised when a selected image does not live under the image root."""


def image_url_for(path: str, image_root: str) -> str:
    """Map an absolute image path to its URL under the images mount.

    >>> image_url_for("/mnt/photos/2023/a.jpg", "/mnt/photos")
    '/images/2023/a.jpg'
    """
    try:
        relative = PurePath(path).relative_to(PurePath(image_root))
    except ValueError as exc:
        raise ImageOutsideRootError(f"{path} is not under {image_root}") from exc
    if not relative.parts:
        raise ImageOutsideRootError(f"{path} is the image root itself")
    return IMAGES_MOUNT + "/" + "/".join(quote(part) for part in relative.parts)


def create_app(settings: Settings | None = None, templates_dir: Path = TEMPLATES_DIR) -> FastAPI:
    if settings is None:
        settings = load_settings()

    app = FastAPI(title="Random Picture Frame")
    app.mount(
        IMAGES_MOUNT,
        StaticFiles(directory=settings.image_directory, check_dir=False, follow_symlink=True),
        name="images",
    )
    templates = Jinja2Templates(directory=str(templates_dir))
    state = SelectionState()

    app.state.settings = settings
    app.state.selection = state
    app.state.scheduler = None

    @app.on_event("startup")
    async def startup_event() -> None:
        files = load_all_images(settings)
        scheduler = RotationScheduler(state, files, settings.display_seconds)
        app.state.scheduler = scheduler
        scheduler.start()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        if app.state.scheduler is not None:
            await app.state.scheduler.stop()

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request):
        current = state.get()
        try:
            image_url = image_url_for(current, settings.image_directory) if current else None
        except ImageOutsideRootError as exc:
            logger.error("error resolving image url: %s", exc)
            return PlainTextResponse(f"Error resolving image: {exc}", status_code=500)

        try:
            return templates.TemplateResponse(
                request,
                "index.html",
                {
                    "image_url": image_url,
                    "display_seconds": settings.display_seconds,
                },
            )
        except TemplateError as exc:
            logger.error("error rendering template: %s", exc)
            return PlainTextResponse(f"Error rendering template: {exc}", status_code=500)

    @app.get("/current")
    async def current_image():
        current = state.get()
        try:
            image_url = image_url_for(current, settings.image_directory) if current else None
        except ImageOutsideRootError as exc:
            logger.error("error resolving image url: %s", exc)
            image_url = None
        return {"image_url": image_url, "display_seconds": settings.display_seconds}

    return app


def run(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="randompic", description="Serve a random picture frame page.")
    parser.add_argument("--config", help="path to the JSON config file")
    args = parser.parse_args(argv)

    path, required = resolve_config_path(args.config)
    try:
        settings = load_settings(path, required=required)
    except ConfigError as exc:
        logging.basicConfig(format=LOG_FORMAT)
        logger.critical("%s", exc)
        raise SystemExit(1) from exc

    configure_logging(settings)
    logger.info("starting server on %s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
