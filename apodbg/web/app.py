from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Literal

import socketio
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from apodbg.config import WEB_DIR
from apodbg.version import __version__


if TYPE_CHECKING:
    import uvicorn

    from apodbg.core.loader import BackgroundLoader
    from apodbg.web.page_manager import WebPageManager


logger = logging.getLogger("APODBackground")

# Create FastAPI app
app = FastAPI(title="APOD Background", version=__version__)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create Socket.IO server
sio = socketio.AsyncServer(
    async_mode="asgi", cors_allowed_origins="*", logger=False, engineio_logger=False
)

# Wrap with ASGI app
socket_app = socketio.ASGIApp(sio, app)

# Global references (set by __main__)
page_manager: WebPageManager | None = None
background_loader: BackgroundLoader | None = None
_server_instance: uvicorn.Server | None = None


def set_managers(page: WebPageManager, loader: BackgroundLoader):
    """Called by __main__ to set up references"""
    global page_manager, background_loader
    page_manager = page
    background_loader = loader
    page.set_socketio(sio)


def _require() -> tuple[WebPageManager, BackgroundLoader]:
    if not page_manager or not background_loader:
        raise HTTPException(status_code=503, detail="Loader not initialized")
    return page_manager, background_loader


# Pydantic models for API
class VisibilityRequest(BaseModel):
    state: Literal["visible", "hidden", "prerender"]


class SettingsUpdate(BaseModel):
    default_background: str | None = None
    cors_proxy: str | None = None
    proxy: str | None = None
    connection_quality: int | None = Field(default=None, ge=1, le=6)
    retries: int | None = Field(default=None, ge=0, le=5)
    downsample: bool | None = None
    max_dimension: int | None = Field(default=None, ge=16)
    jpeg_quality: int | None = Field(default=None, ge=1, le=95)


# ==================== REST API Endpoints ====================


@app.get("/", response_class=HTMLResponse)
async def serve_index():
    """Serve the page that wears the background"""
    index_file = WEB_DIR / "index.html"
    if index_file.exists():
        return FileResponse(index_file)
    return HTMLResponse(
        content=f"<h1>APOD Background</h1><p>Web interface files not found. Looking for {index_file}</p>",
        status_code=500,
    )


@app.get("/background.css")
async def get_background_css():
    """The current background as a stylesheet"""
    page, _ = _require()
    return Response(
        content=page.background.css(),
        media_type="text/css",
        headers={"Cache-Control": "no-store"},
    )


@app.get("/api/background")
async def get_background():
    """Get the currently applied background style"""
    page, _ = _require()
    return {"background": page.background.get()}


@app.post("/api/load")
async def trigger_load():
    """Page-load trigger: resolve and apply today's background"""
    page, loader = _require()
    await loader.on_page_load()
    return {"success": True, "background": page.background.get()}


@app.post("/api/visibility")
async def trigger_visibility(request: VisibilityRequest):
    """Visibility-change trigger: only becoming visible does anything"""
    page, loader = _require()
    url = await loader.on_visibility_change(request.state)
    return {"success": True, "reloaded": url is not None, "background": page.background.get()}


@app.get("/api/status")
async def get_status():
    """Get the loader's current pipeline stage"""
    page, _ = _require()
    return {"stage": page.status.get()}


@app.get("/api/cache")
async def get_cache():
    """Get the cached record and the last-visit marker"""
    _, loader = _require()
    record = loader.cache.read()
    return {
        "record": record.to_json() if record is not None else None,
        "valid": record is not None and loader.cache.is_valid(record, loader.clock.today()),
        "last_visit": loader.cache.last_visit(),
    }


@app.delete("/api/cache")
async def clear_cache():
    """Forget the cached background, so the next trigger fetches again"""
    _, loader = _require()
    loader.cache.reset()
    return {"success": True}


@app.get("/api/settings")
async def get_settings():
    """Get current settings"""
    page, _ = _require()
    return page.settings.get_settings()


@app.post("/api/settings")
async def update_settings(settings: SettingsUpdate):
    """Update application settings"""
    page, _ = _require()
    settings_dict = settings.model_dump(exclude_unset=True)
    page.settings.update_settings(settings_dict)
    return {"success": True, "settings": page.settings.get_settings()}


@app.get("/api/version")
async def get_version():
    """Get current application version"""
    return {"current_version": __version__}


# ==================== Socket.IO Events ====================


@sio.event
async def connect(sid, environ):
    """Client connected"""
    logger.info(f"Web client connected: {sid}")

    # Send initial state to new client
    if page_manager:
        await sio.emit("initial_state", page_manager.get_state(), room=sid)


@sio.event
async def disconnect(sid):
    """Client disconnected"""
    logger.info(f"Web client disconnected: {sid}")


@sio.event
async def visibility_change(sid, data):
    """Client tab changed visibility"""
    if not background_loader or not isinstance(data, dict):
        return
    state = data.get("state")
    if isinstance(state, str):
        await background_loader.on_visibility_change(state)


# Mount static files (CSS, JS)
if WEB_DIR.exists():
    static_dir = WEB_DIR / "static"
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")


async def run_server(host: str = "0.0.0.0", port: int = 8080):
    """Run the web server"""
    global _server_instance
    import uvicorn

    config = uvicorn.Config(socket_app, host=host, port=port, log_level="info", access_log=False)
    server = uvicorn.Server(config)
    _server_instance = server
    try:
        await server.serve()
    finally:
        _server_instance = None


async def shutdown_server():
    """Gracefully shutdown the web server"""
    if _server_instance:
        logger.info("Setting server.should_exit = True")
        _server_instance.should_exit = True
        # The uvicorn server checks should_exit periodically
        await asyncio.sleep(0.1)
