from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse, Response

from .config import Settings, get_settings
from .service import ServiceLoop
from .storage import HtmlFile, Persistence, StateStore

STATIC_DIR = Path(__file__).parent / "static"

ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def build_service(settings: Settings) -> ServiceLoop:
    persistence = Persistence(StateStore(settings.state_file), HtmlFile(settings.html_file))
    return ServiceLoop(persistence)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        service = build_service(settings)
        service.start()
        app.state.service = service
        yield
        await service.stop()

    app = FastAPI(title="NecTree", lifespan=lifespan)

    async def forward(request: Request) -> Response:
        service: ServiceLoop = request.app.state.service
        envelope = {
            "method": request.method,
            "path": request.url.path,
            "headers": dict(request.headers),
        }
        payload = await request.body() if request.method == "POST" else None
        result = await service.submit(envelope, payload or None)
        if result is None:
            raise HTTPException(500, "Request dropped")
        return Response(content=result.body, status_code=result.status, headers=result.headers)

    @app.get("/favicon.ico")
    def favicon():
        return FileResponse(STATIC_DIR / "favicon.ico", media_type="image/x-icon")

    root_methods = ANY_METHOD if settings.post_on_root else [m for m in ANY_METHOD if m != "POST"]
    app.add_api_route("/", forward, methods=root_methods, include_in_schema=False)
    post_methods = [m for m in ANY_METHOD if m != "GET"]
    app.add_api_route("/post", forward, methods=post_methods, include_in_schema=False)

    return app


app = create_app()
