# dataup/app.py
from __future__ import annotations
import io, logging

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .blobstore import BlobStore, FileBlobStore
from .config import Settings, load_settings
from .errors import VideoNotFound, VideoUnreadable
from .models import Video, VideoState, VideoStatus
from .registry import VideoRegistry

logger = logging.getLogger("dataup.app")

EXPOSE_HEADERS = ["Content-Length", "Content-Type"]


def create_app(
    settings: Settings | None = None,
    registry: VideoRegistry | None = None,
    store: BlobStore | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    if store is None:
        store = FileBlobStore(settings.videos_dir)
        if settings.purge_on_start:
            # ids restart at 1, so payloads from a previous run would attach to new videos
            store.purge()

    app = FastAPI(title="DataUp")
    app.state.settings = settings
    app.state.registry = registry if registry is not None else VideoRegistry()
    app.state.store = store

    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=False,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=EXPOSE_HEADERS,
        )

    @app.exception_handler(VideoNotFound)
    async def not_found(request: Request, exc: VideoNotFound):
        logger.warning("%s %s -> 404 (%s)", request.method, request.url.path, exc)
        return JSONResponse({"detail": str(exc)}, status_code=404)

    @app.exception_handler(VideoUnreadable)
    async def unreadable(request: Request, exc: VideoUnreadable):
        logger.warning("%s %s -> 204 (%s)", request.method, request.url.path, exc)
        return Response(status_code=204)

    _add_routes(app)
    return app


def _base_url(request: Request) -> str:
    configured = request.app.state.settings.base_url
    return configured or str(request.base_url)


def _add_routes(app: FastAPI) -> None:

    # ---------- utility endpoints ----------

    @app.get("/healthz")
    def healthz(request: Request):
        return {"ok": True, "videos": len(request.app.state.registry)}

    # ---------- metadata ----------

    @app.get("/video", response_model=list[Video])
    def list_videos(request: Request):
        return request.app.state.registry.list()

    @app.post("/video", response_model=Video)
    def add_video(video: Video, request: Request):
        return request.app.state.registry.create(video, _base_url(request))

    @app.get("/video/{video_id}", response_model=Video)
    def get_video(video_id: int, request: Request):
        return request.app.state.registry.get(video_id)

    # ---------- binary data ----------

    @app.post("/video/{video_id}/data", response_model=VideoStatus)
    def set_video_data(video_id: int, request: Request, data: UploadFile = File(...)):
        """
        Store the multipart part "data" as the payload of a registered video.
        The metadata record is left untouched if the store fails.
        """
        request.app.state.registry.get(video_id)
        try:
            request.app.state.store.save(video_id, data.file)
        finally:
            data.file.close()
        return VideoStatus(state=VideoState.READY)

    @app.get("/video/{video_id}/data")
    def get_video_data(video_id: int, request: Request):
        video = request.app.state.registry.get(video_id)
        buf = io.BytesIO()
        request.app.state.store.copy_out(video_id, buf)
        return Response(
            content=buf.getvalue(),
            media_type=video.content_type or "application/octet-stream",
        )


def main():
    import uvicorn

    settings = load_settings()
    logging.basicConfig(level=settings.log_level)
    app = create_app(settings)
    logger.info("Serving videos from %s on %s:%d", settings.videos_dir, settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
