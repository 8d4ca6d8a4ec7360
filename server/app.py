from functools import partial
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from log_config import get_logger
from refresher import Loader, RefreshScheduler
from settings import Settings, get_settings
from source_loader import load_records
from store import SnapshotStore
from suggester import QueryEngine
from translator import RequestTranslator

log = get_logger(__name__)

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def request_target(request: Request) -> str:
    # raw_path keeps percent-escapes, so "/v1/api/%73uggest" is not the endpoint
    raw_path = request.scope.get("raw_path")
    target = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return target


def create_app(settings: Optional[Settings] = None, loader: Optional[Loader] = None) -> FastAPI:
    settings = settings or get_settings()
    # no docs or schema routes: every path other than /health is answered by the translator
    app = FastAPI(title="suggest-server", docs_url=None, redoc_url=None, openapi_url=None)

    store = SnapshotStore()
    scheduler = RefreshScheduler(
        store,
        source=settings.source,
        interval=settings.refresh_interval_seconds,
        loader=loader or partial(load_records, timeout=settings.source_timeout_seconds),
    )
    engine = QueryEngine(store)
    translator = RequestTranslator(engine, endpoint=settings.endpoint)

    app.state.store = store
    app.state.scheduler = scheduler
    app.state.translator = translator

    async def translate(request: Request) -> Response:
        body = await request.body()
        result = await run_in_threadpool(translator.handle, request.method, request_target(request), body)
        return Response(content=result.body, status_code=result.status.value, media_type=result.media_type)

    @app.on_event("startup")
    def on_startup():
        # first load runs before the server accepts requests
        scheduler.start(initial_load=True)
        log.info("Serving suggestions", extra={"endpoint": settings.endpoint})

    @app.on_event("shutdown")
    def on_shutdown():
        scheduler.stop(timeout=5.0)

    # Verbs outside ALL_METHODS end up as a 405 from the router; hand them to
    # the translator too so they get the same plain-text 400.
    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return await translate(request)
        return await http_exception_handler(request, exc)

    @app.get("/health")
    def health():
        return {"status": "ok", "catalog": scheduler.status()}

    # Every other method and path goes through the translator, which answers
    # route and method errors with a plain-text 400.
    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def suggest(request: Request):
        return await translate(request)

    return app


app = create_app()
