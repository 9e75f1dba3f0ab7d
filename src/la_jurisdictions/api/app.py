import logging
import os

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from la_jurisdictions.config import get_settings
from la_jurisdictions.map_surface import render_html
from la_jurisdictions.registry import get_store
from la_jurisdictions.session import MapSession


def health():
    store = get_store()
    return {
        "status": "ok",
        "layers": {s.kind.value: s.state.value for s in store.statuses()},
    }


app = FastAPI(title="Greater Los Angeles Political Jurisdictions")


if app:
    from la_jurisdictions.api.routes.layers import router as layers_router
    from la_jurisdictions.api.routes.lookup import router as lookup_router

    app.include_router(layers_router, prefix="/api")
    app.include_router(lookup_router, prefix="/api")

    @app.get("/health")
    def health_route():
        return health()

    @app.get("/", response_class=HTMLResponse)
    def index():
        store = get_store()
        session = MapSession(store=store, search_zoom=get_settings().search_zoom)
        return HTMLResponse(
            render_html(session, store, resolve_url="/api/resolve", layers_url="/api/layers"),
            headers={"Cache-Control": "no-store"},
        )

    @app.on_event("startup")
    async def _start_layer_loads():
        logger = logging.getLogger("laj.startup")
        settings = get_settings()
        logger.info(
            "startup env: LAJ_DATA_DIR=%s LAJ_FETCH_TIMEOUT=%s",
            os.getenv("LAJ_DATA_DIR", ""),
            settings.fetch_timeout,
        )
        # Loads run in the background; requests before they finish see
        # the affected layers as "loading".
        get_store().start_loading()
