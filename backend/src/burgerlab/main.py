from __future__ import annotations

from fastapi import FastAPI, Response
from fastapi.responses import RedirectResponse
from sqlalchemy import inspect
from starlette.requests import Request

from burgerlab.core.config import get_settings
from burgerlab.core import database
from burgerlab.core.logs import configure_logging
from burgerlab.routers import admin, brands, health, menu_items


CORE_ROUTERS = (
    (health.router, {"tags": ["health"]}),
    (brands.router, {}),
    (menu_items.router, {}),
    (admin.router, {}),
)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.docs_url,
    )

    @application.middleware("http")
    async def enforce_utf8_json(request: Request, call_next):
        response = await call_next(request)
        if response.headers.get("content-type", "").startswith("application/json"):
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    @application.get("/favicon.ico", include_in_schema=False)
    def favicon():
        return Response(status_code=204)

    for router, include_kwargs in CORE_ROUTERS:
        application.include_router(router, **include_kwargs)

    @application.get("/", include_in_schema=False)
    def root():
        target = settings.docs_url or "/docs"
        return RedirectResponse(target)

    @application.get("/__routes", include_in_schema=False)
    def routes_snapshot():
        return sorted(f"{route.path}  [{','.join(route.methods)}]" for route in application.router.routes)

    @application.get("/__dbcheck", include_in_schema=False)
    def dbcheck():
        return {"tables": inspect(database.engine).get_table_names()}

    @application.on_event("startup")
    def _startup():
        database.init_db()

    return application


app = create_app()
