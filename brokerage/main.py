"""Application entrypoint for the brokerage deal pipeline API."""

from __future__ import annotations

from fastapi import FastAPI

from brokerage.api.v1.router import get_api_router
from brokerage.core.config import get_config


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Exposed for `uvicorn brokerage.main:app`.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    from brokerage.database.init_db import init_db

    init_db()
    uvicorn.run("brokerage.main:app", host="0.0.0.0", port=8000)
