from __future__ import annotations

from fastapi import FastAPI


def create_app() -> FastAPI:
    app = FastAPI(title="PITR Window API", version="0.1.0")

    @app.get("/healthz")
    def healthz() -> dict:
        return {"status": "ok"}

    from app.routes import clusters, pitr  # noqa: WPS433

    app.include_router(pitr.router)
    app.include_router(clusters.router)
    return app


app = create_app()
