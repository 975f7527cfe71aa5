"""
Revenue Split — FastAPI app factory.
"""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from revsplit import __version__
from revsplit.api.router_meta import router as meta_router
from revsplit.api.router_split import router as split_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Revenue Split API",
        description="Partner revenue reconciliation — DI settlement workbooks + DO ledger",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(split_router)
    return app


app = create_app()
