"""
FastAPI application exposing key issuance and claiming.

This module provides a FastAPI application that:
1. Creates the key store configured by the environment (unless one is given)
2. Properly manages the key store lifecycle (enter/exit)
3. Routes every request through a single ClaimCoordinator
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from keyclaim.claim_coordinator import ClaimCoordinator
from keyclaim.config.keyclaim_config import KeyclaimConfig, get_config
from keyclaim.fastapi.endpoints import add_endpoints
from keyclaim.key_store import KeyStore, create_default_key_store


def create_app(
    key_store: KeyStore | None = None, config: KeyclaimConfig | None = None
) -> FastAPI:
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """
        Manage the application lifecycle.

        The key store is entered on startup and exited on shutdown, and the
        coordinator built on it is published on the app state for the routes.
        """
        store = key_store or create_default_key_store()
        async with store:
            fastapi_app.state.coordinator = ClaimCoordinator(
                store=store, default_reward=config.get_default_reward()
            )
            yield
            fastapi_app.state.coordinator = None

    fastapi_app = FastAPI(
        title="Keyclaim",
        description="Issues one time redemption keys for links and claims them",
        version="0.1.0",
        lifespan=lifespan,
    )
    add_endpoints(fastapi_app, config)
    return fastapi_app


app = create_app()
