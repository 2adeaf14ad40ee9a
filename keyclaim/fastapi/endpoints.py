import hmac
import json
import logging
from typing import Any, TypeVar

from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from keyclaim.claim_coordinator import ClaimCoordinator
from keyclaim.claim_result import ClaimStatus
from keyclaim.config.keyclaim_config import KeyclaimConfig
from keyclaim.constants import SECRET_HEADER
from keyclaim.keyclaim_error import (
    InvalidArgumentError,
    KeyclaimError,
    KeyGenerationError,
    PersistenceError,
)

_LOGGER = logging.getLogger(__name__)
M = TypeVar("M", bound=BaseModel)


class ClaimRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str | int | None = None
    user_id: str | int | None = Field(default=None, alias="userId")


class CreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    link_id: str | None = Field(default=None, alias="linkId")
    reward: dict[str, Any] | None = None


def get_coordinator(request: Request) -> ClaimCoordinator:
    return request.app.state.coordinator


def error_response(status_code: int, err: str, **kwargs) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "err": err, **kwargs})


async def read_body(request: Request, model: type[M]) -> M:
    """Validate the JSON body against the model given. An empty body is an empty object.

    Protected routes call this only after the secret has been checked.
    """
    raw = await request.body()
    try:
        data = json.loads(raw) if raw.strip() else {}
        # pydantic.ValidationError and json.JSONDecodeError are both ValueErrors
        return model.model_validate(data)
    except ValueError as e:
        raise InvalidArgumentError(f"Malformed request body: {e}") from e


def add_endpoints(fastapi: FastAPI, config: KeyclaimConfig):

    def is_authorized(presented_secret: str | None) -> bool:
        if not presented_secret:
            return False
        expected = config.get_claim_secret().encode()
        return hmac.compare_digest(presented_secret.encode(), expected)

    @fastapi.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        _LOGGER.error(f"persistence_error:{request.url.path}", exc_info=exc)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "persistence_error")

    @fastapi.exception_handler(InvalidArgumentError)
    async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
        return error_response(status.HTTP_400_BAD_REQUEST, "invalid_argument")

    @fastapi.exception_handler(KeyGenerationError)
    async def key_generation_error_handler(request: Request, exc: KeyGenerationError):
        _LOGGER.error(f"key_generation_failed:{request.url.path}", exc_info=exc)
        return error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE, "key_generation_failed"
        )

    @fastapi.exception_handler(KeyclaimError)
    async def keyclaim_error_handler(request: Request, exc: KeyclaimError):
        _LOGGER.error(f"server_error:{request.url.path}", exc_info=exc)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "server_error")

    @fastapi.get("/key/{link_id}")
    async def fetch_key(
        link_id: str, coordinator: ClaimCoordinator = Depends(get_coordinator)
    ):
        try:
            issued = await coordinator.issue_or_fetch_key(
                link_id, config.get_default_reward()
            )
        except InvalidArgumentError:
            return error_response(status.HTTP_400_BAD_REQUEST, "missing_link")
        return {
            "ok": True,
            "key": issued.key,
            "claimed": issued.claimed,
            "reward": issued.reward,
        }

    @fastapi.post("/claim")
    async def claim(
        request: Request,
        x_server_secret: str | None = Header(default=None, alias=SECRET_HEADER),
        coordinator: ClaimCoordinator = Depends(get_coordinator),
    ):
        if not is_authorized(x_server_secret):
            _LOGGER.warning("claim_forbidden")
            return error_response(status.HTTP_403_FORBIDDEN, "forbidden")
        try:
            body = await read_body(request, ClaimRequest)
            key = None if body.key is None else str(body.key)
            result = await coordinator.claim(key, body.user_id)
        except InvalidArgumentError:
            return error_response(status.HTTP_400_BAD_REQUEST, "missing_params")

        if result.status == ClaimStatus.CLAIMED:
            return {"ok": True, "msg": "claimed", "reward": result.reward}
        if result.status == ClaimStatus.ALREADY_CLAIMED:
            return {"ok": False, "err": "already_claimed", "claimedBy": result.claimed_by}
        if result.status == ClaimStatus.RECORD_MISSING:
            return error_response(status.HTTP_404_NOT_FOUND, "key_entry_missing")
        return error_response(status.HTTP_404_NOT_FOUND, "key_not_found")

    @fastapi.post("/create")
    async def create(
        request: Request,
        x_server_secret: str | None = Header(default=None, alias=SECRET_HEADER),
        coordinator: ClaimCoordinator = Depends(get_coordinator),
    ):
        if not is_authorized(x_server_secret):
            _LOGGER.warning("create_forbidden")
            return error_response(status.HTTP_403_FORBIDDEN, "forbidden")
        body = await read_body(request, CreateRequest)
        reward = config.get_default_reward() if body.reward is None else body.reward
        result = await coordinator.admin_create(body.link_id, reward)
        if result.status == ClaimStatus.LINK_EXISTS:
            return {"ok": False, "err": "link_exists", "key": result.key}
        return {
            "ok": True,
            "linkId": result.link_id,
            "key": result.key,
            "reward": result.reward,
        }

    @fastapi.get("/health")
    async def health_check(coordinator: ClaimCoordinator = Depends(get_coordinator)):
        """Report store reachability and whether the key index matches the links"""
        state = await coordinator.get_state()
        problems = state.find_inconsistencies()
        for problem in problems:
            _LOGGER.error(f"store_inconsistent: {problem}")
        return {
            "status": "healthy",
            "consistent": not problems,
            "links": len(state.links),
        }
