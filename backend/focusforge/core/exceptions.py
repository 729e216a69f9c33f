"""
Domain error -> HTTP response mapping.

Every error body is {"detail": str, "code": str}; clients branch on code.
Routers raise the domain errors from models.gamification and never build
error responses themselves.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def error_response(status_code: int, detail: str, code: Optional[str] = None) -> JSONResponse:
    body = {"detail": detail} if code is None else {"detail": detail, "code": code}
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    from focusforge.models.gamification import (
        InsufficientCoinsError,
        ItemNotOwnedError,
        PowerUpNotFoundError,
        PowerUpNotInInventoryError,
        ProgressBusyError,
        QuestNotActiveError,
        QuestNotFoundError,
    )

    # Quest

    @app.exception_handler(QuestNotActiveError)
    async def _quest_not_active(request: Request, exc: QuestNotActiveError) -> JSONResponse:
        return error_response(
            400, f"Quest is not active (status: {exc.status}).", "QUEST_NOT_ACTIVE"
        )

    @app.exception_handler(QuestNotFoundError)
    async def _quest_not_found(request: Request, exc: QuestNotFoundError) -> JSONResponse:
        return error_response(404, "Quest not found.", "QUEST_NOT_FOUND")

    # Power-ups

    @app.exception_handler(PowerUpNotFoundError)
    async def _power_up_not_found(request: Request, exc: PowerUpNotFoundError) -> JSONResponse:
        return error_response(404, f"Unknown power-up: {exc.power_up_id}.", "POWER_UP_NOT_FOUND")

    @app.exception_handler(InsufficientCoinsError)
    async def _insufficient_coins(request: Request, exc: InsufficientCoinsError) -> JSONResponse:
        return error_response(
            402,
            f"Insufficient coins. Available: {exc.available}, Required: {exc.required}",
            "INSUFFICIENT_COINS",
        )

    @app.exception_handler(PowerUpNotInInventoryError)
    async def _power_up_not_owned(
        request: Request, exc: PowerUpNotInInventoryError
    ) -> JSONResponse:
        return error_response(
            409, f"Power-up {exc.power_up_id} is not in your inventory.", "POWER_UP_NOT_IN_INVENTORY"
        )

    # Inventory

    @app.exception_handler(ItemNotOwnedError)
    async def _item_not_owned(request: Request, exc: ItemNotOwnedError) -> JSONResponse:
        return error_response(403, str(exc), "ITEM_NOT_OWNED")

    # Concurrency

    @app.exception_handler(ProgressBusyError)
    async def _progress_busy(request: Request, exc: ProgressBusyError) -> JSONResponse:
        return error_response(
            409, "Another update is in progress. Please retry.", "PROGRESS_BUSY"
        )

    # Anything else is a bug: log with traceback, hide details

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return error_response(500, "Internal server error.", "INTERNAL_ERROR")
