"""HTTP mapping for domain errors."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from merchflow.exceptions import MerchFlowError

STATUS_BY_CODE = {
    "not_found": 404,
    "invalid_state_transition": 409,
    "conflict": 409,
    "empty_order": 400,
    "validation_failed": 400,
    "referenced_entity_missing": 422,
    "unknown_user": 401,
}


async def merchflow_error_handler(request: Request, exc: MerchFlowError) -> JSONResponse:
    return JSONResponse(status_code=STATUS_BY_CODE.get(exc.code, 400), content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    """Domain errors by code, then Protean's own validation and lookup errors."""
    app.add_exception_handler(MerchFlowError, merchflow_error_handler)
    register_exception_handlers(app)
