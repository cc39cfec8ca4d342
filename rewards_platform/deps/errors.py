from fastapi import HTTPException

from rewards_platform.services.errors import ErrorCode


ERROR_STATUS = {
    ErrorCode.REWARD_NOT_FOUND: 404,
    ErrorCode.CODE_NOT_FOUND: 404,
    ErrorCode.REDEMPTION_NOT_FOUND: 404,
    ErrorCode.POINTS_MISMATCH: 400,
    ErrorCode.INSUFFICIENT_POINTS: 400,
    ErrorCode.INVALID_AMOUNT: 400,
    ErrorCode.BUSINESS_MISMATCH: 403,
    ErrorCode.REWARD_INACTIVE: 409,
    ErrorCode.REWARD_SOLD_OUT: 409,
    ErrorCode.ALREADY_FULFILLED: 409,
    ErrorCode.REDEMPTION_CANCELLED: 409,
    ErrorCode.INVALID_TRANSITION: 409,
    ErrorCode.IDEMPOTENCY_CONFLICT: 409,
    ErrorCode.CODE_ALLOCATION_FAILED: 503,
    ErrorCode.REDEMPTION_EXPIRED: 410,
}


def http_error(error_code: ErrorCode, message: str) -> HTTPException:
    return HTTPException(
        status_code=ERROR_STATUS.get(error_code, 400),
        detail={"error_code": error_code.value, "error": message},
    )
