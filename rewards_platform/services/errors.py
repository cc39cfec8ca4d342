from enum import Enum


class ErrorCode(str, Enum):
    REWARD_NOT_FOUND = "RewardNotFound"
    REWARD_INACTIVE = "RewardInactive"
    REWARD_SOLD_OUT = "RewardSoldOut"
    POINTS_MISMATCH = "PointsMismatch"
    INSUFFICIENT_POINTS = "InsufficientPoints"
    INVALID_AMOUNT = "InvalidAmount"
    CODE_NOT_FOUND = "CodeNotFound"
    BUSINESS_MISMATCH = "BusinessMismatch"
    ALREADY_FULFILLED = "AlreadyFulfilled"
    REDEMPTION_EXPIRED = "RedemptionExpired"
    REDEMPTION_CANCELLED = "RedemptionCancelled"
    REDEMPTION_NOT_FOUND = "RedemptionNotFound"
    INVALID_TRANSITION = "InvalidTransition"
    IDEMPOTENCY_CONFLICT = "IdempotencyConflict"
    CODE_ALLOCATION_FAILED = "CodeAllocationFailed"


class RewardsError(Exception):
    code: ErrorCode
    default_message = "Rewards operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class RewardNotFound(RewardsError):
    code = ErrorCode.REWARD_NOT_FOUND
    default_message = "Reward not found"


class RewardInactive(RewardsError):
    code = ErrorCode.REWARD_INACTIVE
    default_message = "Reward is not currently active"


class RewardSoldOut(RewardsError):
    code = ErrorCode.REWARD_SOLD_OUT
    default_message = "Reward has no remaining inventory"


class PointsMismatch(RewardsError):
    code = ErrorCode.POINTS_MISMATCH
    default_message = "Points do not match the reward cost"


class InsufficientPoints(RewardsError):
    code = ErrorCode.INSUFFICIENT_POINTS
    default_message = "Not enough points"


class InvalidAmount(RewardsError):
    code = ErrorCode.INVALID_AMOUNT
    default_message = "Amount must be a positive number of points"


class CodeNotFound(RewardsError):
    code = ErrorCode.CODE_NOT_FOUND
    default_message = "Redemption code not found"


class BusinessMismatch(RewardsError):
    code = ErrorCode.BUSINESS_MISMATCH
    default_message = "This redemption is for a different business"


class AlreadyFulfilled(RewardsError):
    code = ErrorCode.ALREADY_FULFILLED
    default_message = "This redemption has already been fulfilled"


class RedemptionExpired(RewardsError):
    code = ErrorCode.REDEMPTION_EXPIRED
    default_message = "This redemption has expired"


class RedemptionCancelled(RewardsError):
    code = ErrorCode.REDEMPTION_CANCELLED
    default_message = "This redemption has been cancelled"


class RedemptionNotFound(RewardsError):
    code = ErrorCode.REDEMPTION_NOT_FOUND
    default_message = "Redemption not found"


class InvalidTransition(RewardsError):
    code = ErrorCode.INVALID_TRANSITION
    default_message = "Redemption status cannot change"


class IdempotencyConflict(RewardsError):
    code = ErrorCode.IDEMPOTENCY_CONFLICT
    default_message = "Idempotency key was already used for a different redemption request"


class CodeAllocationFailed(RewardsError):
    code = ErrorCode.CODE_ALLOCATION_FAILED
    default_message = "Could not allocate a unique redemption code"
