from fastapi import HTTPException, status
from typing import Any, Dict, Optional


class BaseAPIException(HTTPException):
    """API error rendered as the {success, error: {code, message, details}} envelope"""
    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error": {
                    "code": error_code,
                    "message": message,
                    "details": self.details
                }
            }
        )

    def __str__(self) -> str:
        return self.message


class AuthenticationError(BaseAPIException):
    """No session or an invalid one"""
    def __init__(self, message: str = "Authentication failed", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTH_001",
            message=message,
            details=details
        )


class AuthorizationError(BaseAPIException):
    """Authenticated but not allowed"""
    def __init__(self, message: str = "Access forbidden", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="AUTH_002",
            message=message,
            details=details
        )


class ValidationError(BaseAPIException):
    """Malformed or semantically invalid input"""
    def __init__(self, message: str = "Validation failed", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="VALIDATION_001",
            message=message,
            details=details
        )


class NotFoundError(BaseAPIException):
    """Unknown resource; subclasses set a resource-specific code"""
    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict] = None,
        error_code: str = "NOT_FOUND_001",
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=error_code,
            message=message,
            details=details
        )


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: Any):
        super().__init__(
            message=f"User not found: {user_id}",
            details={"user_id": user_id},
            error_code="USER_404",
        )


class PrizeNotFoundError(NotFoundError):
    def __init__(self, prize_id: Any):
        super().__init__(
            message=f"Prize not found: {prize_id}",
            details={"prize_id": prize_id},
            error_code="PRIZE_404",
        )


class TournamentNotFoundError(NotFoundError):
    def __init__(self, tournament_id: Any):
        super().__init__(
            message=f"Tournament not found: {tournament_id}",
            details={"tournament_id": tournament_id},
            error_code="TOURNAMENT_404",
        )


class InsufficientPointsError(BaseAPIException):
    """Balance lower than the amount to debit"""
    def __init__(self, required: int, available: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="POINTS_001",
            message=f"Insufficient points. Required: {required}, Available: {available}",
            details={"required": required, "available": available}
        )


class PrizeUnavailableError(BaseAPIException):
    def __init__(self, prize_id: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="PRIZE_001",
            message="Prize is no longer available",
            details={"prize_id": prize_id}
        )


class TournamentFullError(BaseAPIException):
    def __init__(self, tournament_id: Any, max_players: int):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="TOURNAMENT_001",
            message="Tournament is full",
            details={"tournament_id": tournament_id, "max_players": max_players}
        )


class RegistrationClosedError(BaseAPIException):
    def __init__(self, tournament_id: Any, status_value: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="TOURNAMENT_002",
            message="Registration is closed",
            details={"tournament_id": tournament_id, "status": status_value}
        )


class AlreadyJoinedError(BaseAPIException):
    def __init__(self, tournament_id: Any, user_id: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="TOURNAMENT_003",
            message="Already joined this tournament",
            details={"tournament_id": tournament_id, "user_id": user_id}
        )


class TransactionStateError(BaseAPIException):
    """Status transition attempted on a transaction that is no longer PENDING"""
    def __init__(self, transaction_id: Any, current_status: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="TRANSACTION_001",
            message=f"Transaction {transaction_id} is already {current_status}",
            details={"transaction_id": transaction_id, "status": current_status}
        )


class InternalServerError(BaseAPIException):
    """Fallback for unhandled errors"""
    def __init__(self, message: str = "Internal server error", details: Optional[Dict] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="INTERNAL_001",
            message=message,
            details=details
        )
