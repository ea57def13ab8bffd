from typing import Any, Optional

from fastapi import HTTPException


class VoteChainError(HTTPException):
    """
    Base for every error the API reports on purpose.
    `detail` is the human message, `error` the optional machine-readable part.
    """
    status_code = 500

    def __init__(self, message: str, error: Any = None, status_code: Optional[int] = None):
        super().__init__(status_code=status_code or self.status_code, detail=message)
        self.error = error


class ValidationFailed(VoteChainError):
    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message, error=[{"field": field, "message": message}])


class NotFound(VoteChainError):
    status_code = 404


class DerivationFailed(VoteChainError):
    status_code = 500


class TrainingInProgress(VoteChainError):
    status_code = 409


class TrainingLaunchError(VoteChainError):
    status_code = 500
