"""
Domain exceptions for slips app.

This module defines the failure taxonomy of the Slip Store and the
Settings Store. Services raise these plain exceptions; the HTTP layer
translates them into DRF API exceptions with `to_api_exception`.

Exception Hierarchy:
    SlipStoreError (base)
    ├── ValidationError      - malformed or missing input
    ├── NotFoundError        - referenced slip does not exist
    ├── InvalidStateError    - transition attempted on a non-Pending slip
    └── PersistenceError     - underlying storage failed

Usage:
    from apps.slips import exceptions as slip_errors

    try:
        store.complete(slip_id, tare_weight)
    except slip_errors.InvalidStateError:
        ...
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class SlipStoreError(Exception):
    """Base exception for all slip and settings store errors."""
    pass


class ValidationError(SlipStoreError):
    """Input is missing or malformed. The caller must correct and resubmit."""
    pass


class NotFoundError(SlipStoreError):
    """No slip matches the given id (stale client view)."""
    pass


class InvalidStateError(SlipStoreError):
    """Slip is not Pending, so it cannot be completed."""
    pass


class PersistenceError(SlipStoreError):
    """Storage read or write failed. Nothing was changed."""
    pass


# =============================================================================
# HTTP counterparts
# =============================================================================

class InvalidSlipInput(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid slip data.'
    default_code = 'invalid_slip'


class SlipNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Slip not found.'
    default_code = 'slip_not_found'


class SlipNotPending(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Slip is already complete.'
    default_code = 'slip_not_pending'


class StorageUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Storage is unavailable, please retry.'
    default_code = 'storage_unavailable'


_API_EXCEPTIONS = {
    ValidationError: InvalidSlipInput,
    NotFoundError: SlipNotFound,
    InvalidStateError: SlipNotPending,
    PersistenceError: StorageUnavailable,
}


def to_api_exception(error: SlipStoreError) -> APIException:
    """Return the API exception matching a store error."""
    for error_class, api_class in _API_EXCEPTIONS.items():
        if isinstance(error, error_class):
            return api_class(detail=str(error) or None)
    return APIException(detail=str(error))
