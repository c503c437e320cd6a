"""Translation of engine errors into API responses."""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore

from .domain import errors

_STATUS_BY_ERROR = (
    (errors.ValidationError, status.HTTP_400_BAD_REQUEST),
    (errors.NotFoundError, status.HTTP_404_NOT_FOUND),
    (errors.ConflictError, status.HTTP_409_CONFLICT),
    (errors.PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def error_response(exc: errors.ReservationError) -> Response:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return Response(
                {"detail": str(exc), "code": type(exc).__name__},
                status=status_code,
            )
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
