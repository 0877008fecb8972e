"""
Classification of Pub/Sub errors into pipeline status codes.

Codes mirror HTTP semantics so the host pipeline can route uniformly
(e.g. 429/503/504 retryable, 400/403/404/409 not retryable).
"""

from concurrent import futures
from typing import Optional

import grpc
from google.api_core import exceptions

DEFAULT_STATUS_CODE = 400

STATUS_CODES = {
    grpc.StatusCode.CANCELLED: 499,
    grpc.StatusCode.UNKNOWN: 400,
    grpc.StatusCode.INVALID_ARGUMENT: 400,
    grpc.StatusCode.FAILED_PRECONDITION: 400,
    grpc.StatusCode.ABORTED: 400,
    grpc.StatusCode.OUT_OF_RANGE: 400,
    grpc.StatusCode.UNIMPLEMENTED: 400,
    grpc.StatusCode.DATA_LOSS: 400,
    grpc.StatusCode.DEADLINE_EXCEEDED: 504,
    grpc.StatusCode.NOT_FOUND: 404,
    grpc.StatusCode.ALREADY_EXISTS: 409,
    grpc.StatusCode.PERMISSION_DENIED: 403,
    grpc.StatusCode.RESOURCE_EXHAUSTED: 429,
    grpc.StatusCode.INTERNAL: 500,
    grpc.StatusCode.UNAVAILABLE: 503,
    grpc.StatusCode.UNAUTHENTICATED: 401,
}


def status_code_for(kind: Optional[grpc.StatusCode]) -> int:
    """
    Map a gRPC status code to a pipeline status code.

    Unmapped kinds (including OK and None) default to 400.
    """
    return STATUS_CODES.get(kind, DEFAULT_STATUS_CODE)


def error_kind(error: BaseException) -> Optional[grpc.StatusCode]:
    """
    Extract the gRPC status code carried by a publish error.

    Args:
        error: Exception raised by the publish future

    Returns:
        The status code, or None if the error is not classifiable
    """
    if isinstance(error, exceptions.GoogleAPICallError):
        return error.grpc_status_code
    if isinstance(error, grpc.RpcError) and callable(getattr(error, "code", None)):
        return error.code()
    if isinstance(error, futures.CancelledError):
        return grpc.StatusCode.CANCELLED
    if isinstance(error, (futures.TimeoutError, TimeoutError)):
        return grpc.StatusCode.DEADLINE_EXCEEDED
    return None


def status_code_for_error(error: BaseException) -> int:
    """Map a publish error to a pipeline status code."""
    return status_code_for(error_kind(error))
