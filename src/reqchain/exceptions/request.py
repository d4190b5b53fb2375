"""
Request building and transport exceptions.

Configuration errors are recorded on the request builder and surfaced through
``Request.error`` or an empty response; transport errors travel with the
response wrapper.
"""

from typing import Any, Optional

from .base import ExceptionContext, ReqchainError
from .templates import ErrorCodes, ErrorMessageTemplates


class RequestBuildError(ReqchainError):
    """Base class for errors recorded while configuring a request."""


class SerializationError(RequestBuildError):
    """Raised when a JSON body cannot be encoded."""

    def __init__(self, details: str):
        message = ErrorMessageTemplates.SERIALIZATION_FAILED.format(details=details)
        context = ExceptionContext(
            help_text="Pass only JSON-serializable values (dict, list, str, int, float, bool, None)",
            error_code=ErrorCodes.BUILD_SERIALIZATION,
        )
        super().__init__(message, context)


class EmptyFieldListError(RequestBuildError):
    """Raised when a multipart field maps to zero values."""

    def __init__(self, field: str):
        self.field = field
        message = ErrorMessageTemplates.EMPTY_FIELD_VALUES.format(field=field)
        context = ExceptionContext(
            help_text="Each field needs [source] or [source, content_type]",
            error_code=ErrorCodes.BUILD_EMPTY_VALUES,
            context={"field": field},
        )
        super().__init__(message, context)


class TypeMismatchError(RequestBuildError):
    """Raised when a multipart value has the wrong type."""

    def __init__(self, field: str, value: Any, expected: str = "byte source"):
        self.field = field
        self.expected = expected
        template = {
            "str": ErrorMessageTemplates.CONTENT_TYPE_NOT_STRING,
            "mapping": ErrorMessageTemplates.FIELDS_NOT_MAPPING,
        }.get(expected, ErrorMessageTemplates.NOT_A_BYTE_SOURCE)
        message = template.format(field=field, type_name=type(value).__name__)
        context = ExceptionContext(
            error_code=ErrorCodes.BUILD_TYPE_MISMATCH,
            context={"field": field, "expected": expected},
        )
        super().__init__(message, context)


class RequestIOError(RequestBuildError):
    """Raised when reading a source or writing a multipart part fails."""

    def __init__(self, field: str, details: str):
        self.field = field
        message = ErrorMessageTemplates.COPY_FAILED.format(field=field, details=details)
        context = ExceptionContext(
            error_code=ErrorCodes.BUILD_IO_ERROR,
            context={"field": field},
        )
        super().__init__(message, context)


class MissingFileIdentityError(RequestBuildError):
    """Raised when a single-file upload is given a source without a file name."""

    def __init__(self, source: Any):
        message = ErrorMessageTemplates.MISSING_FILE_IDENTITY.format(
            type_name=type(source).__name__
        )
        context = ExceptionContext(
            help_text="Open the file with open(path, 'rb') or wrap the stream in NamedReader(stream, name)",
            error_code=ErrorCodes.BUILD_MISSING_FILE_NAME,
        )
        super().__init__(message, context)


class InvalidRequestError(RequestBuildError):
    """Raised when the outgoing request cannot be constructed."""

    def __init__(self, method: str, uri: str, reason: str):
        message = ErrorMessageTemplates.INVALID_REQUEST.format(
            method=method or "<empty>", uri=uri, reason=reason
        )
        context = ExceptionContext(
            error_code=ErrorCodes.BUILD_INVALID_REQUEST,
            context={"method": method, "uri": uri},
        )
        super().__init__(message, context)


class MultipartError(RequestBuildError):
    """Raised when the multipart writer is used after it was closed or a part was superseded."""

    def __init__(self, message: str):
        super().__init__(message, error_code=ErrorCodes.BUILD_MULTIPART)


class TransportError(ReqchainError):
    """Raised by the HTTP client collaborator when sending fails."""

    def __init__(self, method: str, url: str, cause: Optional[BaseException] = None):
        self.method = method
        self.url = url
        self.cause = cause
        details = str(cause) if cause is not None else "unknown error"
        message = ErrorMessageTemplates.TRANSPORT_FAILED.format(
            method=method, url=url, details=details
        )
        context = ExceptionContext(
            help_text="Check the URL, your network connection and proxy settings",
            error_code=ErrorCodes.TRANSPORT_FAILED,
            context={"method": method, "url": url},
            technical_details=type(cause).__name__ if cause is not None else None,
        )
        super().__init__(message, context)
