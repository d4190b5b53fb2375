"""
Standardized error message templates and error codes.

Keeps builder, transport and configuration errors worded consistently.
"""


class ErrorMessageTemplates:
    """Standardized error message templates for consistent formatting."""

    # Request building
    SERIALIZATION_FAILED = "Cannot encode request body as JSON: {details}"
    EMPTY_FIELD_VALUES = "An empty list of values is passed to create multipart content for field '{field}'"
    NOT_A_BYTE_SOURCE = "Value for field '{field}' is not a readable byte source: got {type_name}"
    CONTENT_TYPE_NOT_STRING = "Content type for field '{field}' is not a string: got {type_name}"
    FIELDS_NOT_MAPPING = "Multipart fields must be a mapping or (name, values) pairs: got {type_name}"
    MISSING_FILE_IDENTITY = "Source has no file name: got {type_name}"
    COPY_FAILED = "Failed to copy '{field}' into the multipart body: {details}"
    INVALID_REQUEST = "Cannot build {method} request for '{uri}': {reason}"

    # Transport
    TRANSPORT_FAILED = "{method} {url} failed: {details}"

    # Configuration
    CONFIG_INVALID = "Invalid configuration for '{field}': got {value!r}, expected {expected}"
    CONFIG_FILE_ERROR = "Configuration file error: {file_path} - {details}"

    # CLI
    INVALID_ARGUMENT = "Invalid argument '{argument}': {reason}"


class ErrorCodes:
    """Standardized error codes for consistent error categorization."""

    # Request building errors (BUILD_xxx)
    BUILD_SERIALIZATION = "BUILD_001"
    BUILD_EMPTY_VALUES = "BUILD_002"
    BUILD_TYPE_MISMATCH = "BUILD_003"
    BUILD_IO_ERROR = "BUILD_004"
    BUILD_MISSING_FILE_NAME = "BUILD_005"
    BUILD_INVALID_REQUEST = "BUILD_006"
    BUILD_MULTIPART = "BUILD_007"

    # Transport errors (TRANSPORT_xxx)
    TRANSPORT_FAILED = "TRANSPORT_001"

    # Configuration errors (CONFIG_xxx)
    CONFIG_INVALID = "CONFIG_001"
    CONFIG_FILE_ERROR = "CONFIG_002"
    CONFIG_VALIDATION_ERROR = "CONFIG_003"

    # CLI errors (CLI_xxx)
    CLI_INVALID_ARGUMENT = "CLI_001"
