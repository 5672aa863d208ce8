"""
Input validation utilities for importer settings.

Index names are interpolated into the bulk action line without JSON
escaping, so they are checked here against the Elasticsearch naming rules
before any payload is built.
"""

from es_importer.core.errors import ConfigurationError


class ValidationError(ConfigurationError, ValueError):
    """Raised when input validation fails."""
    pass


# Characters Elasticsearch refuses in index names
_FORBIDDEN_INDEX_CHARS = set('\\/*?"<>| ,#:')
_MAX_INDEX_NAME_BYTES = 255


def validate_index_name(index_name: str, field_name: str = "index_name") -> str:
    """
    Validate an Elasticsearch index name.

    Args:
        index_name: The index name to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated index name (stripped of whitespace)

    Raises:
        ValidationError: If validation fails

    Examples:
        >>> validate_index_name("people")
        'people'
        >>> validate_index_name("logs-2024.01")
        'logs-2024.01'
        >>> validate_index_name("People")  # doctest: +SKIP
        ValidationError: index_name must be lowercase
    """
    if not index_name or not isinstance(index_name, str):
        raise ValidationError(f"{field_name} must be a non-empty string")

    index_name = index_name.strip()

    if not index_name:
        raise ValidationError(f"{field_name} cannot be empty or whitespace-only")

    if index_name != index_name.lower():
        raise ValidationError(f"{field_name} must be lowercase, got '{index_name}'")

    if index_name in (".", ".."):
        raise ValidationError(f"{field_name} cannot be '.' or '..'")

    if index_name[0] in "-_+":
        raise ValidationError(f"{field_name} cannot start with '-', '_' or '+'")

    bad = sorted(set(index_name) & _FORBIDDEN_INDEX_CHARS)
    if bad or any(ord(ch) < 0x20 for ch in index_name):
        raise ValidationError(
            f"{field_name} contains invalid characters: {''.join(bad) or 'control characters'}"
        )

    if len(index_name.encode("utf-8")) > _MAX_INDEX_NAME_BYTES:
        raise ValidationError(
            f"{field_name} exceeds maximum length of {_MAX_INDEX_NAME_BYTES} bytes"
        )

    return index_name


def validate_batch_size(batch_size: int, field_name: str = "batch_size", max_size: int = 100000) -> int:
    """
    Validate the number of documents per bulk request.

    Args:
        batch_size: The batch size to validate
        field_name: Name of the field (for error messages)
        max_size: Maximum allowed batch size

    Returns:
        The validated batch size

    Raises:
        ValidationError: If validation fails

    Examples:
        >>> validate_batch_size(1000)
        1000
        >>> validate_batch_size(0)  # doctest: +SKIP
        ValidationError: batch_size must be a positive integer
    """
    if isinstance(batch_size, bool) or not isinstance(batch_size, int):
        raise ValidationError(f"{field_name} must be an integer, got {type(batch_size).__name__}")

    if batch_size <= 0:
        raise ValidationError(f"{field_name} must be a positive integer, got {batch_size}")

    if batch_size > max_size:
        raise ValidationError(f"{field_name} exceeds maximum of {max_size}")

    return batch_size


def validate_timeout(timeout: float | None, field_name: str = "timeout") -> float | None:
    """
    Validate a socket timeout in seconds; None means wait forever.

    Examples:
        >>> validate_timeout(None) is None
        True
        >>> validate_timeout(2.5)
        2.5
    """
    if timeout is None:
        return None

    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ValidationError(f"{field_name} must be a number, got {type(timeout).__name__}")

    if timeout <= 0:
        raise ValidationError(f"{field_name} must be positive, got {timeout}")

    return float(timeout)


def validate_file_path(file_path: str, field_name: str = "file_path") -> str:
    """
    Validate a file path argument.

    Args:
        file_path: The file path to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated file path (stripped of whitespace)

    Raises:
        ValidationError: If validation fails
    """
    if not file_path or not isinstance(file_path, str):
        raise ValidationError(f"{field_name} must be a non-empty string")

    file_path = file_path.strip()

    if not file_path:
        raise ValidationError(f"{field_name} cannot be empty or whitespace-only")

    # Check for null bytes (security)
    if "\x00" in file_path:
        raise ValidationError(f"{field_name} contains null bytes")

    # Prevent excessively long paths
    if len(file_path) > 4096:  # Linux PATH_MAX
        raise ValidationError(f"{field_name} exceeds maximum length of 4096 characters")

    return file_path


def validate_credentials(user: str | None, password: str | None) -> tuple[str, str] | None:
    """
    Pair up Basic-Auth credentials.

    Returns:
        (user, password) when both are given, None when neither is

    Raises:
        ValidationError: If only one of the two is given
    """
    if user is None and password is None:
        return None

    if user is None or password is None:
        missing = "password" if password is None else "user"
        raise ValidationError(f"Basic auth needs both user and password; {missing} is missing")

    if ":" in user:
        raise ValidationError("user cannot contain ':' in Basic auth")

    return user, password
