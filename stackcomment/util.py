from typing import Optional, TypeVar

T = TypeVar('T')


def ensure(value: Optional[T], what: str = "Value") -> T:
    """Ensure a value is not None, raising RuntimeError if it is.

    Args:
        value: The value to check
        what: Name of the value, used in the error message

    Returns:
        The value if it is not None

    Raises:
        RuntimeError: If the value is None
    """
    if value is None:
        raise RuntimeError(f"{what} is None")
    return value
