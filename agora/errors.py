"""Errors shared across the application."""


class InternalServerError(Exception):
    """An unexpected failure that should not leak details to callers."""

    def __init__(self, message: str = "internal server error") -> None:
        super().__init__(message)


class InvalidInputError(ValueError):
    """The caller supplied input that cannot be processed."""

    def __init__(self, message: str = "invalid input") -> None:
        super().__init__(message)