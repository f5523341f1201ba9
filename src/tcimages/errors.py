"""Custom exceptions for tcimages."""


class TcImagesError(Exception):
    """Base exception for all tcimages errors."""

    pass


class ImageConfigError(TcImagesError):
    """Exception raised when an image configuration file cannot be loaded."""

    pass


class CopySourceError(TcImagesError):
    """Exception raised when staged content cannot be resolved."""

    pass
