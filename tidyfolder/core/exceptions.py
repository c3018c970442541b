"""Exceptions raised by tidyfolder."""


class TidyFolderError(Exception):
    """Base class for tidyfolder errors."""

    pass


class ConfigError(TidyFolderError):
    """Raised when no usable configuration could be loaded."""

    pass


class OperationInProgressError(TidyFolderError):
    """Raised when a background operation is started while another runs."""

    pass
