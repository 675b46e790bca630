"""
Exceptions raised by the setup services
"""


class SetupError(Exception):
    """Base class for recoverable setup failures."""


class DatabaseError(SetupError):
    """
    Database failure carrying one of the ERROR_* codes.

    `params` holds the values for the localized message of the code, if any.
    """

    ERROR_DB_CONNECT = 1
    ERROR_DB_NOT_EXISTS = 2
    ERROR_DB_VERSION = 3
    ERROR_BAD_SQL = 4
    ERROR_VIEWS_CANT_CREATE = 5

    def __init__(self, message, code=None, params=()):
        super().__init__(message)
        self.code = code
        self.params = tuple(params)


class FileWriteError(SetupError):
    """
    A configuration, rewrite-rule or asset file could not be read or written.

    `text_key` names the localized message; it is formatted with `path`.
    """

    def __init__(self, message, path=None, text_key=None):
        super().__init__(message)
        self.path = path
        self.text_key = text_key
