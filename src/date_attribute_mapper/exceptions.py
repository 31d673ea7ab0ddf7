# Copyright 2026 Canonical Ltd.
# See LICENSE file for licensing details.

"""Exceptions used by the date attribute mapper."""


class MapperConfigInvalidError(Exception):
    """Exception raised when a mapper configuration cannot be validated.

    Attrs:
        msg (str): Explanation of the error.
    """

    def __init__(self, msg: str):
        """Initialize a new instance of the MapperConfigInvalidError exception.

        Args:
            msg (str): Explanation of the error.
        """
        self.msg = msg


class InvalidPatternError(ValueError):
    """Exception raised when a date pattern cannot be compiled.

    Attrs:
        msg (str): Explanation of the error.
        pattern (str): The offending pattern.
    """

    def __init__(self, msg: str, pattern: str):
        """Initialize a new instance of the InvalidPatternError exception.

        Args:
            msg (str): Explanation of the error.
            pattern (str): The offending pattern.
        """
        super().__init__(msg)
        self.msg = msg
        self.pattern = pattern
