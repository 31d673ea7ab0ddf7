# Copyright 2026 Canonical Ltd.
# See LICENSE file for licensing details.

"""Type definitions for the host collaborators of the mapper."""

import typing


class MapperModel(typing.Protocol):  # pylint: disable=too-few-public-methods
    """Stored mapper instance, as handed over by the host.

    Attributes:
        name: name given to the mapper by the administrator.
        config: option names to values.
    """

    name: str
    config: typing.Mapping[str, typing.Any]


class PendingIdentity(typing.Protocol):  # pylint: disable=too-few-public-methods
    """Identity being imported on first login, not persisted yet."""

    def set_user_attribute(self, name: str, value: str) -> None:
        """Set an attribute of the user to be created.

        Args:
            name: attribute name.
            value: attribute value.
        """


class UserRecord(typing.Protocol):
    """Persisted user account."""

    def set_single_attribute(self, name: str, value: str) -> None:
        """Replace all values of an attribute with a single value.

        Args:
            name: attribute name.
            value: attribute value.
        """

    def remove_attribute(self, name: str) -> None:
        """Remove an attribute.

        Args:
            name: attribute name.
        """


# Reads the value at a path of the federated profile attached to a login
# context. Returns None when absent, a list for multi-valued fields.
ProfileFieldExtractor = typing.Callable[[typing.Any, str], typing.Any]
