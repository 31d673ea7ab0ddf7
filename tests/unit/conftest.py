# Copyright 2026 Canonical Ltd.
# See LICENSE file for licensing details.

"""pytest fixtures for the unit test."""

# pylint: disable=too-few-public-methods

import typing

import pytest

from date_attribute_mapper import DateAttributeMapper, MapperConfig

BIRTHDATE_CONFIG = {
    "jsonFieldPath": "profile.birthdate",
    "dateInputPattern": "yyyy-MM-dd",
    "dateOutputPattern": "dd/MM/yyyy",
    "targetAttribute": "birthdate",
}


class FakeMapperModel:
    """Stored mapper as handed over by the host."""

    def __init__(self, config: typing.Dict[str, typing.Any], name: str = "birthdate-mapper"):
        """Initialize the stored mapper.

        Args:
            config: mapper options.
            name: mapper name.
        """
        self.name = name
        self.config = config


class FakeBrokeredContext:
    """Login context carrying the federated profile and the pending identity."""

    def __init__(self, profile: typing.Dict[str, typing.Any]):
        """Initialize the context.

        Args:
            profile: federated profile data.
        """
        self.profile = profile
        self.user_attributes: typing.Dict[str, str] = {}

    def set_user_attribute(self, name: str, value: str) -> None:
        """Set an attribute of the user to be created.

        Args:
            name: attribute name.
            value: attribute value.
        """
        self.user_attributes[name] = value


class FakeUserRecord:
    """Persisted user keeping its attributes in memory."""

    def __init__(self, attributes: typing.Optional[typing.Dict[str, str]] = None):
        """Initialize the user.

        Args:
            attributes: initial attributes.
        """
        self.attributes = dict(attributes or {})

    def set_single_attribute(self, name: str, value: str) -> None:
        """Replace an attribute value.

        Args:
            name: attribute name.
            value: attribute value.
        """
        self.attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        """Remove an attribute.

        Args:
            name: attribute name.
        """
        self.attributes.pop(name, None)


def extract_profile_field(context: FakeBrokeredContext, path: str) -> typing.Any:
    """Read a dotted path of the federated profile.

    Args:
        context: the login context.
        path: dotted path.

    Returns:
        The value, None if absent.
    """
    value: typing.Any = context.profile
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


@pytest.fixture(name="birthdate_config")
def birthdate_config_fixture() -> MapperConfig:
    """Configuration converting ISO dates to dd/MM/yyyy into birthdate."""
    return MapperConfig.from_mapper_config(BIRTHDATE_CONFIG)


@pytest.fixture(name="mapper")
def mapper_fixture() -> DateAttributeMapper:
    """Mapper reading dotted paths of the fake profile."""
    return DateAttributeMapper(extract_profile_field)
