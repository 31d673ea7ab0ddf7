# Copyright 2026 Canonical Ltd.
# See LICENSE file for licensing details.

"""Configuration of the date attribute mapper."""

import itertools
import typing

# pydantic is causing this no-name-in-module problem
from pydantic import (  # pylint: disable=no-name-in-module,import-error
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .exceptions import MapperConfigInvalidError

CONF_JSON_FIELD_PATH = "jsonFieldPath"
CONF_DATE_INPUT_PATTERN = "dateInputPattern"
CONF_DATE_OUTPUT_PATTERN = "dateOutputPattern"
CONF_TARGET_ATTRIBUTE = "targetAttribute"
# Keys written by earlier releases of the mapper.
CONF_LEGACY_JSON_FIELD = "jsonField"
CONF_LEGACY_USER_ATTRIBUTE = "userAttribute"

STRING_TYPE = "String"
SUPPORTED_LETTERS = "G y M L d D E u a H k K h m s S z Z X"


def is_blank(value: typing.Optional[str]) -> bool:
    """Check if a configuration value is absent or empty after trimming.

    Args:
        value: the configuration value.

    Returns:
        True if the value should be treated as absent.
    """
    return value is None or not value.strip()


class MapperConfig(BaseModel):
    """Date attribute mapper configuration.

    Every option is trimmed and an option that is empty after trimming is
    stored as None.

    Attributes:
        json_field_path: path of the field in the federated profile.
        date_input_pattern: pattern the source value is parsed with.
        date_output_pattern: pattern the stored value is rendered with.
        target_attribute: user attribute the converted value is stored into.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    json_field_path: typing.Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            CONF_JSON_FIELD_PATH, CONF_LEGACY_JSON_FIELD, "json_field_path"
        ),
    )
    date_input_pattern: typing.Optional[str] = Field(
        None, validation_alias=AliasChoices(CONF_DATE_INPUT_PATTERN, "date_input_pattern")
    )
    date_output_pattern: typing.Optional[str] = Field(
        None, validation_alias=AliasChoices(CONF_DATE_OUTPUT_PATTERN, "date_output_pattern")
    )
    target_attribute: typing.Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            CONF_TARGET_ATTRIBUTE, CONF_LEGACY_USER_ATTRIBUTE, "target_attribute"
        ),
    )

    @field_validator(
        "json_field_path",
        "date_input_pattern",
        "date_output_pattern",
        "target_attribute",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value: typing.Any) -> typing.Any:
        """Trim string options and treat empty ones as absent.

        Args:
            value: the input value.

        Returns:
            The trimmed value, or None if it is blank.
        """
        if isinstance(value, str):
            return value.strip() or None
        return value

    def missing_pattern_options(self) -> typing.List[str]:
        """List the date pattern options that are not configured.

        Returns:
            Option names, input pattern first.
        """
        missing = []
        if is_blank(self.date_input_pattern):
            missing.append(CONF_DATE_INPUT_PATTERN)
        if is_blank(self.date_output_pattern):
            missing.append(CONF_DATE_OUTPUT_PATTERN)
        return missing

    @classmethod
    def from_mapper_config(cls, config: typing.Mapping[str, typing.Any]) -> "MapperConfig":
        """Build the configuration from the host's mapper config map.

        Args:
            config: option names to values, as stored by the host.

        Raises:
            MapperConfigInvalidError: if an option has an unusable value.

        Returns:
            The validated configuration.
        """
        try:
            return cls.model_validate(dict(config or {}))
        except ValidationError as exc:
            error_fields = set(
                itertools.chain.from_iterable(error["loc"] for error in exc.errors())
            )
            error_field_str = " ".join(sorted(f"{f}" for f in error_fields))
            raise MapperConfigInvalidError(f"invalid configuration: {error_field_str}") from exc


class ConfigProperty(BaseModel):
    """A configuration option as shown in the host's admin UI.

    Attributes:
        name: option name.
        label: short label.
        help_text: help text.
        type: option type.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    help_text: str
    type: str = STRING_TYPE


CONFIG_PROPERTIES: typing.Tuple[ConfigProperty, ...] = (
    ConfigProperty(
        name=CONF_JSON_FIELD_PATH,
        label="Social Profile JSON Field Path",
        help_text=(
            "Path of field in Social provider User Profile JSON data to get value from. "
            "You can use dot notation for nesting and square brackets for array index."
        ),
    ),
    ConfigProperty(
        name=CONF_DATE_INPUT_PATTERN,
        label="Input date pattern",
        help_text=(
            "Input date pattern (eg. yyyy-MM-dd for date 2021-01-10). "
            f"See java.text.SimpleDateFormat, supported letters: {SUPPORTED_LETTERS}."
        ),
    ),
    ConfigProperty(
        name=CONF_DATE_OUTPUT_PATTERN,
        label="Output date pattern",
        help_text=(
            "Output date pattern (eg. dd/MM/yyyy for date 10/01/2021). "
            f"See java.text.SimpleDateFormat, supported letters: {SUPPORTED_LETTERS}."
        ),
    ),
    ConfigProperty(
        name=CONF_TARGET_ATTRIBUTE,
        label="User Attribute Name",
        help_text="User attribute name to store information into.",
    ),
)
