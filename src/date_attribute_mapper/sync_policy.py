# Copyright 2026 Canonical Ltd.
# See LICENSE file for licensing details.

"""Decide how the target attribute follows the federated profile value.

On first login the identity is not created yet, so a value that cannot be
converted simply leaves the attribute unset. On update the existing record
must follow the upstream profile, so a missing or unconvertible value removes
the attribute.
"""

import collections.abc
import dataclasses
import enum
import logging
import typing

from .config import MapperConfig
from .converter import ConversionFailure, ConversionResult, convert

logger = logging.getLogger(__name__)


class MutationAction(enum.Enum):
    """What to do with the target attribute.

    Attributes:
        SET: store the converted value.
        REMOVE: remove the attribute.
        NOOP: leave the attribute untouched.
    """

    SET = "set"
    REMOVE = "remove"
    NOOP = "noop"


@dataclasses.dataclass(frozen=True)
class AttributeMutation:
    """A single decision about the target attribute.

    Attributes:
        action: what to do.
        attribute: the target attribute name, None if not configured.
        value: the value to store for SET.
        reason: the failure that led to REMOVE or NOOP, if any.
    """

    action: MutationAction
    attribute: typing.Optional[str] = None
    value: typing.Optional[str] = None
    reason: typing.Optional[ConversionFailure] = None


def is_multi_valued(value: typing.Any) -> bool:
    """Check if a profile value holds several values.

    Args:
        value: the profile value.

    Returns:
        True for lists, tuples and sets. Strings and bytes are single values.
    """
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (collections.abc.Sequence, collections.abc.Set))


def _resolve(
    config: MapperConfig, source_value: typing.Any, mapper_name: str
) -> typing.Optional[ConversionResult]:
    """Run the steps shared by both login flows.

    Args:
        config: the mapper configuration.
        source_value: the profile value.
        mapper_name: name of the mapper, used in diagnostics.

    Returns:
        The conversion result, or None if the target attribute is not configured.
    """
    if config.target_attribute is None:
        logger.warning("Attribute is not configured for mapper %s", mapper_name)
        return None
    if source_value is None:
        logger.warning("No value in user profile for mapper %s", mapper_name)
        return ConversionResult.failed(ConversionFailure.MISSING_VALUE)
    if is_multi_valued(source_value):
        logger.warning(
            "Json value from user profile is list for mapper %s. Cant use list to convert date",
            mapper_name,
        )
        return ConversionResult.failed(ConversionFailure.UNSUPPORTED_MULTI_VALUE)
    missing_options = config.missing_pattern_options()
    if missing_options:
        for option in missing_options:
            logger.warning("%s is not configured for mapper %s", option, mapper_name)
        return ConversionResult.failed(ConversionFailure.MISSING_CONFIG)
    return convert(
        str(source_value),
        typing.cast(str, config.date_input_pattern),
        typing.cast(str, config.date_output_pattern),
        mapper_name=mapper_name,
    )


def on_first_login(
    config: MapperConfig, source_value: typing.Any, mapper_name: str = ""
) -> AttributeMutation:
    """Decide the mutation of the pending identity on first login.

    Args:
        config: the mapper configuration.
        source_value: the profile value, None if absent.
        mapper_name: name of the mapper, used in diagnostics.

    Returns:
        A SET mutation when the value converts, NOOP otherwise.
    """
    result = _resolve(config, source_value, mapper_name)
    if result is None:
        return AttributeMutation(MutationAction.NOOP)
    if not result.ok:
        return AttributeMutation(
            MutationAction.NOOP, attribute=config.target_attribute, reason=result.failure
        )
    return AttributeMutation(
        MutationAction.SET, attribute=config.target_attribute, value=result.value
    )


def on_update(
    config: MapperConfig, source_value: typing.Any, mapper_name: str = ""
) -> AttributeMutation:
    """Decide the mutation of an existing user record.

    Args:
        config: the mapper configuration.
        source_value: the profile value, None if absent.
        mapper_name: name of the mapper, used in diagnostics.

    Returns:
        A SET mutation when the value converts, NOOP for a list value or an
        unconfigured attribute, REMOVE otherwise.
    """
    result = _resolve(config, source_value, mapper_name)
    if result is None:
        return AttributeMutation(MutationAction.NOOP)
    if result.failure is ConversionFailure.UNSUPPORTED_MULTI_VALUE:
        return AttributeMutation(
            MutationAction.NOOP, attribute=config.target_attribute, reason=result.failure
        )
    if not result.ok:
        return AttributeMutation(
            MutationAction.REMOVE, attribute=config.target_attribute, reason=result.failure
        )
    return AttributeMutation(
        MutationAction.SET, attribute=config.target_attribute, value=result.value
    )


def apply_mutation(
    mutation: AttributeMutation,
    set_attribute: typing.Callable[[str, str], None],
    remove_attribute: typing.Optional[typing.Callable[[str], None]] = None,
) -> None:
    """Apply a mutation through the host's attribute setters.

    Args:
        mutation: the decision to apply.
        set_attribute: stores a value under an attribute name.
        remove_attribute: removes an attribute, required for REMOVE.

    Raises:
        ValueError: if a REMOVE is applied without remove_attribute.
    """
    if mutation.action is MutationAction.NOOP:
        return
    attribute = typing.cast(str, mutation.attribute)
    if mutation.action is MutationAction.SET:
        logger.debug("Setting %s to %s", attribute, mutation.value)
        set_attribute(attribute, typing.cast(str, mutation.value))
        return
    if remove_attribute is None:
        raise ValueError(f"Cannot remove attribute {attribute} from this target")
    logger.debug("Removing %s", attribute)
    remove_attribute(attribute)
