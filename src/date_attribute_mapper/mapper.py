# Copyright 2026 Canonical Ltd.
# See LICENSE file for licensing details.

"""Identity provider mapper storing a reformatted profile date as user attribute."""

import logging
import typing

from .config import CONF_JSON_FIELD_PATH, CONFIG_PROPERTIES, ConfigProperty, MapperConfig
from .exceptions import MapperConfigInvalidError
from .mapper_types import MapperModel, PendingIdentity, ProfileFieldExtractor, UserRecord
from .sync_policy import (
    AttributeMutation,
    MutationAction,
    apply_mutation,
    on_first_login,
    on_update,
)

logger = logging.getLogger(__name__)

ANY_PROVIDER = "*"
PROVIDER_ID = "date-attribute-mapper"


class DateAttributeMapper:
    """Mapper plugged into the identity broker.

    Attributes:
        provider_id: identifier the host selects the mapper with.
        compatible_providers: identity provider types the mapper applies to.
        display_category: category shown in the admin UI.
        display_type: name shown in the admin UI.
        help_text: description shown in the admin UI.
    """

    provider_id = PROVIDER_ID
    compatible_providers: typing.Tuple[str, ...] = (ANY_PROVIDER,)
    display_category = "Date Attribute Mapper"
    display_type = "Date Attribute Mapper"
    help_text = "Transform date from input pattern to output pattern"

    def __init__(self, extract_profile_field: ProfileFieldExtractor):
        """Initialize the mapper.

        Args:
            extract_profile_field: host primitive reading a field of the
                federated profile attached to a login context.
        """
        self._extract_profile_field = extract_profile_field

    def get_config_properties(self) -> typing.Tuple[ConfigProperty, ...]:
        """Get the options shown in the admin UI.

        Returns:
            The configuration properties.
        """
        return CONFIG_PROPERTIES

    def preprocess_federated_identity(
        self, mapper_model: MapperModel, context: PendingIdentity
    ) -> AttributeMutation:
        """Set the date attribute on an identity logging in for the first time.

        Args:
            mapper_model: the stored mapper.
            context: the pending identity, also carrying the federated profile.

        Returns:
            The applied mutation.
        """
        config = self._load_config(mapper_model)
        if config is None:
            return AttributeMutation(MutationAction.NOOP)
        source_value = self._get_source_value(mapper_model, config, context)
        mutation = on_first_login(config, source_value, mapper_name=mapper_model.name)
        apply_mutation(mutation, context.set_user_attribute)
        return mutation

    def update_brokered_user(
        self, user: UserRecord, mapper_model: MapperModel, context: typing.Any
    ) -> AttributeMutation:
        """Synchronize the date attribute of an existing user.

        Args:
            user: the persisted user.
            mapper_model: the stored mapper.
            context: the login context carrying the federated profile.

        Returns:
            The applied mutation.
        """
        config = self._load_config(mapper_model)
        if config is None:
            return AttributeMutation(MutationAction.NOOP)
        source_value = self._get_source_value(mapper_model, config, context)
        mutation = on_update(config, source_value, mapper_name=mapper_model.name)
        apply_mutation(mutation, user.set_single_attribute, user.remove_attribute)
        return mutation

    def _load_config(self, mapper_model: MapperModel) -> typing.Optional[MapperConfig]:
        """Validate the stored mapper options.

        Args:
            mapper_model: the stored mapper.

        Returns:
            The configuration, or None if it is not usable.
        """
        try:
            return MapperConfig.from_mapper_config(mapper_model.config)
        except MapperConfigInvalidError as exc:
            logger.exception(
                "Error creating MapperConfig for mapper %s: %s", mapper_model.name, exc.msg
            )
            return None

    def _get_source_value(
        self, mapper_model: MapperModel, config: MapperConfig, context: typing.Any
    ) -> typing.Any:
        """Read the configured field of the federated profile.

        Args:
            mapper_model: the stored mapper.
            config: the mapper configuration.
            context: the login context.

        Returns:
            The profile value, None if absent or if no path is configured.
        """
        if config.json_field_path is None:
            logger.warning(
                "%s is not configured for mapper %s", CONF_JSON_FIELD_PATH, mapper_model.name
            )
            return None
        return self._extract_profile_field(context, config.json_field_path)
