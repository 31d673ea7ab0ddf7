# Copyright 2026 Canonical Ltd.
# See LICENSE file for licensing details.

"""Date attribute mapper for federated identities."""

# Exporting methods to be used for another modules
from .config import (  # noqa: F401
    CONF_DATE_INPUT_PATTERN,
    CONF_DATE_OUTPUT_PATTERN,
    CONF_JSON_FIELD_PATH,
    CONF_TARGET_ATTRIBUTE,
    CONFIG_PROPERTIES,
    ConfigProperty,
    MapperConfig,
    is_blank,
)
from .converter import ConversionFailure, ConversionResult, convert  # noqa: F401
from .exceptions import InvalidPatternError, MapperConfigInvalidError  # noqa: F401
from .mapper import ANY_PROVIDER, PROVIDER_ID, DateAttributeMapper  # noqa: F401
from .sync_policy import (  # noqa: F401
    AttributeMutation,
    MutationAction,
    apply_mutation,
    on_first_login,
    on_update,
)
