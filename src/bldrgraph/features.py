"""Feature flags.

Features are switched on through the ``features_enabled`` configuration key
and returned as a ``Feature`` value that callers pass along explicitly.
"""

from __future__ import annotations

import enum
import logging

from bldrgraph.config import Config

logger = logging.getLogger(__name__)


class Feature(enum.Flag):
    """Optional behaviours that can be enabled from the configuration."""

    NONE = 0
    LIST = enum.auto()
    BUILD_DEPS = enum.auto()


FEATURE_NAMES: dict[str, Feature] = {
    "LIST": Feature.LIST,
    "BUILDDEPS": Feature.BUILD_DEPS,
}


def enable_features(config: Config) -> Feature:
    """Parse ``config.features_enabled`` into a set of feature flags.

    Names are matched case-insensitively; unknown names are logged and
    ignored.
    """
    enabled = Feature.NONE
    for raw in config.features_enabled.split(","):
        key = raw.strip().upper()
        if not key:
            continue
        feature = FEATURE_NAMES.get(key)
        if feature is None:
            logger.warning("Unknown feature: %s", key)
            continue
        logger.info("Enabling feature: %s", key)
        enabled |= feature
    return enabled
