"""Feature handlers and their registry."""

from .base import Feature, FeatureRegistry, UnknownFeatureError, run_feature
from .build import BUILD_FEATURES
from .ops import OPS_FEATURES
from .options import Options, OptionsError, parse_options
from .saas import SAAS_FEATURES

FEATURES = FeatureRegistry()
for _feature in (*BUILD_FEATURES, *SAAS_FEATURES, *OPS_FEATURES):
    FEATURES.register(_feature)
del _feature


def get_feature(name: str) -> Feature:
    return FEATURES.get(name)


__all__ = [
    "FEATURES",
    "Feature",
    "FeatureRegistry",
    "Options",
    "OptionsError",
    "UnknownFeatureError",
    "get_feature",
    "parse_options",
    "run_feature",
]
