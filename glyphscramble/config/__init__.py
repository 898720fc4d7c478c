"""Effect configuration models and loading.

    from glyphscramble.config import SpotPulseConfig, resolve_config
"""

from glyphscramble.config.loader import config_for_kind, load_effect_config, load_optional_config, resolve_config
from glyphscramble.config.schema import (
    CONFIG_MODELS,
    DEFAULT_CHAR_SET,
    EffectConfig,
    EffectKind,
    GlobalFuzzConfig,
    LinearScanConfig,
    RadialSpreadConfig,
    SpotPulseConfig,
    SprinkleConfig,
    TypewriterConfig,
)

__all__ = [
    "CONFIG_MODELS",
    "DEFAULT_CHAR_SET",
    "EffectConfig",
    "EffectKind",
    "GlobalFuzzConfig",
    "LinearScanConfig",
    "RadialSpreadConfig",
    "SpotPulseConfig",
    "SprinkleConfig",
    "TypewriterConfig",
    "config_for_kind",
    "load_effect_config",
    "load_optional_config",
    "resolve_config",
]
