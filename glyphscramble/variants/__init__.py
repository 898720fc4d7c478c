"""Effect variants keyed by kind."""

from typing import Dict, Type

from glyphscramble.config.schema import EffectKind
from glyphscramble.variants.base import EffectVariant, SpawnHost, UnitPoolVariant
from glyphscramble.variants.global_fuzz import GlobalFuzz
from glyphscramble.variants.linear_scan import LinearScan
from glyphscramble.variants.radial_spread import RadialSpread
from glyphscramble.variants.spot_pulse import SpotPulse
from glyphscramble.variants.sprinkle import Sprinkle
from glyphscramble.variants.typewriter import Typewriter

VARIANTS: Dict[EffectKind, Type[EffectVariant]] = {
    cls.kind: cls for cls in (SpotPulse, GlobalFuzz, LinearScan, RadialSpread, Sprinkle, Typewriter)
}

__all__ = [
    "VARIANTS",
    "EffectVariant",
    "GlobalFuzz",
    "LinearScan",
    "RadialSpread",
    "SpawnHost",
    "SpotPulse",
    "Sprinkle",
    "Typewriter",
    "UnitPoolVariant",
]
