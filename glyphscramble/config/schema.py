from enum import Enum
from typing import Any, Dict, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from glyphscramble.colors import FUZZ_GRAYS, GRAYSCALE, SPRINKLE_GRAYS, palette_registry

DEFAULT_CHAR_SET = "!@#$%^&*()_+-=[]{}|;:<>?~`ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
FUZZ_CHAR_SET = "!@#$%^&*()_+-=[]{}|;:,./<>?~`ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
# Printable ASCII from "!" to "~"
PRINTABLE_CHAR_SET = "".join(chr(code) for code in range(33, 127))


class EffectKind(str, Enum):
    SPOT_PULSE = "spot_pulse"
    GLOBAL_FUZZ = "global_fuzz"
    LINEAR_SCAN = "linear_scan"
    RADIAL_SPREAD = "radial_spread"
    SPRINKLE = "sprinkle"
    TYPEWRITER = "typewriter"


def _ordered(low: Any, high: Any) -> Tuple[Any, Any]:
    return (low, high) if low <= high else (high, low)


class EffectConfig(BaseModel):
    """Options shared by every effect. Keys may be camelCase or snake_case."""

    model_config = ConfigDict(extra="allow", frozen=True, alias_generator=to_camel, populate_by_name=True)

    update_interval: float = Field(default=80, gt=0)  # ms between ticks
    colors: Tuple[str, ...] = Field(default=GRAYSCALE, min_length=1)
    char_set: str = Field(default=DEFAULT_CHAR_SET, min_length=1)

    @field_validator("colors", mode="before")
    @classmethod
    def resolve_palette_name(cls, v: Any) -> Any:
        """Allow a registered palette name in place of an explicit color list."""
        if isinstance(v, str):
            palette = palette_registry.get(v)
            if palette is None:
                raise ValueError(f"Unknown palette: {v}. Known palettes: {', '.join(palette_registry.names())}")
            return palette.colors
        return v

    @field_validator("colors")
    @classmethod
    def validate_color_entries(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if any(not entry for entry in v):
            raise ValueError("Palette entries must be non-empty strings")
        return v


class SpotPulseConfig(EffectConfig):
    update_interval: float = Field(default=80, gt=0)
    min_active_chars: int = Field(default=5, ge=1)
    max_active_chars: int = Field(default=10, ge=1)
    min_pause_duration: int = Field(default=100, ge=0)
    max_pause_duration: int = Field(default=1000, ge=0)
    min_change_count: int = Field(default=5, ge=1)
    max_change_count: int = Field(default=20, ge=1)
    fade_steps: int = Field(default=5, ge=1)

    @property
    def active_range(self) -> Tuple[int, int]:
        return _ordered(self.min_active_chars, self.max_active_chars)

    @property
    def pause_range(self) -> Tuple[int, int]:
        return _ordered(self.min_pause_duration, self.max_pause_duration)

    @property
    def change_range(self) -> Tuple[int, int]:
        return _ordered(self.min_change_count, self.max_change_count)


class GlobalFuzzConfig(EffectConfig):
    update_interval: float = Field(default=100, gt=0)
    colors: Tuple[str, ...] = Field(default=FUZZ_GRAYS, min_length=1)
    char_set: str = Field(default=FUZZ_CHAR_SET, min_length=1)
    char_count: int = Field(default=100, ge=0)
    change_rate: float = Field(default=0.2, ge=0, le=1)
    preserve_line_breaks: bool = True


class LinearScanConfig(EffectConfig):
    update_interval: float = Field(default=80, gt=0)
    tail_length: int = Field(default=10, ge=1)
    travel_speed: int = Field(default=1, ge=1)
    bidirectional: bool = True
    preserve_layout: bool = False


class RadialSpreadConfig(EffectConfig):
    update_interval: float = Field(default=60, gt=0)
    spread_radius: int = Field(default=5, ge=1)
    min_pause_duration: int = Field(default=3000, ge=0)
    max_pause_duration: int = Field(default=9000, ge=0)
    fade_steps: int = Field(default=5, ge=1)
    max_active_points: int = Field(default=4, ge=1)

    @property
    def pause_range(self) -> Tuple[int, int]:
        return _ordered(self.min_pause_duration, self.max_pause_duration)

    @property
    def min_separation(self) -> float:
        return self.spread_radius * 1.5


class SprinkleConfig(EffectConfig):
    update_interval: float = Field(default=2000, gt=0)
    colors: Tuple[str, ...] = Field(default=SPRINKLE_GRAYS, min_length=1)
    char_set: str = Field(default=PRINTABLE_CHAR_SET, min_length=1)
    density: float = Field(default=0.1, ge=0, le=1)
    min_fragments: int = Field(default=3, ge=0)


class TypewriterConfig(EffectConfig):
    update_interval: float = Field(default=80, gt=0)
    colors: Tuple[str, ...] = Field(default=SPRINKLE_GRAYS, min_length=1)
    char_set: str = Field(default=PRINTABLE_CHAR_SET, min_length=1)
    messages: Tuple[str, ...] = ()
    tail_length: int = Field(default=20, ge=0)
    delay_between_messages: int = Field(default=15, ge=0)
    step: int = Field(default=2, ge=0)
    randomize_messages: bool = False


CONFIG_MODELS: Dict[EffectKind, Type[EffectConfig]] = {
    EffectKind.SPOT_PULSE: SpotPulseConfig,
    EffectKind.GLOBAL_FUZZ: GlobalFuzzConfig,
    EffectKind.LINEAR_SCAN: LinearScanConfig,
    EffectKind.RADIAL_SPREAD: RadialSpreadConfig,
    EffectKind.SPRINKLE: SprinkleConfig,
    EffectKind.TYPEWRITER: TypewriterConfig,
}
