from pathlib import Path
from typing import Any, Mapping, Optional, Set, Type, TypeVar, Union

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from glyphscramble.config.schema import CONFIG_MODELS, EffectConfig, EffectKind

T = TypeVar("T", bound=EffectConfig)


def _warn_unknown_keys(model: BaseModel, source: str) -> None:
    if model.model_extra:
        logger.warning(
            "Ignoring unknown effect config keys",
            config=type(model).__name__,
            source=source,
            keys=sorted(model.model_extra),
        )


def _field_keys(model_class: Type[BaseModel], loc: str) -> Set[str]:
    """All spellings (field name and alias) that refer to the field at ``loc``."""
    keys = {loc}
    for name, info in model_class.model_fields.items():
        alias = info.alias or to_camel(name)
        if loc in (name, alias):
            keys.update((name, alias))
    return keys


def resolve_config(
    model_class: Type[T],
    raw: Union[Mapping[str, Any], BaseModel, None] = None,
    source: str = "options",
) -> T:
    """Validate effect options, falling back to defaults for anything invalid.

    Invalid keys are dropped one validation pass at a time and logged; this
    never raises for bad input.

    Args:
        model_class: Config model for the effect kind.
        raw: Options mapping, an existing config model, or None for defaults.
        source: Label used in log lines (a file path or "options").

    Returns:
        The validated, frozen configuration.
    """
    if raw is None:
        return model_class()
    if isinstance(raw, model_class):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(exclude_unset=True)
    if not isinstance(raw, Mapping):
        logger.warning("Effect config is not a mapping, using defaults", config=model_class.__name__, source=source)
        return model_class()

    data = dict(raw)
    while True:
        try:
            model = model_class.model_validate(data)
            break
        except ValidationError as exc:
            invalid: Set[str] = set()
            for error in exc.errors():
                if error["loc"]:
                    invalid |= _field_keys(model_class, str(error["loc"][0]))
            dropped = sorted(key for key in data if key in invalid)
            if not dropped:
                logger.warning("Effect config rejected, using defaults", config=model_class.__name__, source=source)
                return model_class()
            logger.warning(
                "Dropping invalid effect config keys",
                config=model_class.__name__,
                source=source,
                keys=dropped,
            )
            data = {key: value for key, value in data.items() if key not in invalid}

    _warn_unknown_keys(model, source)
    return model


def config_for_kind(kind: EffectKind, raw: Union[Mapping[str, Any], BaseModel, None] = None) -> EffectConfig:
    return resolve_config(CONFIG_MODELS[kind], raw)


def load_effect_config(path: Path, kind: EffectKind) -> EffectConfig:
    """Load effect options from a YAML file.

    The file may hold the options at the top level or nested under the
    effect's name (``spot_pulse:``), which lets one file configure several
    effects.
    """
    model_class = CONFIG_MODELS[kind]
    if not path.exists():
        logger.warning("Effect config file not found, using defaults", path=str(path))
        return model_class()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to read effect config file", path=str(path), error=str(e))
        return model_class()

    if isinstance(raw, Mapping) and isinstance(raw.get(kind.value), Mapping):
        raw = raw[kind.value]
    elif isinstance(raw, Mapping):
        # Sections for other effects are not options of this one.
        raw = {key: value for key, value in raw.items() if key not in {k.value for k in EffectKind}}
    return resolve_config(model_class, raw, source=str(path))


def load_optional_config(path: Optional[Path], kind: EffectKind) -> EffectConfig:
    if path is None:
        return CONFIG_MODELS[kind]()
    return load_effect_config(path, kind)
