"""Loaders for rule sets, lexicons and phoneme inventories.

Rule sets live at ``<project>/<language>/sca_rules.json``; lexicons and
inventories are plain JSON documents handed over by the editor.
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Union

import orjson
from pydantic import ValidationError as PydanticValidationError

from soundshift.config import get_settings
from soundshift.core.types import LexiconEntry, PhonemeInventory, SCAConfig
from soundshift.errors import ResourceNotFoundError, ValidationError
from soundshift.observ import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


def _read_json(path: Path, resource_type: str) -> Any:
    if not path.exists():
        raise ResourceNotFoundError(resource_type, str(path))
    try:
        return orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as e:
        raise ValidationError(
            f"{resource_type} is not valid JSON: {e}",
            field=str(path),
        ) from e


def _validation_error(resource_type: str, path: Path, error: PydanticValidationError) -> ValidationError:
    return ValidationError(
        f"{resource_type} failed validation: {error.error_count()} error(s)",
        field=str(path),
        errors=error.errors(include_url=False),
    )


def read_sca_config(path: PathLike) -> SCAConfig:
    """Read a rule-set file."""
    path = Path(path)
    data = _read_json(path, "SCA config")
    try:
        config = SCAConfig.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_error("SCA config", path, e) from e

    logger.debug(
        "sca_config_loaded",
        path=str(path),
        rule_sets=len(config.rule_sets),
        rules=sum(len(rs.rules) for rs in config.rule_sets),
    )
    return config


def load_sca_config(project_path: PathLike, language_path: str) -> SCAConfig:
    """Load a language's rule sets; a missing file yields an empty config."""
    path = Path(project_path) / language_path / get_settings().rules_filename
    if not path.exists():
        return SCAConfig()
    return read_sca_config(path)


def save_sca_config(project_path: PathLike, language_path: str, config: SCAConfig) -> Path:
    """Write a language's rule sets atomically."""
    directory = Path(project_path) / language_path
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / get_settings().rules_filename

    payload = orjson.dumps(config.model_dump(mode="json"), option=orjson.OPT_INDENT_2)
    fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".sca_rules.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("sca_config_saved", path=str(path), rule_sets=len(config.rule_sets))
    return path


def load_lexicon(path: PathLike) -> list[LexiconEntry]:
    """Read a JSON array of lexicon entries."""
    path = Path(path)
    data = _read_json(path, "Lexicon")
    if not isinstance(data, list):
        raise ValidationError("Lexicon must be a JSON array of entries", field=str(path))
    try:
        return [LexiconEntry.model_validate(item) for item in data]
    except PydanticValidationError as e:
        raise _validation_error("Lexicon", path, e) from e


def load_inventory(path: PathLike) -> PhonemeInventory:
    """Read a phoneme inventory (consonants, vowels, macros)."""
    path = Path(path)
    data = _read_json(path, "Phoneme inventory")
    try:
        return PhonemeInventory.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_error("Phoneme inventory", path, e) from e
