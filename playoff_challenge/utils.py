"""JSON file helpers shared by config loading, seeding, and the CLIs."""

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('playoff_challenge.utils')


def load_json(
    path: Path | str,
    schema: type[T] | None = None,
) -> Any | T:
    """
    Load a JSON file, optionally validating it against a Pydantic model.

    Args:
        path: Path to JSON file
        schema: Optional Pydantic model to validate against

    Returns:
        Parsed JSON (a model instance if schema provided)

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ValueError: If schema validation fails

    Example:
        from playoff_challenge.schemas import PlayersFile
        players = load_json('data/players.json', schema=PlayersFile)
    """
    path = Path(path)

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    logger.debug(f'Loaded JSON from: {path}')

    if schema is None:
        return data

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'Schema validation failed for {path}: {e}')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def save_json(path: Path | str, data: Any, indent: int = 2) -> None:
    """
    Write data as JSON, creating parent directories as needed.

    Pydantic models are dumped first; anything else must be JSON-serializable.

    Raises:
        TypeError: If data is not JSON-serializable
        OSError: If file cannot be written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    json_data = data.model_dump() if isinstance(data, BaseModel) else data

    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(json_data, f, indent=indent, ensure_ascii=False)
    except TypeError as e:
        logger.error(f'Data is not JSON-serializable: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e

    logger.debug(f'Saved JSON to: {path}')
