"""File helpers for snapshots, configuration and team exports."""

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('tgg.utils')


def load_json(path: Path | str, schema: type[T] | None = None) -> Any | T:
    """
    Read a JSON document, optionally validating it against a pydantic model.

    Args:
        path: JSON file (snapshot, config, ...)
        schema: Model to validate the document with

    Returns:
        The parsed document, or the validated model when a schema is given

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
        ValueError: If the document does not match the schema

    Example:
        from tgg.schemas import GraphicConfig
        config = load_json('data/graphic_config.json', schema=GraphicConfig)
    """
    path = Path(path)
    if not path.is_file():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    text = path.read_text(encoding='utf-8')
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} (line {e.lineno})')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    logger.debug(f'Loaded {path}')
    if schema is None:
        return document

    try:
        return schema.model_validate(document)
    except ValidationError as e:
        logger.error(f'{path} does not match {schema.__name__}: {e.error_count()} error(s)')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def save_json(path: Path | str, data: Any, indent: int = 2) -> None:
    """
    Write data as pretty-printed UTF-8 JSON, creating parent directories.

    Pydantic models are dumped in JSON mode first.

    Raises:
        TypeError: If data is not JSON-serializable
        OSError: If the file cannot be written
    """
    path = Path(path)
    if isinstance(data, BaseModel):
        data = data.model_dump(mode='json')

    try:
        text = json.dumps(data, indent=indent, ensure_ascii=False)
    except TypeError as e:
        logger.error(f'Cannot serialize data for {path}: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + '\n', encoding='utf-8')
    logger.debug(f'Wrote {path}')


def read_export_text(path: Path | str) -> str:
    """Read a text export (CSV), dropping the byte order mark spreadsheet tools add."""
    return Path(path).read_text(encoding='utf-8-sig')
