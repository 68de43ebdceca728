"""Save and restore of the canonical tournament record.

A snapshot is the record's plain JSON form. Documents copied from the web
form (camelCase keys such as "playerOrder" and "isShadow") are accepted
too and converted on import.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import ErrorCategory, OperationResult
from .schemas import TournamentRecord
from .utils import load_json, save_json

logger = logging.getLogger('tgg.snapshot')

_CAMEL_RE = re.compile(r'(?<!^)(?=[A-Z])')

# Keys of these mappings are ids, not field names
_ID_KEYED = {'players', 'column_wrappers', 'bracket_positions'}


def _snake(key: str) -> str:
    return _CAMEL_RE.sub('_', key).lower()


def _convert_keys(value: Any, id_keyed: bool = False) -> Any:
    if isinstance(value, list):
        return [_convert_keys(item) for item in value]
    if not isinstance(value, dict):
        return value
    if id_keyed:
        return {key: _convert_keys(item) for key, item in value.items()}

    converted = {}
    for key, item in value.items():
        name = _snake(key)
        converted[name] = _convert_keys(item, id_keyed=name in _ID_KEYED)
    return converted


def is_form_document(document: dict) -> bool:
    """Whether a document uses the web form's camelCase keys."""
    return 'playerOrder' in document or 'playerCount' in document


def export_snapshot(record: TournamentRecord) -> dict:
    """Plain, JSON-ready form of a record."""
    return record.model_dump(mode='json')


def import_snapshot(document: Any) -> OperationResult:
    """
    Rebuild a record from a snapshot document.

    Returns:
        OperationResult with the TournamentRecord; malformed input for a
        non-object document, validation failure for a broken record
    """
    if not isinstance(document, dict):
        return OperationResult.fail(
            ErrorCategory.MALFORMED_INPUT, f'Snapshot must be a JSON object, got {type(document).__name__}'
        )

    if is_form_document(document):
        document = _convert_keys(document)

    try:
        record = TournamentRecord.model_validate(document)
    except ValidationError as e:
        logger.error(f'Snapshot rejected: {e.error_count()} error(s)')
        return OperationResult.fail(ErrorCategory.VALIDATION_FAILURE, str(e))

    return OperationResult.ok(record)


def save_snapshot(path: Path | str, record: TournamentRecord) -> None:
    """Write a record snapshot to a JSON file."""
    save_json(path, export_snapshot(record))
    logger.info(f'Saved snapshot to {path}')


def load_snapshot(path: Path | str) -> OperationResult:
    """
    Read a snapshot file.

    Returns:
        OperationResult as for import_snapshot; a missing or unreadable
        file is malformed input
    """
    try:
        document = load_json(path)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        return OperationResult.fail(ErrorCategory.MALFORMED_INPUT, str(e))
    except OSError as e:
        return OperationResult.fail(ErrorCategory.MALFORMED_INPUT, f'Could not read {path}: {e}')
    return import_snapshot(document)
