"""Tabular team imports (CSV text and Excel exports).

Each format preset declares where the name, country, group and species
columns sit. The header row is used to locate the columns when it carries
the expected labels; otherwise the preset positions apply.
"""

import csv
import io
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from .constants import BRACKET_GROUPS, COUNTRY_CODE_NORMALIZE, COUNTRY_TO_ISO, TEAM_SIZE
from .models import ImportRecord, ImportResult, TeamSlot
from .normalizer import normalize_species_name

logger = logging.getLogger('tgg.csv_import')


@dataclass(frozen=True)
class ImportFormatConfig:
    """Column layout of a tabular export."""
    id: str
    name: str
    description: str
    example_header: str
    example_row: str
    name_column: int
    first_pokemon_column: int
    country_column: Optional[int] = None
    group_column: Optional[int] = None


IMPORT_FORMATS = {
    'anicor': ImportFormatConfig(
        id='anicor',
        name='Anicor Spreadsheet',
        description='Group, Country, Name, Pokemon 1-6 columns',
        example_header='Group,Country,Name,Pokemon 1,Pokemon 2,Pokemon 3,Pokemon 4,Pokemon 5,Pokemon 6',
        example_row=(
            'A-WF1,Argentina,MartoGalde,Azumarill,Corsola (Galarian),Corviknight,'
            'Scizor (Shadow),Guzzlord,Marowak (Shadow)'
        ),
        name_column=2,
        first_pokemon_column=3,
        country_column=1,
    ),
    'bracket_groups': ImportFormatConfig(
        id='bracket_groups',
        name='Bracket Groups',
        description='Group ("A Winner" / "H Loser"), Name, Pokemon 1-6 columns',
        example_header='Group,Name,Pokemon 1,Pokemon 2,Pokemon 3,Pokemon 4,Pokemon 5,Pokemon 6',
        example_row='A Winner,Jinz,Altaria (Shadow),Stunfisk (Galarian),Medicham,Azumarill,Lanturn,Registeel',
        name_column=1,
        first_pokemon_column=2,
        group_column=0,
    ),
}


def get_format_config(format_id: str) -> Optional[ImportFormatConfig]:
    """Look up a format preset by id."""
    return IMPORT_FORMATS.get(format_id)


def map_country_to_iso(country: str) -> str:
    """
    Map a country name or code to an ISO alpha-2 code.

    Examples:
        "Argentina" -> "AR"
        "uk" -> "GB"
        "Atlantis" -> ""
    """
    value = ' '.join((country or '').split())
    if not value:
        return ''
    if len(value) == 2 and value.isalpha():
        code = value.upper()
        return COUNTRY_CODE_NORMALIZE.get(code, code)
    return COUNTRY_TO_ISO.get(value.lower(), '')


def parse_bracket_group(value: str) -> tuple[Optional[str], Optional[str]]:
    """
    Parse a bracket group cell into (group, side).

    Examples:
        "A Winner" -> ("A", "Winners")
        "H Loser" -> ("H", "Losers")
        "c lower" -> ("C", "Losers")
    """
    parts = (value or '').split()
    if not parts:
        return None, None

    group = parts[0].upper()
    if group not in BRACKET_GROUPS:
        group = None
    side_raw = parts[1].lower() if len(parts) > 1 else ''
    side = 'Winners' if 'winner' in side_raw else 'Losers'
    return group, side


def _find_columns(header: list[str], config: ImportFormatConfig) -> dict[str, Optional[int]]:
    labels = [' '.join(h.lower().split()) for h in header]

    def locate(label: str, default: Optional[int]) -> Optional[int]:
        if default is None:
            return None
        return labels.index(label) if label in labels else default

    return {
        'name': locate('name', config.name_column),
        'pokemon': locate('pokemon 1', config.first_pokemon_column),
        'country': locate('country', config.country_column),
        'group': locate('group', config.group_column),
    }


def _cell(row: list[str], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ''
    return ' '.join(row[index].split())


def _parse_rows(rows: Iterable[tuple[int, list[str]]], config: ImportFormatConfig) -> ImportResult:
    result = ImportResult()
    rows = [(line, row) for line, row in rows if any(cell.strip() for cell in row)]

    if len(rows) < 2:
        result.errors.append('CSV must have at least a header row and one data row')
        return result

    columns = _find_columns(rows[0][1], config)
    required = max(columns['name'], columns['pokemon'])

    for line, row in rows[1:]:
        if len(row) <= required:
            result.errors.append(f'Row {line}: Missing required columns')
            continue

        name = _cell(row, columns['name'])
        if not name:
            result.errors.append(f'Row {line}: Missing player name')
            continue

        team = []
        for offset in range(TEAM_SIZE):
            normalized = normalize_species_name(_cell(row, columns['pokemon'] + offset))
            team.append(TeamSlot(species_key=normalized.species_key, is_shadow=normalized.is_shadow))

        country = map_country_to_iso(_cell(row, columns['country']))
        record = ImportRecord(name=name, flags=[country] if country else [], team=team)

        if columns['group'] is not None:
            record.group, record.bracket_side = parse_bracket_group(_cell(row, columns['group']))

        result.records.append(record)

    logger.info(f'Parsed {len(result.records)} players ({len(result.errors)} rows rejected)')
    return result


def parse_teams_csv(text: str, format_id: str = 'anicor') -> ImportResult:
    """
    Parse CSV text with the given format preset.

    Comma delimited, quoted fields allowed, header row ignored, blank lines
    skipped. A row is rejected only when a required column is missing or the
    player name is blank.

    Args:
        text: CSV content
        format_id: Key of IMPORT_FORMATS

    Returns:
        ImportResult with the accepted records and one error per rejected row
    """
    config = get_format_config(format_id)
    if config is None:
        return ImportResult(errors=[f'Unknown format: {format_id}'])
    if not isinstance(text, str):
        return ImportResult(errors=['CSV input must be text'])

    reader = csv.reader(io.StringIO(text.strip()), skipinitialspace=True)
    try:
        rows = [(reader.line_num, row) for row in reader]
    except csv.Error as e:
        return ImportResult(errors=[f'Could not read CSV: {e}'])

    return _parse_rows(rows, config)


def parse_teams_xlsx(filepath: Path | str, format_id: str = 'anicor', sheet_name: Optional[str] = None) -> ImportResult:
    """
    Parse the first (or named) sheet of an Excel export with a format preset.

    Same row rules as parse_teams_csv; empty cells read as blank text.
    """
    config = get_format_config(format_id)
    if config is None:
        return ImportResult(errors=[f'Unknown format: {format_id}'])

    try:
        wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        return ImportResult(errors=[f'Could not open workbook {filepath}: {e}'])

    try:
        if sheet_name is not None and sheet_name not in wb.sheetnames:
            return ImportResult(errors=[f'Sheet not found: {sheet_name}'])
        ws = wb[sheet_name] if sheet_name else wb.active

        rows = []
        for line, values in enumerate(ws.iter_rows(values_only=True), start=1):
            rows.append((line, ['' if v is None else str(v) for v in values]))
    finally:
        wb.close()

    return _parse_rows(rows, config)
