"""Team list and roster imports from rk9.gg pages.

Extraction is best effort: the pages have no schema contract, so anything
that cannot be located is reported as an unparseable page rather than
guessed at.

Team list page:
    <h3>Team list for: <b>PlayerName</b></h3>
    <div class="translation lang-EN"> ... <div class="pokemon">
        Moltres [Galarian Form]<br><b>CP</b> 1500<br>Shadow<br>...
    </div>

Roster page:
    <tbody><tr><td>ID</td><td>First</td><td>Last</td><td>Country</td>
    <td>Screen name</td><td>Team list</td></tr>...</tbody>
"""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup, UnicodeDammit

from .config import get_max_response_bytes, get_request_timeout, get_user_agent
from .constants import (
    CP_LABELS,
    REGION_SYNONYMS,
    RK9_ACCEPT,
    RK9_HOST,
    RK9_ROSTER_PREFIX,
    RK9_TEAMLIST_PREFIX,
    SHADOW_MARKERS,
    TEAM_SIZE,
)
from .exceptions import UpstreamError
from .models import (
    ErrorCategory,
    ImportRecord,
    OperationResult,
    RosterPlayer,
    TeamListData,
    TeamListPokemon,
    TeamSlot,
)
from .normalizer import display_name, normalize_species_name

logger = logging.getLogger('tgg.rk9_import')

_TEAM_LIST_FOR_RE = re.compile(r'Team\s+list\s+for:\s*$', re.IGNORECASE)
_TITLE_RE = re.compile(r'Team\s+list\s+for:\s*([^<-]+)', re.IGNORECASE)
_CP_LINE_RE = re.compile(r'^([^\W\d_]+)\s*\d+$')

UNKNOWN_PLAYER = 'Unknown Player'


def parse_rk9_url(url: str, prefix: str = RK9_TEAMLIST_PREFIX) -> tuple[Optional[str], Optional[str]]:
    """
    Validate an rk9.gg URL and extract the token after the path prefix.

    Examples:
        "https://rk9.gg/teamlist-go/public/abc" -> ("abc", None)
        "https://example.com/x" -> (None, "URL must be from rk9.gg")

    Returns:
        (token, None) for a valid URL, (None, error message) otherwise
    """
    if not isinstance(url, str) or not url.strip():
        return None, 'URL is required'

    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        return None, 'Invalid URL format'
    if parsed.hostname != RK9_HOST:
        return None, f'URL must be from {RK9_HOST}'
    if not parsed.path.startswith(prefix):
        if prefix == RK9_ROSTER_PREFIX:
            return None, 'URL must be a roster link (e.g., rk9.gg/roster/...)'
        return None, 'URL must be a teamlist-go public link'

    token = parsed.path[len(prefix):].strip('/')
    if not token:
        return None, 'Missing token in URL'
    return token, None


def fetch_page(url: str, session: Optional[requests.Session] = None) -> str:
    """
    Fetch an HTML page once, reading at most the configured byte limit.

    The body is decoded with the Content-Type charset when one is declared,
    else the page's <meta> charset, else UTF-8.

    Raises:
        UpstreamError: On network errors, non-2xx status or an oversized body
    """
    http = session or requests
    limit = get_max_response_bytes()
    logger.info(f'Fetching {url}')

    try:
        response = http.get(
            url,
            headers={'User-Agent': get_user_agent(), 'Accept': RK9_ACCEPT},
            timeout=get_request_timeout(),
            stream=True,
        )
    except requests.Timeout as e:
        logger.error(f'Timed out fetching {url}')
        raise UpstreamError(f'Timed out fetching page: {e}') from e
    except requests.RequestException as e:
        logger.error(f'Failed to fetch {url}: {e}')
        raise UpstreamError(f'Failed to fetch page: {e}') from e

    try:
        if not response.ok:
            logger.error(f'Failed to fetch {url}: {response.status_code}')
            raise UpstreamError(f'Failed to fetch page: {response.status_code}', status=response.status_code)

        body = bytearray()
        for chunk in response.iter_content(chunk_size=65536):
            body.extend(chunk)
            if len(body) > limit:
                raise UpstreamError(f'Response exceeds {limit} bytes')
    except requests.RequestException as e:
        raise UpstreamError(f'Failed to read page: {e}') from e
    finally:
        response.close()

    return _decode_body(bytes(body), response)


def _decode_body(body: bytes, response) -> str:
    # Header charset if declared (requests reports ISO-8859-1 when it is not),
    # else the <meta> charset, else UTF-8
    content_type = response.headers.get('Content-Type', '').lower()
    declared = [response.encoding] if response.encoding and 'charset=' in content_type else []
    dammit = UnicodeDammit(body, known_definite_encodings=declared, user_encodings=['utf-8'], is_html=True)
    if dammit.unicode_markup is None:
        return body.decode('utf-8', errors='replace')
    return dammit.unicode_markup


def _block_lines(block) -> list[str]:
    for br in block.find_all('br'):
        br.replace_with('\n')
    return [line for line in (' '.join(part.split()) for part in block.get_text().split('\n')) if line]


def _is_shadow_block(lines: list[str]) -> bool:
    for index, line in enumerate(lines[:-1]):
        match = _CP_LINE_RE.match(line)
        if match and match.group(1).lower() in CP_LABELS:
            return lines[index + 1].split()[0].lower() in SHADOW_MARKERS
    return False


def _pokemon_name(name_line: str) -> str:
    # "Moltres [Galarian Form]" -> "Galarian Moltres"; other forms kept as "Base (Form)"
    normalized = normalize_species_name(name_line)
    if not normalized.form:
        return normalized.base_name
    if normalized.form in REGION_SYNONYMS.values():
        return f'{normalized.form.capitalize()} {normalized.base_name}'
    return display_name(normalized.base_name, normalized.form)


def _player_name(soup: BeautifulSoup) -> str:
    for bold in soup.find_all('b'):
        previous = bold.previous_sibling
        if isinstance(previous, str) and _TEAM_LIST_FOR_RE.search(previous):
            name = bold.get_text(strip=True)
            if name:
                return name

    if soup.title and soup.title.string:
        match = _TITLE_RE.search(soup.title.string)
        if match:
            return match.group(1).strip()
    return ''


def parse_team_list_html(html: str) -> Optional[TeamListData]:
    """
    Extract the player, event and up to six Pokemon from a team list page.

    Only the English translation section is read when the page has one.

    Returns:
        TeamListData, or None when neither a player name nor any Pokemon
        could be found
    """
    soup = BeautifulSoup(html or '', 'html.parser')

    player_name = _player_name(soup)
    heading = soup.find('h4')
    event_name = heading.get_text(' ', strip=True) if heading else ''

    section = soup.select_one('div.translation.lang-EN') or soup

    pokemon = []
    for block in section.select('div.pokemon'):
        if len(pokemon) >= TEAM_SIZE:
            break

        lines = _block_lines(block)
        if not lines or not lines[0][:1].isalpha():
            logger.debug('Skipping Pokemon block without a name line')
            continue

        name = _pokemon_name(lines[0])
        if not name:
            continue
        pokemon.append(TeamListPokemon(name=name, is_shadow=_is_shadow_block(lines)))

    if not player_name and not pokemon:
        return None

    return TeamListData(player_name=player_name or UNKNOWN_PLAYER, event_name=event_name, pokemon=pokemon)


def parse_roster_html(html: str) -> list[RosterPlayer]:
    """
    Extract the players of a roster page (one per table body row).

    A row is kept when it has a screen name or both first and last names.
    """
    soup = BeautifulSoup(html or '', 'html.parser')
    players = []

    for row in soup.select('tbody tr'):
        cells = [' '.join(td.get_text(' ', strip=True).split()) for td in row.find_all('td')]
        if len(cells) < 5:
            continue

        first_name, last_name, country, screen_name = cells[1], cells[2], cells[3], cells[4]
        if screen_name or (first_name and last_name):
            players.append(RosterPlayer(
                first_name=first_name,
                last_name=last_name,
                screen_name=screen_name,
                country=country,
            ))

    return players


def import_team_list(url: str, session: Optional[requests.Session] = None) -> OperationResult:
    """
    Import a team list page.

    Returns:
        OperationResult with TeamListData, or a failure categorized as
        invalid URL, upstream failure (with status) or unparseable page
    """
    _token, error = parse_rk9_url(url, RK9_TEAMLIST_PREFIX)
    if error:
        return OperationResult.fail(ErrorCategory.INVALID_URL, error)

    try:
        html = fetch_page(url, session=session)
    except UpstreamError as e:
        return OperationResult.fail(ErrorCategory.UPSTREAM_FAILURE, str(e), status=e.status)

    data = parse_team_list_html(html)
    if data is None:
        return OperationResult.fail(ErrorCategory.UNPARSEABLE_PAGE, 'Could not parse team data from page')

    logger.info(f'Imported team list for {data.player_name} ({len(data.pokemon)} Pokemon)')
    return OperationResult.ok(data)


def import_roster(url: str, session: Optional[requests.Session] = None) -> OperationResult:
    """
    Import a roster page.

    Returns:
        OperationResult with a list of RosterPlayer; an empty roster is a
        failure
    """
    _token, error = parse_rk9_url(url, RK9_ROSTER_PREFIX)
    if error:
        return OperationResult.fail(ErrorCategory.INVALID_URL, error)

    try:
        html = fetch_page(url, session=session)
    except UpstreamError as e:
        return OperationResult.fail(ErrorCategory.UPSTREAM_FAILURE, str(e), status=e.status)

    players = parse_roster_html(html)
    if not players:
        return OperationResult.fail(ErrorCategory.UNPARSEABLE_PAGE, 'No players found in roster')

    logger.info(f'Imported roster with {len(players)} players')
    return OperationResult.ok(players)


def team_list_to_import_record(data: TeamListData) -> ImportRecord:
    """Turn a parsed team list into an import record with six slots."""
    team = []
    for pokemon in data.pokemon[:TEAM_SIZE]:
        normalized = normalize_species_name(pokemon.name)
        team.append(TeamSlot(
            species_key=normalized.species_key,
            is_shadow=pokemon.is_shadow or normalized.is_shadow,
        ))

    while len(team) < TEAM_SIZE:
        team.append(TeamSlot())

    name = '' if data.player_name == UNKNOWN_PLAYER else data.player_name
    return ImportRecord(name=name, team=team)
