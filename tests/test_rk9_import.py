"""Tests for rk9.gg team list and roster imports."""

from unittest.mock import Mock, patch

import pytest
import requests

from tgg.models import ErrorCategory, TeamListData, TeamListPokemon
from tgg.rk9_import import (
    fetch_page,
    import_roster,
    import_team_list,
    parse_rk9_url,
    parse_roster_html,
    parse_team_list_html,
    team_list_to_import_record,
)
from tgg.exceptions import UpstreamError

TEAM_LIST_URL = 'https://rk9.gg/teamlist-go/public/abc123/def456'
ROSTER_URL = 'https://rk9.gg/roster/XYZ789'

TEAM_LIST_HTML = """
<html>
<head><title>Team list for: Jinz - RK9</title></head>
<body>
<h4>  Pokemon GO Regional Championships  </h4>
<h3>Team list for: <b>Jinz</b></h3>
<div class="translation lang-EN">
  <div class="pokemon">Moltres [Galarian Form]<br><b>CP</b> 1500<br>Shadow<br>Fast: Sucker Punch</div>
  <div class="pokemon">Azumarill<br><b>CP</b> 1490<br>Fast: Bubble</div>
  <div class="pokemon">  Medicham   <br><b>CP</b> 1496<br></div>
  <div class="pokemon">Stunfisk [Galar]<br><b>CP</b> 1499<br></div>
  <div class="pokemon">Registeel<br><b>CP</b> 1497<br>Shadow<br></div>
  <div class="pokemon">Lanturn<br><b>CP</b> 1500<br></div>
  <div class="pokemon">Altaria<br><b>CP</b> 1500<br></div>
</div>
<div class="translation lang-FR">
  <div class="pokemon">Sulfura [Forme de Galar]<br><b>PC</b> 1500<br>Obscur<br></div>
</div>
</body>
</html>
"""

ROSTER_HTML = """
<table>
<thead><tr><th>ID</th><th>First name</th><th>Last name</th><th>Country</th><th>Screen name</th></tr></thead>
<tbody>
<tr><td>1</td><td>Ho</td><td>Kassasin</td><td>UK</td><td> hkassasin </td><td><a href="#">View</a></td></tr>
<tr><td>2</td><td>Mario</td><td>  Rossi </td><td>IT</td><td></td><td></td></tr>
<tr><td>3</td><td></td><td>Solo</td><td>US</td><td></td><td></td></tr>
<tr><td>4</td><td>Short</td></tr>
</tbody>
</table>
"""


def make_session(body='', ok=True, status=200, content_type='text/html; charset=utf-8', charset='utf-8'):
    """Mock requests session returning a single response."""
    encoding = charset if 'charset=' in content_type else 'ISO-8859-1'
    response = Mock(ok=ok, status_code=status, encoding=encoding, headers={'Content-Type': content_type})
    response.iter_content.return_value = [body.encode(charset)]
    session = Mock()
    session.get.return_value = response
    return session


class TestUrlValidation:
    """Tests for rk9 URL validation."""

    def test_valid_team_list_url(self):
        token, error = parse_rk9_url(TEAM_LIST_URL)
        assert token == 'abc123/def456'
        assert error is None

    def test_valid_roster_url(self):
        token, error = parse_rk9_url(ROSTER_URL, '/roster/')
        assert token == 'XYZ789'
        assert error is None

    @pytest.mark.parametrize('url,message', [
        ('https://example.com/teamlist-go/public/abc', 'URL must be from rk9.gg'),
        ('https://rk9.gg/roster/abc', 'URL must be a teamlist-go public link'),
        ('https://rk9.gg/teamlist-go/public/', 'Missing token in URL'),
        ('not a url', 'Invalid URL format'),
        ('', 'URL is required'),
    ])
    def test_invalid_team_list_urls(self, url, message):
        token, error = parse_rk9_url(url)
        assert token is None
        assert error == message

    def test_roster_prefix_required(self):
        _token, error = parse_rk9_url(TEAM_LIST_URL, '/roster/')
        assert 'roster link' in error


class TestTeamListParsing:
    """Tests for team list page extraction."""

    def test_player_and_event(self):
        data = parse_team_list_html(TEAM_LIST_HTML)
        assert data.player_name == 'Jinz'
        assert data.event_name == 'Pokemon GO Regional Championships'

    def test_english_section_only_and_capped(self):
        """Test the translated copy is ignored and at most 6 Pokemon are kept."""
        data = parse_team_list_html(TEAM_LIST_HTML)
        assert [p.name for p in data.pokemon] == [
            'Galarian Moltres', 'Azumarill', 'Medicham', 'Galarian Stunfisk', 'Registeel', 'Lanturn',
        ]

    def test_shadow_after_cp_line(self):
        data = parse_team_list_html(TEAM_LIST_HTML)
        assert [p.is_shadow for p in data.pokemon] == [True, False, False, False, True, False]

    def test_localized_shadow_marker(self):
        html = '<div class="pokemon">Sulfura<br><b>PC</b> 1500<br>Obscur<br></div>'
        data = parse_team_list_html(html)
        assert data.player_name == 'Unknown Player'
        assert data.pokemon[0].is_shadow is True

    def test_title_fallback(self):
        html = '<html><head><title>Team list for: Walker - RK9</title></head><body></body></html>'
        data = parse_team_list_html(html)
        assert data.player_name == 'Walker'
        assert data.pokemon == []

    def test_unparseable_page(self):
        assert parse_team_list_html('<html><body><p>Nothing here</p></body></html>') is None
        assert parse_team_list_html('') is None


class TestRosterParsing:
    """Tests for roster page extraction."""

    def test_rows(self):
        players = parse_roster_html(ROSTER_HTML)
        assert len(players) == 2
        assert players[0].screen_name == 'hkassasin'
        assert players[0].country == 'UK'
        assert (players[1].first_name, players[1].last_name) == ('Mario', 'Rossi')

    def test_no_table(self):
        assert parse_roster_html('<p>No roster</p>') == []


class TestFetchPage:
    """Tests for the bounded page fetch."""

    def test_sends_headers_and_timeout(self):
        session = make_session('<html></html>')
        assert fetch_page(TEAM_LIST_URL, session=session) == '<html></html>'

        _args, kwargs = session.get.call_args
        assert 'User-Agent' in kwargs['headers']
        assert kwargs['timeout'] > 0
        session.get.return_value.close.assert_called_once()

    def test_http_error_keeps_status(self):
        with pytest.raises(UpstreamError) as exc_info:
            fetch_page(TEAM_LIST_URL, session=make_session(ok=False, status=404))
        assert exc_info.value.status == 404

    def test_timeout(self):
        session = Mock()
        session.get.side_effect = requests.Timeout('slow')
        with pytest.raises(UpstreamError):
            fetch_page(TEAM_LIST_URL, session=session)

    def test_response_size_limit(self):
        with patch('tgg.rk9_import.get_max_response_bytes', return_value=10):
            with pytest.raises(UpstreamError, match='exceeds'):
                fetch_page(TEAM_LIST_URL, session=make_session('x' * 100))

    def test_undeclared_charset_read_as_utf8(self):
        """Test a UTF-8 page served without a charset is not decoded as ISO-8859-1."""
        html = TEAM_LIST_HTML.replace('<b>Jinz</b>', '<b>José Pérez</b>')
        session = make_session(html, content_type='text/html')
        assert session.get.return_value.encoding == 'ISO-8859-1'

        assert 'José Pérez' in fetch_page(TEAM_LIST_URL, session=session)
        result = import_team_list(TEAM_LIST_URL, session=make_session(html, content_type='text/html'))
        assert result.data.player_name == 'José Pérez'

    def test_declared_charset_used(self):
        session = make_session(
            '<b>José</b>', content_type='text/html; charset=ISO-8859-1', charset='ISO-8859-1',
        )
        assert fetch_page(TEAM_LIST_URL, session=session) == '<b>José</b>'


class TestImportTeamList:
    """Tests for the team list import entry point."""

    def test_success(self):
        result = import_team_list(TEAM_LIST_URL, session=make_session(TEAM_LIST_HTML))
        assert result.success is True
        assert result.data.player_name == 'Jinz'
        assert len(result.data.pokemon) == 6

    def test_invalid_url_makes_no_request(self):
        session = make_session(TEAM_LIST_HTML)
        result = import_team_list('https://example.com/teamlist-go/public/abc', session=session)
        assert result.success is False
        assert result.category == ErrorCategory.INVALID_URL
        session.get.assert_not_called()

    def test_upstream_status(self):
        result = import_team_list(TEAM_LIST_URL, session=make_session(ok=False, status=503))
        assert result.category == ErrorCategory.UPSTREAM_FAILURE
        assert result.status == 503

    def test_unparseable(self):
        result = import_team_list(TEAM_LIST_URL, session=make_session('<p>maintenance</p>'))
        assert result.category == ErrorCategory.UNPARSEABLE_PAGE


class TestImportRoster:
    """Tests for the roster import entry point."""

    def test_success(self):
        result = import_roster(ROSTER_URL, session=make_session(ROSTER_HTML))
        assert result.success is True
        assert len(result.data) == 2

    def test_empty_roster_is_failure(self):
        result = import_roster(ROSTER_URL, session=make_session('<table><tbody></tbody></table>'))
        assert result.success is False
        assert result.error == 'No players found in roster'

    def test_team_list_url_rejected(self):
        result = import_roster(TEAM_LIST_URL, session=make_session(ROSTER_HTML))
        assert result.category == ErrorCategory.INVALID_URL


class TestTeamListToImportRecord:
    """Tests for converting a team list into an import record."""

    def test_conversion(self):
        data = TeamListData(
            player_name='Jinz',
            event_name='Regional',
            pokemon=[
                TeamListPokemon('Galarian Moltres', is_shadow=True),
                TeamListPokemon('Azumarill'),
            ],
        )
        record = team_list_to_import_record(data)
        assert record.name == 'Jinz'
        assert len(record.team) == 6
        assert record.team[0].species_key == 'moltres_galarian'
        assert record.team[0].is_shadow is True
        assert record.team[2].species_key == ''

    def test_unknown_player_name_dropped(self):
        record = team_list_to_import_record(TeamListData('Unknown Player', '', []))
        assert record.name == ''
