import pytest
from types import SimpleNamespace
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from votoperu.browser import candidate_browser as browser
from votoperu.browser.candidate_browser import Advance, BrowsingState
from votoperu.database.models import PoliticalCategory
from votoperu.errors import LoadError


def _c(name, category):
    return SimpleNamespace(name=name, category=category)


@pytest.fixture
def candidates():
    return [
        _c('Ana', PoliticalCategory.PRESIDENT),
        _c('Bruno', PoliticalCategory.LOWER_CHAMBER),
        _c('Carla', PoliticalCategory.PRESIDENT),
        _c('Diego', PoliticalCategory.ANDEAN_PARLIAMENT),
    ]


def test_filter_all_is_identity(candidates):
    assert browser.apply_filter('all', candidates) is candidates
    assert browser.apply_filter('all', []) == []


def test_filter_keeps_relative_order(candidates):
    filtered = browser.apply_filter('presidente', candidates)
    assert [c.name for c in filtered] == ['Ana', 'Carla']
    assert browser.apply_filter(PoliticalCategory.PRESIDENT, candidates) == filtered


def test_filter_without_matches(candidates):
    assert browser.apply_filter(PoliticalCategory.SENATE_REGIONAL, candidates) == []


def test_filter_rejects_unknown_category(candidates):
    with pytest.raises(ValueError):
        browser.apply_filter('alcalde', candidates)


def test_current_item(candidates):
    assert browser.current_item(candidates, 2).name == 'Carla'
    assert browser.current_item([], 0) is None
    assert browser.current_item(candidates, 9) is None


@pytest.mark.parametrize("cursor,length,expected", [
    (0, 3, Advance(1, False)),
    (1, 3, Advance(2, False)),
    (2, 3, Advance(0, True)),
    (0, 1, Advance(0, True)),
])
def test_advance_wraps_only_at_last_item(cursor, length, expected):
    assert browser.advance(cursor, length) == expected


def test_changing_filter_resets_cursor():
    state = BrowsingState(category='all', cursor=3)
    state.select_category('camara_diputados')
    assert state.cursor == 0
    assert state.category == 'camara_diputados'

    state.cursor = 2
    state.select_category('all')
    assert state.cursor == 0


def test_invalid_filter_leaves_state_untouched():
    state = BrowsingState(category='presidente', cursor=1)
    with pytest.raises(ValueError):
        state.select_category('alcalde')
    assert state == BrowsingState(category='presidente', cursor=1)


def test_state_session_roundtrip():
    state = BrowsingState(category='parlamento_andino', cursor=4)
    assert BrowsingState.from_session(state.to_session()) == state
    assert BrowsingState.from_session(None) == BrowsingState()


def test_position_and_empty_messages(candidates):
    assert browser.position_label(candidates, 0) == 'Candidato 1 de 4'
    assert browser.position_label([], 0) == 'No hay candidatos en esta categoría'
    assert browser.empty_message('all') == 'Aún no se han agregado candidatos a la plataforma'
    assert browser.empty_message('presidente') == 'No hay candidatos en esta categoría'


def test_load_all_orders_by_name(make_candidate):
    make_candidate('Zoila Rojas')
    make_candidate('Alberto Soto')
    make_candidate('Mariela Paz')
    assert [c.name for c in browser.load_all()] == ['Alberto Soto', 'Mariela Paz', 'Zoila Rojas']


def test_load_all_empty_table(app):
    loaded = browser.load_all()
    assert loaded == []
    assert browser.current_item(browser.apply_filter('all', loaded), 0) is None


def test_load_all_failure_raises_load_error(app):
    failure = OperationalError("SELECT * FROM candidates", {}, Exception("connection refused"))
    with patch("votoperu.browser.candidate_browser.store.fetch_candidates", side_effect=failure):
        with pytest.raises(LoadError) as excinfo:
            browser.load_all()
    assert excinfo.value.message == 'Error al cargar candidatos'
