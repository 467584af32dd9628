import uuid
import pytest
from unittest.mock import MagicMock, patch
from sqlalchemy.exc import OperationalError

from votoperu import db
from votoperu.database.models import Profile
from votoperu.errors import NotFoundError, PersistenceError
from votoperu.preferences import recorder
from votoperu.profile import aggregator
from votoperu.profile.aggregator import RankedCandidate, Stats


def test_load_profile(profile):
    loaded = aggregator.load_profile(profile.id)
    assert loaded.full_name == 'María Quispe'
    assert loaded.dni == '12345678'


def test_load_profile_missing_is_not_found(app):
    with pytest.raises(NotFoundError):
        aggregator.load_profile(str(uuid.uuid4()))


def test_update_profile_changes_only_editable_fields(profile):
    aggregator.update_profile(profile.id, 'Colegio San José, Lima', True, audit=MagicMock())
    reloaded = aggregator.load_profile(profile.id)
    assert reloaded.voting_location == 'Colegio San José, Lima'
    assert reloaded.is_poll_worker is True
    assert reloaded.full_name == 'María Quispe'
    assert reloaded.dni == '12345678'


def test_update_profile_sanitizes_location(profile):
    aggregator.update_profile(profile.id, '<b>Colegio</b> Central<script>alert(1)</script>', False, audit=MagicMock())
    assert aggregator.load_profile(profile.id).voting_location == 'Colegio Central'


def test_update_profile_blank_location_is_cleared(profile):
    aggregator.update_profile(profile.id, 'Lima', False, audit=MagicMock())
    aggregator.update_profile(profile.id, '   ', False, audit=MagicMock())
    assert aggregator.load_profile(profile.id).voting_location is None


def test_update_profile_store_failure(profile):
    failure = OperationalError("UPDATE profiles", {}, Exception("read-only transaction"))
    with patch("votoperu.profile.aggregator.store.update_profile_fields", side_effect=failure):
        with pytest.raises(PersistenceError) as excinfo:
            aggregator.update_profile(profile.id, 'Cusco', True, audit=MagicMock())
    assert excinfo.value.message == 'Error al actualizar perfil'
    db.session.expire_all()
    assert db.session.get(Profile, profile.id).voting_location is None


def test_update_missing_profile_fails(app):
    with pytest.raises(PersistenceError):
        aggregator.update_profile(str(uuid.uuid4()), 'Cusco', True, audit=MagicMock())


def test_summarize_example_history():
    rows = [
        ('like', 'a1', 'Ana', 'Fuerza'),
        ('like', 'a2', 'Ana', 'Fuerza'),
        ('like', 'b1', 'Bruno', 'Avanza'),
        ('dislike', 'c1', 'Carla', 'Somos'),
    ]
    stats = aggregator.summarize(rows)
    assert (stats.likes, stats.dislikes) == (3, 1)
    assert stats.top_candidates == [
        RankedCandidate('Ana', 'Fuerza', 2),
        RankedCandidate('Bruno', 'Avanza', 1),
    ]


def test_ranking_by_candidate_id_keeps_namesakes_apart():
    rows = [
        ('like', 'a1', 'Ana', 'Fuerza'),
        ('like', 'a2', 'Ana', 'Somos'),
    ]
    ranked = aggregator.rank_likes(rows, group_by='candidate_id')
    assert ranked == [RankedCandidate('Ana', 'Fuerza', 1), RankedCandidate('Ana', 'Somos', 1)]


def test_ranking_ties_keep_first_seen_order_and_limit():
    rows = [('like', f'id{i}', f'Cand {i}', 'P') for i in range(7)]
    rows.append(('like', 'id6', 'Cand 6', 'P'))
    ranked = aggregator.rank_likes(rows)
    assert [c.name for c in ranked] == ['Cand 6', 'Cand 0', 'Cand 1', 'Cand 2', 'Cand 3']


def test_unresolved_candidate_counts_but_is_not_ranked():
    rows = [('like', None, None, None), ('like', 'b1', 'Bruno', 'Avanza')]
    stats = aggregator.summarize(rows)
    assert stats.likes == 2
    assert [c.name for c in stats.top_candidates] == ['Bruno']


def test_unknown_grouping_rejected():
    with pytest.raises(ValueError):
        aggregator.rank_likes([], group_by='party')


def test_load_stats_from_store(profile, make_candidate):
    # Two distinct candidates share the display name "Ana Flores"
    ana_1 = make_candidate('Ana Flores', party='Fuerza')
    ana_2 = make_candidate('Ana Flores', party='Fuerza')
    bruno = make_candidate('Bruno Salas', party='Avanza')
    carla = make_candidate('Carla Mena', party='Somos')
    audit = MagicMock()
    recorder.record(profile.id, ana_1.id, 'like', audit=audit)
    recorder.record(profile.id, ana_2.id, 'like', audit=audit)
    recorder.record(profile.id, bruno.id, 'like', audit=audit)
    recorder.record(profile.id, carla.id, 'dislike', audit=audit)

    stats = aggregator.load_stats(profile.id)
    assert stats.likes == 3
    assert stats.dislikes == 1
    assert stats.top_candidates[0] == RankedCandidate('Ana Flores', 'Fuerza', 2)
    assert stats.top_candidates[1] == RankedCandidate('Bruno Salas', 'Avanza', 1)
    assert stats.loaded is True


def test_load_stats_without_history(profile):
    assert aggregator.load_stats(profile.id) == Stats()


def test_load_stats_failure_returns_zeroes(profile):
    failure = OperationalError("SELECT interaction_type", {}, Exception("timeout"))
    with patch("votoperu.profile.aggregator.store.fetch_interactions_with_candidates", side_effect=failure):
        stats = aggregator.load_stats(profile.id)
    assert stats == Stats(loaded=False)
    assert stats.to_dict() == {'likes': 0, 'dislikes': 0, 'top_candidates': [], 'loaded': False}
