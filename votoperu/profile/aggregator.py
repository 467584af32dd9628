# votoperu/profile/aggregator.py

"""Voter profile access and personal interaction statistics.

Statistics are reduced in-process from the raw interaction rows; the store
is never asked to aggregate.
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from votoperu.audit.audit_logger import get_audit_logger
from votoperu.database import store
from votoperu.database.models import InteractionType
from votoperu.errors import LoadError, NotFoundError, PersistenceError, from_store_error
from votoperu.security.input_validator import InputValidator

logger = logging.getLogger(__name__)
validator = InputValidator()

TOP_N = 5
GROUP_KEYS = ('name', 'candidate_id')
LOAD_FAILED = 'Error al cargar perfil'
UPDATE_FAILED = 'Error al actualizar perfil'


@dataclass
class RankedCandidate:
    name: str
    party: str
    count: int


@dataclass
class Stats:
    likes: int = 0
    dislikes: int = 0
    top_candidates: List[RankedCandidate] = field(default_factory=list)
    # False when the history could not be fetched and the zeros are a fallback
    loaded: bool = True

    def to_dict(self):
        return {
            'likes': self.likes,
            'dislikes': self.dislikes,
            'top_candidates': [asdict(c) for c in self.top_candidates],
            'loaded': self.loaded,
        }


def load_profile(user_id):
    try:
        profile = store.fetch_profile(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Error loading profile {user_id}: {str(e)}")
        raise from_store_error(e, LoadError, LOAD_FAILED) from e
    if profile is None:
        raise NotFoundError(f"No profile for user {user_id}", message=LOAD_FAILED)
    return profile


def update_profile(user_id, voting_location, is_poll_worker, audit=None):
    """Write the two user-editable fields. Raises PersistenceError on failure."""
    audit = audit or get_audit_logger()
    if voting_location is not None:
        voting_location = validator.sanitize_string(voting_location) or None
    is_poll_worker = validator.parse_bool(is_poll_worker)

    try:
        touched = store.update_profile_fields(user_id, voting_location, is_poll_worker)
    except SQLAlchemyError as e:
        logger.error(f"Error updating profile {user_id}: {str(e)}")
        audit.log_event('profile_update_failed', {'error': type(e).__name__}, user_id)
        raise from_store_error(e, PersistenceError, UPDATE_FAILED) from e

    if not touched:
        audit.log_event('profile_update_failed', {'error': 'no_row'}, user_id)
        raise PersistenceError(f"No profile row updated for {user_id}", message=UPDATE_FAILED)

    audit.log_event('profile_updated', {
        'voting_location_set': voting_location is not None,
        'is_poll_worker': is_poll_worker,
    }, user_id)


def rank_likes(rows, limit=TOP_N, group_by='name'):
    """Group like-rows and return the `limit` largest groups.

    rows are (interaction_type, candidate_id, name, party) tuples. Rows whose
    candidate could not be resolved are skipped. Ties keep first-seen order.
    """
    if group_by not in GROUP_KEYS:
        raise ValueError(f"Unsupported grouping: {group_by}")

    groups = {}
    for kind, candidate_id, name, party in rows:
        if kind != InteractionType.LIKE.value or candidate_id is None:
            continue
        key = name if group_by == 'name' else candidate_id
        if key not in groups:
            groups[key] = RankedCandidate(name=name, party=party, count=0)
        groups[key].count += 1

    ranked = sorted(groups.values(), key=lambda c: c.count, reverse=True)
    return ranked[:limit]


def summarize(rows, limit=TOP_N, group_by='name'):
    rows = list(rows)
    likes = sum(1 for row in rows if row[0] == InteractionType.LIKE.value)
    dislikes = sum(1 for row in rows if row[0] == InteractionType.DISLIKE.value)
    return Stats(likes=likes, dislikes=dislikes, top_candidates=rank_likes(rows, limit, group_by))


def load_stats(user_id, limit=TOP_N, group_by='name'):
    """Likes, dislikes and top liked candidates for user_id.

    A failed fetch is logged and yields zeroed Stats with loaded=False.
    """
    try:
        rows = store.fetch_interactions_with_candidates(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Error loading stats for {user_id}: {str(e)}")
        return Stats(loaded=False)
    return summarize(rows, limit, group_by)
