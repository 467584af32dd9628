# votoperu/preferences/recorder.py

"""Like/dislike recording.

At most one preference row exists per (user, candidate): the write is an
upsert on that pair, so repeating or replaying calls leaves exactly the last
kind stored. Retries are therefore always safe.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from votoperu import notifications
from votoperu.audit.audit_logger import get_audit_logger
from votoperu.database import store
from votoperu.database.models import InteractionType
from votoperu.errors import PersistenceError, from_store_error
from votoperu.security.input_validator import InputValidator

logger = logging.getLogger(__name__)
validator = InputValidator()

SUCCESS_MESSAGES = {
    InteractionType.LIKE: '¡Te gusta este candidato!',
    InteractionType.DISLIKE: 'Candidato descartado',
}
FAILURE_MESSAGE = 'Error al guardar interacción'


def record(user_id, candidate_id, kind, audit=None):
    """Store `kind` for (user_id, candidate_id) and return the success notification.

    Raises ValueError for a kind outside like/dislike and PersistenceError
    when the write does not complete or a referenced row is missing.
    """
    kind = validator.parse_interaction_type(kind)
    audit = audit or get_audit_logger()

    try:
        if not store.profile_exists(user_id):
            raise PersistenceError(f"Unknown profile {user_id}", message=FAILURE_MESSAGE)
        if not store.candidate_exists(candidate_id):
            raise PersistenceError(f"Unknown candidate {candidate_id}", message=FAILURE_MESSAGE)
        store.upsert_interaction(user_id, candidate_id, kind.value)
    except SQLAlchemyError as e:
        logger.error(f"Error saving interaction for {user_id}/{candidate_id}: {str(e)}")
        audit.log_event('interaction_failed', {'candidate_id': candidate_id, 'kind': kind.value}, user_id)
        raise from_store_error(e, PersistenceError, FAILURE_MESSAGE) from e
    except PersistenceError:
        audit.log_event('interaction_failed', {'candidate_id': candidate_id, 'kind': kind.value}, user_id)
        raise

    audit.log_event('interaction_recorded', {'candidate_id': candidate_id, 'kind': kind.value}, user_id)
    return notifications.success(SUCCESS_MESSAGES[kind])
