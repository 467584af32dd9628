# votoperu/database/store.py

"""Query and mutation interface to the hosted store.

These helpers issue exactly the statements the application relies on and
let SQLAlchemy errors propagate; the components above translate them into
application error kinds.
"""

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite

from votoperu import db
from votoperu.database.models import Candidate, Profile, UserInteraction

# Dialects with native INSERT ... ON CONFLICT DO UPDATE
UPSERT_DIALECTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}

CONFLICT_TARGET = ['user_id', 'candidate_id']


def fetch_candidates():
    """SELECT * FROM candidates ORDER BY name ASC"""
    return list(db.session.scalars(select(Candidate).order_by(Candidate.name.asc())))


def get_candidate(candidate_id):
    return db.session.get(Candidate, candidate_id)


def fetch_profile(user_id):
    """SELECT * FROM profiles WHERE id = :user_id, or None."""
    return db.session.scalars(select(Profile).where(Profile.id == user_id)).one_or_none()


def profile_exists(user_id):
    return db.session.scalar(select(Profile.id).where(Profile.id == user_id)) is not None


def candidate_exists(candidate_id):
    return db.session.scalar(select(Candidate.id).where(Candidate.id == candidate_id)) is not None


def upsert_interaction(user_id, candidate_id, interaction_type):
    """Insert or overwrite the single interaction row for (user_id, candidate_id)."""
    table = UserInteraction.__table__
    insert = UPSERT_DIALECTS.get(db.engine.dialect.name)
    try:
        if insert is not None:
            stmt = insert(table).values(
                user_id=user_id,
                candidate_id=candidate_id,
                interaction_type=interaction_type,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=CONFLICT_TARGET,
                set_={'interaction_type': stmt.excluded.interaction_type},
            )
            db.session.execute(stmt)
        else:
            existing = db.session.scalars(
                select(UserInteraction)
                .where(UserInteraction.user_id == user_id, UserInteraction.candidate_id == candidate_id)
                .with_for_update()
            ).one_or_none()
            if existing is None:
                db.session.add(UserInteraction(
                    user_id=user_id, candidate_id=candidate_id, interaction_type=interaction_type,
                ))
            else:
                existing.interaction_type = interaction_type
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def update_profile_fields(user_id, voting_location, is_poll_worker):
    """UPDATE profiles SET voting_location, is_poll_worker WHERE id = :user_id

    Returns the number of rows touched.
    """
    try:
        result = db.session.execute(
            update(Profile)
            .where(Profile.id == user_id)
            .values(voting_location=voting_location, is_poll_worker=is_poll_worker)
            .execution_options(synchronize_session=False)
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    # Drop cached instances so the next read sees the stored row
    db.session.expire_all()
    return result.rowcount


def fetch_interactions_with_candidates(user_id):
    """SELECT interaction_type, candidates(id, name, party) FROM user_interactions WHERE user_id = :user_id

    Candidate columns are None when the referenced row cannot be resolved.
    """
    stmt = (
        select(
            UserInteraction.interaction_type,
            Candidate.id,
            Candidate.name,
            Candidate.party,
        )
        .select_from(UserInteraction)
        .outerjoin(Candidate, Candidate.id == UserInteraction.candidate_id)
        .where(UserInteraction.user_id == user_id)
        .order_by(UserInteraction.created_at.asc(), UserInteraction.id.asc())
    )
    return [tuple(row) for row in db.session.execute(stmt)]


def ping():
    db.session.execute(select(1))


def dialect_name():
    return db.engine.dialect.name
