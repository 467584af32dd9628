import os

# The app reads its settings at import time
os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('RATELIMIT_ENABLED', 'false')

import uuid
import pytest
from flask_jwt_extended import create_access_token

from votoperu import app as flask_app, db
from votoperu.database.models import Candidate, Profile, PoliticalCategory, PoliticalOrientation


@pytest.fixture
def app(tmp_path):
    flask_app.config['TESTING'] = True
    flask_app.config['AUDIT_LOG_DIR'] = str(tmp_path / 'logs')
    flask_app.extensions.pop('votoperu_audit', None)
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()
    flask_app.extensions.pop('votoperu_audit', None)


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def make_candidate(app):
    def _make(name, category=PoliticalCategory.PRESIDENT, party='Partido Demo', **extra):
        candidate = Candidate(
            id=str(uuid.uuid4()),
            name=name,
            photo_url=f'https://example.org/{name.lower().replace(" ", "-")}.jpg',
            party=party,
            age=extra.pop('age', 50),
            orientation=extra.pop('orientation', PoliticalOrientation.CENTER),
            category=category,
            **extra,
        )
        db.session.add(candidate)
        db.session.commit()
        return candidate
    return _make


@pytest.fixture
def profile(app):
    voter = Profile(
        id=str(uuid.uuid4()),
        dni='12345678',
        full_name='María Quispe',
        voting_location=None,
        is_poll_worker=False,
    )
    db.session.add(voter)
    db.session.commit()
    return voter


@pytest.fixture
def auth_headers(app, profile):
    token = create_access_token(identity=profile.id)
    return {'Authorization': f'Bearer {token}'}
