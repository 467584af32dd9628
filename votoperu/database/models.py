# votoperu/database/models.py

from enum import Enum
from uuid import uuid4
from datetime import datetime

from votoperu import db

# Schema mirrors the hosted store: candidates, profiles, user_interactions


class PoliticalCategory(Enum):
    PRESIDENT = "presidente"
    LOWER_CHAMBER = "camara_diputados"
    SENATE_NATIONAL = "camara_senadores_nacional"
    SENATE_REGIONAL = "camara_senadores_regional"
    ANDEAN_PARLIAMENT = "parlamento_andino"

    @property
    def label(self):
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    PoliticalCategory.PRESIDENT: "Presidente",
    PoliticalCategory.LOWER_CHAMBER: "Cámara de Diputados",
    PoliticalCategory.SENATE_NATIONAL: "Senadores Nacional",
    PoliticalCategory.SENATE_REGIONAL: "Senadores Regional",
    PoliticalCategory.ANDEAN_PARLIAMENT: "Parlamento Andino",
}


class PoliticalOrientation(Enum):
    LEFT = "izquierda"
    RIGHT = "derecha"
    CENTER = "centro"


class InteractionType(Enum):
    LIKE = "like"
    DISLIKE = "dislike"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def _new_id():
    return str(uuid4())


class Candidate(db.Model):
    __tablename__ = 'candidates'
    __table_args__ = (
        db.CheckConstraint('age > 0', name='ck_candidates_age_positive'),
    )

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(200), nullable=False)
    photo_url = db.Column(db.String(500), nullable=False)
    party = db.Column(db.String(200), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    orientation = db.Column(
        db.Enum(PoliticalOrientation, name='political_orientation', values_callable=_enum_values),
        nullable=False,
    )
    category = db.Column(
        db.Enum(PoliticalCategory, name='political_category', values_callable=_enum_values),
        nullable=False,
    )
    party_background = db.Column(db.Text, nullable=True)
    proposals_2026 = db.Column(db.Text, nullable=True)
    criminal_record = db.Column(db.Text, nullable=True)
    recent_news = db.Column(db.JSON, nullable=True)
    projects = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    interactions = db.relationship('UserInteraction', back_populates='candidate', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'photo_url': self.photo_url,
            'party': self.party,
            'age': self.age,
            'orientation': self.orientation.value,
            'category': self.category.value,
            'category_label': self.category.label,
        }

    def __repr__(self):
        return f'<Candidate {self.id} {self.name}>'


class Profile(db.Model):
    __tablename__ = 'profiles'
    id = db.Column(db.String(36), primary_key=True)  # same id as the authenticated user
    dni = db.Column(db.String(20), nullable=False)
    full_name = db.Column(db.String(200), nullable=False)
    voting_location = db.Column(db.String(255), nullable=True)
    is_poll_worker = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    interactions = db.relationship('UserInteraction', back_populates='profile', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'dni': self.dni,
            'full_name': self.full_name,
            'voting_location': self.voting_location,
            'is_poll_worker': self.is_poll_worker,
        }


class UserInteraction(db.Model):
    __tablename__ = 'user_interactions'
    # Conflict target for the preference upsert
    __table_args__ = (
        db.UniqueConstraint('user_id', 'candidate_id', name='uq_user_interactions_user_candidate'),
    )

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=False, index=True)
    candidate_id = db.Column(db.String(36), db.ForeignKey('candidates.id'), nullable=False)
    interaction_type = db.Column(db.String(10), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    profile = db.relationship('Profile', back_populates='interactions')
    candidate = db.relationship('Candidate', back_populates='interactions')

    def __repr__(self):
        return f'<UserInteraction {self.interaction_type} {self.candidate_id} by {self.user_id}>'
