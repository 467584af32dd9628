# votoperu/browser/candidate_browser.py

"""Candidate browsing: load, filter by category, and step through the result.

Apart from load_all() these are pure functions over their inputs. Cursor and
filter state belong to the caller (see BrowsingState).
"""

import logging
from collections import namedtuple
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from sqlalchemy.exc import SQLAlchemyError

from votoperu.database import store
from votoperu.database.models import Candidate, PoliticalCategory
from votoperu.errors import LoadError, from_store_error

logger = logging.getLogger(__name__)

ALL_CATEGORIES = 'all'

# exhausted is True only on the wrap from the last item back to 0
Advance = namedtuple('Advance', ['cursor', 'exhausted'])


def load_all() -> List[Candidate]:
    """Return every candidate ordered by name; raise LoadError on store failure."""
    try:
        return store.fetch_candidates()
    except SQLAlchemyError as e:
        logger.error(f"Error loading candidates: {str(e)}")
        raise from_store_error(e, LoadError, "Error al cargar candidatos") from e


def load_one(candidate_id) -> Optional[Candidate]:
    try:
        return store.get_candidate(candidate_id)
    except SQLAlchemyError as e:
        logger.error(f"Error loading candidate {candidate_id}: {str(e)}")
        raise from_store_error(e, LoadError, "Error al cargar candidato") from e


def parse_category(category: Union[str, PoliticalCategory, None]):
    """Return ALL_CATEGORIES or a PoliticalCategory; raise ValueError otherwise."""
    if category is None or category == ALL_CATEGORIES:
        return ALL_CATEGORIES
    if isinstance(category, PoliticalCategory):
        return category
    try:
        return PoliticalCategory(category)
    except ValueError:
        raise ValueError(f"Unknown category: {category}")


def apply_filter(category, candidates: Sequence[Candidate]) -> Sequence[Candidate]:
    category = parse_category(category)
    if category == ALL_CATEGORIES:
        return candidates
    return [c for c in candidates if c.category == category]


def current_item(filtered: Sequence[Candidate], cursor: int) -> Optional[Candidate]:
    if not filtered or cursor < 0 or cursor >= len(filtered):
        return None
    return filtered[cursor]


def advance(cursor: int, length: int) -> Advance:
    if cursor < length - 1:
        return Advance(cursor + 1, False)
    return Advance(0, True)


def position_label(filtered: Sequence[Candidate], cursor: int) -> str:
    if filtered:
        return f"Candidato {cursor + 1} de {len(filtered)}"
    return "No hay candidatos en esta categoría"


def empty_message(category) -> str:
    if parse_category(category) == ALL_CATEGORIES:
        return "Aún no se han agregado candidatos a la plataforma"
    return "No hay candidatos en esta categoría"


@dataclass
class BrowsingState:
    """Per-session filter and cursor."""

    category: str = ALL_CATEGORIES
    cursor: int = 0

    def select_category(self, category):
        parsed = parse_category(category)
        self.category = parsed if parsed == ALL_CATEGORIES else parsed.value
        self.cursor = 0

    def step(self, length: int) -> bool:
        """Move to the next candidate; True when the category wrapped around."""
        self.cursor, exhausted = advance(self.cursor, length)
        return exhausted

    def to_session(self):
        return {'category': self.category, 'cursor': self.cursor}

    @classmethod
    def from_session(cls, data):
        if not data:
            return cls()
        return cls(category=data.get('category', ALL_CATEGORIES), cursor=int(data.get('cursor', 0)))
