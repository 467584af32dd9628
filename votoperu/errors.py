# votoperu/errors.py

"""Error kinds raised at the component boundaries.

Every store-layer failure is converted into one of these before it leaves a
component, so callers never have to know about SQLAlchemy.

- LoadError: a read did not complete
- PersistenceError: a write/upsert did not complete or violated a constraint
- NotFoundError: an expected singleton row is missing
- StoreTimeoutError: the store did not answer in time
- StaleSelectionError: a decision targets a candidate that is not the one on screen
"""

from sqlalchemy.exc import TimeoutError as PoolTimeoutError


class VotoPeruError(Exception):
    """Base class for all application errors."""

    message = 'Error inesperado'

    def __init__(self, detail=None, message=None):
        super().__init__(detail or message or self.message)
        self.detail = detail
        if message:
            self.message = message


class LoadError(VotoPeruError):
    message = 'Error al cargar datos'


class PersistenceError(VotoPeruError):
    message = 'Error al guardar los cambios'


class NotFoundError(VotoPeruError):
    message = 'No se encontró el registro'


class StoreTimeoutError(VotoPeruError, TimeoutError):
    message = 'El servidor tardó demasiado en responder'


class StaleSelectionError(VotoPeruError):
    message = 'El candidato mostrado ha cambiado'


def from_store_error(exc, kind, message=None):
    """Map a SQLAlchemy failure onto an application error of the given kind."""
    if isinstance(exc, PoolTimeoutError):
        return StoreTimeoutError(str(exc))
    return kind(str(exc), message=message)
