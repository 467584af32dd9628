# votoperu/profile/edit_flow.py

from enum import Enum


class EditState(Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class InvalidTransition(Exception):
    pass


class ProfileEditFlow:
    """Viewing <-> Editing state for the personal information card.

    save() only returns to Viewing after the update succeeded and the
    profile was reloaded; a failed save stays in Editing.
    """

    def __init__(self, state=EditState.VIEWING, draft=None):
        self.state = EditState(state)
        self.draft = draft

    def edit(self, profile):
        self._require(EditState.EDITING, 'edit', current=EditState.VIEWING)
        self.state = EditState.EDITING
        self.draft = {
            'voting_location': profile.voting_location or '',
            'is_poll_worker': profile.is_poll_worker,
        }
        return self.draft

    def cancel(self):
        self._require(EditState.VIEWING, 'cancel', current=EditState.EDITING)
        self.state = EditState.VIEWING
        self.draft = None

    def save(self, user_id, changes, update, reload):
        """Run update(user_id, **fields) then reload(user_id); return the reloaded profile."""
        self._require(EditState.VIEWING, 'save', current=EditState.EDITING)
        self.draft = {**(self.draft or {}), **changes}
        # Errors from update propagate with the flow still in Editing
        update(user_id, self.draft.get('voting_location'), self.draft.get('is_poll_worker', False))
        profile = reload(user_id)
        self.state = EditState.VIEWING
        self.draft = None
        return profile

    def _require(self, target, action, current):
        if self.state != current:
            raise InvalidTransition(f"Cannot {action} from {self.state.value} to {target.value}")

    def to_session(self):
        return {'state': self.state.value, 'draft': self.draft}

    @classmethod
    def from_session(cls, data):
        if not data:
            return cls()
        return cls(state=data.get('state', EditState.VIEWING.value), draft=data.get('draft'))
