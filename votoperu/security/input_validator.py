# votoperu/security/input_validator.py

import re
import html
import bleach
from uuid import UUID

from votoperu.database.models import InteractionType

# Validation at the API boundary. The store only enforces uniqueness of
# (user, candidate) preferences, so closed enumerations are checked here.


class InputValidator:
    def __init__(self):
        self.patterns = {
            'xss_script': re.compile(r'<script[^>]*>.*?</script>', re.IGNORECASE | re.DOTALL),
            'xss_event': re.compile(r'\bon\w+\s*=', re.IGNORECASE),
        }

    def sanitize_string(self, input_str, max_length=255):
        if not isinstance(input_str, str):
            raise ValueError("Input must be a string")
        input_str = input_str[:max_length]

        sanitized = re.sub(self.patterns['xss_script'], '', input_str)
        sanitized = re.sub(self.patterns['xss_event'], '', sanitized)
        # Strip every tag; the stored value is plain text
        sanitized = bleach.clean(sanitized, tags=set(), attributes={}, strip=True)
        return html.unescape(sanitized).strip()

    def validate_id(self, value):
        if not isinstance(value, str):
            return False
        try:
            UUID(value)
        except ValueError:
            return False
        return True

    def parse_interaction_type(self, value):
        if isinstance(value, InteractionType):
            return value
        try:
            return InteractionType(value)
        except ValueError:
            raise ValueError(f"Invalid interaction type: {value!r}")

    def parse_bool(self, value):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ('true', '1', 'yes', 'on'):
            return True
        if isinstance(value, str) and value.lower() in ('false', '0', 'no', 'off', ''):
            return False
        raise ValueError(f"Invalid boolean value: {value!r}")

    def validate_profile_update(self, payload):
        if not isinstance(payload, dict):
            raise ValueError("Profile data must be a dictionary")

        unknown = set(payload) - {'voting_location', 'is_poll_worker'}
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        # Only the fields present in the payload; the rest keep their stored values
        cleaned = {}
        if 'voting_location' in payload:
            location = payload['voting_location']
            if location is not None:
                location = self.sanitize_string(location) or None
            cleaned['voting_location'] = location
        if 'is_poll_worker' in payload:
            cleaned['is_poll_worker'] = self.parse_bool(payload['is_poll_worker'])
        return cleaned
