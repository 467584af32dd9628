# votoperu/audit/audit_logger.py

import os
import json
import hashlib
import base64
import logging
from datetime import datetime
from flask import current_app
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

# Append-only activity trail for voter actions (preferences, profile edits).
# Each line is chained to the previous one by SHA-256 and signed with Ed25519.

logger = logging.getLogger(__name__)


def load_or_create_signing_key(key_file):
    """Read the Ed25519 key from a PEM file, writing a new one if it is missing."""
    if os.path.exists(key_file):
        with open(key_file, 'rb') as f:
            key = serialization.load_pem_private_key(f.read(), password=None)
        if not isinstance(key, Ed25519PrivateKey):
            raise ValueError(f"{key_file} does not hold an Ed25519 private key")
        return key

    key = Ed25519PrivateKey.generate()
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    os.makedirs(os.path.dirname(key_file) or '.', exist_ok=True)
    fd = os.open(key_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, 'wb') as f:
        f.write(pem)
    logger.info(f"Created activity log signing key at {key_file}")
    return key


class AuditLogger:
    def __init__(self, log_dir='logs', signing_key=None, key_file=None):
        self.log_dir = log_dir
        self.log_file = os.path.join(log_dir, 'activity.log')
        self.previous_hash = None

        os.makedirs(log_dir, exist_ok=True)

        if signing_key is None and key_file:
            signing_key = load_or_create_signing_key(key_file)
        self.signing_key = signing_key or Ed25519PrivateKey.generate()
        self._load_previous_hash()

    def _load_previous_hash(self):
        if not os.path.exists(self.log_file):
            return
        last_line = None
        with open(self.log_file, 'r') as f:
            for line in f:
                if line.strip():
                    last_line = line
        if last_line is None:
            return
        try:
            self.previous_hash = json.loads(last_line).get('hash')
        except ValueError:
            logger.warning(f"Unreadable last entry in {self.log_file}; starting a new chain")
            self.previous_hash = None

    def log_event(self, event_type, data, user_id=None):
        """Append one entry. Failures are logged, never raised to the caller."""
        try:
            entry = {
                "timestamp": datetime.utcnow().isoformat(),
                "event_type": event_type,
                "data": data,
                "user_id": user_id,
                "previous_hash": self.previous_hash,
            }
            entry_json = json.dumps(entry, sort_keys=True)
            entry['hash'] = hashlib.sha256(entry_json.encode()).hexdigest()
            entry['signature'] = base64.b64encode(self.signing_key.sign(entry_json.encode())).decode()

            with open(self.log_file, 'a') as f:
                f.write(json.dumps(entry) + "\n")

            self.previous_hash = entry['hash']
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Activity log error: {str(e)}")

    def verify_log_integrity(self):
        if not os.path.exists(self.log_file):
            return True
        public_key = self.signing_key.public_key()
        previous_hash = None
        try:
            with open(self.log_file, 'r') as f:
                for line in f:
                    if not line.strip():
                        continue
                    entry = json.loads(line)
                    if entry.get('previous_hash') != previous_hash:
                        return False
                    signature = base64.b64decode(entry.pop('signature'))
                    recorded_hash = entry.pop('hash')
                    entry_json = json.dumps(entry, sort_keys=True).encode()
                    if hashlib.sha256(entry_json).hexdigest() != recorded_hash:
                        return False
                    public_key.verify(signature, entry_json)
                    previous_hash = recorded_hash
        except (KeyError, ValueError, InvalidSignature):
            return False
        return True


def get_audit_logger():
    """Return the activity log bound to the current app, creating it on first use."""
    audit = current_app.extensions.get('votoperu_audit')
    if audit is None:
        log_dir = current_app.config.get('AUDIT_LOG_DIR', 'logs')
        key_file = current_app.config.get('AUDIT_SIGNING_KEY_FILE') or os.path.join(log_dir, 'signing_key.pem')
        audit = AuditLogger(log_dir=log_dir, key_file=key_file)
        current_app.extensions['votoperu_audit'] = audit
    return audit
