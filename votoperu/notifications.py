# votoperu/notifications.py

from collections import namedtuple

# Non-blocking user-facing message attached to API responses
Notification = namedtuple('Notification', ['level', 'message'])

SUCCESS = 'success'
INFO = 'info'
ERROR = 'error'


def success(message):
    return Notification(SUCCESS, message)


def info(message):
    return Notification(INFO, message)


def error(message):
    return Notification(ERROR, message)


def serialize(notifications):
    return [n._asdict() for n in notifications]
