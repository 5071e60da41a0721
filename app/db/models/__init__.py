# app/db/models/__init__.py
from .user import User
from .refresh_token import RefreshToken
from .outbox_event import OutboxEvent
from .todo import *
