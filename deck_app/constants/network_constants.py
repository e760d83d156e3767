"""Network configuration constants for the deck application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
SESSION_COOKIE: str = "decktalk_session"
USER_NAME_COOKIE: str = "decktalk_user_name"
COOKIE_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 365
MAX_ACTIVE_SESSIONS: int = 1000
