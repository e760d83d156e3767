"""Record store constants shared by the backends and the answer client."""

DEFAULT_STORE_TABLE: str = "answers"
DEFAULT_STORE_TIMEOUT_SECONDS: float = 10.0
REST_PATH_PREFIX: str = "/rest/v1"

# Column names of the hosted answers table.
COLUMN_ID: str = "id"
COLUMN_SESSION: str = "user_session"
COLUMN_QUESTION_ID: str = "question_id"
COLUMN_CREATED_AT: str = "created_at"
ANSWER_UNIQUE_COLUMNS: tuple[str, ...] = (COLUMN_SESSION, COLUMN_QUESTION_ID)

PLACEHOLDER_VALUES: frozenset[str] = frozenset(
    {"your_supabase_url_here", "your_supabase_anon_key_here"}
)
