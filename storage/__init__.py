from .schema import GAME_KINDS, COUNTER_KEYS, DTYPES, SessionRecordRow
from .store import (
    DATA_FILE,
    init_store,
    validate_records,
    append_session_records,
    load_all,
    query_trend,
    export_ndjson,
)

__all__ = [
    "DATA_FILE",
    "GAME_KINDS",
    "COUNTER_KEYS",
    "DTYPES",
    "SessionRecordRow",
    "init_store",
    "validate_records",
    "append_session_records",
    "load_all",
    "query_trend",
    "export_ndjson",
]
