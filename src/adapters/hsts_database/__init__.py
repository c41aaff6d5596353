from adapters.hsts_database.codec import (
    HEADER_LINES,
    decode_database,
    decode_line,
    encode_entry,
    read_database,
)
from adapters.hsts_database.writer import WriteResult, backup_database, write_database

__all__ = [
    "HEADER_LINES",
    "WriteResult",
    "backup_database",
    "decode_database",
    "decode_line",
    "encode_entry",
    "read_database",
    "write_database",
]
