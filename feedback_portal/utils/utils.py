from typing import Optional


def normalize_section_name(name: Optional[str]) -> str:
    """Sections are stored trimmed and upper-cased, e.g. ``" b1 "`` -> ``"B1"``."""
    return (name or "").strip().upper()


def clean_text(value: Optional[str]) -> str:
    return (value or "").strip()


# largest value a BIGINT / SQLite INTEGER primary key can hold
MAX_DB_ID = 2 ** 63 - 1
