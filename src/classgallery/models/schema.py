"""
Table definitions for classgallery.

The remote statements are what an operator runs once on the hosted Postgres
backend; the local statement creates the key-string table of the fallback
store.
"""

from typing import List

STUDENTS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS students (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    student_id TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    name TEXT NOT NULL,
    roll_no TEXT,
    class TEXT,
    section TEXT,
    email TEXT,
    phone TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

MEDIA_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS media (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    title TEXT NOT NULL,
    type TEXT NOT NULL CHECK (type IN ('photo', 'video')),
    url TEXT NOT NULL,
    description TEXT,
    student_id TEXT NOT NULL,
    student_name TEXT,
    status TEXT NOT NULL DEFAULT 'approved' CHECK (status IN ('pending', 'approved', 'rejected')),
    uploaded_by TEXT NOT NULL DEFAULT 'admin',
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

SETTINGS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    cloud_name TEXT,
    upload_preset TEXT,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

REMOTE_TABLE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_students_created_at ON students(created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_media_created_at ON media(created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_media_student_status ON media(student_id, status);",
    "CREATE INDEX IF NOT EXISTS idx_media_uploaded_by ON media(uploaded_by);",
]

LOCAL_STORE_TABLE = "kv_store"

LOCAL_STORE_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {LOCAL_STORE_TABLE} (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

MODEL_COLUMNS = {
    "students": {"id", "student_id", "password", "name", "roll_no", "class", "section", "email", "phone", "created_at"},
    "media": {
        "id",
        "title",
        "type",
        "url",
        "description",
        "student_id",
        "student_name",
        "status",
        "uploaded_by",
        "created_at",
    },
    "settings": {"key", "cloud_name", "upload_preset", "updated_at"},
}

REMOTE_TABLE_SCHEMAS = {
    "students": STUDENTS_TABLE_SCHEMA,
    "media": MEDIA_TABLE_SCHEMA,
    "settings": SETTINGS_TABLE_SCHEMA,
}


def get_remote_schema_statements() -> List[str]:
    """
    Get the statements that provision the remote backend.

    Returns:
        List of SQL statements to create tables and indexes
    """
    return list(REMOTE_TABLE_SCHEMAS.values()) + REMOTE_TABLE_INDEXES


def get_local_schema_statements() -> List[str]:
    """Get the statements that create the local key-string store."""
    return [LOCAL_STORE_SCHEMA]


def validate_schema_compatibility() -> bool:
    """
    Check that every column the models read or write appears in the DDL.

    Returns:
        True if schema is compatible, False otherwise
    """
    for table, columns in MODEL_COLUMNS.items():
        schema_lower = REMOTE_TABLE_SCHEMAS[table].lower()
        declared = {line.strip().split(" ", 1)[0] for line in schema_lower.splitlines() if line.strip()}
        if not columns <= declared:
            return False

    return True
