from pathlib import Path

from src.school_attendance.school_attendance.database.bootstrap import _strip_create_db_and_use, iter_sql_statements
from src.school_attendance.school_attendance.database.connection import DBConfig, DatabaseConnection

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_statements_split_outside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); SELECT 1;\n  \n"

    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]


def test_schema_creates_the_attendance_tables():
    sql = _strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))
    creates = [s for s in iter_sql_statements(sql) if s.upper().startswith("CREATE TABLE")]

    joined = " ".join(creates)
    for table in ("users", "students", "teachers", "student_attendance", "teacher_attendance"):
        assert f"CREATE TABLE IF NOT EXISTS {table} (" in joined
    assert not any(s.upper().startswith(("USE ", "CREATE DATABASE")) for s in iter_sql_statements(sql))


def test_db_config_fills_defaults_and_describes_itself():
    config = DBConfig.from_mapping({"host": "db", "port": "3307", "user": "app"})

    assert config.database == "school_attendance"
    assert config.describe() == "app@db:3307/school_attendance"
    assert DatabaseConnection.get_instance(config).config == config
