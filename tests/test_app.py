import pytest

from config import get_settings_module
from src.school_attendance.school_attendance.main import create_app


@pytest.mark.parametrize(
    "env, expected",
    [("production", "config.production"), ("TEST", "config.testing"), ("staging", "config.development")],
)
def test_settings_module_follows_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == expected


def test_create_app_registers_attendance_routes(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("AUTO_INIT_DB", "0")

    app = create_app()
    endpoints = {rule.endpoint for rule in app.url_map.iter_rules()}

    assert {"attendance_list", "attendance_save", "attendance_delete", "attendance_summary"} <= endpoints
    assert app.config["DEBUG"] is False
