# tests/conftest.py
import pytest

from cpe_calculator.core.config import Settings, get_settings
from cpe_calculator.schemas.attendance import AttendanceEntry
from cpe_calculator.schemas.registrant import Registrant


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """
    Make sure every test reads settings fresh from the environment.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings(monkeypatch) -> Settings:
    """
    Settings built from defaults only, independent of any local `.env`.
    """
    for name in ("SESSION_START", "SESSION_END", "ROUNDING_INCREMENT"):
        monkeypatch.delenv(name, raising=False)
    return Settings(_env_file=None)


@pytest.fixture()
def registrants() -> list[Registrant]:
    """
    Small registrant directory with one pair of near-identical names.
    """
    return [
        Registrant.from_names("jane@x.com", "Jane", "Doe"),
        Registrant.from_names("robert.smith@x.com", "Robert", "Smith"),
        Registrant.from_names("jon.miller@x.com", "Jon", "Miller"),
        Registrant.from_names("john.miller@x.com", "John", "Miller"),
        Registrant.from_names("maria@x.com", "María", "González"),
    ]


@pytest.fixture()
def make_entry():
    """
    Factory for attendance entries built the way the parsing layer does.
    """

    def _make(
        name: str,
        duration: int,
        email: str | None = None,
        join: str | None = None,
        leave: str | None = None,
    ) -> AttendanceEntry:
        return AttendanceEntry.from_raw(
            name,
            email=email,
            join_time=join,
            leave_time=leave,
            duration_minutes=duration,
        )

    return _make
