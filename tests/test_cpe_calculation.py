# tests/test_cpe_calculation.py
import logging
from datetime import time

from cpe_calculator.schemas.email_resolution import EmailStatus
from cpe_calculator.schemas.participant_result import CalculationReport
from cpe_calculator.services.cpe_calculation import run_cpe_calculation


def _entries(make_entry):
    return [
        make_entry("Dr. Jane Doe", 40, join="2024-01-15 09:40", leave="2024-01-15 10:20"),
        make_entry("Jane Doe (iPhone)", 55, join="2024-01-15 10:25", leave="2024-01-15 11:20"),
        make_entry("Bob Stone", 75, email="bob@x.com", join="2024-01-15 09:50", leave="2024-01-15 11:05"),
        make_entry("Jon Miller", 30, join="2024-01-15 10:00", leave="2024-01-15 10:30"),
    ]


def test_run_cpe_calculation_end_to_end(make_entry, registrants, settings):
    """
    Entries are merged, clamped to 10:00-11:00, scored and summarized.
    """
    report = run_cpe_calculation(
        _entries(make_entry),
        {"jane doe": 3, "bob stone": 2},
        registrants,
        session_start="10:00",
        session_end="11:00",
        rounding_increment=0.5,
        settings=settings,
    )

    assert isinstance(report, CalculationReport)
    jane, bob, jon = report.results

    # 10:00-10:20 + 10:25-11:00
    assert jane.duration_minutes == 55
    assert jane.email == "jane@x.com"
    assert jane.email_status == EmailStatus.MATCHED
    assert jane.actual_credits == 1.0
    assert jane.eligible is True

    # 10:00-11:00, but 2 answers only cover 0.5 credit
    assert bob.duration_minutes == 60
    assert bob.email_status == EmailStatus.DIRECT
    assert bob.actual_credits == 0
    assert bob.reason == "Did not earn minimum 1.0 credits"

    assert jon.duration_minutes == 30
    assert jon.email_status == EmailStatus.AMBIGUOUS
    assert jon.reason == "Duration < 50 minutes"

    assert report.summary.total == 3
    assert report.summary.qualified == 1
    assert report.summary.total_credits == 1.0


def test_run_cpe_calculation_uses_settings_defaults(make_entry, settings):
    """
    Without per-run overrides, the session window and increment come from
    the settings object.
    """
    tuned = settings.model_copy(
        update={
            "SESSION_START": time(10, 0),
            "SESSION_END": time(11, 0),
            "ROUNDING_INCREMENT": 1.0,
        }
    )

    report = run_cpe_calculation(
        [make_entry("Bob Stone", 120, join="2024-01-15 09:00", leave="2024-01-15 11:00")],
        {"bob stone": 5},
        settings=tuned,
    )

    [bob] = report.results
    assert bob.duration_minutes == 60
    assert bob.potential_credits == 1.0
    assert bob.actual_credits == 1.0


def test_run_cpe_calculation_reads_environment(make_entry, monkeypatch):
    monkeypatch.setenv("ROUNDING_INCREMENT", "0.2")
    monkeypatch.delenv("SESSION_START", raising=False)
    monkeypatch.delenv("SESSION_END", raising=False)

    report = run_cpe_calculation([make_entry("Jane Doe", 125)], {"jane doe": 7})

    assert report.results[0].actual_credits == 2.4


def test_run_cpe_calculation_without_session_keeps_raw_durations(make_entry, settings):
    report = run_cpe_calculation(_entries(make_entry), {}, settings=settings)

    assert [r.duration_minutes for r in report.results] == [95, 75, 30]


def test_run_cpe_calculation_empty_inputs(settings):
    report = run_cpe_calculation([], None, None, settings=settings)

    assert report.results == []
    assert report.summary.total == 0
    assert report.summary.qualified_percent == 0.0


def test_run_cpe_calculation_logs_progress(make_entry, settings, caplog):
    with caplog.at_level(logging.INFO, logger="cpe_calculator"):
        run_cpe_calculation(_entries(make_entry), {}, settings=settings)

    messages = [r.getMessage() for r in caplog.records]
    assert "Aggregated 4 attendance entries into 3 unique participants" in messages
    assert any(m.startswith("Calculation complete: 0 of 3") for m in messages)
