# tests/test_text.py
from cpe_calculator.core.text import normalize_name, reverse_name
from cpe_calculator.schemas.attendance import AttendanceEntry
from cpe_calculator.schemas.registrant import Registrant


def test_normalize_name_strips_titles_credentials_and_devices():
    assert normalize_name("Dr. José Álvarez (Host)") == "jose alvarez"
    assert normalize_name("MR. JOHN SMITH, CPA") == "john smith"
    assert normalize_name("Jane Doe - iPhone") == "jane doe"
    assert normalize_name("Anita Rao PGP-DSBA") == "anita rao"
    assert normalize_name("Prof Li Wei PhD") == "li wei"


def test_normalize_name_keeps_words_that_merely_contain_tokens():
    assert normalize_name("Drew Pearce") == "drew pearce"
    assert normalize_name("Sean Mobiley") == "sean mobiley"


def test_normalize_name_empty_values():
    assert normalize_name(None) == ""
    assert normalize_name("") == ""
    assert normalize_name("  (iPad)  ") == ""


def test_reverse_name():
    assert reverse_name("jane q doe") == "doe jane q"
    assert reverse_name("cher") == "cher"


def test_attendance_entry_from_raw_parses_durations():
    assert AttendanceEntry.from_raw("Jane Doe", duration_minutes="64").duration_minutes == 64
    assert AttendanceEntry.from_raw("Jane Doe", duration_minutes="64 mins").duration_minutes == 64
    assert AttendanceEntry.from_raw("Jane Doe", duration_minutes=None).duration_minutes == 0
    assert AttendanceEntry.from_raw("Jane Doe", duration_minutes="n/a").duration_minutes == 0
    assert AttendanceEntry.from_raw("Jane Doe", duration_minutes=-5).duration_minutes == 0

    entry = AttendanceEntry.from_raw("Dr. Jane Doe", email="  ", duration_minutes=12)
    assert entry.normalized_name == "jane doe"
    assert entry.original_name == "Dr. Jane Doe"
    assert entry.email is None


def test_registrant_from_names():
    registrant = Registrant.from_names("  Jane.Doe@X.com ", "Jane", "Doe")

    assert registrant.email == "jane.doe@x.com"
    assert registrant.original_full_name == "Jane Doe"
    assert registrant.normalized_full_name == "jane doe"

    only_last = Registrant.from_names("x@x.com", "", "Doe")
    assert only_last.original_full_name == "Doe"
    assert only_last.normalized_full_name == "doe"
