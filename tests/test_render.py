from datetime import datetime

import pytz

from app.models.schemas import GeoPoint
from app.services.render import NO_DATA, UNKNOWN_PLACE, UNKNOWN_TZ, render_report

INSTANT = pytz.timezone("Asia/Kolkata").localize(datetime(1990, 8, 15, 10, 30))
CHENNAI = GeoPoint(lat=13.08, lon=80.27, formatted_address="Chennai, India")

def test_layout_and_canonical_order():
    text = render_report(INSTANT, CHENNAI, "Asia/Kolkata", 4, {"ketu": 6, "mars": 11, "sun": 0, "moon": 1})
    lines = text.split("\n")

    assert lines[0] == "பிறந்த தேதி: 1990-08-15"
    assert lines[1] == "பிறந்த நேரம்: 10:30 (Asia/Kolkata)"
    assert lines[2] == "பிறந்த இடம்: Chennai, India"
    assert lines[3] == ""
    assert lines[4] == "லக்னம்: சிம்மம்"
    assert lines[5] == "கிரக நிலைகள்:"
    assert lines[6:] == [
        "சூரியன்: மேஷம்",
        "சந்திரன்: ரிஷபம்",
        "செவ்வாய்: மீனம்",
        "கேது: துலாம்",
    ]

def test_unknown_timezone_is_flagged():
    text = render_report(INSTANT, CHENNAI, None, 0, {}, fallback_zone="Asia/Kolkata")
    time_line = text.split("\n")[1]
    assert UNKNOWN_TZ in time_line
    assert "Asia/Kolkata" in time_line

def test_unknown_place_and_unknown_body():
    place = GeoPoint(lat=0, lon=0, formatted_address="  ")
    text = render_report(INSTANT, place, "UTC", 0, {"chiron": 3, "sun": 0})
    lines = text.split("\n")
    assert lines[2] == f"பிறந்த இடம்: {UNKNOWN_PLACE}"
    assert lines[-2:] == ["சூரியன்: மேஷம்", "chiron: கடகம்"]

def test_missing_positions_degrade():
    text = render_report(INSTANT, CHENNAI, "Asia/Kolkata", 2, None)
    assert text.split("\n")[-1] == NO_DATA

def test_idempotent():
    args = (INSTANT, CHENNAI, "Asia/Kolkata", 7, {"moon": 3, "sun": 1, "rahu": 9})
    assert render_report(*args) == render_report(*args)
