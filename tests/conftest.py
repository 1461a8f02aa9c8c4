"""Gemeinsame Stubs: Geocoder, TimezoneFinder und Engine ohne Netz/Ephemeriden."""

import time
from types import SimpleNamespace

import pytest

from app.services.chart import ChartComputationAdapter
from app.services.geocoding import PlaceResolver
from app.services.horoscope import HoroscopeOrchestrator
from app.services.timezones import TimeZoneResolver

CHENNAI = SimpleNamespace(latitude=13.0827, longitude=80.2707, address="Chennai, Tamil Nadu, India")

class StubGeocoder:
    def __init__(self, matches=None, error=None, delay_s=0.0):
        self.matches = [CHENNAI] if matches is None else matches
        self.error = error
        self.delay_s = delay_s
        self.calls = []

    def geocode(self, query, exactly_one=False, language=None):
        self.calls.append(query)
        if self.delay_s:
            time.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return self.matches

class StubFinder:
    def __init__(self, tz="Asia/Kolkata", error=None):
        self.tz = tz
        self.error = error
        self.calls = []

    def timezone_at(self, lng, lat):
        self.calls.append((lat, lng))
        if self.error is not None:
            raise self.error
        return self.tz

class StubEngine:
    name = "stub"

    def __init__(self, asc=125.0, bodies=None, error=None, delay_s=0.0):
        self.asc = asc
        self.bodies = {"sun": 10.0, "moon": 370.0, "mars": -5.0} if bodies is None else bodies
        self.error = error
        self.delay_s = delay_s
        self.calls = []

    def ascendant(self, when, loc):
        self.calls.append((when, loc))
        if self.delay_s:
            time.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return self.asc

    def body_longitudes(self, when, loc):
        return self.bodies

@pytest.fixture
def geocoder():
    return StubGeocoder()

@pytest.fixture
def finder():
    return StubFinder()

@pytest.fixture
def engine():
    return StubEngine()

@pytest.fixture
def make_orchestrator():
    def _make(geocoder=None, finder=None, engine=None, engine_missing=False, fallback_zone="Asia/Kolkata"):
        charts = (
            ChartComputationAdapter(None, unavailable_reason="swisseph not installed")
            if engine_missing
            else ChartComputationAdapter(engine or StubEngine(), timeout_s=2.0)
        )
        return HoroscopeOrchestrator(
            places=PlaceResolver(geocoder or StubGeocoder(), timeout_s=2.0),
            time_zones=TimeZoneResolver(finder or StubFinder()),
            charts=charts,
            fallback_zone=fallback_zone,
        )
    return _make
