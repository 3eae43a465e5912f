import pytest

from src.employee_management.employee_management.core.exceptions import NotFoundError, ValidationError
from src.employee_management.employee_management.geofence.model import GeoLocation
from src.employee_management.employee_management.geofence.service import GeoFenceService
from src.employee_management.employee_management.geofence.validator import haversine_distance, validate_geo_location

from tests.fakes import InMemoryGeoLocations

OFFICE = GeoLocation(location_id=1, name="HQ", latitude=12.9716, longitude=77.5946, radius=100)


def test_haversine_one_degree_of_latitude():
    assert round(haversine_distance(0, 0, 1, 0)) == 111195


def test_haversine_same_point_is_zero():
    assert haversine_distance(OFFICE.latitude, OFFICE.longitude, OFFICE.latitude, OFFICE.longitude) == 0


def test_inside_radius_is_valid():
    result = validate_geo_location(12.9720, 77.5946, [OFFICE])

    assert result.valid is True
    assert result.location == OFFICE
    assert 40 <= result.distance <= 50


def test_outside_radius_reports_rounded_distance():
    result = validate_geo_location(12.9736, 77.5946, [OFFICE])

    assert result.valid is False
    assert isinstance(result.distance, int)
    assert 220 <= result.distance <= 225


def test_no_locations_accepts_everything():
    result = validate_geo_location(0.0, 0.0, [])

    assert result.valid is True
    assert result.distance == 0
    assert result.location is None


def test_missing_radius_defaults_to_500m():
    loc = GeoLocation(location_id=2, name="Branch", latitude=10.0, longitude=10.0, radius=None)

    # ~445m north
    assert validate_geo_location(10.004, 10.0, [loc]).valid is True
    # ~556m north
    assert validate_geo_location(10.005, 10.0, [loc]).valid is False


def test_only_nearest_location_decides():
    far_but_wide = GeoLocation(location_id=2, name="Campus", latitude=12.9816, longitude=77.5946, radius=5000)
    near_but_tight = GeoLocation(location_id=3, name="Annex", latitude=12.9736, longitude=77.5946, radius=10)

    result = validate_geo_location(12.9716, 77.5946, [far_but_wide, near_but_tight])

    assert result.location == near_but_tight
    assert result.valid is False


def test_nearest_is_never_farther_than_any_other():
    locations = [
        GeoLocation(location_id=i, name=f"L{i}", latitude=12.9 + i * 0.01, longitude=77.5 + i * 0.02, radius=100)
        for i in range(6)
    ]
    lat, lng = 12.93, 77.55

    result = validate_geo_location(lat, lng, locations)

    for loc in locations:
        assert result.distance <= round(haversine_distance(lat, lng, loc.latitude, loc.longitude))


def test_exact_tie_keeps_first_seen():
    a = GeoLocation(location_id=1, name="A", latitude=1.0, longitude=0.0, radius=10)
    b = GeoLocation(location_id=2, name="B", latitude=-1.0, longitude=0.0, radius=10)

    assert validate_geo_location(0.0, 0.0, [a, b]).location == a


def test_service_add_location_validates_coordinates():
    svc = GeoFenceService(InMemoryGeoLocations())

    with pytest.raises(ValidationError):
        svc.add_location(name="Bad", latitude=95, longitude=0)
    with pytest.raises(ValidationError):
        svc.add_location(name="", latitude=1, longitude=1)

    location_id = svc.add_location(name="HQ", latitude="12.97", longitude="77.59")
    assert svc.list_locations()[0].radius == 500

    svc.remove_location(location_id)
    assert svc.list_locations() == []
    with pytest.raises(NotFoundError):
        svc.remove_location(location_id)


def test_service_add_location_validates_radius():
    svc = GeoFenceService(InMemoryGeoLocations())

    with pytest.raises(ValidationError):
        svc.add_location(name="HQ", latitude=12.97, longitude=77.59, radius="wide")
    with pytest.raises(ValidationError):
        svc.add_location(name="HQ", latitude=12.97, longitude=77.59, radius=0)

    svc.add_location(name="HQ", latitude=12.97, longitude=77.59, radius="250")
    assert svc.list_locations()[0].radius == 250
