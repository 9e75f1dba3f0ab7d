import math

import pytest

from la_jurisdictions.config import get_settings
from la_jurisdictions.geometry_store import GeometryStore
from la_jurisdictions.layers import LayerKind
from la_jurisdictions.resolver import PointResolver, ResolutionStatus


CITY_HALL = (34.0537, -118.2427)
SOUTH_LA = (33.99, -118.31)
MID_ATLANTIC = (30.0, -40.0)


def test_city_hall_is_inside_all_five_layers(loaded_store):
    result = PointResolver(loaded_store).resolve(*CITY_HALL)
    assert [r.status for r in result] == [ResolutionStatus.FOUND] * 5
    found = result.found()
    assert found["Neighborhood Councils"].district == "52"
    assert found["LA City Councils"].district == "14"
    assert found["LA County Supervisor Districts"].representative == "Hilda L. Solis"
    assert found["California House of Representatives"].district == "054"
    assert found["California Senate"].representative == "Maria Elena Durazo"


def test_overlapping_polygons_resolve_to_first_in_file_order(loaded_store):
    # City Hall sits inside both supervisorial fixtures; District 1 comes first.
    result = PointResolver(loaded_store).resolve(*CITY_HALL)
    assert result.for_kind(LayerKind.COUNTY_SUPERVISOR).feature.district == "1"
    both = loaded_store.get(LayerKind.COUNTY_SUPERVISOR).locate_all(CITY_HALL[1], CITY_HALL[0])
    assert [f.district for f in both] == ["1", "3"]


def test_point_outside_one_layer_reports_not_found_for_it(loaded_store):
    result = PointResolver(loaded_store).resolve(*SOUTH_LA)
    assert result["Neighborhood Councils"].feature.district == "76"
    assert result["LA City Councils"].feature.district == "10"
    assert result["LA County Supervisor Districts"].feature.representative == "Lindsey P. Horvath"
    assert result["California House of Representatives"].status is ResolutionStatus.NOT_FOUND
    assert result["California House of Representatives"].feature is None
    assert result["California Senate"].feature.district == "024"
    assert "California House of Representatives" not in result.labels_found()


def test_point_far_away_matches_nothing(loaded_store):
    result = PointResolver(loaded_store).resolve(*MID_ATLANTIC)
    assert [r.status for r in result] == [ResolutionStatus.NOT_FOUND] * 5
    assert result.found() == {}


def test_hole_and_detached_part_of_multipolygon(loaded_store):
    resolver = PointResolver(loaded_store)
    assert resolver.resolve(34.005, -118.465)["LA City Councils"].status is ResolutionStatus.NOT_FOUND
    assert resolver.resolve(33.94, -118.41)["LA City Councils"].feature.district == "11"


def test_point_on_shared_edge_counts_as_inside(loaded_store):
    # Exactly on the west edge of the Downtown fixture.
    result = PointResolver(loaded_store).resolve(34.05, -118.27)
    assert result["Neighborhood Councils"].feature.district == "52"


def test_at_most_one_result_per_layer(loaded_store):
    result = PointResolver(loaded_store).resolve(*CITY_HALL)
    assert len(result.layers) == 5
    assert len({r.kind for r in result}) == 5


def test_layers_not_yet_loaded_report_loading():
    store = GeometryStore(settings=get_settings())
    result = PointResolver(store).resolve(*CITY_HALL)
    assert [r.status for r in result] == [ResolutionStatus.LOADING] * 5


def test_failed_layer_reports_unavailable(loaded_store):
    loaded_store.get(LayerKind.SENATE).mark_failed("HTTP 500")
    result = PointResolver(loaded_store).resolve(*CITY_HALL)
    assert result["California Senate"].status is ResolutionStatus.UNAVAILABLE
    assert result["LA City Councils"].status is ResolutionStatus.FOUND


@pytest.mark.parametrize("lat,lon", [(math.nan, -118.0), (34.0, math.inf)])
def test_non_finite_coordinates_are_rejected(loaded_store, lat, lon):
    with pytest.raises(ValueError):
        PointResolver(loaded_store).resolve(lat, lon)


def test_unknown_label_lookup_raises_key_error(loaded_store):
    result = PointResolver(loaded_store).resolve(*CITY_HALL)
    with pytest.raises(KeyError):
        result["Coastal Commission"]
