from la_jurisdictions.info_panel import (
    PLACEHOLDER,
    ContactRegions,
    InfoPanel,
    region_id,
    render_resolution,
)
from la_jurisdictions.layers import LayerKind
from la_jurisdictions.resolver import PointResolver, ResolutionStatus


def test_placeholder_until_hovered():
    panel = InfoPanel(header="Neighborhood Councils")
    assert panel.body == PLACEHOLDER
    assert panel.html == "<h4>Neighborhood Councils</h4>Hover over a district"


def test_update_with_none_is_idempotent():
    panel = InfoPanel(header="LA City Councils")
    panel.update(None)
    first = panel.html
    panel.update(None)
    assert panel.html == first
    assert panel.body == PLACEHOLDER


def test_update_shows_snippet_then_reverts(loaded_store):
    feature = loaded_store.get(LayerKind.CITY_COUNCIL).features[0]
    panel = InfoPanel(header="LA City Councils")
    panel.update(feature)
    assert "City District #14" in panel.html
    panel.update()
    assert panel.body == PLACEHOLDER


def test_feature_without_website_does_not_break(loaded_store):
    venice = loaded_store.get(LayerKind.NEIGHBORHOOD_COUNCIL).features[2]
    panel = InfoPanel(header="Neighborhood Councils")
    panel.update(venice)
    assert "VENICE NC" in panel.body


def test_header_is_escaped():
    panel = InfoPanel(header="<i>x</i>")
    assert panel.html.startswith("<h4>&lt;i&gt;x&lt;/i&gt;</h4>")


def test_loading_and_unavailable_text():
    panel = InfoPanel(header="California Senate")
    panel.show_loading("California Senate")
    assert panel.body == "California Senate are still loading"
    panel.show_unavailable("California Senate")
    assert panel.body == "California Senate could not be loaded"


def test_region_ids():
    assert region_id(LayerKind.ASSEMBLY) == "contacts_assembly"


def test_contact_regions_fill_from_result(loaded_store):
    result = PointResolver(loaded_store).resolve(33.99, -118.31)
    regions = ContactRegions()
    regions.fill(result)
    assert "NC District #76" in regions.get(LayerKind.NEIGHBORHOOD_COUNCIL)
    assert regions.get(LayerKind.ASSEMBLY) == (
        "Not within any of the California House of Representatives"
    )
    assert regions.heading(LayerKind.SENATE) == "California Senate"
    regions.clear()
    assert all(v == "" for v in regions.regions.values())


def test_render_resolution_for_each_state(loaded_store):
    loaded_store.get(LayerKind.SENATE).mark_failed("boom")
    result = PointResolver(loaded_store).resolve(34.0537, -118.2427)
    senate = result.for_kind(LayerKind.SENATE)
    assert senate.status is ResolutionStatus.UNAVAILABLE
    assert render_resolution(senate) == "California Senate could not be loaded"
    assert "Supervisorial District #1" in render_resolution(
        result.for_kind(LayerKind.COUNTY_SUPERVISOR)
    )
