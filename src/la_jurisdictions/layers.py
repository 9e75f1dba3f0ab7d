"""The five jurisdiction layers shown on the map.

Each layer is backed by one GeoJSON FeatureCollection. The attribute schema
names which property holds the district name, number, representative and
website, so formatting code never has to guess from key presence.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class LayerKind(str, Enum):
    NEIGHBORHOOD_COUNCIL = "neighborhood_council"
    CITY_COUNCIL = "city_council"
    COUNTY_SUPERVISOR = "county_supervisor"
    ASSEMBLY = "assembly"
    SENATE = "senate"


@dataclass(frozen=True)
class AttributeSchema:
    name_field: str
    district_field: str
    website_field: str
    representative_field: Optional[str] = None
    required: Tuple[str, ...] = ()
    # Fixed attribute values every feature of the layer carries, e.g. LSAD.
    constants: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class DistrictLayer:
    kind: LayerKind
    label: str
    file_name: str
    schema: AttributeSchema
    # Where the boundaries come from; kept for the attribution/about text.
    origin: str = ""


NEIGHBORHOOD_COUNCILS = DistrictLayer(
    kind=LayerKind.NEIGHBORHOOD_COUNCIL,
    label="Neighborhood Councils",
    file_name="la_neighborhood_council_districts.geojson",
    schema=AttributeSchema(
        name_field="NAME",
        district_field="NC_ID",
        website_field="WADDRESS",
        required=("NAME", "NC_ID", "WADDRESS", "CERTIFIED"),
    ),
    origin="https://data.lacity.org/A-Well-Run-City/Neighborhood-Councils-Certified-/fu65-dz2f",
)

CITY_COUNCILS = DistrictLayer(
    kind=LayerKind.CITY_COUNCIL,
    label="LA City Councils",
    file_name="la_city_council_districts.geojson",
    schema=AttributeSchema(
        name_field="dist_name",
        district_field="district_i",
        website_field="website",
        required=("dist_name", "district_i", "website", "contact"),
    ),
    origin="https://data.lacity.org/A-Well-Run-City/Council-Districts/5v3h-vptv",
)

COUNTY_SUPERVISORS = DistrictLayer(
    kind=LayerKind.COUNTY_SUPERVISOR,
    label="LA County Supervisor Districts",
    file_name="la_county_supervisorial_districts.geojson",
    schema=AttributeSchema(
        name_field="supervisor",
        district_field="SUP_DIST_N",
        website_field="website",
        representative_field="supervisor",
        required=("supervisor", "SUP_DIST_N", "website"),
    ),
    origin="https://egis3.lacounty.gov/dataportal/2011/12/06/supervisorial-districts/",
)

ASSEMBLY_DISTRICTS = DistrictLayer(
    kind=LayerKind.ASSEMBLY,
    label="California House of Representatives",
    file_name="ca_house_boundaries.geojson",
    schema=AttributeSchema(
        name_field="NAMELSAD",
        district_field="SLDLST",
        website_field="website",
        representative_field="member",
        required=("NAMELSAD", "SLDLST", "member", "website", "LSAD"),
        constants=(("LSAD", "L3"),),
    ),
    origin="https://catalog.data.gov/dataset/tiger-line-shapefile-2018-state-california-current-state-legislative-district-sld-lower-chambe",
)

SENATE_DISTRICTS = DistrictLayer(
    kind=LayerKind.SENATE,
    label="California Senate",
    file_name="ca_senate_boundaries.geojson",
    schema=AttributeSchema(
        name_field="NAMELSAD",
        district_field="SLDUST",
        website_field="website",
        representative_field="Senator",
        required=("NAMELSAD", "SLDUST", "Senator", "website", "LSAD"),
        constants=(("LSAD", "LU"),),
    ),
    origin="https://catalog.data.gov/dataset/tiger-line-shapefile-2018-state-california-current-state-legislative-district-sld-upper-chamber",
)


# Layer switcher order; the first entry is the initially active layer.
LAYERS: Tuple[DistrictLayer, ...] = (
    NEIGHBORHOOD_COUNCILS,
    CITY_COUNCILS,
    COUNTY_SUPERVISORS,
    ASSEMBLY_DISTRICTS,
    SENATE_DISTRICTS,
)

_BY_LABEL: Dict[str, DistrictLayer] = {layer.label: layer for layer in LAYERS}
_BY_KIND: Dict[LayerKind, DistrictLayer] = {layer.kind: layer for layer in LAYERS}


def labels() -> List[str]:
    return [layer.label for layer in LAYERS]


def get_layer(label: str) -> Optional[DistrictLayer]:
    return _BY_LABEL.get(label)


def layer_for_kind(kind: LayerKind) -> DistrictLayer:
    return _BY_KIND[LayerKind(kind)]


def parse_kind(raw: str) -> Optional[LayerKind]:
    """Accept either a kind value (``city_council``) or a display label."""

    value = (raw or "").strip()
    try:
        return LayerKind(value.lower())
    except ValueError:
        layer = _BY_LABEL.get(value)
        return layer.kind if layer else None


def default_layer() -> DistrictLayer:
    return LAYERS[0]
