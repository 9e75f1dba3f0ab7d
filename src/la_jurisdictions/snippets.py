"""HTML fragments describing one district's representative and contacts."""

from __future__ import annotations

import html
from typing import Callable, Dict

from la_jurisdictions.features import DistrictFeature
from la_jurisdictions.layers import LayerKind


# California legislature contact form, keyed by AD<n> / SD<n>.
LEGISLATURE_CONTACT_URL = (
    "https://lcmspubcontact.lc.ca.gov/PublicLCMS/ContactPopup.php?district={prefix}{number}&inframe=Y"
)


def _e(value: str) -> str:
    return html.escape(value or "", quote=True)


def _link(url: str, text: str = "") -> str:
    return f'<a href="{_e(url)}">{_e(text or url)}</a>'


def _district_number(raw: str) -> str:
    digits = raw.lstrip("0")
    return digits or raw


def legislature_contact_url(kind: LayerKind, district: str) -> str:
    prefix = "AD" if kind is LayerKind.ASSEMBLY else "SD"
    number = _district_number(district)
    if not number:
        return ""
    return LEGISLATURE_CONTACT_URL.format(prefix=prefix, number=number)


def neighborhood_council_snippet(f: DistrictFeature) -> str:
    out = f"<b>{_e(f.name)}</b><br />NC District #{_e(f.district)}<br />" + _link(f.website)
    if f.certified is not None:
        out += f"<br />Certified: {_e(f.certified)}"
    return out


def city_council_snippet(f: DistrictFeature) -> str:
    return f"<b>{_e(f.name)}</b><br />City District #{_e(f.district)}<br />" + _link(f.website)


def county_supervisor_snippet(f: DistrictFeature) -> str:
    return (
        f"<b>{_e(f.representative)}</b><br />Supervisorial District #{_e(f.district)}<br />"
        + _link(f.website)
    )


def assembly_snippet(f: DistrictFeature) -> str:
    out = (
        f"<b>{_e(f.name)}</b><br />Assembly District #{_e(f.district)}<br />"
        f"Assembly member: {_e(f.representative)}<br />" + _link(f.website)
    )
    contact = legislature_contact_url(f.kind, f.district)
    if contact:
        out += "<br />" + _link(contact, "Contact form")
    return out


def senate_snippet(f: DistrictFeature) -> str:
    out = (
        f"<b>{_e(f.name)}</b><br />Senate District #{_e(f.district)}<br />"
        f"Senator: {_e(f.representative)}<br />" + _link(f.website)
    )
    contact = legislature_contact_url(f.kind, f.district)
    if contact:
        out += "<br />" + _link(contact, "Contact form")
    return out


SNIPPETS: Dict[LayerKind, Callable[[DistrictFeature], str]] = {
    LayerKind.NEIGHBORHOOD_COUNCIL: neighborhood_council_snippet,
    LayerKind.CITY_COUNCIL: city_council_snippet,
    LayerKind.COUNTY_SUPERVISOR: county_supervisor_snippet,
    LayerKind.ASSEMBLY: assembly_snippet,
    LayerKind.SENATE: senate_snippet,
}


def snippet_for(feature: DistrictFeature) -> str:
    try:
        generator = SNIPPETS[feature.kind]
    except KeyError:
        raise ValueError(f"no snippet generator for {feature.kind!r}") from None
    return generator(feature)
