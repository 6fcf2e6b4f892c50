"""View renderers.

Every function here is pure: it maps a snapshot (or a slice of one) to
markup and performs no I/O. Payloads are read defensively because their
shape belongs to NASA, not to us. Jinja2 autoescaping is on, and each
renderer returns :class:`markupsafe.Markup` so composed fragments are not
escaped twice.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, PackageLoader
from markupsafe import Markup

from marsdash._constants import PLACEHOLDER_IMAGE_URL, ROVER_FACTS
from marsdash.config import ApiVariant
from marsdash.dashboard.formatting import as_dict, as_list, format_count, format_date, image_url, truncate
from marsdash.state import DashboardState

_env = Environment(
    loader=PackageLoader("marsdash", "templates"),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)

_NOUN = {ApiVariant.PHOTOS: "data", ApiVariant.SEARCH: "images"}

_SUBTITLE = {
    ApiVariant.PHOTOS: "Mission manifests and the latest photos from NASA's Mars Rovers",
    ApiVariant.SEARCH: "Explore images from NASA's Mars Rovers",
}

_SOURCE = {
    ApiVariant.PHOTOS: "NASA's Mars Rover API",
    ApiVariant.SEARCH: "NASA's Image and Video Library",
}


def _render(template: str, **context: Any) -> Markup:
    return Markup(_env.get_template(template).render(**context))


def render_header(variant: ApiVariant) -> Markup:
    return _render("header.html.j2", title="Mars Rover Dashboard", subtitle=_SUBTITLE[variant])


def render_footer(variant: ApiVariant) -> Markup:
    return _render("footer.html.j2", source=_SOURCE[variant])


def render_rover_tabs(state: DashboardState) -> Markup:
    tabs = [{"name": rover, "active": rover == state.selected_rover} for rover in state.rovers]
    return _render("rover_tabs.html.j2", tabs=tabs)


def render_message(text: str, css_class: str = "loading") -> Markup:
    return _render("message.html.j2", text=text, css_class=css_class)


# ------------------------------------------------------------------
# Rover info
# ------------------------------------------------------------------


def render_manifest_info(rover: str, payload: Any) -> Markup:
    """Info panel built from an upstream ``photo_manifest``."""
    manifest = as_dict(as_dict(payload).get("photo_manifest"))
    name = manifest.get("name") or rover
    facts = [
        ("Status", manifest.get("status") or "Unknown"),
        ("Launch Date", format_date(manifest.get("launch_date"))),
        ("Landing Date", format_date(manifest.get("landing_date"))),
        ("Total Photos", format_count(manifest.get("total_photos"))),
        ("Max Sol", manifest.get("max_sol") if manifest.get("max_sol") is not None else "N/A"),
        ("Max Date", format_date(manifest.get("max_date"))),
    ]
    return _render("rover_info.html.j2", heading=f"{name} Rover", description=None, facts=facts)


def render_facts_info(rover: str, payload: Any) -> Markup:
    """Info panel built from the static rover facts plus the search hit count."""
    info = ROVER_FACTS.get(rover, {})
    metadata = as_dict(as_dict(as_dict(payload).get("collection")).get("metadata"))
    facts = [
        ("Status", info.get("status") or "Unknown"),
        ("Launch Date", format_date(info.get("launch"))),
        ("Landing Date", format_date(info.get("landing"))),
        ("Images Found", format_count(metadata.get("total_hits"))),
    ]
    return _render("rover_info.html.j2", heading=f"{rover} Rover", description=info.get("description"), facts=facts)


def render_rover_info(rover: str, payload: Any, variant: ApiVariant) -> Markup:
    if variant is ApiVariant.PHOTOS:
        return render_manifest_info(rover, payload)
    return render_facts_info(rover, payload)


# ------------------------------------------------------------------
# Image gallery
# ------------------------------------------------------------------


def _photo_item(photo: Any, rover: str) -> dict[str, Any]:
    photo = as_dict(photo)
    camera = as_dict(photo.get("camera"))
    owner = as_dict(photo.get("rover")).get("name") or rover
    sol = photo.get("sol")
    return {
        "src": photo.get("img_src") or "",
        "alt": f"Mars photo by {owner}",
        "title": None,
        "description": None,
        "details": [
            ("Camera", camera.get("full_name") or camera.get("name") or "Unknown camera"),
            ("Date", format_date(photo.get("earth_date"))),
            ("Sol", sol if sol is not None else "N/A"),
        ],
    }


def _search_item(item: Any) -> dict[str, Any]:
    item = as_dict(item)
    data_list = as_list(item.get("data"))
    data = as_dict(data_list[0]) if data_list else {}
    title = data.get("title") or "Untitled"
    description = data.get("description") or "No description available"
    return {
        "src": image_url(item.get("links")),
        "alt": title,
        "title": title,
        "description": truncate(str(description)),
        "details": [("Date", format_date(data.get("date_created")))],
    }


def gallery_items(payload: Any, variant: ApiVariant) -> list[Any]:
    """The raw, un-sliced items a payload carries for *variant*."""
    if variant is ApiVariant.PHOTOS:
        return as_list(as_dict(payload).get("latest_photos"))
    return as_list(as_dict(as_dict(payload).get("collection")).get("items"))


def render_image_gallery(rover: str, payload: Any, variant: ApiVariant) -> Markup:
    items = gallery_items(payload, variant)
    if variant is ApiVariant.PHOTOS:
        if not items:
            return render_message("No recent photos available")
        manifest_name = as_dict(as_dict(payload).get("photo_manifest")).get("name") or rover
        return _render(
            "image_gallery.html.j2",
            heading=f"Latest Photos from {manifest_name}",
            items=[_photo_item(photo, rover) for photo in items[: variant.gallery_limit]],
            placeholder=None,
        )

    if not items:
        return render_message(f"No images found for {rover}")
    return _render(
        "image_gallery.html.j2",
        heading=f"Images from {rover}",
        items=[_search_item(item) for item in items[: variant.gallery_limit]],
        placeholder=PLACEHOLDER_IMAGE_URL,
    )


# ------------------------------------------------------------------
# Content and page
# ------------------------------------------------------------------


def render_rover_content(state: DashboardState, variant: ApiVariant) -> Markup:
    """Main panel for the selected rover.

    The loading view only shows while the selected rover has no data yet,
    so a refetch of an already loaded rover keeps its content on screen.
    """
    rover = state.selected_rover
    payload = state.current_rover_data
    noun = _NOUN[variant]

    if state.loading and payload is None:
        return render_message(f"Loading {rover} {noun}...")
    if state.error:
        return render_message(f"Error: {state.error}", css_class="error")
    if payload is None:
        return render_message(f"Select a rover to view {noun}")
    return render_rover_info(rover, payload, variant) + render_image_gallery(rover, payload, variant)


def render_page(state: DashboardState, variant: ApiVariant) -> str:
    """The complete document for *state*; the store calls this on every update."""
    return str(
        _render(
            "page.html.j2",
            user=state.user.name,
            selected_rover=state.selected_rover,
            header=render_header(variant),
            tabs=render_rover_tabs(state),
            content=render_rover_content(state, variant),
            footer=render_footer(variant),
        )
    )
