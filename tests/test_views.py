from __future__ import annotations

from fakes import latest_photos_payload, manifest_payload, search_item, search_payload
from marsdash.config import ApiVariant
from marsdash.dashboard.formatting import format_count, format_date, image_url, truncate
from marsdash.dashboard.views import (
    render_footer,
    render_image_gallery,
    render_page,
    render_rover_content,
    render_rover_info,
    render_rover_tabs,
)
from marsdash.state import DashboardState


def _photos_state(**partial: object) -> DashboardState:
    return DashboardState.initial(ApiVariant.PHOTOS).merge(partial)


def _search_state(**partial: object) -> DashboardState:
    return DashboardState.initial(ApiVariant.SEARCH).merge(partial)


def _photos_data(count: int = 3, name: str = "Curiosity") -> dict[str, object]:
    return {
        "photo_manifest": manifest_payload(name)["photo_manifest"],
        "latest_photos": latest_photos_payload(count, name)["latest_photos"],
    }


# ------------------------------------------------------------------
# Formatting helpers
# ------------------------------------------------------------------


def test_format_date_long_form() -> None:
    assert format_date("2012-08-06") == "August 6, 2012"
    assert format_date("2012-08-06T00:00:00Z") == "August 6, 2012"


def test_format_date_missing_and_unparseable() -> None:
    assert format_date(None) == "N/A"
    assert format_date("") == "N/A"
    assert format_date("sometime") == "sometime"


def test_format_count_uses_thousands_separators() -> None:
    assert format_count(695670) == "695,670"
    assert format_count(None) == "0"
    assert format_count("12") == "12"


def test_truncate_keeps_150_characters_and_ellipsis() -> None:
    assert truncate("a" * 200) == "a" * 150 + "..."
    assert truncate("a" * 150) == "a" * 150


def test_image_url_picks_first_image_link() -> None:
    links = [
        {"href": "https://x/preview.json", "render": "json"},
        {"href": "https://x/thumb.jpg", "render": "image"},
        {"href": "https://x/other.jpg", "render": "image"},
    ]
    assert image_url(links) == "https://x/thumb.jpg"
    assert image_url(None) == ""
    assert image_url([{"href": "https://x/a.json"}]) == ""


# ------------------------------------------------------------------
# Renderers
# ------------------------------------------------------------------


def test_tabs_highlight_selected_rover() -> None:
    html = render_rover_tabs(_photos_state(selected_rover="Spirit"))

    assert 'class="rover-tab active" data-rover="Spirit"' in html
    assert 'class="rover-tab" data-rover="Curiosity"' in html
    assert html.count("rover-tab active") == 1


def test_manifest_info_renders_name_and_status() -> None:
    payload = {"photo_manifest": {"name": "Curiosity", "status": "Active"}}

    html = render_rover_info("Curiosity", payload, ApiVariant.PHOTOS)

    assert "Curiosity Rover" in html
    assert "Active" in html


def test_manifest_info_formats_dates_and_counts() -> None:
    html = render_rover_info("Curiosity", _photos_data(), ApiVariant.PHOTOS)

    assert "August 6, 2012" in html
    assert "November 26, 2011" in html
    assert "695,670" in html
    assert "4102" in html


def test_facts_info_uses_static_table_and_total_hits() -> None:
    html = render_rover_info("Perseverance", search_payload(3, total_hits=12345), ApiVariant.SEARCH)

    assert "Perseverance Rover" in html
    assert "ancient life" in html
    assert "February 18, 2021" in html
    assert "12,345" in html


def test_photo_gallery_is_limited_to_12() -> None:
    html = render_image_gallery("Curiosity", _photos_data(count=20), ApiVariant.PHOTOS)

    assert html.count('class="gallery-item"') == 12
    assert "Latest Photos from Curiosity" in html
    assert "Navigation Camera" in html


def test_search_gallery_is_limited_to_24() -> None:
    html = render_image_gallery("Spirit", search_payload(30), ApiVariant.SEARCH)

    assert html.count('class="gallery-item"') == 24
    assert "Images from Spirit" in html


def test_long_description_truncated_to_150_characters() -> None:
    payload = search_payload(1, description="d" * 200)

    html = render_image_gallery("Curiosity", payload, ApiVariant.SEARCH)

    assert "d" * 150 + "..." in html
    assert "d" * 151 not in html


def test_gallery_item_missing_fields_rendered_defensively() -> None:
    item = search_item(0, description=None)
    item["links"] = []
    del item["data"][0]["title"]
    payload = {"collection": {"items": [item, {"data": []}], "metadata": {}}}

    html = render_image_gallery("Curiosity", payload, ApiVariant.SEARCH)

    assert html.count('class="gallery-item"') == 2
    assert "No description available" in html
    assert "Untitled" in html
    assert 'src=""' in html


def test_empty_results_render_no_results_message() -> None:
    photos_html = render_image_gallery("Curiosity", _photos_data(count=0), ApiVariant.PHOTOS)
    search_html = render_image_gallery("Spirit", search_payload(0), ApiVariant.SEARCH)

    assert "No recent photos available" in photos_html
    assert "gallery-grid" not in photos_html
    assert "No images found for Spirit" in search_html
    assert "gallery-grid" not in search_html


def test_markup_is_escaped() -> None:
    payload = search_payload(1, description="<script>alert(1)</script>")

    html = render_image_gallery("Curiosity", payload, ApiVariant.SEARCH)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


# ------------------------------------------------------------------
# Content state machine
# ------------------------------------------------------------------


def test_loading_view_when_no_data() -> None:
    html = render_rover_content(_photos_state(loading=True), ApiVariant.PHOTOS)
    assert "Loading Curiosity data..." in html


def test_loading_view_suppressed_once_data_exists() -> None:
    state = _photos_state(loading=True, rover_data={"Curiosity": _photos_data()})

    html = render_rover_content(state, ApiVariant.PHOTOS)

    assert "Loading" not in html
    assert "Curiosity Rover" in html


def test_error_banner_replaces_content() -> None:
    state = _photos_state(error="Failed to load rover data. Please try again.")

    html = render_rover_content(state, ApiVariant.PHOTOS)

    assert '<div class="error">Error: Failed to load rover data. Please try again.</div>' in html


def test_prompt_when_idle_without_data() -> None:
    assert "Select a rover to view images" in render_rover_content(_search_state(), ApiVariant.SEARCH)


def test_page_contains_every_section() -> None:
    state = _search_state(rover_data={"Curiosity": search_payload(2)})

    page = render_page(state, ApiVariant.SEARCH)

    assert page.startswith("<!DOCTYPE html>")
    assert "<header>" in page
    assert "rover-tabs" in page
    assert "Curiosity Rover" in page
    assert "NASA&#39;s Image and Video Library" in page
    assert 'data-user="Explorer"' in page


def test_footer_names_data_source() -> None:
    footer = render_footer(ApiVariant.PHOTOS)

    assert "Data provided by NASA&#39;s Mars Rover API | Built with Functional Programming" in footer
    assert "snapshot" not in footer
