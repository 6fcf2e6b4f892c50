from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from fakes import FakeProxy, latest_photos_payload, manifest_payload, search_payload
from marsdash.config import ApiVariant, DashboardConfig
from marsdash.dashboard import Dashboard, file_sink
from marsdash.exceptions import UnknownRoverError

ROVERS = ("Curiosity", "Opportunity", "Spirit")


def _photos_proxy() -> FakeProxy:
    return FakeProxy(
        manifests={rover: manifest_payload(rover) for rover in ROVERS},
        photos={rover: latest_photos_payload(2, rover) for rover in ROVERS},
    )


def _dashboard(proxy: FakeProxy, variant: ApiVariant = ApiVariant.PHOTOS, **kwargs: object) -> Dashboard:
    return Dashboard(DashboardConfig(variant=variant), proxy, **kwargs)  # type: ignore[arg-type]


@pytest.mark.asyncio
@pytest.mark.parametrize("rover", ROVERS)
async def test_select_sets_loading_before_any_response(rover: str) -> None:
    proxy = _photos_proxy()
    dashboard = _dashboard(proxy)

    task = dashboard.select(rover)

    assert dashboard.state.selected_rover == rover
    assert dashboard.state.loading is True
    assert proxy.calls == []
    assert f"Loading {rover} data..." in (dashboard.last_page or "")
    await task


@pytest.mark.asyncio
async def test_select_unknown_rover_raises() -> None:
    dashboard = _dashboard(_photos_proxy())

    with pytest.raises(UnknownRoverError):
        dashboard.select("Sojourner")

    assert dashboard.state.selected_rover == "Curiosity"
    assert dashboard.store.render_count == 0


@pytest.mark.asyncio
async def test_start_renders_then_loads_initial_rover() -> None:
    pages: list[str] = []
    dashboard = _dashboard(_photos_proxy(), sink=pages.append)

    task = dashboard.start()
    assert len(pages) == 2
    assert "Select a rover to view data" in pages[0]
    assert "Loading Curiosity data..." in pages[1]

    await task

    assert dashboard.state.loading is False
    assert dashboard.state.error is None
    assert "Curiosity Rover" in pages[-1]


@pytest.mark.asyncio
async def test_photos_fetch_combines_manifest_and_latest_photos() -> None:
    proxy = _photos_proxy()
    dashboard = _dashboard(proxy)

    await dashboard.select("Spirit")

    data = dashboard.state.rover_data["Spirit"]
    assert data["photo_manifest"]["name"] == "Spirit"
    assert len(data["latest_photos"]) == 2
    assert sorted(proxy.calls) == [("latest-photos", "Spirit"), ("manifest", "Spirit")]


@pytest.mark.asyncio
async def test_photos_fetch_waits_for_both_requests() -> None:
    proxy = _photos_proxy()
    photos_gate = proxy.gate("latest-photos", "Spirit")
    dashboard = _dashboard(proxy)

    task = dashboard.select("Spirit")
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    # Manifest has resolved by now; nothing is merged until photos arrive too.
    assert "Spirit" not in dashboard.state.rover_data
    assert dashboard.state.loading is True

    photos_gate.set()
    await task

    assert "Spirit" in dashboard.state.rover_data
    assert dashboard.state.loading is False


@pytest.mark.asyncio
async def test_search_fetch_issues_single_request() -> None:
    proxy = FakeProxy(searches={"Perseverance": search_payload(5)})
    dashboard = _dashboard(proxy, ApiVariant.SEARCH)

    await dashboard.select("Perseverance")

    assert proxy.calls == [("images", "Perseverance")]
    assert dashboard.state.rover_data["Perseverance"]["collection"]["metadata"]["total_hits"] == 5
    assert "Images from Perseverance" in (dashboard.last_page or "")


@pytest.mark.asyncio
async def test_failure_sets_error_and_discards_partial_results() -> None:
    proxy = _photos_proxy()
    proxy.failures.add(("latest-photos", "Opportunity"))
    dashboard = _dashboard(proxy)

    await dashboard.select("Opportunity")

    state = dashboard.state
    assert state.loading is False
    assert state.error == "Failed to load rover data. Please try again."
    assert "Opportunity" not in state.rover_data
    assert '<div class="error">Error: Failed to load rover data. Please try again.</div>' in (dashboard.last_page or "")


@pytest.mark.asyncio
async def test_search_failure_message() -> None:
    proxy = FakeProxy(failures={("images", "Spirit")})
    dashboard = _dashboard(proxy, ApiVariant.SEARCH)

    await dashboard.select("Spirit")

    assert dashboard.state.error == "Failed to load rover images. Please try again."


@pytest.mark.asyncio
async def test_success_clears_previous_error() -> None:
    proxy = _photos_proxy()
    proxy.failures.add(("manifest", "Spirit"))
    dashboard = _dashboard(proxy)
    await dashboard.select("Spirit")
    assert dashboard.state.error is not None

    await dashboard.select("Curiosity")

    assert dashboard.state.error is None
    assert set(dashboard.state.rover_data) == {"Curiosity"}


@pytest.mark.asyncio
async def test_late_response_for_deselected_rover_is_cached_only() -> None:
    proxy = _photos_proxy()
    opportunity_gate = proxy.gate("manifest", "Opportunity")
    spirit_gate = proxy.gate("manifest", "Spirit")
    dashboard = _dashboard(proxy)

    first = dashboard.select("Opportunity")
    second = dashboard.select("Spirit")

    opportunity_gate.set()
    await first

    state = dashboard.state
    assert "Opportunity" in state.rover_data
    assert state.selected_rover == "Spirit"
    assert state.loading is True
    assert "Loading Spirit data..." in (dashboard.last_page or "")

    spirit_gate.set()
    await second

    assert set(dashboard.state.rover_data) == {"Opportunity", "Spirit"}
    assert dashboard.state.loading is False
    assert "Spirit Rover" in (dashboard.last_page or "")


@pytest.mark.asyncio
async def test_late_failure_for_deselected_rover_does_not_touch_visible_state() -> None:
    proxy = _photos_proxy()
    proxy.failures.add(("manifest", "Opportunity"))
    opportunity_gate = proxy.gate("manifest", "Opportunity")
    spirit_gate = proxy.gate("manifest", "Spirit")
    dashboard = _dashboard(proxy)

    first = dashboard.select("Opportunity")
    second = dashboard.select("Spirit")
    opportunity_gate.set()
    await first

    assert dashboard.state.error is None
    assert dashboard.state.loading is True

    spirit_gate.set()
    await second
    assert dashboard.state.error is None


@pytest.mark.asyncio
async def test_reselection_does_not_cancel_earlier_fetch() -> None:
    proxy = _photos_proxy()
    gate = proxy.gate("manifest", "Spirit")
    dashboard = _dashboard(proxy)

    first = dashboard.select("Spirit")
    second = dashboard.select("Spirit")
    gate.set()
    await dashboard.wait_idle()

    assert not first.cancelled()
    assert not second.cancelled()
    assert proxy.calls.count(("manifest", "Spirit")) == 2


@pytest.mark.asyncio
async def test_rover_data_never_shrinks_across_selections() -> None:
    proxy = _photos_proxy()
    seen: list[set[str]] = []
    dashboard = _dashboard(proxy, sink=lambda _page: seen.append(set(dashboard.state.rover_data)))

    for rover in ("Spirit", "Curiosity", "Spirit", "Opportunity"):
        await dashboard.select(rover)

    for earlier, later in zip(seen, seen[1:]):
        assert earlier <= later
    assert seen[-1] == set(ROVERS)


@pytest.mark.asyncio
async def test_file_sink_rewrites_page_on_every_render(tmp_path: Path) -> None:
    output = tmp_path / "public" / "index.html"
    dashboard = _dashboard(_photos_proxy(), sink=file_sink(output))

    await dashboard.start()

    text = output.read_text(encoding="utf-8")
    assert "Curiosity Rover" in text
    assert not (tmp_path / "public" / ".index.html.tmp").exists()
