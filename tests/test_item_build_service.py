"""Tests for item build extraction."""
import httpx
import pytest

from application.services.item_build_service import (
    DEFAULT_STARTER,
    HEALTH_POTION,
    best_set,
    extract_build,
    infer_starting_items,
    is_boots,
    parse_item_ids,
    slot_by_slot,
)
from domain.errors import InsufficientDataError, ShapeError

FULL_SIX = "3078_3047_6333_3053_3071_3065"

BUILD = {
    "itemSets": {
        "itemBootSet6": [["3078_3047_6333", 400, 200], [FULL_SIX, 120, 65]],
        "startSet": [["1055_2003", 300, 150], ["1054_2003", 100, 52]],
    }
}

SLOT_SETS = {
    "itemSet1": [["3078", 50, 25], ["6653", 2, 1]],
    "itemSet2": [["3078_6333", 40, 20]],
    "itemSet3": [["3078_6333_3053", 30, 15]],
    "itemSet4": [["3078_6333_3053_3071", 20, 10]],
    "itemSet5": [["3078_6333_3053_3071_3065", 10, 5]],
    "itemBootSet1": [["3047", 100, 50], ["3047_3111", 200, 100]],
}


class TestHelpers:
    def test_parse_item_ids(self):
        assert parse_item_ids("3161_3047_6699") == (3161, 3047, 6699)
        assert parse_item_ids(3047) == (3047,)
        assert parse_item_ids("x_0_3047") == (3047,)

    def test_is_boots(self):
        assert is_boots(3047) and is_boots(3111) and is_boots(3006)
        assert not is_boots(3078)

    def test_best_set_prefers_complete_sets(self):
        assert best_set(BUILD["itemSets"]["itemBootSet6"], 6) == (3078, 3047, 6333, 3053, 3071, 3065)
        # nothing long enough: most played wins
        assert best_set([["3078_3047", 90, 40], ["3078", 200, 90]], 6) == (3078,)
        assert best_set([["3078", 2, 1]], 1) == ()

    def test_slot_by_slot_inserts_boots_second(self):
        assert slot_by_slot(SLOT_SETS) == (3078, 3047, 6333, 3053, 3071, 3065)

    @pytest.mark.parametrize("first_item, starter", [
        (6653, 1056),  # Liandry's: Doran's Ring
        (3068, 1054),  # Sunfire: Doran's Shield
        (3078, DEFAULT_STARTER),
        (1055, 1055),  # cheap first item is itself the starter
        (None, DEFAULT_STARTER),
    ])
    def test_infer_starting_items(self, reference, first_item, starter):
        assert infer_starting_items(first_item, reference) == (starter, HEALTH_POTION)


class TestExtractBuild:
    def test_full_build_and_start_set(self, reference):
        build = extract_build(BUILD, reference)
        assert build.full_build == (3078, 3047, 6333, 3053, 3071, 3065)
        assert build.starting_items == (1055, 2003)

    def test_slot_by_slot_when_full_sets_are_thin(self, reference):
        build = extract_build({"itemSets": SLOT_SETS}, reference)
        assert build.full_build == (3078, 3047, 6333, 3053, 3071, 3065)
        assert build.starting_items == (DEFAULT_STARTER, HEALTH_POTION)

    def test_missing_item_sets_is_shape_error(self, reference):
        with pytest.raises(ShapeError):
            extract_build({"summary": {}}, reference)

    def test_nothing_above_threshold(self, reference):
        with pytest.raises(InsufficientDataError):
            extract_build({"itemSets": {"itemBootSet6": [[FULL_SIX, 2, 1]]}}, reference)

    def test_non_finite_game_counts_are_skipped(self, reference):
        payload = {"itemSets": {"itemBootSet6": [["3078_3047_6333", float("inf"), 1], [FULL_SIX, float("nan"), 1], [FULL_SIX, 120, 65]]}}
        assert extract_build(payload, reference).full_build == (3078, 3047, 6333, 3053, 3071, 3065)

    def test_build_is_capped_at_six_items(self, reference):
        payload = {"itemSets": {"itemBootSet6": [[FULL_SIX + "_6617", 50, 25]]}}
        assert len(extract_build(payload, reference).full_build) == 6


class TestItemBuildService:
    @pytest.mark.asyncio
    async def test_get_build_via_json(self, make_engine):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return httpx.Response(200, json=BUILD)

        async with make_engine(handler) as engine:
            build = await engine.get_build("aatrox", "top")

        assert build.full_build[0] == 3078
        assert seen[0]["ep"] == "build-itemset"

    @pytest.mark.asyncio
    async def test_aram_query_slice(self, make_engine):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return httpx.Response(200, json=BUILD)

        async with make_engine(handler) as engine:
            assert await engine.get_build("annie", "aram") is not None

        assert seen[0]["queue"] == "450"
        assert seen[0]["lane"] == "default"

    @pytest.mark.asyncio
    async def test_aram_build_page(self, make_engine, qwik_page):
        objs = [
            {"itemSets": "1"},
            {"itemBootSet6": "2", "startSet": "3"},
            [[FULL_SIX, 120, 60]],
            [["1056_2003", 90, 40]],
        ]
        paths = []

        def handler(request):
            if request.url.path == "/mega/":
                return httpx.Response(404)
            paths.append((request.url.path, dict(request.url.params)))
            return httpx.Response(200, text=qwik_page(objs))

        async with make_engine(handler) as engine:
            build = await engine.get_build("annie", "aram")

        assert paths == [("/lol/annie/aram/build/", {})]
        assert build.full_build == (3078, 3047, 6333, 3053, 3071, 3065)
        assert build.starting_items == (1056, 2003)

    @pytest.mark.asyncio
    async def test_unavailable_build_is_none(self, make_engine):
        async with make_engine(lambda r: httpx.Response(500)) as engine:
            assert await engine.get_build("aatrox", "top") is None
