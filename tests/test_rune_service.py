"""Tests for runes, summoner spells and skill order extraction."""
import copy

import httpx
import pytest

from application.services.rune_service import (
    extract_legacy_runes,
    extract_summary,
    keystone_name,
    rune_page_from,
    skill_plan_from,
    tree_of_perk,
)
from domain.enums import DataSource
from domain.errors import InsufficientDataError, ShapeError
from infrastructure.serialization import SerializedState

CONQUEROR_PAGE = {
    "wr": 51.234,
    "n": 5000,
    "page": {"pri": 0, "sec": 4},
    "set": {"pri": [8010, 9111, 9104, 8299], "sec": [8444, 8453], "mod": [5005, 5008, 5001]},
}

ELECTROCUTE_PAGE = {
    "wr": 54.0,
    "n": 300,
    "page": {"pri": 1, "sec": 0},
    "set": {"pri": [8112, 8139, 8138, 8135], "sec": [9111, 8014], "mod": [5008, 5008, 5001]},
}

SUMMARY = {
    "summary": {
        "pick": {
            "runes": CONQUEROR_PAGE,
            "sums": {"ids": [4, 12], "wr": 50.5, "n": 6000},
            "skillpriority": {"id": "QEW"},
            "skillorder": {"id": 131214111332443, "wr": 52.1, "n": 3000},
        },
        "win": {
            "runes": ELECTROCUTE_PAGE,
            "sums": {"ids": [4, 12], "wr": 53.0, "n": 400},
            "skillpriority": {"id": "QWE"},
            "skillorder": {"id": "121314121232443", "wr": 55.0, "n": 100},
        },
    },
    "skillEarly": [
        [[55.0, 60.0, 1000], [50.0, 20.0, 300], [49.0, 20.0, 200], [0, 0, 0]],
        [[52.0, 30.0, 500], [51.0, 40.0, 700], [53.0, 30.0, 500]],
    ],
}


class TestHelpers:
    @pytest.mark.parametrize("perk, tree", [
        (8010, 8000),
        (8112, 8100),
        (8229, 8200),
        (8351, 8300),
        (8437, 8400),
        (9923, 8100),
        (9111, 8000),
        (5008, None),
    ])
    def test_tree_of_perk(self, perk, tree):
        assert tree_of_perk(perk) == tree

    def test_keystone_name(self):
        assert keystone_name(8010) == "Conqueror"
        assert keystone_name(1) == "Keystone 1"


class TestRunePageFrom:
    def test_full_page(self):
        page = rune_page_from(CONQUEROR_PAGE, DataSource.MOST_COMMON, min_games=20)
        assert page.primary_tree_id == 8000
        assert page.secondary_tree_id == 8400
        assert page.perk_ids == (8010, 9111, 9104, 8299, 8444, 8453, 5005, 5008, 5001)
        assert page.keystone_name == "Conqueror"
        assert page.win_rate == 51.23
        assert page.stat_shards == (5005, 5008, 5001)

    def test_page_index_fills_unknown_tree(self):
        raw = copy.deepcopy(CONQUEROR_PAGE)
        raw["set"]["sec"] = [1, 2]
        page = rune_page_from(raw, DataSource.MOST_COMMON, min_games=20)
        assert page.secondary_tree_id == 8400

    @pytest.mark.parametrize("page, secondary, expected", [
        ({"pri": 1, "sec": 4}, [8242, 8444], 8400),  # Unflinching is Resolve
        ({"pri": 0, "sec": 3}, [8410, 8304], 8300),  # Approach Velocity is Inspiration
        ({"pri": 1, "sec": 0}, [8299, 9111], 8000),  # Last Stand is Precision
    ])
    def test_page_index_wins_over_perk_range(self, page, secondary, expected):
        raw = copy.deepcopy(ELECTROCUTE_PAGE if page["pri"] == 1 else CONQUEROR_PAGE)
        raw["page"] = page
        raw["set"]["sec"] = secondary
        rune_page = rune_page_from(raw, DataSource.MOST_COMMON, min_games=20)
        assert rune_page.secondary_tree_id == expected
        assert rune_page.perk_ids[4:6] == tuple(secondary)

    def test_perk_range_used_without_page_index(self):
        raw = copy.deepcopy(CONQUEROR_PAGE)
        del raw["page"]
        page = rune_page_from(raw, DataSource.MOST_COMMON, min_games=20)
        assert (page.primary_tree_id, page.secondary_tree_id) == (8000, 8400)

    def test_non_finite_sample_reads_as_zero(self):
        raw = copy.deepcopy(CONQUEROR_PAGE)
        raw["n"] = float("inf")
        assert rune_page_from(raw, DataSource.MOST_COMMON, min_games=20) is None

    @pytest.mark.parametrize("mutate", [
        lambda r: r["set"].update(pri=[8010, 9111, 9104]),
        lambda r: r["set"].update(mod=[5005, 5008, "5001"]),
        lambda r: r["page"].update(sec=0),  # same tree as the primary
        lambda r: r.update(n=5),
        lambda r: r.pop("set"),
    ])
    def test_rejects_incomplete_pages(self, mutate):
        raw = copy.deepcopy(CONQUEROR_PAGE)
        mutate(raw)
        assert rune_page_from(raw, DataSource.MOST_COMMON, min_games=20) is None


class TestSkillPlanFrom:
    def test_valid_plan(self):
        plan = skill_plan_from({"id": "QEW"}, {"id": "131214111332443", "wr": 52.1, "n": 3000},
                               DataSource.MOST_COMMON, min_games=20)
        assert plan.max_order_label == "QEW"
        assert plan.level_keys == "QEQWQRQQQEEWRRE"

    @pytest.mark.parametrize("priority, sequence", [
        ("QXZ", "131214111332443"),
        ("Q", "131214111332443"),
        ("QEW", "13121411133244"),
        ("QEW", "131214111332445"),
    ])
    def test_rejects_malformed(self, priority, sequence):
        assert skill_plan_from({"id": priority}, {"id": sequence, "wr": 50, "n": 500},
                               DataSource.MOST_COMMON, min_games=20) is None


class TestExtractSummary:
    def test_both_sections(self):
        summary = extract_summary(SUMMARY, min_games=20, skill_early=SUMMARY["skillEarly"])

        assert [r.source for r in summary.runes] == [DataSource.MOST_COMMON, DataSource.HIGHEST_WR]
        assert [r.keystone_name for r in summary.runes] == ["Conqueror", "Electrocute"]
        assert summary.runes[1].secondary_tree_id == 8000
        # the same spell pair from both sections is kept once
        assert [s.spell_ids for s in summary.summoner_spells] == [(4, 12)]
        assert [p.level_sequence for p in summary.skill_plans] == ["131214111332443", "121314121232443"]
        assert len(summary.skill_early) == 2
        assert summary.skill_early[0].skills[0].games == 1000

    def test_thin_sections_are_skipped(self):
        summary = extract_summary(SUMMARY, min_games=1000)
        assert [r.keystone_name for r in summary.runes] == ["Conqueror"]
        assert [p.max_order_label for p in summary.skill_plans] == ["QEW"]

    def test_nothing_usable_is_insufficient(self):
        with pytest.raises(InsufficientDataError):
            extract_summary(SUMMARY, min_games=100000)

    def test_missing_summary_is_shape_error(self):
        with pytest.raises(ShapeError):
            extract_summary({"counters": []}, min_games=20)


class TestLegacyRunes:
    def test_first_match_is_highest_win_rate(self):
        state = SerializedState([
            {"runes": "2"},
            {"runes": "3"},
            CONQUEROR_PAGE,
            ELECTROCUTE_PAGE,
        ])
        summary = extract_legacy_runes(state, min_games=20)
        assert [(r.source, r.keystone_name) for r in summary.runes] == [
            (DataSource.HIGHEST_WR, "Conqueror"),
            (DataSource.MOST_COMMON, "Electrocute"),
        ]

    def test_no_rune_objects(self):
        with pytest.raises(ShapeError):
            extract_legacy_runes(SerializedState([{"a": 1}]), min_games=20)


class TestRuneService:
    @pytest.mark.asyncio
    async def test_runes_spells_and_skills(self, make_engine):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return httpx.Response(200, json=SUMMARY)

        async with make_engine(handler) as engine:
            runes = await engine.get_recommended_runes("aatrox", "top")
            spells = await engine.get_summoner_spells("aatrox", "top")
            plans = await engine.get_skill_plans("aatrox", "top")
            summary = await engine.get_build_summary("aatrox", "top")

        assert len(runes) == 2 and len(spells) == 1 and len(plans) == 2
        assert len(summary.skill_early) == 2
        assert len(seen) == 1
        assert seen[0]["ep"] == "summary"

    @pytest.mark.asyncio
    async def test_build_page_state(self, make_engine, qwik_page):
        objs = [
            {"summary": "1", "spells": [], "skillOrder": [], "skillEarly": None},
            SUMMARY["summary"],
        ]

        def handler(request):
            if request.url.path == "/mega/":
                return httpx.Response(500)
            return httpx.Response(200, text=qwik_page(objs))

        async with make_engine(handler) as engine:
            runes = await engine.get_recommended_runes("aatrox", "top")

        assert [r.keystone_name for r in runes] == ["Conqueror", "Electrocute"]

    @pytest.mark.asyncio
    async def test_legacy_page_state(self, make_engine, qwik_page):
        objs = [{"runes": "1"}, CONQUEROR_PAGE]

        def handler(request):
            if request.url.path == "/mega/":
                return httpx.Response(500)
            return httpx.Response(200, text=qwik_page(objs))

        async with make_engine(handler) as engine:
            runes = await engine.get_recommended_runes("aatrox", "top")
            plans = await engine.get_skill_plans("aatrox", "top")

        assert [(r.source, r.keystone_name) for r in runes] == [(DataSource.HIGHEST_WR, "Conqueror")]
        assert plans == []
