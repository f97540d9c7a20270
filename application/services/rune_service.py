"""Runes, summoner spells and skill order from the build summary."""
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from config import settings
from domain.entities import (
    BuildSummary,
    RunePageRecord,
    SKILL_LEVELS,
    SkillCell,
    SkillEarlyLevel,
    SkillPlanRecord,
    SummonerSpellRecord,
)
from domain.entities.rune_page import PRIMARY_PERKS, SECONDARY_PERKS, STAT_SHARDS
from domain.enums import DataSource, Lane
from domain.errors import InsufficientDataError, ShapeError
from infrastructure.serialization import SerializedState
from .stats_service import Resolve, StatsService, plain

logger = logging.getLogger(__name__)

SUMMARY_ENDPOINT = "summary"
BUILD_PAGE_SIGNATURE = ("summary", "spells", "skillOrder")
LEGACY_RUNE_PAGES = 2

# Lolalytics page index -> Riot rune tree (style) id
TREE_STYLE_IDS = {0: 8000, 1: 8100, 2: 8200, 3: 8300, 4: 8400}
TREE_NAMES = {8000: "Precision", 8100: "Domination", 8200: "Sorcery", 8300: "Inspiration", 8400: "Resolve"}

KEYSTONE_NAMES = {
    8005: "Press the Attack",
    8008: "Lethal Tempo",
    8010: "Conqueror",
    8021: "Fleet Footwork",
    8112: "Electrocute",
    8124: "Predator",
    8128: "Dark Harvest",
    9923: "Hail of Blades",
    8214: "Summon Aery",
    8229: "Arcane Comet",
    8230: "Phase Rush",
    8351: "Glacial Augment",
    8360: "Unsealed Spellbook",
    8369: "First Strike",
    8437: "Grasp of the Undying",
    8439: "Aftershock",
    8465: "Guardian",
}

_SKILL_LETTERS = set("QWER")
_SKILL_DIGITS = set("1234")


def tree_of_perk(perk_id: int) -> Optional[int]:
    """Rune tree a perk belongs to, from its id range.

    Exact for keystones. A few minor runes sit outside their tree's range
    (8242 is Resolve, 8410 is Inspiration), so this is only a fallback.
    """
    if 8000 <= perk_id < 8500:
        return perk_id // 100 * 100
    if perk_id == 9923:  # Hail of Blades
        return 8100
    if 9100 <= perk_id < 9200:  # Precision legend runes
        return 8000
    return None


def keystone_name(perk_id: int) -> str:
    return KEYSTONE_NAMES.get(perk_id, f"Keystone {perk_id}")


def _tree_of_page(index: Any) -> Optional[int]:
    if isinstance(index, int) and not isinstance(index, bool):
        return TREE_STYLE_IDS.get(index)
    return None


def _finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _int_list(value: Any, size: int) -> Optional[Tuple[int, ...]]:
    if not isinstance(value, list) or len(value) != size:
        return None
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
        return None
    return tuple(value)


def _stat(section: Dict[str, Any], resolve: Resolve) -> Tuple[float, int]:
    wr = resolve(section.get("wr"))
    n = resolve(section.get("n"))
    win_rate = float(wr) if _finite(wr) else 0.0
    games = int(n) if _finite(n) else 0
    return round(win_rate, 2), games


def rune_page_from(raw: Any, source: DataSource, min_games: int, resolve: Resolve = plain) -> Optional[RunePageRecord]:
    """``{wr, n, page: {pri, sec}, set: {pri[4], sec[2], mod[3]}}`` to a page, or None."""
    raw = resolve(raw)
    if not isinstance(raw, dict):
        return None
    perk_set = resolve(raw.get("set"))
    page = resolve(raw.get("page"))
    if not isinstance(perk_set, dict):
        return None
    primary = _int_list(resolve(perk_set.get("pri")), PRIMARY_PERKS)
    secondary = _int_list(resolve(perk_set.get("sec")), SECONDARY_PERKS)
    shards = _int_list(resolve(perk_set.get("mod")), STAT_SHARDS)
    if primary is None or secondary is None or shards is None:
        return None

    page = page if isinstance(page, dict) else {}
    # the page index is authoritative; perk id ranges misfile some minor runes
    primary_tree = _tree_of_page(resolve(page.get("pri"))) or tree_of_perk(primary[0])
    secondary_tree = _tree_of_page(resolve(page.get("sec"))) or tree_of_perk(secondary[0])
    if not primary_tree or not secondary_tree or primary_tree == secondary_tree:
        return None

    win_rate, games = _stat(raw, resolve)
    if games < min_games:
        return None
    return RunePageRecord(
        primary_tree_id=primary_tree,
        secondary_tree_id=secondary_tree,
        perk_ids=primary + secondary + shards,
        win_rate=win_rate,
        sample_size=games,
        source=source,
        keystone_name=keystone_name(primary[0]),
    )


def spells_from(raw: Any, source: DataSource, min_games: int, resolve: Resolve = plain) -> Optional[SummonerSpellRecord]:
    raw = resolve(raw)
    if not isinstance(raw, dict):
        return None
    ids = _int_list(resolve(raw.get("ids")), 2)
    if ids is None:
        return None
    win_rate, games = _stat(raw, resolve)
    if games < min_games:
        return None
    return SummonerSpellRecord(spell_ids=(ids[0], ids[1]), win_rate=win_rate, sample_size=games, source=source)


def skill_plan_from(
    priority: Any,
    order: Any,
    source: DataSource,
    min_games: int,
    resolve: Resolve = plain,
) -> Optional[SkillPlanRecord]:
    """Combine ``skillpriority {id: "QEW"}`` and ``skillorder {id: 131...}``."""
    priority, order = resolve(priority), resolve(order)
    if not isinstance(priority, dict) or not isinstance(order, dict):
        return None
    label = resolve(priority.get("id"))
    sequence = resolve(order.get("id"))
    if not isinstance(label, str) or len(label) < 2 or not set(label) <= _SKILL_LETTERS:
        return None
    if isinstance(sequence, bool) or not isinstance(sequence, (int, str)):
        return None
    sequence = str(sequence)
    if len(sequence) != SKILL_LEVELS or not set(sequence) <= _SKILL_DIGITS:
        return None
    win_rate, games = _stat(order, resolve)
    if games < min_games:
        return None
    return SkillPlanRecord(
        max_order_label=label,
        level_sequence=sequence,
        win_rate=win_rate,
        sample_size=games,
        source=source,
    )


def skill_early_from(raw: Any, resolve: Resolve = plain) -> Tuple[SkillEarlyLevel, ...]:
    """Levels 1-3, one ``[wr, pick_rate, games]`` cell per ability."""
    raw = resolve(raw)
    if not isinstance(raw, list):
        return ()
    levels = []
    for level in map(resolve, raw):
        if not isinstance(level, list):
            continue
        cells = []
        for cell in map(resolve, level):
            if not isinstance(cell, list):
                continue
            values = [resolve(v) for v in cell[:3]] + [0] * (3 - len(cell[:3]))
            if not all(_finite(v) for v in values):
                continue
            cells.append(SkillCell(win_rate=float(values[0]), pick_rate=float(values[1]), games=int(values[2])))
        if cells:
            levels.append(SkillEarlyLevel(skills=tuple(cells)))
    return tuple(levels)


def extract_summary(
    payload: Any,
    min_games: int,
    resolve: Resolve = plain,
    skill_early: Any = None,
) -> BuildSummary:
    """Both sections (most common, highest win rate) of ``{summary: {pick, win}}``.

    Spell pairs and skill plans repeated by the second section are kept once.
    """
    summary = resolve(payload.get("summary")) if isinstance(payload, dict) else None
    if not isinstance(summary, dict):
        raise ShapeError("build summary payload has no 'summary' object")

    runes: List[RunePageRecord] = []
    spells: List[SummonerSpellRecord] = []
    plans: List[SkillPlanRecord] = []
    for source in DataSource.ordered():
        section = resolve(summary.get(source.section_key))
        if not isinstance(section, dict):
            continue
        page = rune_page_from(section.get("runes"), source, min_games, resolve)
        if page is not None:
            runes.append(page)
        pair = spells_from(section.get("sums"), source, min_games, resolve)
        if pair is not None and all(s.spell_ids != pair.spell_ids for s in spells):
            spells.append(pair)
        plan = skill_plan_from(section.get("skillpriority"), section.get("skillorder"), source, min_games, resolve)
        if plan is not None and all(p.level_sequence != plan.level_sequence for p in plans):
            plans.append(plan)

    result = BuildSummary(
        runes=tuple(runes),
        summoner_spells=tuple(spells),
        skill_plans=tuple(plans),
        skill_early=skill_early_from(skill_early, resolve) if skill_early is not None else (),
    )
    if result.is_empty:
        raise InsufficientDataError(f"no rune page or skill plan with at least {min_games} games")
    return result


def extract_legacy_runes(state: SerializedState, min_games: int) -> BuildSummary:
    """Older page shape: loose objects carrying a ``runes`` reference.

    The first match is the highest win rate page, the second the most common.
    """
    def has_runes(node: Any) -> bool:
        if not isinstance(node, dict) or "runes" not in node:
            return False
        target = state.resolve_ref(node["runes"])
        return isinstance(target, dict) and {"set", "page", "wr"} <= target.keys()

    runes: List[RunePageRecord] = []
    sources = (DataSource.HIGHEST_WR, DataSource.MOST_COMMON)
    for source, idx in zip(sources, state.find_all(has_runes, limit=LEGACY_RUNE_PAGES)):
        page = rune_page_from(state.nodes[idx]["runes"], source, min_games, state.expand)
        if page is not None:
            runes.append(page)
    if not runes:
        raise ShapeError("no rune objects in page state")
    return BuildSummary(runes=tuple(runes))


class RuneService(StatsService[BuildSummary]):
    """Build summary (runes, spells, skills) for (champion, lane)."""

    min_games = settings.MIN_SUMMARY_GAMES

    async def get_summary(self, alias: str, lane: Lane) -> Optional[BuildSummary]:
        return await self.fetch(alias, lane)

    async def fetch_primary(self, alias: str, lane: Lane, patch: str) -> BuildSummary:
        payload = await self.client.query(SUMMARY_ENDPOINT, self.query_params(alias, lane, patch))
        return extract_summary(payload, self.min_games, skill_early=payload.get("skillEarly"))

    async def fetch_secondary(self, alias: str, lane: Lane) -> BuildSummary:
        path = f"/lol/{alias}/aram/build/" if lane.is_aram else f"/lol/{alias}/build/"
        state = SerializedState.from_html(await self.client.page(path, self.page_params(lane)))
        if state is None:
            raise ShapeError(f"build page for {alias} has no serialized state")
        idx = state.find_root(BUILD_PAGE_SIGNATURE)
        if idx is None:
            logger.debug(f"No build root for {alias}, trying legacy rune objects")
            return extract_legacy_runes(state, self.min_games)
        main = state.nodes[idx]
        return extract_summary(main, self.min_games, state.expand, skill_early=main.get("skillEarly"))
