"""Matchup extraction: win rates of a champion against every opponent."""
import logging
import math
import re
from typing import Any, List, Optional

from config import settings
from domain.entities import MatchupRecord
from domain.enums import Lane
from domain.errors import InsufficientDataError, ShapeError
from domain.interfaces import IReferenceData
from infrastructure.serialization import SerializedState
from .stats_service import Resolve, StatsService, plain

logger = logging.getLogger(__name__)

COUNTER_ENDPOINT = "counter"
COUNTERS_SIGNATURE = ("counters",)

# Markup fallback. Each opponent tile is a link to the versus page followed
# (within a couple of KB) by "<!--t=..-->51.23<!---->%" and "1,234 Games".
_MARKUP_WINDOW = 2000
_MARKUP_WIN_RATE = re.compile(r"<!--t=\w+-->([\d.]+)<!---->%")
_MARKUP_GAMES = re.compile(r"([\d,]+)\s*Games")


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def extract_counters(
    payload: Any,
    reference: IReferenceData,
    min_games: int,
    resolve: Resolve = plain,
) -> List[MatchupRecord]:
    """Map ``{counters: [{cid, vsWr, n, defaultLane}]}`` to records.

    Entries below ``min_games``, with unknown champion ids or missing fields
    are dropped.
    """
    counters = resolve(payload.get("counters")) if isinstance(payload, dict) else None
    if not isinstance(counters, list):
        raise ShapeError("matchup payload has no 'counters' list")

    records: List[MatchupRecord] = []
    seen = set()
    for entry in map(resolve, counters):
        if not isinstance(entry, dict):
            continue
        win_rate = _number(resolve(entry.get("vsWr")))
        games = _number(resolve(entry.get("n")))
        if win_rate is None or games is None or not 0 <= win_rate <= 100:
            continue
        if games < min_games:
            continue
        champ = reference.champion_by_key(resolve(entry.get("cid")))
        if champ is None or champ.alias in seen:
            continue
        seen.add(champ.alias)
        default_lane = resolve(entry.get("defaultLane"))
        records.append(MatchupRecord(
            opponent_alias=champ.alias,
            opponent_name=champ.name,
            win_rate=round(win_rate, 2),
            sample_size=int(games),
            default_lane=default_lane if isinstance(default_lane, str) else None,
        ))

    if not records:
        raise InsufficientDataError(f"no matchup with at least {min_games} games")
    return records


def parse_counters_markup(html: str, alias: str, reference: IReferenceData, min_games: int) -> List[MatchupRecord]:
    """Scrape matchup tiles from the rendered counters page."""
    link = re.compile(rf'href="/lol/{re.escape(alias)}/vs/([^/"]+)/build/[^"]*"')
    records: List[MatchupRecord] = []
    seen = set()
    for match in link.finditer(html):
        enemy = match.group(1)
        if enemy in seen:
            continue
        window = html[match.start():match.start() + _MARKUP_WINDOW]
        wr_match = _MARKUP_WIN_RATE.search(window)
        games_match = _MARKUP_GAMES.search(window)
        if not wr_match or not games_match:
            continue
        try:
            win_rate = float(wr_match.group(1))
            games = int(games_match.group(1).replace(",", ""))
        except ValueError:
            continue
        if games < min_games:
            continue
        champ = reference.champion_by_alias(enemy)
        records.append(MatchupRecord(
            opponent_alias=enemy,
            opponent_name=champ.name if champ else enemy[:1].upper() + enemy[1:],
            win_rate=round(win_rate, 2),
            sample_size=games,
        ))
        seen.add(enemy)
    return records


class MatchupService(StatsService[List[MatchupRecord]]):
    """Raw matchup list for (champion, lane); sorting lives in pick_advisor."""

    min_games = settings.MIN_MATCHUP_GAMES

    async def get_matchups(self, alias: str, lane: Lane) -> List[MatchupRecord]:
        return list(await self.fetch(alias, lane) or [])

    async def fetch_primary(self, alias: str, lane: Lane, patch: str) -> List[MatchupRecord]:
        payload = await self.client.query(COUNTER_ENDPOINT, self.query_params(alias, lane, patch))
        return extract_counters(payload, self.reference, self.min_games)

    async def fetch_secondary(self, alias: str, lane: Lane) -> List[MatchupRecord]:
        html = await self.client.page(f"/lol/{alias}/counters/", self.page_params(lane))
        state = SerializedState.from_html(html)
        if state is not None:
            idx = state.find_root(COUNTERS_SIGNATURE)
            if idx is not None:
                return extract_counters(state.nodes[idx], self.reference, self.min_games, state.expand)
        logger.debug(f"No matchup state for {alias}, scanning markup")
        records = parse_counters_markup(html, alias, self.reference, self.min_games)
        if not records:
            raise ShapeError(f"counters page for {alias} has neither state nor matchup tiles")
        return records
