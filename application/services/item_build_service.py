"""Item build extraction from ``build-itemset`` aggregates."""
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import settings
from domain.entities import BuildRecord
from domain.enums import Lane
from domain.errors import InsufficientDataError, ShapeError
from domain.interfaces import IReferenceData
from infrastructure.serialization import SerializedState
from .stats_service import Resolve, StatsService, plain

BUILD_ENDPOINT = "build-itemset"
ITEM_SETS_SIGNATURE = ("itemSets",)

FULL_BUILD_SIZE = 6
MIN_FULL_BUILD = 4
HEALTH_POTION = 2003
CHEAP_STARTER_GOLD = 500

# starter item -> keywords of the first completed item that call for it
_STARTER_BY_CORE = (
    (1056, ("rod", "luden", "liandry", "everfrost", "malignance", "stormsurge")),  # Doran's Ring
    (1054, ("sunfire", "heartsteel", "hollow", "iceborn", "jak'sho", "unending")),  # Doran's Shield
    (3850, ("shurelya", "moonstone", "redemption", "echoes", "dream maker", "celestial")),  # support item
)
JUNGLE_STARTER = 1103
DEFAULT_STARTER = 1055  # Doran's Blade

_BOOTS = frozenset({3047, 3111, 3117, 3158, 3009})


def is_boots(item_id: int) -> bool:
    return 3006 <= item_id <= 3020 or item_id in _BOOTS


def is_jungle_item(item_id: int) -> bool:
    return 1101 <= item_id <= 1104 or 1035 <= item_id <= 1041


def parse_item_ids(raw: Any) -> Tuple[int, ...]:
    """``"3161_3047_6699"`` (or a bare number) to ``(3161, 3047, 6699)``."""
    out = []
    for part in str(raw).split("_"):
        try:
            item_id = int(part)
        except ValueError:
            continue
        if item_id > 0:
            out.append(item_id)
    return tuple(out)


def _entries(raw: Any, min_games: int, resolve: Resolve = plain) -> List[Tuple[Tuple[int, ...], int]]:
    """``[[ids, games, wins], ...]`` to (ids, games), most played first."""
    raw = resolve(raw)
    if not isinstance(raw, list):
        return []
    out = []
    for entry in map(resolve, raw):
        if not isinstance(entry, (list, tuple)) or len(entry) < 2:
            continue
        games = resolve(entry[1])
        if isinstance(games, bool) or not isinstance(games, (int, float)) or not math.isfinite(games):
            continue
        if games < min_games:
            continue
        ids = parse_item_ids(resolve(entry[0]))
        if ids:
            out.append((ids, int(games)))
    out.sort(key=lambda e: e[1], reverse=True)
    return out


def best_set(
    raw: Any,
    expected_len: int,
    min_games: int = settings.MIN_SET_GAMES,
    resolve: Resolve = plain,
) -> Tuple[int, ...]:
    """Most played set with at least ``expected_len`` items, else the most played one."""
    entries = _entries(raw, min_games, resolve)
    for ids, _ in entries:
        if len(ids) >= expected_len:
            return ids
    return entries[0][0] if entries else ()


def slot_by_slot(sets: Dict[str, Any], resolve: Resolve = plain) -> Tuple[int, ...]:
    """Assemble a build from the per-slot aggregates plus the best boots."""
    result: List[int] = []
    for slot in range(1, FULL_BUILD_SIZE):
        for ids, _ in _entries(sets.get(f"itemSet{slot}"), settings.MIN_SLOT_GAMES, resolve):
            last = ids[-1]
            if last not in result:
                result.append(last)
                break

    boots = [ids[0] for ids, _ in _entries(sets.get("itemBootSet1"), settings.MIN_SET_GAMES, resolve)
             if len(ids) == 1 and is_boots(ids[0])]
    if boots and boots[0] not in result:
        result.insert(1, boots[0])
    return tuple(result)


def infer_starting_items(first_item: Optional[int], reference: IReferenceData) -> Tuple[int, ...]:
    if first_item:
        cost = reference.item_cost(first_item)
        if 0 < cost <= CHEAP_STARTER_GOLD:
            return (first_item, HEALTH_POTION)
        if is_jungle_item(first_item):
            return (JUNGLE_STARTER, HEALTH_POTION)
        name = (reference.item_name(first_item) or "").lower()
        for starter, keywords in _STARTER_BY_CORE:
            if any(k in name for k in keywords):
                return (starter, HEALTH_POTION)
    return (DEFAULT_STARTER, HEALTH_POTION)


def extract_build(payload: Any, reference: IReferenceData, resolve: Resolve = plain) -> BuildRecord:
    sets = resolve(payload.get("itemSets")) if isinstance(payload, dict) else None
    if not isinstance(sets, dict):
        raise ShapeError("build payload has no 'itemSets' object")

    full_build = best_set(sets.get("itemBootSet6"), FULL_BUILD_SIZE, resolve=resolve)
    if len(full_build) < MIN_FULL_BUILD:
        full_build = slot_by_slot(sets, resolve)
    if not full_build:
        raise InsufficientDataError("no item set above the sample threshold")

    starting: Sequence[int] = best_set(sets.get("startSet"), 1, resolve=resolve) if "startSet" in sets else ()
    if not starting:
        starting = infer_starting_items(full_build[0], reference)
    return BuildRecord(starting_items=tuple(starting), full_build=tuple(full_build[:FULL_BUILD_SIZE]))


class ItemBuildService(StatsService[BuildRecord]):
    """Starting items and full build for (champion, lane)."""

    async def get_build(self, alias: str, lane: Lane) -> Optional[BuildRecord]:
        return await self.fetch(alias, lane)

    async def fetch_primary(self, alias: str, lane: Lane, patch: str) -> BuildRecord:
        payload = await self.client.query(BUILD_ENDPOINT, self.query_params(alias, lane, patch))
        return extract_build(payload, self.reference)

    async def fetch_secondary(self, alias: str, lane: Lane) -> BuildRecord:
        path = f"/lol/{alias}/aram/build/" if lane.is_aram else f"/lol/{alias}/build/"
        state = SerializedState.from_html(await self.client.page(path, self.page_params(lane)))
        if state is None:
            raise ShapeError(f"build page for {alias} has no serialized state")
        idx = state.find_root(ITEM_SETS_SIGNATURE)
        if idx is None:
            raise ShapeError(f"build page for {alias} has no item sets")
        return extract_build(state.nodes[idx], self.reference, state.expand)
