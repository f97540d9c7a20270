from __future__ import annotations

import argparse
import json
from typing import Any, Iterable, List, Optional, Sequence

from application.services import StatsEngine
from application.services.rune_service import TREE_NAMES
from core.logging.logger import get_logger, StructuredLogger
from domain.entities import BuildSummary
from domain.interfaces import IReferenceData
from infrastructure.reference import DataDragonLoader


def _split_aliases(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lol-stats", description="Lolalytics statistics for champion select")
    parser.add_argument("--patch", help="content version to query (major.minor), default: current")
    parser.add_argument("--json", action="store_true", help="print results as JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("counters", "champions that counter CHAMPION"),
        ("counterpicks", "best picks against CHAMPION"),
        ("build", "starting items and full build"),
        ("runes", "recommended rune pages"),
        ("skills", "skill order and summoner spells"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("champion")
        p.add_argument("lane", nargs="?", default="default")

    p = sub.add_parser("best-pick", help="best pick against several enemies")
    p.add_argument("enemies", help="comma separated champions, e.g. darius,ahri")
    p.add_argument("lane", nargs="?", default="default")
    p.add_argument("--allies", default="", help="comma separated ally champions (keys or names)")
    return parser


class StatsCommand:
    """Run one query against the statistics engine and print the result."""

    def __init__(self, reference: Optional[IReferenceData] = None) -> None:
        self.logger: StructuredLogger = get_logger(__name__, service="cli")
        self._reference = reference

    async def _load_reference(self) -> IReferenceData:
        if self._reference is None:
            self._reference = await DataDragonLoader().load()
        return self._reference

    async def execute(self, argv: Sequence[str]) -> int:
        args = build_parser().parse_args(list(argv))
        reference = await self._load_reference()
        async with StatsEngine.create(reference, patch=args.patch) as engine:
            self.logger.info(lambda: f"command {args.command} patch={args.patch or reference.patch()}")
            result = await self._query(engine, args)
        if args.json:
            print(json.dumps(self._to_json(result), separators=(",", ":"), ensure_ascii=False))
        else:
            self._render(args.command, result, reference)
        return 0 if result else 1

    async def _query(self, engine: StatsEngine, args: argparse.Namespace) -> Any:
        if args.command == "counters":
            return await engine.get_counters(args.champion, args.lane)
        if args.command == "counterpicks":
            return await engine.get_best_counterpicks(args.champion, args.lane)
        if args.command == "best-pick":
            allies = _split_aliases(args.allies)
            return await engine.get_best_overall_pick(_split_aliases(args.enemies), args.lane, allies or None)
        if args.command == "build":
            return await engine.get_build(args.champion, args.lane)
        if args.command == "runes":
            return await engine.get_recommended_runes(args.champion, args.lane)
        return await engine.get_build_summary(args.champion, args.lane)

    @staticmethod
    def _to_json(result: Any) -> Any:
        if result is None:
            return None
        if isinstance(result, list):
            return [r.to_dict() for r in result]
        return result.to_dict()

    def _render(self, command: str, result: Any, reference: IReferenceData) -> None:
        if not result:
            print("No data available right now.")
            return
        if command in ("counters", "counterpicks"):
            for m in result[:10]:
                print(f"- {m.opponent_name:<14} {m.win_rate:6.2f}%  ({m.sample_size} games)")
        elif command == "best-pick":
            for s in result[:10]:
                print(f"- {s.name:<14} {s.score:6.2f}  {s.details}")
        elif command == "build":
            print("Start:  " + ", ".join(self._item(i, reference) for i in result.starting_items))
            print("Build:  " + ", ".join(self._item(i, reference) for i in result.full_build))
        elif command == "runes":
            for page in result:
                trees = f"{TREE_NAMES.get(page.primary_tree_id, page.primary_tree_id)}/" \
                        f"{TREE_NAMES.get(page.secondary_tree_id, page.secondary_tree_id)}"
                print(f"- [{page.source.value}] {page.keystone_name} {trees}  "
                      f"{page.win_rate:.2f}% ({page.sample_size} games)")
        else:
            self._render_skills(result)

    @staticmethod
    def _item(item_id: int, reference: IReferenceData) -> str:
        return reference.item_name(item_id) or str(item_id)

    @staticmethod
    def _render_skills(summary: BuildSummary) -> None:
        for plan in summary.skill_plans:
            print(f"- [{plan.source.value}] max {plan.max_order_label}  {plan.level_keys}  "
                  f"{plan.win_rate:.2f}% ({plan.sample_size} games)")
        for pair in summary.summoner_spells:
            print(f"- [{pair.source.value}] spells {pair.spell_ids[0]}+{pair.spell_ids[1]}  {pair.win_rate:.2f}%")


async def run(argv: Optional[Iterable[str]] = None) -> int:
    return await StatsCommand().execute(list(argv or []))
