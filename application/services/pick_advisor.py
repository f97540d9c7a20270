"""Derived matchup operations. Pure functions, no I/O."""
from typing import Dict, Iterable, List, Optional, Sequence

from domain.entities import MatchupRecord, PickSuggestion, TeamProfile
from domain.interfaces import IReferenceData

SYNERGY_CAP = 5.0


def sort_counters(matchups: Iterable[MatchupRecord]) -> List[MatchupRecord]:
    """Opponents that beat the subject hardest first (lowest subject win rate)."""
    return sorted(matchups, key=lambda m: m.win_rate)


def invert(matchups: Iterable[MatchupRecord]) -> List[MatchupRecord]:
    """Counter-picks against the subject: ``100 - wr``, best pick first."""
    return sorted((m.inverted() for m in matchups), key=lambda m: m.win_rate, reverse=True)


def build_team_profile(ally_keys: Iterable[int | str], reference: IReferenceData) -> TeamProfile:
    """Damage mix, tags and frontline of the allied roster.

    Allies may be given by numeric key or by alias; unknown ones are skipped.
    """
    magic = attack = defense = 0
    tags: List[str] = []
    count = 0
    for key in ally_keys:
        champ = reference.champion_by_key(key) or reference.champion_by_alias(str(key))
        if champ is None:
            continue
        magic += champ.magic
        attack += champ.attack
        defense += champ.defense
        tags.extend(champ.tags)
        count += 1

    if count == 0:
        return TeamProfile(tags=tuple(tags))
    return TeamProfile(
        avg_magic=magic / count,
        avg_attack=attack / count,
        avg_defense=defense / count,
        tags=tuple(tags),
        has_tank="Tank" in tags,
        has_engage="Tank" in tags or "Support" in tags,
        count=count,
    )


def synergy_bonus(candidate_alias: str, profile: TeamProfile, reference: IReferenceData) -> float:
    """Bonus in [-5, 5] for how well the candidate rounds out the roster."""
    champ = reference.champion_by_alias(candidate_alias)
    if champ is None or profile.count == 0:
        return 0.0

    bonus = 0.0
    if profile.avg_magic < 4 and champ.magic >= 7:
        bonus += 2.5  # team is mostly physical
    elif profile.avg_magic > 6 and champ.magic <= 3:
        bonus += 2.5  # team is mostly magic
    elif 4 <= profile.avg_magic <= 6:
        bonus += 0.5

    if not profile.has_tank and "Tank" in champ.tags:
        bonus += 1.5
    elif not profile.has_tank and champ.defense >= 7:
        bonus += 1.0

    if champ.primary_tag and profile.tags.count(champ.primary_tag) >= 2:
        bonus -= 1.0

    return max(-SYNERGY_CAP, min(SYNERGY_CAP, bonus))


def best_overall_pick(
    counterpicks_by_enemy: Sequence[Sequence[MatchupRecord]],
    reference: IReferenceData,
    ally_profile: Optional[TeamProfile] = None,
) -> List[PickSuggestion]:
    """Rank candidates by mean counter-pick win rate over every enemy.

    ``counterpicks_by_enemy`` holds one inverted matchup list per enemy. A
    candidate needs a data point against each enemy to be ranked.
    """
    if not counterpicks_by_enemy:
        return []

    totals: Dict[str, List[float]] = {}
    names: Dict[str, str] = {}
    for counterpicks in counterpicks_by_enemy:
        for m in counterpicks:
            totals.setdefault(m.opponent_alias, []).append(m.win_rate)
            names.setdefault(m.opponent_alias, m.opponent_name)

    with_synergy = ally_profile is not None and ally_profile.count > 0
    suggestions = []
    for alias, rates in totals.items():
        if len(rates) < len(counterpicks_by_enemy):
            continue
        counter_score = sum(rates) / len(rates)
        bonus = synergy_bonus(alias, ally_profile, reference) if with_synergy else 0.0
        suggestions.append(PickSuggestion(
            alias=alias,
            name=names[alias],
            score=round(counter_score + bonus, 2),
            counter_score=counter_score,
            synergy_bonus=bonus,
            with_synergy=with_synergy,
        ))
    suggestions.sort(key=lambda s: s.score, reverse=True)
    return suggestions
