"""
Invite merging and ranking utilities for the invite leaderboard.

The four aggregate sources are folded into one mapping of
MemberInviteRecord by pure reducers, always in this order:

    1. apply_code_totals            current code uses      -> total
    2. apply_bonus_totals           current bonus + auto   -> total, bonus
    3. apply_windowed_code_counts   windowed join counts   -> old_total
    4. apply_windowed_bonus_totals  windowed bonus + auto  -> old_total, old_bonus

Totals accumulate across sources, bonus components overwrite. Reducers never
mutate the mapping they are given.
"""

import unicodedata
from dataclasses import replace
from datetime import datetime
from functools import cmp_to_key
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from invitebot.data_models.leaderboard import (
    BonusInviteTotal, CodeInviteTotal, JoinLeaveTimes, MemberInviteRecord
)

InviteRecords = Dict[int, MemberInviteRecord]


def _name_of(record: Optional[MemberInviteRecord], candidate: Optional[str]) -> Optional[str]:
    if record is not None and record.display_name:
        return record.display_name
    return candidate or None


def apply_code_totals(records: InviteRecords, rows: Iterable[CodeInviteTotal]) -> InviteRecords:
    """Seed records from summed invite-code uses per inviter."""
    merged = dict(records)
    for row in rows:
        existing = merged.get(row.member_id)
        if existing is None:
            merged[row.member_id] = MemberInviteRecord(
                display_name=row.member_name or None,
                total=row.total,
                bonus=0,
            )
        else:
            merged[row.member_id] = replace(
                existing,
                display_name=_name_of(existing, row.member_name),
                total=existing.total + row.total,
            )
    return merged


def apply_bonus_totals(records: InviteRecords, rows: Iterable[BonusInviteTotal]) -> InviteRecords:
    """Add current bonus and auto invites to totals; the bonus component overwrites."""
    merged = dict(records)
    for row in rows:
        existing = merged.get(row.member_id)
        if existing is None:
            merged[row.member_id] = MemberInviteRecord(
                display_name=row.member_name or None,
                total=row.bonus + row.auto,
                bonus=row.bonus,
            )
        else:
            merged[row.member_id] = replace(
                existing,
                display_name=_name_of(existing, row.member_name),
                total=existing.total + row.bonus + row.auto,
                bonus=row.bonus,
            )
    return merged


def apply_windowed_code_counts(records: InviteRecords, rows: Iterable[CodeInviteTotal]) -> InviteRecords:
    """Add joins attributed through invite codes inside the window to old_total."""
    merged = dict(records)
    for row in rows:
        existing = merged.get(row.member_id)
        if existing is None:
            # Window-only members are kept with total=0 and never ranked
            merged[row.member_id] = MemberInviteRecord(
                display_name=row.member_name or None,
                old_total=row.total,
            )
        else:
            merged[row.member_id] = replace(
                existing,
                display_name=_name_of(existing, row.member_name),
                old_total=existing.old_total + row.total,
            )
    return merged


def apply_windowed_bonus_totals(records: InviteRecords, rows: Iterable[BonusInviteTotal]) -> InviteRecords:
    """Add bonus and auto invites granted inside the window to old_total."""
    merged = dict(records)
    for row in rows:
        existing = merged.get(row.member_id)
        if existing is None:
            merged[row.member_id] = MemberInviteRecord(
                display_name=row.member_name or None,
                old_total=row.bonus + row.auto,
                old_bonus=row.bonus,
            )
        else:
            merged[row.member_id] = replace(
                existing,
                display_name=_name_of(existing, row.member_name),
                old_total=existing.old_total + row.bonus + row.auto,
                old_bonus=row.bonus,
            )
    return merged


def merge_invite_sources(
    code_totals: Iterable[CodeInviteTotal],
    bonus_totals: Iterable[BonusInviteTotal],
    windowed_code_counts: Iterable[CodeInviteTotal],
    windowed_bonus_totals: Iterable[BonusInviteTotal],
) -> InviteRecords:
    """Fold the four aggregate sources into one record per member."""
    records: InviteRecords = {}
    records = apply_code_totals(records, code_totals)
    records = apply_bonus_totals(records, bonus_totals)
    records = apply_windowed_code_counts(records, windowed_code_counts)
    records = apply_windowed_bonus_totals(records, windowed_bonus_totals)
    return records


def name_sort_key(name: str) -> Tuple[str, str, str]:
    """
    Collation key approximating locale-aware comparison.

    Accents and case are ignored first, then accents decide, then lowercase
    sorts before uppercase.
    """
    decomposed = unicodedata.normalize('NFKD', name)
    base = ''.join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), name.casefold(), name.swapcase()


def _compare_names(a: Optional[str], b: Optional[str]) -> int:
    # Missing names compare equal so the stable sort keeps their order
    if not a or not b:
        return 0
    key_a, key_b = name_sort_key(a), name_sort_key(b)
    return (key_a > key_b) - (key_a < key_b)


def _sorted_by_score(
    records: InviteRecords,
    member_ids: Iterable[int],
    score: Callable[[MemberInviteRecord], int],
) -> List[int]:
    def compare(a: int, b: int) -> int:
        diff = score(records[b]) - score(records[a])
        if diff != 0:
            return diff
        return _compare_names(records[a].display_name, records[b].display_name)

    return sorted(member_ids, key=cmp_to_key(compare))


def rank_current(records: InviteRecords) -> List[int]:
    """Member ids with at least one invite, highest total first."""
    ranked = [member_id for member_id, record in records.items() if record.total > 0]
    return _sorted_by_score(records, ranked, lambda r: r.total)


def rank_at_window_start(records: InviteRecords, current_ranking: List[int]) -> List[int]:
    """
    Approximate ranking as of the window start.

    Reorders the current ranking by total minus invites gained inside the
    window; members without current invites never appear.
    """
    return _sorted_by_score(records, current_ranking, lambda r: r.total - r.old_total)


def rank_delta(member_id: int, position: int, window_ranking: List[int]) -> int:
    """Positions gained since the window start for the member at 0-based `position`."""
    previous_position = window_ranking.index(member_id) + 1
    return previous_position - (position + 1)


def resolve_presence(last_joined_at: Optional[datetime], last_left_at: Optional[datetime]) -> bool:
    """Whether a member is still in the guild given their latest join and leave."""
    if last_left_at is None:
        return True
    if last_joined_at is None:
        return False
    return last_left_at < last_joined_at


def build_presence_map(rows: Iterable[JoinLeaveTimes]) -> Dict[int, bool]:
    return {
        row.member_id: resolve_presence(row.last_joined_at, row.last_left_at)
        for row in rows
    }
