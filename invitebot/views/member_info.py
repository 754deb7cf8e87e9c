"""
Embed rendering for the `info` command.
"""

from datetime import date, datetime, timezone
from typing import Dict, List, Optional

import discord

from invitebot.constants import UIConstants
from invitebot.data_models.member_info import CustomInviteEntry, JoinRecord, MemberInfo

FIELD_VALUE_LIMIT = 1024


def _as_utc(value: datetime) -> datetime:
    # Stored timestamps are naive UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _truncate(text: str) -> str:
    if len(text) <= FIELD_VALUE_LIMIT:
        return text
    return text[:FIELD_VALUE_LIMIT - 3] + "..."


def format_join_history(joins: List[JoinRecord]) -> str:
    """One line per join day, newest first, with inviters and repeat counts."""
    if not joins:
        return "unknown (this only works for new members)"

    days: Dict[date, Dict[Optional[int], int]] = {}
    first_seen: Dict[date, datetime] = {}
    for join in joins:
        day = join.joined_at.date()
        inviters = days.setdefault(day, {})
        inviters[join.inviter_id] = inviters.get(join.inviter_id, 0) + 1
        first_seen.setdefault(day, join.joined_at)

    lines = []
    for day, inviters in days.items():
        total = sum(inviters.values())
        total_text = f"**{total}** times " if total > 1 else ""
        inviter_texts = []
        for inviter_id, count in inviters.items():
            who = f"<@{inviter_id}>" if inviter_id is not None else "unknown"
            times_text = f" (**{count}** times)" if count > 1 else ""
            inviter_texts.append(f"{who}{times_text}")
        when = discord.utils.format_dt(_as_utc(first_seen[day]), style='D')
        lines.append(f"{total_text}**{when}**, invited by: {', '.join(inviter_texts)}")
    return "\n".join(lines)


def format_custom_invites(entries: List[CustomInviteEntry]) -> str:
    if not entries:
        return "This member has received no bonuses so far"

    lines = []
    for entry in entries:
        creator = f"<@{entry.creator_id}>" if entry.creator_id else "automation"
        reason_text = f", reason: **{entry.reason}**" if entry.reason else ""
        when = discord.utils.format_dt(_as_utc(entry.created_at), style='R')
        lines.append(f"**{entry.amount}** from {creator} {when}{reason_text}")
    return "\n".join(lines)


def build_member_info_embed(member: discord.Member, info: MemberInfo) -> discord.Embed:
    embed = discord.Embed(title=member.name, color=UIConstants.INFO_COLOR)

    joined_text = discord.utils.format_dt(member.joined_at, style='R') if member.joined_at else "unknown"
    embed.add_field(name="Last joined", value=joined_text, inline=True)
    embed.add_field(
        name="Invites",
        value=f"{info.invites.total} ({info.invites.custom} bonus)",
        inline=True
    )
    embed.add_field(name="Joined", value=f"{info.join_count} times", inline=True)
    embed.add_field(name="Joins", value=_truncate(format_join_history(info.joins)), inline=False)
    embed.add_field(name="Bonus invites", value=_truncate(format_custom_invites(info.custom_invites)), inline=False)
    return embed
