"""
Invite leaderboard rendering and reaction-driven pagination.

render_leaderboard_page turns one page of a LeaderboardSnapshot into plain
title/description text. LeaderboardPaginator shows that text on Discord and
moves between pages when users press the arrow reactions.
"""

import asyncio
import enum
import logging
from typing import List, Optional, Tuple

import discord

from invitebot.constants import LeaderboardConstants, UIConstants
from invitebot.data_models.leaderboard import (
    LeaderboardPageText, LeaderboardSnapshot, NavigationVotes, PaginationState
)
from invitebot.utils.ranking import rank_delta

logger = logging.getLogger(__name__)

NAVIGATION_SYMBOLS = (LeaderboardConstants.UP_SYMBOL, LeaderboardConstants.DOWN_SYMBOL)


def format_delta(delta: int) -> Tuple[str, str]:
    """Text and symbol for a rank change."""
    if delta > 0:
        return f"+{delta}", LeaderboardConstants.UP_SYMBOL
    if delta < 0:
        return str(delta), LeaderboardConstants.DOWN_SYMBOL
    return "--", LeaderboardConstants.NEUTRAL_SYMBOL


def _window_text(window_hours: int) -> str:
    if window_hours % 24 == 0:
        days = window_hours // 24
        return "1 day" if days == 1 else f"{days} days"
    return "1 hour" if window_hours == 1 else f"{window_hours} hours"


def leaderboard_title(channel_id: Optional[int]) -> str:
    if channel_id:
        return f"Leaderboard for channel <#{channel_id}>"
    return "Leaderboard"


def render_leaderboard_page(snapshot: LeaderboardSnapshot, page: int) -> LeaderboardPageText:
    """Render one page of the leaderboard. Output depends only on the arguments."""
    title = leaderboard_title(snapshot.channel_id)
    if snapshot.is_empty:
        return LeaderboardPageText(title=title, description=LeaderboardConstants.EMPTY_MESSAGE)

    page = snapshot.clamp_page(page)
    start = page * snapshot.page_size
    lines = [f"(changes compared to {_window_text(snapshot.window_hours)} ago)", ""]

    for offset, member_id in enumerate(snapshot.ranking[start:start + snapshot.page_size]):
        record = snapshot.records[member_id]
        position = start + offset
        delta_text, symbol = format_delta(rank_delta(member_id, position, snapshot.window_ranking))
        if snapshot.presence.get(member_id):
            name = f"<@{member_id}>"
        else:
            name = record.display_name or "unknown"
        lines.append(
            f"**{position + 1}.** ({delta_text}) {symbol} {name} "
            f"**{record.total}** invites (**{record.bonus}** bonus)"
        )

    if snapshot.total_pages > 1:
        lines.append("")
        lines.append(f"Page {page + 1}/{snapshot.total_pages}")

    return LeaderboardPageText(title=title, description="\n".join(lines))


def build_leaderboard_embed(page_text: LeaderboardPageText) -> discord.Embed:
    return discord.Embed(
        title=page_text.title,
        description=page_text.description,
        color=UIConstants.LEADERBOARD_COLOR
    )


class NavigationPhase(enum.Enum):
    DISPLAYING = "displaying"
    AWAITING_INPUT = "awaiting_input"
    TERMINAL = "terminal"


async def collect_navigation(
    bot,
    message: discord.Message,
    timeout: float,
    max_events: int = LeaderboardConstants.NAVIGATION_MAX_EVENTS
) -> List[Tuple[discord.Reaction, discord.abc.User]]:
    """
    Wait for arrow reactions on `message` from anyone but the bot.

    Stops after `max_events` reactions or when `timeout` seconds have passed
    in total; a timeout with nothing collected returns an empty list.
    """
    def check(reaction: discord.Reaction, user: discord.abc.User) -> bool:
        return (
            user.id != bot.user.id
            and reaction.message.id == message.id
            and str(reaction.emoji) in NAVIGATION_SYMBOLS
        )

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    collected = []
    while len(collected) < max_events:
        remaining = deadline - loop.time()
        if remaining <= 0:
            break
        try:
            reaction, user = await bot.wait_for('reaction_add', check=check, timeout=remaining)
        except asyncio.TimeoutError:
            break
        collected.append((reaction, user))
    return collected


def tally_votes(events: List[Tuple[discord.Reaction, discord.abc.User]]) -> NavigationVotes:
    ups = sum(1 for reaction, _ in events if str(reaction.emoji) == LeaderboardConstants.UP_SYMBOL)
    downs = sum(1 for reaction, _ in events if str(reaction.emoji) == LeaderboardConstants.DOWN_SYMBOL)
    return NavigationVotes(ups=ups, downs=downs)


def next_page_index(page: int, total_pages: int, votes: NavigationVotes) -> Optional[int]:
    """Page to show after a navigation wait, or None to stop listening."""
    if votes.ups > votes.downs and page > 0:
        return page - 1
    if votes.downs > votes.ups and page < total_pages - 1:
        return page + 1
    return None


class LeaderboardPaginator:
    """Shows a leaderboard snapshot and follows arrow reactions between pages."""

    def __init__(
        self,
        bot,
        snapshot: LeaderboardSnapshot,
        message: discord.Message,
        page: int = 0,
        *,
        timeout: float = LeaderboardConstants.NAVIGATION_TIMEOUT,
        max_events: int = LeaderboardConstants.NAVIGATION_MAX_EVENTS
    ):
        self.bot = bot
        self.state = PaginationState(snapshot=snapshot, page=snapshot.clamp_page(page), message=message)
        self.timeout = timeout
        self.max_events = max_events

    async def run(self) -> discord.Message:
        """Display pages until navigation stops; returns the leaderboard message."""
        phase = NavigationPhase.DISPLAYING
        while phase is not NavigationPhase.TERMINAL:
            if phase is NavigationPhase.DISPLAYING:
                await self._display()
                phase = NavigationPhase.AWAITING_INPUT if self.state.total_pages > 1 else NavigationPhase.TERMINAL
                continue

            events = await collect_navigation(self.bot, self.state.message, self.timeout, self.max_events)
            target = next_page_index(self.state.page, self.state.total_pages, tally_votes(events))
            if target is None:
                phase = NavigationPhase.TERMINAL
                continue

            await self._clear_votes(events)
            logger.debug(f"Leaderboard message {self.state.message.id}: page {self.state.page + 1} -> {target + 1}")
            self.state.page = target
            phase = NavigationPhase.DISPLAYING

        return self.state.message

    async def _display(self):
        """Render the current page into the existing bot message or a new one."""
        embed = build_leaderboard_embed(render_leaderboard_page(self.state.snapshot, self.state.page))
        message = self.state.message

        edited = message.author.id == self.bot.user.id
        if edited:
            await message.edit(embed=embed)
        else:
            self.state.message = await message.channel.send(embed=embed)

        await self._sync_arrow(LeaderboardConstants.UP_SYMBOL, self.state.can_go_up, edited)
        await self._sync_arrow(LeaderboardConstants.DOWN_SYMBOL, self.state.can_go_down, edited)

    async def _sync_arrow(self, symbol: str, enabled: bool, edited: bool):
        if enabled:
            await self.state.message.add_reaction(symbol)
        elif edited:
            try:
                await self.state.message.remove_reaction(symbol, self.bot.user)
            except discord.HTTPException as e:
                logger.debug(f"Could not remove {symbol} from message {self.state.message.id}: {e}")

    async def _clear_votes(self, events: List[Tuple[discord.Reaction, discord.abc.User]]):
        """Remove consumed user reactions so the same arrow can be pressed again."""
        for reaction, user in events:
            try:
                await reaction.remove(user)
            except discord.HTTPException as e:
                logger.debug(f"Could not remove navigation reaction of {user.id}: {e}")
