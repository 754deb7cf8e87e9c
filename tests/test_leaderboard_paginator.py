import asyncio
import itertools

import pytest

from invitebot.data_models.leaderboard import LeaderboardSnapshot, MemberInviteRecord, NavigationVotes
from invitebot.utils.ranking import rank_at_window_start, rank_current
from invitebot.views.leaderboard import (
    LeaderboardPaginator, collect_navigation, next_page_index, tally_votes
)

UP = "🔺"
DOWN = "🔻"

_message_ids = itertools.count(1000)


class FakeUser:
    def __init__(self, user_id):
        self.id = user_id


class FakeChannel:
    def __init__(self, bot_user):
        self.bot_user = bot_user
        self.sent = []

    async def send(self, embed=None):
        message = FakeMessage(self.bot_user, self)
        message.embed = embed
        self.sent.append(message)
        return message


class FakeMessage:
    def __init__(self, author, channel):
        self.id = next(_message_ids)
        self.author = author
        self.channel = channel
        self.embed = None
        self.edits = []
        self.reactions = []
        self.removed = []

    async def edit(self, embed=None):
        self.embed = embed
        self.edits.append(embed)

    async def add_reaction(self, emoji):
        if emoji not in self.reactions:
            self.reactions.append(emoji)

    async def remove_reaction(self, emoji, member):
        self.removed.append((emoji, member.id))
        if emoji in self.reactions:
            self.reactions.remove(emoji)


class FakeReaction:
    def __init__(self, emoji, message):
        self.emoji = emoji
        self.message = message
        self.removed_for = []

    async def remove(self, user):
        self.removed_for.append(user.id)


class FakeBot:
    """Replays scripted reactions against whatever message is current."""

    def __init__(self):
        self.user = FakeUser(1)
        self.script = []
        self.waits = 0
        self.current_message = None

    def react(self, user_id, emoji):
        self.script.append((user_id, emoji))

    async def wait_for(self, event, check=None, timeout=None):
        assert event == 'reaction_add'
        self.waits += 1
        while self.script:
            user_id, emoji = self.script.pop(0)
            reaction = FakeReaction(emoji, self.current_message)
            user = FakeUser(user_id)
            if check(reaction, user):
                return reaction, user
        raise asyncio.TimeoutError()


def make_snapshot(count):
    records = {
        member_id: MemberInviteRecord(f"member{member_id:02d}", total=100 - member_id)
        for member_id in range(1, count + 1)
    }
    ranking = rank_current(records)
    return LeaderboardSnapshot(
        records=records,
        ranking=ranking,
        window_ranking=rank_at_window_start(records, ranking),
        presence={},
    )


def command_message(bot):
    channel = FakeChannel(bot.user)
    return FakeMessage(FakeUser(42), channel), channel


class TrackingPaginator(LeaderboardPaginator):
    """Keeps the fake bot pointed at the displayed message."""

    async def _display(self):
        await super()._display()
        self.bot.current_message = self.state.message


@pytest.mark.parametrize(
    "page,total_pages,votes,expected",
    [
        (0, 3, NavigationVotes(downs=1), 1),
        (1, 3, NavigationVotes(ups=1), 0),
        (0, 3, NavigationVotes(ups=1), None),
        (2, 3, NavigationVotes(downs=1), None),
        (1, 3, NavigationVotes(ups=1, downs=1), None),
        (1, 3, NavigationVotes(), None),
        (1, 3, NavigationVotes(ups=2, downs=1), 0),
    ],
)
def test_next_page_index(page, total_pages, votes, expected):
    assert next_page_index(page, total_pages, votes) == expected


def test_tally_votes():
    message = object()
    events = [
        (FakeReaction(UP, message), FakeUser(5)),
        (FakeReaction(DOWN, message), FakeUser(6)),
        (FakeReaction(DOWN, message), FakeUser(7)),
    ]
    assert tally_votes(events) == NavigationVotes(ups=1, downs=2)


@pytest.mark.asyncio
async def test_single_page_sends_once_without_navigation():
    bot = FakeBot()
    origin, channel = command_message(bot)

    message = await TrackingPaginator(bot, make_snapshot(3), origin).run()

    assert channel.sent == [message]
    assert message.reactions == []
    assert bot.waits == 0
    assert "Page" not in message.embed.description


@pytest.mark.asyncio
async def test_empty_leaderboard_skips_navigation():
    bot = FakeBot()
    origin, channel = command_message(bot)

    message = await TrackingPaginator(bot, make_snapshot(0), origin, page=3).run()

    assert message.embed.description == "No invites!"
    assert message.reactions == []
    assert bot.waits == 0


@pytest.mark.asyncio
async def test_navigation_edits_the_same_message():
    bot = FakeBot()
    origin, channel = command_message(bot)
    bot.react(7, DOWN)
    bot.react(7, DOWN)
    bot.react(8, UP)

    message = await TrackingPaginator(bot, make_snapshot(25), origin, timeout=1).run()

    assert len(channel.sent) == 1
    assert channel.sent[0] is message
    assert len(message.edits) == 3
    assert message.edits[0].description.endswith("Page 2/3")
    assert message.edits[1].description.endswith("Page 3/3")
    assert message.embed.description.endswith("Page 2/3")
    assert set(message.reactions) == {UP, DOWN}
    # down arrow was withdrawn on the last page
    assert (DOWN, bot.user.id) in message.removed
    # three hops plus the final wait that timed out
    assert bot.waits == 4


@pytest.mark.asyncio
async def test_first_page_only_offers_down_arrow():
    bot = FakeBot()
    origin, _ = command_message(bot)

    message = await TrackingPaginator(bot, make_snapshot(25), origin, timeout=1).run()

    assert message.reactions == [DOWN]
    assert message.edits == []


@pytest.mark.asyncio
async def test_own_reactions_are_ignored():
    bot = FakeBot()
    origin, _ = command_message(bot)
    bot.react(bot.user.id, DOWN)

    message = await TrackingPaginator(bot, make_snapshot(25), origin, timeout=1).run()

    assert message.edits == []
    assert message.embed.description.endswith("Page 1/3")


@pytest.mark.asyncio
async def test_other_emoji_are_ignored():
    bot = FakeBot()
    origin, _ = command_message(bot)
    bot.react(7, "👍")

    message = await TrackingPaginator(bot, make_snapshot(25), origin, timeout=1).run()

    assert message.edits == []


@pytest.mark.asyncio
async def test_invalid_direction_ends_session():
    bot = FakeBot()
    origin, _ = command_message(bot)
    bot.react(7, UP)
    bot.react(7, DOWN)

    message = await TrackingPaginator(bot, make_snapshot(25), origin, timeout=1).run()

    assert message.edits == []
    assert bot.waits == 1


@pytest.mark.asyncio
async def test_start_page_is_clamped():
    bot = FakeBot()
    origin, _ = command_message(bot)

    paginator = TrackingPaginator(bot, make_snapshot(25), origin, page=10, timeout=1)
    message = await paginator.run()

    assert paginator.state.page == 2
    assert message.embed.description.endswith("Page 3/3")
    assert message.reactions == [UP]


@pytest.mark.asyncio
async def test_bot_message_is_edited_instead_of_resent():
    bot = FakeBot()
    channel = FakeChannel(bot.user)
    previous = FakeMessage(bot.user, channel)

    message = await TrackingPaginator(bot, make_snapshot(3), previous).run()

    assert message is previous
    assert channel.sent == []
    assert len(previous.edits) == 1


@pytest.mark.asyncio
async def test_collect_navigation_times_out_empty():
    bot = FakeBot()
    origin, _ = command_message(bot)
    bot.current_message = origin

    assert await collect_navigation(bot, origin, timeout=0.5) == []


@pytest.mark.asyncio
async def test_collect_navigation_stops_at_max_events():
    bot = FakeBot()
    origin, _ = command_message(bot)
    bot.current_message = origin
    bot.react(7, UP)
    bot.react(8, DOWN)
    bot.react(9, DOWN)

    events = await collect_navigation(bot, origin, timeout=1, max_events=2)

    assert tally_votes(events) == NavigationVotes(ups=1, downs=1)
    assert bot.script == [(9, DOWN)]
