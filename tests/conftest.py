from datetime import datetime

import pytest_asyncio

from invitebot.database.database import Database
from invitebot.database.models import CustomInvite, InviteCode, Join, Leave, Member

GUILD_ID = 100
OTHER_GUILD_ID = 200
CHANNEL_ID = 500
NOW = datetime(2024, 1, 10, 12, 0)


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'invites.db'}")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def seeded_database(database):
    async with database.transaction() as session:
        session.add_all([
            Member(id=1, name="alice"),
            Member(id=2, name="bob"),
            Member(id=3, name="carol"),
            Member(id=4, name="dave"),
            Member(id=10, name="newbie"),
            Member(id=11, name="oldtimer"),
            Member(id=12, name="friend"),
            Member(id=13, name="stranger"),
        ])
        session.add_all([
            InviteCode(code="aaa", guild_id=GUILD_ID, channel_id=CHANNEL_ID, inviter_id=1, uses=5),
            InviteCode(code="aab", guild_id=GUILD_ID, channel_id=501, inviter_id=1, uses=3),
            InviteCode(code="bbb", guild_id=GUILD_ID, channel_id=CHANNEL_ID, inviter_id=2, uses=4),
            InviteCode(code="ccc", guild_id=GUILD_ID, channel_id=CHANNEL_ID, inviter_id=3, uses=0),
            InviteCode(code="zzz", guild_id=OTHER_GUILD_ID, channel_id=900, inviter_id=4, uses=9),
        ])
        session.add_all([
            CustomInvite(guild_id=GUILD_ID, member_id=2, creator_id=1, amount=2, generated=False,
                         reason="event winner", created_at=datetime(2024, 1, 1)),
            CustomInvite(guild_id=GUILD_ID, member_id=2, amount=1, generated=True,
                         created_at=datetime(2024, 1, 10, 10, 0)),
            CustomInvite(guild_id=GUILD_ID, member_id=4, creator_id=1, amount=3, generated=False,
                         created_at=datetime(2024, 1, 10, 11, 0)),
            CustomInvite(guild_id=OTHER_GUILD_ID, member_id=1, creator_id=4, amount=50, generated=False,
                         created_at=datetime(2024, 1, 10, 11, 0)),
        ])
        session.add_all([
            Join(guild_id=GUILD_ID, member_id=10, exact_match_code="aaa", created_at=datetime(2024, 1, 10, 11, 0)),
            Join(guild_id=GUILD_ID, member_id=11, exact_match_code="aaa", created_at=datetime(2024, 1, 5)),
            Join(guild_id=GUILD_ID, member_id=12, exact_match_code="bbb", created_at=datetime(2024, 1, 10, 9, 0)),
            Join(guild_id=GUILD_ID, member_id=13, exact_match_code=None, created_at=datetime(2024, 1, 10, 9, 30)),
            Join(guild_id=GUILD_ID, member_id=1, created_at=datetime(2023, 12, 1)),
            Join(guild_id=GUILD_ID, member_id=2, created_at=datetime(2023, 12, 1)),
            Join(guild_id=GUILD_ID, member_id=4, created_at=datetime(2023, 12, 1)),
            Join(guild_id=GUILD_ID, member_id=4, created_at=datetime(2024, 1, 4)),
        ])
        session.add_all([
            Leave(guild_id=GUILD_ID, member_id=2, created_at=datetime(2024, 1, 2)),
            Leave(guild_id=GUILD_ID, member_id=4, created_at=datetime(2024, 1, 3)),
        ])
    return database
