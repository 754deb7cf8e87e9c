import logging

import pytest

from invitebot.services.base import BaseService
from invitebot.utils.logger import PACKAGE_LOGGER, configure_logging, setup_logger


class RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


class FakeSession:
    def __init__(self):
        self.calls = []

    async def commit(self):
        self.calls.append('commit')

    async def rollback(self):
        self.calls.append('rollback')

    async def close(self):
        self.calls.append('close')


@pytest.fixture
def isolated_root():
    name = 'invitebot_logging_test'
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_logging_writes_daily_file(tmp_path, isolated_root):
    logger = configure_logging(log_dir=tmp_path / 'logs', root=isolated_root)
    logging.getLogger(f'{isolated_root}.services').warning("query failed")

    files = list((tmp_path / 'logs').glob('invite_bot_*.log'))
    assert len(files) == 1
    logger.handlers[1].flush()
    assert "query failed" in files[0].read_text(encoding='utf-8')


def test_configure_logging_is_idempotent(tmp_path, isolated_root):
    first = configure_logging(log_dir=tmp_path, root=isolated_root)
    second = configure_logging(log_dir=tmp_path / 'other', root=isolated_root)

    assert first is second
    assert len(second.handlers) == 2
    assert not (tmp_path / 'other').exists()


def test_setup_logger_nests_under_package():
    assert setup_logger('invitebot.cogs.leaderboard').name == 'invitebot.cogs.leaderboard'
    assert setup_logger('__main__').name == f'{PACKAGE_LOGGER}.__main__'
    assert logging.getLogger(PACKAGE_LOGGER).handlers


@pytest.mark.asyncio
async def test_session_rollback_is_logged():
    session = FakeSession()
    service = BaseService(lambda: session)
    handler = RecordingHandler()
    base_logger = logging.getLogger('invitebot.services.base')
    base_logger.addHandler(handler)
    base_logger.setLevel(logging.DEBUG)

    try:
        with pytest.raises(ValueError):
            async with service.get_session():
                raise ValueError("bad row")
    finally:
        base_logger.removeHandler(handler)
        base_logger.setLevel(logging.NOTSET)

    assert session.calls == ['rollback', 'close']
    assert any("ValueError" in record.getMessage() for record in handler.records)
