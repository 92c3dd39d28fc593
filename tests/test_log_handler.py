"""Tests for merge log capture."""

import logging

import pytest

from prefab_merge_tool.core.node_merge import GameObjectMergeUnit
from prefab_merge_tool.core.unity_model import UnityComponent, UnityGameObject
from prefab_merge_tool.utils.log_handler import MemoryLogHandler, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("prefab_merge_tool")
    level, handlers = logger.level, logger.handlers[:]
    yield logger
    logger.setLevel(level)
    logger.handlers[:] = handlers


class TestMemoryLogHandler:
    def test_captures_and_filters(self):
        logger = logging.getLogger("test_log_handler.capture")
        handler = MemoryLogHandler(max_records=10)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        try:
            logger.debug("detail %d", 1)
            logger.warning("collision")
        finally:
            logger.removeHandler(handler)

        assert [r.message for r in handler.records()] == ["detail 1", "collision"]
        assert [r.message for r in handler.records(min_level=logging.WARNING)] == ["collision"]
        assert handler.records(logger_prefix="other") == []
        assert "[WARNING] test_log_handler.capture collision" in handler.records()[-1].format(show_timestamp=False)

    def test_bounded(self):
        handler = MemoryLogHandler(max_records=2)
        for i in range(3):
            handler.handle(logging.makeLogRecord({"msg": f"m{i}", "levelno": logging.INFO, "levelname": "INFO"}))
        assert [r.message for r in handler.records()] == ["m1", "m2"]
        handler.clear()
        assert handler.records() == []

    def test_listeners(self):
        handler = MemoryLogHandler()
        seen = []
        handler.add_listener(seen.append)
        handler.add_listener(seen.append)
        handler.handle(logging.makeLogRecord({"msg": "hello", "levelno": logging.INFO, "levelname": "INFO"}))
        handler.remove_listener(seen.append)
        handler.handle(logging.makeLogRecord({"msg": "bye", "levelno": logging.INFO, "levelname": "INFO"}))

        assert [r.message for r in seen] == ["hello"]


class TestSetupLogging:
    def test_replaces_own_handlers(self, package_logger):
        before = list(package_logger.handlers)
        first = setup_logging(logging.DEBUG)
        handler = setup_logging(logging.DEBUG)

        added = [h for h in package_logger.handlers if h not in before]
        assert len(added) == 2
        assert handler in added
        assert first not in package_logger.handlers

    def test_keeps_foreign_handlers(self, package_logger):
        foreign = logging.NullHandler()
        package_logger.addHandler(foreign)

        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)

        assert foreign in package_logger.handlers

    def test_records_merge_activity(self, package_logger):
        handler = setup_logging(logging.DEBUG)
        ours = UnityGameObject(file_id="1", name="Player")
        theirs = UnityGameObject(
            file_id="1",
            name="Player",
            components=[UnityComponent("5", "Rigidbody"), UnityComponent("5", "Rigidbody")],
        )

        unit = GameObjectMergeUnit(ours, theirs)
        unit.use_ours()

        messages = [r.message for r in handler.records(logger_prefix="prefab_merge_tool.core")]
        assert any("Duplicate component identifier 5" in m for m in messages)
        assert any("kept ours for 1 action(s)" in m for m in messages)
