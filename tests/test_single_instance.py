"""Tests for second-launch activation and the single-instance lock."""

from __future__ import annotations

import time
import uuid
from unittest.mock import MagicMock

import pytest
from PyQt6.QtCore import QCoreApplication, QLockFile

import main
from art_timer.ui.single_instance import InstanceChannel


def _wait_until(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not condition() and time.monotonic() < deadline:
        QCoreApplication.processEvents()
        time.sleep(0.01)
    return condition()


@pytest.fixture
def server_name():
    return f"art-timer-test-{uuid.uuid4().hex[:12]}"


@pytest.fixture
def running_instance(qapp, server_name):
    channel = InstanceChannel(server_name)
    requests = []
    channel.activationRequested.connect(lambda: requests.append(True))
    assert channel.listen()
    yield requests
    channel.close()


class TestInstanceChannel:
    def test_second_launch_activates_the_first(self, running_instance, server_name):
        assert InstanceChannel(server_name).notify_running() is True
        assert _wait_until(lambda: running_instance)

    def test_nobody_listening(self, qapp, server_name):
        assert InstanceChannel(server_name).notify_running(timeout_ms=200) is False


class TestAcquireInstanceLock:
    def test_free_lock_is_taken(self):
        lock = MagicMock()
        lock.tryLock.return_value = True
        assert main.acquire_instance_lock(lock) is None

    def test_held_lock_asks_the_running_instance(self, monkeypatch):
        channel_cls = MagicMock()
        monkeypatch.setattr(main, "InstanceChannel", channel_cls)
        lock = MagicMock()
        lock.tryLock.return_value = False
        lock.error.return_value = QLockFile.LockError.LockFailedError

        assert main.acquire_instance_lock(lock, "art-timer-elsewhere") == 0
        channel_cls.assert_called_once_with("art-timer-elsewhere")
        channel_cls.return_value.notify_running.assert_called_once_with()

    @pytest.mark.parametrize("error", [QLockFile.LockError.PermissionError, QLockFile.LockError.UnknownError])
    def test_unusable_lock_file_is_an_error(self, monkeypatch, error):
        channel_cls = MagicMock()
        monkeypatch.setattr(main, "InstanceChannel", channel_cls)
        lock = MagicMock()
        lock.tryLock.return_value = False
        lock.error.return_value = error

        assert main.acquire_instance_lock(lock) == 1
        channel_cls.assert_not_called()

    def test_missing_lock_directory_is_an_error(self, qapp, tmp_path, server_name):
        lock = QLockFile(str(tmp_path / "missing" / "art_timer.lock"))
        assert main.acquire_instance_lock(lock, server_name) == 1

    def test_real_lock_held_by_another_owner(self, running_instance, tmp_path, server_name):
        path = str(tmp_path / "art_timer.lock")
        owner = QLockFile(path)
        assert owner.tryLock(0)
        try:
            assert main.acquire_instance_lock(QLockFile(path), server_name) == 0
            assert _wait_until(lambda: running_instance)
        finally:
            owner.unlock()
