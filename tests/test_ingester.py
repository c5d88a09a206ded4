"""Tests for logfile loading and following."""

from unittest.mock import patch

import pytest

from conftest import GET_RESPONSE, log_line
from vaultwatch.core.ingester import FollowState, follow, load_all, read_new_lines
from vaultwatch.core.monitor import MonitorRegistry


class TestLoadAll:
    def test_loads_every_monitor(self, vault_log, tmp_path):
        registry = MonitorRegistry()
        registry.add(vault_log)
        registry.add(tmp_path / "missing.log")
        assert load_all(registry) == 7
        assert registry.get(vault_log).metrics.gets == 1

    def test_ignore_existing(self, vault_log):
        registry = MonitorRegistry()
        registry.add(vault_log)
        assert load_all(registry, ignore_existing=True) == 0
        assert len(registry.get(vault_log).content) == 0

    def test_reports_each_monitor(self, vault_log, tmp_path):
        registry = MonitorRegistry()
        registry.add(vault_log)
        registry.add(tmp_path / "missing.log")
        loaded = []
        load_all(registry, on_loaded=lambda monitor, count: loaded.append((monitor.logfile, count)))
        assert loaded == [(str(vault_log), 7), (str(tmp_path / "missing.log"), 0)]


class TestReadNewLines:
    def test_complete_lines(self, tmp_path):
        log = tmp_path / "vault.log"
        log.write_text("a\nb\n")
        state = FollowState()
        assert read_new_lines(log, state) == ["a", "b"]
        assert state.position == 4
        assert read_new_lines(log, state) == []

    def test_partial_line_held_back(self, tmp_path):
        log = tmp_path / "vault.log"
        log.write_text("a\npart")
        state = FollowState()
        assert read_new_lines(log, state) == ["a"]
        with open(log, "a") as f:
            f.write("ial\n")
        assert read_new_lines(log, state) == ["partial"]

    def test_truncation_restarts(self, tmp_path):
        log = tmp_path / "vault.log"
        log.write_text("first line\nsecond line\n")
        state = FollowState()
        read_new_lines(log, state)
        log.write_text("new\n")
        assert read_new_lines(log, state) == ["new"]

    def test_missing_file(self, tmp_path):
        assert read_new_lines(tmp_path / "nope.log", FollowState()) == []

    def test_starting_position(self, tmp_path):
        log = tmp_path / "vault.log"
        log.write_text("old\n")
        state = FollowState(position=4)
        with open(log, "a") as f:
            f.write("new\n")
        assert read_new_lines(log, state) == ["new"]


class TestFollow:
    def test_no_monitors(self):
        pytest.importorskip("watchfiles")
        assert list(follow(MonitorRegistry())) == []

    def test_appended_lines_ingested(self, tmp_path):
        pytest.importorskip("watchfiles")
        log = tmp_path / "vault.log"
        log.write_text(log_line("existing") + "\n")
        other = tmp_path / "other.txt"

        registry = MonitorRegistry()
        monitor = registry.add(log)

        def fake_watch(*dirs):
            assert dirs == (tmp_path.resolve(),)
            with open(log, "a") as f:
                f.write(log_line(GET_RESPONSE) + "\n" + log_line(GET_RESPONSE) + "\n")
            other.write_text("ignored\n")
            yield {(2, str(other)), (2, str(log))}

        with patch("watchfiles.watch", fake_watch):
            updates = list(follow(registry))

        assert updates == [(str(log), 2)]
        assert monitor.metrics.gets == 2
        assert len(monitor.content) == 2
