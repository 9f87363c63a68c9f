"""
Tests for profiling and logging setup.
"""

import logging

import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from online_balltree import OnlineBallTree
from online_balltree.logging_config import setup_logging
from online_balltree.utils.profiling import Profiler


class TestProfiler:
    """Test the environment controlled profiler."""

    def test_disabled_by_default(self, monkeypatch):
        monkeypatch.delenv("BALLTREE_PROFILE", raising=False)
        tree = OnlineBallTree(2)
        assert not tree.profiler.enabled
        tree.insert([0.0, 0.0], "a")
        assert tree.profiler.summary() == {}

    def test_enabled_from_env(self, monkeypatch):
        monkeypatch.setenv("BALLTREE_PROFILE", "yes")
        assert Profiler.from_env().enabled

    def test_tree_counters(self):
        profiler = Profiler(enabled=True)
        tree = OnlineBallTree(2, profiler=profiler)
        np.random.seed(0)
        for i, x in enumerate(np.random.randn(30, 2)):
            tree.insert(x, i)
        tree.insert(np.random.randn(2), 30)
        tree.insert([0.0, 0.0], "zero")
        tree.insert([0.0, 0.0], "zero again")
        tree.nearest_neighbour_query([0.5, 0.5])
        tree.k_nearest_neighbour_query([0.5, 0.5], 3)
        tree.remove([0.0, 0.0])

        summary = profiler.summary()
        assert summary["insert"]["count"] == 33
        assert summary["nearest"]["count"] == 1
        assert summary["k_nearest"]["count"] == 1
        assert summary["remove"]["count"] == 1
        assert profiler.get_count("duplicates") == 1
        assert profiler.get_count("leaf_distance") > 0
        assert profiler.get_count("fringe_pops") > 0
        assert summary["duplicates"] == {"count": 1, "total_s": 0.0}


class TestLoggingSetup:
    """Test the package logging configuration."""

    def test_setup_logging(self, tmp_path):
        log_file = tmp_path / "balltree.log"
        logger = setup_logging(logging.DEBUG, log_file=str(log_file))
        try:
            assert logger.name == "online_balltree"
            assert len(logger.handlers) == 2

            tree = OnlineBallTree(1)
            tree.insert([1.0], "a")
            tree.insert([1.0], "b")
            for handler in logger.handlers:
                handler.flush()
            assert "already stored" in log_file.read_text(encoding="utf-8")

            # Calling again replaces handlers instead of adding more
            setup_logging(logging.INFO)
            assert len(logger.handlers) == 1
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
