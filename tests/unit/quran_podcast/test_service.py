#!/usr/bin/env python3
"""Tests for the programmatic service API."""

import io
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import pytest

from quran_podcast import models, service

# Add tests directory to path for conftest import
tests_dir = Path(__file__).resolve().parents[2]
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from conftest import (  # noqa: E402
    create_test_config,
    create_test_episode,
    TEST_FEED_URL,
    TEST_OTHER_RECITER,
    TEST_RECITER,
)

pytestmark = [pytest.mark.unit]


@patch("quran_podcast.service.workflow.apply_log_level")
class TestServiceRun(unittest.TestCase):
    """Tests for service.run."""

    def setUp(self):
        self.episodes = [
            create_test_episode(surah="سورة يس", reciter=TEST_RECITER, image="m.jpg"),
            create_test_episode(surah="سورة الملك", reciter=TEST_OTHER_RECITER, image="a.jpg"),
        ]
        self.feed = models.FeedResult(episodes=self.episodes, source=TEST_FEED_URL)

    @patch("quran_podcast.service.workflow.run_pipeline")
    def test_success(self, mock_pipeline, mock_log_level):
        mock_pipeline.return_value = (self.feed, self.episodes[:1])

        result = service.run(create_test_config())

        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertEqual(result.episodes, self.episodes[:1])
        self.assertEqual([r.name for r in result.reciters], [TEST_RECITER, TEST_OTHER_RECITER])
        self.assertEqual(result.total_episodes, 2)
        self.assertEqual(result.summary, "1 of 2 episodes match")
        mock_log_level.assert_called_once_with(level="INFO", log_file=None)

    @patch("quran_podcast.service.workflow.run_pipeline")
    def test_failed_feed(self, mock_pipeline, mock_log_level):
        mock_pipeline.return_value = (models.FeedResult(error="HTTP 503"), [])

        result = service.run(create_test_config())

        self.assertFalse(result.success)
        self.assertEqual(result.error, "HTTP 503")
        self.assertEqual(result.summary, "Feed unavailable")
        self.assertEqual(result.episodes, [])

    @patch("quran_podcast.service.workflow.run_pipeline")
    def test_unexpected_exception(self, mock_pipeline, mock_log_level):
        mock_pipeline.side_effect = RuntimeError("kaboom")

        result = service.run(create_test_config())

        self.assertFalse(result.success)
        self.assertEqual(result.error, "kaboom")


class TestRunFromConfigFile(unittest.TestCase):
    """Tests for service.run_from_config_file."""

    def test_missing_file(self):
        result = service.run_from_config_file("/nonexistent/quran.yaml")
        self.assertFalse(result.success)
        self.assertIn("Failed to load configuration", result.error)

    def test_invalid_values(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "config.yaml")
            with open(path, "w", encoding="utf-8") as fh:
                fh.write("rss: ftp://example.com/feed.xml\n")
            result = service.run_from_config_file(path)
        self.assertFalse(result.success)

    @patch("quran_podcast.service.run")
    def test_valid_file_delegates_to_run(self, mock_run):
        mock_run.return_value = service.ServiceResult(summary="ok")
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = os.path.join(tmp_dir, "config.json")
            with open(path, "w", encoding="utf-8") as fh:
                fh.write('{"rss": "https://example.com/feed.xml", "reciter": "Sheikh Ahmad"}')
            result = service.run_from_config_file(Path(path))

        self.assertEqual(result.summary, "ok")
        cfg = mock_run.call_args[0][0]
        self.assertEqual(cfg.rss_url, "https://example.com/feed.xml")
        self.assertEqual(cfg.reciter, "Sheikh Ahmad")


class TestServiceMain(unittest.TestCase):
    """Tests for service.main entry point."""

    @patch("quran_podcast.service.run_from_config_file")
    def test_success_prints_summary(self, mock_run):
        mock_run.return_value = service.ServiceResult(summary="3 of 9 episodes match")
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            exit_code = service.main(["--config", "config.yaml"])

        self.assertEqual(exit_code, 0)
        self.assertIn("3 of 9 episodes match", stdout.getvalue())
        mock_run.assert_called_once_with("config.yaml")

    @patch("quran_podcast.service.run_from_config_file")
    def test_failure_prints_error(self, mock_run):
        mock_run.return_value = service.ServiceResult(success=False, error="HTTP 404")
        with patch("sys.stderr", new_callable=io.StringIO) as stderr:
            exit_code = service.main(["--config", "config.yaml"])

        self.assertEqual(exit_code, 1)
        self.assertIn("Error: HTTP 404", stderr.getvalue())

    def test_config_is_required(self):
        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                service.main([])


if __name__ == "__main__":
    unittest.main()
