"""
Unit tests for the polling scheduler.
"""

import unittest
from unittest.mock import MagicMock, patch

from config import ExporterConfig
from errors import CatalogBuildError, CollectionError, SnapshotError, SourceQueryError, describe_error
from exporter import VersionExporter
from fake_rds import FakeRdsApi, engine_version, instance
from metric_helpers import gauge_value, sample_count
from metrics import KIND_DEPRECATED, VersionMetrics
from models import ResourceInfo, SnapshotReport


def make_api(**overrides):
    sources = dict(
        available=[[engine_version("mysql", "8.0.35")]],
        deprecated=[[engine_version("mysql", "5.1.1")]],
        instances=[[instance("db-1", "mysql", "5.1.1")]],
    )
    sources.update(overrides)
    return FakeRdsApi(**sources)


class TestVersionExporter(unittest.TestCase):
    """Test VersionExporter wiring and scheduling."""

    def setUp(self):
        self.metrics = VersionMetrics()

    def exporter(self, api, **config_overrides):
        config = ExporterConfig(interval_seconds=30, server_port=9100, **config_overrides)
        return VersionExporter(config, api=api, metrics=self.metrics)

    @patch("exporter.RdsApiClient")
    def test_builds_client_from_config(self, mock_client_class):
        config = ExporterConfig(
            interval_seconds=30, server_port=9100, region="eu-west-1", max_attempts=2, timeout=5
        )
        VersionExporter(config)
        mock_client_class.assert_called_once_with(
            region="eu-west-1", profile=None, timeout_s=5, max_attempts=2
        )

    def test_start_builds_catalog_and_serves(self):
        exporter = self.exporter(make_api())
        with patch.object(self.metrics, "serve") as mock_serve:
            exporter.start()

        self.assertEqual(exporter.catalog, {"mysql": {"8.0.35": False, "5.1.1": True}})
        mock_serve.assert_called_once_with(9100, "0.0.0.0")

    def test_start_fails_without_catalog(self):
        api = make_api(deprecated=[SourceQueryError("describe_db_engine_versions", "boom")])
        exporter = self.exporter(api)

        with patch.object(self.metrics, "serve") as mock_serve:
            with self.assertRaises(CatalogBuildError):
                exporter.start()

        mock_serve.assert_not_called()
        self.assertIsNone(exporter.catalog)

    def test_run_once_publishes(self):
        exporter = self.exporter(make_api())
        exporter.start(serve=False)

        report = exporter.run_once()

        self.assertEqual(report.deprecated, 1)
        self.assertEqual(
            gauge_value(self.metrics, KIND_DEPRECATED, ResourceInfo("db-1", "mysql", "5.1.1")), 1.0
        )
        self.assertEqual(exporter.cycles, 1)
        self.assertEqual(exporter.failed_cycles, 0)

    def test_startup_catalog_reused_across_cycles(self):
        api = make_api()
        exporter = self.exporter(api)
        exporter.start(serve=False)

        exporter.run_once()
        exporter.run_once()

        engine_calls = [c for c in api.calls if c[0] == "engine_versions"]
        self.assertEqual(len(engine_calls), 2)

    def test_cycle_refresh_rebuilds_catalog(self):
        api = make_api()
        exporter = self.exporter(api, catalog_refresh="cycle")
        exporter.start(serve=False)

        exporter.run_once()
        exporter.run_once()

        engine_calls = [c for c in api.calls if c[0] == "engine_versions"]
        self.assertEqual(len(engine_calls), 6)

    def test_failed_catalog_rebuild_clears_previous_gauges(self):
        """A cycle whose catalog rebuild fails exports nothing from the last cycle."""
        api = make_api()
        exporter = self.exporter(api, catalog_refresh="cycle")
        exporter.start(serve=False)
        exporter.run_once()
        resource = ResourceInfo("db-1", "mysql", "5.1.1")
        self.assertEqual(gauge_value(self.metrics, KIND_DEPRECATED, resource), 1.0)

        api.engine_versions["deprecated"] = [
            SourceQueryError("describe_db_engine_versions", "Throttling")
        ]
        with self.assertRaises(CatalogBuildError):
            exporter.run_once()

        self.assertIsNone(gauge_value(self.metrics, KIND_DEPRECATED, resource))
        self.assertEqual(sample_count(self.metrics), 0)
        self.assertIsNone(exporter.catalog)
        self.assertEqual(exporter.failed_cycles, 1)

    def test_failed_cycle_counted_and_raised(self):
        api = make_api(instances=[SourceQueryError("describe_db_instances", "Throttling")])
        exporter = self.exporter(api)
        exporter.start(serve=False)

        with self.assertRaises(CollectionError):
            exporter.run_once()
        self.assertEqual(exporter.failed_cycles, 1)

    def test_run_forever_continues_after_failure(self):
        exporter = self.exporter(make_api())
        exporter._stop = MagicMock()
        exporter._stop.wait.side_effect = [False, False, True]
        exporter.run_once = MagicMock(
            side_effect=[SnapshotError("1 of 2 resource(s) could not be classified"), SnapshotReport()]
        )

        with self.assertLogs("exporter", level="ERROR") as logs:
            exporter.run_forever()

        self.assertEqual(exporter.run_once.call_count, 2)
        exporter._stop.wait.assert_called_with(30)
        self.assertIn("could not be classified", logs.output[0])

    def test_stop_shuts_down_server(self):
        exporter = self.exporter(make_api())
        server = MagicMock()
        exporter._server = (server, MagicMock())

        exporter.stop()

        server.shutdown.assert_called_once()
        self.assertTrue(exporter._stop.is_set())


class TestDescribeError(unittest.TestCase):
    def test_includes_cause_chain(self):
        try:
            try:
                raise SourceQueryError("describe_db_clusters", "AccessDenied")
            except SourceQueryError as e:
                raise CollectionError("Cluster") from e
        except CollectionError as e:
            text = describe_error(e)

        self.assertEqual(
            text,
            "failed to read RDS Cluster infos; describe_db_clusters failed: AccessDenied",
        )


if __name__ == "__main__":
    unittest.main()
