import unittest
from unittest import mock

from impactsim.backend.data_service import ScenarioDataService
from impactsim.backend.historical_events import HistoricalEventCatalog
from impactsim.backend.nasa_client import NASAAPIError, NASAClient

from tests.unit.test_nasa_client import make_neo_payload, make_session


class TestHistoricalEvents(unittest.TestCase):
    def test_aliases_and_default(self):
        catalog = HistoricalEventCatalog()
        self.assertEqual(catalog.get_event("Meteor-Crater").event_id, "barringer")
        self.assertEqual(catalog.get_event("nowhere").event_id, "chicxulub")
        self.assertFalse(catalog.has_event("nowhere"))

    def test_events_build_valid_parameters(self):
        catalog = HistoricalEventCatalog()
        for entry in catalog.snapshot():
            params = catalog.get_event(entry["event_id"]).to_parameters()
            self.assertGreater(params.diameter, 0)
            self.assertEqual(params.impact_latitude, entry["impact_lat"])


class TestScenarioDataService(unittest.TestCase):
    def test_historical_event_lookup(self):
        service = ScenarioDataService(nasa_api_key="KEY", enable_live_apis=False)
        scenario = service.get_scenario("tunguska")
        self.assertEqual(scenario.source, "historical")
        self.assertEqual(scenario.parameters.diameter, 60.0)
        self.assertEqual(scenario.parameters.angle, 30.0)

    def test_overrides_move_historical_event(self):
        service = ScenarioDataService(nasa_api_key="KEY", enable_live_apis=False)
        scenario = service.get_scenario("chelyabinsk", impact_lat=1.0, impact_lon=2.0, angle_deg=80.0)
        self.assertEqual(scenario.parameters.impact_latitude, 1.0)
        self.assertEqual(scenario.parameters.impact_longitude, 2.0)
        self.assertEqual(scenario.parameters.angle, 80.0)
        self.assertEqual(scenario.parameters.diameter, 19.0)

    def test_disabled_live_apis_fall_back_to_default_event(self):
        service = ScenarioDataService(nasa_api_key="KEY", enable_live_apis=False, default_event_id="barringer")
        scenario = service.get_scenario("Apophis")
        self.assertEqual(scenario.asteroid_id, "barringer")

    def test_nasa_lookup(self):
        client = NASAClient("KEY", session=make_session(make_neo_payload()))
        service = ScenarioDataService(nasa_api_key="KEY", nasa_client=client)
        scenario = service.get_scenario("Apophis", impact_lat=5.0, impact_lon=6.0)
        self.assertEqual(scenario.source, "nasa")
        self.assertEqual(scenario.asteroid_id, "2099942")
        self.assertEqual(scenario.parameters.diameter, 400.0)
        self.assertEqual(scenario.parameters.angle, 45.0)
        client.session.get.assert_called_once()
        self.assertTrue(client.session.get.call_args[0][0].endswith("/neo/2099942"))

    def test_nasa_failure_falls_back_with_warning(self):
        client = mock.Mock(spec=NASAClient)
        client.fetch_neo.side_effect = NASAAPIError("rate limited")
        service = ScenarioDataService(nasa_api_key="KEY", nasa_client=client)
        with self.assertLogs("impactsim.backend.data_service", level="WARNING"):
            scenario = service.get_scenario("3542519")
        self.assertEqual(scenario.source, "historical")
        self.assertEqual(scenario.asteroid_id, "chicxulub")

    def test_catalog_falls_back_to_events(self):
        client = mock.Mock(spec=NASAClient)
        client.list_featured.side_effect = NASAAPIError("offline")
        service = ScenarioDataService(nasa_api_key="KEY", nasa_client=client)
        with self.assertLogs("impactsim.backend.data_service", level="WARNING"):
            entries = service.list_catalog(limit=3)
        self.assertEqual(len(entries), 3)
        self.assertTrue(all(entry["source"] == "historical" for entry in entries))

    def test_health_snapshot(self):
        disabled = ScenarioDataService(nasa_api_key="KEY", enable_live_apis=False)
        self.assertEqual(disabled.get_health_snapshot()["status"], "ok")

        client = mock.Mock(spec=NASAClient)
        client.list_featured.side_effect = NASAAPIError("offline")
        degraded = ScenarioDataService(nasa_api_key="KEY", nasa_client=client)
        snapshot = degraded.get_health_snapshot()
        self.assertEqual(snapshot["status"], "degraded")
        self.assertEqual(snapshot["services"]["nasa_neo_api"]["detail"], "offline")


if __name__ == "__main__":
    unittest.main()
