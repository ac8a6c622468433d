# ========================
# tests/test_api_integration.py
# ========================

import unittest
import requests


class TestAPIIntegration(unittest.TestCase):
    """
    Integration tests for the API server endpoints.
    These tests require the API server to be running on localhost:8000
    """

    BASE_URL = "http://localhost:8000"

    @classmethod
    def setUpClass(cls):
        """Check if API server is available before running tests."""
        try:
            response = requests.get(f"{cls.BASE_URL}/health", timeout=5)
            if response.status_code != 200:
                raise ConnectionError("API server not responding correctly")
        except (requests.exceptions.RequestException, ConnectionError):
            raise unittest.SkipTest("API server not available at localhost:8000. Start with 'python api_server.py'")

    def test_health_endpoint(self):
        response = requests.get(f"{self.BASE_URL}/health")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["status"], "healthy")
        self.assertIn("timestamp", data)
        self.assertIn("dataset_version", data)
        self.assertIn("vehicles", data)

    def test_root_endpoint(self):
        response = requests.get(f"{self.BASE_URL}/")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertIn("endpoints", data)
        self.assertIn("kpis", data["views"])

    def test_filter_options(self):
        response = requests.get(f"{self.BASE_URL}/filters/options")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(len(data["year_range"]), 2)
        self.assertLessEqual(data["year_range"][0], data["year_range"][1])
        self.assertEqual(data["manufacturers"], sorted(data["manufacturers"]))
        self.assertEqual(data["vehicle_types"], ["BEV", "PHEV"])

    def test_dashboard_unfiltered(self):
        response = requests.get(f"{self.BASE_URL}/dashboard")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["kpis"]["total_vehicles"], data["vehicle_count"])
        self.assertEqual(len(data["vehicle_types"]), 2)
        self.assertEqual(len(data["range_distribution"]), 8)

    def test_dashboard_with_filters(self):
        options = requests.get(f"{self.BASE_URL}/filters/options").json()
        make = options["manufacturers"][0]

        response = requests.get(
            f"{self.BASE_URL}/dashboard",
            params={"manufacturers": [make], "vehicle_types": ["BEV"]}
        )
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["filters"]["manufacturers"], [make])
        for entry in data["top_manufacturers"]:
            self.assertEqual(entry["name"], make)
        self.assertEqual(data["vehicle_types"][1]["value"], 0)

    def test_single_view(self):
        response = requests.get(f"{self.BASE_URL}/views/adoption_trend", params={"year_min": 2020})
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["view"], "adoption_trend")
        for point in data["data"]:
            self.assertGreaterEqual(point["year"], 2020)

    def test_unknown_view(self):
        response = requests.get(f"{self.BASE_URL}/views/does_not_exist")
        self.assertEqual(response.status_code, 404)

    def test_invalid_parameters(self):
        response = requests.get(f"{self.BASE_URL}/dashboard", params={"vehicle_types": ["DIESEL"]})
        self.assertEqual(response.status_code, 422)

        response = requests.get(f"{self.BASE_URL}/dashboard", params={"year_min": "soon"})
        self.assertEqual(response.status_code, 422)

    def test_reload(self):
        before = requests.get(f"{self.BASE_URL}/health").json()["dataset_version"]

        response = requests.post(f"{self.BASE_URL}/reload")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["status"], "reloaded")
        self.assertGreater(data["dataset_version"], before)


if __name__ == '__main__':
    unittest.main()
