"""
HTTP-level tests through the FastAPI app.

Verifies:
1. Login accepts the configured account only; malformed bodies are 400
2. Error envelopes ({error, message}) for 400 / 404
3. Reports reach the client unchanged (rolling windows use the real date)
4. Every GET endpoint answers 200 on the demo dataset
"""

import pytest

from smartour.core.config import settings
from smartour.db.seed import seed_demo

API = settings.api_prefix


class TestLogin:

    def test_valid_credentials(self, client):
        response = client.post(f"{API}/login", json={
            "username": settings.dashboard_username,
            "password": settings.dashboard_password,
        })
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_wrong_password(self, client):
        response = client.post(f"{API}/login", json={
            "username": settings.dashboard_username,
            "password": "wrong",
        })
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid username or password"}

    def test_missing_field_is_400(self, client):
        response = client.post(f"{API}/login", json={"username": "Cansu"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert "password" in body["message"]


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"] == "connected"
        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestKpiEndpoints:

    def test_monthly_profit(self, client, data, ago):
        tour = data.tour()
        data.reservation(tour, on=ago(20), profit=100)
        data.reservation(tour, on=ago(40), profit=50)

        response = client.get(f"{API}/kpi/monthly-profit")

        assert response.status_code == 200
        assert response.json() == {"monthlyProfit": 100}

    def test_unknown_tour_is_404(self, client, db_session):
        response = client.get(f"{API}/tours/4242")
        assert response.status_code == 404
        assert response.json()["error"] == "Tour not found"

    def test_non_numeric_tour_id_is_400(self, client, db_session):
        response = client.get(f"{API}/tours/abc")
        assert response.status_code == 400


class TestCampaignEndpoints:

    def test_comparison_counts(self, client, data):
        tour = data.tour()
        campaign = data.campaign()
        data.reservation(tour, campaign=campaign)
        data.reservation(tour)
        data.reservation(tour)

        response = client.get(f"{API}/campaigns/comparison", params={"metric": "rezervasyon_sayisi"})

        assert response.status_code == 200
        assert response.json() == {"kampanyali": 1, "kampanyasiz": 2}

    @pytest.mark.parametrize("params", [{}, {"metric": "nope"}])
    def test_comparison_rejects_bad_metric(self, client, db_session, params):
        response = client.get(f"{API}/campaigns/comparison", params=params)
        assert response.status_code == 400
        assert set(response.json()) == {"error", "message"}

    @pytest.mark.parametrize("params", [
        {"simulated_discount": "10"},
        {"campaign_id": "1"},
        {"campaign_id": "1", "simulated_discount": "60"},
        {"campaign_id": "1", "simulated_discount": "abc"},
        {"campaign_id": "x", "simulated_discount": "10"},
    ])
    def test_what_if_discount_bad_input(self, client, db_session, params):
        response = client.get(f"{API}/campaigns/what-if/discount", params=params)
        assert response.status_code == 400

    def test_what_if_unknown_campaign(self, client, db_session):
        response = client.get(
            f"{API}/campaigns/what-if/discount",
            params={"campaign_id": "999", "simulated_discount": "10"},
        )
        assert response.status_code == 404
        assert response.json()["error"] == "Campaign not found"

    def test_what_if_discount(self, client, data):
        tour = data.tour(price=1000, cost=600)
        campaign = data.campaign(discount=20)
        data.reservation(tour, campaign=campaign)

        response = client.get(
            f"{API}/campaigns/what-if/discount",
            params={"campaign_id": str(campaign.kampanya_id), "simulated_discount": "20"},
        )

        assert response.status_code == 200
        assert response.json()["profitDifference"] == 0

    def test_impact_matrix_fallback(self, client, data):
        tour = data.tour(tour_type="Deniz")
        campaign = data.campaign(name="Yaz")
        data.reservation(tour, campaign=campaign, profit=120)

        fallback = client.get(f"{API}/campaigns/impact-matrix", params={"metric": "unknown"}).json()
        default = client.get(f"{API}/campaigns/impact-matrix", params={"metric": "avg_profit"}).json()

        assert fallback == default
        assert fallback["campaigns"] == [
            {"campaignId": campaign.kampanya_id, "campaignName": "Yaz", "values": {"Deniz": 120}},
        ]


class TestDemoDataset:

    GET_ENDPOINTS = [
        "/kpi/overview",
        "/kpi/monthly-profit",
        "/kpi/monthly-insights",
        "/kpi/featured-tours",
        "/alerts/critical-occupancy",
        "/tours/1",
        "/tour-types",
        "/tour-types/reservations",
        "/tour-types/occupancy",
        "/tour-types/leaders",
        "/durations/insights",
        "/durations/analysis",
        "/trends/reservations",
        "/campaigns",
        "/campaigns/kpis",
        "/campaigns/comparison?metric=ortalama_kar",
        "/campaigns/roi",
        "/campaigns/occupancy-impact",
        "/campaigns/occupancy-impact/table",
        "/campaigns/what-if/discount?campaign_id=1&simulated_discount=5",
        "/campaigns/what-if/removal?campaign_id=1",
        "/campaigns/impact-matrix?metric=total_profit",
        "/survey/age-distribution",
        "/survey/age-tour-heatmap",
        "/survey/age-campaign-sensitivity",
        "/survey/priority-features",
        "/survey/activity-preferences",
        "/survey/campaign-impact",
        "/survey/vacation-frequency",
    ]

    @pytest.fixture
    def seeded(self, client, db_session):
        seed_demo(db_session)
        return client

    @pytest.mark.parametrize("path", GET_ENDPOINTS)
    def test_endpoint_answers(self, seeded, path):
        response = seeded.get(f"{API}{path}")
        assert response.status_code == 200, response.text

    def test_overview_totals(self, seeded):
        body = seeded.get(f"{API}/kpi/overview").json()
        assert body["totalTours"] == 8
        assert body["totalReservations"] == 240
        assert 0 < body["surveyParticipationRate"] <= 100
