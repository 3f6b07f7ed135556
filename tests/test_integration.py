"""Integration tests for the complete request lifecycle.

Tests cover end-to-end scenarios combining:
- The HTTP application routes and fallbacks
- InsuranceGateway orchestration
- Validation verdicts mapped to HTTP 400
- Upstream forwarding, verbatim relay and failure mapping to HTTP 500

The upstream Zeus API is replaced by an httpx.MockTransport.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from t2p_gateway.app import create_app
from t2p_gateway.client import T2PClient
from t2p_gateway.runtime import GatewayResponse, InsuranceGateway

from tests.conftest import PAST_DEPARTURE

UNEXPECTED_ERROR = {
    "error": "Internal server error",
    "message": "An unexpected error occurred while processing your request",
}


class FakeUpstream:
    """Stand-in for the Zeus API that records requests."""

    def __init__(self, status_code=200, body=None, fail=False):
        self.status_code = status_code
        self.body = body if body is not None else {"errorCodeField": "0"}
        self.fail = fail
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(self.status_code, json=self.body)

    def sent(self, index=0):
        return json.loads(self.requests[index].content)


def make_gateway(settings, upstream):
    return InsuranceGateway(T2PClient(settings, transport=httpx.MockTransport(upstream)))


@pytest.fixture
def upstream():
    return FakeUpstream(body={"availablePlansField": [{"planCodeField": "TPTD"}]})


@pytest.fixture
def client(settings, upstream):
    app = create_app(gateway=make_gateway(settings, upstream))
    return TestClient(app, raise_server_exceptions=False)


class TestPlanSearchRoute:
    """POST /api/v1/insurance/plans."""

    def test_valid_request_is_forwarded_and_relayed(self, client, upstream, plan_search_body):
        response = client.post("/api/v1/insurance/plans", json=plan_search_body)

        assert response.status_code == 200
        assert response.json() == {"availablePlansField": [{"planCodeField": "TPTD"}]}
        assert len(upstream.requests) == 1
        sent = upstream.sent()
        assert sent["Header"]["Currency"] == "NPR"
        assert sent["Flights"]["DepartStationCode"] == "KTM"
        assert sent["Authentication"] == {"Username": "agent", "Password": "secret"}

    def test_invalid_request_is_rejected_without_upstream_call(self, client, upstream, plan_search_body):
        plan_search_body["header"]["adults"] = 0
        plan_search_body["flights"]["departureTime"] = PAST_DEPARTURE

        response = client.post("/api/v1/insurance/plans", json=plan_search_body)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Validation failed",
            "details": [
                "header.adults: At least 1 adult is required",
                "flights.departureTime: Departure time must be in the future",
            ],
        }
        assert upstream.requests == []

    def test_malformed_json_is_treated_as_missing_body(self, client):
        response = client.post(
            "/api/v1/insurance/plans",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["details"] == ["body: Request body is required"]

    def test_empty_body_is_an_empty_object(self, client, upstream):
        response = client.post("/api/v1/insurance/plans", content=b"")

        assert response.status_code == 400
        assert response.json()["details"] == ["header: Header object is required"]
        assert upstream.requests == []

    def test_non_object_body(self, client):
        response = client.post("/api/v1/insurance/plans", json=["header", "flights"])
        assert response.status_code == 400
        assert response.json()["details"] == ["body: Request body is required"]


class TestConfirmRoute:
    """POST /api/v1/insurance/plans/confirm."""

    def test_valid_confirmation(self, settings, confirm_body):
        upstream = FakeUpstream(body={"policyNoField": "P-0001", "errorCodeField": "0"})
        client = TestClient(create_app(gateway=make_gateway(settings, upstream)))

        response = client.post("/api/v1/insurance/plans/confirm", json=confirm_body)

        assert response.status_code == 200
        assert response.json() == {"policyNoField": "P-0001", "errorCodeField": "0"}
        sent = upstream.sent()
        assert sent["Header"]["Channel"] == "OTA"
        assert sent["Header"]["CultureCode"] == "en-US"
        assert sent["Header"]["PNR"] == "ABC123"
        assert sent["Passengers"][0]["IsInfant"] == "false"
        assert "ReturnAirlineCode" not in sent["Flights"]

    def test_empty_confirm_body(self, client):
        response = client.post("/api/v1/insurance/plans/confirm")

        assert response.status_code == 400
        assert response.json()["details"] == ["Header: Header object is required"]

    def test_empty_passengers(self, client, upstream, confirm_body):
        confirm_body["Passengers"] = []

        response = client.post("/api/v1/insurance/plans/confirm", json=confirm_body)

        assert response.status_code == 400
        assert response.json()["details"] == ["Passengers: At least one passenger is required"]
        assert upstream.requests == []

    def test_passenger_errors_are_itemized(self, client, confirm_body):
        confirm_body["Passengers"][0]["IsInfant"] = "yes"
        confirm_body["Passengers"][0]["EmailAddress"] = "not-an-email"

        response = client.post("/api/v1/insurance/plans/confirm", json=confirm_body)

        assert response.json()["details"] == [
            "Passengers[0].IsInfant: IsInfant must be 'true' or 'false'",
            "Passengers[0].EmailAddress: Email address must be valid",
        ]

    def test_upstream_failure_becomes_500(self, settings, confirm_body):
        upstream = FakeUpstream(status_code=502)
        client = TestClient(create_app(gateway=make_gateway(settings, upstream)))

        response = client.post("/api/v1/insurance/plans/confirm", json=confirm_body)

        assert response.status_code == 500
        assert response.json() == UNEXPECTED_ERROR
        assert len(upstream.requests) == 1


class TestCreditBalanceRoute:
    """GET /api/v1/account/credit-balance."""

    def test_credit_balance(self, settings):
        upstream = FakeUpstream(body={"statusCodeField": 0, "accountsField": []})
        client = TestClient(create_app(gateway=make_gateway(settings, upstream)))

        response = client.get("/api/v1/account/credit-balance")

        assert response.status_code == 200
        assert response.json() == {"statusCodeField": 0, "accountsField": []}
        assert upstream.sent() == {
            "Username": "agent",
            "Password": "secret",
            "CurrencyCode": "NPR",
            "CountryCode": "NP",
        }

    def test_network_failure_becomes_500(self, settings):
        client = TestClient(create_app(gateway=make_gateway(settings, FakeUpstream(fail=True))))

        response = client.get("/api/v1/account/credit-balance")

        assert response.status_code == 500
        assert response.json() == UNEXPECTED_ERROR


class TestFallbacks:
    """Unknown routes and unhandled errors."""

    def test_unknown_route(self, client):
        response = client.get("/api/v1/unknown")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found", "message": "Cannot GET /api/v1/unknown"}

    def test_wrong_method_is_not_found(self, client):
        response = client.get("/api/v1/insurance/plans")

        assert response.status_code == 404
        assert response.json()["message"] == "Cannot GET /api/v1/insurance/plans"

    def test_unhandled_exception(self, settings, upstream):
        class BrokenGateway(InsuranceGateway):
            async def check_credit_balance(self):
                raise RuntimeError("gateway exploded")

        app = create_app(gateway=BrokenGateway(T2PClient(settings, transport=httpx.MockTransport(upstream))))
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/v1/account/credit-balance")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error", "message": "gateway exploded"}


class TestInsuranceGateway:
    """Drive the runtime directly, without HTTP."""

    @pytest.mark.asyncio
    async def test_search_plans_verdicts(self, settings, upstream, plan_search_body):
        gateway = make_gateway(settings, upstream)

        accepted = await gateway.search_plans(plan_search_body)
        rejected = await gateway.search_plans({"header": {}})

        assert accepted == GatewayResponse(status_code=200, body=upstream.body)
        assert accepted.ok is True
        assert rejected.status_code == 400
        assert rejected.body == {"error": "Validation failed", "details": ["flights: Flights object is required"]}
        assert len(upstream.requests) == 1

    @pytest.mark.asyncio
    async def test_one_upstream_call_per_accepted_request(self, settings, upstream, confirm_body):
        gateway = make_gateway(settings, upstream)

        for _ in range(3):
            response = await gateway.confirm_purchase(confirm_body)
            assert response.ok

        assert len(upstream.requests) == 3

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self, settings, plan_search_body):
        upstream = FakeUpstream(status_code=500)
        gateway = make_gateway(settings, upstream)

        response = await gateway.search_plans(plan_search_body)

        assert response.status_code == 500
        assert response.body == UNEXPECTED_ERROR
        assert len(upstream.requests) == 1
