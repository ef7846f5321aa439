"""Unit tests for invoicing connectivity probes."""

import json

import pytest
import respx

from providerhub.infrastructure.configuration.providers.invoicing import (
    ACubeProvider,
    FattureInCloudProvider,
)

FIC_VALUES = {"api_key": "a/ficapikey.token", "company_id_external": "12345"}
ACUBE_VALUES = {"username": "ops@example.com", "password": "acube-password"}


class TestFattureInCloudProvider:
    @pytest.mark.asyncio
    @respx.mock
    async def test_company_accessible(self):
        route = respx.get("https://api-v2.fattureincloud.it/user/companies").respond(
            200, json={"data": {"companies": [{"id": 12345, "name": "Acme Srl"}]}}
        )

        success, detail = await FattureInCloudProvider().check(FIC_VALUES)

        assert success is True
        assert "Acme Srl" in detail
        assert route.calls.last.request.headers["Authorization"] == "Bearer a/ficapikey.token"

    @pytest.mark.asyncio
    @respx.mock
    async def test_company_not_in_token_scope(self):
        respx.get("https://api-v2.fattureincloud.it/user/companies").respond(
            200, json={"data": {"companies": [{"id": 999, "name": "Other"}]}}
        )

        success, detail = await FattureInCloudProvider().check(FIC_VALUES)

        assert success is False
        assert "12345" in detail

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_token(self):
        respx.get("https://api-v2.fattureincloud.it/user/companies").respond(
            401, json={"error": {"message": "Invalid access token"}}
        )

        success, detail = await FattureInCloudProvider().check(FIC_VALUES)

        assert success is False
        assert detail == "Fatture in Cloud authentication failed: Invalid access token"


class TestACubeProvider:
    @pytest.mark.asyncio
    @respx.mock
    async def test_sandbox_login(self):
        route = respx.post("https://common-sandbox.api.acubeapi.com/login").respond(
            200, json={"token": "jwt-token"}
        )

        success, detail = await ACubeProvider().check(ACUBE_VALUES)

        assert success is True
        assert "sandbox" in detail
        assert json.loads(route.calls.last.request.content) == {
            "email": "ops@example.com",
            "password": "acube-password",
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_production_login_rejected(self):
        respx.post("https://common.api.acubeapi.com/login").respond(
            401, json={"message": "Bad credentials"}
        )

        success, detail = await ACubeProvider().check({**ACUBE_VALUES, "environment": "production"})

        assert success is False
        assert detail == "A-Cube login failed: Bad credentials"

    @pytest.mark.asyncio
    async def test_unknown_environment(self):
        success, detail = await ACubeProvider().check({**ACUBE_VALUES, "environment": "staging"})

        assert success is False
        assert "staging" in detail
