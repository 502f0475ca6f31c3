"""Tests for the audience and custom dimension tools."""

import json

import pytest

from mcp_server_ga4_admin import audiences, custom_dimensions
from mcp_server_ga4_admin.errors import AdminApiError


@pytest.mark.asyncio
class TestAudiences:
    async def test_list_formats_audiences(self, clients, rest):
        rest.list_all.return_value = [{
            "name": "properties/1/audiences/5",
            "displayName": "Buyers",
            "membershipDurationDays": 30,
            "filterClauses": [],
        }]

        result = json.loads(await audiences.list_audiences(clients, "1"))

        rest.list_all.assert_called_once_with("properties/1/audiences", "audiences")
        audience = result["audiences"][0]
        assert audience["displayName"] == "Buyers"
        assert "filterClauses" not in audience

    async def test_get_returns_raw_audience(self, clients, rest):
        rest.get.return_value = {"name": "properties/1/audiences/5", "filterClauses": [{}]}

        result = json.loads(await audiences.get_audience(clients, "1", "5"))

        assert result["audience"]["filterClauses"] == [{}]

    async def test_create_sends_default_filter(self, clients, rest):
        rest.post.return_value = {"name": "properties/1/audiences/6"}

        await audiences.create_audience(clients, "1", "Viewers", "All viewers", 30)

        path, body = rest.post.call_args.args
        assert path == "properties/1/audiences"
        assert body["membershipDurationDays"] == 30
        assert body["filterClauses"] == audiences.DEFAULT_FILTER_CLAUSES

    async def test_create_rejects_out_of_range_duration(self, clients, rest):
        result = json.loads(await audiences.create_audience(clients, "1", "V", "d", 541))

        assert "1-540 days" in result["error"]
        rest.post.assert_not_called()

    async def test_create_bad_request(self, clients, rest):
        rest.post.side_effect = AdminApiError(400, "filterClauses invalid")

        result = json.loads(await audiences.create_audience(clients, "1", "V", "d", 30))

        assert result["error"] == "Invalid audience data: Google API Error 400 - filterClauses invalid"


class TestBuildCustomDimension:
    def test_minimal(self):
        assert custom_dimensions.build_custom_dimension("plan_type", "Plan", "USER") == {
            "parameterName": "plan_type",
            "displayName": "Plan",
            "scope": "USER",
        }

    def test_optional_fields(self):
        body = custom_dimensions.build_custom_dimension(
            "plan", "Plan", "EVENT", description="Plan tier", disallow_ads_personalization=False
        )
        assert body["description"] == "Plan tier"
        assert body["disallowAdsPersonalization"] is False

    @pytest.mark.parametrize("parameter_name", ["1plan", "plan-type", "", "p" * 41])
    def test_invalid_parameter_name(self, parameter_name):
        with pytest.raises(ValueError, match="Parameter name"):
            custom_dimensions.build_custom_dimension(parameter_name, "Plan", "EVENT")

    def test_display_name_too_long(self):
        with pytest.raises(ValueError, match="Display name"):
            custom_dimensions.build_custom_dimension("plan", "x" * 83, "EVENT")

    def test_unknown_scope(self):
        with pytest.raises(ValueError, match="Scope"):
            custom_dimensions.build_custom_dimension("plan", "Plan", "SESSION")


@pytest.mark.asyncio
class TestCustomDimensionTools:
    async def test_list(self, clients, rest):
        rest.list_all.return_value = [{
            "name": "properties/1/customDimensions/3",
            "parameterName": "plan",
            "displayName": "Plan",
            "scope": "USER",
        }]

        result = json.loads(await custom_dimensions.list_custom_dimensions(clients, "1"))

        rest.list_all.assert_called_once_with("properties/1/customDimensions", "customDimensions")
        assert result["customDimensions"][0]["parameterName"] == "plan"

    async def test_list_empty(self, clients, rest):
        rest.list_all.return_value = []

        result = json.loads(await custom_dimensions.list_custom_dimensions(clients, "1"))

        assert result["message"] == "No custom dimensions found for property 1."

    async def test_get_not_found(self, clients, rest):
        rest.get.side_effect = AdminApiError(404, "not found")

        result = json.loads(await custom_dimensions.get_custom_dimension(clients, "1", "3"))

        assert result["error"].startswith(
            "Custom dimension 'properties/1/customDimensions/3' not found."
        )

    async def test_create(self, clients, rest):
        rest.post.return_value = {"name": "properties/1/customDimensions/4", "parameterName": "plan"}

        result = json.loads(
            await custom_dimensions.create_custom_dimension(clients, "1", "plan", "Plan", "EVENT")
        )

        rest.post.assert_called_once_with(
            "properties/1/customDimensions",
            {"parameterName": "plan", "displayName": "Plan", "scope": "EVENT"},
        )
        assert result["customDimension"]["name"] == "properties/1/customDimensions/4"

    async def test_create_invalid_input_not_sent(self, clients, rest):
        result = json.loads(
            await custom_dimensions.create_custom_dimension(clients, "1", "9lives", "Plan", "EVENT")
        )

        assert result["error"].startswith("Invalid custom dimension data")
        rest.post.assert_not_called()
