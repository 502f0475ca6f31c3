"""Tests for the account, property and data stream tools backed by the typed client."""

import json

import pytest
from google.analytics.admin_v1alpha.types import (
    Account,
    DataStream,
    ListPropertiesRequest,
    Property,
    PropertyType,
)
from google.api_core.exceptions import InvalidArgument, NotFound, PermissionDenied

from mcp_server_ga4_admin import accounts, data_streams


@pytest.mark.asyncio
class TestListAccounts:
    async def test_formats_accounts(self, clients, admin):
        admin.list_accounts.return_value = [
            Account(name="accounts/100", display_name="Main", region_code="NL"),
        ]

        result = json.loads(await accounts.list_accounts(clients))

        assert result["accounts"] == [{
            "name": "accounts/100",
            "displayName": "Main",
            "createTime": None,
            "updateTime": None,
            "regionCode": "NL",
            "deleted": False,
        }]

    async def test_no_accounts(self, clients, admin):
        admin.list_accounts.return_value = []

        result = json.loads(await accounts.list_accounts(clients))

        assert result["message"] == "No accessible GA4 accounts found."

    async def test_permission_denied(self, clients, admin):
        admin.list_accounts.side_effect = PermissionDenied("denied")

        result = json.loads(await accounts.list_accounts(clients))

        assert result["error"].startswith("Permission denied to list GA4 accounts.")
        assert "Google API Error 403" in result["error"]


@pytest.mark.asyncio
class TestListProperties:
    async def test_filters_by_account(self, clients, admin):
        admin.list_properties.return_value = [
            Property(
                name="properties/1",
                display_name="Site",
                parent="accounts/100",
                property_type=PropertyType.PROPERTY_TYPE_ORDINARY,
                time_zone="Europe/Amsterdam",
                currency_code="EUR",
            ),
        ]

        result = json.loads(await accounts.list_properties(clients, "100"))

        request = admin.list_properties.call_args.args[0]
        assert request == ListPropertiesRequest(filter="parent:accounts/100")
        prop = result["properties"][0]
        assert prop["propertyType"] == "PROPERTY_TYPE_ORDINARY"
        assert prop["timeZone"] == "Europe/Amsterdam"
        assert prop["parent"] == "accounts/100"

    async def test_account_not_found(self, clients, admin):
        admin.list_properties.side_effect = NotFound("missing")

        result = json.loads(await accounts.list_properties(clients, "100"))

        assert result["error"].startswith("Account '100' not found.")


@pytest.mark.asyncio
class TestGetPropertyDetails:
    async def test_returns_full_property(self, clients, admin):
        admin.get_property.return_value = Property(
            name="properties/1", display_name="Site", currency_code="EUR"
        )

        result = json.loads(await accounts.get_property_details(clients, "1"))

        assert result["property"]["name"] == "properties/1"
        assert result["property"]["displayName"] == "Site"
        assert result["property"]["currencyCode"] == "EUR"

    async def test_invalid_argument(self, clients, admin):
        admin.get_property.side_effect = InvalidArgument("bad id")

        result = json.loads(await accounts.get_property_details(clients, "1"))

        assert "Check the ID format" in result["error"]

    async def test_rejects_non_numeric_id(self, clients, admin):
        result = json.loads(await accounts.get_property_details(clients, "properties/1"))

        assert "Property ID must be numeric" in result["error"]
        admin.get_property.assert_not_called()


@pytest.mark.asyncio
class TestDataStreams:
    async def test_list_includes_web_stream_data(self, clients, admin):
        admin.list_data_streams.return_value = [
            DataStream(
                name="properties/1/dataStreams/9",
                display_name="Web",
                type_=DataStream.DataStreamType.WEB_DATA_STREAM,
                web_stream_data=DataStream.WebStreamData(
                    measurement_id="G-ABC", default_uri="https://example.com"
                ),
            ),
        ]

        result = json.loads(await data_streams.list_data_streams(clients, "1"))

        stream = result["dataStreams"][0]
        assert stream["type"] == "WEB_DATA_STREAM"
        assert stream["webStreamData"]["measurementId"] == "G-ABC"
        assert "androidAppStreamData" not in stream

    async def test_list_empty(self, clients, admin):
        admin.list_data_streams.return_value = []

        result = json.loads(await data_streams.list_data_streams(clients, "1"))

        assert result["message"] == "No data streams found for property 1."

    async def test_create_web_stream(self, clients, admin):
        admin.create_data_stream.return_value = DataStream(
            name="properties/1/dataStreams/10",
            display_name="Shop",
            type_=DataStream.DataStreamType.WEB_DATA_STREAM,
            web_stream_data=DataStream.WebStreamData(default_uri="https://shop.example.com"),
        )

        result = json.loads(
            await data_streams.create_data_stream(clients, "1", "Shop", "https://shop.example.com")
        )

        request = admin.create_data_stream.call_args.args[0]
        assert request.parent == "properties/1"
        assert request.data_stream.web_stream_data.default_uri == "https://shop.example.com"
        assert result["dataStream"]["name"] == "properties/1/dataStreams/10"
