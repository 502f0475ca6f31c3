"""
Google Analytics Admin API account and property tools.

Uses the typed admin client for accounts and properties.
"""

import logging
from typing import Annotated

from fastmcp import Context
from google.analytics.admin_v1alpha.types import (
    GetPropertyRequest,
    ListAccountsRequest,
    ListPropertiesRequest,
)
from google.api_core.exceptions import GoogleAPIError
from pydantic import Field

from .clients import AdminClients
from .coordinator import get_clients, mcp
from . import errors
from . import utils

# Configure logging
logger = logging.getLogger(__name__)


def format_account(account) -> dict:
    return {
        "name": account.name,
        "displayName": account.display_name,
        "createTime": utils.timestamp(account.create_time),
        "updateTime": utils.timestamp(account.update_time),
        "regionCode": account.region_code,
        "deleted": account.deleted,
    }


def format_property(prop) -> dict:
    return {
        "name": prop.name,
        "displayName": prop.display_name,
        "propertyType": utils.enum_name(prop.property_type),
        "createTime": utils.timestamp(prop.create_time),
        "updateTime": utils.timestamp(prop.update_time),
        "parent": prop.parent,
        "serviceLevel": utils.enum_name(prop.service_level),
        "currencyCode": prop.currency_code,
        "timeZone": prop.time_zone,
        "deleteTime": utils.timestamp(prop.delete_time),
    }


async def list_accounts(clients: AdminClients) -> str:
    """List all GA4 accounts accessible by the configured credentials."""
    logger.info("Running tool: list_accounts")

    try:
        page_result = await utils.run_blocking(clients.admin.list_accounts, ListAccountsRequest())
        accounts = [format_account(account) for account in page_result]

        if not accounts:
            return utils.to_json({"accounts": [], "message": "No accessible GA4 accounts found."})

        return utils.to_json({"accounts": accounts})

    except GoogleAPIError as e:
        return errors.api_error_response(
            e,
            "Error listing GA4 accounts",
            forbidden=f"Permission denied to list GA4 accounts. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response("Error listing GA4 accounts", e)


async def list_properties(clients: AdminClients, account_id: str) -> str:
    """
    List all GA4 properties within an account.

    Args:
        clients: Admin API clients
        account_id: Numeric account ID

    Returns:
        JSON string containing property summaries
    """
    logger.info(f"Running tool: list_properties for account {account_id}")

    try:
        request = ListPropertiesRequest(filter=f"parent:{utils.account_name(account_id)}")
        page_result = await utils.run_blocking(clients.admin.list_properties, request)
        properties = [format_property(prop) for prop in page_result]

        if not properties:
            return utils.to_json({
                "properties": [],
                "message": f"No GA4 properties found for account {account_id}.",
            })

        return utils.to_json({"properties": properties})

    except GoogleAPIError as e:
        return errors.api_error_response(
            e,
            f"Error listing GA4 properties for account '{account_id}'",
            not_found=f"Account '{account_id}' not found.",
            forbidden=f"Permission denied to access account '{account_id}'. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response(f"Error listing GA4 properties for account '{account_id}'", e)


async def get_property_details(clients: AdminClients, property_id: str) -> str:
    """
    Get the full resource of a GA4 property.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)

    Returns:
        JSON string containing detailed property information
    """
    try:
        name = utils.property_name(property_id)
    except ValueError as e:
        return errors.error_response("Invalid property ID", e)

    logger.info(f"Running tool: get_property_details for {name}")

    try:
        response = await utils.run_blocking(clients.admin.get_property, GetPropertyRequest(name=name))
        return utils.to_json({"property": utils.proto_to_dict(response)})

    except GoogleAPIError as e:
        return errors.api_error_response(
            e,
            f"Error getting GA4 property details for '{name}'",
            not_found=f"Property '{name}' not found.",
            forbidden=f"Permission denied to access property '{name}'. {errors.PERMISSION_HINT}",
            invalid=f"Invalid argument provided for property '{name}'. Check the ID format.",
        )
    except Exception as e:
        return errors.error_response(f"Error getting GA4 property details for '{name}'", e)


@mcp.tool(name="ga4_admin_api_list_accounts")
async def list_accounts_tool(ctx: Context) -> str:
    """List all Google Analytics 4 accounts accessible by the service account."""
    return await list_accounts(get_clients(ctx))


@mcp.tool(name="ga4_admin_api_list_properties")
async def list_properties_tool(
    account_id: Annotated[
        str,
        Field(description="The account ID (numeric part of the account name, e.g., '123456' from 'accounts/123456')"),
    ],
    ctx: Context,
) -> str:
    """List all Google Analytics 4 properties within a specific account."""
    return await list_properties(get_clients(ctx), account_id)


@mcp.tool(name="ga4_admin_api_get_property_details")
async def get_property_details_tool(property_id: utils.PropertyId, ctx: Context) -> str:
    """Get details for a specific Google Analytics 4 property."""
    return await get_property_details(get_clients(ctx), property_id)
