"""
Google Analytics Admin API audience tools.
"""

import logging
from typing import Annotated, Any, Dict

from fastmcp import Context
from pydantic import Field

from .clients import AdminClients
from .coordinator import get_clients, mcp
from . import errors
from . import utils

# Configure logging
logger = logging.getLogger(__name__)

COLLECTION = "audiences"

# Audience creation requires at least one filter clause; new audiences match
# every user with a page_view event.
DEFAULT_FILTER_CLAUSES = [
    {
        "simpleFilter": {
            "scope": "AUDIENCE_FILTER_SCOPE_ACROSS_ALL_SESSIONS",
            "filterExpression": {
                "dimensionOrMetricFilter": {
                    "dimensionOrMetricName": "eventName",
                    "stringFilter": {"matchType": "EXACT", "value": "page_view"},
                }
            },
        }
    }
]


def format_audience(audience: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": audience.get("name"),
        "displayName": audience.get("displayName"),
        "description": audience.get("description"),
        "membershipDurationDays": audience.get("membershipDurationDays"),
        "adsPersonalizationEnabled": audience.get("adsPersonalizationEnabled"),
        "createTime": audience.get("createTime"),
    }


async def list_audiences(clients: AdminClients, property_id: str) -> str:
    """
    List all audiences of a property, across every page.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)

    Returns:
        JSON string containing audience summaries without filter clauses
    """
    try:
        name = utils.property_name(property_id)
    except ValueError as e:
        return errors.error_response("Invalid property ID", e)

    logger.info(f"Running tool: list_audiences for {name}")

    try:
        items = await utils.run_blocking(clients.rest.list_all, f"{name}/{COLLECTION}", COLLECTION)
        audiences = [format_audience(a) for a in items]

        if not audiences:
            return utils.to_json({
                "audiences": [],
                "message": f"No audiences found for property {property_id}.",
            })

        return utils.to_json({"audiences": audiences})

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"Error listing audiences for property '{name}'",
            not_found=f"Property '{name}' not found.",
            forbidden=f"Permission denied to access property '{name}'. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response(f"Error listing audiences for property '{name}'", e)


async def get_audience(clients: AdminClients, property_id: str, audience_id: str) -> str:
    """
    Get the full resource of an audience, filter clauses included.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)
        audience_id: ID of the audience within the property

    Returns:
        JSON string containing the audience
    """
    try:
        name = utils.child_name(property_id, COLLECTION, audience_id)
    except ValueError as e:
        return errors.error_response("Invalid audience reference", e)

    logger.info(f"Running tool: get_audience for {name}")

    try:
        audience = await utils.run_blocking(clients.rest.get, name)
        return utils.to_json({"audience": audience})

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"Error getting audience '{name}'",
            not_found=f"Audience '{name}' not found.",
            forbidden=f"Permission denied to access audience '{name}'. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response(f"Error getting audience '{name}'", e)


async def create_audience(
    clients: AdminClients,
    property_id: str,
    display_name: str,
    description: str,
    membership_duration_days: int,
) -> str:
    """
    Create an audience matching every user with a page_view event.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)
        display_name: Display name for the audience
        description: Description of the audience
        membership_duration_days: How long a user stays in the audience (1-540)

    Returns:
        JSON string containing the created audience
    """
    try:
        name = utils.property_name(property_id)
    except ValueError as e:
        return errors.error_response("Invalid property ID", e)

    if not 1 <= membership_duration_days <= 540:
        return errors.error_response(
            f"Invalid audience data: membership duration must be 1-540 days, got {membership_duration_days}"
        )

    logger.info(f"Running tool: create_audience for {name}")

    audience_data = {
        "displayName": display_name,
        "description": description,
        "membershipDurationDays": membership_duration_days,
        "filterClauses": DEFAULT_FILTER_CLAUSES,
    }

    try:
        audience = await utils.run_blocking(clients.rest.post, f"{name}/{COLLECTION}", audience_data)
        return utils.to_json({"audience": audience})

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"Error creating audience in property '{name}'",
            not_found=f"Property '{name}' not found.",
            forbidden=f"Permission denied to create audience in property '{name}'. {errors.PERMISSION_HINT}",
            invalid="Invalid audience data",
        )
    except Exception as e:
        return errors.error_response(f"Error creating audience in property '{name}'", e)


@mcp.tool(name="ga4_admin_api_list_audiences")
async def list_audiences_tool(property_id: utils.PropertyId, ctx: Context) -> str:
    """List all audiences for a specific Google Analytics 4 property."""
    return await list_audiences(get_clients(ctx), property_id)


@mcp.tool(name="ga4_admin_api_get_audience")
async def get_audience_tool(
    property_id: utils.PropertyId,
    audience_id: Annotated[str, Field(min_length=1, description="The ID of the audience")],
    ctx: Context,
) -> str:
    """Get details of a specific audience in a Google Analytics 4 property."""
    return await get_audience(get_clients(ctx), property_id, audience_id)


@mcp.tool(name="ga4_admin_api_create_audience")
async def create_audience_tool(
    property_id: utils.PropertyId,
    display_name: Annotated[str, Field(description="Display name for the audience")],
    description: Annotated[str, Field(description="Description of the audience")],
    membership_duration_days: Annotated[
        int, Field(ge=1, le=540, description="The duration a user should stay in the audience (1-540 days)")
    ],
    ctx: Context,
) -> str:
    """Create a new audience for a specific Google Analytics 4 property."""
    return await create_audience(
        get_clients(ctx), property_id, display_name, description, membership_duration_days
    )
