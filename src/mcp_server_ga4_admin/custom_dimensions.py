"""
Google Analytics Admin API custom dimension tools.
"""

import re
import logging
from typing import Annotated, Any, Dict, Literal, Optional

from fastmcp import Context
from pydantic import Field

from .clients import AdminClients
from .coordinator import get_clients, mcp
from . import errors
from . import utils

# Configure logging
logger = logging.getLogger(__name__)

COLLECTION = "customDimensions"

PARAMETER_NAME_PATTERN = r"^[a-zA-Z][a-zA-Z0-9_]{0,39}$"
MAX_DISPLAY_NAME = 82
MAX_DESCRIPTION = 150

DimensionScope = Literal["EVENT", "USER", "ITEM"]


def format_custom_dimension(dimension: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": dimension.get("name"),
        "parameterName": dimension.get("parameterName"),
        "displayName": dimension.get("displayName"),
        "description": dimension.get("description"),
        "scope": dimension.get("scope"),
        "disallowAdsPersonalization": dimension.get("disallowAdsPersonalization"),
    }


def build_custom_dimension(
    parameter_name: str,
    display_name: str,
    scope: str,
    description: Optional[str] = None,
    disallow_ads_personalization: Optional[bool] = None,
) -> Dict[str, Any]:
    """Validate the inputs and build the request body of a new custom dimension."""
    if not re.match(PARAMETER_NAME_PATTERN, parameter_name):
        raise ValueError(
            "Parameter name must start with a letter and contain only alphanumeric "
            "characters and underscores (max 40)"
        )
    if len(display_name) > MAX_DISPLAY_NAME:
        raise ValueError(f"Display name must be at most {MAX_DISPLAY_NAME} characters")
    if description and len(description) > MAX_DESCRIPTION:
        raise ValueError(f"Description must be at most {MAX_DESCRIPTION} characters")
    if scope not in ("EVENT", "USER", "ITEM"):
        raise ValueError(f"Scope must be one of EVENT, USER, ITEM, got '{scope}'")

    dimension_data: Dict[str, Any] = {
        "parameterName": parameter_name,
        "displayName": display_name,
        "scope": scope,
    }
    if description:
        dimension_data["description"] = description
    if disallow_ads_personalization is not None:
        dimension_data["disallowAdsPersonalization"] = disallow_ads_personalization
    return dimension_data


async def list_custom_dimensions(clients: AdminClients, property_id: str) -> str:
    """
    List all custom dimensions of a property, across every page.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)

    Returns:
        JSON string containing the formatted custom dimensions
    """
    try:
        name = utils.property_name(property_id)
    except ValueError as e:
        return errors.error_response("Invalid property ID", e)

    logger.info(f"Running tool: list_custom_dimensions for {name}")

    try:
        items = await utils.run_blocking(clients.rest.list_all, f"{name}/{COLLECTION}", COLLECTION)
        dimensions = [format_custom_dimension(d) for d in items]

        if not dimensions:
            return utils.to_json({
                "customDimensions": [],
                "message": f"No custom dimensions found for property {property_id}.",
            })

        return utils.to_json({"customDimensions": dimensions})

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"Error listing custom dimensions for property '{name}'",
            not_found=f"Property '{name}' not found.",
            forbidden=f"Permission denied to access property '{name}'. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response(f"Error listing custom dimensions for property '{name}'", e)


async def get_custom_dimension(clients: AdminClients, property_id: str, dimension_id: str) -> str:
    """
    Get a single custom dimension.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)
        dimension_id: ID of the custom dimension within the property

    Returns:
        JSON string containing the custom dimension
    """
    try:
        name = utils.child_name(property_id, COLLECTION, dimension_id)
    except ValueError as e:
        return errors.error_response("Invalid custom dimension reference", e)

    logger.info(f"Running tool: get_custom_dimension for {name}")

    try:
        dimension = await utils.run_blocking(clients.rest.get, name)
        return utils.to_json({"customDimension": dimension})

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"Error getting custom dimension '{name}'",
            not_found=f"Custom dimension '{name}' not found.",
            forbidden=f"Permission denied to access custom dimension '{name}'. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response(f"Error getting custom dimension '{name}'", e)


async def create_custom_dimension(
    clients: AdminClients,
    property_id: str,
    parameter_name: str,
    display_name: str,
    scope: str,
    description: Optional[str] = None,
    disallow_ads_personalization: Optional[bool] = None,
) -> str:
    """
    Create a custom dimension. Inputs are validated before any request is made.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)
        parameter_name: Event or user parameter the dimension reads
        display_name: Display name, at most 82 characters
        scope: EVENT, USER or ITEM
        description: Optional description, at most 150 characters
        disallow_ads_personalization: Optional; excludes the dimension from ads personalization

    Returns:
        JSON string containing the created custom dimension
    """
    try:
        name = utils.property_name(property_id)
        dimension_data = build_custom_dimension(
            parameter_name, display_name, scope, description, disallow_ads_personalization
        )
    except ValueError as e:
        return errors.error_response("Invalid custom dimension data", e)

    logger.info(f"Running tool: create_custom_dimension for {name}")

    try:
        dimension = await utils.run_blocking(clients.rest.post, f"{name}/{COLLECTION}", dimension_data)
        return utils.to_json({"customDimension": dimension})

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"Error creating custom dimension in property '{name}'",
            not_found=f"Property '{name}' not found.",
            forbidden=f"Permission denied to create custom dimension in property '{name}'. {errors.PERMISSION_HINT}",
            invalid="Invalid custom dimension data",
        )
    except Exception as e:
        return errors.error_response(f"Error creating custom dimension in property '{name}'", e)


@mcp.tool(name="ga4_admin_api_list_custom_dimensions")
async def list_custom_dimensions_tool(property_id: utils.PropertyId, ctx: Context) -> str:
    """List all custom dimensions for a specific Google Analytics 4 property."""
    return await list_custom_dimensions(get_clients(ctx), property_id)


@mcp.tool(name="ga4_admin_api_get_custom_dimension")
async def get_custom_dimension_tool(
    property_id: utils.PropertyId,
    dimension_id: Annotated[str, Field(min_length=1, description="The ID of the custom dimension")],
    ctx: Context,
) -> str:
    """Get details of a specific custom dimension in a Google Analytics 4 property."""
    return await get_custom_dimension(get_clients(ctx), property_id, dimension_id)


@mcp.tool(name="ga4_admin_api_create_custom_dimension")
async def create_custom_dimension_tool(
    property_id: utils.PropertyId,
    parameter_name: Annotated[
        str, Field(pattern=PARAMETER_NAME_PATTERN, description="The parameter name for the custom dimension")
    ],
    display_name: Annotated[
        str, Field(max_length=MAX_DISPLAY_NAME, description="Display name for the custom dimension")
    ],
    scope: Annotated[DimensionScope, Field(description="The scope of the custom dimension (EVENT, USER, or ITEM)")],
    ctx: Context,
    description: Annotated[
        Optional[str], Field(max_length=MAX_DESCRIPTION, description="Optional description for the custom dimension")
    ] = None,
    disallow_ads_personalization: Annotated[
        Optional[bool], Field(description="Optional. If true, excludes this dimension from ads personalization")
    ] = None,
) -> str:
    """Create a new custom dimension for a specific Google Analytics 4 property."""
    return await create_custom_dimension(
        get_clients(ctx), property_id, parameter_name, display_name, scope,
        description, disallow_ads_personalization,
    )
