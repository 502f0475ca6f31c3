"""
Google Analytics Admin API data stream tools.

Contains tools for listing the data streams of a property and creating
web data streams.
"""

import logging
from typing import Annotated

from fastmcp import Context
from google.analytics import admin_v1alpha
from google.analytics.admin_v1alpha.types import CreateDataStreamRequest, ListDataStreamsRequest
from google.api_core.exceptions import GoogleAPIError
from pydantic import Field

from .clients import AdminClients
from .coordinator import get_clients, mcp
from . import errors
from . import utils

# Configure logging
logger = logging.getLogger(__name__)


def format_data_stream(data_stream) -> dict:
    """Format a data stream, including the data specific to its type."""
    stream_data = {
        "name": data_stream.name,
        "type": utils.enum_name(data_stream.type_),
        "displayName": data_stream.display_name,
        "createTime": utils.timestamp(data_stream.create_time),
        "updateTime": utils.timestamp(data_stream.update_time),
    }

    if data_stream.web_stream_data:
        stream_data["webStreamData"] = {
            "measurementId": data_stream.web_stream_data.measurement_id,
            "firebaseAppId": data_stream.web_stream_data.firebase_app_id,
            "defaultUri": data_stream.web_stream_data.default_uri,
        }

    if data_stream.android_app_stream_data:
        stream_data["androidAppStreamData"] = {
            "firebaseAppId": data_stream.android_app_stream_data.firebase_app_id,
            "packageName": data_stream.android_app_stream_data.package_name,
        }

    if data_stream.ios_app_stream_data:
        stream_data["iosAppStreamData"] = {
            "firebaseAppId": data_stream.ios_app_stream_data.firebase_app_id,
            "bundleId": data_stream.ios_app_stream_data.bundle_id,
        }

    return stream_data


async def list_data_streams(clients: AdminClients, property_id: str) -> str:
    """
    List all data streams of a property.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)

    Returns:
        JSON string containing the data streams with their type-specific data
    """
    try:
        name = utils.property_name(property_id)
    except ValueError as e:
        return errors.error_response("Invalid property ID", e)

    logger.info(f"Running tool: list_data_streams for {name}")

    try:
        page_result = await utils.run_blocking(
            clients.admin.list_data_streams, ListDataStreamsRequest(parent=name)
        )
        data_streams = [format_data_stream(stream) for stream in page_result]

        if not data_streams:
            return utils.to_json({
                "dataStreams": [],
                "message": f"No data streams found for property {property_id}.",
            })

        return utils.to_json({"dataStreams": data_streams})

    except GoogleAPIError as e:
        return errors.api_error_response(
            e,
            f"Error listing data streams for property '{name}'",
            not_found=f"Property '{name}' not found.",
            forbidden=f"Permission denied to access property '{name}'. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response(f"Error listing data streams for property '{name}'", e)


async def create_data_stream(
    clients: AdminClients, property_id: str, display_name: str, default_uri: str
) -> str:
    """
    Create a web data stream.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)
        display_name: Human-readable display name for the stream
        default_uri: Default URI of the website

    Returns:
        JSON string containing the created data stream
    """
    try:
        name = utils.property_name(property_id)
    except ValueError as e:
        return errors.error_response("Invalid property ID", e)

    logger.info(f"Running tool: create_data_stream for {name}")

    try:
        data_stream = admin_v1alpha.DataStream()
        data_stream.display_name = display_name
        data_stream.type_ = admin_v1alpha.DataStream.DataStreamType.WEB_DATA_STREAM
        data_stream.web_stream_data = admin_v1alpha.DataStream.WebStreamData(default_uri=default_uri)

        request = CreateDataStreamRequest(parent=name, data_stream=data_stream)
        response = await utils.run_blocking(clients.admin.create_data_stream, request)

        return utils.to_json({
            "message": "Data stream successfully created",
            "dataStream": format_data_stream(response),
        })

    except GoogleAPIError as e:
        return errors.api_error_response(
            e,
            f"Error creating data stream in property '{name}'",
            not_found=f"Property '{name}' not found.",
            forbidden=f"Permission denied to create data stream in property '{name}'. {errors.PERMISSION_HINT}",
            invalid=f"Invalid data stream data for property '{name}'.",
        )
    except Exception as e:
        return errors.error_response(f"Error creating data stream in property '{name}'", e)


@mcp.tool(name="ga4_admin_api_list_data_streams")
async def list_data_streams_tool(property_id: utils.PropertyId, ctx: Context) -> str:
    """List all data streams for a specific Google Analytics 4 property."""
    return await list_data_streams(get_clients(ctx), property_id)


@mcp.tool(name="ga4_admin_api_create_data_stream")
async def create_data_stream_tool(
    property_id: utils.PropertyId,
    display_name: Annotated[str, Field(description="Human-readable display name for the data stream")],
    default_uri: Annotated[str, Field(description="Default URI for the web stream (e.g., 'https://example.com')")],
    ctx: Context,
) -> str:
    """Create a new web data stream for a Google Analytics 4 property."""
    return await create_data_stream(get_clients(ctx), property_id, display_name, default_uri)
