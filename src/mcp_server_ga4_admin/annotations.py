"""
Google Analytics Admin API reporting data annotation tools.

The typed admin client does not cover annotations, so these tools call the
REST endpoint directly.
"""

import logging
from typing import Annotated, Any, Dict, Literal, Optional

from fastmcp import Context
from pydantic import Field

from .annotation_update import AnnotationPatch, AnnotationRecord, date_spec_for, resolve_update
from .clients import AdminClients
from .coordinator import get_clients, mcp
from . import errors
from . import utils

# Configure logging
logger = logging.getLogger(__name__)

COLLECTION = "reportingDataAnnotations"

AnnotationColor = Literal["PURPLE", "BROWN", "BLUE", "GREEN", "RED", "CYAN", "ORANGE"]


def format_annotation(annotation: Dict[str, Any]) -> Dict[str, Any]:
    """Keep the documented annotation fields and whichever date field is present."""
    formatted = {
        "name": annotation.get("name"),
        "title": annotation.get("title"),
        "description": annotation.get("description"),
        "color": annotation.get("color"),
        "systemGenerated": annotation.get("systemGenerated", False),
    }
    if annotation.get("annotationDate"):
        formatted["annotationDate"] = annotation["annotationDate"]
    if annotation.get("annotationDateRange"):
        formatted["annotationDateRange"] = annotation["annotationDateRange"]
    return formatted


async def list_annotations(clients: AdminClients, property_id: str) -> str:
    """
    List all reporting data annotations of a property, across every page.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)

    Returns:
        JSON string containing the formatted annotations
    """
    try:
        name = utils.property_name(property_id)
    except ValueError as e:
        return errors.error_response("Invalid property ID", e)

    logger.info(f"Running tool: list_annotations for {name}")

    try:
        items = await utils.run_blocking(clients.rest.list_all, f"{name}/{COLLECTION}", COLLECTION)
        annotations = [format_annotation(a) for a in items]

        if not annotations:
            return utils.to_json({
                "annotations": [],
                "message": f"No annotations found for property {property_id}.",
            })

        return utils.to_json({"annotations": annotations})

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"API error retrieving annotations for property '{name}'",
            not_found=f"Property '{name}' not found.",
            forbidden=f"No access to property '{name}'. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response(f"Error retrieving annotations for property '{name}'", e)


async def get_annotation(clients: AdminClients, property_id: str, annotation_id: str) -> str:
    """
    Get a single annotation.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)
        annotation_id: ID of the annotation within the property

    Returns:
        JSON string containing the formatted annotation
    """
    try:
        name = utils.child_name(property_id, COLLECTION, annotation_id)
    except ValueError as e:
        return errors.error_response("Invalid annotation reference", e)

    logger.info(f"Running tool: get_annotation for {name}")

    try:
        annotation = await utils.run_blocking(clients.rest.get, name)
        return utils.to_json({"annotation": format_annotation(annotation)})

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"API error retrieving annotation '{name}'",
            not_found=f"Annotation '{name}' not found.",
            forbidden=f"No access to annotation '{name}'. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response(f"Error retrieving annotation '{name}'", e)


async def create_annotation(
    clients: AdminClients,
    property_id: str,
    description: str,
    start_time: str,
    end_time: Optional[str] = None,
    title: Optional[str] = None,
    color: str = "BLUE",
) -> str:
    """
    Create an annotation dated on the start time, or spanning start to end
    time when an end time is given.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)
        description: Description of the annotation
        start_time: ISO 8601 start time; only the date part is used
        end_time: Optional ISO 8601 end time; turns the annotation into a range
        title: Optional title, defaults to the description
        color: Annotation color

    Returns:
        JSON string containing the created annotation
    """
    try:
        name = utils.property_name(property_id)
        date = date_spec_for(start_time, end_time)
    except ValueError as e:
        return errors.error_response("Invalid annotation data", e)

    logger.info(f"Running tool: create_annotation for {name}")

    annotation_data = {
        "title": title or description,
        "description": description,
        "color": color,
        date.field: date.to_api(),
    }

    try:
        annotation = await utils.run_blocking(clients.rest.post, f"{name}/{COLLECTION}", annotation_data)
        return utils.to_json({
            "message": "Annotation successfully created",
            "annotation": format_annotation(annotation),
        })

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"API error creating annotation for property '{name}'",
            not_found=f"Property '{name}' not found.",
            forbidden=f"No access to create annotation for property '{name}'. {errors.PERMISSION_HINT}",
            invalid=f"Invalid data for creating annotation in property '{name}'.",
        )
    except Exception as e:
        return errors.error_response(f"Error creating annotation for property '{name}'", e)


async def update_annotation(
    clients: AdminClients,
    property_id: str,
    annotation_id: str,
    description: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
) -> str:
    """
    Update an annotation in place.

    The current annotation is fetched first; only the supplied fields are
    merged in and listed in the update mask. Nothing is written when no field
    is supplied.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)
        annotation_id: ID of the annotation within the property
        description: New description, or None to keep the current one
        start_time: New ISO 8601 start time, or None to keep the current one
        end_time: New ISO 8601 end time; turns a single date into a range

    Returns:
        JSON string containing the updated annotation and the updated fields
    """
    try:
        name = utils.child_name(property_id, COLLECTION, annotation_id)
    except ValueError as e:
        return errors.error_response("Invalid annotation reference", e)

    logger.info(f"Running tool: update_annotation for {name}")

    patch = AnnotationPatch(description=description, start_time=start_time, end_time=end_time)

    try:
        existing = AnnotationRecord.from_api(await utils.run_blocking(clients.rest.get, name))
        # The resource name is addressed by the caller, not taken from the response.
        existing = existing.model_copy(update={"name": name})

        try:
            update = resolve_update(existing, patch)
        except ValueError as e:
            return errors.error_response(f"Invalid update for annotation '{name}'", e)

        if update.is_empty:
            return utils.to_json({
                "message": "No fields specified to update. Annotation remains unchanged.",
            })

        annotation = await utils.run_blocking(
            clients.rest.patch, name, update.resource, update.field_mask
        )
        return utils.to_json({
            "message": "Annotation successfully updated",
            "updatedFields": update.field_mask,
            "annotation": format_annotation(annotation),
        })

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"Error updating annotation '{name}'",
            not_found=f"Annotation '{name}' not found.",
            forbidden=f"Permission denied to update annotation '{name}'. {errors.PERMISSION_HINT}",
            invalid=f"Invalid data for updating annotation '{name}'.",
        )
    except Exception as e:
        return errors.error_response(f"Error updating annotation '{name}'", e)


async def delete_annotation(clients: AdminClients, property_id: str, annotation_id: str) -> str:
    """
    Delete an annotation.

    Args:
        clients: Admin API clients
        property_id: GA4 property ID (numeric)
        annotation_id: ID of the annotation within the property

    Returns:
        JSON string containing a confirmation message
    """
    try:
        name = utils.child_name(property_id, COLLECTION, annotation_id)
    except ValueError as e:
        return errors.error_response("Invalid annotation reference", e)

    logger.info(f"Running tool: delete_annotation for {name}")

    try:
        await utils.run_blocking(clients.rest.delete, name)
        return utils.to_json({
            "message": f"Annotation '{annotation_id}' successfully deleted from property '{property_id}'.",
        })

    except errors.AdminApiError as e:
        return errors.api_error_response(
            e,
            f"API error deleting annotation '{name}'",
            not_found=f"Annotation '{name}' not found.",
            forbidden=f"No access to delete annotation '{name}'. {errors.PERMISSION_HINT}",
        )
    except Exception as e:
        return errors.error_response(f"Error deleting annotation '{name}'", e)


AnnotationId = Annotated[str, Field(min_length=1, description="The ID of the annotation")]
_ISO_FORMAT = "in ISO 8601 format (e.g., '2023-04-01T00:00:00Z')"


@mcp.tool(name="ga4_admin_api_list_annotations")
async def list_annotations_tool(property_id: utils.PropertyId, ctx: Context) -> str:
    """List all annotations for a specific Google Analytics 4 property."""
    return await list_annotations(get_clients(ctx), property_id)


@mcp.tool(name="ga4_admin_api_get_annotation")
async def get_annotation_tool(property_id: utils.PropertyId, annotation_id: AnnotationId, ctx: Context) -> str:
    """Get details of a specific annotation in a Google Analytics 4 property."""
    return await get_annotation(get_clients(ctx), property_id, annotation_id)


@mcp.tool(name="ga4_admin_api_create_annotation")
async def create_annotation_tool(
    property_id: utils.PropertyId,
    description: Annotated[str, Field(description="Description of the annotation")],
    start_time: Annotated[str, Field(description=f"Start time of the annotation {_ISO_FORMAT}")],
    ctx: Context,
    end_time: Annotated[
        Optional[str], Field(description=f"Optional end time of the annotation {_ISO_FORMAT}")
    ] = None,
    title: Annotated[
        Optional[str], Field(description="Optional title; defaults to the description")
    ] = None,
    color: Annotated[AnnotationColor, Field(description="Color of the annotation")] = "BLUE",
) -> str:
    """Create a new annotation for a specific Google Analytics 4 property."""
    return await create_annotation(
        get_clients(ctx), property_id, description, start_time, end_time, title, color
    )


@mcp.tool(name="ga4_admin_api_update_annotation")
async def update_annotation_tool(
    property_id: utils.PropertyId,
    annotation_id: AnnotationId,
    ctx: Context,
    description: Annotated[Optional[str], Field(description="New description of the annotation")] = None,
    start_time: Annotated[Optional[str], Field(description=f"New start time of the annotation {_ISO_FORMAT}")] = None,
    end_time: Annotated[Optional[str], Field(description=f"New end time of the annotation {_ISO_FORMAT}")] = None,
) -> str:
    """Update an existing annotation in a Google Analytics 4 property."""
    return await update_annotation(
        get_clients(ctx), property_id, annotation_id, description, start_time, end_time
    )


@mcp.tool(name="ga4_admin_api_delete_annotation")
async def delete_annotation_tool(property_id: utils.PropertyId, annotation_id: AnnotationId, ctx: Context) -> str:
    """Delete an annotation from a Google Analytics 4 property."""
    return await delete_annotation(get_clients(ctx), property_id, annotation_id)
