"""
Utility functions for the GA4 Admin MCP Server.

Contains resource name helpers, protocol buffer conversion and JSON result
formatting shared by the tool modules.
"""

import re
import json
import asyncio
import logging
from functools import partial
from typing import Annotated, Any, Callable, Dict, Optional

from google.protobuf import message as proto
from pydantic import Field

# Configure logging
logger = logging.getLogger(__name__)

_NUMERIC_ID = re.compile(r"^\d+$")


def proto_to_dict(obj: proto.Message) -> Dict[str, Any]:
    """Converts a proto message to a dictionary with JSON (camelCase) field names."""
    return type(obj).to_dict(
        obj, use_integers_for_enums=False, preserving_proto_field_name=False
    )


def timestamp(value: Any) -> Optional[str]:
    """Format a proto timestamp field as ISO 8601, or None when unset."""
    return value.isoformat() if value else None


def enum_name(value: Any) -> Optional[str]:
    return value.name if value else None


def property_name(property_id: str) -> str:
    """Format a numeric property ID as a resource name."""
    if not _NUMERIC_ID.match(property_id or ""):
        raise ValueError(f"Property ID must be numeric, got '{property_id}'")
    return f"properties/{property_id}"


def account_name(account_id: str) -> str:
    """Format an account ID for API calls."""
    if account_id.startswith("accounts/"):
        return account_id
    return f"accounts/{account_id}"


def child_name(property_id: str, collection: str, child_id: str) -> str:
    """Build the resource name of a property child, e.g. an audience."""
    if not child_id:
        raise ValueError(f"A {collection} ID is required")
    return f"{property_name(property_id)}/{collection}/{child_id}"


def to_json(result: Any) -> str:
    return json.dumps(result, indent=2)


async def run_blocking(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a blocking client call in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


PropertyId = Annotated[
    str,
    Field(pattern=r"^\d+$", description="The numeric ID of the GA4 property (e.g., '123456789')"),
]
