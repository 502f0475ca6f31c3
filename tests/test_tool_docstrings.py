"""Tests that the plain tool functions document their arguments and result."""

import inspect

import pytest

from mcp_server_ga4_admin import accounts, annotations, audiences, custom_dimensions, data_streams

TOOL_FUNCTIONS = [
    accounts.list_properties,
    accounts.get_property_details,
    data_streams.list_data_streams,
    data_streams.create_data_stream,
    annotations.list_annotations,
    annotations.get_annotation,
    annotations.create_annotation,
    annotations.update_annotation,
    annotations.delete_annotation,
    audiences.list_audiences,
    audiences.get_audience,
    audiences.create_audience,
    custom_dimensions.list_custom_dimensions,
    custom_dimensions.get_custom_dimension,
    custom_dimensions.create_custom_dimension,
]


@pytest.mark.parametrize("func", TOOL_FUNCTIONS, ids=lambda f: f.__name__)
def test_docstring_lists_every_argument(func):
    doc = inspect.getdoc(func)

    assert doc is not None
    assert "Args:" in doc
    assert "Returns:" in doc
    for parameter in inspect.signature(func).parameters:
        assert f"{parameter}:" in doc
