"""Argument Validation — required-field presence check."""

import pytest

from gtasks_mcp.core.errors import InvalidArgumentsError
from gtasks_mcp.core.validate_arguments import check_required_fields, find_missing_fields
from gtasks_mcp.services.tools_registry import get_descriptor


def test_no_missing_fields():
    descriptor = get_descriptor("get_task")
    assert find_missing_fields(descriptor, {"taskListId": "l", "taskId": "t"}) == []


def test_missing_fields_in_schema_order():
    descriptor = get_descriptor("get_task")
    assert find_missing_fields(descriptor, {}) == ["taskListId", "taskId"]


def test_none_counts_as_missing():
    descriptor = get_descriptor("get_task_list")
    assert find_missing_fields(descriptor, {"taskListId": None}) == ["taskListId"]


def test_check_raises_with_message():
    descriptor = get_descriptor("create_task")
    with pytest.raises(InvalidArgumentsError) as exc_info:
        check_required_fields(descriptor, {"taskListId": "l"})
    assert exc_info.value.missing == ["title"]
    assert "'create_task'" in exc_info.value.message
    assert "title" in exc_info.value.message


def test_tool_without_required_fields_passes():
    check_required_fields(get_descriptor("list_task_lists"), {})
