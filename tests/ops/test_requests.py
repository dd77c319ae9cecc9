"""Tests for dms.ops.requests."""

import dataclasses

import pytest

from dms.ops.requests import DEFAULT_PAGE_SIZE, ListDatastreamsRequest


def test_defaults():
    req = ListDatastreamsRequest()
    assert req.offset == 0
    assert req.limit == DEFAULT_PAGE_SIZE == 50


def test_frozen():
    req = ListDatastreamsRequest(offset=1, limit=2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        req.offset = 3
