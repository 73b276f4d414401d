"""Tests for method and Depth parsing."""

import pytest

from py_bucketdav.internal.internal import Depth, Method, parse_depth


def test_method_parse_known_verbs():
    assert Method.parse("PROPFIND") is Method.PROPFIND
    assert Method.parse("MKCOL") is Method.MKCOL


def test_method_parse_is_case_sensitive():
    """Test that method tokens only match in their registered case."""
    for method in ["get", "propfind", "Delete"]:
        assert Method.parse(method) is Method.UNSUPPORTED, method


def test_method_parse_unknown_verbs():
    for method in ["PROPPATCH", "LOCK", ""]:
        assert Method.parse(method) is Method.UNSUPPORTED, method


def test_allowed_excludes_unsupported():
    allowed = Method.allowed()

    assert "" not in allowed
    assert allowed[0] == "OPTIONS"
    assert "PROPFIND" in allowed


def test_parse_depth():
    assert parse_depth("0") is Depth.ZERO
    assert parse_depth("1") is Depth.ONE
    assert parse_depth("Infinity") is Depth.INFINITY


def test_parse_depth_invalid():
    with pytest.raises(ValueError):
        parse_depth("2")
