from __future__ import annotations

import pytest

from src.qr_attendance.qr_attendance.core.exceptions import WrongSessionError
from src.qr_attendance.qr_attendance.tokens.model import ScanPayload
from src.qr_attendance.qr_attendance.tokens.payload import build_scan_uri, parse_scan_payload


def test_build_scan_uri_shape():
    uri = build_scan_uri("https://campus.example/", "CS101", "abc123")
    assert uri == "https://campus.example/student/class/CS101?qr=abc123"


@pytest.mark.parametrize(
    "raw",
    [
        "https://campus.example/student/class/CS101?qr=abc123",
        "/student/class/CS101?qr=abc123",
        "CS101:abc123",
        "CS101 abc123",
        "  CS101 : abc123  ",
    ],
)
def test_all_forms_parse_to_same_payload(raw):
    assert parse_scan_payload(raw) == ScanPayload(class_id="CS101", token="abc123")


def test_built_uri_parses_back():
    uri = build_scan_uri("http://localhost:5000", "CS 101", "t-_x")
    assert parse_scan_payload(uri) == ScanPayload(class_id="CS 101", token="t-_x")


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "   ",
        "CS101",
        "https://campus.example/other/CS101?qr=abc",
        "https://campus.example/student/class/CS101",
        "https://campus.example/student/class/?qr=abc",
    ],
)
def test_malformed_payload_is_wrong_session(raw):
    with pytest.raises(WrongSessionError):
        parse_scan_payload(raw)
