# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Tests for splitting the TV's byte stream into lines."""

from aquos_tv.protocol import scan_line


def test_line_terminated_by_carriage_return():
    assert scan_line(b"OK\r") == (3, b"OK")


def test_leading_separators_are_skipped():
    assert scan_line(b"\r\n\r\nAQUOS\r") == (10, b"AQUOS")


def test_colon_terminates_login_prompts():
    buffer = bytearray(b"Login:Password:")
    n_consumed, line = scan_line(buffer)
    assert (n_consumed, line) == (6, b"Login")
    del buffer[:n_consumed]
    assert scan_line(buffer) == (9, b"Password")


def test_newline_terminates_line():
    assert scan_line(b"Login incorrect\r\n") == (16, b"Login incorrect")


def test_incomplete_line_waits_for_more_data():
    assert scan_line(b"LC-60") == (0, None)
    assert scan_line(b"\r\n") == (0, None)
    assert scan_line(b"") == (0, None)


def test_unterminated_line_at_eof_is_returned():
    assert scan_line(b"ERR", at_eof=True) == (3, b"ERR")
    assert scan_line(b"\r\nERR", at_eof=True) == (5, b"ERR")


def test_only_separators_at_eof_yields_nothing():
    assert scan_line(b"\r\n:", at_eof=True) == (3, None)
    assert scan_line(b"", at_eof=True) == (0, None)


def test_only_first_line_is_consumed():
    assert scan_line(b"30\rOK\r") == (3, b"30")
