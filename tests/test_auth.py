from unittest import mock

import pytest

from knightbot.auth import MissingTokenError, authorization_header


def test_header_from_mapping():
    assert authorization_header({"LICHESS_API_TOKEN": "token"}) == {
        "Authorization": "Bearer token"
    }


def test_missing_token_raises():
    with pytest.raises(MissingTokenError):
        authorization_header({})


def test_reads_process_environment():
    with mock.patch.dict("os.environ", {"LICHESS_API_TOKEN": "secret"}):
        assert authorization_header() == {"Authorization": "Bearer secret"}