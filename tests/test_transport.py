import requests
import responses

from knightbot.transport import HttpClient, HttpResponse

URL = "https://lichess.org/api/stream/event"


def test_stream_delivers_lines():
    lines = []
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body='{"a":1}\n\n{"b":2}\n', status=200)
        result = HttpClient().stream(URL, lambda line: lines.append(line) or True)
    assert result == HttpResponse(True, 200)
    assert lines == ['{"a":1}', "", '{"b":2}']


def test_callback_can_stop_reading():
    lines = []

    def first_only(line):
        lines.append(line)
        return False

    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body="one\ntwo\nthree\n", status=200)
        result = HttpClient().stream(URL, first_only)
    assert lines == ["one"]
    assert result == HttpResponse(False, 200)


def test_post_sends_headers_and_form_body():
    url = "https://lichess.org/api/challenge/ai"
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, url, body='{"id":"abc"}', status=201)
        client = HttpClient({"Authorization": "Bearer token"})
        result = client.post(url, {"level": "6"})
        request = rsps.calls[0].request
    assert result.status_code == 201
    assert result.ok is True
    assert request.headers["Authorization"] == "Bearer token"
    assert request.body == "level=6"


def test_connection_failure_is_not_ok():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, URL, body=requests.ConnectionError("down"))
        result = HttpClient().stream(URL)
    assert result == HttpResponse(False, 0)