import httpx

from wastewise import vision_client
from wastewise.vision_client import _parse_labels, fetch_labels


class DummyResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def test_parse_labels_accepts_dict_or_list():
    assert _parse_labels({"labels": ["Bottle", " bottle ", "Plastic"]}) == ["Bottle", "bottle", "Plastic"]
    assert _parse_labels(["glass", "glass", 3, None]) == ["glass"]
    assert _parse_labels({"labels": "nope"}) == []
    assert _parse_labels({"other": []}) == []


def test_fetch_labels_posts_image(monkeypatch):
    seen = {}

    def fake_post(self, url, content=None, headers=None):
        seen.update(url=url, content=content, type=headers["Content-Type"])
        return DummyResponse({"labels": ["plastic bottle", "water"]})

    monkeypatch.setattr(vision_client.httpx.Client, "post", fake_post)
    labels = fetch_labels(b"\xff\xd8jpeg", url="http://vision.test/labels")
    assert labels == ["plastic bottle", "water"]
    assert seen == {"url": "http://vision.test/labels", "content": b"\xff\xd8jpeg", "type": "image/jpeg"}


def test_fetch_labels_http_error_returns_empty(monkeypatch):
    monkeypatch.setattr(vision_client.httpx.Client, "post", lambda self, url, **kw: DummyResponse(status_code=503))
    assert fetch_labels(b"img") == []


def test_fetch_labels_bad_json_returns_empty(monkeypatch):
    monkeypatch.setattr(
        vision_client.httpx.Client,
        "post",
        lambda self, url, **kw: DummyResponse(ValueError("not json")),
    )
    assert fetch_labels(b"img") == []


def test_fetch_labels_timeout_returns_empty(monkeypatch):
    def slow_post(self, url, **kw):
        raise httpx.ReadTimeout("slow")

    monkeypatch.setattr(vision_client.httpx.Client, "post", slow_post)
    assert fetch_labels(b"img") == []


def test_fetch_labels_skips_empty_and_oversized(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("should not upload")

    monkeypatch.setattr(vision_client.httpx.Client, "post", fail)
    monkeypatch.setattr(vision_client, "HTTP_MAX_IMAGE_BYTES", 4)
    assert fetch_labels(b"") == []
    assert fetch_labels(b"12345") == []


def test_fetch_labels_caps_label_count(monkeypatch):
    many = [f"label {i}" for i in range(50)]
    monkeypatch.setattr(vision_client.httpx.Client, "post", lambda self, url, **kw: DummyResponse(many))
    assert len(fetch_labels(b"img")) == vision_client.VISION_MAX_LABELS
