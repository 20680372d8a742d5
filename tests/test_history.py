import httpx
import pytest

from speechkit.core.elevenlabs_client import DEFAULT_PAGE_SIZE

ITEMS = [
    {
        "history_item_id": f"item-{i:02d}",
        "date_unix": 1700000000 - i * 60,
        "text": f"generation number {i}",
        "voice_id": "pNInz6obpgDQGcFmaJgB",
        "voice_name": "Adam",
        "state": "created",
        "feedback": None,
    }
    for i in range(12)
]


class FakeHistory:
    """Serves ITEMS newest first, paged the way the history endpoint does"""

    def __init__(self, items=ITEMS):
        self.items = items
        self.requests = []

    def __call__(self, request):
        params = request.url.params
        self.requests.append(dict(params))
        page_size = int(params["page_size"])

        start = 0
        after = params.get("start_after_history_item_id")
        if after:
            ids = [item["history_item_id"] for item in self.items]
            start = ids.index(after) + 1

        page = self.items[start:start + page_size]
        return httpx.Response(200, json={
            "history": page,
            "last_history_item_id": page[-1]["history_item_id"] if page else None,
            "has_more": start + page_size < len(self.items),
        })


def walk(first_page, cursor):
    pages = [first_page]
    while cursor is not None:
        page, cursor = cursor.next_page()
        pages.append(page)
    return pages


def test_twelve_items_in_pages_of_five(make_client):
    server = FakeHistory()
    client = make_client(server)

    page, cursor = client.get_history(page_size=5)
    pages = walk(page, cursor)

    assert [len(p) for p in pages] == [5, 5, 2]
    assert len(server.requests) == 3
    assert server.requests[1] == {"page_size": "5", "start_after_history_item_id": "item-04"}


def test_pages_never_repeat_items_and_keep_remote_order(make_client):
    client = make_client(FakeHistory())

    page, cursor = client.get_history(page_size=5)
    ids = [item.history_item_id for p in walk(page, cursor) for item in p.history]

    assert len(ids) == len(set(ids))
    assert ids == [item["history_item_id"] for item in ITEMS]


def test_cursor_is_none_when_history_exhausted(make_client):
    client = make_client(FakeHistory())

    page, cursor = client.get_history(page_size=20)

    assert len(page) == 12
    assert not page.has_more
    assert cursor is None


def test_empty_history(make_client):
    client = make_client(FakeHistory(items=[]))

    page, cursor = client.get_history()

    assert page.history == []
    assert cursor is None


def test_default_page_size(make_client):
    server = FakeHistory()
    client = make_client(server)

    client.get_history()

    assert server.requests[0]["page_size"] == str(DEFAULT_PAGE_SIZE)


def test_page_size_override_only_affects_that_call(make_client):
    server = FakeHistory()
    client = make_client(server)

    first, cursor = client.get_history(page_size=5)
    second, cursor = cursor.next_page(page_size=3)
    third, cursor = cursor.next_page()

    assert len(first) == 5
    assert len(second) == 3
    assert [item.history_item_id for item in second.history] == ["item-05", "item-06", "item-07"]
    # The cursor handed back by the overridden call carries the override
    assert len(third) == 3
    assert [r["page_size"] for r in server.requests] == ["5", "3", "3"]


def test_cursor_can_be_reused(make_client):
    client = make_client(FakeHistory())

    _, cursor = client.get_history(page_size=5)
    again_a, _ = cursor.next_page()
    again_b, _ = cursor.next_page()

    assert again_a.history == again_b.history


def test_iter_history_walks_every_page(make_client):
    client = make_client(FakeHistory())

    ids = [item.history_item_id for item in client.iter_history(page_size=5)]

    assert ids == [item["history_item_id"] for item in ITEMS]


@pytest.mark.parametrize("page_size", [-1, 1001])
def test_invalid_page_size(make_client, page_size):
    client = make_client(FakeHistory())

    with pytest.raises(ValueError):
        client.get_history(page_size=page_size)


def test_history_item_helpers(make_client):
    client = make_client(FakeHistory())

    page, _ = client.get_history(page_size=1)
    item = page.history[0]

    assert item.created_at.year == 2023
    assert item.byte_length == len("generation number 0")
    assert item.voice_name == "Adam"
