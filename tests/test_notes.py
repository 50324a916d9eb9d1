import json

import pytest
import respx
from httpx import Response
from memos_mcp.core.client import MemosContractError, MemosHTTPError
from memos_mcp.core.models import (
    Attachment,
    MemoRef,
    Note,
    NoteState,
    Reaction,
    Relation,
    RelationType,
    Visibility,
)
from memos_mcp.core.services.notes import UPDATE_MASK, NoteService

from .conftest import api, note_payload


@pytest.mark.asyncio
@respx.mock
async def test_create_then_get_preserves_content_visibility_state(client):
    stored = {}

    def create(request):
        body = json.loads(request.content)
        stored.update(body, name="memos/new1")
        return Response(200, json=stored)

    create_route = respx.post(api("memos")).mock(side_effect=create)
    respx.get(api("memos/new1")).mock(side_effect=lambda request: Response(200, json=stored))

    note = Note(content="# Title", visibility=Visibility.PUBLIC, state=NoteState.ARCHIVED)

    async with client:
        service = NoteService(client)
        created = await service.create(note)
        fetched = await service.get(created.name)

    assert created.name == "memos/new1"
    assert "name" not in json.loads(create_route.calls[0].request.content)
    for got in (created, fetched):
        assert got.content == note.content
        assert got.visibility is note.visibility
        assert got.state is note.state


@pytest.mark.asyncio
@respx.mock
async def test_delete_then_get_fails_with_http_error(client):
    delete_route = respx.delete(api("memos/abc")).mock(return_value=Response(200, json={}))
    respx.get(api("memos/abc")).mock(
        return_value=Response(404, text='{"message":"memo not found"}')
    )

    async with client:
        service = NoteService(client)
        await service.delete("memos/abc")
        with pytest.raises(MemosHTTPError) as exc:
            await service.get("memos/abc")

    assert delete_route.called
    assert exc.value.status_code == 404


@pytest.mark.asyncio
@respx.mock
async def test_delete_does_not_mask_not_found(client):
    respx.delete(api("memos/gone")).mock(return_value=Response(404, text="not found"))

    async with client:
        with pytest.raises(MemosHTTPError):
            await NoteService(client).delete("memos/gone")


@pytest.mark.asyncio
@respx.mock
async def test_list_drains_all_pages_in_order(client):
    pages = [
        Response(
            200,
            json={
                "memos": [note_payload("memos/1"), note_payload("memos/2")],
                "nextPageToken": "p2",
            },
        ),
        Response(
            200,
            json={
                "memos": [note_payload("memos/3")],
                "nextPageToken": "p3",
            },
        ),
        Response(
            200,
            json={"memos": [note_payload("memos/4"), note_payload("memos/5")]},
        ),
    ]
    route = respx.get(api("memos")).mock(side_effect=pages)

    async with client:
        notes = await NoteService(client).list()

    assert [n.name for n in notes] == [f"memos/{i}" for i in range(1, 6)]
    assert route.call_count == 3
    tokens = [call.request.url.params.get("pageToken") for call in route.calls]
    assert tokens == [None, "p2", "p3"]


@pytest.mark.asyncio
@respx.mock
async def test_list_forwards_page_size_and_filter_on_every_page(client):
    route = respx.get(api("memos")).mock(
        side_effect=[
            Response(200, json={"memos": [note_payload("memos/1")], "nextPageToken": "t"}),
            Response(200, json={"memos": []}),
        ]
    )

    async with client:
        notes = await NoteService(client).list(page_size=1, filter='tag in ["x"]')

    assert len(notes) == 1
    for call in route.calls:
        assert call.request.url.params["pageSize"] == "1"
        assert call.request.url.params["filter"] == 'tag in ["x"]'


@pytest.mark.asyncio
@respx.mock
async def test_list_failure_on_later_page_fails_whole_call(client):
    respx.get(api("memos")).mock(
        side_effect=[
            Response(200, json={"memos": [note_payload("memos/1")], "nextPageToken": "p2"}),
            Response(500, text="backend exploded"),
        ]
    )

    async with client:
        with pytest.raises(MemosHTTPError) as exc:
            await NoteService(client).list()

    assert exc.value.status_code == 500


@pytest.mark.asyncio
@respx.mock
async def test_list_empty_collection(client):
    respx.get(api("memos")).mock(return_value=Response(200, json={}))

    async with client:
        assert await NoteService(client).list() == []


@pytest.mark.asyncio
@respx.mock
async def test_update_sends_only_masked_fields(client):
    route = respx.patch(api("memos/abc")).mock(
        return_value=Response(200, json=note_payload("memos/abc", "changed"))
    )
    note = Note.model_validate(
        note_payload(
            "memos/abc",
            "changed",
            pinned=True,
            tags=["work"],
            parent="memos/root",
            location={"placeholder": "Home", "latitude": 1.0, "longitude": 2.0},
            property={"hasLink": True},
        )
    )

    async with client:
        updated = await NoteService(client).update(note)

    assert updated.content == "changed"
    request = route.calls[0].request
    assert request.url.params["updateMask"] == "content,state,visibility,tags,pinned"
    body = json.loads(request.content)
    assert set(body) <= {"name", *UPDATE_MASK}
    assert body["content"] == "changed"
    assert body["pinned"] is True
    assert body["tags"] == ["work"]


@pytest.mark.asyncio
async def test_update_and_delete_without_name_make_no_calls(client):
    async with respx.mock(assert_all_called=False) as router:
        patch = router.patch(url__startswith=api("memos"))
        delete = router.delete(url__startswith=api("memos"))

        service = NoteService(client)
        with pytest.raises(MemosContractError):
            await service.update(Note(content="x", visibility=Visibility.PRIVATE))
        with pytest.raises(MemosContractError):
            await service.delete("")

        assert not patch.called
        assert not delete.called
        assert router.calls.call_count == 0
    await client.aclose()


class _RecordingTransport:
    """Transport double that records calls instead of sending them."""

    base_url = "http://double/api/v1"

    def __init__(self):
        self.calls = []

    async def request(self, method, url, **kwargs):
        self.calls.append((method, url))
        return {}

    async def request_model(self, model, method, url, **kwargs):
        self.calls.append((method, url))
        return model.model_validate({})

    async def request_empty(self, method, url, **kwargs):
        self.calls.append((method, url))

    def derive(self, token):
        raise AssertionError("not expected")


@pytest.mark.asyncio
async def test_contract_violations_detected_with_transport_double():
    transport = _RecordingTransport()
    service = NoteService(transport)

    with pytest.raises(MemosContractError):
        await service.update(Note(content="x", visibility=Visibility.PRIVATE))
    with pytest.raises(MemosContractError):
        await service.delete("")
    with pytest.raises(MemosContractError):
        await service.get("")

    assert transport.calls == []

    await service.delete("memos/abc")
    assert transport.calls == [("DELETE", "memos/abc")]


@pytest.mark.asyncio
@respx.mock
async def test_comments_create_and_list(client):
    create = respx.post(api("memos/abc/comments")).mock(
        return_value=Response(200, json=note_payload("memos/c1", "a comment"))
    )
    respx.get(api("memos/abc/comments")).mock(
        return_value=Response(
            200,
            json={
                "memos": [note_payload("memos/c1", "a comment")],
                "totalSize": 1,
            },
        )
    )

    async with client:
        service = NoteService(client)
        created = await service.create_comment(
            "memos/abc", Note(content="a comment", visibility=Visibility.PRIVATE)
        )
        comments = await service.list_comments("memos/abc")

    assert created.name == "memos/c1"
    assert json.loads(create.calls[0].request.content)["content"] == "a comment"
    assert [c.content for c in comments] == ["a comment"]


@pytest.mark.asyncio
@respx.mock
async def test_attachments_list_and_set(client):
    attachment = {
        "name": "attachments/9",
        "createTime": "2025-01-02T03:04:05Z",
        "filename": "a.png",
        "externalLink": "",
        "type": "image/png",
        "size": "1024",
        "memo": "memos/abc",
    }
    respx.get(api("memos/abc/attachments")).mock(
        return_value=Response(200, json={"attachments": [attachment]})
    )
    set_route = respx.post(api("memos/abc/attachments")).mock(
        return_value=Response(200, json={})
    )

    async with client:
        service = NoteService(client)
        attachments = await service.list_attachments("memos/abc")
        await service.set_attachments("memos/abc", attachments)

    assert attachments[0].mime_type == "image/png"
    assert attachments[0].size == "1024"
    body = json.loads(set_route.calls[0].request.content)
    assert body["name"] == "memos/abc"
    assert body["attachments"][0]["type"] == "image/png"
    assert body["attachments"][0]["filename"] == "a.png"


@pytest.mark.asyncio
@respx.mock
async def test_relations_list_and_set(client):
    relation = {
        "memo": {"name": "memos/abc", "snippet": "hello"},
        "relatedMemo": {"name": "memos/def", "snippet": "world"},
        "type": "REFERENCE",
    }
    respx.get(api("memos/abc/relations")).mock(
        return_value=Response(200, json={"relations": [relation]})
    )
    set_route = respx.post(api("memos/abc/relations")).mock(
        return_value=Response(200, json={})
    )

    new_relation = Relation(
        memo=MemoRef(name="memos/abc"),
        related_memo=MemoRef(name="memos/xyz"),
        relation_type=RelationType.COMMENT,
    )

    async with client:
        service = NoteService(client)
        relations = await service.list_relations("memos/abc")
        await service.set_relations("memos/abc", [new_relation])

    assert relations[0].relation_type is RelationType.REFERENCE
    assert relations[0].related_memo.name == "memos/def"
    body = json.loads(set_route.calls[0].request.content)
    assert body["relations"] == [
        {
            "memo": {"name": "memos/abc", "snippet": ""},
            "relatedMemo": {"name": "memos/xyz", "snippet": ""},
            "type": "COMMENT",
        }
    ]


@pytest.mark.asyncio
@respx.mock
async def test_reactions_upsert_list_delete(client):
    stored = {
        "name": "memos/abc/reactions/7",
        "creator": "users/1",
        "contentId": "memos/abc",
        "reactionType": "👍",
        "createTime": "2025-01-02T03:04:05Z",
    }
    upsert = respx.post(api("memos/abc/reactions")).mock(
        return_value=Response(200, json=stored)
    )
    respx.get(api("memos/abc/reactions")).mock(
        return_value=Response(200, json={"reactions": [stored]})
    )
    delete = respx.delete(api("memos/abc/reactions/7")).mock(
        return_value=Response(200, json={})
    )

    async with client:
        service = NoteService(client)
        created = await service.upsert_reaction(
            "memos/abc", Reaction(content_id="memos/abc", reaction_type="👍")
        )
        reactions = await service.list_reactions("memos/abc")
        await service.delete_reaction(created.name)

    body = json.loads(upsert.calls[0].request.content)
    assert body == {
        "name": "memos/abc",
        "reaction": {"contentId": "memos/abc", "reactionType": "👍"},
    }
    assert created.reaction_type == "👍"
    assert any(r.reaction_type == "👍" for r in reactions)
    assert delete.called
