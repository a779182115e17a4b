import pytest
import respx
from httpx import Response
from trello_mcp.core.models import BoardIdInput, NoArgsInput
from trello_mcp.core.tools.boards import get_board, get_board_members, list_boards

BASE = "https://api.trello.com/1"


@pytest.mark.asyncio
@respx.mock
async def test_list_boards_summaries(client):
    respx.get(f"{BASE}/members/me/boards").mock(
        return_value=Response(
            200,
            json=[
                {
                    "id": "b1",
                    "name": "Roadmap",
                    "desc": "Q3",
                    "closed": False,
                    "url": "https://trello.com/b/abc/roadmap",
                    "shortUrl": "https://trello.com/b/abc",
                    "starred": True,
                    "dateLastActivity": "2024-05-01T10:00:00.000Z",
                    "prefs": {"background": "blue"},
                }
            ],
        )
    )

    async with client:
        boards = await list_boards(client, NoArgsInput())

    assert boards == [
        {
            "id": "b1",
            "name": "Roadmap",
            "description": "Q3",
            "closed": False,
            "url": "https://trello.com/b/abc",
            "starred": True,
            "lastActivity": "2024-05-01T10:00:00.000Z",
        }
    ]


@pytest.mark.asyncio
@respx.mock
async def test_get_board_nests_cards_under_lists(client):
    route = respx.get(f"{BASE}/boards/b1").mock(
        return_value=Response(
            200,
            json={
                "id": "b1",
                "name": "Roadmap",
                "lists": [
                    {"id": "l1", "name": "To Do", "pos": 1024},
                    {"id": "l2", "name": "Done", "pos": 2048},
                ],
                "cards": [
                    {"id": "c1", "name": "Write docs", "idList": "l1"},
                    {"id": "c2", "name": "Ship", "idList": "l1", "idLabels": ["g1"]},
                ],
                "labels": [{"id": "g1", "name": "urgent", "color": "red"}],
                "members": [{"id": "m1", "username": "ada", "fullName": "Ada L"}],
            },
        )
    )

    async with client:
        board = await get_board(client, BoardIdInput(boardId="b1"))

    params = route.calls[0].request.url.params
    assert params["lists"] == "open"
    assert params["cards"] == "open"
    assert params["labels"] == "all"
    assert params["members"] == "all"

    todo, done = board["lists"]
    assert [c["id"] for c in todo["cards"]] == ["c1", "c2"]
    assert todo["cards"][1]["labelIds"] == ["g1"]
    assert done["cards"] == []
    assert board["labels"][0]["color"] == "red"
    assert board["members"][0]["fullName"] == "Ada L"


@pytest.mark.asyncio
@respx.mock
async def test_get_board_members(client):
    respx.get(f"{BASE}/boards/b1/members").mock(
        return_value=Response(
            200, json=[{"id": "m1", "username": "ada", "fullName": "Ada L"}]
        )
    )

    async with client:
        members = await get_board_members(client, BoardIdInput(boardId="b1"))

    assert members == [
        {"id": "m1", "username": "ada", "fullName": "Ada L", "initials": None}
    ]
