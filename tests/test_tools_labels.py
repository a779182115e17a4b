import json

import pytest
import respx
from httpx import Response
from pydantic import ValidationError
from trello_mcp.core.models import BoardIdInput, CardLabelInput, CreateLabelInput
from trello_mcp.core.tools.labels import (
    add_card_label,
    create_label,
    get_labels,
    remove_card_label,
)

BASE = "https://api.trello.com/1"


@pytest.mark.asyncio
@respx.mock
async def test_get_labels(client):
    respx.get(f"{BASE}/boards/b1/labels").mock(
        return_value=Response(
            200,
            json=[
                {"id": "g1", "name": "urgent", "color": "red", "idBoard": "b1", "uses": 3}
            ],
        )
    )

    async with client:
        labels = await get_labels(client, BoardIdInput(boardId="b1"))

    assert labels == [
        {"id": "g1", "name": "urgent", "color": "red", "boardId": "b1", "uses": 3}
    ]


@pytest.mark.asyncio
@respx.mock
async def test_create_label(client):
    route = respx.post(f"{BASE}/labels").mock(
        return_value=Response(200, json={"id": "g2", "name": "bug", "color": "sky"})
    )

    async with client:
        label = await create_label(
            client, CreateLabelInput(boardId="b1", name="bug", color="sky")
        )

    assert json.loads(route.calls[0].request.content) == {
        "name": "bug",
        "color": "sky",
        "idBoard": "b1",
    }
    assert label["color"] == "sky"


def test_create_label_rejects_unknown_color():
    with pytest.raises(ValidationError):
        CreateLabelInput(boardId="b1", name="bug", color="magenta")


@pytest.mark.asyncio
@respx.mock
async def test_card_label_confirmations(client):
    add = respx.post(f"{BASE}/cards/c1/idLabels").mock(
        return_value=Response(200, json=["g1"])
    )
    respx.delete(f"{BASE}/cards/c1/idLabels/g1").mock(
        return_value=Response(200, json=[])
    )
    args = CardLabelInput(cardId="c1", labelId="g1")

    async with client:
        added = await add_card_label(client, args)
        removed = await remove_card_label(client, args)

    assert added == "Successfully added label g1 to card c1"
    assert removed == "Successfully removed label g1 from card c1"
    assert json.loads(add.calls[0].request.content) == {"value": "g1"}
