import json

import pytest
import respx
from httpx import Response
from pydantic import ValidationError
from trello_mcp.core.models import (
    ActionIdInput,
    CreateReactionInput,
    DeleteReactionInput,
)
from trello_mcp.core.tools.reactions import (
    create_action_reaction,
    delete_action_reaction,
    get_action_reactions,
)

BASE = "https://api.trello.com/1"

REACTION = {
    "id": "r1",
    "idMember": "m1",
    "idModel": "act1",
    "emoji": {"shortName": "thumbsup", "unified": "1F44D", "native": "👍"},
    "member": {"id": "m1", "username": "ada", "fullName": "Ada L"},
}


@pytest.mark.asyncio
@respx.mock
async def test_get_action_reactions(client):
    route = respx.get(f"{BASE}/actions/act1/reactions").mock(
        return_value=Response(200, json=[REACTION])
    )

    async with client:
        reactions = await get_action_reactions(client, ActionIdInput(actionId="act1"))

    params = route.calls[0].request.url.params
    assert params["member"] == "true"
    assert params["emoji"] == "true"
    [reaction] = reactions
    assert reaction["actionId"] == "act1"
    assert reaction["member"]["username"] == "ada"
    assert reaction["emoji"] == {
        "shortName": "thumbsup",
        "unified": "1F44D",
        "native": "👍",
        "skinVariation": None,
    }


@pytest.mark.asyncio
@respx.mock
async def test_create_reaction_sends_only_given_keys(client):
    route = respx.post(f"{BASE}/actions/act1/reactions").mock(
        return_value=Response(200, json=REACTION)
    )

    async with client:
        await create_action_reaction(
            client,
            CreateReactionInput(
                actionId="act1", shortName=" thumbsup ", skinVariation="1F3FD"
            ),
        )

    assert json.loads(route.calls[0].request.content) == {
        "shortName": "thumbsup",
        "skinVariation": "1F3FD",
    }


def test_create_reaction_needs_an_emoji_identifier():
    with pytest.raises(ValidationError, match="shortName, unified, or native"):
        CreateReactionInput(actionId="act1", skinVariation="1F3FD")

    with pytest.raises(ValidationError):
        CreateReactionInput(actionId="act1", native="   ")


@pytest.mark.asyncio
@respx.mock
async def test_delete_action_reaction(client):
    respx.delete(f"{BASE}/actions/act1/reactions/r1").mock(
        return_value=Response(200, json={})
    )

    async with client:
        message = await delete_action_reaction(
            client, DeleteReactionInput(actionId="act1", reactionId="r1")
        )

    assert message == "Successfully removed reaction r1 from action act1"
