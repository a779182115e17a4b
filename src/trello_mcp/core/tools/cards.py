from __future__ import annotations

from typing import Any, Dict, List

from trello_mcp.core.client import TrelloClient
from trello_mcp.core.models import (
    Card,
    CardIdInput,
    CardMemberInput,
    CreateCardInput,
    GetCardsInput,
    MoveCardInput,
    UpdateCardInput,
)
from trello_mcp.core.registry import ToolSpec
from trello_mcp.core.tools._projections import parse_many, parse_one

CARD_DETAIL_PARAMS = {
    "members": "true",
    "labels": "true",
    "checklists": "all",
    "attachments": "true",
}


async def get_cards(client: TrelloClient, args: GetCardsInput) -> List[Dict[str, Any]]:
    """Cards of a list, or of a whole board when no list is given."""
    if args.list_id:
        path = f"/lists/{args.list_id}/cards"
    else:
        path = f"/boards/{args.board_id}/cards"
    payload = await client.get(path, tool="get_cards")
    return [c.projection() for c in parse_many(Card, payload)]


async def get_card(client: TrelloClient, args: CardIdInput) -> Dict[str, Any]:
    payload = await client.get(
        f"/cards/{args.card_id}", params=CARD_DETAIL_PARAMS, tool="get_card"
    )
    return parse_one(Card, payload).projection()


async def create_card(client: TrelloClient, args: CreateCardInput) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "name": args.name,
        "desc": args.description or "",
        "idList": args.list_id,
        "pos": args.position,
    }
    if args.due is not None:
        body["due"] = args.due

    payload = await client.post("/cards", json=body, tool="create_card")
    return parse_one(Card, payload).projection()


async def update_card(client: TrelloClient, args: UpdateCardInput) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    if args.name is not None:
        body["name"] = args.name
    if args.description is not None:
        body["desc"] = args.description
    if args.due is not None:
        body["due"] = args.due
    if args.due_complete is not None:
        body["dueComplete"] = args.due_complete
    if args.closed is not None:
        body["closed"] = args.closed

    payload = await client.put(f"/cards/{args.card_id}", json=body, tool="update_card")
    return parse_one(Card, payload).projection()


async def move_card(client: TrelloClient, args: MoveCardInput) -> Dict[str, Any]:
    payload = await client.put(
        f"/cards/{args.card_id}",
        json={"idList": args.list_id, "pos": args.position},
        tool="move_card",
    )
    return parse_one(Card, payload).projection()


async def delete_card(client: TrelloClient, args: CardIdInput) -> str:
    await client.delete(f"/cards/{args.card_id}", tool="delete_card")
    return f"Successfully deleted card {args.card_id}"


async def add_card_member(client: TrelloClient, args: CardMemberInput) -> str:
    await client.post(
        f"/cards/{args.card_id}/idMembers",
        json={"value": args.member_id},
        tool="add_card_member",
    )
    return f"Successfully added member {args.member_id} to card {args.card_id}"


async def remove_card_member(client: TrelloClient, args: CardMemberInput) -> str:
    await client.delete(
        f"/cards/{args.card_id}/idMembers/{args.member_id}", tool="remove_card_member"
    )
    return f"Successfully removed member {args.member_id} from card {args.card_id}"


TOOLS = (
    ToolSpec(
        name="get_cards",
        description="Get cards from a board or list",
        input_model=GetCardsInput,
        handler=get_cards,
    ),
    ToolSpec(
        name="get_card",
        description=(
            "Get detailed information about a specific card, including members, "
            "labels, checklists and attachments"
        ),
        input_model=CardIdInput,
        handler=get_card,
    ),
    ToolSpec(
        name="create_card",
        description="Create a new card in a list",
        input_model=CreateCardInput,
        handler=create_card,
    ),
    ToolSpec(
        name="update_card",
        description="Update properties of an existing card",
        input_model=UpdateCardInput,
        handler=update_card,
    ),
    ToolSpec(
        name="move_card",
        description="Move a card to a different list",
        input_model=MoveCardInput,
        handler=move_card,
    ),
    ToolSpec(
        name="delete_card",
        description="Delete a card permanently",
        input_model=CardIdInput,
        handler=delete_card,
    ),
    ToolSpec(
        name="add_card_member",
        description="Add a member to a card",
        input_model=CardMemberInput,
        handler=add_card_member,
    ),
    ToolSpec(
        name="remove_card_member",
        description="Remove a member from a card",
        input_model=CardMemberInput,
        handler=remove_card_member,
    ),
)
