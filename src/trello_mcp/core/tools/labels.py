from __future__ import annotations

from typing import Any, Dict, List

from trello_mcp.core.client import TrelloClient
from trello_mcp.core.models import (
    BoardIdInput,
    CardLabelInput,
    CreateLabelInput,
    Label,
)
from trello_mcp.core.registry import ToolSpec
from trello_mcp.core.tools._projections import parse_many, parse_one


async def get_labels(client: TrelloClient, args: BoardIdInput) -> List[Dict[str, Any]]:
    payload = await client.get(f"/boards/{args.board_id}/labels", tool="get_labels")
    return [lbl.projection() for lbl in parse_many(Label, payload)]


async def create_label(client: TrelloClient, args: CreateLabelInput) -> Dict[str, Any]:
    payload = await client.post(
        "/labels",
        json={"name": args.name, "color": args.color, "idBoard": args.board_id},
        tool="create_label",
    )
    return parse_one(Label, payload).projection()


async def add_card_label(client: TrelloClient, args: CardLabelInput) -> str:
    await client.post(
        f"/cards/{args.card_id}/idLabels",
        json={"value": args.label_id},
        tool="add_card_label",
    )
    return f"Successfully added label {args.label_id} to card {args.card_id}"


async def remove_card_label(client: TrelloClient, args: CardLabelInput) -> str:
    await client.delete(
        f"/cards/{args.card_id}/idLabels/{args.label_id}", tool="remove_card_label"
    )
    return f"Successfully removed label {args.label_id} from card {args.card_id}"


TOOLS = (
    ToolSpec(
        name="get_labels",
        description="Get all available labels for a board",
        input_model=BoardIdInput,
        handler=get_labels,
    ),
    ToolSpec(
        name="create_label",
        description="Create a new label on a board",
        input_model=CreateLabelInput,
        handler=create_label,
    ),
    ToolSpec(
        name="add_card_label",
        description="Add a label to a card",
        input_model=CardLabelInput,
        handler=add_card_label,
    ),
    ToolSpec(
        name="remove_card_label",
        description="Remove a label from a card",
        input_model=CardLabelInput,
        handler=remove_card_label,
    ),
)
