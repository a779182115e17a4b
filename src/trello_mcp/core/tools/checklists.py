from __future__ import annotations

from typing import Any, Dict, List

from trello_mcp.core.client import TrelloClient
from trello_mcp.core.models import (
    AddChecklistItemInput,
    CardIdInput,
    CheckItem,
    Checklist,
    ChecklistIdInput,
    ChecklistItemInput,
    CreateChecklistInput,
    UpdateChecklistItemInput,
)
from trello_mcp.core.registry import ToolSpec
from trello_mcp.core.tools._projections import parse_many, parse_one


async def get_card_checklists(
    client: TrelloClient, args: CardIdInput
) -> List[Dict[str, Any]]:
    payload = await client.get(
        f"/cards/{args.card_id}/checklists", tool="get_card_checklists"
    )
    return [c.projection() for c in parse_many(Checklist, payload)]


async def create_checklist(
    client: TrelloClient, args: CreateChecklistInput
) -> Dict[str, Any]:
    payload = await client.post(
        "/checklists",
        json={"idCard": args.card_id, "name": args.name},
        tool="create_checklist",
    )
    return parse_one(Checklist, payload).projection()


async def add_checklist_item(
    client: TrelloClient, args: AddChecklistItemInput
) -> Dict[str, Any]:
    payload = await client.post(
        f"/checklists/{args.checklist_id}/checkItems",
        json={"name": args.name, "pos": args.position},
        tool="add_checklist_item",
    )
    return parse_one(CheckItem, payload).projection()


async def update_checklist_item(
    client: TrelloClient, args: UpdateChecklistItemInput
) -> str:
    # Check items are updated through the card, not the checklist
    await client.put(
        f"/cards/{args.card_id}/checkItem/{args.item_id}",
        json={"state": args.state},
        tool="update_checklist_item",
    )
    return f"Successfully updated checklist item {args.item_id} to {args.state}"


async def delete_checklist(client: TrelloClient, args: ChecklistIdInput) -> str:
    await client.delete(f"/checklists/{args.checklist_id}", tool="delete_checklist")
    return f"Successfully deleted checklist {args.checklist_id}"


async def delete_checklist_item(client: TrelloClient, args: ChecklistItemInput) -> str:
    await client.delete(
        f"/checklists/{args.checklist_id}/checkItems/{args.item_id}",
        tool="delete_checklist_item",
    )
    return (
        f"Successfully deleted checklist item {args.item_id} "
        f"from checklist {args.checklist_id}"
    )


TOOLS = (
    ToolSpec(
        name="get_card_checklists",
        description="Get all checklists on a card",
        input_model=CardIdInput,
        handler=get_card_checklists,
    ),
    ToolSpec(
        name="create_checklist",
        description="Create a new checklist on a card",
        input_model=CreateChecklistInput,
        handler=create_checklist,
    ),
    ToolSpec(
        name="add_checklist_item",
        description="Add an item to a checklist",
        input_model=AddChecklistItemInput,
        handler=add_checklist_item,
    ),
    ToolSpec(
        name="update_checklist_item",
        description=(
            "Update the state of a checklist item (mark as complete or incomplete)"
        ),
        input_model=UpdateChecklistItemInput,
        handler=update_checklist_item,
    ),
    ToolSpec(
        name="delete_checklist",
        description="Delete a checklist from a card",
        input_model=ChecklistIdInput,
        handler=delete_checklist,
    ),
    ToolSpec(
        name="delete_checklist_item",
        description="Delete a checklist item from a checklist",
        input_model=ChecklistItemInput,
        handler=delete_checklist_item,
    ),
)
