from __future__ import annotations

from typing import Any, Dict, List

from trello_mcp.core.client import TrelloClient
from trello_mcp.core.models import (
    BoardIdInput,
    CreateListInput,
    TrelloList,
    UpdateListInput,
)
from trello_mcp.core.registry import ToolSpec
from trello_mcp.core.tools._projections import parse_many, parse_one


async def get_lists(client: TrelloClient, args: BoardIdInput) -> List[Dict[str, Any]]:
    payload = await client.get(f"/boards/{args.board_id}/lists", tool="get_lists")
    return [lst.projection() for lst in parse_many(TrelloList, payload)]


async def create_list(client: TrelloClient, args: CreateListInput) -> Dict[str, Any]:
    payload = await client.post(
        "/lists",
        json={"name": args.name, "idBoard": args.board_id, "pos": args.position},
        tool="create_list",
    )
    return parse_one(TrelloList, payload).projection()


async def update_list(client: TrelloClient, args: UpdateListInput) -> Dict[str, Any]:
    """Rename, archive/unarchive or reposition a list."""
    body: Dict[str, Any] = {}
    if args.name is not None:
        body["name"] = args.name
    if args.closed is not None:
        body["closed"] = args.closed
    if args.position is not None:
        body["pos"] = args.position

    payload = await client.put(f"/lists/{args.list_id}", json=body, tool="update_list")
    return parse_one(TrelloList, payload).projection()


TOOLS = (
    ToolSpec(
        name="get_lists",
        description="Get all lists in a board",
        input_model=BoardIdInput,
        handler=get_lists,
    ),
    ToolSpec(
        name="create_list",
        description="Create a new list in a board",
        input_model=CreateListInput,
        handler=create_list,
    ),
    ToolSpec(
        name="update_list",
        description="Update properties of an existing list",
        input_model=UpdateListInput,
        handler=update_list,
    ),
)
