from __future__ import annotations

from typing import Any, Dict, List

from trello_mcp.core.client import TrelloClient
from trello_mcp.core.models import Board, BoardIdInput, Member, NoArgsInput
from trello_mcp.core.registry import ToolSpec
from trello_mcp.core.tools._projections import parse_many, parse_one

BOARD_DETAIL_PARAMS = {
    "lists": "open",
    "cards": "open",
    "labels": "all",
    "members": "all",
    "memberships": "all",
}


async def list_boards(client: TrelloClient, args: NoArgsInput) -> List[Dict[str, Any]]:
    """Boards visible to the token's member."""
    payload = await client.get("/members/me/boards", tool="list_boards")
    return [b.summary() for b in parse_many(Board, payload)]


async def get_board(client: TrelloClient, args: BoardIdInput) -> Dict[str, Any]:
    """
    Board detail with open lists (each carrying its open cards), all labels
    and all members.
    """
    payload = await client.get(
        f"/boards/{args.board_id}", params=BOARD_DETAIL_PARAMS, tool="get_board"
    )
    return parse_one(Board, payload).projection()


async def get_board_members(
    client: TrelloClient, args: BoardIdInput
) -> List[Dict[str, Any]]:
    payload = await client.get(
        f"/boards/{args.board_id}/members", tool="get_board_members"
    )
    return [m.projection() for m in parse_many(Member, payload)]


TOOLS = (
    ToolSpec(
        name="list_boards",
        description="Get all boards accessible to the authenticated user",
        input_model=NoArgsInput,
        handler=list_boards,
    ),
    ToolSpec(
        name="get_board",
        description=(
            "Get detailed information about a specific board including lists, "
            "cards, and members"
        ),
        input_model=BoardIdInput,
        handler=get_board,
    ),
    ToolSpec(
        name="get_board_members",
        description="Get all members of a specific board",
        input_model=BoardIdInput,
        handler=get_board_members,
    ),
)
