from __future__ import annotations

from typing import Any, Dict, List

from trello_mcp.core.client import TrelloClient
from trello_mcp.core.models import (
    ActionIdInput,
    CreateReactionInput,
    DeleteReactionInput,
    Reaction,
)
from trello_mcp.core.registry import ToolSpec
from trello_mcp.core.tools._projections import parse_many, parse_one


async def get_action_reactions(
    client: TrelloClient, args: ActionIdInput
) -> List[Dict[str, Any]]:
    payload = await client.get(
        f"/actions/{args.action_id}/reactions",
        params={"member": "true", "emoji": "true"},
        tool="get_action_reactions",
    )
    return [r.projection() for r in parse_many(Reaction, payload)]


async def create_action_reaction(
    client: TrelloClient, args: CreateReactionInput
) -> Dict[str, Any]:
    """React to an action (usually a comment); only the supplied emoji keys are sent."""
    payload = await client.post(
        f"/actions/{args.action_id}/reactions",
        json=args.emoji(),
        tool="create_action_reaction",
    )
    return parse_one(Reaction, payload).projection()


async def delete_action_reaction(
    client: TrelloClient, args: DeleteReactionInput
) -> str:
    await client.delete(
        f"/actions/{args.action_id}/reactions/{args.reaction_id}",
        tool="delete_action_reaction",
    )
    return (
        f"Successfully removed reaction {args.reaction_id} "
        f"from action {args.action_id}"
    )


TOOLS = (
    ToolSpec(
        name="get_action_reactions",
        description=(
            "List all reactions attached to a specific Trello action (e.g., a comment)"
        ),
        input_model=ActionIdInput,
        handler=get_action_reactions,
    ),
    ToolSpec(
        name="create_action_reaction",
        description="Add a reaction to a Trello action using emoji identifiers",
        input_model=CreateReactionInput,
        handler=create_action_reaction,
    ),
    ToolSpec(
        name="delete_action_reaction",
        description="Remove a specific reaction from a Trello action",
        input_model=DeleteReactionInput,
        handler=delete_action_reaction,
    ),
)
