from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional
from urllib.parse import urlsplit

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

# Trello object IDs are alphanumeric, so each stays a single path segment.
Id = Annotated[str, Field(min_length=1, pattern=r"^[A-Za-z0-9]+$")]
NonEmpty = Annotated[str, Field(min_length=1)]

LabelColor = Literal[
    "yellow", "purple", "blue", "red", "green", "orange", "black", "sky", "pink", "lime"
]
CheckItemState = Literal["complete", "incomplete"]


def _check_position(value: str) -> str:
    value = value.strip()
    if value in ("top", "bottom"):
        return value
    try:
        number = float(value)
    except ValueError:
        number = -1.0
    if number <= 0:
        raise ValueError("position must be 'top', 'bottom', or a positive number")
    return value


class ToolInput(BaseModel):
    """Base for tool arguments: camelCase on the wire, extra keys ignored."""

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )


class PositionedInput(ToolInput):
    position: str = "bottom"

    @field_validator("position")
    @classmethod
    def _valid_position(cls, value: str) -> str:
        return _check_position(value)


# --- Input Models (Tool Payloads) ---


class NoArgsInput(ToolInput):
    pass


class BoardIdInput(ToolInput):
    board_id: Id = Field(alias="boardId", description="The ID of the board")


class CreateListInput(PositionedInput):
    board_id: Id = Field(alias="boardId", description="The ID of the board")
    name: NonEmpty = Field(description="The name of the new list")


class UpdateListInput(ToolInput):
    list_id: Id = Field(alias="listId", description="The ID of the list to update")
    name: Optional[NonEmpty] = Field(default=None, description="New name for the list")
    closed: Optional[bool] = Field(
        default=None, description="Whether the list should be closed/archived"
    )
    position: Optional[float] = Field(
        default=None, gt=0, description="New position for the list"
    )

    @model_validator(mode="after")
    def _has_update(self) -> "UpdateListInput":
        if self.name is None and self.closed is None and self.position is None:
            raise ValueError("Provide at least one of name, closed, or position")
        return self


class GetCardsInput(ToolInput):
    board_id: Optional[Id] = Field(
        default=None,
        alias="boardId",
        description="The ID of the board (if getting all cards from board)",
    )
    list_id: Optional[Id] = Field(
        default=None,
        alias="listId",
        description="The ID of the list (if getting cards from specific list)",
    )

    @model_validator(mode="after")
    def _board_or_list(self) -> "GetCardsInput":
        if not (self.board_id or self.list_id):
            raise ValueError("Either boardId or listId must be provided")
        return self


class CardIdInput(ToolInput):
    card_id: Id = Field(alias="cardId", description="The ID of the card")


class CreateCardInput(PositionedInput):
    list_id: Id = Field(
        alias="listId", description="The ID of the list where the card will be created"
    )
    name: NonEmpty = Field(description="The name/title of the card")
    description: Optional[str] = Field(
        default=None, description="The description of the card"
    )
    due: Optional[str] = Field(
        default=None, description="Due date for the card (ISO 8601 format)"
    )


class UpdateCardInput(ToolInput):
    card_id: Id = Field(alias="cardId", description="The ID of the card to update")
    name: Optional[NonEmpty] = Field(default=None, description="New name for the card")
    description: Optional[str] = Field(
        default=None, description="New description for the card"
    )
    due: Optional[str] = Field(
        default=None, description="New due date (ISO 8601 format)"
    )
    due_complete: Optional[bool] = Field(
        default=None,
        alias="dueComplete",
        description="Whether the due date is complete",
    )
    closed: Optional[bool] = Field(
        default=None, description="Whether the card should be closed/archived"
    )

    @model_validator(mode="after")
    def _has_update(self) -> "UpdateCardInput":
        fields = (self.name, self.description, self.due, self.due_complete, self.closed)
        if all(f is None for f in fields):
            raise ValueError(
                "Provide at least one of name, description, due, dueComplete, or closed"
            )
        return self


class MoveCardInput(PositionedInput):
    card_id: Id = Field(alias="cardId", description="The ID of the card to move")
    list_id: Id = Field(alias="listId", description="The ID of the target list")


class CardMemberInput(ToolInput):
    card_id: Id = Field(alias="cardId", description="The ID of the card")
    member_id: Id = Field(alias="memberId", description="The ID of the member")


class CreateLabelInput(ToolInput):
    board_id: Id = Field(alias="boardId", description="The ID of the board")
    name: NonEmpty = Field(description="The name of the label")
    color: LabelColor = Field(description="The color of the label")


class CardLabelInput(ToolInput):
    card_id: Id = Field(alias="cardId", description="The ID of the card")
    label_id: Id = Field(alias="labelId", description="The ID of the label")


class CreateChecklistInput(ToolInput):
    card_id: Id = Field(alias="cardId", description="The ID of the card")
    name: NonEmpty = Field(description="The name of the checklist")


class AddChecklistItemInput(PositionedInput):
    checklist_id: Id = Field(alias="checklistId", description="The ID of the checklist")
    name: NonEmpty = Field(description="The name of the checklist item")


class UpdateChecklistItemInput(ToolInput):
    card_id: Id = Field(
        alias="cardId", description="The ID of the card containing the checklist"
    )
    item_id: Id = Field(alias="itemId", description="The ID of the checklist item")
    state: CheckItemState = Field(description="The new state of the item")


class ChecklistIdInput(ToolInput):
    checklist_id: Id = Field(alias="checklistId", description="The ID of the checklist")


class ChecklistItemInput(ToolInput):
    checklist_id: Id = Field(alias="checklistId", description="The ID of the checklist")
    item_id: Id = Field(alias="itemId", description="The ID of the checklist item")


class FetchByUrlInput(ToolInput):
    url: str = Field(description="The Trello attachment URL to fetch")
    file_name: Optional[NonEmpty] = Field(
        default=None,
        alias="fileName",
        description="Optional file name override for the attachment",
    )

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        value = value.strip()
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError("Valid URL is required")
        return value


class DownloadToPathInput(FetchByUrlInput):
    dest_path: NonEmpty = Field(
        alias="destPath",
        description=(
            "Destination file path, or a directory (existing, or ending with a "
            "path separator) in which the file name is inferred"
        ),
    )
    overwrite: bool = Field(
        default=False, description="Replace the destination file if it exists"
    )


class ActionIdInput(ToolInput):
    action_id: Id = Field(
        alias="actionId",
        description="The Trello action ID (typically a comment action)",
    )


class CreateReactionInput(ActionIdInput):
    short_name: Optional[str] = Field(
        default=None, alias="shortName", description="Emoji short name (e.g., thumbsup)"
    )
    unified: Optional[str] = Field(
        default=None, description="Unicode codepoint string (e.g., 1F44D)"
    )
    native: Optional[str] = Field(default=None, description="Native emoji character")
    skin_variation: Optional[str] = Field(
        default=None,
        alias="skinVariation",
        description="Optional skin tone variation string (e.g., 1F3FD)",
    )

    @field_validator("short_name", "unified", "native", "skin_variation")
    @classmethod
    def _trimmed(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("cannot be empty")
        return value

    @model_validator(mode="after")
    def _identifies_emoji(self) -> "CreateReactionInput":
        if not (self.short_name or self.unified or self.native):
            raise ValueError(
                "Provide at least one of shortName, unified, or native to identify the emoji"
            )
        return self

    def emoji(self) -> Dict[str, str]:
        payload = {
            "shortName": self.short_name,
            "unified": self.unified,
            "native": self.native,
            "skinVariation": self.skin_variation,
        }
        return {k: v for k, v in payload.items() if v}


class DeleteReactionInput(ActionIdInput):
    reaction_id: Id = Field(alias="reactionId", description="The reaction ID to remove")


# --- Core Entities (Trello payloads) ---


class TrelloModel(BaseModel):
    id: str

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Member(TrelloModel):
    username: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")
    initials: Optional[str] = None

    def projection(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "fullName": self.full_name,
            "initials": self.initials,
        }


class Label(TrelloModel):
    name: Optional[str] = None
    color: Optional[str] = None
    board_id: Optional[str] = Field(default=None, alias="idBoard")
    uses: Optional[int] = None

    def projection(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "boardId": self.board_id,
            "uses": self.uses,
        }


class CheckItem(TrelloModel):
    name: str = ""
    state: Optional[str] = None
    pos: Optional[float] = None
    checklist_id: Optional[str] = Field(default=None, alias="idChecklist")
    due: Optional[str] = None

    def projection(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "state": self.state,
            "position": self.pos,
            "checklistId": self.checklist_id,
            "due": self.due,
        }


class Checklist(TrelloModel):
    name: str = ""
    card_id: Optional[str] = Field(default=None, alias="idCard")
    board_id: Optional[str] = Field(default=None, alias="idBoard")
    pos: Optional[float] = None
    check_items: List[CheckItem] = Field(default_factory=list, alias="checkItems")

    def projection(self) -> Dict[str, Any]:
        complete = sum(1 for i in self.check_items if i.state == "complete")
        return {
            "id": self.id,
            "name": self.name,
            "cardId": self.card_id,
            "boardId": self.board_id,
            "position": self.pos,
            "progress": f"{complete}/{len(self.check_items)}",
            "items": [i.projection() for i in self.check_items],
        }


class Attachment(TrelloModel):
    name: Optional[str] = None
    url: Optional[str] = None
    size: Optional[int] = Field(default=None, alias="bytes")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    date: Optional[str] = None

    def projection(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "bytes": self.size,
            "mimeType": self.mime_type,
            "date": self.date,
        }


class TrelloList(TrelloModel):
    name: str = ""
    closed: bool = False
    pos: Optional[float] = None
    board_id: Optional[str] = Field(default=None, alias="idBoard")

    def projection(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "closed": self.closed,
            "position": self.pos,
            "boardId": self.board_id,
        }


class Card(TrelloModel):
    name: str = ""
    desc: str = ""
    closed: bool = False
    due: Optional[str] = None
    due_complete: bool = Field(default=False, alias="dueComplete")
    list_id: Optional[str] = Field(default=None, alias="idList")
    board_id: Optional[str] = Field(default=None, alias="idBoard")
    pos: Optional[float] = None
    url: Optional[str] = None
    short_url: Optional[str] = Field(default=None, alias="shortUrl")
    member_ids: List[str] = Field(default_factory=list, alias="idMembers")
    label_ids: List[str] = Field(default_factory=list, alias="idLabels")
    date_last_activity: Optional[str] = Field(default=None, alias="dateLastActivity")
    labels: Optional[List[Label]] = None
    members: Optional[List[Member]] = None
    checklists: Optional[List[Checklist]] = None
    attachments: Optional[List[Attachment]] = None

    def projection(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.desc,
            "due": self.due,
            "dueComplete": self.due_complete,
            "closed": self.closed,
            "listId": self.list_id,
            "boardId": self.board_id,
            "position": self.pos,
            "url": self.short_url or self.url,
            "memberIds": self.member_ids,
            "labelIds": self.label_ids,
            "lastActivity": self.date_last_activity,
        }
        # Nested resources only when the API embedded them
        if self.labels is not None:
            out["labels"] = [lbl.projection() for lbl in self.labels]
        if self.members is not None:
            out["members"] = [m.projection() for m in self.members]
        if self.checklists is not None:
            out["checklists"] = [c.projection() for c in self.checklists]
        if self.attachments is not None:
            out["attachments"] = [a.projection() for a in self.attachments]
        return out


class Board(TrelloModel):
    name: str = ""
    desc: str = ""
    closed: bool = False
    url: Optional[str] = None
    short_url: Optional[str] = Field(default=None, alias="shortUrl")
    starred: Optional[bool] = None
    date_last_activity: Optional[str] = Field(default=None, alias="dateLastActivity")
    lists: Optional[List[TrelloList]] = None
    cards: Optional[List[Card]] = None
    labels: Optional[List[Label]] = None
    members: Optional[List[Member]] = None

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.desc,
            "closed": self.closed,
            "url": self.short_url or self.url,
            "starred": self.starred,
            "lastActivity": self.date_last_activity,
        }

    def projection(self) -> Dict[str, Any]:
        """Board detail with cards nested under their lists."""
        out = self.summary()
        cards_by_list: Dict[Optional[str], List[Dict[str, Any]]] = {}
        for card in self.cards or []:
            cards_by_list.setdefault(card.list_id, []).append(
                {
                    "id": card.id,
                    "name": card.name,
                    "due": card.due,
                    "dueComplete": card.due_complete,
                    "labelIds": card.label_ids,
                    "memberIds": card.member_ids,
                }
            )
        out["lists"] = [
            {**lst.projection(), "cards": cards_by_list.get(lst.id, [])}
            for lst in self.lists or []
        ]
        out["labels"] = [lbl.projection() for lbl in self.labels or []]
        out["members"] = [m.projection() for m in self.members or []]
        return out


class Reaction(TrelloModel):
    member_id: Optional[str] = Field(default=None, alias="idMember")
    action_id: Optional[str] = Field(default=None, alias="idModel")
    emoji: Dict[str, Any] = Field(default_factory=dict)
    member: Optional[Member] = None

    def projection(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "actionId": self.action_id,
            "memberId": self.member_id,
            "member": self.member.projection() if self.member else None,
            "emoji": {
                "shortName": self.emoji.get("shortName"),
                "unified": self.emoji.get("unified"),
                "native": self.emoji.get("native"),
                "skinVariation": self.emoji.get("skinVariation"),
            },
        }
