"""In-process slide deck service.

Decks live in memory; the call contract mirrors the HTTP API this service is
meant to front later.
"""

from __future__ import annotations

import itertools
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from .exceptions import (
    DeckNotFoundError,
    DeckUpdateError,
    InvalidEmailError,
    PermissionExistsError,
)
from .models import Deck, DeckSummary, Permission, PermissionRole, Slide, utcnow
from .telemetry import track_event

LOGGER = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
IMMUTABLE_DECK_FIELDS = frozenset({"id", "created_at", "created_by"})


def validate_email(email: str) -> str:
    """Return the trimmed email.

    Raises:
        InvalidEmailError: When the address is malformed.
    """
    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise InvalidEmailError(f"Please enter a valid email address: {email!r}")
    return email


class DeckService:
    """List, create, update and share slide decks."""

    def __init__(
        self,
        decks: Iterable[Deck] = (),
        user_id: str = "user-1",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._decks: List[Deck] = [deck.model_copy(deep=True) for deck in decks]
        self._ids = itertools.count(1)
        self._permission_ids = itertools.count(1)
        self.user_id = user_id
        self.logger = logger or LOGGER

    def list_decks(self, folder_id: Optional[str] = None) -> List[DeckSummary]:
        decks = self._decks
        if folder_id:
            decks = [deck for deck in decks if deck.folder_id == folder_id]
        return [
            DeckSummary(
                id=deck.id,
                name=deck.name,
                description=deck.description,
                tags=list(deck.tags),
                slide_count=deck.slide_count,
                thumbnail_url=deck.thumbnail_url,
                updated_at=deck.modified_at,
                created_by=deck.created_by,
            )
            for deck in decks
        ]

    def get_deck(self, deck_id: str) -> Deck:
        return self._find(deck_id).model_copy(deep=True)

    def create_deck(
        self,
        name: Optional[str] = None,
        description: str = "",
        tags: Iterable[str] = (),
        folder_id: Optional[str] = None,
    ) -> Deck:
        """Create a deck with one empty slide."""
        deck_id = self._next_deck_id()
        deck = Deck(
            id=deck_id,
            name=name or "Untitled Deck",
            description=description,
            tags=list(tags),
            folder_id=folder_id,
            created_by=self.user_id,
            slides=[Slide(id=f"{deck_id}-slide-1", deck_id=deck_id)],
        )
        self._decks.append(deck)
        self.logger.info("Created deck %s", deck_id)
        track_event("deck_created", deck_id=deck_id)
        return deck.model_copy(deep=True)

    def update_deck(self, deck_id: str, **updates: Any) -> Deck:
        """Merge ``updates`` into a deck and bump its modification time.

        Raises:
            DeckNotFoundError: When the deck does not exist.
            DeckUpdateError: When ``updates`` names a read-only or unknown
                field, or a value fails validation.
        """
        deck = self._find(deck_id)
        blocked = IMMUTABLE_DECK_FIELDS & set(updates)
        if blocked:
            raise DeckUpdateError(f"Cannot update deck fields: {', '.join(sorted(blocked))}")
        unknown = set(updates) - set(Deck.model_fields)
        if unknown:
            raise DeckUpdateError(f"Unknown deck fields: {', '.join(sorted(unknown))}")
        try:
            merged = Deck.model_validate(
                {**deck.model_dump(), **updates, "modified_at": utcnow()}
            )
        except ValidationError as exc:
            raise DeckUpdateError(f"Invalid deck update for {deck_id}: {exc}") from exc
        self._replace(merged)
        return merged.model_copy(deep=True)

    def delete_deck(self, deck_id: str) -> bool:
        deck = self._find(deck_id)
        self._decks.remove(deck)
        track_event("deck_deleted", deck_id=deck_id)
        return True

    def get_permissions(self, deck_id: str) -> List[Permission]:
        return [permission.model_copy() for permission in self._find(deck_id).permissions]

    def update_permissions(
        self, deck_id: str, permissions: Iterable[Permission]
    ) -> List[Permission]:
        deck = self._find(deck_id)
        deck.permissions = [permission.model_copy() for permission in permissions]
        track_event("permission_changed", deck_id=deck_id, count=len(deck.permissions))
        return self.get_permissions(deck_id)

    def share_deck(
        self,
        deck_id: str,
        email: str,
        role: Union[PermissionRole, str] = PermissionRole.VIEWER,
    ) -> Permission:
        """Grant ``email`` access to a deck.

        Raises:
            DeckNotFoundError: When the deck does not exist.
            InvalidEmailError: When the email is malformed.
            PermissionExistsError: When the email already has access.
        """
        deck = self._find(deck_id)
        email = validate_email(email)
        if any(permission.email == email for permission in deck.permissions):
            raise PermissionExistsError(f"User already has access: {email}")
        permission = Permission(
            id=f"perm-{next(self._permission_ids)}",
            email=email,
            role=PermissionRole(role),
        )
        deck.permissions.append(permission)
        track_event("user_added", deck_id=deck_id, role=permission.role.value)
        return permission.model_copy()

    def _next_deck_id(self) -> str:
        taken = {deck.id for deck in self._decks}
        while True:
            candidate = f"deck-{next(self._ids)}"
            if candidate not in taken:
                return candidate

    def _find(self, deck_id: str) -> Deck:
        for deck in self._decks:
            if deck.id == deck_id:
                return deck
        raise DeckNotFoundError(f"Deck not found: {deck_id}")

    def _replace(self, updated: Deck) -> None:
        positions: Dict[str, int] = {deck.id: i for i, deck in enumerate(self._decks)}
        self._decks[positions[updated.id]] = updated
