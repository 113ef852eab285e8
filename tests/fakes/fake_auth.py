"""Helpers that sign a test client in as a given participant."""

from contextlib import contextmanager
from typing import Iterator, Optional
from unittest.mock import MagicMock, patch

from academy.core.schemas_participants import Participant

AUTH_HEADERS = {"Authorization": "Bearer test-token"}


def make_participant(pid: str = "p-1", is_admin: bool = False, **fields) -> Participant:
    return Participant(
        id=pid,
        email=fields.pop("email", f"{pid}@academy.test"),
        name=fields.pop("name", f"Participant {pid}"),
        is_admin=is_admin,
        **fields,
    )


@contextmanager
def signed_in_as(participant: Optional[Participant], user_id: str = "user-1") -> Iterator[MagicMock]:
    """Resolve the Bearer token to ``participant`` (None for a user without a profile)."""
    client = MagicMock()
    user = MagicMock()
    user.id = user_id
    user.email = participant.email if participant else "new@academy.test"
    client.auth.get_user.return_value = MagicMock(user=user)

    with patch("academy.db.supabase_client.get_supabase", return_value=client), patch(
        "academy.core.auth_middleware.get_participant_by_email", return_value=participant
    ):
        yield client
