"""Tests for live session queries against a mocked Supabase client."""

from unittest.mock import MagicMock, patch

from academy.db.live_sessions import get_live_session_by_code, join_code_exists


def test_join_code_checked_across_ended_sessions():
    supabase = MagicMock()
    query = supabase.table.return_value.select.return_value.eq.return_value
    query.limit.return_value.execute.return_value = MagicMock(data=[{"id": "ended-session"}])

    with patch("academy.db.live_sessions.get_supabase", return_value=supabase):
        assert join_code_exists("abc123") is True

    supabase.table.return_value.select.return_value.eq.assert_called_once_with("join_code", "ABC123")
    query.eq.assert_not_called()


def test_lookup_returns_latest_session_for_code():
    supabase = MagicMock()
    query = supabase.table.return_value.select.return_value.eq.return_value
    latest = {"id": "session-2", "join_code": "ABC123", "is_active": False}
    ordered = query.order.return_value
    ordered.limit.return_value.maybe_single.return_value.execute.return_value = MagicMock(data=latest)

    with patch("academy.db.live_sessions.get_supabase", return_value=supabase):
        assert get_live_session_by_code("abc123") == latest

    query.order.assert_called_once_with("started_at", desc=True)
    ordered.limit.assert_called_once_with(1)


def test_lookup_missing_code():
    supabase = MagicMock()
    query = supabase.table.return_value.select.return_value.eq.return_value.eq.return_value
    query.order.return_value.limit.return_value.maybe_single.return_value.execute.return_value = None

    with patch("academy.db.live_sessions.get_supabase", return_value=supabase):
        assert get_live_session_by_code("abc123", active_only=True) is None
