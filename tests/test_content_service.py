"""Tests for day content resolution across local, GitHub and database sources."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from academy.services import content_service
from academy.services.content_service import (
    cache_key,
    day_folder,
    get_content_cache,
    get_database_content,
    get_day_content,
    get_github_content,
    get_local_content,
)


@pytest.fixture(autouse=True)
def clear_cache():
    get_content_cache().clear()
    yield
    get_content_cache().clear()


@pytest.fixture
def content_dir(tmp_path):
    folder = tmp_path / "01-Common-Foundations" / "Day-03"
    folder.mkdir(parents=True)
    (folder / "SITUATION.md").write_text("# Situation 3")
    (folder / "RESOURCES.md").write_text("# Resources 3")
    (folder / "MENTOR-NOTES.md").write_text("# Mentor notes 3")
    return tmp_path


def test_keys_and_folders():
    assert cache_key(3, True) == "day-3-admin-true"
    assert cache_key(12, False) == "day-12-admin-false"
    assert day_folder(3) == "01-Common-Foundations/Day-03"


class TestLocalContent:
    def test_admin_gets_mentor_notes(self, content_dir):
        content = get_local_content(str(content_dir), 3, is_admin=True)

        assert content.source == "local"
        assert content.situation == "# Situation 3"
        assert content.resources == "# Resources 3"
        assert content.mentor_notes == "# Mentor notes 3"

    def test_participant_never_gets_mentor_notes(self, content_dir):
        content = get_local_content(str(content_dir), 3, is_admin=False)
        assert content.mentor_notes is None

    def test_missing_situation_is_not_content(self, content_dir):
        assert get_local_content(str(content_dir), 4, is_admin=False) is None

    def test_no_base_path(self):
        assert get_local_content(None, 3, is_admin=False) is None


class TestGitHubContent:
    @pytest.mark.asyncio
    async def test_fetches_files(self):
        client = MagicMock()
        client.fetch_file = AsyncMock(side_effect=["situation", "resources"])

        content = await get_github_content(client, 3, is_admin=False)

        assert content.source == "github"
        assert content.resources == "resources"
        client.fetch_file.assert_any_await("01-Common-Foundations/Day-03/SITUATION.md")
        assert client.fetch_file.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_situation(self):
        client = MagicMock()
        client.fetch_file = AsyncMock(return_value=None)

        assert await get_github_content(client, 3, is_admin=True) is None

    @pytest.mark.asyncio
    async def test_no_client(self):
        assert await get_github_content(None, 3, is_admin=True) is None


class TestDatabaseContent:
    def test_row_maps_to_content(self):
        row = {"briefing_content": "briefing", "resources_content": "links"}
        with patch("academy.services.content_service.get_mission_day_content", return_value=row):
            content = get_database_content(5)

        assert content.source == "database"
        assert content.situation == "briefing"

    def test_store_error_is_a_miss(self):
        with patch(
            "academy.services.content_service.get_mission_day_content",
            side_effect=Exception("db down"),
        ):
            assert get_database_content(5) is None


class TestGetDayContent:
    @pytest.mark.asyncio
    async def test_falls_back_to_database_and_caches(self):
        row = {"briefing_content": "briefing", "resources_content": None}
        with patch.object(content_service, "_github_client", return_value=None), patch(
            "academy.services.content_service.get_mission_day_content", return_value=row
        ) as mock_db:
            first = await get_day_content(5, is_admin=False)
            second = await get_day_content(5, is_admin=False)

        assert first.cached is False
        assert second.cached is True
        assert second.situation == "briefing"
        mock_db.assert_called_once_with(5)

    @pytest.mark.asyncio
    async def test_admin_and_participant_cached_separately(self):
        row = {"briefing_content": "briefing"}
        with patch.object(content_service, "_github_client", return_value=None), patch(
            "academy.services.content_service.get_mission_day_content", return_value=row
        ) as mock_db:
            await get_day_content(5, is_admin=False)
            await get_day_content(5, is_admin=True)

        assert mock_db.call_count == 2

    @pytest.mark.asyncio
    async def test_not_found_is_not_cached(self):
        with patch.object(content_service, "_github_client", return_value=None), patch(
            "academy.services.content_service.get_mission_day_content", return_value=None
        ):
            assert await get_day_content(7, is_admin=False) is None

        assert len(get_content_cache()) == 0
