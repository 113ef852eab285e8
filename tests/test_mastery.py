"""Tests for the mastery threshold evaluator."""

import pytest

from academy.core.mastery import calculate_new_level, get_mastery_progress
from academy.core.schemas_mastery import ClearanceLevel, MasteryRecord


def record(**counters) -> MasteryRecord:
    return MasteryRecord(participant_id="p-1", **counters)


class TestCalculateNewLevel:
    def test_field_trainee_after_three_days_and_a_tutor_session(self):
        level_up = calculate_new_level(record(days_completed=3, ai_tutor_sessions=1))

        assert level_up is not None
        assert level_up.new_level == 2
        assert level_up.new_clearance == ClearanceLevel.FIELD_TRAINEE

    def test_missing_tutor_session_blocks_level_two(self):
        assert calculate_new_level(record(days_completed=5)) is None

    def test_field_ready_needs_an_artifact(self):
        r = record(mastery_level=2, days_completed=10, ai_tutor_sessions=1)
        assert calculate_new_level(r) is None

        r = record(mastery_level=2, days_completed=10, ai_tutor_sessions=1, artifacts_submitted=1)
        level_up = calculate_new_level(r)
        assert level_up.new_level == 3
        assert level_up.new_clearance == ClearanceLevel.FIELD_READY

    def test_jumps_to_highest_qualifying_level(self):
        r = record(days_completed=22, ai_tutor_sessions=4, artifacts_submitted=3, peer_assists_given=2)

        level_up = calculate_new_level(r)

        assert level_up.new_level == 4
        assert level_up.new_clearance == ClearanceLevel.SPECIALIST

    def test_max_level_never_levels_up(self):
        r = record(
            mastery_level=4,
            days_completed=25,
            ai_tutor_sessions=10,
            artifacts_submitted=10,
            peer_assists_given=10,
        )
        assert calculate_new_level(r) is None

    @pytest.mark.parametrize("current", [1, 2, 3, 4])
    def test_never_returns_current_or_lower(self, current):
        r = record(
            mastery_level=current,
            days_completed=25,
            ai_tutor_sessions=5,
            artifacts_submitted=5,
            peer_assists_given=5,
        )

        level_up = calculate_new_level(r)

        if level_up is not None:
            assert level_up.new_level > current

    def test_counters_for_lower_level_do_not_demote(self):
        r = record(mastery_level=3, days_completed=3, ai_tutor_sessions=1)
        assert calculate_new_level(r) is None


class TestMasteryProgress:
    def test_no_record_starts_at_level_one(self):
        progress = get_mastery_progress(None)

        assert progress.current_level == 1
        assert progress.next_level == 2
        assert progress.overall_progress == 0

    def test_partial_progress_toward_level_two(self):
        progress = get_mastery_progress(record(days_completed=3))

        assert progress.next_level == 2
        assert [r.name for r in progress.requirements] == ["Days Completed", "AI Tutor Sessions"]
        assert progress.requirements[0].completed is True
        assert progress.requirements[1].completed is False
        assert progress.overall_progress == 50

    def test_level_four_is_complete(self):
        progress = get_mastery_progress(record(mastery_level=4))

        assert progress.next_level is None
        assert progress.overall_progress == 100
        assert progress.requirements == []
