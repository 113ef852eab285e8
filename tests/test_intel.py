"""Tests for intel drop targeting, filtering and the release listener."""

import pytest
from fakes.fake_channel import FakeChannel

from academy.core.intel import affects_task_force, filter_intel_drops, intel_stats, normalize_update
from academy.core.schemas_intel import IntelClassification, IntelDrop
from academy.realtime.intel import NEW_INTEL, IntelReleaseListener


def drop(intel_id: str, day: int = 1, **fields) -> IntelDrop:
    return IntelDrop(id=intel_id, day=day, title=fields.pop("title", f"Intel {intel_id}"), **fields)


DROPS = [
    drop("1", day=1, title="Server outage", classification=IntelClassification.URGENT),
    drop("2", day=2, content="Vendor contract leaked", is_released=True),
    drop("3", day=2, classification=IntelClassification.URGENT, is_released=True),
    drop("4", day=5, affected_task_forces=["RHEIN"]),
]


class TestTargeting:
    def test_untargeted_reaches_everyone(self):
        assert affects_task_force(drop("x"), "LYON") is True
        assert affects_task_force(drop("x", affected_task_forces=[]), None) is True

    def test_targeted_only_reaches_listed(self):
        targeted = drop("x", affected_task_forces=["RHEIN", "MILAN"])

        assert affects_task_force(targeted, "MILAN") is True
        assert affects_task_force(targeted, "LYON") is False
        assert affects_task_force(targeted, None) is False


class TestFiltering:
    def test_tabs(self):
        assert [d.id for d in filter_intel_drops(DROPS, tab="unreleased")] == ["1", "4"]
        assert [d.id for d in filter_intel_drops(DROPS, tab="released")] == ["2", "3"]
        assert len(filter_intel_drops(DROPS, tab="all")) == 4

    def test_search_is_case_insensitive_over_title_and_content(self):
        assert [d.id for d in filter_intel_drops(DROPS, search="OUTAGE")] == ["1"]
        assert [d.id for d in filter_intel_drops(DROPS, search="contract")] == ["2"]

    def test_day_and_classification(self):
        result = filter_intel_drops(DROPS, day=2, classification=IntelClassification.URGENT)
        assert [d.id for d in result] == ["3"]

    def test_stats(self):
        stats = intel_stats(DROPS)

        assert stats.unreleased == 2
        assert stats.released == 2
        assert stats.urgent_unreleased == 1
        assert stats.days == [1, 2, 5]


def test_normalize_update_nulls_empty_fields():
    assert normalize_update({"affected_task_forces": [], "trigger_time": "", "title": "New"}) == {
        "affected_task_forces": None,
        "trigger_time": None,
        "title": "New",
    }


@pytest.mark.asyncio
async def test_listener_filters_by_task_force():
    channel = FakeChannel()
    received = []
    listener = IntelReleaseListener(channel, "LYON", received.append)
    await listener.start()

    channel.deliver(
        NEW_INTEL,
        {
            "released": [
                {"id": "a", "day": 3, "title": "For everyone"},
                {"id": "b", "day": 3, "title": "Rhein only", "affected_task_forces": ["RHEIN"]},
                {"id": "c", "title": "Malformed"},
            ]
        },
    )
    await listener.stop()

    assert [i.id for i in received] == ["a"]
    assert channel.unsubscribed is True
