"""Intel drop targeting and admin filtering."""

from collections.abc import Iterable

from academy.core.schemas_intel import IntelClassification, IntelDrop, IntelStats, IntelTab


def affects_task_force(intel: IntelDrop, task_force: str | None) -> bool:
    """An untargeted drop reaches everyone; a targeted one only its task forces."""
    if not intel.affected_task_forces:
        return True
    return task_force is not None and task_force in intel.affected_task_forces


def filter_intel_drops(
    drops: Iterable[IntelDrop],
    tab: IntelTab = "all",
    search: str | None = None,
    day: int | None = None,
    classification: IntelClassification | None = None,
) -> list[IntelDrop]:
    filtered = list(drops)

    if tab == "unreleased":
        filtered = [d for d in filtered if not d.is_released]
    elif tab == "released":
        filtered = [d for d in filtered if d.is_released]

    if search:
        query = search.lower()
        filtered = [
            d for d in filtered if query in d.title.lower() or query in d.content.lower()
        ]

    if day is not None:
        filtered = [d for d in filtered if d.day == day]

    if classification is not None:
        filtered = [d for d in filtered if d.classification == classification]

    return filtered


def intel_stats(drops: Iterable[IntelDrop]) -> IntelStats:
    drops = list(drops)
    return IntelStats(
        unreleased=sum(1 for d in drops if not d.is_released),
        released=sum(1 for d in drops if d.is_released),
        urgent_unreleased=sum(
            1
            for d in drops
            if d.classification == IntelClassification.URGENT and not d.is_released
        ),
        days=sorted({d.day for d in drops}),
    )


def normalize_update(update: dict) -> dict:
    """Store empty targeting and trigger fields as null."""
    row = dict(update)
    if "affected_task_forces" in row and not row["affected_task_forces"]:
        row["affected_task_forces"] = None
    if "trigger_time" in row and not row["trigger_time"]:
        row["trigger_time"] = None
    return row
