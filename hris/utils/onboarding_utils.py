from datetime import datetime, timedelta
from typing import List, Optional

from pytz import UTC

from hris.db import onboarding_collection, users_collection
from hris.models.onboarding import ChecklistItem, Onboarding

# (task, days until due)
DEFAULT_ONBOARDING_TASKS = [
    ("Complete personal profile", 3),
    ("Upload CV/Resume", 7),
    ("Upload Ghana Card", 7),
    ("Review company policies", 14),
    ("Meet line manager", 14),
]


def default_checklist() -> List[ChecklistItem]:
    today = datetime.now(UTC).date()
    return [
        ChecklistItem(task=task, due_date=(today + timedelta(days=days)).isoformat())
        for task, days in DEFAULT_ONBOARDING_TASKS
    ]


def calculate_progress(checklist: List[dict]) -> int:
    if not checklist:
        return 0
    completed = sum(1 for item in checklist if item.get("completed"))
    return round(completed / len(checklist) * 100)


def onboarding_status(progress: int) -> str:
    if progress >= 100:
        return "completed"
    if progress > 0:
        return "in_progress"
    return "pending"


def create_onboarding_record(employee_id: str, checklist: Optional[List[ChecklistItem]] = None) -> dict:
    onboarding = Onboarding(employee_id=employee_id, checklist=checklist or default_checklist())
    record = onboarding.to_record()
    record["progress"] = calculate_progress(record["checklist"])
    record["status"] = onboarding_status(record["progress"])
    onboarding_collection.insert_one(record)
    return record


def sync_user_onboarding(employee_id: str, progress: int, status: str) -> None:
    """Mirror progress onto the user record, which the dashboards read."""
    users_collection.update_one(
        {"id": employee_id},
        {"onboardingProgress": progress, "onboardingStatus": status},
    )
