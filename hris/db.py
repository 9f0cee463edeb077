import copy
import json
import logging
import os
import tempfile
from typing import Any, Dict, List, Optional

from hris.config import settings

logger = logging.getLogger(__name__)

COLLECTIONS = (
    "users",
    "roles",
    "permissions",
    "departments",
    "appraisals",
    "leaveRequests",
    "documents",
    "documentAuditLogs",
    "attendanceUploads",
    "onboarding",
    "notifications",
    "integrations",
)


class StorageError(Exception):
    """Raised when the database document cannot be written to disk."""


def _matches(record: dict, query: Optional[dict]) -> bool:
    if not query:
        return True
    return all(record.get(key) == value for key, value in query.items())


class JsonStore:
    """
    Whole-document JSON store.

    Every collection lives in memory as a list of dicts. Mutations go through
    the collection handles, which call ``save()`` to rewrite the entire file.
    There is no locking: the last write wins.
    """

    def __init__(self, path: str):
        self.path = path
        self.data: Dict[str, Any] = self._empty()

    @staticmethod
    def _empty() -> Dict[str, Any]:
        data: Dict[str, Any] = {name: [] for name in COLLECTIONS}
        data["systemSettings"] = {}
        return data

    def load(self, path: Optional[str] = None) -> None:
        if path is not None:
            self.path = path

        data = self._empty()
        try:
            with open(self.path, "r", encoding="utf-8") as db_file:
                data.update(json.load(db_file))
            logger.info("Loaded database from %s", self.path)
        except FileNotFoundError:
            logger.info("No database at %s, starting with an empty store", self.path)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Error loading database %s: %s", self.path, e)

        self.data = data

    def save(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                json.dump(self.data, tmp_file, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Error saving database to %s: %s", self.path, e)
            raise StorageError(str(e)) from e

    def collection(self, name: str) -> "JsonCollection":
        return JsonCollection(self, name)

    @property
    def system_settings(self) -> dict:
        return self.data.setdefault("systemSettings", {})

    def update_system_settings(self, changes: dict) -> dict:
        self.data["systemSettings"] = {**self.system_settings, **changes}
        self.save()
        return self.data["systemSettings"]


class JsonCollection:
    """Equality-filtered operations over one list in the store."""

    def __init__(self, store: JsonStore, name: str):
        self.store = store
        self.name = name

    @property
    def items(self) -> List[dict]:
        return self.store.data.setdefault(self.name, [])

    def find(self, query: Optional[dict] = None) -> List[dict]:
        return [copy.deepcopy(item) for item in self.items if _matches(item, query)]

    def find_one(self, query: Optional[dict] = None) -> Optional[dict]:
        for item in self.items:
            if _matches(item, query):
                return copy.deepcopy(item)
        return None

    def count_documents(self, query: Optional[dict] = None) -> int:
        return sum(1 for item in self.items if _matches(item, query))

    def insert_one(self, document: dict) -> dict:
        self.items.append(copy.deepcopy(document))
        self.store.save()
        return document

    def update_one(self, query: dict, changes: dict) -> Optional[dict]:
        """Merge ``changes`` into the first match and return the updated copy."""
        for index, item in enumerate(self.items):
            if _matches(item, query):
                self.items[index] = {**item, **copy.deepcopy(changes)}
                self.store.save()
                return copy.deepcopy(self.items[index])
        return None

    def replace_one(self, query: dict, document: dict) -> Optional[dict]:
        for index, item in enumerate(self.items):
            if _matches(item, query):
                self.items[index] = copy.deepcopy(document)
                self.store.save()
                return copy.deepcopy(document)
        return None

    def delete_one(self, query: dict) -> bool:
        for index, item in enumerate(self.items):
            if _matches(item, query):
                del self.items[index]
                self.store.save()
                return True
        return False


store = JsonStore(settings.DATABASE_FILE)
store.load()

users_collection = store.collection("users")
roles_collection = store.collection("roles")
permissions_collection = store.collection("permissions")
departments_collection = store.collection("departments")
appraisals_collection = store.collection("appraisals")
leaves_collection = store.collection("leaveRequests")
documents_collection = store.collection("documents")
document_audit_logs_collection = store.collection("documentAuditLogs")
attendance_uploads_collection = store.collection("attendanceUploads")
onboarding_collection = store.collection("onboarding")
notifications_collection = store.collection("notifications")
integrations_collection = store.collection("integrations")
