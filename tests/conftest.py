from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
import pytz

from live_match_notifier.services.notification_service import NotificationService
from live_match_notifier.services.push_client import PushError
from live_match_notifier.storage.match_store import MatchStore
from live_match_notifier.storage.models import MulticastResult


NOW = datetime(2024, 5, 1, 18, 0, tzinfo=pytz.UTC)


def _coerce(value):
    # Timestamps are compared as instants, not as strings
    if isinstance(value, str) and "T" in value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


class FakeQuery:
    """Minimal in-memory stand-in for a postgrest query builder"""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self._negate = False

    def select(self, columns="*"):
        self.op = "select"
        self.columns = columns
        return self

    def update(self, values):
        self.op = "update"
        self.payload = values
        return self

    def insert(self, values):
        self.op = "insert"
        self.payload = values
        return self

    def _add(self, predicate):
        self.filters.append(predicate)
        return self

    def eq(self, column, value):
        return self._add(lambda r: r.get(column) == value)

    def neq(self, column, value):
        # SQL semantics: NULL <> x is not true
        return self._add(lambda r: r.get(column) is not None and r.get(column) != value)

    def gte(self, column, value):
        return self._add(lambda r: r.get(column) is not None and _coerce(r[column]) >= _coerce(value))

    def lte(self, column, value):
        return self._add(lambda r: r.get(column) is not None and _coerce(r[column]) <= _coerce(value))

    def lt(self, column, value):
        return self._add(lambda r: r.get(column) is not None and _coerce(r[column]) < _coerce(value))

    @property
    def not_(self):
        self._negate = True
        return self

    def is_(self, column, value):
        assert value == "null"
        negate, self._negate = self._negate, False
        return self._add(lambda r: (r.get(column) is None) != negate)

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if (self.table, self.op) in self.db.failures:
            raise RuntimeError(f"{self.table} {self.op} unavailable")

        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "insert":
            row = dict(self.payload)
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        matched = [r for r in rows if all(f(r) for f in self.filters)]
        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched])

        if self.columns == "*":
            return SimpleNamespace(data=[dict(r) for r in matched])
        names = [c.strip() for c in self.columns.split(",")]
        return SimpleNamespace(data=[{n: r.get(n) for n in names} for r in matched])


class FakeSupabase:
    def __init__(self):
        self.tables = {"matches": [], "users": [], "notifications_log": []}
        self.failures = set()
        self.calls = []

    def table(self, name):
        return FakeQuery(self, name)

    def add_match(self, id, minutes_ago, **overrides):
        row = {
            "id": id,
            "opponent1_name": f"Home {id}",
            "opponent2_name": f"Away {id}",
            "match_time": (NOW - timedelta(minutes=minutes_ago)).isoformat(),
            "live_url": f"https://stream.example/{id}",
            "is_active": True,
            "live_notification_sent": False,
            "status": "scheduled",
        }
        row.update(overrides)
        self.tables["matches"].append(row)
        return row

    def add_users(self, *tokens):
        for token in tokens:
            self.tables["users"].append({"fcm_token": token})

    def match(self, id):
        return next(r for r in self.tables["matches"] if r["id"] == id)


class FakePushClient:
    def __init__(self, success_count=None, fail=False):
        self.success_count = success_count
        self.fail = fail
        self.sent = []

    def send_multicast(self, tokens, title, body, data=None):
        if self.fail:
            raise PushError("gateway unavailable")
        self.sent.append({"tokens": list(tokens), "title": title, "body": body, "data": data})
        success = len(tokens) if self.success_count is None else self.success_count
        return MulticastResult(success_count=success, failure_count=len(tokens) - success)


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def store(db):
    return MatchStore(db)


@pytest.fixture
def push():
    return FakePushClient()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def notification_service(store, push):
    return NotificationService(
        store=store,
        push_client=push,
        title_template="⚽ Match started!",
        body_template="{opponent1} VS {opponent2} - Live now",
        live_status="live",
    )
