"""Test configuration and fixtures."""

import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import copy
from datetime import date, timedelta
import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from wolthers_trips.config import Settings
from wolthers_trips.core.dependencies import get_current_user
from wolthers_trips.database.supabase_client import get_supabase, get_service_supabase
from wolthers_trips.main import app
from wolthers_trips.modules.auth.service import clear_auth_cache
from wolthers_trips.modules.health.routes import get_health_service
from wolthers_trips.modules.health.service import HealthService


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


def _lookup(row, column):
    """Resolve 'a.b' through embedded resources; lists yield every nested value."""
    head, _, rest = column.partition(".")
    value = row.get(head)
    if not rest:
        return [value]
    if isinstance(value, list):
        return [v for item in value for v in _lookup(item, rest)]
    if isinstance(value, dict):
        return _lookup(value, rest)
    return []


_OPS = {
    "eq": lambda a, b: a == b,
    "gt": lambda a, b: a is not None and a > b,
    "gte": lambda a, b: a is not None and a >= b,
    "lt": lambda a, b: a is not None and a < b,
    "lte": lambda a, b: a is not None and a <= b,
    "in": lambda a, b: a in b,
}


class FakeQuery:
    """Records a PostgREST query chain and evaluates it against in-memory rows."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.operation = "select"
        self.columns = None
        self.count_mode = None
        self.payload = None
        self.filters = []
        self.order_by = []
        self.limit_value = None

    def select(self, *columns, count=None):
        self.columns = ", ".join(columns)
        self.count_mode = count
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def _filter(self, op, column, value):
        self.filters.append((column, op, value))
        return self

    def eq(self, column, value):
        return self._filter("eq", column, value)

    def gt(self, column, value):
        return self._filter("gt", column, value)

    def gte(self, column, value):
        return self._filter("gte", column, value)

    def lt(self, column, value):
        return self._filter("lt", column, value)

    def lte(self, column, value):
        return self._filter("lte", column, value)

    def in_(self, column, values):
        return self._filter("in", column, values)

    def order(self, column, desc=False):
        self.order_by.append((column, desc))
        return self

    def limit(self, n):
        self.limit_value = n
        return self

    def _matches(self, row):
        return all(
            any(_OPS[op](value, operand) for value in _lookup(row, column))
            for column, op, operand in self.filters
        )

    def execute(self):
        self.client.queries.append(self)
        # errors keyed by table, or by (table, operation) to fail only writes
        for key in (self.table, (self.table, self.operation)):
            if key in self.client.errors:
                raise self.client.errors[key]
        rows = self.client.tables.setdefault(self.table, [])

        if self.operation == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for payload in payloads:
                row = {"id": str(uuid.uuid4()), "created_at": "2025-01-01T00:00:00+00:00", **payload}
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return FakeResponse(inserted)

        matched = [r for r in rows if self._matches(r)]
        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResponse(copy.deepcopy(matched))
        if self.operation == "delete":
            self.client.tables[self.table] = [r for r in rows if r not in matched]
            return FakeResponse(copy.deepcopy(matched))

        for column, desc in reversed(self.order_by):
            matched = sorted(matched, key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        count = len(matched) if self.count_mode else None
        if self.limit_value is not None:
            matched = matched[:self.limit_value]
        return FakeResponse(copy.deepcopy(matched), count)


class FakeBucketApi:
    def __init__(self, storage, bucket):
        self.storage = storage
        self.bucket = bucket

    def upload(self, path, file, file_options=None):
        if self.storage.upload_error:
            raise self.storage.upload_error
        self.storage.files[(self.bucket, path)] = (file, file_options)
        return SimpleNamespace(path=path)

    def create_signed_url(self, path, expires_in):
        return {"signedURL": f"https://test-project.supabase.co/storage/v1/object/sign/{self.bucket}/{path}?ttl={expires_in}"}

    def remove(self, paths):
        for path in paths:
            self.storage.files.pop((self.bucket, path), None)
        return []


class FakeStorage:
    def __init__(self):
        self.buckets = []
        self.created = []
        self.files = {}
        self.list_error = None
        self.create_errors = {}
        self.upload_error = None

    def list_buckets(self):
        if self.list_error:
            raise self.list_error
        return list(self.buckets)

    def create_bucket(self, id, name=None, options=None):
        if id in self.create_errors:
            raise self.create_errors[id]
        self.created.append((id, options))
        self.buckets.append(SimpleNamespace(name=id, public=(options or {}).get("public", False)))
        return {"name": id}

    def from_(self, bucket):
        return FakeBucketApi(self, bucket)


class FakeAuth:
    def __init__(self):
        self.users_by_token = {}
        self.otp_requests = []
        self.signed_out = False

    def get_user(self, jwt=None):
        if jwt not in self.users_by_token:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.users_by_token[jwt])

    def sign_in_with_password(self, credentials):
        if credentials["password"] != "correct-password":
            raise Exception("Invalid login credentials")
        return SimpleNamespace(
            user=SimpleNamespace(id="auth-1", email=credentials["email"]),
            session=SimpleNamespace(access_token="token-from-password"),
        )

    def sign_in_with_otp(self, credentials):
        self.otp_requests.append(credentials)

    def verify_otp(self, params):
        if params["token"] != "123456":
            raise Exception("Token has expired or is invalid")
        return SimpleNamespace(
            user=SimpleNamespace(id="auth-1", email=params["email"]),
            session=SimpleNamespace(access_token="token-from-otp"),
        )

    def sign_out(self):
        self.signed_out = True


class FakeRpc:
    def __init__(self, client, name, params):
        self.client = client
        self.name = name
        self.params = params

    def execute(self):
        self.client.rpc_calls.append((self.name, self.params))
        if self.client.rpc_error:
            raise self.client.rpc_error
        if self.client.on_rpc:
            self.client.on_rpc(self.name, self.params)
        return FakeResponse(None)


class FakeSupabase:
    def __init__(self, tables=None):
        self.tables = copy.deepcopy(tables or {})
        self.errors = {}
        self.queries = []
        self.storage = FakeStorage()
        self.auth = FakeAuth()
        self.rpc_calls = []
        self.rpc_error = None
        self.on_rpc = None

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params=None):
        return FakeRpc(self, name, params)

    def queries_for(self, table):
        return [q for q in self.queries if q.table == table]


def _days(offset):
    return (date.today() + timedelta(days=offset)).isoformat()


TRIPS = [
    {
        "id": "trip-past",
        "title": "Guatemala Coffee Origins",
        "description": "Harvest visits",
        "start_date": _days(-300),
        "end_date": _days(-290),
        "type": "coffee_buying",
        "status": "completed",
        "regions": ["Huehuetenango"],
        "main_clients": ["Blue Bottle"],
        "estimated_cost": 12000,
        "created_by": "user-staff",
        "trip_participants": [{"user_id": "user-staff"}],
    },
    {
        "id": "trip-current",
        "title": "Brazil Cerrado Tour",
        "description": None,
        "start_date": _days(-2),
        "end_date": _days(8),
        "type": "client_visit",
        "status": "in_progress",
        "regions": ["Cerrado Mineiro", "Sul de Minas"],
        "main_clients": ["Nestle", "Starbucks"],
        "estimated_cost": 25000.5,
        "created_by": "user-staff",
        "trip_participants": [{"user_id": "user-staff"}, {"user_id": "user-client"}],
    },
    {
        "id": "trip-upcoming",
        "title": "Colombia Specialty Week",
        "description": None,
        "start_date": _days(60),
        "end_date": _days(60),
        "type": "convention",
        "status": "scheduled",
        "regions": None,
        "main_clients": None,
        "estimated_cost": None,
        "created_by": "user-staff",
        "trip_participants": [],
    },
]


USERS = {
    "GLOBAL_ADMIN": {"id": "auth-admin", "email": "admin@wolthers.com", "profile_id": "user-admin", "role": "GLOBAL_ADMIN"},
    "WOLTHERS_STAFF": {"id": "auth-staff", "email": "staff@wolthers.com", "profile_id": "user-staff", "role": "WOLTHERS_STAFF"},
    "FINANCE_DEPARTMENT": {"id": "auth-fin", "email": "finance@wolthers.com", "profile_id": "user-fin", "role": "FINANCE_DEPARTMENT"},
    "CLIENT": {"id": "auth-client", "email": "buyer@client.com", "profile_id": "user-client", "role": "CLIENT"},
    "DRIVER": {"id": "auth-driver", "email": "driver@wolthers.com", "profile_id": "user-driver", "role": "DRIVER"},
}


@pytest.fixture
def fake_supabase():
    return FakeSupabase({
        "trips": TRIPS,
        "trip_participants": [
            {"id": "tp-1", "trip_id": "trip-current", "user_id": "user-client", "company_id": None,
             "role": "client", "users": {"full_name": "Client Buyer", "email": "buyer@client.com"}},
            {"id": "tp-2", "trip_id": "trip-current", "user_id": "user-staff", "company_id": None,
             "role": "staff", "users": [{"full_name": "Staff Member", "email": "staff@wolthers.com"}]},
        ],
        "companies": [{"id": "c-1", "name": "Wolthers & Associates", "company_type": "exporter"}],
    })


@pytest.fixture
def current_user():
    """Mutable current user; tests switch role with current_user.update(USERS[...])"""
    user = dict(USERS["GLOBAL_ADMIN"])
    return user


@pytest.fixture
def test_settings():
    return Settings(
        supabase_url="https://test-project.supabase.co",
        supabase_key="test-anon-key",
        supabase_service_role_key="test-service-key",
        environment="test",
    )


@pytest.fixture
def client(fake_supabase, current_user, test_settings):
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_service_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_current_user] = lambda: current_user
    app.dependency_overrides[get_health_service] = lambda: HealthService(test_settings, lambda: fake_supabase)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    clear_auth_cache()


@pytest.fixture
def login_as(current_user):
    def _login(role):
        current_user.clear()
        current_user.update(USERS[role])
        return current_user
    return _login
