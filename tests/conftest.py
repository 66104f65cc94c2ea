"""
Test configuration and shared fixtures for the transactions service test suite.
"""
import pytest
import pytest_asyncio
import os
from copy import deepcopy
from typing import Any, AsyncGenerator, Dict, Iterable, List
import httpx
from httpx import AsyncClient
from faker import Faker

# Set test environment before importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
if os.path.exists(".env.test"):
    from dotenv import load_dotenv
    load_dotenv(".env.test")

from app.main import create_application
from app.core.config import Settings
from app.api.dependencies import get_transaction_store
from app.db.store import (
    TRANSACTION_COLUMNS,
    TRANSACTION_RELATIONS,
    StorageError,
    TransactionStore,
    full_replacement,
)


# Configure Faker for consistent test data
fake = Faker()
fake.seed_instance(42)  # For reproducible test data


# ============================================================================
# In-memory storage collaborator
# ============================================================================

class FakeTransactionStore(TransactionStore):
    """Behaves like the hosted transactions table for the calls the service makes.

    Ids are assigned on insert, equality filters compare the id as text the way
    PostgREST receives it from a URL, NOT NULL columns reject missing values,
    and the enriched read resolves foreign keys from the related tables.
    """

    def __init__(self, not_null: Iterable[str] = TRANSACTION_COLUMNS):
        self.not_null = tuple(not_null)
        self.rows: List[Dict[str, Any]] = []
        self.related: Dict[str, Dict[int, Dict[str, Any]]] = {
            table: {} for table, _ in TRANSACTION_RELATIONS.values()
        }
        self.calls: List[str] = []
        self.fail_with: str = None
        self._next_id = 1

    def add_related(self, table: str, record: Dict[str, Any]) -> None:
        self.related[table][record["id"]] = record

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with:
            raise StorageError(self.fail_with)

    def _validate(self, row: Dict[str, Any]) -> None:
        if not isinstance(row, dict):
            raise StorageError("Could not parse request body as a row")
        unknown = set(row) - set(TRANSACTION_COLUMNS) - {"id"}
        if unknown:
            column = sorted(unknown)[0]
            raise StorageError(
                f"Could not find the '{column}' column of 'transactions' in the schema cache"
            )
        for column in self.not_null:
            if row.get(column) is None:
                raise StorageError(
                    f'null value in column "{column}" of relation "transactions" '
                    f"violates not-null constraint"
                )

    def _matching(self, transaction_id: str) -> List[Dict[str, Any]]:
        return [row for row in self.rows if str(row["id"]) == str(transaction_id)]

    async def fetch_one(self, transaction_id: str) -> List[Dict[str, Any]]:
        self._check("fetch_one")
        return deepcopy(self._matching(transaction_id))

    async def fetch_all_enriched(self) -> List[Dict[str, Any]]:
        self._check("fetch_all_enriched")
        enriched = []
        for row in self.rows:
            item = deepcopy(row)
            for column, (table, display) in TRANSACTION_RELATIONS.items():
                record = self.related[table].get(row.get(column))
                item[column] = (
                    {"id": record["id"], display: record[display]} if record else None
                )
            enriched.append(item)
        return enriched

    async def insert(self, transaction: Dict[str, Any]) -> None:
        self._check("insert")
        self._validate(transaction)
        row = dict(transaction)
        row["id"] = self._next_id
        self._next_id += 1
        self.rows.append(row)

    async def replace(self, transaction_id: str, transaction: Dict[str, Any]) -> None:
        self._check("replace")
        replacement = full_replacement(transaction)
        self._validate(replacement)
        for row in self._matching(transaction_id):
            row_id = row["id"]
            row.clear()
            row.update(replacement)
            row["id"] = row_id

    async def delete(self, transaction_id: str) -> None:
        self._check("delete")
        self.rows = [row for row in self.rows if str(row["id"]) != str(transaction_id)]


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at an unreachable storage endpoint."""
    return Settings(
        URL="",
        ANON_KEY="",
        ENVIRONMENT="test",
        LOG_FORMAT="console",
        _env_file=None,
    )


@pytest.fixture
def fake_store() -> FakeTransactionStore:
    """Empty transactions table with NOT NULL on every column."""
    return FakeTransactionStore()


@pytest.fixture
def seeded_related(fake_store: FakeTransactionStore) -> FakeTransactionStore:
    """Related tables populated with one record per id used by the data generator."""
    for table, display in TRANSACTION_RELATIONS.values():
        for record_id in (1, 2, 3):
            value = fake.user_name() if display == "username" else fake.company()
            fake_store.add_related(table, {"id": record_id, display: value})
    return fake_store


@pytest_asyncio.fixture(scope="function")
async def client(
    test_settings: Settings,
    fake_store: FakeTransactionStore
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with the storage dependency overridden."""
    app = create_application(test_settings)

    # Override storage dependency
    app.dependency_overrides[get_transaction_store] = lambda: fake_store

    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()


# ============================================================================
# Data Generator Fixtures
# ============================================================================

@pytest.fixture
def transaction_data_generator():
    """Generate synthetic transaction data."""
    def generate_transaction(**overrides):
        dpp = fake.random_int(min=100_000, max=10_000_000)
        ppn = round(dpp * 0.11, 2)
        pph = round(dpp * 0.02, 2)
        total = round(dpp + ppn - pph, 2)

        defaults = {
            "account_id": fake.random_int(min=1, max=3),
            "customer_id": fake.random_int(min=1, max=3),
            "purchase_order": fake.bothify("PO-####-??").upper(),
            "tax": fake.bothify("FP-###.###-##.########"),
            "segment_id": fake.random_int(min=1, max=3),
            "supplier_id": fake.random_int(min=1, max=3),
            "reference": fake.bothify("REF-######"),
            "description": fake.sentence(nb_words=6),
            "dpp": dpp,
            "ppn": ppn,
            "pph": pph,
            "total": total,
            "debit": total,
            "credit": 0,
            "remarks": fake.text(max_nb_chars=80),
            "created_by_user_id": fake.random_int(min=1, max=3),
        }
        defaults.update(overrides)
        return defaults

    return generate_transaction


@pytest_asyncio.fixture
async def sample_transaction(
    fake_store: FakeTransactionStore,
    transaction_data_generator
) -> Dict[str, Any]:
    """Persist one transaction and return the stored row."""
    await fake_store.insert(transaction_data_generator())
    fake_store.calls.clear()
    return deepcopy(fake_store.rows[-1])
