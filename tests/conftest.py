import pytest
from sqlalchemy import select
from typing import Generator
from clinic import models
from clinic.database import StorageGateway


@pytest.fixture(scope="function")
def database_url(tmp_path) -> str:
    """File-backed SQLite database, fresh for every test."""
    return f"sqlite:///{tmp_path / 'clinic.db'}"


@pytest.fixture(scope="function")
def gateway(database_url) -> Generator[StorageGateway, None, None]:
    """Open a gateway on the test database with both tables created."""
    gateway = StorageGateway.connect(database_url)
    gateway.create_schema()

    yield gateway

    gateway.close()


@pytest.fixture
def doctor_id(gateway) -> int:
    gateway.execute(
        "INSERT INTO doctors (name, specialization) VALUES (:name, :specialization)",
        {"name": "Dr. Lee", "specialization": "Cardiology"},
    )
    rows = gateway.query(select(models.Doctor.doctor_id))
    return rows[0]["doctor_id"]


@pytest.fixture
def patient_count(gateway):
    """Callable returning the number of stored patient rows."""
    def count() -> int:
        return len(gateway.query("SELECT patient_id FROM patients"))
    return count
