import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from sqlalchemy import insert, select
from sqlalchemy.engine import RowMapping

from . import models
from .database import StorageGateway
from .errors import QueryError
from .validators import (
    Invalid,
    check_date_order,
    doctor_exists,
    parse_date,
    parse_integer,
    parse_positive_integer,
)

logger = logging.getLogger('clinic')

PATIENT_RULE = "-" * 98
DOCTOR_RULE = "-" * 42
PATIENT_ROW = "| {:<5} | {:<20} | {:<3} | {:<6} | {:<20} | {:<20} | {:<12} | {:<12} |"
DOCTOR_ROW = "| {:<5} | {:<20} | {:<15} |"


@dataclass(frozen=True)
class Outcome:
    success: bool
    message: str


# ------------------------------------------
# Add a doctor
# ------------------------------------------
def add_doctor(gateway: StorageGateway, name: str, specialization: str) -> Outcome:
    """Insert a doctor. Both fields are free text; empty strings are stored as given."""
    statement = insert(models.Doctor).values(name=name, specialization=specialization)
    try:
        rows = gateway.execute(statement)
    except QueryError as e:
        return Outcome(False, f"Error adding doctor: {str(e)}")

    if rows > 0:
        logger.info(f"Doctor added: {name!r}")
        return Outcome(True, "Doctor added successfully.")
    return Outcome(False, "Error adding doctor: no row was written")


# ------------------------------------------
# Add a patient
# ------------------------------------------
def add_patient(
    gateway: StorageGateway,
    name: str,
    age_text: str,
    gender: str,
    diagnosis: str,
    doctor_id_text: str,
    admission_text: str,
    discharge_text: str,
) -> Outcome:
    """
    Validate every field, then insert the patient as a single statement.

    Checks run in a fixed order (age, doctor id, doctor existence, admission,
    discharge, date order) and the first failure is reported without writing
    anything.
    """
    age = parse_positive_integer(age_text, "age")
    if isinstance(age, Invalid):
        return _rejected(age)

    doctor_id = parse_integer(doctor_id_text, "doctor ID")
    if isinstance(doctor_id, Invalid):
        return _rejected(doctor_id)

    try:
        if not doctor_exists(gateway, doctor_id):
            return _rejected(Invalid("doctor ID", f"Doctor with ID {doctor_id} does not exist."))
    except QueryError as e:
        return Outcome(False, f"Error adding patient: {str(e)}")

    admission = parse_date(admission_text, "admission date")
    if isinstance(admission, Invalid):
        return _rejected(admission)

    discharge = parse_date(discharge_text, "discharge date")
    if isinstance(discharge, Invalid):
        return _rejected(discharge)

    out_of_order = check_date_order(admission, discharge)
    if out_of_order is not None:
        return _rejected(out_of_order)

    statement = insert(models.Patient).values(
        name=name,
        age=age,
        gender=gender,
        diagnosis=diagnosis,
        doctor_id=doctor_id,
        admission_date=admission,
        discharge_date=discharge,
    )
    try:
        rows = gateway.execute(statement)
    except QueryError as e:
        return Outcome(False, f"Error adding patient: {str(e)}")

    if rows > 0:
        logger.info(f"Patient added: {name!r} under doctor {doctor_id}")
        return Outcome(True, "Patient added successfully.")
    return Outcome(False, "Error adding patient: no row was written")


def _rejected(invalid: Invalid) -> Outcome:
    logger.info(f"Rejected {invalid.field}: {invalid.reason}")
    return Outcome(False, invalid.reason)


# ------------------------------------------
# Listings
# ------------------------------------------
def list_doctors(gateway: StorageGateway) -> List[RowMapping]:
    statement = select(
        models.Doctor.doctor_id,
        models.Doctor.name,
        models.Doctor.specialization,
    ).order_by(models.Doctor.doctor_id)
    return gateway.query(statement)


def list_patients(gateway: StorageGateway) -> List[RowMapping]:
    """All patients with their doctor's name; patients without a doctor get ``None``."""
    statement = (
        select(
            models.Patient.patient_id,
            models.Patient.name,
            models.Patient.age,
            models.Patient.gender,
            models.Patient.diagnosis,
            models.Doctor.name.label("doctor_name"),
            models.Patient.admission_date,
            models.Patient.discharge_date,
        )
        .select_from(models.Patient)
        .outerjoin(models.Doctor, models.Patient.doctor_id == models.Doctor.doctor_id)
        .order_by(models.Patient.patient_id)
    )
    return gateway.query(statement)


def _cells(values: Iterable) -> Sequence[str]:
    return ["" if value is None else str(value) for value in values]


def format_doctor_table(rows: Iterable[RowMapping]) -> str:
    lines = ["", "Doctor Details:", DOCTOR_RULE]
    lines.append(DOCTOR_ROW.format("ID", "Name", "Specialization"))
    lines.append(DOCTOR_RULE)
    for row in rows:
        lines.append(DOCTOR_ROW.format(*_cells(
            (row["doctor_id"], row["name"], row["specialization"])
        )))
    lines.append(DOCTOR_RULE)
    return "\n".join(lines)


def format_patient_table(rows: Iterable[RowMapping]) -> str:
    lines = ["", "Patient Details:", PATIENT_RULE]
    lines.append(PATIENT_ROW.format(
        "ID", "Name", "Age", "Gender", "Diagnosis", "Doctor", "Admission", "Discharge"
    ))
    lines.append(PATIENT_RULE)
    for row in rows:
        lines.append(PATIENT_ROW.format(*_cells((
            row["patient_id"],
            row["name"],
            row["age"],
            row["gender"],
            row["diagnosis"],
            row["doctor_name"],
            row["admission_date"],
            row["discharge_date"],
        ))))
    lines.append(PATIENT_RULE)
    return "\n".join(lines)
