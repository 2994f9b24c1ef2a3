from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Doctor(Base):
    __tablename__ = "doctors"
    __table_args__ = {"sqlite_autoincrement": True}

    doctor_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String)
    specialization = Column(String)


class Patient(Base):
    __tablename__ = "patients"
    __table_args__ = {"sqlite_autoincrement": True}

    patient_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String)
    age = Column(Integer)
    gender = Column(String)
    diagnosis = Column(String)
    doctor_id = Column(Integer, ForeignKey("doctors.doctor_id"))
    admission_date = Column(Date)
    discharge_date = Column(Date)
