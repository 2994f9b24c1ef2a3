import re
import sys
from typing import Callable, Optional, TextIO

from . import records
from .database import StorageGateway
from .errors import QueryError

MENU = """
Hospital Management System
1. Add Patient
2. Add Doctor
3. View All Patients
4. View All Doctors
5. Exit"""

EXIT_CHOICE = 5
_CHOICE = re.compile(r"[0-9]{1,9}")

PATIENT_PROMPTS = (
    "Enter Patient Name: ",
    "Enter Patient Age: ",
    "Enter Patient Gender: ",
    "Enter Diagnosis: ",
    "Enter Doctor ID for the patient: ",
    "Enter Admission Date (yyyy-mm-dd): ",
    "Enter Discharge Date (yyyy-mm-dd): ",
)

DOCTOR_PROMPTS = (
    "Enter Doctor Name: ",
    "Enter Specialization: ",
)


class EndOfInput(Exception):
    """The operator closed standard input."""


class Console:
    """
    Menu loop over a :class:`StorageGateway`.

    ``input_func`` and ``output`` default to the terminal and are replaced
    with scripted input and a buffer in tests.
    """

    def __init__(
        self,
        gateway: StorageGateway,
        input_func: Optional[Callable[[str], str]] = None,
        output: Optional[TextIO] = None,
    ):
        self.gateway = gateway
        self.input_func = input_func if input_func is not None else input
        self.output = output if output is not None else sys.stdout
        self.actions = {
            1: self.add_patient,
            2: self.add_doctor,
            3: self.view_patients,
            4: self.view_doctors,
        }

    def say(self, message: str) -> None:
        print(message, file=self.output)

    def ask(self, prompt: str) -> str:
        try:
            return self.input_func(prompt)
        except EOFError:
            raise EndOfInput() from None

    def run(self) -> None:
        while True:
            self.say(MENU)
            try:
                raw = self.ask("Choose an option: ")
            except EndOfInput:
                self.say("Exiting system...")
                return

            raw = raw.strip()
            if not _CHOICE.fullmatch(raw):
                self.say("Please enter a valid number (1-5)")
                continue
            choice = int(raw)

            if choice == EXIT_CHOICE:
                self.say("Exiting system...")
                return

            action = self.actions.get(choice)
            if action is None:
                self.say("Invalid option. Try again.")
                continue

            try:
                action()
            except EndOfInput:
                self.say("Exiting system...")
                return

    def add_patient(self) -> None:
        answers = [self.ask(prompt) for prompt in PATIENT_PROMPTS]
        outcome = records.add_patient(self.gateway, *answers)
        self.say(outcome.message)

    def add_doctor(self) -> None:
        name, specialization = [self.ask(prompt) for prompt in DOCTOR_PROMPTS]
        outcome = records.add_doctor(self.gateway, name, specialization)
        self.say(outcome.message)

    def view_patients(self) -> None:
        try:
            rows = records.list_patients(self.gateway)
        except QueryError as e:
            self.say(f"Error fetching patient details: {str(e)}")
            return
        self.say(records.format_patient_table(rows))

    def view_doctors(self) -> None:
        try:
            rows = records.list_doctors(self.gateway)
        except QueryError as e:
            self.say(f"Error fetching doctor details: {str(e)}")
            return
        self.say(records.format_doctor_table(rows))
