"""Console record keeping for a small clinic: doctors, patients and their listings."""

__version__ = "1.0.0"
