"""Admissions workflow: applicant-to-student status engine, access policy and route guard"""

__version__ = "1.0.0"
