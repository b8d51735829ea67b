"""
ClinicBook: clinic appointment booking backend

Public booking and admin APIs over a shared MongoDB store, built around
doctor shift windows, daily capacity limits and duplicate-booking checks.
"""

__version__ = "0.1.0"
__author__ = "ClinicBook Team"
__description__ = "Clinic appointment booking backend"
