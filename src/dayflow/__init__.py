"""Dayflow: attendance, leave and payroll tracking.

The package is organized by feature modules (employees, attendance, leaves, payroll)
with a thin Flask controller layer over service/repository layers.
"""
