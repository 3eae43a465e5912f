"""Employee management package.

Organized by feature modules (attendance, leaves, payroll, ...) with a thin
Flask controller layer over service and repository layers.
"""
