"""Payroll Portal package.

Teams enter monthly payroll rows for their own team; an administrator reviews
and exports every team's rows for a period. The package is organized by
feature modules (auth, payroll, documents, export, ...) with a thin Flask
controller layer over service and repository layers.
"""
