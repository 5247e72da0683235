"""Domain layer for farmledger.

The ledger model, calculators, report builders and projection engine are
pure modules; the services (account, journal, journal_import, roles,
payroll, reporting) wrap them around a Database. Services are imported
from their modules directly so that the database layer can import the
entities without pulling the services in.
"""
