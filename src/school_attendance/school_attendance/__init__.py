"""School attendance package.

Feature modules (students, attendance, backups, ...) each carry a model, a
repository protocol with its SQLite implementation, a service and a thin Flask
controller. All data lives in one local SQLite file.
"""
