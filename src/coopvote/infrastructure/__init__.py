"""Infrastructure layer — database schema, engine, migrations, ledger.

This layer depends on stdlib and third-party libs (SQLAlchemy, Alembic).
It must never import from domain, services, commands, or output.
The service layer bridges between domain records and infrastructure.
"""
