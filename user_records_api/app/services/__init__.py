"""
Service layer abstraction.

Services hold the business logic and talk to the injected store, so
API handlers stay free of SQL.
"""
