"""
Brood Test Suite
================

Test Organization
-----------------
- tests/unit/          : Engines, domain models, config, logging, ledger, GameService
                         over the in-memory store, CLI
- tests/integration/   : SqlGameStore and DatabaseService on a SQLite file
- tests/helpers.py     : Scripted random source, fixed clock, in-memory store

Testing Philosophy
------------------
- Unit tests: Fast, isolated, test game rules
- Integration tests: Slower, test real database interactions
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""
