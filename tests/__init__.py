"""
Centralized test suite for YEA Poultry Management System.

Test Organization:
- integration/ - API integration tests (formerly root-level test_*.py files)
- scripts/ - Utility test scripts (formerly test-scripts/)
- App-specific tests remain in their respective app directories (e.g., accounts/tests.py)
"""
