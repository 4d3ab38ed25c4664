"""
Sources Test Configuration
"""


def pytest_configure(config):
    """
    Configure pytest with custom markers for sources tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")
