"""Root pytest configuration for all tests."""

import logging

# atlassian-python-api logs expected "not found" lookups at ERROR level
logging.getLogger("atlassian").setLevel(logging.WARNING)
