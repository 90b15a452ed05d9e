"""Models, policies and repositories used by the tests."""
