pytest_plugins = ["huborg.testing.conftest"]
