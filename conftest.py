import pytest


def pytest_addoption(parser):
    group = parser.getgroup("bundlediff")
    group.addoption("--quick", action="store_true", default=False,
                    help="skip tests that use the slow fixture")
    group.addoption("--slow", action="store_true", default=False,
                    help="only run tests that use the slow fixture")


def pytest_collection_modifyitems(config, items):
    quick = config.getoption("--quick")
    only_slow = config.getoption("--slow")
    if not (quick or only_slow):
        return
    for item in items:
        is_slow = 'slow' in item.fixturenames
        if quick and is_slow:
            item.add_marker(pytest.mark.skip(reason="skipping slow test"))
        elif only_slow and not is_slow:
            item.add_marker(pytest.mark.skip(reason="only running slow tests"))
