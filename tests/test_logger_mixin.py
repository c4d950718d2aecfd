import logging

import pytest

from arealink.core.base import _LoggerMixin


class Component(_LoggerMixin):
    pass


@pytest.fixture
def parent_handler():
    parent_logger = logging.getLogger("arealink.isolated")
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    parent_logger.addHandler(handler)
    yield handler
    parent_logger.removeHandler(handler)


def test_each_instance_gets_its_own_child_logger():
    first, second = Component(), Component()

    assert first.logger.name.startswith("arealink.Component.")
    assert first.logger is not second.logger
    assert repr(first) == f"<Component unique_name={first.unique_name}>"


def test_prefix_replaces_class_name():
    assert Component("hub").unique_name.startswith("hub.")


def test_set_logger_to_level_copies_nearest_handlers(parent_handler: logging.Handler):
    component = Component("isolated")

    component.set_logger_to_level("DEBUG")

    assert component.logger.level == logging.DEBUG
    assert component.logger.propagate is False
    assert len(component.logger.handlers) == 1
    copied = component.logger.handlers[0]
    assert copied is not parent_handler
    assert copied.level == logging.DEBUG
    assert parent_handler.level == logging.INFO


def test_set_logger_to_level_twice_does_not_duplicate_handlers(parent_handler: logging.Handler):
    component = Component("isolated")

    component.set_logger_to_level("DEBUG")
    component.set_logger_to_level("WARNING")

    assert component.logger.level == logging.WARNING
    assert len(component.logger.handlers) == 1
