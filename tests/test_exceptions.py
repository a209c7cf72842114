import pickle

import pytest

from modelmatch.exceptions import (
    MethodNotFoundError,
    ModelMatchException,
    ModelMatchExceptionWithMessage,
    ObjectNotFoundError,
    ValidationError,
)


def test_pickling_of_exceptions():
    exc = ObjectNotFoundError("foo")

    pickled_exc = pickle.dumps(exc)
    unpickled_exc = pickle.loads(pickled_exc)

    assert exc.args[0] == unpickled_exc.args[0]


def test_pickling_of_exceptions_with_messages():
    exc = ValidationError({"limit": ["Not a valid integer."]})

    unpickled_exc = pickle.loads(pickle.dumps(exc))

    assert type(unpickled_exc) is ValidationError
    assert unpickled_exc.messages == {"limit": ["Not a valid integer."]}


class TestModelMatchException:
    @pytest.fixture
    def exception_instance(self):
        return ModelMatchException("An error occurred")

    def test_exception_initialization(self, exception_instance):
        assert exception_instance.args[0] == "An error occurred"
        assert exception_instance.extra_info is None

    def test_exception_with_extra_info(self):
        exception_instance = ModelMatchException(
            "An error occurred", extra_info="Extra info"
        )
        assert exception_instance.extra_info == "Extra info"

    def test_exception_no_args(self):
        assert ModelMatchException().args == ()

    def test_subclasses_share_the_base(self):
        assert issubclass(MethodNotFoundError, ModelMatchException)


class TestModelMatchExceptionWithMessage:
    def test_exception_initialization(self):
        messages = {"error": "An error occurred"}
        exception_instance = ModelMatchExceptionWithMessage(messages)

        assert exception_instance.messages == {"error": "An error occurred"}

    def test_exception_str(self):
        exception_instance = ModelMatchExceptionWithMessage(
            {"error": "An error occurred"}
        )

        assert str(exception_instance) == "{'error': 'An error occurred'}"
