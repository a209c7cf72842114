"""
Custom modelmatch exception classes
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class ModelMatchException(Exception):
    """Base class for all Exceptions raised within modelmatch"""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args)

        self.extra_info = kwargs.get("extra_info", None)

    def __reduce__(self) -> tuple[Any, tuple[Any]]:
        return (self.__class__, (self.args[0],))


class ModelMatchExceptionWithMessage(ModelMatchException):
    def __init__(self, messages: dict[str, Any], **kwargs: Any) -> None:
        logger.debug(f"Exception:: {messages}")

        self.messages = messages

        super().__init__(**kwargs)

    def __str__(self) -> str:
        return f"{dict(self.messages)}"

    def __reduce__(self) -> tuple[Any, tuple[Any]]:
        return (self.__class__, (self.messages,))


class ConfigurationError(ModelMatchException):
    """Improper Configuration encountered like:
    * An unknown value for a configuration key
    * A missing configuration file
    * Nested attributes declared for an unknown association
    """


class IncorrectUsageError(ModelMatchException):
    """Usage of a model or matcher violates its contract"""


class ObjectNotFoundError(ModelMatchException):
    """Nested attributes referred to a child record that is not associated"""


class TooManyRecordsError(ModelMatchException):
    """More nested records were supplied than the declared `limit` allows"""


class MethodNotFoundError(ModelMatchException):
    """A method reference could not be resolved to a public method on the subject"""


class ValidationError(ModelMatchExceptionWithMessage):
    """Raised when nested attributes options fail validation.

    :param messages: A dictionary of error messages where key is the option
        name and value is a list of errors
    """
