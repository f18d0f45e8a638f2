from typing import Any


class UnsupportedOperationError(NotImplementedError):
    """ Raised when the operation queue contains an operation that cannot be compiled """

    def __init__(self, operation: Any):
        super(UnsupportedOperationError, self).__init__(
            f'Operation {type(operation).__name__} is not supported: {operation!r}'
        )
        self.__operation = operation

    @property
    def operation(self):
        return self.__operation


class InvalidSourceError(TypeError):
    """ Raised when a data source is constructed from an object of the wrong kind """


class InvalidLimitError(ValueError):
    """ Raised when the result-size limit is not a non-negative integer """


class SourceBusyError(RuntimeError):
    """ Raised when a single-consumer source is iterated while another iteration is still active """


class SourceDepletedError(RuntimeError):
    """ Raised when a single-pass source is iterated again after its only pass """


class DataConversionError(RuntimeError):
    """ Raised when the data conversion fails """
