# SPDX-License-Identifier: Apache-2.0

"""Errors raised by the BDD driver.

Resolution and target-selection errors are raised before any call reaches
the network. Transport errors carry the status group and code used by the
retry classification.
"""


class BDDError(Exception):
    """Base class of every error raised by hfbdd."""


class ConfigError(BDDError):
    pass


class UnsupportedKindError(BDDError):
    """Raised for a configuration value of an unknown kind,
    e.g. a chaincode deploy-path type other than "test" or "system".
    """

    def __init__(self, kind, value):
        super(UnsupportedKindError, self).__init__(
            'unsupported {}: [{}]'.format(kind, value))
        self.kind = kind
        self.value = value


class UnresolvedVariableError(BDDError):

    def __init__(self, name):
        super(UnresolvedVariableError, self).__init__(
            'variable [{}] is not set'.format(name))
        self.name = name


class IndexOutOfRangeError(BDDError):

    def __init__(self, name, index, size):
        super(IndexOutOfRangeError, self).__init__(
            'index [{}] out of range for variable [{}] with {} item(s)'
            .format(index, name, size))
        self.name = name
        self.index = index
        self.size = size


class NoTargetsError(BDDError):
    pass


class TargetNotFoundError(BDDError):

    def __init__(self, peer_id):
        super(TargetNotFoundError, self).__init__(
            'peer [{}] not found'.format(peer_id))
        self.peer_id = peer_id


class TransportError(BDDError):
    """An error returned by the network-call boundary.

    :param group: status group the code belongs to, see hfbdd.fabric.retry
    :param code: integer status code within the group
    :param message: error message reported by the node or client
    """

    def __init__(self, group, code, message=''):
        super(TransportError, self).__init__(
            '{} code {}: {}'.format(group, code, message))
        self.group = group
        self.code = code
        self.message = message

    def classified(self, cls):
        """Return a copy of this error as the given TransportError subclass"""
        return cls(self.group, self.code, self.message)


class RetryableTransportError(TransportError):
    pass


class TerminalTransportError(TransportError):
    pass


class InvocationError(BDDError):
    """Wraps a failed call with the context it was issued in."""

    def __init__(self, operation, chaincode_id, channel_id, fcn, cause):
        super(InvocationError, self).__init__(
            '{} chaincode [{}] function [{}] on channel [{}] returned error:'
            ' {}'.format(operation, chaincode_id, fcn, channel_id, cause))
        self.operation = operation
        self.chaincode_id = chaincode_id
        self.channel_id = channel_id
        self.fcn = fcn
        self.cause = cause


class AllTargetsFailedError(InvocationError):
    """Raised by sequential dispatch when at least one target failed.

    first_cause is the first error observed, in target order.
    """

    def __init__(self, operation, chaincode_id, channel_id, fcn,
                 first_cause, errors=None):
        super(AllTargetsFailedError, self).__init__(
            operation, chaincode_id, channel_id, fcn, first_cause)
        self.first_cause = first_cause
        self.errors = list(errors or [first_cause])


class PolicyParseError(BDDError):

    def __init__(self, expression, reason):
        super(PolicyParseError, self).__init__(
            'invalid endorsement policy [{}]: {}'.format(expression, reason))
        self.expression = expression


class WarmUpError(BDDError):
    pass


class ResponseMismatchError(BDDError, AssertionError):
    pass


class StepNotFoundError(BDDError):

    def __init__(self, text):
        super(StepNotFoundError, self).__init__(
            'no step matches [{}]'.format(text))
        self.text = text
