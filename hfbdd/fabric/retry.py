# SPDX-License-Identifier: Apache-2.0

"""Retry classification and backoff for calls to the network.

Errors coming back from the network carry a status group (where the error
came from) and a code within that group. A RetryCodeTable lists, per group,
the codes considered transient; everything else fails the call at once.
"""
import asyncio
import logging

import grpc

from hfbdd.config.default import DEFAULT
from hfbdd.errors import RetryableTransportError, TerminalTransportError, \
    TransportError

_logger = logging.getLogger(__name__)

# status groups
UNKNOWN_STATUS = 'UnknownStatus'
TRANSPORT_STATUS = 'TransportStatus'
GRPC_TRANSPORT_STATUS = 'GRPCTransportStatus'
HTTP_TRANSPORT_STATUS = 'HTTPTransportStatus'
ENDORSER_SERVER_STATUS = 'EndorserServerStatus'
EVENT_SERVER_STATUS = 'EventServerStatus'
CHAINCODE_STATUS = 'ChaincodeStatus'
SIGNATURE_STATUS = 'SignatureStatus'
MSP_STATUS = 'MSPStatus'
ORDERER_CLIENT_STATUS = 'OrdererClientStatus'
ORDERER_SERVER_STATUS = 'OrdererServerStatus'
CLIENT_STATUS = 'ClientStatus'
ENDORSER_CLIENT_STATUS = 'EndorserClientStatus'

# client side codes
OK = 0
UNKNOWN = 1
CONNECTION_FAILED = 2
ENDORSEMENT_MISMATCH = 3
EMPTY_CERT = 4
TIMEOUT = 5
NO_PEERS_FOUND = 6
MULTIPLE_ERRORS_OCCURRED = 7
SIGNATURE_VERIFICATION_FAILED = 8
MISSING_ENDORSEMENT = 9
QUERY_ENDORSERS = 11
GENERIC_TRANSIENT = 12
PREMATURE_CHAINCODE_EXECUTION = 21
CHAINCODE_ALREADY_LAUNCHING = 22
CHAINCODE_NAME_NOT_FOUND = 23

# server side common.Status codes
BAD_REQUEST = 400
INTERNAL_SERVER_ERROR = 500
SERVICE_UNAVAILABLE = 503

# transaction validation codes
DUPLICATE_TXID = 9
ENDORSEMENT_POLICY_FAILURE = 10
MVCC_READ_CONFLICT = 11
PHANTOM_READ_CONFLICT = 12

GRPC_UNAVAILABLE = grpc.StatusCode.UNAVAILABLE.value[0]


def grpc_code(status_code):
    """Integer value of a grpc.StatusCode"""
    return status_code.value[0]


class RetryCodeTable(object):
    """Error group -> set of codes considered transient for that group."""

    def __init__(self, codes=None):
        self._codes = dict()
        for group, group_codes in (codes or {}).items():
            for code in group_codes:
                self.add(group, code)

    def add(self, group, code):
        """Mark code as retryable for group. Adding it twice is a no-op."""
        self._codes.setdefault(group, set()).add(int(code))

    def is_retryable(self, group, code):
        return code in self._codes.get(group, ())

    def codes(self, group):
        return frozenset(self._codes.get(group, ()))

    def groups(self):
        return list(self._codes)

    def copy(self):
        return RetryCodeTable(self._codes)

    def compose(self, additions):
        """Return a new table with every (group, code) pair of additions
        added to this one. This table is left unchanged.
        """
        table = self.copy()
        for group, code in additions:
            table.add(group, code)
        return table

    def classify(self, err):
        """Return err as a RetryableTransportError or TerminalTransportError"""
        if self.is_retryable(err.group, err.code):
            return err.classified(RetryableTransportError)
        return err.classified(TerminalTransportError)

    def as_dict(self):
        return {group: set(codes) for group, codes in self._codes.items()}

    def __eq__(self, other):
        return isinstance(other, RetryCodeTable) and \
            self.as_dict() == other.as_dict()

    def __repr__(self):
        return 'RetryCodeTable({})'.format(
            {g: sorted(c) for g, c in self._codes.items()})


DEFAULT_RETRYABLE_CODES = RetryCodeTable({
    ENDORSER_CLIENT_STATUS: [ENDORSEMENT_MISMATCH,
                             PREMATURE_CHAINCODE_EXECUTION],
    ENDORSER_SERVER_STATUS: [SERVICE_UNAVAILABLE, INTERNAL_SERVER_ERROR],
    ORDERER_SERVER_STATUS: [SERVICE_UNAVAILABLE, INTERNAL_SERVER_ERROR,
                            BAD_REQUEST],
    EVENT_SERVER_STATUS: [DUPLICATE_TXID, ENDORSEMENT_POLICY_FAILURE,
                          MVCC_READ_CONFLICT, PHANTOM_READ_CONFLICT],
    GRPC_TRANSPORT_STATUS: [GRPC_UNAVAILABLE],
})

CHANNEL_CLIENT_RETRYABLE_CODES = RetryCodeTable({
    ENDORSER_CLIENT_STATUS: [CONNECTION_FAILED, ENDORSEMENT_MISMATCH,
                             CHAINCODE_NAME_NOT_FOUND],
    ENDORSER_SERVER_STATUS: [SERVICE_UNAVAILABLE, INTERNAL_SERVER_ERROR],
    ORDERER_CLIENT_STATUS: [CONNECTION_FAILED],
    ORDERER_SERVER_STATUS: [SERVICE_UNAVAILABLE, INTERNAL_SERVER_ERROR,
                            BAD_REQUEST],
    EVENT_SERVER_STATUS: [DUPLICATE_TXID, ENDORSEMENT_POLICY_FAILURE,
                          MVCC_READ_CONFLICT, PHANTOM_READ_CONFLICT],
    GRPC_TRANSPORT_STATUS: [GRPC_UNAVAILABLE],
})

RESMGMT_DEFAULT_RETRYABLE_CODES = RetryCodeTable({
    ENDORSER_CLIENT_STATUS: [CONNECTION_FAILED, ENDORSEMENT_MISMATCH,
                             CHAINCODE_ALREADY_LAUNCHING,
                             PREMATURE_CHAINCODE_EXECUTION],
    ENDORSER_SERVER_STATUS: [SERVICE_UNAVAILABLE, INTERNAL_SERVER_ERROR],
    ORDERER_CLIENT_STATUS: [CONNECTION_FAILED],
    ORDERER_SERVER_STATUS: [SERVICE_UNAVAILABLE, INTERNAL_SERVER_ERROR,
                            BAD_REQUEST],
    EVENT_SERVER_STATUS: [DUPLICATE_TXID, ENDORSEMENT_POLICY_FAILURE,
                          MVCC_READ_CONFLICT, PHANTOM_READ_CONFLICT],
    GRPC_TRANSPORT_STATUS: [GRPC_UNAVAILABLE],
})


class RetryOpts(object):
    """The effective retry policy of a call.

    :param attempts: number of retries after the first call
    :param initial_backoff: seconds to wait before the first retry
    :param max_backoff: upper bound of the wait between retries
    :param backoff_factor: growth factor of the wait after each retry
    :param retryable_codes: RetryCodeTable of transient errors
    """

    def __init__(self, attempts=DEFAULT['RETRY_ATTEMPTS'],
                 initial_backoff=DEFAULT['RETRY_INITIAL_BACKOFF'],
                 max_backoff=DEFAULT['RETRY_MAX_BACKOFF'],
                 backoff_factor=DEFAULT['RETRY_BACKOFF_FACTOR'],
                 retryable_codes=None):
        self.attempts = attempts
        self.initial_backoff = initial_backoff
        self.max_backoff = max_backoff
        self.backoff_factor = backoff_factor
        if retryable_codes is None:
            retryable_codes = DEFAULT_RETRYABLE_CODES
        self.retryable_codes = retryable_codes

    def with_codes(self, retryable_codes):
        return RetryOpts(self.attempts, self.initial_backoff,
                         self.max_backoff, self.backoff_factor,
                         retryable_codes)

    def backoff(self, retry):
        """Seconds to wait before the given (zero-based) retry"""
        return min(self.initial_backoff * self.backoff_factor ** retry,
                   self.max_backoff)


def channel_client_opts(config, additions=()):
    """Retry policy for chaincode calls: the channel client codes composed
    with the scenario-specific additions.

    :param config: config dict, see hfbdd.config.default
    :param additions: iterable of (group, code)
    :return: RetryOpts
    """
    return RetryOpts(config['RETRY_ATTEMPTS'],
                     config['RETRY_INITIAL_BACKOFF'],
                     config['RETRY_MAX_BACKOFF'],
                     config['RETRY_BACKOFF_FACTOR'],
                     CHANNEL_CLIENT_RETRYABLE_CODES.compose(additions))


def resmgmt_opts(config):
    return RetryOpts(config['RESMGMT_RETRY_ATTEMPTS'],
                     config['RESMGMT_RETRY_INITIAL_BACKOFF'],
                     config['RESMGMT_RETRY_MAX_BACKOFF'],
                     config['RESMGMT_RETRY_BACKOFF_FACTOR'],
                     RESMGMT_DEFAULT_RETRYABLE_CODES)


class Retrier(object):
    """Runs a coroutine function, retrying it on transient errors."""

    def __init__(self, opts, sleep=asyncio.sleep):
        self._opts = opts
        self._sleep = sleep

    async def invoke(self, fn):
        """Await fn() until it succeeds or fails with a terminal error.

        :param fn: function returning an awaitable
        :return: the result of fn
        :raises TerminalTransportError: on a non-retryable error, or when
         the retry budget is spent
        """
        retry = 0
        while True:
            try:
                return await fn()
            except TransportError as e:
                err = self._opts.retryable_codes.classify(e)
                if isinstance(err, TerminalTransportError):
                    raise err from e
                if retry >= self._opts.attempts:
                    raise TerminalTransportError(
                        e.group, e.code,
                        'giving up after {} attempt(s): {}'.format(
                            retry + 1, e.message)) from e

                backoff = self._opts.backoff(retry)
                retry += 1
                _logger.info('Retryable error %s, retry %d of %d in %ss',
                             err, retry, self._opts.attempts, backoff)
                await self._sleep(backoff)
