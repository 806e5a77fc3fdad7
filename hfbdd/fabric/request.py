# SPDX-License-Identifier: Apache-2.0

from hfbdd.util.consts import SUCCESS_STATUS


def get_byte_args(args):
    return [arg.encode('utf-8') for arg in args]


class InvocationRequest(object):
    """ A chaincode call: the function is sent as the first argument.

    :param chaincode_id: chaincode name
    :param fcn: chaincode function
    :param args: list of string arguments
    :param transient_map: dict of str to bytes, not persisted on the ledger
    """

    def __init__(self, chaincode_id, fcn, args=None, transient_map=None):
        self.chaincode_id = chaincode_id
        self.fcn = fcn
        self.args = list(args or [])
        self.transient_map = dict(transient_map or {})

    @classmethod
    def from_args(cls, chaincode_id, args, transient_map=None):
        """Build a request from resolved step arguments, function first"""
        if not args:
            raise ValueError('at least the chaincode function is required')
        return cls(chaincode_id, args[0], args[1:], transient_map)

    @property
    def byte_args(self):
        return get_byte_args(self.args)

    def __repr__(self):
        return 'InvocationRequest({}.{}{})'.format(
            self.chaincode_id, self.fcn, self.args)


class ProposalResponse(object):
    """One endorser's answer to a proposal"""

    def __init__(self, endorser, status=SUCCESS_STATUS, message='',
                 payload=b''):
        self.endorser = endorser
        self.status = status
        self.message = message
        self.payload = payload

    @property
    def ok(self):
        return self.status == SUCCESS_STATUS

    def __repr__(self):
        return 'ProposalResponse({}, {}, {!r})'.format(
            self.endorser, self.status, self.message)


class Response(object):
    """Outcome of a call: the payload and the responses it was built from"""

    def __init__(self, payload=b'', responses=None, tx_id=None):
        self.payload = payload
        self.responses = list(responses or [])
        self.tx_id = tx_id
