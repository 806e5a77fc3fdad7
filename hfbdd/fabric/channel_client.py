# SPDX-License-Identifier: Apache-2.0

import asyncio
import logging
import re

import grpc

from hfbdd.config.default import DEFAULT
from hfbdd.errors import TransportError
from hfbdd.fabric import retry
from hfbdd.fabric.invoke import RequestContext
from hfbdd.fabric.request import ProposalResponse
from hfbdd.fabric.retry import Retrier, RetryOpts
from hfbdd.util.consts import SUCCESS_STATUS

_logger = logging.getLogger(__name__)


class ChannelClient(object):
    """Issues chaincode calls on one channel.

    Every call is bounded by a timeout per attempt and retried according to
    the RetryOpts it is given. Subclasses provide the transport by
    implementing the send_* coroutines.
    """

    def __init__(self, channel_id, default_timeout=None,
                 sleep=asyncio.sleep):
        """
        :param channel_id: ID of the channel calls are sent on
        :param default_timeout: seconds, used when a call gives no timeout
        :param sleep: coroutine function used to wait between retries
        """
        self._channel_id = channel_id
        self._default_timeout = default_timeout or DEFAULT['EXECUTE_TIMEOUT']
        self._sleep = sleep

    @property
    def channel_id(self):
        return self._channel_id

    async def query(self, request, targets, timeout=None, retry_opts=None):
        """Query chaincode on the targets

        :return: the payload
        """
        return await self._execute(
            lambda: self.send_query(request, targets), timeout, retry_opts)

    async def invoke(self, request, targets, retry_opts=None):
        """Invoke chaincode for ledger update

        :return: the payload
        """
        return await self._execute(
            lambda: self.send_invoke(request, targets), None, retry_opts)

    async def invoke_via_pipeline(self, chain, request, targets,
                                  timeout=None, retry_opts=None):
        """Run the call through a HandlerChain instead of the plain query

        :return: the payload of the chain's response
        """
        async def run():
            ctx = RequestContext(self.send_proposal, targets, timeout)
            response = await chain.run(ctx, request)
            return response.payload

        return await self._execute(run, timeout, retry_opts)

    async def query_info(self, targets, retry_opts=None):
        """Current height of the channel's ledger"""
        return await self._execute(
            lambda: self.send_query_info(targets), None, retry_opts)

    async def query_block(self, block_number, targets, retry_opts=None):
        """Decoded block block_number of the channel's ledger"""
        return await self._execute(
            lambda: self.send_query_block(block_number, targets), None,
            retry_opts)

    async def _execute(self, fn, timeout, retry_opts):
        timeout = timeout or self._default_timeout

        async def attempt():
            try:
                return await asyncio.wait_for(fn(), timeout)
            except asyncio.TimeoutError as e:
                raise TransportError(
                    retry.CLIENT_STATUS, retry.TIMEOUT,
                    'request timed out after {}s'.format(timeout)) from e

        retrier = Retrier(retry_opts or RetryOpts(), sleep=self._sleep)
        return await retrier.invoke(attempt)

    async def send_query(self, request, targets):
        raise NotImplementedError

    async def send_invoke(self, request, targets):
        raise NotImplementedError

    async def send_proposal(self, request, target):
        """Send the proposal to a single target

        :return: a ProposalResponse
        """
        raise NotImplementedError

    async def send_query_info(self, targets):
        raise NotImplementedError

    async def send_query_block(self, block_number, targets):
        raise NotImplementedError


def transport_error(err):
    """Translate a grpc.RpcError into a TransportError"""
    code = err.code() if hasattr(err, 'code') else grpc.StatusCode.UNKNOWN
    details = err.details() if hasattr(err, 'details') else str(err)
    return TransportError(retry.GRPC_TRANSPORT_STATUS,
                          retry.grpc_code(code), details)


# e.g. "chaincode error (status: 404, message: not found)"
_STATUS_RE = re.compile(r'status:? (\d+)')


def execution_error(err):
    """Translate a chaincode execution error raised by the SDK client into
    a TransportError.

    The SDK raises with either the failed proposal responses or the error
    message as argument. A status found in a message is the chaincode's;
    otherwise the status of the first failed proposal response is used.

    :param err: the exception raised by chaincode_query/chaincode_invoke
    :return: a TransportError, or None if err carries no status
    """
    detail = err.args[0] if err.args else ''

    if isinstance(detail, (list, tuple)):
        failed = [r.response for r in detail
                  if getattr(r, 'response', None) is not None and
                  r.response.status != SUCCESS_STATUS]
        if not failed:
            return None
        message = failed[0].message
        m = _STATUS_RE.search(message)
        if m:
            return TransportError(retry.CHAINCODE_STATUS, int(m.group(1)),
                                  message)
        return TransportError(retry.ENDORSER_SERVER_STATUS,
                              failed[0].status, message)

    message = str(detail)
    m = _STATUS_RE.search(message)
    if m is None:
        return None
    return TransportError(retry.CHAINCODE_STATUS, int(m.group(1)), message)


class FabricChannelClient(ChannelClient):
    """ChannelClient over a fabric-sdk-py style client exposing the
    chaincode_query, chaincode_invoke, query_info and query_block
    coroutines.
    """

    def __init__(self, client, requestor, channel_id, default_timeout=None,
                 sleep=asyncio.sleep):
        """
        :param client: the SDK client
        :param requestor: user the calls are signed by
        :param channel_id: channel ID
        """
        super(FabricChannelClient, self).__init__(channel_id,
                                                  default_timeout, sleep)
        self._client = client
        self._requestor = requestor

    async def _call(self, fn, targets, **kwargs):
        try:
            return await fn(requestor=self._requestor,
                            channel_name=self.channel_id,
                            peers=[t.peer_id for t in targets],
                            **kwargs)
        except grpc.RpcError as e:
            raise transport_error(e) from e
        except TransportError:
            raise
        except Exception as e:
            err = execution_error(e)
            if err is None:
                raise
            raise err from e

    async def send_query(self, request, targets):
        return await self._call(
            self._client.chaincode_query, targets,
            args=request.args,
            cc_name=request.chaincode_id,
            fcn=request.fcn,
            transient_map=request.transient_map or None)

    async def send_invoke(self, request, targets):
        return await self._call(
            self._client.chaincode_invoke, targets,
            args=request.args,
            cc_name=request.chaincode_id,
            fcn=request.fcn,
            transient_map=request.transient_map or None,
            wait_for_event=True,
            raise_on_error=True)

    async def send_proposal(self, request, target):
        try:
            payload = await self.send_query(request, [target])
        except TransportError as e:
            if e.group == retry.GRPC_TRANSPORT_STATUS:
                raise
            return ProposalResponse(target.peer_id, e.code, e.message)
        except Exception as e:
            _logger.debug('Proposal to [%s] failed: %s', target.peer_id, e)
            return ProposalResponse(target.peer_id,
                                    retry.INTERNAL_SERVER_ERROR, str(e))

        if isinstance(payload, str):
            payload = payload.encode('utf-8')
        return ProposalResponse(target.peer_id, payload=payload)

    async def send_query_info(self, targets):
        info = await self._call(self._client.query_info, targets)
        return int(info.height)

    async def send_query_block(self, block_number, targets):
        return await self._call(self._client.query_block, targets,
                                block_number=block_number)
