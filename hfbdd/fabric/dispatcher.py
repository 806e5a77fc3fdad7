# SPDX-License-Identifier: Apache-2.0

import asyncio
import logging

from hfbdd.errors import AllTargetsFailedError, InvocationError, \
    NoTargetsError
from hfbdd.fabric.invoke import new_system_handler_chain
from hfbdd.util.consts import CC_INVOKE, CC_QUERY, WARMUP_FCN

_logger = logging.getLogger(__name__)

# dispatch modes
CONCURRENT = 'concurrent'
SEQUENTIAL = 'sequential'
PIPELINE = 'pipeline'

_OPERATION_NAMES = {
    CC_QUERY: 'Query',
    CC_INVOKE: 'Invoke',
}


def _payload_str(payload):
    if isinstance(payload, bytes):
        return payload.decode('utf-8')
    return payload if payload is not None else ''


class InvocationDispatcher(object):
    """Executes one logical chaincode call against a set of targets.

    * CONCURRENT: a single call carrying all targets; fan-out and response
      selection are left to the channel client.
    * SEQUENTIAL: one call per target, in order. The result is the payload
      of the last target that succeeded, but any failure fails the whole
      dispatch with the first error. Calls that succeeded before a failure
      are not rolled back.
    * PIPELINE: a single call routed through a HandlerChain.
    """

    def __init__(self, channel_client, sleep=asyncio.sleep):
        """
        :param channel_client: ChannelClient bound to the target channel
        :param sleep: coroutine function used to wait between sequential
         calls
        """
        self._client = channel_client
        self._sleep = sleep

    @property
    def channel_id(self):
        return self._client.channel_id

    async def dispatch(self, request, targets, mode=CONCURRENT,
                       kind=CC_QUERY, retry_opts=None, timeout=None,
                       interval=0, chain=None):
        """Execute request against targets.

        :param request: InvocationRequest
        :param targets: non-empty list of Target
        :param mode: CONCURRENT, SEQUENTIAL or PIPELINE
        :param kind: CC_QUERY or CC_INVOKE
        :param retry_opts: RetryOpts applied to every call
        :param timeout: seconds per call
        :param interval: seconds to wait between sequential calls
        :param chain: HandlerChain for PIPELINE, defaults to the system chain
        :return: the payload as a string
        :raises NoTargetsError: if targets is empty, before any call
        :raises InvocationError: if a call failed
        :raises AllTargetsFailedError: if a sequential call failed
        """
        if mode not in (CONCURRENT, SEQUENTIAL, PIPELINE):
            raise ValueError('unknown dispatch mode: {}'.format(mode))

        if not targets:
            raise NoTargetsError(
                'no targets for chaincode [{}] on channel [{}]'.format(
                    request.chaincode_id, self.channel_id))

        if mode == SEQUENTIAL:
            return await self._dispatch_sequential(
                request, targets, kind, retry_opts, timeout, interval)

        try:
            if mode == PIPELINE:
                payload = await self._client.invoke_via_pipeline(
                    chain or new_system_handler_chain(), request, targets,
                    timeout=timeout, retry_opts=retry_opts)
            else:
                payload = await self._call(request, targets, kind,
                                           retry_opts, timeout)
        except Exception as e:
            raise InvocationError(
                _OPERATION_NAMES[kind], request.chaincode_id,
                self.channel_id, request.fcn, e) from e

        result = _payload_str(payload)
        _logger.debug('%s chaincode [%s] returned [%s]',
                      _OPERATION_NAMES[kind], request.chaincode_id, result)
        return result

    async def _call(self, request, targets, kind, retry_opts, timeout):
        if kind == CC_INVOKE:
            return await self._client.invoke(request, targets,
                                             retry_opts=retry_opts)
        return await self._client.query(request, targets, timeout=timeout,
                                        retry_opts=retry_opts)

    async def _dispatch_sequential(self, request, targets, kind, retry_opts,
                                   timeout, interval):
        result = ''
        errors = []
        for target in targets:
            if request.fcn == WARMUP_FCN:
                _logger.info('Warming up chaincode [%s] on peer [%s] in'
                             ' channel [%s]', request.chaincode_id,
                             target.url, self.channel_id)
            try:
                payload = await self._call(request, [target], kind,
                                           retry_opts, timeout)
            except Exception as e:
                _logger.debug('Call to [%s] failed: %s', target.url, e)
                errors.append(e)
            else:
                result = _payload_str(payload)

            if interval > 0:
                _logger.info('Waiting %ss', interval)
                await self._sleep(interval)

        if errors:
            raise AllTargetsFailedError(
                _OPERATION_NAMES[kind], request.chaincode_id,
                self.channel_id, request.fcn, errors[0], errors) \
                from errors[0]

        _logger.debug('%s chaincode [%s] returned [%s]',
                      _OPERATION_NAMES[kind], request.chaincode_id, result)
        return result
