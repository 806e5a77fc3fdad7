# SPDX-License-Identifier: Apache-2.0

"""Handler chain for calls that need control over endorsement, e.g. system
chaincode queries.

A chain is an ordered list of stages. Each stage implements
``handle(ctx, request, proceed)`` and either awaits ``proceed(ctx, request)``
to run the rest of the chain, or returns/raises to stop it there. The value
returned by the chain is ``ctx.response`` once the last stage proceeds.
"""
import asyncio
import logging

from hfbdd.errors import TransportError
from hfbdd.fabric import retry
from hfbdd.fabric.request import Response

_logger = logging.getLogger(__name__)


class RequestContext(object):
    """State passed along the chain for one call.

    :param endorse: coroutine function (request, target) -> ProposalResponse
    :param targets: targets to send the proposal to
    :param timeout: per call timeout in seconds
    """

    def __init__(self, endorse, targets, timeout=None):
        self.endorse = endorse
        self.targets = list(targets)
        self.timeout = timeout
        self.responses = []
        self.endorsements = []
        self.response = None


class Handler(object):

    async def handle(self, ctx, request, proceed):
        raise NotImplementedError


class HandlerChain(object):

    def __init__(self, handlers):
        self._handlers = list(handlers)

    @property
    def handlers(self):
        return list(self._handlers)

    async def run(self, ctx, request):
        async def proceed_from(index, ctx, request):
            if index == len(self._handlers):
                return ctx.response

            async def proceed(ctx, request):
                return await proceed_from(index + 1, ctx, request)

            return await self._handlers[index].handle(ctx, request, proceed)

        return await proceed_from(0, ctx, request)


class ProposalProcessorHandler(Handler):
    """Sends the proposal to every target concurrently and collects the
    responses (or errors) in ctx.responses, in target order.
    """

    async def handle(self, ctx, request, proceed):
        _logger.debug('Sending proposal %s to %s', request, ctx.targets)
        ctx.responses = await asyncio.gather(
            *[ctx.endorse(request, target) for target in ctx.targets],
            return_exceptions=True)
        return await proceed(ctx, request)


def successful_responses(responses):
    return [r for r in responses
            if not isinstance(r, BaseException) and r.ok]


class CustomEndorsementHandler(Handler):
    """Chooses which responses count as endorsements.

    :param select: function (responses) -> endorsements, defaults to every
     successful response
    """

    def __init__(self, select=successful_responses):
        self._select = select

    async def handle(self, ctx, request, proceed):
        ctx.endorsements = self._select(ctx.responses)
        if not ctx.endorsements:
            for r in ctx.responses:
                if isinstance(r, BaseException):
                    raise r
            failed = [r for r in ctx.responses if not r.ok]
            if failed:
                raise TransportError(retry.ENDORSER_SERVER_STATUS,
                                     failed[0].status, failed[0].message)
            raise TransportError(retry.CLIENT_STATUS, retry.NO_PEERS_FOUND,
                                 'no endorsements received')
        return await proceed(ctx, request)


class EndorsementValidationHandler(Handler):
    """Checks that there are enough endorsements, that they all succeeded
    and that their payloads match.

    :param min_endorsements: quorum of endorsements required
    """

    def __init__(self, min_endorsements=1):
        self._min_endorsements = min_endorsements

    async def handle(self, ctx, request, proceed):
        endorsements = ctx.endorsements
        if len(endorsements) < self._min_endorsements:
            raise TransportError(
                retry.ENDORSER_CLIENT_STATUS, retry.MISSING_ENDORSEMENT,
                'got {} endorsement(s), {} required'.format(
                    len(endorsements), self._min_endorsements))

        for e in endorsements:
            if not e.ok:
                raise TransportError(retry.ENDORSER_SERVER_STATUS, e.status,
                                     e.message)

        payloads = {e.payload for e in endorsements}
        if len(payloads) > 1:
            raise TransportError(
                retry.ENDORSER_CLIENT_STATUS, retry.ENDORSEMENT_MISMATCH,
                'ProposalResponsePayloads do not match')

        ctx.response = Response(payload=endorsements[0].payload,
                                responses=endorsements)
        return await proceed(ctx, request)


def new_system_handler_chain(select=successful_responses,
                             min_endorsements=1):
    """The chain used for system chaincode calls: proposal dispatch, then
    endorsement selection, then endorsement validation.
    """
    return HandlerChain([
        ProposalProcessorHandler(),
        CustomEndorsementHandler(select),
        EndorsementValidationHandler(min_endorsements),
    ])
