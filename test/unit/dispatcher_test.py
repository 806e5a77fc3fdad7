# SPDX-License-Identifier: Apache-2.0
#
import asyncio
import unittest

from hfbdd.errors import AllTargetsFailedError, InvocationError, \
    NoTargetsError, TerminalTransportError, TransportError
from hfbdd.fabric import retry
from hfbdd.fabric.dispatcher import CONCURRENT, PIPELINE, SEQUENTIAL, \
    InvocationDispatcher
from hfbdd.fabric.request import InvocationRequest
from hfbdd.fabric.retry import RetryCodeTable, RetryOpts
from hfbdd.util.consts import CC_INVOKE, CC_QUERY
from test.unit.util import FakeChannelClient, PEER0_ORG1, PEER0_ORG2, \
    PEER1_ORG1, SleepRecorder, new_topology

loop = asyncio.new_event_loop()


def by_peer(results):
    """Handler answering per target peer ID: a payload, or an error to
    raise
    """
    def handler(kind, request, targets):
        result = results[targets[0].peer_id]
        if isinstance(result, Exception):
            raise result
        return result
    return handler


class DispatcherTest(unittest.TestCase):

    def setUp(self):
        self.targets = new_topology().targets_by_channel('mychannel')
        self.request = InvocationRequest('example_cc', 'query', ['a'])
        self.sleep = SleepRecorder()

    def dispatch(self, client, targets, **kwargs):
        dispatcher = InvocationDispatcher(client, sleep=self.sleep)
        return loop.run_until_complete(
            dispatcher.dispatch(self.request, targets, **kwargs))

    def test_concurrent(self):
        client = FakeChannelClient(handler=lambda k, r, t: b'100')
        result = self.dispatch(client, self.targets)

        self.assertEqual('100', result)
        self.assertEqual([('query', 'query', ['a'],
                           [PEER0_ORG1, PEER1_ORG1, PEER0_ORG2])],
                         client.calls)

    def test_concurrent_invoke(self):
        client = FakeChannelClient(handler=lambda k, r, t: 'done')
        result = self.dispatch(client, self.targets, kind=CC_INVOKE)

        self.assertEqual('done', result)
        self.assertEqual('invoke', client.calls[0][0])

    def test_concurrent_error_is_wrapped(self):
        err = TransportError(retry.CHAINCODE_STATUS, 500, 'boom')

        def handler(kind, request, targets):
            raise err

        client = FakeChannelClient(handler=handler)
        with self.assertRaises(InvocationError) as e:
            self.dispatch(client, self.targets)

        self.assertNotIsInstance(e.exception, AllTargetsFailedError)
        self.assertEqual('Query', e.exception.operation)
        self.assertEqual('example_cc', e.exception.chaincode_id)
        self.assertEqual('mychannel', e.exception.channel_id)
        self.assertEqual('query', e.exception.fcn)
        self.assertIsInstance(e.exception.cause, TerminalTransportError)
        self.assertIn('boom', str(e.exception))

    def test_sequential_last_success_wins(self):
        client = FakeChannelClient(handler=by_peer({
            PEER0_ORG1: b'p1',
            PEER1_ORG1: b'p2',
        }))
        result = self.dispatch(client, self.targets[:2], mode=SEQUENTIAL)

        self.assertEqual('p2', result)
        self.assertEqual([[PEER0_ORG1], [PEER1_ORG1]],
                         [c[3] for c in client.calls])

    def test_sequential_failure_voids_batch(self):
        err = TransportError(retry.CHAINCODE_STATUS, 500, 'T2 failed')
        client = FakeChannelClient(handler=by_peer({
            PEER0_ORG1: b'p1',
            PEER1_ORG1: err,
            PEER0_ORG2: b'p3',
        }))
        with self.assertRaises(AllTargetsFailedError) as e:
            self.dispatch(client, self.targets, mode=SEQUENTIAL)

        # every target was still called
        self.assertEqual(3, len(client.calls))
        self.assertEqual(err.code, e.exception.first_cause.code)
        self.assertEqual(err.message, e.exception.first_cause.message)
        self.assertIs(e.exception.first_cause, e.exception.cause)
        self.assertEqual(1, len(e.exception.errors))

    def test_sequential_first_error_in_target_order(self):
        client = FakeChannelClient(handler=by_peer({
            PEER0_ORG1: b'p1',
            PEER1_ORG1: TransportError(retry.CHAINCODE_STATUS, 500, 'T2'),
            PEER0_ORG2: TransportError(retry.CHAINCODE_STATUS, 501, 'T3'),
        }))
        with self.assertRaises(AllTargetsFailedError) as e:
            self.dispatch(client, self.targets, mode=SEQUENTIAL)

        self.assertEqual('T2', e.exception.first_cause.message)
        self.assertEqual(['T2', 'T3'],
                         [err.message for err in e.exception.errors])

    def test_sequential_interval(self):
        client = FakeChannelClient(handler=lambda k, r, t: b'ok')
        self.dispatch(client, self.targets, mode=SEQUENTIAL, interval=2)
        self.assertEqual([2, 2, 2], self.sleep.delays)

    def test_sequential_retries_each_target(self):
        attempts = {}

        def handler(kind, request, targets):
            peer_id = targets[0].peer_id
            attempts[peer_id] = attempts.get(peer_id, 0) + 1
            if attempts[peer_id] == 1:
                raise TransportError(retry.CHAINCODE_STATUS, 404)
            return peer_id

        opts = RetryOpts(attempts=1, initial_backoff=0.1,
                         retryable_codes=RetryCodeTable(
                             {retry.CHAINCODE_STATUS: [404]}))
        client = FakeChannelClient(handler=handler)
        result = self.dispatch(client, self.targets, mode=SEQUENTIAL,
                               retry_opts=opts)

        self.assertEqual(PEER0_ORG2, result)
        self.assertEqual({PEER0_ORG1: 2, PEER1_ORG1: 2, PEER0_ORG2: 2},
                         attempts)

    def test_no_targets(self):
        client = FakeChannelClient()
        for mode in (CONCURRENT, SEQUENTIAL, PIPELINE):
            with self.assertRaises(NoTargetsError):
                self.dispatch(client, [], mode=mode)
        self.assertEqual([], client.calls)

    def test_unknown_mode(self):
        client = FakeChannelClient()
        with self.assertRaises(ValueError):
            self.dispatch(client, self.targets, mode='broadcast')
        self.assertEqual([], client.calls)

    def test_pipeline(self):
        client = FakeChannelClient(handler=lambda k, r, t: b'info')
        result = self.dispatch(client, self.targets[:1], mode=PIPELINE,
                               kind=CC_QUERY)

        self.assertEqual('info', result)
        self.assertEqual([('proposal', 'query', ['a'], [PEER0_ORG1])],
                         client.calls)

    def test_pipeline_mismatch(self):
        client = FakeChannelClient(handler=by_peer({
            PEER0_ORG1: b'a',
            PEER1_ORG1: b'b',
        }))
        with self.assertRaises(InvocationError) as e:
            self.dispatch(client, self.targets[:2], mode=PIPELINE,
                          retry_opts=RetryOpts(attempts=0))
        self.assertEqual(retry.ENDORSEMENT_MISMATCH, e.exception.cause.code)


if __name__ == '__main__':
    unittest.main()
