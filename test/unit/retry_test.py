# SPDX-License-Identifier: Apache-2.0
#
import asyncio
import unittest

import grpc

from hfbdd.config.default import get_config
from hfbdd.errors import RetryableTransportError, TerminalTransportError, \
    TransportError
from hfbdd.fabric import retry
from hfbdd.fabric.retry import Retrier, RetryCodeTable, RetryOpts
from test.unit.util import SleepRecorder

loop = asyncio.new_event_loop()


class Flaky(object):
    """Fails with the given errors, one per call, then returns 'ok'"""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return 'ok'


class RetryCodeTableTest(unittest.TestCase):

    def test_add_twice(self):
        table = RetryCodeTable()
        table.add(retry.CHAINCODE_STATUS, 404)
        table.add(retry.CHAINCODE_STATUS, 404)
        self.assertEqual(frozenset([404]),
                         table.codes(retry.CHAINCODE_STATUS))

    def test_compose(self):
        base = RetryCodeTable({retry.ENDORSER_SERVER_STATUS: [500]})
        composed = base.compose([(retry.CHAINCODE_STATUS, 404),
                                 (retry.CHAINCODE_STATUS, 404),
                                 (retry.ENDORSER_SERVER_STATUS, 503)])

        self.assertEqual({retry.ENDORSER_SERVER_STATUS: {500, 503},
                          retry.CHAINCODE_STATUS: {404}},
                         composed.as_dict())
        self.assertEqual({retry.ENDORSER_SERVER_STATUS: {500}},
                         base.as_dict())

    def test_presets_unchanged_by_compose(self):
        before = retry.CHANNEL_CLIENT_RETRYABLE_CODES.as_dict()
        retry.channel_client_opts(get_config({}),
                                  [(retry.CHAINCODE_STATUS, 404)])
        self.assertEqual(before,
                         retry.CHANNEL_CLIENT_RETRYABLE_CODES.as_dict())

    def test_classify(self):
        table = RetryCodeTable({retry.GRPC_TRANSPORT_STATUS:
                                [retry.GRPC_UNAVAILABLE]})
        err = table.classify(TransportError(
            retry.GRPC_TRANSPORT_STATUS,
            retry.grpc_code(grpc.StatusCode.UNAVAILABLE), 'down'))
        self.assertIsInstance(err, RetryableTransportError)
        self.assertEqual('down', err.message)

        err = table.classify(TransportError(retry.CHAINCODE_STATUS, 404))
        self.assertIsInstance(err, TerminalTransportError)

    def test_equality(self):
        self.assertEqual(RetryCodeTable({'a': [1, 2]}),
                         RetryCodeTable({'a': [2, 1, 1]}))
        self.assertNotEqual(RetryCodeTable({'a': [1]}),
                            RetryCodeTable({'b': [1]}))

    def test_channel_client_opts(self):
        config = get_config({})
        opts = retry.channel_client_opts(config,
                                         [(retry.CHAINCODE_STATUS, 404)])
        self.assertEqual(config['RETRY_ATTEMPTS'], opts.attempts)
        self.assertTrue(opts.retryable_codes.is_retryable(
            retry.CHAINCODE_STATUS, 404))
        self.assertTrue(opts.retryable_codes.is_retryable(
            retry.ENDORSER_CLIENT_STATUS, retry.CHAINCODE_NAME_NOT_FOUND))


class RetryOptsTest(unittest.TestCase):

    def test_backoff(self):
        opts = RetryOpts(attempts=5, initial_backoff=1, max_backoff=5,
                         backoff_factor=2)
        self.assertEqual([1, 2, 4, 5, 5],
                         [opts.backoff(i) for i in range(5)])

    def test_default_codes(self):
        self.assertEqual(retry.DEFAULT_RETRYABLE_CODES,
                         RetryOpts().retryable_codes)


class RetrierTest(unittest.TestCase):

    def setUp(self):
        self.sleep = SleepRecorder()
        self.opts = RetryOpts(
            attempts=2, initial_backoff=1, max_backoff=10, backoff_factor=3,
            retryable_codes=RetryCodeTable({retry.CHAINCODE_STATUS: [404]}))

    def test_success_after_retries(self):
        fn = Flaky(TransportError(retry.CHAINCODE_STATUS, 404),
                   TransportError(retry.CHAINCODE_STATUS, 404))
        result = loop.run_until_complete(
            Retrier(self.opts, sleep=self.sleep).invoke(fn))

        self.assertEqual('ok', result)
        self.assertEqual(3, fn.calls)
        self.assertEqual([1, 3], self.sleep.delays)

    def test_terminal_error_not_retried(self):
        fn = Flaky(TransportError(retry.CHAINCODE_STATUS, 500, 'boom'))
        with self.assertRaises(TerminalTransportError) as e:
            loop.run_until_complete(
                Retrier(self.opts, sleep=self.sleep).invoke(fn))

        self.assertEqual(1, fn.calls)
        self.assertEqual(500, e.exception.code)
        self.assertEqual([], self.sleep.delays)

    def test_retries_exhausted(self):
        fn = Flaky(*[TransportError(retry.CHAINCODE_STATUS, 404, 'missing')
                     for _ in range(5)])
        with self.assertRaises(TerminalTransportError) as e:
            loop.run_until_complete(
                Retrier(self.opts, sleep=self.sleep).invoke(fn))

        self.assertEqual(3, fn.calls)
        self.assertEqual(404, e.exception.code)
        self.assertIn('missing', e.exception.message)
        self.assertEqual([1, 3], self.sleep.delays)

    def test_other_errors_propagate(self):
        fn = Flaky(KeyError('x'))
        with self.assertRaises(KeyError):
            loop.run_until_complete(
                Retrier(self.opts, sleep=self.sleep).invoke(fn))
        self.assertEqual(1, fn.calls)


if __name__ == '__main__':
    unittest.main()
