# SPDX-License-Identifier: Apache-2.0
#
import asyncio
import unittest

from hfbdd.bdd.registry import StepRegistry
from hfbdd.errors import StepNotFoundError

loop = asyncio.new_event_loop()


class RegistryTest(unittest.TestCase):

    def setUp(self):
        self.log = []
        self.registry = StepRegistry()
        self.registry.before_scenario(
            lambda name: self.log.append(('before', name)))
        self.registry.after_scenario(
            lambda name: self.log.append(('after', name)))

        async def wait(seconds):
            self.log.append(('wait', seconds))

        def query(cc_id, args):
            self.log.append(('query', cc_id, args))

        def fail():
            raise AssertionError('step failed')

        self.registry.step(r'^we wait (\d+) seconds$', wait)
        self.registry.step(
            r'^client queries chaincode "([^"]*)" with args "([^"]*)"$',
            query)
        self.registry.step(r'^it fails$', fail)

    def test_find(self):
        fn, args = self.registry.find('we wait 5 seconds')
        self.assertEqual([5], args)

        fn, args = self.registry.find(
            'client queries chaincode "example_cc" with args "query,a"')
        self.assertEqual(['example_cc', 'query,a'], args)

        self.assertEqual(3, len(self.registry.steps))

    def test_not_found(self):
        with self.assertRaises(StepNotFoundError) as e:
            self.registry.find('we wait forever')
        self.assertEqual('we wait forever', e.exception.text)

    def test_run_scenario(self):
        loop.run_until_complete(self.registry.run_scenario('s1', [
            'we wait 3 seconds',
            'client queries chaincode "cc" with args "get,k"',
        ]))
        self.assertEqual([('before', 's1'),
                          ('wait', 3),
                          ('query', 'cc', 'get,k'),
                          ('after', 's1')], self.log)

    def test_after_hooks_run_on_failure(self):
        with self.assertRaises(AssertionError):
            loop.run_until_complete(self.registry.run_scenario('s2', [
                'it fails',
                'we wait 3 seconds',
            ]))
        self.assertEqual([('before', 's2'), ('after', 's2')], self.log)


if __name__ == '__main__':
    unittest.main()
