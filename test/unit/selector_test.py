# SPDX-License-Identifier: Apache-2.0
#
import unittest

from hfbdd.errors import TargetNotFoundError
from hfbdd.fabric.selector import TargetSelector, pick_one, shuffle
from test.unit.util import PEER0_ORG1, PEER0_ORG2, PEER1_ORG1, \
    new_topology


class ReversedSample(object):
    """Deterministic stand-in for the random module"""

    def sample(self, population, k):
        return list(reversed(population))[:k]


class SelectorTest(unittest.TestCase):

    def setUp(self):
        self.selector = TargetSelector(new_topology())

    def test_org_targets(self):
        self.assertEqual([PEER0_ORG1, PEER1_ORG1, PEER0_ORG2],
                         [t.peer_id for t in
                          self.selector.org_targets('', 'mychannel')])
        self.assertEqual([PEER0_ORG2],
                         [t.peer_id for t in self.selector.org_targets(
                             'org2.example.com', 'mychannel')])
        self.assertEqual([PEER0_ORG1, PEER1_ORG1, PEER0_ORG2],
                         [t.peer_id for t in self.selector.org_targets(
                             'org2.example.com,org1.example.com',
                             'mychannel')])
        self.assertEqual([], self.selector.org_targets('org2.example.com',
                                                       'org1channel'))

    def test_targets(self):
        self.assertEqual([PEER0_ORG2, PEER0_ORG1],
                         [t.peer_id for t in self.selector.targets(
                             PEER0_ORG2 + ',' + PEER0_ORG1)])
        self.assertEqual([], self.selector.targets(''))

    def test_unknown_target(self):
        with self.assertRaises(TargetNotFoundError) as e:
            self.selector.targets(PEER0_ORG1 + ',peer9.example.com')
        self.assertEqual('peer9.example.com', e.exception.peer_id)

    def test_local_targets(self):
        self.assertEqual([PEER0_ORG1, PEER1_ORG1],
                         [t.peer_id for t in self.selector.local_targets(
                             'org1.example.com')])
        self.assertEqual([PEER0_ORG1],
                         [t.peer_id for t in self.selector.local_targets(
                             'org1.example.com', r'peer1\.')])
        self.assertEqual([], self.selector.local_targets(
            'org1.example.com', 'org1'))

    def test_pick_one(self):
        targets = self.selector.org_targets('', 'mychannel')
        self.assertEqual(PEER0_ORG2,
                         pick_one(targets, rng=ReversedSample()).peer_id)
        self.assertIn(pick_one(targets), targets)

    def test_shuffle(self):
        targets = self.selector.org_targets('', 'mychannel')
        shuffled = shuffle(targets)
        self.assertEqual(len(targets), len(shuffled))
        self.assertEqual(set(targets), set(shuffled))


if __name__ == '__main__':
    unittest.main()
