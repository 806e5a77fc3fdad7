# SPDX-License-Identifier: Apache-2.0

import logging
import random
import re

from hfbdd.errors import TargetNotFoundError

_logger = logging.getLogger(__name__)


def _split_ids(ids):
    return ids.split(',') if ids else []


def shuffle(targets, rng=random):
    """Return a uniform random permutation of targets"""
    return rng.sample(list(targets), len(targets))


def pick_one(targets, rng=random):
    """Pick a single representative target at random.

    :param targets: non-empty sequence of targets
    :param rng: random source exposing sample(), for stubbing in tests
    :return: a target
    """
    return shuffle(targets, rng)[0]


class TargetSelector(object):
    """Resolves target lists from a Topology."""

    def __init__(self, topology):
        self._topology = topology

    def org_targets(self, org_ids, channel_id):
        """Targets of the given orgs on a channel.

        :param org_ids: comma-separated org IDs, empty for every org
        :param channel_id: channel ID
        :return: list of targets, in channel order
        """
        org_filter = set(_split_ids(org_ids))
        return [t for t in self._topology.targets_by_channel(channel_id)
                if not org_filter or t.org_id in org_filter]

    def targets(self, peer_ids):
        """Targets for an explicit comma-separated list of peer IDs.

        :raises TargetNotFoundError: if any of the IDs is unknown
        """
        targets = []
        for peer_id in _split_ids(peer_ids):
            target = self._topology.target_for_id(peer_id)
            if target is None:
                raise TargetNotFoundError(peer_id)
            targets.append(target)
        return targets

    def local_targets(self, org_id, exclude_pattern=''):
        """The org's local peers, minus those whose peer ID matches
        exclude_pattern. Used to pick install targets.

        :param org_id: org ID
        :param exclude_pattern: regular expression, empty to keep all peers
        :return: list of targets
        """
        excluded = re.compile(exclude_pattern) if exclude_pattern else None

        targets = []
        for target in self._topology.targets_by_org(org_id):
            if excluded is not None and excluded.search(target.peer_id):
                _logger.info("Not returning local peer [%s] since it is"
                             " excluded", target.peer_id)
                continue
            targets.append(target)
        return targets
