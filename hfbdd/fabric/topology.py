# SPDX-License-Identifier: Apache-2.0

import json
import logging

from hfbdd.errors import ConfigError
from hfbdd.fabric.target import create_target

_logger = logging.getLogger(__name__ + ".topology")


class Organization(object):
    """ An organization in the network.

    It owns several peers.
    """

    def __init__(self, name='org'):
        """
        :param name: Name of the organization
        """
        self._name = name
        self._mspid = None
        self._peers = []

    def init_with_bundle(self, info):
        """
        Init the organization with given info dict
        :param info: Dict including all info, e.g., mspid, peers
        :return: True or False
        """
        if 'mspid' in info:
            self._mspid = info['mspid']
        if 'peers' in info:
            self._peers = list(info['peers'])
        return True

    @property
    def name(self):
        return self._name

    @property
    def mspid(self):
        return self._mspid

    @property
    def peers(self):
        """Names of the org's peers, as listed in the profile"""
        return self._peers


def create_org(name, info):
    """ Factory method to construct an organization instance
    :param name: Name of the organization
    :param info: Info dict for initialization
    :return: an organization instance
    """
    org = Organization(name=name)
    org.init_with_bundle(info)
    return org


class Topology(object):
    """Read-only view of the network: organizations, their peers and the
    peers joined to each channel.
    """

    def __init__(self, network_info=None):
        self.network_info = dict()
        self._organizations = dict()
        self._targets = dict()
        self._channels = dict()

        if network_info:
            self.init_with_net_info(network_info)

    @classmethod
    def from_net_profile(cls, profile_path='network.json'):
        """
        Load the topology from a connection profile file.

        :param profile_path: The connection profile file path
        :return: a Topology
        """
        _logger.debug("Init topology with profile={}".format(profile_path))
        with open(profile_path, 'r') as profile:
            return cls(json.load(profile))

    def init_with_net_info(self, network_info):
        self.network_info = network_info

        orgs = self.get_net_info('organizations') or {}
        peers = self.get_net_info('peers') or {}

        for name in orgs:
            _logger.debug("create org with name={}".format(name))
            org = create_org(name, orgs[name])
            self._organizations[name] = org

            for peer_name in org.peers:
                if peer_name not in peers:
                    _logger.warning('Peer [%s] of org [%s] not found in'
                                    ' profile', peer_name, name)
                    continue
                self._targets[peer_name] = create_target(
                    peer_name, name, peers[peer_name], org.mspid)

        channels = self.get_net_info('channels') or {}
        for channel_id in channels:
            for peer_name in channels[channel_id].get('peers', {}):
                target = self._targets.get(peer_name)
                if target is None:
                    raise ConfigError(
                        'peer [{}] of channel [{}] does not belong to any'
                        ' organization'.format(peer_name, channel_id))
                self.add_target_to_channel(target, channel_id)

    def get_net_info(self, *key_path):
        """
        Get the info from self.network_info
        :param key_path: path of the key, e.g., a.b.c means info['a']['b']['c']
        :return: The value, or None
        """
        result = self.network_info
        if result:
            for k in key_path:
                try:
                    result = result[k]
                except KeyError:
                    _logger.warning(f'No key path {key_path} exists'
                                    f' in net info')
                    return None

        return result

    @property
    def orgs(self):
        """IDs of all organizations, in profile order"""
        return list(self._organizations)

    def get_org(self, org_id):
        return self._organizations.get(org_id)

    def msp_id(self, org_id):
        org = self._organizations.get(org_id)
        return org.mspid if org else None

    def add_target_to_channel(self, target, channel_id):
        targets = self._channels.setdefault(channel_id, [])
        if target not in targets:
            targets.append(target)

    def targets_by_channel(self, channel_id):
        return list(self._channels.get(channel_id, []))

    def targets_by_org(self, org_id):
        """All local peers of an organization, whatever channels they joined"""
        org = self._organizations.get(org_id)
        if org is None:
            return []
        return [self._targets[name] for name in org.peers
                if name in self._targets]

    def orgs_by_channel(self, channel_id):
        orgs = []
        for target in self._channels.get(channel_id, []):
            if target.org_id not in orgs:
                orgs.append(target.org_id)
        return orgs

    def org_for_channel(self, channel_id):
        """Return the ID of the first org having a peer on the channel"""
        orgs = self.orgs_by_channel(channel_id)
        if not orgs:
            raise ConfigError(
                'no orgs joined to channel [{}]'.format(channel_id))
        return orgs[0]

    def target_for_url(self, url):
        for target in self._targets.values():
            if target.url == url:
                return target
        return None

    def target_for_id(self, peer_id):
        return self._targets.get(peer_id)
