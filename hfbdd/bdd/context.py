# SPDX-License-Identifier: Apache-2.0

import logging

from hfbdd.bdd.response import ResponseCache
from hfbdd.bdd.variables import VariableStore
from hfbdd.config.default import get_config
from hfbdd.fabric.retry import CHAINCODE_STATUS, channel_client_opts, \
    resmgmt_opts
from hfbdd.fabric.selector import TargetSelector

_logger = logging.getLogger(__name__)


class ScenarioContext(object):
    """State shared by the steps of one scenario: variables, the last
    response and the retry codes added on top of the client defaults.
    """

    def __init__(self, cc_codes_for_retry=()):
        self._cc_codes_for_retry = list(cc_codes_for_retry)
        self.variables = VariableStore()
        self.response = ResponseCache()
        self.retry_additions = []
        self.reset()

    def reset(self):
        self.variables.clear()
        self.response.clear()
        self.retry_additions = [(CHAINCODE_STATUS, code)
                                for code in self._cc_codes_for_retry]

    def add_retry_code(self, group, code):
        self.retry_additions.append((group, code))


class BDDContext(object):
    """Everything the steps need: the network topology, factories for the
    clients that talk to it, configuration and the scenario state.

    One instance per concurrently running scenario.
    """

    def __init__(self, topology, channel_client_factory,
                 resmgmt_factory=None, config=None):
        """
        :param topology: Topology of the network
        :param channel_client_factory: function (org_id, user_type,
         channel_id) -> ChannelClient
        :param resmgmt_factory: function (org_id, user_type) ->
         ResourceManager
        :param config: config dict, defaults to get_config()
        """
        self.topology = topology
        self.selector = TargetSelector(topology)
        self.config = config or get_config()
        self.test_cc_path = self.config['TEST_CC_PATH']
        self.system_cc_path = self.config['SYSTEM_CC_PATH']
        self.channel_tx_path = self.config['CHANNEL_TX_PATH']
        self.scenario = ScenarioContext(self.config['CC_CODES_FOR_RETRY'])

        self._channel_client_factory = channel_client_factory
        self._resmgmt_factory = resmgmt_factory
        self._channel_clients = dict()
        self._resmgmt_clients = dict()
        self._collection_configs = dict()
        self._created_channels = set()

    @property
    def orgs(self):
        return self.topology.orgs

    @property
    def variables(self):
        return self.scenario.variables

    @property
    def response(self):
        return self.scenario.response

    def before_scenario(self, *args):
        _logger.debug('Resetting scenario state')
        self.scenario.reset()

    def after_scenario(self, *args):
        self.scenario.reset()

    def channel_client(self, org_id, user_type, channel_id):
        key = (org_id, user_type, channel_id)
        if key not in self._channel_clients:
            self._channel_clients[key] = self._channel_client_factory(
                org_id, user_type, channel_id)
        return self._channel_clients[key]

    def resmgmt_client(self, org_id, user_type):
        if self._resmgmt_factory is None:
            raise RuntimeError('no resource management client configured')
        key = (org_id, user_type)
        if key not in self._resmgmt_clients:
            self._resmgmt_clients[key] = self._resmgmt_factory(org_id,
                                                               user_type)
        return self._resmgmt_clients[key]

    def retry_opts(self):
        """Effective retry policy of chaincode calls in this scenario"""
        return channel_client_opts(self.config, self.scenario.retry_additions)

    def resmgmt_retry_opts(self):
        return resmgmt_opts(self.config)

    def define_collection_config(self, config_id, factory):
        """Register a factory (channel_id) -> collection config dict"""
        self._collection_configs[config_id] = factory

    def collection_config(self, config_id):
        return self._collection_configs.get(config_id)

    def channel_created(self, channel_id):
        return channel_id in self._created_channels

    def mark_channel_created(self, channel_id):
        self._created_channels.add(channel_id)

    def org_for_channel(self, channel_id):
        return self.topology.org_for_channel(channel_id)
