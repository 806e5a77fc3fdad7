# SPDX-License-Identifier: Apache-2.0

import asyncio
import logging

from hfbdd.fabric.retry import Retrier, RetryOpts

_logger = logging.getLogger(__name__)


class InstallCCRequest(object):

    def __init__(self, name, path, version, deploy_path):
        """
        :param name: chaincode name
        :param path: chaincode import path
        :param version: chaincode version
        :param deploy_path: root directory the chaincode is packaged from
        """
        self.name = name
        self.path = path
        self.version = version
        self.deploy_path = deploy_path


class InstantiateCCRequest(object):

    def __init__(self, name, path, version, args=None, policy=None,
                 collections_config=None):
        """
        :param name: chaincode name
        :param path: chaincode import path
        :param version: chaincode version
        :param args: list of init arguments, function first
        :param policy: endorsement policy dict, see hfbdd.util.policies
        :param collections_config: list of collection config dicts
        """
        self.name = name
        self.path = path
        self.version = version
        self.args = list(args or [])
        self.policy = policy
        self.collections_config = list(collections_config or [])


class ResourceManager(object):
    """Channel and chaincode lifecycle operations of one org's admin.

    Retries transient errors according to the RetryOpts given to each call;
    subclasses implement the send_* coroutines.
    """

    def __init__(self, org_id, sleep=asyncio.sleep):
        self._org_id = org_id
        self._sleep = sleep

    @property
    def org_id(self):
        return self._org_id

    async def install_cc(self, request, targets, retry_opts=None):
        return await self._retry(
            lambda: self.send_install(request, targets), retry_opts)

    async def instantiate_cc(self, channel_id, request, targets,
                             timeout=None, retry_opts=None):
        return await self._retry(
            lambda: self._bounded(
                self.send_instantiate(channel_id, request, targets),
                timeout),
            retry_opts)

    async def upgrade_cc(self, channel_id, request, targets, timeout=None,
                         retry_opts=None):
        return await self._retry(
            lambda: self._bounded(
                self.send_upgrade(channel_id, request, targets), timeout),
            retry_opts)

    async def query_installed_chaincodes(self, target):
        """Names of the chaincodes installed on target"""
        return await self.send_query_installed(target)

    async def is_installed(self, target, cc_name):
        return cc_name in await self.query_installed_chaincodes(target)

    async def save_channel(self, channel_id, tx_path, retry_opts=None):
        """Create a channel, or update its configuration, from a channel
        configuration transaction.

        :param tx_path: path of the transaction file, e.g. a channel
         creation or an anchor peers update
        """
        return await self._retry(
            lambda: self.send_save_channel(channel_id, tx_path), retry_opts)

    async def join_channel(self, channel_id, targets, retry_opts=None):
        return await self._retry(
            lambda: self.send_join_channel(channel_id, targets), retry_opts)

    async def query_channels(self, target):
        """IDs of the channels target has joined"""
        return await self.send_query_channels(target)

    async def has_joined(self, target, channel_id):
        return channel_id in await self.query_channels(target)

    async def _bounded(self, coro, timeout):
        if not timeout:
            return await coro
        return await asyncio.wait_for(coro, timeout)

    async def _retry(self, fn, retry_opts):
        retrier = Retrier(retry_opts or RetryOpts(), sleep=self._sleep)
        return await retrier.invoke(fn)

    async def send_install(self, request, targets):
        raise NotImplementedError

    async def send_instantiate(self, channel_id, request, targets):
        raise NotImplementedError

    async def send_upgrade(self, channel_id, request, targets):
        raise NotImplementedError

    async def send_query_installed(self, target):
        raise NotImplementedError

    async def send_save_channel(self, channel_id, tx_path):
        raise NotImplementedError

    async def send_join_channel(self, channel_id, targets):
        raise NotImplementedError

    async def send_query_channels(self, target):
        raise NotImplementedError
