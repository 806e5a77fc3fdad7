# SPDX-License-Identifier: Apache-2.0

import asyncio
import json
import logging
import os
import random

from hfbdd.bdd.variables import resolve_all
from hfbdd.errors import BDDError, InvocationError, NoTargetsError, \
    ResponseMismatchError, UnsupportedKindError, WarmUpError
from hfbdd.fabric.dispatcher import CONCURRENT, PIPELINE, SEQUENTIAL, \
    InvocationDispatcher
from hfbdd.fabric.request import InvocationRequest
from hfbdd.fabric.resmgmt import InstallCCRequest, InstantiateCCRequest
from hfbdd.fabric.selector import pick_one
from hfbdd.util.consts import ADMIN, ALREADY_EXISTS_MSG, CC_DEFAULT_VERSION, \
    CC_INVOKE, CC_KIND_SYSTEM, CC_KIND_TEST, CC_QUERY, \
    PREMATURE_EXECUTION_MSG, USER, WARMUP_FCN
from hfbdd.util.policies import new_chaincode_policy, new_collection_config

_logger = logging.getLogger(__name__)


class CommonSteps(object):
    """Steps shared by every feature: channel creation, chaincode queries
    and invocations, chaincode deployment, ledger blocks, response
    assertions and variables.
    """

    def __init__(self, bdd_context, sleep=asyncio.sleep, rng=random):
        """
        :param bdd_context: BDDContext of the scenario
        :param sleep: coroutine function used for every wait
        :param rng: random source used to pick single peers
        """
        self.ctx = bdd_context
        self._sleep = sleep
        self._rng = rng

    @property
    def response(self):
        return self.ctx.response

    def resolve_args(self, args):
        return resolve_all(self.ctx.variables, args)

    def get_deploy_path(self, cc_type):
        """Root directory chaincode of the given kind is packaged from

        :raises UnsupportedKindError: for a kind other than test or system
        """
        if cc_type == CC_KIND_TEST:
            return os.path.join(os.getcwd(), self.ctx.test_cc_path)
        if cc_type == CC_KIND_SYSTEM:
            return os.path.join(os.getcwd(), self.ctx.system_cc_path)
        raise UnsupportedKindError('chaincode type', cc_type)

    async def wait(self, seconds):
        _logger.info("Waiting [%d] seconds", seconds)
        await self._sleep(seconds)

    # channels

    def get_channel_tx_path(self, channel_id):
        return os.path.join(os.getcwd(), self.ctx.channel_tx_path,
                            channel_id + '.tx')

    def get_channel_anchor_tx_path(self, channel_id, org_id):
        msp_id = self.ctx.topology.msp_id(org_id)
        if not msp_id:
            raise BDDError("no MSP ID for org [{}]".format(org_id))
        return os.path.join(os.getcwd(), self.ctx.channel_tx_path,
                            channel_id + msp_id + 'anchors.tx')

    async def create_channel_and_join_all_peers(self, channel_id):
        await self.create_channel_and_join_peers(channel_id, self.ctx.orgs)

    async def create_channel_and_join_peers_from_org(self, channel_id,
                                                     org_ids):
        org_list = [o for o in org_ids.split(',') if o]
        if not org_list:
            raise BDDError("must specify at least one org ID")
        await self.create_channel_and_join_peers(channel_id, org_list)

    async def create_channel_and_join_peers(self, channel_id, org_ids):
        _logger.info("Creating channel [%s] and joining all peers from orgs"
                     " %s", channel_id, org_ids)
        if not org_ids:
            raise BDDError("no orgs specified")

        for org_id in org_ids:
            targets = self.ctx.selector.local_targets(org_id)
            if not targets:
                raise NoTargetsError("no peers for org [{}]".format(org_id))
            await self.join_peers_to_channel(channel_id, org_id, targets)

    async def join_peers_to_channel(self, channel_id, org_id, targets):
        """Create the channel unless done already, update the org's anchor
        peers and join its peers.

        Nothing is sent if the org's first peer already joined.
        """
        for target in targets:
            self.ctx.topology.add_target_to_channel(target, channel_id)

        resmgmt = self.ctx.resmgmt_client(org_id, ADMIN)
        if await resmgmt.has_joined(targets[0], channel_id):
            _logger.info("Peers of org [%s] already joined channel [%s]",
                         org_id, channel_id)
            return

        retry_opts = self.ctx.resmgmt_retry_opts()
        if not self.ctx.channel_created(channel_id):
            _logger.info("Creating channel [%s]", channel_id)
            await resmgmt.save_channel(channel_id,
                                       self.get_channel_tx_path(channel_id),
                                       retry_opts=retry_opts)

        _logger.info("Updating anchor peers for org [%s] on channel [%s]",
                     org_id, channel_id)
        await resmgmt.save_channel(
            channel_id, self.get_channel_anchor_tx_path(channel_id, org_id),
            retry_opts=retry_opts)
        self.ctx.mark_channel_created(channel_id)

        await resmgmt.join_channel(channel_id, targets,
                                   retry_opts=retry_opts)

    # ledger

    def _ledger_client(self, channel_id):
        org_id = self.ctx.org_for_channel(channel_id)
        targets = self.ctx.selector.org_targets(org_id, channel_id)
        return self.ctx.channel_client(org_id, ADMIN, channel_id), targets[:1]

    async def get_channel_block_height(self, channel_id):
        client, targets = self._ledger_client(channel_id)
        return await client.query_info(targets,
                                       retry_opts=self.ctx.retry_opts())

    async def get_blocks(self, channel_id, block_num, num_blocks):
        """Blocks block_num, block_num - 1, ... down to block 0, at most
        num_blocks of them.
        """
        client, targets = self._ledger_client(channel_id)
        blocks = []
        for number in range(block_num, max(block_num - num_blocks, -1), -1):
            blocks.append(await client.query_block(
                number, targets, retry_opts=self.ctx.retry_opts()))
        return blocks

    async def display_block_from_channel(self, block_num, channel_id):
        blocks = await self.get_blocks(channel_id, block_num, 1)
        for block in blocks:
            _logger.info("%s", block)
        return blocks

    async def display_blocks_from_channel(self, num_blocks, channel_id):
        height = await self.get_channel_block_height(channel_id)
        blocks = await self.get_blocks(channel_id, height - 1, num_blocks)
        for block in blocks:
            _logger.info("%s", block)
        return blocks

    async def display_last_block_from_channel(self, channel_id):
        return await self.display_blocks_from_channel(1, channel_id)

    # queries

    async def query_cc_with_args(self, system_cc, cc_id, channel_id, args,
                                 transient_map=None, targets=None,
                                 org_id=None):
        return await self.query_cc_with_opts(
            system_cc, cc_id, channel_id, args, targets=targets,
            transient_map=transient_map, org_id=org_id)

    async def query_cc_with_opts(self, system_cc, cc_id, channel_id, args,
                                 targets, timeout=None, concurrent=True,
                                 interval=0, transient_map=None,
                                 org_id=None):
        """Query chaincode on the targets.

        :param system_cc: route the call through the system handler chain
        :param concurrent: one call to all targets, otherwise one call per
         target in order
        :param interval: seconds to wait between sequential calls
        :param org_id: org whose admin sends the call, defaults to the org
         of the last target
        :return: the payload as a string
        """
        targets = list(targets or [])
        if org_id is None:
            org_id = targets[-1].org_id if targets else self.ctx.orgs[0]

        if system_cc:
            mode = PIPELINE
        elif concurrent:
            mode = CONCURRENT
        else:
            mode = SEQUENTIAL

        dispatcher = InvocationDispatcher(
            self.ctx.channel_client(org_id, ADMIN, channel_id),
            sleep=self._sleep)
        return await dispatcher.dispatch(
            InvocationRequest.from_args(cc_id, args, transient_map),
            targets, mode=mode, kind=CC_QUERY,
            retry_opts=self.ctx.retry_opts(), timeout=timeout,
            interval=interval)

    async def query_cc(self, cc_id, args, channel_id):
        _logger.info("Querying chaincode [%s] on channel [%s] with args"
                     " [%s]", cc_id, channel_id, args)
        self.response.clear()

        arg_arr = self.resolve_args(args)
        targets = self.ctx.selector.org_targets('', channel_id)
        value = await self.query_cc_with_args(False, cc_id, channel_id,
                                              arg_arr, targets=targets,
                                              org_id=self.ctx.orgs[0])
        self.response.set(value)
        _logger.info("QueryCC return value: [%s]", value)

    async def query_cc_with_error(self, cc_id, args, channel_id,
                                  expected_error):
        try:
            await self.query_cc(cc_id, args, channel_id)
        except BDDError as e:
            if expected_error not in str(e):
                raise ResponseMismatchError(
                    "expecting error [{}] but got [{}]".format(
                        expected_error, e)) from e
            return
        raise ResponseMismatchError(
            "expecting error [{}] but got no error".format(expected_error))

    async def query_cc_on_org(self, cc_id, args, org_ids, channel_id):
        self.response.clear()

        arg_arr = self.resolve_args(args)
        targets = self.ctx.selector.org_targets(org_ids, channel_id)
        value = await self.query_cc_with_args(False, cc_id, channel_id,
                                              arg_arr, targets=targets)
        self.response.set(value)
        _logger.debug("QueryCCWithArgs return value: [%s]", value)

    async def query_cc_on_single_peer_in_org(self, cc_id, args, org_ids,
                                             channel_id):
        self.response.clear()

        targets = self.ctx.selector.org_targets(org_ids, channel_id)
        if not targets:
            raise NoTargetsError("no peers in org(s) [{}] for channel [{}]"
                                 .format(org_ids, channel_id))
        target = pick_one(targets, self._rng)
        _logger.info("Querying peer [%s]...", target.url)

        arg_arr = self.resolve_args(args)
        value = await self.query_cc_with_args(False, cc_id, channel_id,
                                              arg_arr, targets=[target])
        self.response.set(value)
        _logger.debug("QueryCCWithArgs return value: [%s]", value)

    async def query_cc_on_target_peers(self, cc_id, args, peer_ids,
                                       channel_id):
        self.response.clear()

        if not peer_ids:
            raise NoTargetsError("no target peers specified")
        targets = self.ctx.selector.targets(peer_ids)
        _logger.debug("Querying peers %s...", targets)

        arg_arr = self.resolve_args(args)
        value = await self.query_cc_with_args(False, cc_id, channel_id,
                                              arg_arr, targets=targets)
        self.response.set(value)
        _logger.debug("QueryCCWithArgs return value: [%s]", value)

    async def query_system_cc(self, cc_id, args, org_id, channel_id):
        self.response.clear()

        local_targets = self.ctx.selector.local_targets(org_id)
        if not local_targets:
            raise NoTargetsError(
                "could not get peers config for org [{}]".format(org_id))

        arg_arr = self.resolve_args(args)
        value = await self.query_cc_with_args(True, cc_id, channel_id,
                                              arg_arr,
                                              targets=local_targets[:1])
        self.response.set(value)
        _logger.debug("QueryCCWithArgs return value: [%s]", value)

    # invocations

    async def invoke_cc_with_args(self, cc_id, channel_id, targets, args,
                                  transient_map=None, user_type=USER):
        """Invoke chaincode on the targets as the given user type of the
        first org.

        :return: the payload as a string
        """
        dispatcher = InvocationDispatcher(
            self.ctx.channel_client(self.ctx.orgs[0], user_type, channel_id),
            sleep=self._sleep)
        return await dispatcher.dispatch(
            InvocationRequest.from_args(cc_id, args, transient_map),
            targets, mode=CONCURRENT, kind=CC_INVOKE,
            retry_opts=self.ctx.retry_opts())

    async def invoke_cc_with_args_as_admin(self, cc_id, channel_id, targets,
                                           args, transient_map=None):
        return await self.invoke_cc_with_args(cc_id, channel_id, targets,
                                              args, transient_map, ADMIN)

    async def invoke_cc(self, cc_id, args, channel_id):
        arg_arr = self.resolve_args(args)
        targets = self.ctx.selector.org_targets('', channel_id)
        await self.invoke_cc_with_args(cc_id, channel_id, targets, arg_arr)

    async def invoke_cc_on_org(self, cc_id, args, org_ids, channel_id):
        arg_arr = self.resolve_args(args)
        targets = self.ctx.selector.org_targets(org_ids, channel_id)
        await self.invoke_cc_with_args(cc_id, channel_id, targets, arg_arr)

    async def invoke_cc_on_target_peers(self, cc_id, args, peer_ids,
                                        channel_id):
        self.response.clear()

        if not peer_ids:
            raise NoTargetsError("no target peers specified")
        targets = self.ctx.selector.targets(peer_ids)
        _logger.debug("Invoking peers %s...", targets)

        arg_arr = self.resolve_args(args)
        value = await self.invoke_cc_with_args(cc_id, channel_id, targets,
                                               arg_arr)
        self.response.set(value)
        _logger.debug("InvokeCCWithArgs returned value: [%s]", value)

    # warm up

    async def warm_up_cc(self, cc_id, channel_id):
        _logger.info("Warming up chaincode [%s] on channel [%s]",
                     cc_id, channel_id)
        await self.warm_up_cc_on_org(cc_id, '', channel_id)

    async def warm_up_cc_on_org(self, cc_id, org_ids, channel_id):
        """Query the warmup function on every peer, one after the other,
        until the chaincode stops reporting premature execution.

        Any other call error ends the warm up.

        :raises WarmUpError: if WARMUP_MAX_ATTEMPTS attempts were made
        """
        _logger.info("Warming up chaincode [%s] on orgs [%s] and channel"
                     " [%s]", cc_id, org_ids, channel_id)
        max_attempts = self.ctx.config['WARMUP_MAX_ATTEMPTS']
        delay = self.ctx.config['WARMUP_RETRY_DELAY']
        targets = self.ctx.selector.org_targets(org_ids, channel_id)
        if not targets:
            _logger.info("No peers of orgs [%s] on channel [%s] to warm up",
                         org_ids, channel_id)
            return

        attempt = 0
        while True:
            attempt += 1
            try:
                await self.query_cc_with_opts(
                    False, cc_id, channel_id, [WARMUP_FCN], targets,
                    timeout=self.ctx.config['WARMUP_TIMEOUT'],
                    concurrent=False)
            except InvocationError as e:
                if PREMATURE_EXECUTION_MSG not in str(e):
                    _logger.info("Warm up of chaincode [%s] ended with"
                                 " error: %s", cc_id, e)
                    return
                if max_attempts and attempt >= max_attempts:
                    raise WarmUpError(
                        "chaincode [{}] not ready after {} attempts"
                        .format(cc_id, attempt)) from e
                _logger.info("Error warming up chaincode [%s]: %s."
                             " Retrying in %s seconds...", cc_id, e, delay)
                await self._sleep(delay)
            else:
                return

    # responses and variables

    def contains_in_query_value(self, cc_id, value):
        self.response.assert_contains(value)

    def equal_query_value(self, cc_id, value):
        self.response.assert_equals(value)

    def set_variable_from_cc_response(self, key):
        _logger.info("Saving value %s to variable %s",
                     self.response.value, key)
        self.ctx.variables.set(key, self.response.value)

    def set_json_variable(self, var_name, value):
        try:
            doc = json.loads(value)
        except ValueError as e:
            raise BDDError("invalid JSON: {}".format(value)) from e
        if not isinstance(doc, dict):
            raise BDDError("invalid JSON: {}".format(value))
        self.ctx.variables.set(var_name, value)

    def json_path_of_cc_response_equals(self, path, expected):
        self.response.assert_json_path_equals(path, expected)

    def json_path_of_cc_has_num_items(self, path, expected_num):
        self.response.assert_json_path_num_items(path, expected_num)

    def json_path_of_cc_response_contains(self, path, expected):
        self.response.assert_json_path_contains(path, expected)

    # chaincode deployment

    async def install_chaincode_to_all_peers(self, cc_type, cc_id, cc_path):
        _logger.info("Installing chaincode [%s] from path [%s] to all peers",
                     cc_id, cc_path)
        await self.do_install_chaincode_to_org(cc_type, cc_id, cc_path,
                                               CC_DEFAULT_VERSION, '', '')

    async def install_chaincode_to_all_peers_with_version(
            self, cc_type, cc_id, cc_version, cc_path):
        _logger.info("Installing chaincode [%s:%s] from path [%s] to all"
                     " peers", cc_id, cc_version, cc_path)
        await self.do_install_chaincode_to_org(cc_type, cc_id, cc_path,
                                               cc_version, '', '')

    async def install_chaincode_to_all_peers_except(self, cc_type, cc_id,
                                                    cc_path, exclude_regex):
        _logger.info("Installing chaincode [%s] from path [%s] to all peers"
                     " except [%s]", cc_id, cc_path, exclude_regex)
        await self.do_install_chaincode_to_org(cc_type, cc_id, cc_path,
                                               CC_DEFAULT_VERSION, '',
                                               exclude_regex)

    async def install_chaincode_to_org(self, cc_type, cc_id, cc_path,
                                       org_ids):
        await self.do_install_chaincode_to_org(cc_type, cc_id, cc_path,
                                               CC_DEFAULT_VERSION, org_ids,
                                               '')

    async def do_install_chaincode_to_org(self, cc_type, cc_id, cc_path,
                                          cc_version, org_ids,
                                          exclude_regex):
        _logger.info("Preparing to install chaincode [%s:%s] from path [%s]"
                     " to orgs [%s] - Excluded peers: [%s]", cc_id,
                     cc_version, cc_path, org_ids, exclude_regex)

        org_list = org_ids.split(',') if org_ids else self.ctx.orgs
        deploy_path = self.get_deploy_path(cc_type)

        for org_id in org_list:
            targets = self.ctx.selector.local_targets(org_id, exclude_regex)
            if not targets:
                raise NoTargetsError(
                    "no targets for chaincode [{}]".format(cc_id))

            _logger.info("... installing chaincode [%s] from path [%s] to"
                         " targets %s", cc_id, cc_path, targets)
            await self.ctx.resmgmt_client(org_id, ADMIN).install_cc(
                InstallCCRequest(cc_id, cc_path, cc_version, deploy_path),
                targets, retry_opts=self.ctx.resmgmt_retry_opts())

    def new_collections_config(self, channel_id, collection_names):
        configs = []
        if not collection_names:
            return configs
        for coll_name in collection_names.split(','):
            factory = self.ctx.collection_config(coll_name)
            if factory is None:
                raise BDDError("no collection config defined for collection"
                               " [{}]".format(coll_name))
            configs.append(factory(channel_id))
        return configs

    async def instantiate_chaincode(self, cc_type, cc_id, cc_path,
                                    channel_id, args, cc_policy,
                                    collection_names):
        await self.instantiate_chaincode_with_opts(
            cc_type, cc_id, cc_path, '', channel_id, args, cc_policy,
            collection_names)

    async def instantiate_chaincode_on_org(self, cc_type, cc_id, cc_path,
                                           org_ids, channel_id, args,
                                           cc_policy, collection_names):
        await self.instantiate_chaincode_with_opts(
            cc_type, cc_id, cc_path, org_ids, channel_id, args, cc_policy,
            collection_names)

    async def upgrade_chaincode(self, cc_type, cc_id, cc_version, cc_path,
                                channel_id, args, cc_policy,
                                collection_names):
        await self.instantiate_chaincode_with_opts(
            cc_type, cc_id, cc_path, '', channel_id, args, cc_policy,
            collection_names, cc_version=cc_version, upgrade=True)

    async def upgrade_chaincode_with_error(self, cc_type, cc_id, cc_version,
                                           cc_path, channel_id, args,
                                           cc_policy, collection_names,
                                           expected_error):
        try:
            await self.upgrade_chaincode(cc_type, cc_id, cc_version, cc_path,
                                         channel_id, args, cc_policy,
                                         collection_names)
        except Exception as e:
            if expected_error not in str(e):
                raise ResponseMismatchError(
                    "expecting error [{}] but got [{}]".format(
                        expected_error, e)) from e
            return
        raise ResponseMismatchError(
            "expecting error [{}] but got no error".format(expected_error))

    async def instantiate_chaincode_with_opts(self, cc_type, cc_id, cc_path,
                                              org_ids, channel_id, args,
                                              cc_policy, collection_names,
                                              all_peers=False,
                                              cc_version=CC_DEFAULT_VERSION,
                                              upgrade=False,
                                              tolerate_exists=True):
        """Instantiate or upgrade chaincode on the first target of the orgs,
        or on all of them.

        :param tolerate_exists: log an "already exists" error instead of
         raising it
        """
        operation = 'Upgrading' if upgrade else 'Instantiating'
        targets = self.ctx.selector.org_targets(org_ids, channel_id)
        if not targets:
            raise NoTargetsError(
                "no peers found for orgs [{}]".format(org_ids))
        if not all_peers:
            targets = targets[:1]

        policy = new_chaincode_policy(self.ctx.topology, cc_policy,
                                      channel_id)
        collections_config = self.new_collections_config(channel_id,
                                                         collection_names)

        _logger.info("%s chaincode [%s:%s] from path [%s] on channel [%s]"
                     " with args [%s] and CC policy [%s] and collection"
                     " policy [%s] to the following peers: %s", operation,
                     cc_id, cc_version, cc_path, channel_id, args, cc_policy,
                     collection_names, targets)

        request = InstantiateCCRequest(cc_id, cc_path, cc_version,
                                       args.split(','), policy,
                                       collections_config)
        resmgmt = self.ctx.resmgmt_client(targets[-1].org_id, ADMIN)
        send = resmgmt.upgrade_cc if upgrade else resmgmt.instantiate_cc
        try:
            await send(channel_id, request, targets,
                       timeout=self.ctx.config['INSTANTIATE_TIMEOUT'],
                       retry_opts=self.ctx.resmgmt_retry_opts())
        except Exception as e:
            if not tolerate_exists or ALREADY_EXISTS_MSG not in str(e):
                raise
            _logger.warning("error from %s chaincode: %s", operation, e)

    async def deploy_chaincode(self, cc_type, cc_id, cc_path, channel_id,
                               args, cc_policy, collection_names):
        _logger.info("Installing and instantiating chaincode [%s] from path"
                     " [%s] to channel [%s] with args [%s] and CC policy"
                     " [%s] and collection policy [%s]", cc_id, cc_path,
                     channel_id, args, cc_policy, collection_names)
        await self.deploy_chaincode_to_org(cc_type, cc_id, cc_path, '',
                                           channel_id, args, cc_policy,
                                           collection_names)

    async def deploy_chaincode_to_org(self, cc_type, cc_id, cc_path,
                                      org_ids, channel_id, args, cc_policy,
                                      collection_names):
        """Install the chaincode on every peer of the orgs that does not
        have it yet, then instantiate it on all of them.
        """
        targets = self.ctx.selector.org_targets(org_ids, channel_id)
        if not targets:
            raise NoTargetsError(
                "no peers found for orgs [{}]".format(org_ids))

        for target in targets:
            resmgmt = self.ctx.resmgmt_client(target.org_id, ADMIN)
            if await resmgmt.is_installed(target, cc_id):
                continue
            await resmgmt.install_cc(
                InstallCCRequest(cc_id, cc_path, CC_DEFAULT_VERSION,
                                 self.get_deploy_path(cc_type)),
                [target], retry_opts=self.ctx.resmgmt_retry_opts())

        await self.instantiate_chaincode_with_opts(
            cc_type, cc_id, cc_path, org_ids, channel_id, args, cc_policy,
            collection_names, all_peers=True, tolerate_exists=False)

    def define_collection_config(self, config_id, collection, policy,
                                 required_peer_count, max_peer_count,
                                 blocks_to_live):
        _logger.info("Defining collection config [%s] for collection [%s] -"
                     " policy=[%s], requiredPeerCount=[%d],"
                     " maxPeerCount=[%d], blocksToLive=[%d]", config_id,
                     collection, policy, required_peer_count, max_peer_count,
                     blocks_to_live)

        def factory(channel_id):
            return new_collection_config(
                collection,
                new_chaincode_policy(self.ctx.topology, policy, channel_id),
                required_peer_count, max_peer_count, blocks_to_live)

        self.ctx.define_collection_config(config_id, factory)

    def register_steps(self, s):
        """Register the steps and scenario hooks on a StepRegistry"""
        s.before_scenario(self.ctx.before_scenario)
        s.after_scenario(self.ctx.after_scenario)

        s.step(r'^the channel "([^"]*)" is created and all peers have joined$', self.create_channel_and_join_all_peers)  # noqa
        s.step(r'^the channel "([^"]*)" is created and all peers from org "([^"]*)" have joined$', self.create_channel_and_join_peers_from_org)  # noqa
        s.step(r'^we wait (\d+) seconds$', self.wait)
        s.step(r'^client queries chaincode "([^"]*)" with args "([^"]*)" on all peers in the "([^"]*)" org on the "([^"]*)" channel$', self.query_cc_on_org)  # noqa
        s.step(r'^client queries chaincode "([^"]*)" with args "([^"]*)" on a single peer in the "([^"]*)" org on the "([^"]*)" channel$', self.query_cc_on_single_peer_in_org)  # noqa
        s.step(r'^client queries chaincode "([^"]*)" with args "([^"]*)" on peers "([^"]*)" on the "([^"]*)" channel$', self.query_cc_on_target_peers)  # noqa
        s.step(r'^client queries system chaincode "([^"]*)" with args "([^"]*)" on org "([^"]*)" peer on the "([^"]*)" channel$', self.query_system_cc)  # noqa
        s.step(r'^client queries chaincode "([^"]*)" with args "([^"]*)" on the "([^"]*)" channel$', self.query_cc)  # noqa
        s.step(r'^client queries chaincode "([^"]*)" with args "([^"]*)" on the "([^"]*)" channel then the error response should contain "([^"]*)"$', self.query_cc_with_error)  # noqa
        s.step(r'^response from "([^"]*)" to client contains value "([^"]*)"$', self.contains_in_query_value)  # noqa
        s.step(r'^response from "([^"]*)" to client equal value "([^"]*)"$', self.equal_query_value)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" version "([^"]*)" is installed from path "([^"]*)" to all peers$', self.install_chaincode_to_all_peers_with_version)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" is installed from path "([^"]*)" to all peers$', self.install_chaincode_to_all_peers)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" is installed from path "([^"]*)" to all peers in the "([^"]*)" org$', self.install_chaincode_to_org)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" is installed from path "([^"]*)" to all peers except "([^"]*)"$', self.install_chaincode_to_all_peers_except)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" is instantiated from path "([^"]*)" on all peers in the "([^"]*)" org on the "([^"]*)" channel with args "([^"]*)" with endorsement policy "([^"]*)" with collection policy "([^"]*)"$', self.instantiate_chaincode_on_org)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" is instantiated from path "([^"]*)" on the "([^"]*)" channel with args "([^"]*)" with endorsement policy "([^"]*)" with collection policy "([^"]*)"$', self.instantiate_chaincode)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" is upgraded with version "([^"]*)" from path "([^"]*)" on the "([^"]*)" channel with args "([^"]*)" with endorsement policy "([^"]*)" with collection policy "([^"]*)"$', self.upgrade_chaincode)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" is upgraded with version "([^"]*)" from path "([^"]*)" on the "([^"]*)" channel with args "([^"]*)" with endorsement policy "([^"]*)" with collection policy "([^"]*)" then the error response should contain "([^"]*)"$', self.upgrade_chaincode_with_error)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" is deployed from path "([^"]*)" to all peers in the "([^"]*)" org on the "([^"]*)" channel with args "([^"]*)" with endorsement policy "([^"]*)" with collection policy "([^"]*)"$', self.deploy_chaincode_to_org)  # noqa
        s.step(r'^"([^"]*)" chaincode "([^"]*)" is deployed from path "([^"]*)" to all peers on the "([^"]*)" channel with args "([^"]*)" with endorsement policy "([^"]*)" with collection policy "([^"]*)"$', self.deploy_chaincode)  # noqa
        s.step(r'^chaincode "([^"]*)" is warmed up on all peers in the "([^"]*)" org on the "([^"]*)" channel$', self.warm_up_cc_on_org)  # noqa
        s.step(r'^chaincode "([^"]*)" is warmed up on all peers on the "([^"]*)" channel$', self.warm_up_cc)  # noqa
        s.step(r'^client invokes chaincode "([^"]*)" with args "([^"]*)" on all peers in the "([^"]*)" org on the "([^"]*)" channel$', self.invoke_cc_on_org)  # noqa
        s.step(r'^client invokes chaincode "([^"]*)" with args "([^"]*)" on the "([^"]*)" channel$', self.invoke_cc)  # noqa
        s.step(r'^client invokes chaincode "([^"]*)" with args "([^"]*)" on peers "([^"]*)" on the "([^"]*)" channel$', self.invoke_cc_on_target_peers)  # noqa
        s.step(r'^collection config "([^"]*)" is defined for collection "([^"]*)" as policy="([^"]*)", requiredPeerCount=(\d+), maxPeerCount=(\d+), and blocksToLive=(\d+)$', self.define_collection_config)  # noqa
        s.step(r'^block (\d+) from the "([^"]*)" channel is displayed$', self.display_block_from_channel)  # noqa
        s.step(r'^the last (\d+) blocks from the "([^"]*)" channel are displayed$', self.display_blocks_from_channel)  # noqa
        s.step(r'^the last block from the "([^"]*)" channel is displayed$', self.display_last_block_from_channel)  # noqa
        s.step(r'^the response is saved to variable "([^"]*)"$', self.set_variable_from_cc_response)  # noqa
        s.step(r"^variable \"([^\"]*)\" is assigned the JSON value '([^']*)'$", self.set_json_variable)  # noqa
        s.step(r'^the JSON path "([^"]*)" of the response equals "([^"]*)"$', self.json_path_of_cc_response_equals)  # noqa
        s.step(r'^the JSON path "([^"]*)" of the response has (\d+) items$', self.json_path_of_cc_has_num_items)  # noqa
        s.step(r'^the JSON path "([^"]*)" of the response contains "([^"]*)"$', self.json_path_of_cc_response_contains)  # noqa
