# SPDX-License-Identifier: Apache-2.0
#
import copy

from hfbdd.config.default import get_config
from hfbdd.fabric.channel_client import ChannelClient
from hfbdd.fabric.request import ProposalResponse
from hfbdd.fabric.resmgmt import ResourceManager
from hfbdd.fabric.topology import Topology

PEER0_ORG1 = 'peer0.org1.example.com'
PEER1_ORG1 = 'peer1.org1.example.com'
PEER0_ORG2 = 'peer0.org2.example.com'

NETWORK = {
    'name': 'test-network',
    'organizations': {
        'org1.example.com': {
            'mspid': 'Org1MSP',
            'peers': [PEER0_ORG1, PEER1_ORG1],
        },
        'org2.example.com': {
            'mspid': 'Org2MSP',
            'peers': [PEER0_ORG2],
        },
    },
    'peers': {
        PEER0_ORG1: {
            'url': 'localhost:7051',
            'grpcOptions': {
                'grpc.ssl_target_name_override': PEER0_ORG1,
            },
            'tlsCACerts': {
                'path': 'test/fixtures/tls/ca.org1.example.com-cert.pem',
            },
        },
        PEER1_ORG1: {
            'url': 'localhost:8051',
        },
        PEER0_ORG2: {
            'url': 'localhost:9051',
        },
    },
    'channels': {
        'mychannel': {
            'peers': {
                PEER0_ORG1: {},
                PEER1_ORG1: {},
                PEER0_ORG2: {},
            },
        },
        'org1channel': {
            'peers': {
                PEER0_ORG1: {},
            },
        },
    },
}


def new_topology():
    return Topology(copy.deepcopy(NETWORK))


def new_config(**overrides):
    config = get_config({})
    config.update(overrides)
    return config


class SleepRecorder(object):
    """Replaces asyncio.sleep, remembering the requested delays"""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class FakeChannelClient(ChannelClient):
    """ChannelClient answering from a handler instead of the network.

    handler(kind, request, targets) returns the payload or raises.
    Every call is recorded as (kind, fcn, args, [peer IDs]), block queries
    as ('block', number, [peer IDs]). blocks is the ledger.
    """

    def __init__(self, channel_id='mychannel', handler=None, sleep=None,
                 blocks=None):
        super(FakeChannelClient, self).__init__(
            channel_id, sleep=sleep or SleepRecorder())
        self.handler = handler or (lambda kind, request, targets: b'')
        self.blocks = blocks if blocks is not None else []
        self.calls = []

    def _handle(self, kind, request, targets):
        self.calls.append((kind, request.fcn, request.args,
                           [t.peer_id for t in targets]))
        return self.handler(kind, request, targets)

    async def send_query(self, request, targets):
        return self._handle('query', request, targets)

    async def send_invoke(self, request, targets):
        return self._handle('invoke', request, targets)

    async def send_proposal(self, request, target):
        result = self._handle('proposal', request, [target])
        if isinstance(result, ProposalResponse):
            return result
        return ProposalResponse(target.peer_id, payload=result)

    async def send_query_info(self, targets):
        return len(self.blocks)

    async def send_query_block(self, block_number, targets):
        self.calls.append(('block', block_number,
                           [t.peer_id for t in targets]))
        return self.blocks[block_number]


class FakeResourceManager(ResourceManager):
    """ResourceManager recording lifecycle calls.

    installed maps peer ID to the chaincode names installed on it, channels
    to the channel IDs it joined.
    """

    def __init__(self, org_id, installed=None, error=None, channels=None):
        super(FakeResourceManager, self).__init__(org_id,
                                                  sleep=SleepRecorder())
        self.installed = installed if installed is not None else {}
        self.channels = channels if channels is not None else {}
        self.error = error
        self.calls = []

    async def send_install(self, request, targets):
        self.calls.append(('install', request, targets))
        for t in targets:
            self.installed.setdefault(t.peer_id, []).append(request.name)

    async def send_instantiate(self, channel_id, request, targets):
        self.calls.append(('instantiate', channel_id, request, targets))
        if self.error is not None:
            raise self.error

    async def send_upgrade(self, channel_id, request, targets):
        self.calls.append(('upgrade', channel_id, request, targets))
        if self.error is not None:
            raise self.error

    async def send_query_installed(self, target):
        return list(self.installed.get(target.peer_id, []))

    async def send_save_channel(self, channel_id, tx_path):
        self.calls.append(('save_channel', channel_id, tx_path))

    async def send_join_channel(self, channel_id, targets):
        self.calls.append(('join_channel', channel_id, targets))
        for t in targets:
            self.channels.setdefault(t.peer_id, []).append(channel_id)

    async def send_query_channels(self, target):
        return list(self.channels.get(target.peer_id, []))
