# SPDX-License-Identifier: Apache-2.0

"""Endorsement policies.

Policy expressions such as ``OR('Org1MSP.member', 'Org2MSP.member')``,
``AND(...)`` or ``OutOf(2, ...)`` are parsed into the policy dict understood
by fabric-sdk-py::

    {'identities': [{'role': {'name': 'member', 'mspId': 'Org1MSP'}}, ...],
     'policy': {'1-of': [{'signed-by': 0}, ...]}}
"""
import logging

from lark import Lark
from lark import Transformer
from lark.exceptions import LarkError

from hfbdd.errors import ConfigError, PolicyParseError

_logger = logging.getLogger(__name__)

ROLES = ('member', 'admin', 'peer', 'client')

s2d_grammar = r"""
    ?value: e
          | role
          | INT -> number

    dot: "."
    mspid: /[\w\d\-\$\&\+\,\:\;\=\?\@\#\|\<\>\^\*\(\)\%\!]+/
    rolename: WORD
    role: "'" mspid dot rolename "'"
    or: "OR"
    and: "AND"
    outof: "OutOf"
    logic: or | and | outof
    e : logic "(" [value ("," value)*] ")"

    %import common.WORD
    %import common.INT
    %import common.WS
    %ignore WS

    """


class String2Dict(Transformer):

    def __init__(self):
        super(String2Dict, self).__init__()
        self.id = 0
        self.roles = []

    def unique_list_of_dict(self, list_of_dict):
        unique_l = []

        for item in list_of_dict:
            if item not in unique_l:
                unique_l.append(item)

        return unique_l

    def get_logic(self, args, n):

        identities = []
        policies = []

        for v in args:
            if 'policy' in v:
                identities += v['identities']
                policies.append(v['policy'])
            else:
                identities.append({"role": {
                    'name': v['name'],
                    'mspId': v['mspId']
                }})
                policies.append({"signed-by": v['id']})

        return {
            "identities": self.unique_list_of_dict(identities),
            "policy": {
                f"{n}-of": policies
            }
        }

    def get_outof(self, items):
        n, *args = items
        return self.get_logic(args, n)

    def mspid(self, items):
        return ''.join(items)

    def rolename(self, items):
        return str(items[0])

    def role(self, items):
        mspId, dot, name = items

        # reuse the id of an identity seen before
        for role in self.roles:
            if role['name'] == name \
                    and role['mspId'] == mspId:
                break
        else:
            role = {"name": name,
                    "mspId": mspId,
                    "id": self.id}
            self.id += 1
            self.roles.append(role)

        return role

    def logic(self, items):
        logic, = items
        return logic.data

    def dot(self, *args):
        return '.'

    def number(self, items):
        return int(items[0])

    def e(self, items):
        logic, *args = items

        if logic == 'or':
            return self.get_logic(args, 1)
        elif logic == 'and':
            return self.get_logic(args, len(args))
        elif logic == 'outof':
            return self.get_outof(args)

        return items


def s2d():
    # new instance for resetting local variables on each call
    transformer = String2Dict()
    return Lark(s2d_grammar, start='value', parser='lalr',
                transformer=transformer, maybe_placeholders=False)


def parse_policy(expression):
    """Parse a policy expression into a policy dict.

    :param expression: e.g. "OutOf(1, 'Org1MSP.member', 'Org2MSP.member')"
    :return: policy dict
    :raises PolicyParseError: if the expression is malformed
    """
    try:
        policy = s2d().parse(expression)
    except LarkError as e:
        raise PolicyParseError(expression, e) from e

    if not isinstance(policy, dict) or 'policy' not in policy:
        raise PolicyParseError(expression, 'not a signature policy')

    for identity in policy['identities']:
        name = identity['role']['name']
        if name not in ROLES:
            raise PolicyParseError(
                expression, 'invalid role name "{}", must be one of {}'
                .format(name, ', '.join(ROLES)))

    return policy


def signed_by_any_member(msp_ids):
    """Policy satisfied by a signature of any member of the given MSPs"""
    return {
        'identities': [{'role': {'name': 'member', 'mspId': msp_id}}
                       for msp_id in msp_ids],
        'policy': {
            '1-of': [{'signed-by': i} for i in range(len(msp_ids))]
        }
    }


def new_chaincode_policy(topology, expression, channel_id):
    """Endorsement policy for a chaincode on a channel.

    :param topology: Topology of the network
    :param expression: policy expression, or empty for the default policy
     'signed by any member' of the orgs joined to the channel
    :param channel_id: channel ID
    :return: policy dict
    """
    if expression:
        return parse_policy(expression)

    msp_ids = []
    for org_id in topology.orgs_by_channel(channel_id):
        msp_id = topology.msp_id(org_id)
        if not msp_id:
            raise ConfigError(
                'org config not found for org ID {}'.format(org_id))
        msp_ids.append(msp_id)

    _logger.info("Returning SignedByAnyMember policy for MSPs %s", msp_ids)
    return signed_by_any_member(msp_ids)


def new_collection_config(name, policy, required_peer_count, max_peer_count,
                          blocks_to_live):
    """Private data collection config dict, as fabric-sdk-py expects"""
    return {
        'name': name,
        'policy': policy,
        'requiredPeerCount': required_peer_count,
        'maxPeerCount': max_peer_count,
        'blockToLive': blocks_to_live,
    }
