# SPDX-License-Identifier: Apache-2.0

import logging

from hfbdd.util.consts import SSL_TARGET_NAME_OVERRIDE_OPTS

_logger = logging.getLogger(__name__ + ".target")


class Target(object):
    """ A peer node in the network that a call can be sent to.

    It has a specific gRPC address and belongs to one organization.
    """

    def __init__(self, url, org_id, msp_id=None, peer_id=None,
                 grpc_options=None, server_name_override=None,
                 tls_ca_cert_path=None):
        """

        :param url: Endpoint of the peer's gRPC service
        :param org_id: ID of the organization owning the peer
        :param msp_id: MSP ID of the organization
        :param peer_id: Local ID of the peer, the peer's name in the
         network profile
        :param grpc_options: gRPC connection options
        :param server_name_override: TLS server name to expect
        :param tls_ca_cert_path: file path of tls root ca's certificate
        """
        self.url = url
        self.org_id = org_id
        self.msp_id = msp_id
        self.peer_id = peer_id or server_name_override or url
        self.grpc_options = dict(grpc_options or {})
        self.server_name_override = server_name_override
        self.tls_ca_cert_path = tls_ca_cert_path

    def __eq__(self, other):
        return isinstance(other, Target) and \
            (self.url, self.org_id, self.peer_id) == \
            (other.url, other.org_id, other.peer_id)

    def __hash__(self):
        return hash((self.url, self.org_id, self.peer_id))

    def __repr__(self):
        return "Target({}@{}:{})".format(self.peer_id, self.org_id, self.url)


def create_target(name, org_id, info, msp_id=None):
    """Factory method to construct a target from a network-profile peer entry

    :param name: name of the peer in the profile
    :param org_id: ID of the organization owning the peer
    :param info: peer info dict, e.g. url, grpcOptions, tlsCACerts
    :param msp_id: MSP ID of the organization
    :return: a Target instance
    """
    grpc_options = info.get('grpcOptions') or {}

    server_name_override = None
    for opt in SSL_TARGET_NAME_OVERRIDE_OPTS:
        value = grpc_options.get(opt)
        if isinstance(value, str):
            server_name_override = value
            break

    tls_ca_cert_path = (info.get('tlsCACerts') or {}).get('path')

    return Target(url=info.get('url'), org_id=org_id, msp_id=msp_id,
                  peer_id=name, grpc_options=grpc_options,
                  server_name_override=server_name_override,
                  tls_ca_cert_path=tls_ca_cert_path)
