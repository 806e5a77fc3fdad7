# SPDX-License-Identifier: Apache-2.0

CC_QUERY = "query"
CC_INVOKE = "invoke"

# user types a channel client can act as
ADMIN = "Admin"
USER = "User"

# chaincode deploy-path kinds
CC_KIND_TEST = "test"
CC_KIND_SYSTEM = "system"

CC_DEFAULT_VERSION = "v1"

WARMUP_FCN = "warmup"
PREMATURE_EXECUTION_MSG = "premature execution - chaincode"
ALREADY_EXISTS_MSG = "already exists"

SUCCESS_STATUS = 200

SSL_TARGET_NAME_OVERRIDE_OPTS = ('grpc.ssl_target_name_override',
                                 'ssl-target-name-override')
