# SPDX-License-Identifier: Apache-2.0
#
import os

DEFAULT = {
    # seconds
    'EXECUTE_TIMEOUT': 180,
    'INSTANTIATE_TIMEOUT': 300,
    'WARMUP_TIMEOUT': 300,
    'WARMUP_RETRY_DELAY': 5,
    # None means no cap on warm-up attempts
    'WARMUP_MAX_ATTEMPTS': 120,

    'RETRY_ATTEMPTS': 3,
    'RETRY_INITIAL_BACKOFF': 0.5,
    'RETRY_MAX_BACKOFF': 60,
    'RETRY_BACKOFF_FACTOR': 2.0,

    'RESMGMT_RETRY_ATTEMPTS': 4,
    'RESMGMT_RETRY_INITIAL_BACKOFF': 0.5,
    'RESMGMT_RETRY_MAX_BACKOFF': 5,
    'RESMGMT_RETRY_BACKOFF_FACTOR': 2.0,

    # chaincode status codes retried on top of the channel client defaults
    'CC_CODES_FOR_RETRY': [404],

    'TEST_CC_PATH': 'fixtures/testdata',
    'SYSTEM_CC_PATH': 'fixtures/config/fabric',
    # channel and anchor peer update transactions
    'CHANNEL_TX_PATH': 'fixtures/channel',
}

ENV_PREFIX = 'HFBDD_'

# keys an override may set to None
NULLABLE = ('WARMUP_MAX_ATTEMPTS',)


def _number(raw):
    raw = raw.strip()
    return float(raw) if '.' in raw else int(raw)


def _convert(key, default, raw):
    if raw.strip().lower() in ('', 'none'):
        if key not in NULLABLE:
            raise ValueError('[{}] cannot be unset'.format(key))
        return None
    if isinstance(default, bool):
        return raw.lower() in ('1', 'true', 'yes')
    if isinstance(default, list):
        return [int(x) for x in raw.split(',') if x.strip()]
    if isinstance(default, (int, float)):
        return _number(raw)
    return raw


def get_config(environ=None):
    """Return the defaults, overridden by HFBDD_<KEY> environment variables.

    :param environ: mapping to read overrides from, defaults to os.environ
    :return: a new dict
    """
    if environ is None:
        environ = os.environ
    config = dict(DEFAULT)
    for key, default in DEFAULT.items():
        raw = environ.get(ENV_PREFIX + key)
        if raw is not None:
            config[key] = _convert(key, default, raw)
    return config
