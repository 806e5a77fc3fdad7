# SPDX-License-Identifier: Apache-2.0
#
import unittest

from hfbdd.config.default import DEFAULT, get_config


class ConfigTest(unittest.TestCase):

    def test_defaults(self):
        config = get_config({})
        self.assertEqual(DEFAULT, config)
        self.assertIsNot(DEFAULT, config)
        self.assertEqual(5, config['WARMUP_RETRY_DELAY'])
        self.assertEqual([404], config['CC_CODES_FOR_RETRY'])

    def test_env_overrides(self):
        config = get_config({
            'HFBDD_WARMUP_RETRY_DELAY': '1',
            'HFBDD_RETRY_INITIAL_BACKOFF': '0.25',
            'HFBDD_CC_CODES_FOR_RETRY': '404,500',
            'HFBDD_TEST_CC_PATH': 'chaincode',
            'HFBDD_WARMUP_MAX_ATTEMPTS': 'none',
            'UNRELATED': 'x',
        })
        self.assertEqual(1, config['WARMUP_RETRY_DELAY'])
        self.assertEqual(0.25, config['RETRY_INITIAL_BACKOFF'])
        self.assertEqual([404, 500], config['CC_CODES_FOR_RETRY'])
        self.assertEqual('chaincode', config['TEST_CC_PATH'])
        self.assertIsNone(config['WARMUP_MAX_ATTEMPTS'])
        self.assertNotIn('UNRELATED', config)

    def test_bad_value(self):
        with self.assertRaises(ValueError):
            get_config({'HFBDD_EXECUTE_TIMEOUT': 'soon'})

    def test_fractional_seconds(self):
        config = get_config({'HFBDD_RETRY_MAX_BACKOFF': '2.5',
                             'HFBDD_RETRY_BACKOFF_FACTOR': '3'})
        self.assertEqual(2.5, config['RETRY_MAX_BACKOFF'])
        self.assertEqual(3, config['RETRY_BACKOFF_FACTOR'])

    def test_none_only_where_allowed(self):
        for key in ('HFBDD_RETRY_ATTEMPTS', 'HFBDD_EXECUTE_TIMEOUT'):
            with self.assertRaises(ValueError):
                get_config({key: 'none'})


if __name__ == '__main__':
    unittest.main()
