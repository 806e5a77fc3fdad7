# SPDX-License-Identifier: Apache-2.0

import json
import logging

from hfbdd.errors import ResponseMismatchError
from hfbdd.util import jsonpath

_logger = logging.getLogger(__name__)


class ResponseCache(object):
    """Holds the most recent chaincode response of a scenario."""

    def __init__(self):
        self._value = ''

    @property
    def value(self):
        return self._value

    def set(self, value):
        self._value = value

    def clear(self):
        self._value = ''

    def assert_contains(self, expected):
        _logger.info("Query value %s and tested value %s",
                     self._value, expected)
        if expected not in self._value:
            raise ResponseMismatchError(
                "Query value({}) doesn't contain expected value({})"
                .format(self._value, expected))

    def assert_equals(self, expected):
        _logger.info("Query value %s and tested value %s",
                     self._value, expected)
        if self._value != expected:
            raise ResponseMismatchError(
                "Query value({}) doesn't equal expected value({})"
                .format(self._value, expected))

    def json_path(self, path):
        """Look up a path in the response decoded as JSON.

        A response that is not valid JSON resolves every path to None.
        """
        try:
            doc = json.loads(self._value)
        except ValueError:
            _logger.warning('Response is not JSON: %s', self._value)
            return None
        return jsonpath.get(doc, path)

    def assert_json_path_equals(self, path, expected):
        value = jsonpath.as_string(self.json_path(path))
        _logger.info("Path [%s] of JSON %s resolves to %s",
                     path, self._value, value)
        if value != expected:
            raise ResponseMismatchError(
                "JSON path resolves to [{}] which is not the expected value"
                " [{}]".format(value, expected))

    def assert_json_path_num_items(self, path, expected_num):
        num = int(jsonpath.as_number(self.json_path(path)))
        _logger.info("Path [%s] of JSON %s resolves to %d items",
                     path, self._value, num)
        if num != expected_num:
            raise ResponseMismatchError(
                "JSON path resolves to [{}] items which is not the expected"
                " number of items [{}]".format(num, expected_num))

    def assert_json_path_contains(self, path, expected):
        values = jsonpath.as_list(self.json_path(path))
        _logger.info("Path [%s] of JSON %s resolves to %s",
                     path, self._value, values)
        if expected not in [jsonpath.as_string(v) for v in values]:
            raise ResponseMismatchError(
                "JSON path resolves to [{}] which is not the expected value"
                " [{}]".format(values, expected))
