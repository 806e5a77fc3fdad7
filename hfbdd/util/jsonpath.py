# SPDX-License-Identifier: Apache-2.0

"""Minimal gjson-style path lookup over decoded JSON documents.

Paths are dot separated keys. A numeric key indexes into an array, ``#``
returns the length of an array and ``#.key`` collects ``key`` from every
element of an array, e.g.::

    get({"a": [{"b": 1}, {"b": 2}]}, "a.#")    -> 2
    get({"a": [{"b": 1}, {"b": 2}]}, "a.#.b")  -> [1, 2]
    get({"a": [{"b": 1}, {"b": 2}]}, "a.1.b")  -> 2
"""

_MISSING = object()


def _get(node, keys):
    if not keys:
        return node

    key, rest = keys[0], keys[1:]

    if isinstance(node, list):
        if key == '#':
            if not rest:
                return len(node)
            values = []
            for item in node:
                value = _get(item, rest)
                if value is not _MISSING:
                    values.append(value)
            return values
        if key.isdigit() and int(key) < len(node):
            return _get(node[int(key)], rest)
        return _MISSING

    if isinstance(node, dict) and key in node:
        return _get(node[key], rest)

    return _MISSING


def get(doc, path, default=None):
    """Return the value at path in doc, or default if the path is absent"""
    value = _get(doc, path.split('.') if path else [])
    return default if value is _MISSING else value


def as_string(value):
    """String value of a path result, '' for anything but a string"""
    return value if isinstance(value, str) else ''


def as_number(value):
    """Numeric value of a path result, 0 for anything but a number"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def as_list(value):
    if value is None:
        return []
    return value if isinstance(value, list) else [value]
