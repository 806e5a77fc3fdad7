# SPDX-License-Identifier: Apache-2.0

"""Scenario variables and the ${...} argument template resolver.

Given::

    vars = {"var1": "value1", "var2": "value2"}

then ``"${var1}"`` resolves to ``"value1"`` and ``"X_${var1}_${var2}"`` to
``"X_value1_value2"``. A variable holding a comma-separated value can be
indexed; given ``arr1 = "value1,value2,value3"``,
``"${arr1[0]_arr1[1]_arr1[2]}"`` resolves to ``"value1_value2_value3"``.
"""
import logging
import re

from hfbdd.errors import IndexOutOfRangeError, UnresolvedVariableError

_logger = logging.getLogger(__name__)

ARG_SEPARATOR = ','
ITEM_SEPARATOR = ','
INDEX_JOINER = '_'

_PLACEHOLDER = re.compile(r'\$\{(.*?)\}')
_INDEX_TERM = re.compile(r'([^\[\]]+)\[(-?\d+)\]')


class VariableStore(object):
    """Name to string bindings shared by the steps of one scenario."""

    def __init__(self):
        self._vars = dict()

    def set(self, name, value):
        _logger.debug('Setting variable [%s] to [%s]', name, value)
        self._vars[name] = value

    def get(self, name, default=None):
        return self._vars.get(name, default)

    def clear(self):
        self._vars.clear()

    def __contains__(self, name):
        return name in self._vars

    def __len__(self):
        return len(self._vars)


def _lookup(variables, name):
    if name not in variables:
        raise UnresolvedVariableError(name)
    return variables.get(name)


def _index_terms(expr):
    """Split ``a[0]_b[1]`` into [('a', 0), ('b', 1)].

    Returns None when expr is not an index-expression sequence.
    """
    parts = expr.split(']' + INDEX_JOINER)
    terms = []
    for i, part in enumerate(parts):
        if i < len(parts) - 1:
            part += ']'
        m = _INDEX_TERM.fullmatch(part)
        if not m:
            return None
        terms.append((m.group(1), int(m.group(2))))
    return terms


def _resolve_expr(variables, expr):
    terms = _index_terms(expr)
    if terms is None:
        return _lookup(variables, expr)

    values = []
    for name, index in terms:
        items = _lookup(variables, name).split(ITEM_SEPARATOR)
        if index < 0 or index >= len(items):
            raise IndexOutOfRangeError(name, index, len(items))
        values.append(items[index])
    return INDEX_JOINER.join(values)


def resolve(variables, arg):
    """Substitute every ${...} placeholder of a single argument.

    :param variables: a VariableStore (or any object with get/__contains__)
    :param arg: argument text
    :return: the argument with all placeholders replaced
    :raises UnresolvedVariableError: a referenced variable is not set
    :raises IndexOutOfRangeError: an index is outside the variable's items
    """
    return _PLACEHOLDER.sub(
        lambda m: _resolve_expr(variables, m.group(1).strip()), arg)


def resolve_all(variables, args):
    """Split a comma-separated argument string and resolve each argument.

    The split is done on the raw text, so resolved values may contain
    commas without producing extra arguments.

    :param variables: a VariableStore
    :param args: comma-separated arguments
    :return: list of resolved arguments
    """
    return [resolve(variables, arg) for arg in args.split(ARG_SEPARATOR)]
