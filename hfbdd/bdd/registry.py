# SPDX-License-Identifier: Apache-2.0

import inspect
import logging
import re

from hfbdd.errors import StepNotFoundError

_logger = logging.getLogger(__name__)

_GROUP = re.compile(r'\((?!\?)((?:\\.|[^()\\])*)\)')
_INT_GROUP = r'\d+'


async def _call(fn, *args):
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class Step(object):

    def __init__(self, pattern, fn):
        self.pattern = pattern
        self.regex = re.compile(pattern)
        self.fn = fn
        self._int_groups = [g == _INT_GROUP for g in _GROUP.findall(pattern)]

    def match(self, text):
        m = self.regex.match(text)
        if not m:
            return None
        args = []
        for i, value in enumerate(m.groups()):
            if i < len(self._int_groups) and self._int_groups[i]:
                value = int(value)
            args.append(value)
        return args


class StepRegistry(object):
    """Maps step text to step functions by regular expression.

    Groups written as ``(\\d+)`` are passed to the step as int, every other
    group as str. Steps and hooks may be plain functions or coroutines.
    """

    def __init__(self):
        self._steps = []
        self._before_scenario = []
        self._after_scenario = []

    def step(self, pattern, fn):
        self._steps.append(Step(pattern, fn))

    def before_scenario(self, fn):
        self._before_scenario.append(fn)

    def after_scenario(self, fn):
        self._after_scenario.append(fn)

    @property
    def steps(self):
        return list(self._steps)

    def find(self, text):
        """Return (fn, args) of the first step matching text"""
        for step in self._steps:
            args = step.match(text)
            if args is not None:
                return step.fn, args
        raise StepNotFoundError(text)

    async def run_step(self, text):
        fn, args = self.find(text)
        _logger.info('Step: %s', text)
        return await _call(fn, *args)

    async def run_scenario(self, name, steps):
        """Run the before hooks, every step in order, then the after hooks.

        The after hooks run even if a step fails.
        """
        for hook in self._before_scenario:
            await _call(hook, name)
        try:
            for text in steps:
                await self.run_step(text)
        finally:
            for hook in self._after_scenario:
                await _call(hook, name)
