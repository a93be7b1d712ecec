# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

"""
Overlap detection for path patterns.

Patterns know three wildcards: ``?`` matches one character except ``/``,
``*`` matches any run of characters except ``/`` and ``**`` matches
any run of characters, including ``/``.
"""

from functools import lru_cache

import carver.typing as T

_LITERAL = 0
_ANY_ONE = 1
_STAR = 2
_DOUBLE_STAR = 3


def _tokenize(pattern: str) -> T.Tuple[T.Tuple[int, str], ...]:
    tokens = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == '*':
            if pattern.startswith('**', i):
                # runs of more than two stars behave like a single '**'
                while i < len(pattern) and pattern[i] == '*':
                    i += 1
                tokens.append((_DOUBLE_STAR, ''))
                continue
            tokens.append((_STAR, ''))
        elif c == '?':
            tokens.append((_ANY_ONE, ''))
        else:
            tokens.append((_LITERAL, c))
        i += 1
    return tuple(tokens)


def _tokens_intersect(ta: T.Tuple[int, str], tb: T.Tuple[int, str]) -> bool:
    """Whether both tokens can consume one common character."""
    kind_a, char_a = ta
    kind_b, char_b = tb
    if kind_a == _LITERAL and kind_b == _LITERAL:
        return char_a == char_b
    if kind_a == _LITERAL:
        return kind_b == _DOUBLE_STAR or char_a != '/'
    if kind_b == _LITERAL:
        return kind_a == _DOUBLE_STAR or char_b != '/'
    # two wildcards always share some character other than '/'
    return True


def glob_path(a: str, b: str) -> bool:
    '''
    Check whether some path exists that is matched by both patterns `a` and `b`.
    Plain paths are patterns without wildcards.
    '''
    if a == b:
        return True
    ta = _tokenize(a)
    tb = _tokenize(b)

    @lru_cache(maxsize=None)
    def match(i: int, j: int) -> bool:
        if i == len(ta) and j == len(tb):
            return True

        # a star may stand for the empty string
        if i < len(ta) and ta[i][0] in (_STAR, _DOUBLE_STAR) and match(i + 1, j):
            return True
        if j < len(tb) and tb[j][0] in (_STAR, _DOUBLE_STAR) and match(i, j + 1):
            return True

        if i == len(ta) or j == len(tb):
            return False
        if not _tokens_intersect(ta[i], tb[j]):
            return False

        # consume one shared character; stars stay in place for more
        a_stays = ta[i][0] in (_STAR, _DOUBLE_STAR)
        b_stays = tb[j][0] in (_STAR, _DOUBLE_STAR)
        if a_stays and b_stays:
            # no progress, the empty-match branches above already cover this
            return False
        return match(i if a_stays else i + 1, j if b_stays else j + 1)

    return match(0, 0)
