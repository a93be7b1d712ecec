# -*- coding: utf-8 -*-
#
# Copyright (C) 2016-2022 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

import collections.abc

import carver.typing as T


def listify(item):
    '''
    Return a list of :item, unless :item already is a list.
    '''
    if not item:
        return []
    if type(item) == list:
        return item
    if isinstance(item, str):
        return [item]
    if isinstance(item, collections.abc.Sequence):
        return list(item)
    return [item]


def sort_pair(name1: str, name2: str) -> T.Tuple[str, str]:
    """Return both names in lexicographic order."""
    if name1 < name2:
        return name1, name2
    return name2, name1
