# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

from dataclasses import dataclass

from carver.errors import ReleaseError


@dataclass(frozen=True, order=True)
class SliceKey:
    '''
    Identity of a slice, as the pair of its package name and slice name.
    The textual form is ``<package>_<slice>``.
    '''

    package: str
    slice: str

    def __str__(self):
        return '{}_{}'.format(self.package, self.slice)


def parse_slice_key(name: str) -> SliceKey:
    '''
    Parse a ``<package>_<slice>`` reference into a :SliceKey.
    Package names never contain underscores, so the first one separates both parts.
    '''
    pkg_name, sep, slice_name = name.partition('_')
    if not sep or not pkg_name or not slice_name:
        raise ReleaseError('invalid slice reference: "{}"'.format(name))
    return SliceKey(pkg_name, slice_name)
