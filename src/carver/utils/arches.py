# -*- coding: utf-8 -*-
#
# Copyright (C) 2016-2021 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

# architectures we know how to fetch packages for
KNOWN_ARCHITECTURES = (
    'amd64',
    'arm64',
    'armhf',
    'i386',
    'ppc64el',
    'riscv64',
    's390x',
)


def is_valid_arch(arch: str) -> bool:
    '''Check whether `arch` is a Debian architecture name we support.'''
    return arch in KNOWN_ARCHITECTURES


def any_arch_matches(architectures, wanted):
    '''
    Check if any architecture in iterable `architectures` is one of the
    architectures in `wanted`.
    '''

    if type(architectures) is str:
        architectures = [architectures]
    if type(wanted) is str:
        wanted = [wanted]

    for arch in architectures:
        if arch in wanted:
            return True
    return False
