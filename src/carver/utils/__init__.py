# -*- coding: utf-8 -*-
#
# Copyright (C) 2016-2022 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

from carver.utils.misc import listify, sort_pair
from carver.utils.arches import (
    KNOWN_ARCHITECTURES,
    is_valid_arch,
    any_arch_matches,
)
from carver.utils.globpath import glob_path

__all__ = [
    'any_arch_matches',
    'is_valid_arch',
    'KNOWN_ARCHITECTURES',
    'listify',
    'sort_pair',
    'glob_path',
]
