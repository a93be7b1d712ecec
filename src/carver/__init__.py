# -*- coding: utf-8 -*-
#
# Copyright (C) 2016-2021 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

__version__ = '0.1.0'

from carver.model import (
    Slice,
    Archive,
    Package,
    Release,
    PathInfo,
    PathKind,
    PathUntil,
    PublicKey,
    GenerateKind,
    SliceScripts,
)
from carver.errors import CarverError
from carver.reader import read_release
from carver.slicekey import SliceKey, parse_slice_key
from carver.selection import Selection, select
from carver.localconfig import LocalConfig, get_config_file

__all__ = [
    'Archive',
    'CarverError',
    'GenerateKind',
    'LocalConfig',
    'Package',
    'PathInfo',
    'PathKind',
    'PathUntil',
    'PublicKey',
    'Release',
    'Selection',
    'Slice',
    'SliceKey',
    'SliceScripts',
    'get_config_file',
    'parse_slice_key',
    'read_release',
    'select',
]
