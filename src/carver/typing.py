# -*- coding: utf-8 -*-
#
# Copyright (C) 2016-2022 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

# flake8: noqa
# pylint: disable=wildcard-import,unused-wildcard-import

import os
from typing import *

# type for file paths
PathUnion = Union[str, os.PathLike]

# fully qualified slice name, as in "<package>_<slice>"
SliceName = str
