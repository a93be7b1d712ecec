# -*- coding: utf-8 -*-
#
# Copyright (C) 2016-2022 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

import logging as log

__all__ = ['log', 'set_verbose', 'get_verbose']

__verbose_logging = False

log.basicConfig(level=log.INFO, format='%(asctime)s - %(levelname)s: %(message)s', datefmt='%Y-%d-%m %H:%M:%S')


def set_verbose(enabled):
    global __verbose_logging

    __verbose_logging = enabled

    if enabled:
        log.basicConfig(level=log.DEBUG, format='%(asctime)s - %(levelname)s: %(message)s', datefmt='%Y-%d-%m %H:%M:%S')
        log.getLogger().setLevel(log.DEBUG)
    else:
        log.basicConfig(level=log.INFO, format='%(asctime)s - %(levelname)s: %(message)s', datefmt='%Y-%d-%m %H:%M:%S')
        log.getLogger().setLevel(log.INFO)


def get_verbose():
    return __verbose_logging


#
# Global module configuration, to auto-reload it when using multiprocess
# or multithreading code.
#
set_verbose(__verbose_logging)
