# -*- coding: utf-8 -*-
#
# Copyright (C) 2016-2022 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

import os

import tomlkit

import carver.typing as T
from carver.utils import is_valid_arch


def get_config_file(fname):
    '''
    Determine the path of a local Carver configuration file.
    '''

    path = os.path.join('/etc/carver/', fname)
    if os.path.isfile(path):
        return path
    path = os.path.join('config', fname)
    if os.path.isfile(path):
        return path
    return None


class LocalConfig:
    '''
    Local, machine-specific configuration for Carver.
    '''

    instance = None

    class __LocalConfig:
        def __init__(self, fname=None):
            if not fname:
                fname = get_config_file('carver.toml')
            self.fname = fname

            cdata = {}
            if self.fname and os.path.isfile(self.fname):
                with open(self.fname) as toml_file:
                    cdata = tomlkit.load(toml_file)

            # location for various temporary caches that can be deleted at any time
            self._cache_dir = str(cdata.get('CacheLocation', '/var/tmp/carver'))

            # release directory to use if none was given explicitly
            self._release_dir = cdata.get('ReleaseDir')
            if self._release_dir:
                self._release_dir = str(self._release_dir)

            self._architecture = str(cdata.get('Architecture', 'amd64'))
            if not is_valid_arch(self._architecture):
                raise Exception(
                    'Architecture "{}" set in {} is not supported.'.format(self._architecture, self.fname)
                )

        @property
        def cache_dir(self) -> str:
            return self._cache_dir

        @property
        def release_dir(self) -> T.Optional[str]:
            """Default release directory, if configured."""
            return self._release_dir

        @property
        def architecture(self) -> str:
            """Architecture to select paths for, unless told otherwise."""
            return self._architecture

    def __init__(self, fname=None):
        if not LocalConfig.instance:
            LocalConfig.instance = LocalConfig.__LocalConfig(fname)

    def __getattr__(self, name):
        return getattr(self.instance, name)
