# -*- coding: utf-8 -*-
#
# Copyright (C) 2018-2021 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

import os
import textwrap

import pytest
import tomlkit

from carver import LocalConfig
from carver.logging import set_verbose

# unconditionally enable verbose mode
set_verbose(True)


@pytest.fixture(scope='session')
def samples_dir():
    '''
    Fixture responsible for returning the location of static
    test data the test may use.
    '''
    from . import source_root

    samples_dir = os.path.join(source_root, 'tests', 'test_data')
    if not os.path.isdir(samples_dir):
        raise Exception('Unable to find test samples directory in {}'.format(samples_dir))
    return samples_dir


@pytest.fixture(scope='session')
def sample_release_dir(samples_dir):
    '''
    Location of a small, valid release definition.
    '''
    return os.path.join(samples_dir, 'releases', 'sample')


@pytest.fixture(scope='session', autouse=True)
def localconfig(samples_dir, tmp_path_factory):
    '''
    Retrieve a Carver LocalConfig object which is set
    up for testing.
    '''
    config_tmpl_fname = os.path.join(samples_dir, 'config', 'carver.toml')
    with open(config_tmpl_fname, 'r') as f:
        config_toml = tomlkit.load(f)

    test_aux_data_dir = tmp_path_factory.mktemp('test-carveraux')
    config_toml['CacheLocation'] = str(test_aux_data_dir / 'cache')
    config_toml['ReleaseDir'] = os.path.join(samples_dir, 'releases', 'sample')

    config_fname = os.path.join(test_aux_data_dir, 'carver.toml')
    with open(config_fname, 'w') as f:
        tomlkit.dump(config_toml, f)

    LocalConfig.instance = None
    conf = LocalConfig(config_fname)
    conf = LocalConfig.instance
    assert conf.cache_dir == str(test_aux_data_dir / 'cache')
    assert conf.release_dir == os.path.join(samples_dir, 'releases', 'sample')
    assert conf.architecture == 'amd64'

    return conf


@pytest.fixture
def release_writer(tmp_path):
    '''
    Write release definition files into a temporary directory.
    The returned function takes a mapping of relative file names to their
    (dedented) contents and returns the release directory.
    '''

    def write(files):
        for fname, data in files.items():
            path = tmp_path / fname
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(data))
        return str(tmp_path)

    return write
