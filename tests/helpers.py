# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

from carver.model import Slice, Archive, Package, Release, PathInfo, PathKind
from carver.slicekey import parse_slice_key


def copy_path(info='', **kwargs) -> PathInfo:
    return PathInfo(kind=PathKind.COPY, info=info, **kwargs)


def build_release(packages, archives=None) -> Release:
    '''
    Build a release from a compact description:
    ``{pkg_name: {slice_name: {'essential': [...], 'contents': {path: PathInfo}}}}``
    '''
    release = Release(path='/nonexistent')
    for pkg_name, slices in packages.items():
        pkg = Package(name=pkg_name, path='slices/{}.yaml'.format(pkg_name))
        for slice_name, sdata in slices.items():
            slc = Slice(package=pkg_name, name=slice_name)
            slc.essential = [parse_slice_key(name) for name in sdata.get('essential', [])]
            slc.contents = dict(sdata.get('contents', {}))
            pkg.slices[slice_name] = slc
        release.packages[pkg_name] = pkg

    if archives is None:
        archives = {'ubuntu': 10}
    for name, priority in archives.items():
        release.archives[name] = Archive(
            name=name, version='22.04', suites=['jammy'], components=['main'], priority=priority
        )
    return release
