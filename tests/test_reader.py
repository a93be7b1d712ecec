# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

import pytest

from carver import PathKind, PathUntil, SliceKey, GenerateKind, select, read_release, parse_slice_key
from carver.errors import ReleaseError, PathConflictError

RELEASE_YAML = '''\
    format: v1
    archives:
      ubuntu:
        version: "22.04"
        suites: [jammy]
        components: [main]
        priority: 10
'''


def test_read_sample_release(sample_release_dir):
    release = read_release(sample_release_dir)

    assert sorted(release.archives) == ['fips', 'ubuntu']
    ubuntu = release.archives['ubuntu']
    assert ubuntu.version == '22.04'
    assert ubuntu.suites == ['jammy', 'jammy-security', 'jammy-updates']
    assert ubuntu.components == ['main', 'universe']
    assert ubuntu.priority == 10
    assert ubuntu.pro == ''
    assert [key.id for key in ubuntu.pub_keys] == ['854BAF1AA9D76600']
    assert ubuntu.pub_keys[0].armor.startswith('-----BEGIN PGP PUBLIC KEY BLOCK-----')
    assert release.archives['fips'].pro == 'fips'

    assert sorted(release.packages) == ['base-files', 'libc6', 'libssl3', 'openssl']
    libc6 = release.packages['libc6']
    assert libc6.path == 'slices/libs/libc6.yaml'
    assert release.packages['libssl3'].archive == 'ubuntu'
    assert release.packages['openssl'].archive == ''

    # package-wide essentials are added to all other slices
    base_files = release.packages['base-files']
    assert base_files.slices['base'].essential == [SliceKey('base-files', 'copyright')]
    assert base_files.slices['manifest'].essential == [SliceKey('base-files', 'copyright')]
    assert base_files.slices['copyright'].essential == []

    contents = base_files.slices['base'].contents
    assert contents['/etc/'].kind == PathKind.DIR
    assert contents['/etc/os-release'].kind == PathKind.SYMLINK
    assert contents['/etc/os-release'].info == '../usr/lib/os-release'
    assert contents['/usr/lib/os-release'].kind == PathKind.COPY
    assert contents['/var/lib/'].kind == PathKind.DIR
    assert contents['/var/lib/'].mode == 0o755

    manifest = base_files.slices['manifest'].contents['/var/lib/carver/**']
    assert manifest.kind == PathKind.GENERATE
    assert manifest.generate == GenerateKind.MANIFEST

    libc6_libs = libc6.slices['libs'].contents
    assert libc6_libs['/usr/lib/*-linux-*/libc.so.6'].kind == PathKind.GLOB
    ldconf = libc6.slices['config'].contents['/etc/ld.so.conf']
    assert ldconf.kind == PathKind.TEXT
    assert ldconf.info == 'include /etc/ld.so.conf.d/*.conf\n'
    assert ldconf.mode == 0o644

    openssl = release.packages['openssl']
    assert openssl.slices['config'].contents['/etc/ssl/openssl.cnf'].prefer == 'libssl3'
    assert openssl.slices['bins'].contents['/usr/bin/c_rehash'].arch == ['amd64', 'arm64']
    assert openssl.slices['bins'].scripts.mutate == '# nothing to adjust yet\n'


def test_select_sample_release(sample_release_dir):
    release = read_release(sample_release_dir)

    selection = select(release, [parse_slice_key('openssl_bins'), parse_slice_key('libssl3_libs')])
    assert [str(slc) for slc in selection.slices] == [
        'base-files_copyright',
        'base-files_base',
        'libc6_libs',
        'libssl3_libs',
        'openssl_config',
        'openssl_bins',
    ]
    prefers = selection.prefers()
    assert {path: pkg.name for path, pkg in prefers.items()} == {'/etc/ssl/openssl.cnf': 'libssl3'}


def test_read_path_kinds(release_writer):
    release_dir = release_writer(
        {
            'release.yaml': RELEASE_YAML,
            'slices/mypkg.yaml': '''\
                package: mypkg
                slices:
                  myslice:
                    contents:
                      /dir/: {make: true, mode: 0700}
                      /dir/file: {copy: /other/file, mutable: true, until: mutate}
                      /dir/link: {symlink: /dir/file}
                      /dir/text: {text: "", arch: i386}
                      /lib/**/*.so:
                      /gen/**: {generate: unknown}
            ''',
        }
    )
    release = read_release(release_dir)
    contents = release.packages['mypkg'].slices['myslice'].contents

    assert contents['/dir/'].kind == PathKind.DIR
    assert contents['/dir/'].mode == 0o700
    assert contents['/dir/file'].kind == PathKind.COPY
    assert contents['/dir/file'].info == '/other/file'
    assert contents['/dir/file'].mutable
    assert contents['/dir/file'].until == PathUntil.MUTATE
    assert contents['/dir/link'].kind == PathKind.SYMLINK
    assert contents['/dir/text'].kind == PathKind.TEXT
    assert contents['/dir/text'].info == ''
    assert contents['/dir/text'].arch == ['i386']
    assert contents['/lib/**/*.so'].kind == PathKind.GLOB

    # unknown generate kinds are kept, they are rejected on selection only
    assert contents['/gen/**'].kind == PathKind.GENERATE
    assert contents['/gen/**'].generate == 'unknown'


@pytest.mark.parametrize(
    'slices_yaml,error',
    [
        (
            '''\
            package: other
            ''',
            'slices/mypkg.yaml: filename and \'package\' field ("other") disagree',
        ),
        (
            '''\
            package: mypkg
            slices:
              my_slice:
            ''',
            'slices/mypkg.yaml: invalid slice name "my_slice"',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  relative/path:
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice has invalid content path: relative/path',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  /a/../b:
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice has invalid content path: /a/../b',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  /file: {text: foo, symlink: /bar}
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice path /file has conflicting kinds: text, symlink',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  /file: {make: true}
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice path /file must end in / for \'make\' to be valid',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  /dir/*: {text: foo}
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice path /dir/* has wildcards and can not be of text kind',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  /gen/*/**: {generate: manifest}
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice path /gen/*/** has invalid wildcards for \'generate\'',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  /file: {mode: rw}
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice path /file has non-numeric mode',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  /file: {until: never}
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice path /file has invalid \'until\' value: "never"',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  /file: {arch: vax}
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice path /file has invalid architecture: "vax"',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  /file: {size: 12}
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice path /file has unknown field "size"',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                essential: [mypkg_myslice]
            ''',
            'slices/mypkg.yaml: cannot add slice to itself as essential: mypkg_myslice',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                essential: [mypkg_other, mypkg_other]
              other:
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice lists duplicated essential slice: mypkg_other',
        ),
        (
            '''\
            package: mypkg
            essential: [mypkg_other]
            slices:
              myslice:
                essential: [mypkg_other]
              other:
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice repeats mypkg_other in essential fields',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                essential: [noslice]
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice has invalid essential slice reference: "noslice"',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents: [/usr/bin/foo]
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice has invalid contents',
        ),
        (
            '''\
            package: mypkg
            slices:
              myslice:
                contents:
                  1: {text: foo}
            ''',
            'slices/mypkg.yaml: slice mypkg_myslice has invalid content path: 1',
        ),
    ],
)
def test_read_invalid_slices(release_writer, slices_yaml, error):
    release_dir = release_writer({'release.yaml': RELEASE_YAML, 'slices/mypkg.yaml': slices_yaml})
    with pytest.raises(ReleaseError) as einfo:
        read_release(release_dir)
    assert str(einfo.value) == error


def test_read_release_errors(release_writer, tmp_path):
    with pytest.raises(ReleaseError) as einfo:
        read_release(tmp_path)
    assert str(einfo.value).startswith('cannot read release definition: ')

    release_dir = release_writer({'release.yaml': RELEASE_YAML})
    with pytest.raises(ReleaseError) as einfo:
        read_release(release_dir)
    assert str(einfo.value) == 'cannot read slices/ directory'

    release_dir = release_writer(
        {
            'slices/mypkg.yaml': 'package: mypkg\n',
            'slices/sub/mypkg.yaml': 'package: mypkg\n',
        }
    )
    with pytest.raises(ReleaseError) as einfo:
        read_release(release_dir)
    assert (
        str(einfo.value)
        == 'package "mypkg" slices defined more than once: slices/mypkg.yaml and slices/sub/mypkg.yaml'
    )


def test_read_invalid_filename(release_writer):
    release_dir = release_writer({'release.yaml': RELEASE_YAML, 'slices/My_Pkg.yaml': 'package: My_Pkg\n'})
    with pytest.raises(ReleaseError) as einfo:
        read_release(release_dir)
    assert str(einfo.value) == 'invalid slice definition filename: "My_Pkg.yaml"'


@pytest.mark.parametrize(
    'release_yaml,error',
    [
        ('format: v2\n', 'release.yaml: unknown format "v2"'),
        ('format: v1\n', 'release.yaml: no archives defined'),
        (
            '''\
            format: v1
            archives:
              ubuntu:
                version: "22.04"
                components: [main]
            ''',
            'release.yaml: archive "ubuntu" missing suites field',
        ),
        (
            '''\
            format: v1
            archives:
              ubuntu:
                version: "22.04"
                suites: [jammy]
                components: [main]
                priority: high
            ''',
            'release.yaml: archive "ubuntu" has non-numeric priority',
        ),
        (
            '''\
            format: v1
            archives:
              ubuntu:
                version: "22.04"
                suites: [jammy]
                components: [main]
                public-keys: [missing-key]
            ''',
            'release.yaml: archive "ubuntu" refers to undefined public key "missing-key"',
        ),
        (
            '''\
            format: v1
            archives:
              ubuntu:
                version: "22.04"
                suites: [jammy]
                components: [main]
            public-keys: [missing-key]
            ''',
            'release.yaml: invalid public-keys definition',
        ),
        (
            '''\
            format: v1
            archives:
              ubuntu: jammy
            ''',
            'release.yaml: invalid definition of archive "ubuntu"',
        ),
        (
            '''\
            format: v1
            archives:
              ubuntu:
                version: "22.04"
                suites: [jammy]
                components: [main]
              other:
                version: "22.04"
                suites: [jammy]
                components: [main]
            ''',
            'release.yaml: archives "other" and "ubuntu" have the same priority value of 0',
        ),
    ],
)
def test_read_invalid_release(release_writer, release_yaml, error):
    release_dir = release_writer({'release.yaml': release_yaml, 'slices/mypkg.yaml': 'package: mypkg\n'})
    with pytest.raises(ReleaseError) as einfo:
        read_release(release_dir)
    assert str(einfo.value) == error


def test_read_ignores_unknown_pro(release_writer):
    release_dir = release_writer(
        {
            'release.yaml': RELEASE_YAML
            + '''\
      esm:
        version: "22.04"
        suites: [jammy]
        components: [main]
        priority: 20
        pro: unknown-tier
''',
            'slices/mypkg.yaml': 'package: mypkg\n',
        }
    )
    release = read_release(release_dir)
    assert list(release.archives) == ['ubuntu']


def test_read_conflicting_release(release_writer):
    release_dir = release_writer(
        {
            'release.yaml': RELEASE_YAML,
            'slices/mypkg1.yaml': '''\
                package: mypkg1
                slices:
                  myslice:
                    contents:
                      /file: {text: one}
            ''',
            'slices/mypkg2.yaml': '''\
                package: mypkg2
                slices:
                  myslice:
                    contents:
                      /file: {text: two}
            ''',
        }
    )
    with pytest.raises(PathConflictError) as einfo:
        read_release(release_dir)
    assert str(einfo.value) == 'slices mypkg1_myslice and mypkg2_myslice conflict on /file'
