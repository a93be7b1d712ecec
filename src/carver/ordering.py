# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

import carver.typing as T
from carver.errors import ReleaseError, EssentialLoopError
from carver.logging import log
from carver.slicekey import SliceKey

if T.TYPE_CHECKING:
    from carver.model import Package


def tarjan_sort(successors: T.Dict[str, T.List[str]]) -> T.List[T.List[str]]:
    '''
    Split the graph given by `successors` into its strongly connected components,
    using Tarjan's algorithm.

    Components are returned so that every component comes after all components
    reachable from it. Members of a component are listed in the order they
    were discovered. Nodes are visited in sorted order, so the result is stable.
    '''
    index: T.Dict[str, int] = {}
    lowlink: T.Dict[str, int] = {}
    stack: T.List[str] = []
    on_stack: T.Set[str] = set()
    components: T.List[T.List[str]] = []

    def visit(node: str):
        index[node] = lowlink[node] = len(index)
        stack.append(node)
        on_stack.add(node)

    for root in sorted(successors):
        if root in index:
            continue

        visit(root)
        work = [(root, iter(successors.get(root, [])))]
        while work:
            node, succ_iter = work[-1]
            descended = False
            for succ in succ_iter:
                if succ not in index:
                    visit(succ)
                    work.append((succ, iter(successors.get(succ, []))))
                    descended = True
                    break
                if succ in on_stack:
                    lowlink[node] = min(lowlink[node], index[succ])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index[node]:
                pos = stack.index(node)
                component = stack[pos:]
                del stack[pos:]
                on_stack.difference_update(component)
                components.append(component)

    return components


def order(packages: T.Dict[str, 'Package'], keys: T.Sequence[SliceKey]) -> T.List[SliceKey]:
    '''
    Order the slices in `keys` and everything they require, so that each
    slice comes after all of its essential slices.
    '''

    # check the request upfront for clearer error messages
    for key in keys:
        pkg = packages.get(key.package)
        if pkg is None:
            raise ReleaseError('slices of package "{}" not found'.format(key.package))
        if key.slice not in pkg.slices:
            raise ReleaseError('slice {} not found'.format(key))

    # collect all relevant slices
    successors: T.Dict[T.SliceName, T.List[T.SliceName]] = {}
    names: T.Dict[T.SliceName, SliceKey] = {}
    pending = list(keys)
    seen: T.Set[SliceKey] = set()
    while pending:
        key = pending.pop(0)
        if key in seen:
            continue
        seen.add(key)

        slc = packages[key.package].slices[key.slice]
        fqslice = str(slc)
        names[fqslice] = key
        requires = successors.setdefault(fqslice, [])
        for req in slc.essential:
            req_pkg = packages.get(req.package)
            if req_pkg is None or req.slice not in req_pkg.slices:
                raise ReleaseError('{} requires {}, but slice is missing'.format(fqslice, req))
            requires.append(str(req))
        pending.extend(slc.essential)

    # sort them up
    result = []
    for component in tarjan_sort(successors):
        if len(component) > 1:
            raise EssentialLoopError('essential loop detected: {}'.format(', '.join(component)))
        result.append(names[component[0]])

    log.debug('Ordered %i slices for a request of %i', len(result), len(keys))
    return result
