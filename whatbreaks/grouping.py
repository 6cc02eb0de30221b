#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Coupling-based clustering of files into named groups.

Three passes:
    1. Directory seeds: one group per directory. When a single directory holds
       at least half of the files (flat layout) each of its files becomes its
       own seed so coupling, not co-location, drives the clustering.
    2. Dependency merge: repeatedly merge the pair of groups with the highest
       coupling score until no pair reaches COUPLING_THRESHOLD.
    3. Naming: label each surviving group after its most common file stem.

detect_subgroups() is the optional hierarchical step on top of the result.
"""

import re
import math
import logging
import posixpath
from collections import Counter
from typing import Dict, List, Set

from .constants import (
    COUPLING_THRESHOLD,
    FLAT_LAYOUT_RATIO,
    IGNORED_GROUP_DIRS,
    LAYER_SUFFIXES,
    MIN_FILES_FOR_GROUPING,
    MIN_GROUP_SIZE,
    MIN_LABEL_LENGTH,
    MIN_SUBGROUP_SIZE,
)
from .graph_types import EdgeType, FileGroup, Graph, GraphNode, NodeType

logger = logging.getLogger(__name__)

RE_EXTENSION = re.compile(r"\.[^.]+$")
RE_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Capitalized forms first, then lowercase; the first match wins
_SUFFIXES = LAYER_SUFFIXES + [suffix.lower() for suffix in LAYER_SUFFIXES]


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _strip_extension(file_name: str) -> str:
    return RE_EXTENSION.sub("", file_name)


def slugify_group_id(label: str) -> str:
    """Group id for a label: "group-" + lowercased label, non-alphanumeric runs as "-"."""
    return "group-" + RE_NON_ALNUM.sub("-", label.lower())


def compute_coupling(nodes_a: Set[str], nodes_b: Set[str], forward_adj: Dict[str, Set[str]]) -> float:
    """Coupling score between two groups.

    Cross edges in both directions divided by the combined group size, so
    large groups are penalized and mega-clusters do not form.

    Args:
        nodes_a: Members of the first group
        nodes_b: Members of the second group
        forward_adj: Import adjacency of non-test nodes

    Returns:
        Coupling score, 0.0 when there are no cross edges
    """
    cross_edges = 0
    for node_id in nodes_a:
        cross_edges += len(forward_adj.get(node_id, set()) & nodes_b)
    for node_id in nodes_b:
        cross_edges += len(forward_adj.get(node_id, set()) & nodes_a)

    if cross_edges == 0:
        return 0.0
    return cross_edges / (len(nodes_a) + len(nodes_b))


def seed_groups(source_nodes: List[GraphNode]) -> Dict[int, List[str]]:
    """Pass 1: seed one group per directory, exploding a dominant directory.

    Args:
        source_nodes: Non-test nodes

    Returns:
        Mapping of group number -> member ids, in creation order
    """
    dir_groups: Dict[str, List[str]] = {}
    for node in source_nodes:
        dir_groups.setdefault(posixpath.dirname(node.id), []).append(node.id)

    flat_threshold = math.ceil(len(source_nodes) * FLAT_LAYOUT_RATIO)
    groups: Dict[int, List[str]] = {}

    for directory, node_ids in dir_groups.items():
        if len(node_ids) >= flat_threshold:
            logger.debug("Flat layout: splitting %s (%s files) into singleton seeds", directory or ".", len(node_ids))
            for node_id in node_ids:
                groups[len(groups)] = [node_id]
        else:
            groups[len(groups)] = list(node_ids)

    return groups


def merge_coupled_groups(groups: Dict[int, List[str]], forward_adj: Dict[str, Set[str]]) -> Dict[int, List[str]]:
    """Pass 2: greedily merge the most coupled pair until none clears the threshold.

    Args:
        groups: Mapping of group number -> member ids (modified in place)
        forward_adj: Import adjacency of non-test nodes

    Returns:
        The same mapping, merged
    """
    merges = 0
    while True:
        group_ids = list(groups.keys())
        member_sets = {group_id: set(groups[group_id]) for group_id in group_ids}

        best_a = best_b = -1
        best_coupling = 0.0
        for i, group_a in enumerate(group_ids):
            for group_b in group_ids[i + 1 :]:
                coupling = compute_coupling(member_sets[group_a], member_sets[group_b], forward_adj)
                if coupling > best_coupling:
                    best_coupling = coupling
                    best_a, best_b = group_a, group_b

        if best_coupling < COUPLING_THRESHOLD:
            break

        groups[best_a].extend(groups.pop(best_b))
        merges += 1

    logger.debug("Merged %s group pairs, %s groups remain", merges, len(groups))
    return groups


def resolve_group_name(node_ids: List[str], central_node_id: str) -> str:
    """Pass 3: name a group after its most common file stem.

    Layer suffixes (Controller, Service, ...) are stripped from each file name;
    the most frequent stem wins, first seen on ties. Falls back to the central
    file's directory, then to the central file's own name.

    Args:
        node_ids: Group members
        central_node_id: Member with the highest fan-in

    Returns:
        Group label
    """
    stems: Counter = Counter()

    for node_id in node_ids:
        stem = _strip_extension(posixpath.basename(node_id))
        for suffix in _SUFFIXES:
            if stem.endswith(suffix) and len(stem) > len(suffix):
                stem = stem[: -len(suffix)]
                break
        stem = stem[:1].lower() + stem[1:]
        if len(stem) >= MIN_LABEL_LENGTH:
            stems[stem] += 1

    if stems:
        # Counter preserves insertion order, so max() keeps the first seen on ties
        best_stem = max(stems, key=lambda stem: stems[stem])
        return _capitalize(best_stem)

    directory = posixpath.basename(posixpath.dirname(central_node_id))
    if directory and directory not in IGNORED_GROUP_DIRS:
        return _capitalize(directory)

    return _strip_extension(posixpath.basename(central_node_id))


def find_central_node(node_ids: List[str], nodes_by_id: Dict[str, GraphNode]) -> str:
    """Member with the highest fan-in, first seen on ties."""
    central_node_id = node_ids[0]
    max_fan_in = 0
    for node_id in node_ids:
        node = nodes_by_id.get(node_id)
        if node is not None and node.fan_in > max_fan_in:
            max_fan_in = node.fan_in
            central_node_id = node_id
    return central_node_id


def build_file_group(node_ids: List[str], nodes_by_id: Dict[str, GraphNode]) -> FileGroup:
    """Build a named top-level FileGroup from its members."""
    central_node_id = find_central_node(node_ids, nodes_by_id)
    label = resolve_group_name(node_ids, central_node_id)
    return FileGroup(id=slugify_group_id(label), label=label, node_ids=list(node_ids), central_node_id=central_node_id, level=0)


def compute_file_groups(graph: Graph) -> List[FileGroup]:
    """Cluster non-test files into named groups by directory and import coupling.

    Reads each node's fan_in, so compute_visual_metrics() should run first.

    Args:
        graph: Graph snapshot

    Returns:
        List of top-level FileGroup; empty for small graphs or when everything
        collapses into a single group
    """
    source_nodes = [node for node in graph.nodes if node.type is not NodeType.TEST]
    if len(source_nodes) < MIN_FILES_FOR_GROUPING:
        logger.debug("Skipping grouping: %s non-test files (< %s)", len(source_nodes), MIN_FILES_FOR_GROUPING)
        return []

    forward_adj: Dict[str, Set[str]] = {node.id: set() for node in source_nodes}
    for edge in graph.edges:
        if edge.type is EdgeType.IMPORT and edge.source in forward_adj:
            forward_adj[edge.source].add(edge.target)

    groups = merge_coupled_groups(seed_groups(source_nodes), forward_adj)

    final_groups = [node_ids for node_ids in groups.values() if len(node_ids) >= MIN_GROUP_SIZE]
    if len(final_groups) == 1 and len(final_groups[0]) == len(source_nodes):
        logger.debug("All files collapsed into a single group, discarding it")
        return []

    nodes_by_id = {node.id: node for node in graph.nodes}
    return [build_file_group(node_ids, nodes_by_id) for node_ids in final_groups]


def detect_subgroups(groups: List[FileGroup], graph: Graph) -> List[FileGroup]:
    """Split top-level groups that span several directories into subgroups.

    A level-0 group gets one level-1 subgroup per parent directory holding at
    least MIN_SUBGROUP_SIZE of its members, provided at least two directories
    qualify. Parents keep their full membership.

    Args:
        groups: Top-level groups from compute_file_groups()
        graph: Graph snapshot (for fan-in lookups)

    Returns:
        The input groups followed by every subgroup, each after its parent
    """
    nodes_by_id = {node.id: node for node in graph.nodes}
    result: List[FileGroup] = []

    for group in groups:
        result.append(group)
        if group.level != 0:
            continue

        by_dir: Dict[str, List[str]] = {}
        for node_id in group.node_ids:
            by_dir.setdefault(posixpath.dirname(node_id), []).append(node_id)

        qualifying = {directory: node_ids for directory, node_ids in by_dir.items() if len(node_ids) >= MIN_SUBGROUP_SIZE}
        if len(qualifying) < 2:
            continue

        for directory, node_ids in qualifying.items():
            label = _capitalize(posixpath.basename(directory) or directory or group.label)
            result.append(
                FileGroup(
                    id=f"{group.id}-{RE_NON_ALNUM.sub('-', label.lower())}",
                    label=label,
                    node_ids=node_ids,
                    central_node_id=find_central_node(node_ids, nodes_by_id),
                    level=1,
                    parent_group_id=group.id,
                )
            )

    logger.debug("Detected %s subgroups", len(result) - len(groups))
    return result
