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
"""Graph export of the virtual source tree.

Imported on demand by the --export-tree option, after
require_package("networkx", ...) has confirmed networkx is usable.
"""

import os
import json
import logging
import posixpath
from typing import Any, Dict

import networkx as nx
from networkx.readwrite import json_graph

from cmakeimport.constants import SUPPORTED_GRAPH_FORMATS, ExportError
from cmakeimport.source_tree import VirtualFolder

logger = logging.getLogger(__name__)


def virtual_tree_to_graph(tree: VirtualFolder) -> "nx.DiGraph[str]":
    """Convert the virtual tree to a directed graph (parent -> child).

    Folder nodes are keyed by their slash-joined segment path below the root
    ('' for the root itself, '/opt' for an 'opt' folder below '/'), file nodes
    by the file path.

    Node attributes:
        - kind: "folder" or "file"
        - label: Folder name or file basename
        - path: Folder path or file path

    Returns:
        NetworkX DiGraph
    """
    G: "nx.DiGraph[str]" = nx.DiGraph()

    def add_folder(folder: VirtualFolder, key: str) -> None:
        folder_id = f"folder:{key}"
        G.add_node(folder_id, kind="folder", label=folder.name, path=key)

        for file in folder.files:
            file_id = f"file:{file.path}"
            G.add_node(file_id, kind="file", label=os.path.basename(file.path), path=file.path)
            G.add_edge(folder_id, file_id)

        for child in folder.folders:
            child_key = posixpath.join(key, child.name) if key else child.name
            add_folder(child, child_key)
            G.add_edge(folder_id, f"folder:{child_key}")

    add_folder(tree, "")
    return G


def export_virtual_tree(tree: VirtualFolder, filename: str) -> None:
    """Export the virtual tree as a graph file.

    Supports: GraphML (.graphml), GEXF (.gexf), JSON node-link (.json)

    Raises:
        ExportError: If the format is unsupported or the file cannot be written
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext not in SUPPORTED_GRAPH_FORMATS:
        raise ExportError(f"Unsupported graph format '{ext}'. Use one of: {', '.join(SUPPORTED_GRAPH_FORMATS)}")

    G = virtual_tree_to_graph(tree)

    try:
        if ext == ".graphml":
            nx.write_graphml(G, filename)
        elif ext == ".gexf":
            nx.write_gexf(G, filename)
        else:
            data: Dict[str, Any] = json_graph.node_link_data(G)
            with open(filename, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
    except OSError as e:
        raise ExportError(f"Failed to export virtual tree to '{filename}': {e}") from e

    logger.info("Exported virtual tree (%d nodes) to %s", G.number_of_nodes(), filename)
