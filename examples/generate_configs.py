#!/usr/bin/env python3
"""
End-to-end example for wg-topology.

This script demonstrates:
1. Creating project settings with a fresh seed
2. Building the peer graph
3. Previewing and writing the configs
4. Regenerating the same files from the saved project
"""

import tempfile
from pathlib import Path

from wg_topology.config import render_preview, write_configs
from wg_topology.models import ProjectSettings, load_settings, save_settings
from wg_topology.topology import build_topology


def main():
    print("=== wg-topology Example ===\n")
    workdir = Path(tempfile.mkdtemp(prefix="wg-topology-"))

    # Step 1: Project settings
    print("Step 1: Creating project...")
    settings = ProjectSettings(
        number_of_clients=2,
        subnet="10.20.0.0/24",
        endpoint="vpn.example.com:51820",
        dns="10.20.0.1",
        use_preshared_keys=True,
    )
    project_path = save_settings(settings, workdir / "project.json")
    print(f"  ✓ Project saved to {project_path}")

    # Step 2: Peer graph
    print("\nStep 2: Building topology...")
    graph = build_topology(settings.to_request())
    print(f"  ✓ Server {graph.server.address} with {len(graph.clients)} client(s)")

    # Step 3: Preview and write
    print("\nStep 3: Rendering configs...")
    for label, text in render_preview(graph).items():
        print(f"--- {label} ---")
        print(text)

    paths = write_configs(graph, workdir / "Output")
    print(f"  ✓ Wrote {len(paths)} files to {workdir / 'Output'}")

    # Step 4: Reproduce from the saved project
    print("\nStep 4: Regenerating from saved project...")
    again = build_topology(load_settings(project_path).to_request())
    print(f"  ✓ Identical graph: {again == graph}")


if __name__ == "__main__":
    main()
