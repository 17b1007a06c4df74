#!/usr/bin/env python3
"""Render a scene to a PNG file.

Renders the showcase scene (three spheres over a ground plane), or a scene
described by a JSON file in the format produced by SceneManager.to_dict().

Usage:
    python -m examples.render_scene [options]

Options:
    --scene SCENE       JSON scene file (default: built-in showcase scene)
    --width WIDTH       Image width in pixels (overrides the scene)
    --height HEIGHT     Image height in pixels (overrides the scene)
    --fov FOV           Horizontal field of view in degrees (overrides the scene)
    --output OUTPUT     Output file path (default: scene.png)
    --show              Display the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --width 320 --height 240 --output small.png
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

from raycaster.core.runtime import init_taichi


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene of spheres and planes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in showcase scene)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (overrides the scene)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (overrides the scene)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=None,
        help="Horizontal field of view in degrees (overrides the scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="scene.png",
        help="Output file path (default: scene.png)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_scene(
    scene_path: str | None = None,
    width: int | None = None,
    height: int | None = None,
    fov: float | None = None,
    output_path: str = "scene.png",
    show: bool = False,
    quiet: bool = False,
) -> Path:
    """Build, render and save a scene.

    Args:
        scene_path: JSON scene file, or None for the showcase scene.
        width: Image width override.
        height: Image height override.
        fov: Field of view override.
        output_path: Output file path (PNG).
        show: If True, display the result after saving.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from raycaster.core.renderer import Renderer
    from raycaster.preview.display import show_preview
    from raycaster.preview.export import save_png
    from raycaster.scene.manager import SceneManager, scene_config_from_dict
    from raycaster.scene.showcase import create_showcase_scene

    if scene_path is None:
        if not quiet:
            print("Creating showcase scene...")
        scene = create_showcase_scene()
    else:
        if not quiet:
            print(f"Loading scene from {scene_path}...")
        with open(scene_path, encoding="utf-8") as f:
            data = json.load(f)
        scene = SceneManager()
        scene.from_config(scene_config_from_dict(data))

    scene.set_render_settings(
        width if width is not None else scene.width,
        height if height is not None else scene.height,
        fov if fov is not None else scene.fov,
        scene.shadow_bias,
        scene.background,
    )

    renderer = Renderer.from_scene(scene)

    if not quiet:
        print(
            f"Rendering {renderer.width}x{renderer.height} "
            f"({scene.get_primitive_count()} primitives, {scene.get_light_count()} lights)..."
        )

    start_time = time.time()
    renderer.render()

    output_file = Path(output_path)
    save_png(renderer, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if show:
        show_preview(renderer, title=output_file.name)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    init_taichi()

    try:
        render_scene(
            scene_path=args.scene,
            width=args.width,
            height=args.height,
            fov=args.fov,
            output_path=args.output,
            show=args.show,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
