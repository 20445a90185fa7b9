"""Main CLI entry point for the kinetic typography engine.

Usage:
    python -m kinetic.cli generate --script "..." --music-url URL     # Run the pipeline
    python -m kinetic.cli generate --script-file script.txt --music-url URL -o timeline.json
    python -m kinetic.cli validate timeline.json                      # Check a timeline
    python -m kinetic.cli evaluate timeline.json --frame 42           # Render state of one frame
    python -m kinetic.cli duration timeline.json                      # Total frames and seconds
    python -m kinetic.cli render timeline.json --resolution 720x1280  # Submit a render job

Pipeline workflow:
    1. generate - Upload, beat analysis, script enhancement, timeline synthesis
    2. validate - Check the timeline after hand edits
    3. evaluate - Inspect what a frame will show
    4. render   - Submit the timeline to the render back end
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError as SchemaError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..errors import KineticError, ValidationError


console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(args: argparse.Namespace):
    from ..config import load_config

    return load_config(args.config)


def _load_timeline(path: str):
    """Read a timeline JSON file.

    Raises:
        ValidationError: If the file cannot be read or is not a timeline.
    """
    from ..timeline.utils import import_timeline_json

    try:
        text = Path(path).read_text()
    except OSError as e:
        raise ValidationError(f"Cannot read timeline: {e}") from e
    try:
        return import_timeline_json(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Timeline is not valid JSON: {e}") from e
    except SchemaError as e:
        raise ValidationError(f"Timeline does not match the schema ({e.error_count()} error(s))\n{e}") from e


def _error(message: str) -> int:
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    return 1


def cmd_generate(args: argparse.Namespace) -> int:
    """Run the generation pipeline and write the timeline."""
    from ..pipeline.orchestrator import GenerationPipeline, GenerationRequest
    from ..timeline.models import ImageAsset, LogoAsset, MusicAsset, UploadedAssets
    from ..timeline.utils import export_timeline_json
    from ..timeline.validation import parse_resolution

    if args.script_file:
        try:
            script = Path(args.script_file).read_text()
        except OSError as e:
            return _error(f"Cannot read script file: {e}")
    else:
        script = args.script or ""

    config = _load_config(args)
    width = height = None
    try:
        if args.resolution:
            width, height = parse_resolution(args.resolution)
    except KineticError as e:
        return _error(e.message)

    assets = UploadedAssets(
        logo=LogoAsset(url=args.logo_url) if args.logo_url else None,
        music_file=MusicAsset(url=args.music_url),
        product_images=[ImageAsset(url=url) for url in args.image_url or []],
    )

    pipeline = GenerationPipeline(config, verbose=args.verbose)
    result = pipeline.run(
        GenerationRequest(
            script=script,
            style_prompt=args.style,
            assets=assets,
            project_name=args.project_name,
            width=width,
            height=height,
            fps=args.fps,
            target_frames=args.frames,
        )
    )

    if not result.success:
        return _error(f"stage {result.failed_stage} failed: {result.error_message}")

    text = export_timeline_json(result.timeline)
    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
        console.print(
            f"[green]Timeline written to {output}[/green] "
            f"({len(result.timeline.scenes)} scenes, {result.timeline.video.total_frames} frames)"
        )
    else:
        print(text)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a timeline file."""
    from ..timeline.validation import validate_timeline

    try:
        timeline = _load_timeline(args.timeline)
    except KineticError as e:
        return _error(e.message)

    report = validate_timeline(timeline)
    if not report.valid:
        err_console.print(f"[red]Timeline {timeline.id} is invalid:[/red]")
        for error in report.errors:
            err_console.print(f"  - {escape(error)}", highlight=False)
        return 1

    console.print(f"[green]Timeline {timeline.id} is valid[/green] ({len(timeline.scenes)} scenes)")
    return 0


def cmd_evaluate(args: argparse.Namespace) -> int:
    """Print the render state of one frame as JSON."""
    from ..engine.evaluator import RenderOptions, evaluate

    try:
        timeline = _load_timeline(args.timeline)
    except KineticError as e:
        return _error(e.message)

    config = _load_config(args)
    options = RenderOptions.from_config(config.render, args.style_mode)
    try:
        state = evaluate(timeline, args.frame, options=options)
    except KineticError as e:
        return _error(e.message)

    for layer_id in state.degraded_layers:
        err_console.print(f"[yellow]Warning:[/yellow] layer {layer_id} is degraded", highlight=False)
    print(json.dumps(state.to_dict(), indent=2))
    return 0


def cmd_duration(args: argparse.Namespace) -> int:
    """Show the timeline duration and its scenes."""
    from ..transitions.sequencer import scene_spans

    try:
        timeline = _load_timeline(args.timeline)
    except KineticError as e:
        return _error(e.message)

    fps = timeline.video.fps
    total = timeline.computed_total_frames()
    if fps <= 0:
        return _error(f"Invalid FPS value: {fps}")

    table = Table(title=f"{timeline.project_name} ({timeline.id})")
    table.add_column("Scene")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Frames", justify="right")
    table.add_column("Transition")
    for scene, span in zip(timeline.scenes, scene_spans(timeline.scenes)):
        table.add_row(
            scene.id,
            str(span.start),
            str(span.end),
            str(span.duration),
            scene.transition_type.value,
        )
    console.print(table)
    console.print(f"Total: {total} frames ({total / fps:.2f}s at {fps} fps)")
    if total != timeline.video.total_frames:
        err_console.print(
            f"[yellow]Warning:[/yellow] video.totalFrames is {timeline.video.total_frames}, scenes add up to {total}",
            highlight=False,
        )
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Submit a render job for a timeline."""
    from ..render.job import RenderJobSpec, create_render_submitter

    try:
        timeline = _load_timeline(args.timeline)
    except KineticError as e:
        return _error(e.message)

    config = _load_config(args)
    try:
        job = RenderJobSpec.from_resolution(timeline, args.resolution, args.duration)
        submitter = create_render_submitter(config)
        console.print(
            f"Rendering {timeline.id}: {job.effective_width}x{job.effective_height}, "
            f"{job.effective_duration} frames via {submitter.name}"
        )
        result = submitter.submit(job)
    except KineticError as e:
        return _error(str(e))

    if result.degraded_frames:
        err_console.print(
            f"[yellow]Warning:[/yellow] {len(result.degraded_frames)} frame(s) had degraded layers: "
            + ", ".join(sorted(result.degraded_layers)),
            highlight=False,
        )
    if result.output:
        console.print(f"[green]Video rendered to: {result.output}[/green]")
    else:
        console.print(f"[green]Render finished[/green] ({result.frames} frames)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kinetic",
        description="Kinetic Typography Engine CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: search the working directory)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logs and stage progress",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate command
    generate_parser = subparsers.add_parser("generate", help="Generate a timeline from a script and music")
    script_group = generate_parser.add_mutually_exclusive_group(required=True)
    script_group.add_argument("--script", help="Script text")
    script_group.add_argument("--script-file", help="File containing the script")
    generate_parser.add_argument("--music-url", required=True, help="Public URL of the music track")
    generate_parser.add_argument(
        "--style",
        default="Bold, energetic kinetic typography",
        help="Style prompt",
    )
    generate_parser.add_argument("--logo-url", help="Public URL of the logo")
    generate_parser.add_argument(
        "--image-url",
        action="append",
        help="Public URL of a product image (repeatable)",
    )
    generate_parser.add_argument("--project-name", default="Untitled Project", help="Project name")
    generate_parser.add_argument("--resolution", help="Output resolution, WxH (e.g. 1080x1920)")
    generate_parser.add_argument("--fps", type=int, help="Frame rate (24, 30 or 60)")
    generate_parser.add_argument("--frames", type=int, help="Target duration in frames")
    generate_parser.add_argument("--output", "-o", help="Write the timeline here instead of stdout")
    generate_parser.set_defaults(func=cmd_generate)

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a timeline file")
    validate_parser.add_argument("timeline", help="Timeline JSON file")
    validate_parser.set_defaults(func=cmd_validate)

    # evaluate command
    evaluate_parser = subparsers.add_parser("evaluate", help="Print the render state of a frame")
    evaluate_parser.add_argument("timeline", help="Timeline JSON file")
    evaluate_parser.add_argument("--frame", "-f", type=int, required=True, help="Global frame number")
    evaluate_parser.add_argument(
        "--style-mode",
        choices=["premium", "bold", "minimal"],
        help="Override the configured style mode",
    )
    evaluate_parser.set_defaults(func=cmd_evaluate)

    # duration command
    duration_parser = subparsers.add_parser("duration", help="Show timeline duration")
    duration_parser.add_argument("timeline", help="Timeline JSON file")
    duration_parser.set_defaults(func=cmd_duration)

    # render command
    render_parser = subparsers.add_parser("render", help="Render a timeline")
    render_parser.add_argument("timeline", help="Timeline JSON file")
    render_parser.add_argument("--resolution", "-r", help="Output resolution override, WxH")
    render_parser.add_argument("--duration", "-d", type=int, help="Output duration override in frames")
    render_parser.set_defaults(func=cmd_render)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
