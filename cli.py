#!/usr/bin/env python3
"""
Command-line interface for the Napkin2Web sketch-to-code pipeline.
"""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from napkin2web.io.project_packager import ProjectPackager
from napkin2web.io.sketch_loader import SketchLoader
from napkin2web.models import ConvertRequest, Framework, SessionState
from napkin2web.pipeline.orchestrator import ModelOrchestrator
from napkin2web.rendering.preview_renderer import PreviewRenderer, build_preview_document
from napkin2web.session import HttpConvertClient, LocalConvertClient, SyncController, get_session_summary

# Load environment variables
load_dotenv()


def make_client(args, session_id=None):
    """Local orchestrator, or the HTTP service when --api-url is given."""
    if getattr(args, "api_url", None):
        return HttpConvertClient(base_url=args.api_url)
    return LocalConvertClient(ModelOrchestrator(session_id=session_id))


def cmd_serve(args):
    """Run the /api/convert HTTP service."""
    import uvicorn

    print(f"🚀 Serving Napkin2Web API on http://{args.host}:{args.port}")
    uvicorn.run("napkin2web.api.app:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_generate(args):
    """Generate code and preview from a sketch, then apply any edits."""
    print("🚀 Generating code from sketch...")

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"❌ Error: Sketch not found: {image_path}")
        return 1

    framework = Framework.parse(args.framework)
    session_id = args.session_id or f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    output_dir = Path(args.output) / session_id

    print(f"📁 Session ID: {session_id}")
    print(f"🖼️  Sketch: {image_path}")
    print(f"🧩 Framework: {framework.value}")

    image = SketchLoader().to_data_uri(image_path)
    controller = SyncController(
        client=make_client(args, session_id),
        state=SessionState(session_id=session_id, framework=framework),
    )

    if not asyncio.run(controller.generate_from_sketch(image)):
        print(f"❌ Generation failed: {'; '.join(controller.state.notices)}")
        return 1

    print("✅ Code generated successfully!")

    for instruction in args.edit or []:
        print(f"✏️  Applying edit: {instruction}")
        if not asyncio.run(controller.apply_edit(instruction)):
            print(f"⚠️  Edit failed: {'; '.join(controller.state.notices)}")
            controller.dismiss_notices()

    state = controller.state
    packager = ProjectPackager()
    output_dir.mkdir(parents=True, exist_ok=True)

    (output_dir / "description.txt").write_text(state.ui_description or "", encoding="utf-8")
    project_dir = packager.save_project(state.canonical_code, state.framework, output_dir / "project")
    zip_path = packager.save_zip(state.canonical_code, state.framework, output_dir)
    preview_path = output_dir / "preview.html"
    preview_path.write_text(
        build_preview_document(state.preview_code, state.canonical_code),
        encoding="utf-8"
    )

    print(f"📄 Project: {project_dir}")
    print(f"📦 Archive: {zip_path}")
    print(f"👁️  Preview: {preview_path}")

    if state.notices:
        for notice in state.notices:
            print(f"⚠️  {notice}")

    if not args.no_render and state.preview_code:
        print("\n📸 Rendering preview screenshots...")
        renderer = PreviewRenderer(headless=True)
        screenshots = renderer.render_devices(
            state.preview_code,
            output_dir / "screenshots",
            wait_time=args.render_wait
        )
        for device, path in screenshots.items():
            print(f"   {device.value}: {path}")

    print("\n" + get_session_summary(state))
    return 0


def cmd_classify(args):
    """Check whether an image is a UI sketch."""
    image_path = Path(args.image)
    if not image_path.exists():
        print(f"❌ Error: Image not found: {image_path}")
        return 1

    request = ConvertRequest(type="classify", image=SketchLoader().to_data_uri(image_path))
    response = asyncio.run(make_client(args).convert(request))

    if not response.success:
        print(f"❌ {response.error}")
        return 1

    print(f"✅ {response.label}")
    return 0


def cmd_edit(args):
    """Apply a natural-language edit to a generated source file."""
    code_path = Path(args.code)
    if not code_path.exists():
        print(f"❌ Error: Code file not found: {code_path}")
        return 1

    print(f"✏️  Applying edit: {args.instruction}")

    request = ConvertRequest(
        type="edit",
        current_code=code_path.read_text(encoding="utf-8"),
        instruction=args.instruction,
        framework=args.framework,
    )
    response = asyncio.run(make_client(args).convert(request))

    if not response.success:
        print(f"❌ Edit failed: {response.error}")
        return 1

    output_path = Path(args.output) if args.output else code_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(response.code, encoding="utf-8")

    print(f"✅ Saved: {output_path}")
    return 0


def cmd_render(args):
    """Render an existing HTML preview at all device sizes."""
    print("📸 Rendering preview...")

    html_path = Path(args.html)
    if not html_path.exists():
        print(f"❌ Error: HTML file not found: {html_path}")
        return 1

    renderer = PreviewRenderer(headless=not args.headed)
    screenshots = renderer.render_devices(
        html_path.read_text(encoding="utf-8"),
        Path(args.output),
        wait_time=args.wait
    )

    print("✅ Screenshots saved:")
    for device, path in screenshots.items():
        print(f"   {device.value}: {path}")

    return 0


def cmd_package(args):
    """Package a generated source file as a downloadable project."""
    code_path = Path(args.code)
    if not code_path.exists():
        print(f"❌ Error: Code file not found: {code_path}")
        return 1

    framework = Framework.parse(args.framework)
    zip_path = ProjectPackager().save_zip(
        code_path.read_text(encoding="utf-8"),
        framework,
        Path(args.output)
    )

    print(f"📦 Archive: {zip_path}")
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Napkin2Web: turn hand-drawn UI sketches into web code",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    frameworks = [f.value for f in Framework]

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate code from a sketch")
    gen_parser.add_argument("--image", "-i", required=True, help="Path to sketch image")
    gen_parser.add_argument("--framework", "-f", default="static", choices=frameworks)
    gen_parser.add_argument("--edit", "-e", action="append", help="Edit instruction (repeatable)")
    gen_parser.add_argument("--output", "-o", default="outputs", help="Output directory")
    gen_parser.add_argument("--session-id", "-s", help="Session identifier (default: timestamp)")
    gen_parser.add_argument("--api-url", help="Use a running API instead of calling models directly")
    gen_parser.add_argument("--no-render", action="store_true", help="Skip screenshot rendering")
    gen_parser.add_argument("--render-wait", type=int, default=1000, help="Render wait time (ms)")

    # Classify command
    cls_parser = subparsers.add_parser("classify", help="Check whether an image is a UI sketch")
    cls_parser.add_argument("--image", "-i", required=True, help="Path to image")
    cls_parser.add_argument("--api-url", help="Use a running API instead of calling models directly")

    # Edit command
    edit_parser = subparsers.add_parser("edit", help="Edit generated code with an instruction")
    edit_parser.add_argument("--code", "-c", required=True, help="Path to generated source file")
    edit_parser.add_argument("--instruction", "-n", required=True, help="What to change")
    edit_parser.add_argument("--framework", "-f", default="static", choices=frameworks)
    edit_parser.add_argument("--output", "-o", help="Where to write the result (default: overwrite --code)")
    edit_parser.add_argument("--api-url", help="Use a running API instead of calling models directly")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render an HTML preview")
    render_parser.add_argument("--html", required=True, help="Path to HTML file")
    render_parser.add_argument("--output", "-o", required=True, help="Output directory")
    render_parser.add_argument("--wait", "-w", type=int, default=1000, help="Wait time (ms)")
    render_parser.add_argument("--headed", action="store_true", help="Run browser in headed mode")

    # Package command
    pkg_parser = subparsers.add_parser("package", help="Zip generated code as a project")
    pkg_parser.add_argument("--code", "-c", required=True, help="Path to generated source file")
    pkg_parser.add_argument("--framework", "-f", default="static", choices=frameworks)
    pkg_parser.add_argument("--output", "-o", default="outputs", help="Output directory")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "serve":
            return cmd_serve(args)
        elif args.command == "generate":
            return cmd_generate(args)
        elif args.command == "classify":
            return cmd_classify(args)
        elif args.command == "edit":
            return cmd_edit(args)
        elif args.command == "render":
            return cmd_render(args)
        elif args.command == "package":
            return cmd_package(args)
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Error: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
