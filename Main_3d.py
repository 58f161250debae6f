import argparse
import logging
import sys
import traceback

from GridConfig import GridConfig, ConfigError


def build_config(args):
    cfg = GridConfig.from_json(args.config) if args.config else GridConfig()
    overrides = {
        "cols": args.cols,
        "rows": args.rows,
        "spacing": args.spacing,
        "update_budget": args.budget,
        "width": args.width,
        "height": args.height,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.no_priority:
        overrides["update_priority"] = False
    if args.no_cull:
        overrides["camera_frustum_cull"] = False
    if args.no_debug:
        overrides["debug"] = False
    return cfg.replace(**overrides)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Adaptive wave grid viewer")
    parser.add_argument("--config", help="JSON file with GridConfig fields")
    parser.add_argument("--cols", type=int)
    parser.add_argument("--rows", type=int)
    parser.add_argument("--spacing", type=float)
    parser.add_argument("--budget", type=int, help="initial particles refreshed per frame")
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--no-priority", action="store_true", help="no forced updates near the pointer")
    parser.add_argument("--no-cull", action="store_true", help="disable the coarse view culling")
    parser.add_argument("--no-debug", action="store_true", help="start with debug FPS logging off")
    parser.add_argument("--snapshot", metavar="PNG", help="save a top-down snapshot when the viewer closes")
    parser.add_argument("--log-level", default="INFO")
    return parser, parser.parse_args(argv)


def main(argv=None):
    parser, args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        cfg = build_config(args)
    except (ConfigError, OSError) as e:
        parser.error(str(e))

    # imported late so --help and config errors work without a GL stack
    from viz_grid_3d import run_viewer
    from viz_2d_snapshot import save_2d_snapshot

    try:
        print(f"Grid configured: {cfg.cols}x{cfg.rows} particles, budget {cfg.update_budget}")
        print("Starting viewer...")
        step = run_viewer(cfg)
        if args.snapshot:
            save_2d_snapshot(step, args.snapshot, dpi=200)
        print("Viewer closed")
    except Exception as e:
        print(f"Error occurred: {e}")
        traceback.print_exc()
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
