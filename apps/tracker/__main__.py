from __future__ import annotations

import argparse
import logging
import time
from typing import Final

from adapters.telemetry import QueueTelemetryPort
from ports.vision import Region
from shared.config.loader import load_tracker_settings, save_region

from apps.tracker.compose import TrackerApp

LOG: Final = logging.getLogger("tracker")


def _parse_region(text: str) -> Region:
    try:
        return Region.parse(text)
    except ValueError as ex:
        raise argparse.ArgumentTypeError(str(ex)) from ex


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="xpbar-meter")
    ap.add_argument(
        "--region",
        type=_parse_region,
        help="Bar rectangle in screen pixels: left,top,right,bottom.",
    )
    ap.add_argument(
        "--save-region", action="store_true", help="Remember --region for the next run."
    )
    ap.add_argument("--tui", action="store_true", help="Show the live terminal overlay.")
    ap.add_argument("--profile", help="Config profile under configs/profiles (default: dev).")
    ap.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    ap.add_argument("--quiet", action="store_true", help="Only log warnings and errors.")
    args = ap.parse_args(argv)

    level = getattr(logging, args.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=logging.WARNING if args.quiet else level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = load_tracker_settings(profile=args.profile)
    use_tui = args.tui or settings.ui == "tui"
    inbox = QueueTelemetryPort() if use_tui else None
    app = TrackerApp(settings, telemetry=inbox)

    region = app.resolve_region(args.region)
    if region is None:
        LOG.error("No region: pass --region left,top,right,bottom (or set XPB_REGION).")
        return 2
    if not region.is_valid:
        LOG.error("Region %s has no area (%dx%d).", region, region.width, region.height)
        return 2

    LOG.info("capture=%s ui=%s region=%s", settings.capture.adapter, settings.ui, region)

    if args.save_region:
        path = save_region(settings.state_file, region)
        LOG.info("Region saved to %s", path)

    if use_tui:
        from apps.tracker.tui import TrackerTUI

        assert inbox is not None
        TrackerTUI(app, region, inbox).run()
        return 0

    if not app.start(region):
        return 2
    try:
        while app.running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        LOG.info("Shutting down...")
    finally:
        app.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
