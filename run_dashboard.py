#!/usr/bin/env python3
"""
oledash Startup Script

Loads a dashboard configuration (or the built-in demo layout), builds the
widgets and runs the compositor until SIGINT/SIGTERM.
"""

import argparse
import logging
import signal
import sys
import threading

from oledash import config
from oledash.compositor import Compositor
from oledash.config import DashboardConfig, load_config
from oledash.display import PreviewServer, create_sink
from oledash.errors import OledashError
from oledash.widgets import create_widgets

logger = logging.getLogger(__name__)

DEMO_LAYOUT = {
    'display': {'width': 128, 'height': 40, 'refresh_rate_ms': 100},
    'widgets': [
        {
            'id': 'clock',
            'type': 'clock',
            'position': {'x': 0, 'y': 0, 'w': 128, 'h': 12},
            'text': {'format': '%H:%M:%S', 'size': 10},
        },
        {
            'id': 'cpu',
            'type': 'cpu',
            'position': {'x': 0, 'y': 13, 'w': 64, 'h': 13},
            'mode': 'bar',
            'update_interval': 0.5,
        },
        {
            'id': 'mem',
            'type': 'memory',
            'position': {'x': 64, 'y': 13, 'w': 64, 'h': 13},
            'mode': 'text',
            'text': {'format': 'MEM %.0f%%', 'size': 10},
        },
        {
            'id': 'net',
            'type': 'network',
            'position': {'x': 0, 'y': 27, 'w': 128, 'h': 13},
            'mode': 'graph',
            'max_speed_mbps': 100,
        },
    ],
}


def parse_arguments():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='oledash - live dashboards for small OLED panels',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the demo layout in the emulator
  python run_dashboard.py

  # Run a layout on the real panel, with the web preview
  python run_dashboard.py --config dashboard.json --hardware --web
        """
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Dashboard configuration (JSON); demo layout when omitted')
    parser.add_argument('--web', action='store_true',
                        help='Enable the web preview')
    parser.add_argument('--host', type=str, default=config.system.PREVIEW_HOST,
                        help=f'Web preview host (default: {config.system.PREVIEW_HOST})')
    parser.add_argument('--port', type=int, default=config.system.PREVIEW_PORT,
                        help=f'Web preview port (default: {config.system.PREVIEW_PORT})')
    parser.add_argument('--hardware', action='store_true',
                        help='Drive the panel through luma.oled')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug logging')
    return parser.parse_args()


def main():
    """Main entry point"""
    args = parse_arguments()

    log_level = logging.DEBUG if args.debug else getattr(logging, config.LOG_LEVEL)
    logging.basicConfig(
        level=log_level,
        format='[%(asctime)s] %(levelname)s: %(message)s'
    )

    try:
        dashboard = load_config(args.config) if args.config else DashboardConfig.from_dict(DEMO_LAYOUT)
        widgets = create_widgets(dashboard.widgets)
    except OledashError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    display = dashboard.display
    sink = create_sink(display.width, display.height, display.background,
                       use_hardware=args.hardware or config.display.USE_HARDWARE)
    compositor = Compositor(display, widgets, sink)

    logger.info("=" * 60)
    logger.info(f"oledash starting: {display.width}x{display.height}, {len(widgets)} widgets")
    logger.info("=" * 60)

    if not compositor.start():
        logger.error("Failed to start compositor")
        return 1

    preview = None
    if args.web or config.system.PREVIEW_ENABLE:
        preview = PreviewServer(sink, host=args.host, port=args.port, compositor=compositor)
        preview.start()

    shutdown = threading.Event()

    def request_shutdown(signum, frame):
        logger.info(f"Received signal {signum}, shutting down...")
        shutdown.set()

    signal.signal(signal.SIGINT, request_shutdown)
    signal.signal(signal.SIGTERM, request_shutdown)

    logger.info("Press Ctrl+C to stop")
    try:
        while not shutdown.wait(1.0):
            pass
    finally:
        if preview:
            preview.stop()
        compositor.stop()
        logger.info("oledash stopped")
    return 0


if __name__ == '__main__':
    sys.exit(main())
