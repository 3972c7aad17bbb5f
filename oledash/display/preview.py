"""
Web preview of the emulated display.

Endpoints:
    GET /api/display/image   last frame as BMP
    GET /api/display/ascii   last frame as ASCII art
    GET /api/display/info    sink and compositor information
    GET /api/health          health check
"""

import io
import logging
import threading
import time
from typing import Optional

from flask import Flask, jsonify, send_file
from flask_cors import CORS

from ..config import system as system_config
from .emulator import EmulatorSink

logger = logging.getLogger(__name__)


class PreviewServer:
    """
    Flask app serving an EmulatorSink (or LumaSink) on a daemon thread.

    Args:
        sink: Sink holding the last delivered frame
        host, port: Bind address
        compositor: Optional compositor whose get_info() is served too
    """

    def __init__(self, sink: EmulatorSink, host: str = system_config.PREVIEW_HOST,
                 port: int = system_config.PREVIEW_PORT, compositor=None):
        self.sink = sink
        self.host = host
        self.port = port
        self.compositor = compositor

        self.app = Flask(__name__)
        self.app.logger.setLevel(logging.WARNING)  # Reduce Flask noise
        CORS(self.app, resources={r"/api/*": {"origins": "*"}})
        self._setup_routes()

        self.running = False
        self.server_thread: Optional[threading.Thread] = None
        self.start_time: Optional[float] = None

    def _setup_routes(self):
        """Setup Flask routes for the API"""

        @self.app.route('/api/display/image', methods=['GET'])
        def get_display_image():
            """Get current display image as BMP"""
            try:
                bmp_data = self.sink.get_bmp()
                if not bmp_data:
                    return jsonify({'error': 'No display image available'}), 404
                return send_file(
                    io.BytesIO(bmp_data),
                    mimetype='image/bmp',
                    as_attachment=False,
                    download_name='display.bmp'
                )
            except Exception as e:
                logger.error(f"Error getting display image: {e}")
                return jsonify({'error': str(e)}), 500

        @self.app.route('/api/display/ascii', methods=['GET'])
        def get_display_ascii():
            """Get current display as ASCII art"""
            try:
                return jsonify({
                    'ascii_art': self.sink.get_ascii(),
                    'timestamp': time.time()
                })
            except Exception as e:
                logger.error(f"Error getting display ASCII: {e}")
                return jsonify({'error': str(e)}), 500

        @self.app.route('/api/display/info', methods=['GET'])
        def get_display_info():
            result = {'display': self.sink.get_display_info()}
            if self.compositor is not None:
                result['compositor'] = self.compositor.get_info()
            return jsonify(result)

        @self.app.route('/api/health', methods=['GET'])
        def health_check():
            """Health check endpoint"""
            return jsonify({
                'status': 'healthy',
                'timestamp': time.time(),
                'uptime': time.time() - self.start_time if self.start_time else 0,
            })

    def start(self) -> bool:
        if self.running:
            return True

        def run_server():
            try:
                self.app.run(
                    host=self.host,
                    port=self.port,
                    debug=False,
                    use_reloader=False,
                    threaded=True
                )
            except Exception as e:
                logger.error(f"Preview server error: {e}")
                self.running = False

        self.running = True
        self.start_time = time.time()
        self.server_thread = threading.Thread(target=run_server, name="preview-server", daemon=True)
        self.server_thread.start()
        logger.info(f"Display preview available on http://{self.host}:{self.port}/api/display/image")
        return True

    def stop(self):
        # The werkzeug dev server has no shutdown hook; the daemon thread ends with the process
        self.running = False
        logger.info("Preview server stopped")
