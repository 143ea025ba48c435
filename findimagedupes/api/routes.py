"""
Flask routes for the findimagedupes web API.

Contains all API endpoints: fingerprinting uploads, comparing fingerprints
and running directory scans in the background.
"""

from __future__ import annotations

import threading
import logging
from datetime import datetime

from flask import Blueprint, jsonify, request

from ..models import Fingerprint, threshold_bits
from ..scanner import decode_image, fingerprint_image, DecodeError
from ..state import scan_state
from ..user_config import get_user_config
from ..utils import validators
from .orchestrator import ScanOrchestrator

# Create blueprint for routes
api = Blueprint('api', __name__)

# Module logger
_logger = logging.getLogger(__name__)

# Guards the check-then-start of a new scan
_scan_lock = threading.Lock()


# =============================================================================
# Route Handlers
# =============================================================================

@api.route('/api/ping')
def api_ping():
    """Simple endpoint for connection monitoring."""
    return jsonify({'status': 'ok', 'time': datetime.now().isoformat()})


@api.route('/api/fingerprint', methods=['POST'])
def api_fingerprint():
    """Fingerprint an uploaded image."""
    upload = request.files.get('file')
    if upload is None:
        return jsonify({'error': "Multipart field 'file' required"}), 400

    try:
        image = decode_image(upload.read())
    except DecodeError as e:
        _logger.info(f"Rejected upload {upload.filename!r}: {e.reason}")
        return jsonify({'error': f'Could not decode image: {e.reason}'}), 400

    fingerprint = fingerprint_image(image)
    return jsonify({
        'filename': upload.filename,
        'fingerprint': fingerprint.hex,
        'width': image.width,
        'height': image.height,
        'format': image.format or '',
    })


@api.route('/api/compare', methods=['POST'])
def api_compare():
    """Compare two fingerprints given in hex."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    threshold = data.get('threshold', get_user_config().default_threshold)
    is_valid, error = validators.validate_threshold(threshold)
    if not is_valid:
        return jsonify({'error': error}), 400

    try:
        a = Fingerprint.from_hex(str(data.get('a', '')))
        b = Fingerprint.from_hex(str(data.get('b', '')))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    bits = threshold_bits(float(threshold))
    distance = a.diffbits(b)
    return jsonify({
        'diff_bits': distance,
        'threshold_bits': bits,
        'similar': distance < bits,
    })


@api.route('/api/scan', methods=['POST'])
def api_scan():
    """Start a new scan in the background."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'Request body required'}), 400

    user_config = get_user_config()
    directories = data.get('directories')
    if isinstance(directories, str):
        directories = [directories]
    directories = [str(d).strip() for d in (directories or [])]

    threshold = data.get('threshold', user_config.default_threshold)
    workers = data.get('workers', user_config.default_workers)
    extensions = data.get('extensions', user_config.default_extensions)
    recursive = bool(data.get('recursive', True))

    # Validate parameters
    is_valid, error = validators.validate_scan_params(
        directories=directories,
        threshold=threshold,
        workers=workers,
        extensions=extensions,
        require_absolute=True,
    )
    if not is_valid:
        return jsonify({'error': error}), 400

    config = user_config.scan_config(
        threshold_percent=float(threshold),
        extensions=extensions,
        recursive=recursive,
        workers=int(workers),
    )

    with _scan_lock:
        if scan_state.is_active:
            return jsonify({'error': 'A scan is already running'}), 409

        orchestrator = ScanOrchestrator(scan_state, directories, config)
        orchestrator.prepare()

    # Start scan in background thread
    thread = threading.Thread(target=orchestrator.run)
    thread.daemon = True
    thread.start()

    return jsonify({'status': 'started', 'settings': config.to_dict()})


@api.route('/api/cancel', methods=['POST'])
def api_cancel():
    """Cancel the current scan."""
    if scan_state.is_active:
        scan_state.request_cancel()
        return jsonify({'status': 'cancel_requested'})
    return jsonify({'status': 'no_scan_running'})


@api.route('/api/status')
def api_status():
    """Return current scan status."""
    return jsonify(scan_state.to_status_dict())


@api.route('/api/clusters')
def api_clusters():
    """Return the clusters found by the last scan."""
    return jsonify(scan_state.to_clusters_dict())
