"""
App history routes — usage events, decay recompute, install flag, ranked listing.

Thin JSON adapter over the decay engine for the outside callers: the usage
hook, the recompute scheduler, the install observer and the presentation layer.
"""
import logging
from flask import Blueprint, jsonify, request

from apptracker import extensions
from apptracker.config import SORT_ORDERS, SORT_TIME_DECAY, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from apptracker.services.history_store import EntryNotFoundError

logger = logging.getLogger('routes.history')

bp = Blueprint('history', __name__)


@bp.route('/health')
def health_check():
    """Health check endpoint."""
    return jsonify({"status": "healthy"}), 200


# ── Usage events ─────────────────────────────────────────────────────────────

@bp.route('/api/usage', methods=['POST'])
def record_usage():
    """Record one usage event for a (package_name, process) pair."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    package_name = str(data.get('package_name') or '').strip()
    process = str(data.get('process') or '').strip()

    if not package_name:
        return jsonify({'error': 'package_name is required'}), 400
    if not process:
        return jsonify({'error': 'process is required'}), 400

    try:
        entry = extensions.decay_engine.record_usage(package_name, process)
    except Exception as e:
        logger.error("Failed to record usage for %s/%s", package_name, process, exc_info=True)
        return jsonify({'error': str(e)}), 500

    return jsonify(entry.to_dict()), 201


# ── Decay recompute ──────────────────────────────────────────────────────────

@bp.route('/api/decay/recompute', methods=['POST'])
def recompute_decay_scores():
    """Fade every decay score forward to now."""
    try:
        updated = extensions.decay_engine.recompute_all_decay_scores()
    except Exception as e:
        logger.error("Decay recompute failed — scores left as they were", exc_info=True)
        return jsonify({'error': str(e)}), 500

    return jsonify({'updated': updated})


# ── Install flag ─────────────────────────────────────────────────────────────

@bp.route('/api/apps/<int:entry_id>/installed', methods=['PUT'])
def set_installed(entry_id):
    """Flag an entry installed or uninstalled. History is kept either way."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    installed = data.get('installed')
    if not isinstance(installed, bool):
        return jsonify({'error': 'installed must be true or false'}), 400

    try:
        extensions.decay_engine.set_installed(entry_id, installed)
    except EntryNotFoundError:
        return jsonify({'error': 'Entry not found'}), 404
    except Exception as e:
        logger.error("Failed to set installed=%s on entry %s", installed, entry_id, exc_info=True)
        return jsonify({'error': str(e)}), 500

    return jsonify({'ok': True, 'id': entry_id, 'installed': installed})


# ── Ranked listing ───────────────────────────────────────────────────────────

@bp.route('/api/apps')
def list_apps():
    """
    Page of ranked apps.

    Query params: sort (recent | most_used | time_decay), limit, offset,
    recompute=1 to fade scores forward before reading.
    """
    sort_order = request.args.get('sort', SORT_TIME_DECAY)
    limit = request.args.get('limit', DEFAULT_PAGE_SIZE, type=int)
    offset = request.args.get('offset', 0, type=int)
    recompute = request.args.get('recompute', '').lower() in ('1', 'true', 'yes')

    if sort_order not in SORT_ORDERS:
        return jsonify({'error': f'Invalid sort: {sort_order}'}), 400
    if limit < 0 or offset < 0:
        return jsonify({'error': 'limit and offset must be non-negative'}), 400
    limit = min(limit, MAX_PAGE_SIZE)

    try:
        if recompute:
            extensions.decay_engine.recompute_all_decay_scores()
        entries = extensions.decay_engine.list_ranked(sort_order, limit, offset)
    except Exception as e:
        logger.error("Failed to list ranked apps (sort=%s)", sort_order, exc_info=True)
        return jsonify({'error': str(e)}), 500

    return jsonify({
        'sort': sort_order,
        'limit': limit,
        'offset': offset,
        'apps': [entry.to_dict() for entry in entries],
    })
