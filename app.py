# app.py
import logging
from flask import Flask, jsonify, request
from packopt.algorithms import is_integer
from packopt.config import LOG_LEVEL, MAX_ORDER_QUANTITY, MAX_PACK_SIZE, PORT
from packopt.controller import PackMaster
from packopt.errors import InvalidQuantity, InvalidPackSizes, Infeasible

logger = logging.getLogger("packopt.api")

# --- HELPER FUNCTIONS ---

def _error(message, status_code):
    return jsonify({"status": "error", "message": message}), status_code

def _log_to_dict(log_entry):
    """Converts a database OptimizationLog record to a JSON-friendly dict."""
    return {
        'id': log_entry.id,
        'orderQuantity': log_entry.order_quantity,
        'totalItems': log_entry.total_items,
        'totalPacks': log_entry.total_packs,
        'waste': log_entry.waste,
        'packSizes': [int(s) for s in log_entry.pack_sizes.split(',') if s],
        'catalogVersion': log_entry.catalog_version,
        'status': log_entry.status,
        'message': log_entry.message,
        'timestamp': log_entry.timestamp.isoformat(),
    }


def create_app(database_url=None, max_order_quantity=MAX_ORDER_QUANTITY,
               max_pack_size=MAX_PACK_SIZE):
    """
    Builds the Flask application around the PackMaster controller.
    Passing a database_url reconnects the controller to that database.
    """
    if database_url is not None:
        PackMaster.reset()

    app = Flask(__name__)
    wm = PackMaster(database_url)

    @app.after_request
    def enable_cors(response):
        response.headers['Access-Control-Allow-Origin'] = '*'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
        return response

    # --- API ENDPOINTS ---

    @app.route('/optimize', methods=['POST'])
    def optimize():
        """
        Computes the pack breakdown for an order.
        Expected JSON: {"quantity": 12001}
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Invalid JSON", 400)

        quantity = data.get('quantity')
        if not is_integer(quantity):
            return _error("Quantity must be an integer", 400)
        if quantity > max_order_quantity:
            return _error(f"Quantity must not exceed {max_order_quantity}", 400)

        # Oversized packs persisted outside the API are refused before the table is built
        pack_sizes = wm.get_pack_sizes()
        if pack_sizes and max(pack_sizes) > max_pack_size:
            return _error(f"Configured pack sizes exceed {max_pack_size}; update the catalog", 409)

        try:
            result = wm.optimize(quantity)
        except (InvalidQuantity, InvalidPackSizes) as e:
            return _error(str(e), 400)
        except Infeasible as e:
            return _error(str(e), 422)

        return jsonify(result.to_dict())

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({
            "status": "healthy",
            "message": "Pack Optimizer API is running",
            "catalogVersion": wm.catalog_version,
        })

    @app.route('/packages', methods=['GET', 'POST'])
    @app.route('/configPackages', methods=['GET', 'POST'])
    def packages():
        """
        GET returns the active catalog.
        POST replaces it. Expected JSON: {"packSizes": [250, 500, 1000]}
        """
        if request.method == 'GET':
            return jsonify({
                "packSizes": sorted(wm.get_pack_sizes()),
                "catalogVersion": wm.catalog_version,
                "message": "Current pack sizes configuration",
            })

        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get('packSizes'), list):
            return _error("Invalid JSON", 400)

        try:
            new_sizes = wm.update_pack_sizes(data['packSizes'], max_size=max_pack_size)
        except InvalidPackSizes as e:
            return _error(str(e), 400)

        return jsonify({
            "packSizes": sorted(new_sizes),
            "catalogVersion": wm.catalog_version,
            "message": "Pack sizes updated successfully",
        })

    @app.route('/optimizations', methods=['GET'])
    def optimizations():
        """Recent audit log entries, newest first."""
        limit = request.args.get('limit', default=20, type=int)
        limit = max(1, min(limit, 100))
        return jsonify({
            "optimizations": [_log_to_dict(entry) for entry in wm.recent_optimizations(limit)]
        })

    return app


# --- RUN THE APP ---
if __name__ == '__main__':
    logging.basicConfig(level=LOG_LEVEL)
    app = create_app()
    logger.info("Pack Optimizer API server starting on port %d", PORT)
    app.run(host='0.0.0.0', port=PORT)
