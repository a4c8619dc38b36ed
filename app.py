import time
from flask import Flask, jsonify, g, request
from flask_swagger_ui import get_swaggerui_blueprint

import config
from country_stats import compute_statistics
from database_manager import DatabaseManager

app = Flask(__name__)

config.setup_logging(app.logger, config.API_LOG_FILE)


@app.before_request
def log_request_info():
    """Log details about every incoming request."""
    g.start_time = time.time()
    app.logger.info(f"REQUEST: {request.method} {request.url} - IP: {request.remote_addr}")


@app.after_request
def log_response_info(response):
    """Log response status and duration."""
    duration = time.time() - g.start_time
    app.logger.info(
        f"RESPONSE: {response.status} - Duration: {duration:.4f}s"
    )
    return response

SWAGGER_URL = '/swagger'
API_URL = '/static/swagger.json'

swaggerui_blueprint = get_swaggerui_blueprint(
    SWAGGER_URL,
    API_URL,
    config={  # Swagger UI config overrides
        'app_name': "Country Manager API"
    }
)

app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)


def init_db(database):
    """Open the store once; a store that cannot be opened stops the API starting."""
    app.config['DATABASE'] = database
    app.extensions['country_db'] = DatabaseManager(database).connect()
    return app.extensions['country_db']


init_db(config.DATABASE)


def get_db():
    return app.extensions['country_db']


def holder_dict(country, field):
    if country is None:
        return None
    return {"code": country.code, "name": country.name, "value": getattr(country, field)}


@app.route('/')
def home():
    return jsonify({
        "message": "Welcome to the Country Manager API",
        "docs": "Check the documentation at /swagger",
        "endpoints": [
            "/api/countries",
            "/api/country/<code>",
            "/api/statistics"
        ]
    })


@app.route('/api/countries', methods=['GET'])
def get_all_countries():
    return jsonify([country.to_dict() for country in get_db().fetch_all()])


@app.route('/api/country/<string:code>', methods=['GET'])
def get_country_details(code):
    country = get_db().fetch_by_code(code.upper())

    if country is None:
        app.logger.warning(f"404 Not Found: Country '{code}'")
        return jsonify({"error": "Country not found"}), 404

    return jsonify(country.to_dict())


@app.route('/api/statistics', methods=['GET'])
def get_stats():
    countries = get_db().fetch_all()
    stats = compute_statistics(countries)

    return jsonify({
        "total_countries": len(countries),
        "average_internet_users": stats.average_internet_users,
        "average_literacy_rate": stats.average_literacy_rate,
        "max_internet_users": holder_dict(stats.max_internet_users, 'internet_users'),
        "min_internet_users": holder_dict(stats.min_internet_users, 'internet_users'),
        "max_literacy_rate": holder_dict(stats.max_literacy_rate, 'adult_literacy_rate'),
        "min_literacy_rate": holder_dict(stats.min_literacy_rate, 'adult_literacy_rate'),
    })


# --- ERROR HANDLERS ---
@app.errorhandler(404)
def not_found_error(error):
    return jsonify({"error": "Not Found", "status": 404}), 404


@app.errorhandler(500)
def internal_error(error):
    app.logger.error(f"Server Error: {error}")
    return jsonify({"error": "Internal Server Error", "status": 500}), 500


if __name__ == '__main__':
    app.run(debug=True, port=5000)
