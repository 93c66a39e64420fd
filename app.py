from flask import Flask
from config import (
    SECRET_KEY,
    MAX_CONTENT_LENGTH,
    TRUST_PROXY_HEADERS,
    PROXY_FIX_NUM_PROXIES,
    IS_PRODUCTION,
    ARTWORK_RATE_LIMIT,
    ARTWORK_REQUIRED_WIDTH,
    ARTWORK_REQUIRED_HEIGHT,
    ARTWORK_REQUIRED_RESOLUTION,
)
from extensions import limiter

# Blueprints
from routes.artwork import artwork_bp


def create_app(test_config=None):
    app = Flask(__name__)

    app.config['SECRET_KEY'] = SECRET_KEY
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

    # Artwork Requirements
    app.config['ARTWORK_REQUIRED_WIDTH'] = ARTWORK_REQUIRED_WIDTH
    app.config['ARTWORK_REQUIRED_HEIGHT'] = ARTWORK_REQUIRED_HEIGHT
    app.config['ARTWORK_REQUIRED_RESOLUTION'] = ARTWORK_REQUIRED_RESOLUTION
    app.config['ARTWORK_RATE_LIMIT'] = ARTWORK_RATE_LIMIT

    # Apply Test Config Overrides (after defaults so tests win)
    if test_config:
        app.config.update(test_config)

    # Setup Structured Logging
    from utils.logger import setup_logger
    setup_logger(app)

    # Simple ping endpoint for Docker health checks
    @app.route("/ping")
    def ping():
        return {"status": "ok"}, 200

    # ProxyFix
    if IS_PRODUCTION and TRUST_PROXY_HEADERS:
        from werkzeug.middleware.proxy_fix import ProxyFix
        n = PROXY_FIX_NUM_PROXIES
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=n, x_proto=n, x_host=n, x_port=n)
        app.logger.info(f"[Security] ProxyFix enabled for {n} proxies")

    # Extensions
    limiter.init_app(app)
    app.limiter = limiter

    # Blueprints
    app.register_blueprint(artwork_bp)

    return app


# WSGI Entry Point
app = create_app()

if __name__ == "__main__":
    app.run(host='0.0.0.0', debug=True)
