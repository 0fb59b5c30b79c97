import logging

from flask import Flask, jsonify, make_response, request

from api._config import Settings, configure_logging
from api._dispatch import RequestContext, handle

logger = logging.getLogger("api")

# Read once per process; the handler only ever sees this object.
SETTINGS = Settings.from_env()
configure_logging(SETTINGS)

# Vercel: export a WSGI Flask app named `app`
app = Flask(__name__)


@app.route('/api/proxy', methods=['GET', 'POST', 'OPTIONS'], provide_automatic_options=False)
@app.route('/proxy', methods=['GET', 'POST', 'OPTIONS'], provide_automatic_options=False)
@app.route('/.netlify/functions/proxy', methods=['GET', 'POST', 'OPTIONS'], provide_automatic_options=False)
def api_proxy():
    settings = app.config.get('WIDGET_SETTINGS') or SETTINGS
    envelope = handle(RequestContext.from_flask(request), settings)
    return make_response(envelope.as_wsgi())


@app.get('/health')
@app.get('/api/health')
def api_health():
    return jsonify({'ok': True})


def handler(event, context=None, settings: Settings | None = None):
    """Lambda / Netlify entry point: event dict in, {statusCode, headers, body} out."""
    return handle(RequestContext.from_event(event or {}), settings or SETTINGS).to_dict()
