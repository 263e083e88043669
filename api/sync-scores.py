"""Vercel Serverless Function for live score sync (cron or admin trigger)."""

from http.server import BaseHTTPRequestHandler
from pathlib import Path
from urllib.parse import parse_qs, urlparse
import json
import os
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from playoff_challenge.config import get_config, get_database_path, get_default_round, get_round_cache_ttl
from playoff_challenge.constants import ROUNDS
from playoff_challenge.data_fetcher import ESPNDataFetcher
from playoff_challenge.logging_config import setup_logging
from playoff_challenge.rounds import CurrentRoundCache, read_current_round
from playoff_challenge.store import open_store
from playoff_challenge.sync import ScoreSyncer

logger = setup_logging(log_to_file=False)


def load_current_round() -> str:
    with open_store(get_database_path()) as store:
        return read_current_round(store, get_default_round())


# Lives as long as the warm function instance
round_cache = CurrentRoundCache(load_current_round, ttl_seconds=get_round_cache_ttl())


def is_authorized(headers) -> bool:
    """Accept the cron secret as a bearer token, or the admin password header."""
    cron_secret = os.environ.get('CRON_SECRET')
    admin_password = os.environ.get('ADMIN_PASSWORD')

    if cron_secret and headers.get('Authorization') == f'Bearer {cron_secret}':
        return True
    if admin_password and headers.get('x-admin-password') == admin_password:
        return True
    return False


def run_sync(round: str | None) -> tuple[int, dict]:
    """Sync one round. Returns (status code, response body)."""
    if round is not None and round not in ROUNDS:
        return 400, {'error': f'Invalid round: {round}', 'validRounds': ROUNDS}

    config = get_config()
    fetcher = ESPNDataFetcher(config.espn_base_url, timeout=config.request_timeout_seconds)

    if round is None:
        round = round_cache.get()

    with open_store(get_database_path()) as store:
        syncer = ScoreSyncer(store, fetcher, scoring_format=config.default_scoring_format)
        result = syncer.sync_scores(round)

    body = result.to_dict()
    body['round'] = round
    return (200 if result.success else 500), body


class handler(BaseHTTPRequestHandler):  # noqa: N801
    def do_OPTIONS(self):
        """Handle CORS preflight - no auth needed."""
        self.send_response(200)
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Access-Control-Allow-Methods', 'GET, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type, Authorization, x-admin-password')
        self.send_header('Access-Control-Max-Age', '86400')
        self.send_header('Content-Length', '0')
        self.end_headers()

    def do_GET(self):
        """Run a score sync for ?round=WC (defaults to the current round)."""
        if not is_authorized(self.headers):
            return self._send_json(401, {'error': 'Unauthorized'})

        try:
            query = parse_qs(urlparse(self.path).query)
            round = (query.get('round') or [None])[0]
            status, body = run_sync(round)
            return self._send_json(status, body)
        except Exception as e:
            logger.error(f'Score sync failed: {e}')
            return self._send_json(500, {'success': False, 'error': str(e)})

    def _send_json(self, status_code: int, data: dict):
        """Send JSON response with CORS headers."""
        self.send_response(status_code)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Access-Control-Allow-Origin', '*')
        self.send_header('Access-Control-Allow-Methods', 'GET, OPTIONS')
        self.send_header('Access-Control-Allow-Headers', 'Content-Type, Authorization, x-admin-password')
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def log_message(self, format, *args):
        """Suppress default logging."""
        pass
