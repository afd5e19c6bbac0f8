#!/usr/bin/env python3
import asyncio
import hmac
import logging
import sys
import threading
import time
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from . import __version__
from .config import Config
from .errors import MappingError, PayloadError, describe_error
from .executor import LandingPageExecutor
from .finalizer import SaveMode
from .mapping import SelectorMapping, load_mapping
from .payload import LandingPageRequest, unwrap_rows

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Webhook-Secret"


def sample_payload() -> dict:
    """Complete landing page used by POST /test"""
    return {
        "header_headline": f"Test Landing Page {int(time.time() * 1000)}",
        "page_design": "c",
        "hero_text_left": "Professional",
        "hero_text_right": "Home Care Services",
        "hero_preposition": "in",
        "hero_territories_csv": "New York, Brooklyn, Queens",
        "hero_excerpt": "Quality care when you need it most",
        "hero_btn1_text": "Get Started",
        "hero_btn1_url": "https://example.com/contact",
        "hero_btn2_text": "Learn More",
        "hero_btn2_url": "https://example.com/about",
        "intro_headline": "Welcome to Our Services",
        "intro_html": "<p>We provide exceptional home care services.</p>",
        "cta_headline": "Ready to Get Started?",
        "cta_text": "Contact us today for a free consultation",
        "below_headline": "Our Trusted Services",
        "below_content": "<p>Trusted by families across the region for over 20 years.</p>",
        "svc1_name": "Companion Care",
        "svc2_name": "Respite Care",
        "svc3_name": "Dementia Care",
        "svc4_name": "Elite Care",
        "bottom_cta_headline": "Start Your Journey Today",
        "bottom_cta_url": "https://example.com/schedule-consultation",
        "bottom_cta_text": "Schedule Your Free Consultation",
    }


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _run_in_new_loop(coro):
    """Flask handlers are sync; every run gets its own event loop."""
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        return loop.run_until_complete(coro)
    finally:
        try:
            loop.run_until_complete(loop.shutdown_asyncgens())
        except Exception as e:
            logger.debug(f"Async generator shutdown failed: {e}")
        loop.close()
        asyncio.set_event_loop(None)


def create_app(config: Config, mapping: SelectorMapping, executor: Optional[LandingPageExecutor] = None) -> Flask:
    app = Flask(__name__)
    CORS(app)

    executor = executor or LandingPageExecutor(config, mapping)
    # one browser session per run; runs beyond the limit wait their turn
    run_slots = threading.BoundedSemaphore(config.max_concurrent_runs)
    default_mode = SaveMode.parse(config.save_mode)

    def _authorized() -> bool:
        if not config.webhook_secret:
            return True
        provided = request.headers.get(SECRET_HEADER, "")
        return hmac.compare_digest(provided.encode("utf-8"), config.webhook_secret.encode("utf-8"))

    def _run(landing: LandingPageRequest, mode: SaveMode):
        with run_slots:
            return _run_in_new_loop(executor.create_landing_page(landing, mode))

    @app.route('/health', methods=['GET'])
    def health_check():
        return jsonify({
            "status": "healthy",
            "version": __version__,
            "timestamp": _timestamp(),
        })

    @app.route('/create-landing', methods=['POST'])
    def create_landing():
        if not _authorized():
            logger.warning("Rejected request with missing or wrong webhook secret")
            return jsonify({"error": "Unauthorized"}), 401

        body = unwrap_rows(request.get_json(silent=True))
        try:
            landing = LandingPageRequest.from_payload(body, mapping)
            mode = SaveMode.parse(request.args.get("mode"), default_mode)
        except PayloadError as e:
            logger.warning(f"Validation error: {e}")
            return jsonify({"error": "Invalid payload", "details": e.details}), 400
        except ValueError as e:
            return jsonify({"error": "Invalid payload", "details": [{"field": "mode", "message": str(e)}]}), 400

        logger.info(f"Received request to create landing page: {landing.headline}")
        try:
            result = _run(landing, mode)
        except Exception as e:
            logger.error(f"Error processing request: {e}")
            return jsonify({
                "success": False,
                "error": str(e),
                "timestamp": _timestamp(),
                **describe_error(e),
            }), 500

        return jsonify({
            "success": result.success,
            "message": result.message,
            "url": result.url,
            "timestamp": _timestamp(),
            "fields": result.summary.to_dict(),
        })

    @app.route('/test', methods=['POST'])
    def test_run():
        if config.environment != "development":
            return "Not found", 404

        data = sample_payload()
        landing = LandingPageRequest.from_payload(data, mapping)
        try:
            result = _run(landing, SaveMode.DRAFT)
        except Exception as e:
            logger.error(f"Test run failed: {e}")
            return jsonify({"success": False, "error": str(e), **describe_error(e)}), 500

        return jsonify({
            "success": result.success,
            "message": "Test page created and saved as draft successfully",
            "url": result.url,
            "timestamp": _timestamp(),
            "testData": data,
            "fields": result.summary.to_dict(),
        })

    return app


def run_server(config: Optional[Config] = None, mapping_path=None) -> None:
    from wpfiller_logs import configure_logging

    config = config or Config.from_env()
    configure_logging(config)
    try:
        mapping = load_mapping(mapping_path or config.mapping_path)
    except MappingError as e:
        logger.error(f"Failed to load mapping configuration: {e}")
        sys.exit(1)
    logger.info("Mapping configuration loaded successfully")

    app = create_app(config, mapping)
    logger.info(f"WP Filler server running on port {config.port}")
    logger.info(f"Environment: {config.environment}")
    logger.info(f"Headless mode: {config.headless}")
    logger.info(f"Save mode: {config.save_mode}")
    app.run(host='0.0.0.0', port=config.port, debug=False, use_reloader=False, threaded=True)
