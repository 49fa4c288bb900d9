"""Flask HTTP server for tinypaste.

This module implements the HTTP server with routes for the help page, paste
upload and paste retrieval.
"""

import logging
from flask import Flask, request, Response
from werkzeug.exceptions import RequestEntityTooLarge

from tinypaste.config import Config
from tinypaste.paste_handler import PasteHandler, PasteHandlerError, PasteTooLargeError
from tinypaste.renderer import Renderer
from tinypaste.storage import StorageError

# Configure logging
logger = logging.getLogger(__name__)

HELP_TEXT = """tinypaste

USAGE

    POST /
        Upload the request body as a new paste. Responds with the paste URL.

        curl --data-binary @file.txt https://<host>/

    GET /<id>
        Retrieve a paste. Browsers get syntax highlighting when the
        language can be detected from the first line.

        curl https://<host>/<id>

Pastes are limited to {limit} bytes.
"""


def _text(body: str, status: int) -> Response:
    return Response(body, status=status, mimetype="text/plain")


def create_app(
    config: Config,
    paste_handler: PasteHandler,
    renderer: Renderer,
) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Configuration instance
        paste_handler: Handler for paste operations
        renderer: Renderer for formatting responses

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    # Bodies without a Content-Length are cut off by Werkzeug past this size
    app.config["MAX_CONTENT_LENGTH"] = config.max_paste_size

    too_large = (
        f"Payload Too Large: Maximum paste size is {config.max_paste_size} bytes\n"
    )

    @app.errorhandler(413)
    def payload_too_large(error):
        return _text(too_large, 413)

    @app.route("/", methods=["GET"])
    def home():
        """GET / - Usage help."""
        return _text(HELP_TEXT.format(limit=config.max_paste_size), 200)

    @app.route("/", methods=["POST"])
    def upload_paste():
        """Handle paste upload requests.

        POST / - Upload a new paste

        Returns:
            201: Paste URL on success
            400: Body is not valid UTF-8
            413: Payload too large
            500: Internal server error
        """
        remote_addr = request.remote_addr

        # Check content size before reading
        try:
            if request.content_length is not None:
                paste_handler.check_size(request.content_length)
            raw = request.get_data()
            paste_handler.check_size(len(raw))
            contents = raw.decode("utf-8")
            paste_id, paste_url = paste_handler.create_paste(contents, request.host)
        except (PasteTooLargeError, RequestEntityTooLarge) as e:
            logger.warning(f"Paste too large from {remote_addr}: {e}")
            return _text(too_large, 413)
        except UnicodeDecodeError as e:
            logger.info(f"Rejected non-UTF-8 paste from {remote_addr}: {e}")
            return _text("Bad Request: Paste must be valid UTF-8 text\n", 400)
        except PasteHandlerError as e:
            logger.error(f"Paste handler error for {remote_addr}: {e}")
            return _text("Internal Server Error: Failed to save paste\n", 500)
        except StorageError as e:
            logger.error(f"Storage error for {remote_addr}: {e}")
            return _text("Internal Server Error: Failed to save paste\n", 500)
        except Exception as e:
            logger.exception(f"Unexpected error for {remote_addr}: {e}")
            return _text("Internal Server Error: An unexpected error occurred\n", 500)

        logger.info(f"Paste created: {paste_id} from {remote_addr}")
        return _text(f"{paste_url}\n", 201)

    @app.route("/<paste_id>", methods=["GET"])
    def retrieve_paste(paste_id: str):
        """Handle paste retrieval requests.

        GET /<id> - Retrieve a paste

        Args:
            paste_id: Unique paste identifier from URL path

        Returns:
            200: Paste contents (plain text or HTML)
            404: Not found
            500: Internal server error
        """
        try:
            contents = paste_handler.get_paste(paste_id)
        except StorageError as e:
            logger.error(f"Storage error for {paste_id}: {e}")
            return _text("Internal Server Error: Failed to retrieve paste\n", 500)
        except Exception as e:
            logger.exception(f"Unexpected error retrieving {paste_id}: {e}")
            return _text("Internal Server Error: An unexpected error occurred\n", 500)

        if contents is None:
            logger.info(f"Paste not found: {paste_id}")
            return _text(f"Not Found: Paste {paste_id} does not exist\n", 404)

        logger.info(f"Paste retrieved: {paste_id}")
        body, content_type = renderer.render(
            paste_id, contents, request.headers.get("User-Agent")
        )
        return Response(body, status=200, content_type=content_type)

    return app


def run_server(
    config: Config,
    paste_handler: PasteHandler,
    renderer: Renderer,
) -> None:
    """Run the Flask HTTP server.

    Args:
        config: Configuration instance
        paste_handler: Handler for paste operations
        renderer: Renderer for formatting responses
    """
    app = create_app(config, paste_handler, renderer)

    logger.info(
        f"Starting HTTP server on {config.listen_address}:{config.listen_port}"
    )
    app.run(
        host=config.listen_address,
        port=config.listen_port,
        debug=False,
        threaded=True,
    )
