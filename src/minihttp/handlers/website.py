"""
=============================================================================
WEBSITE HANDLER
=============================================================================

A small Handler that serves text files from a public directory. It is what
`python -m minihttp` runs, and a worked example of implementing the Handler
contract.

    GET /            → <public>/index.html
    GET /hello       → <public>/hello.html
    GET /style.css   → <public>/style.css    (any file inside <public>)
    GET /../secret   → 404                   (outside <public>)
    POST /anything   → 404

=============================================================================
PATH TRAVERSAL
=============================================================================

The requested path is resolved (following ".." and symlinks) and must still
be inside the public directory:

    public_dir = /srv/public
    GET /../../etc/passwd  →  /etc/passwd  →  not under /srv/public  →  404

Traversal attempts get the same 404 as missing files, so the response does
not reveal what exists outside the public directory.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from ..http.handler import Handler
from ..http.method import Method
from ..http.request import Request
from ..http.response import Response, internal_error, not_found, ok

logger = logging.getLogger(__name__)

DEFAULT_ROUTES = {
    "/": "index.html",
    "/hello": "hello.html",
}


class WebsiteHandler(Handler):
    """
    Serve files from public_dir for GET requests.

    Usage:
        handler = WebsiteHandler("./public")
        HTTPServer(config).run(handler)

    Args:
        public_dir: Root directory. Every served file must be inside it.
        routes: Paths mapped to a file name, checked before the file
                lookup. Defaults to "/" → index.html, "/hello" → hello.html.
    """

    def __init__(self, public_dir: str, routes: Optional[Dict[str, str]] = None):
        self.public_dir = Path(public_dir).resolve()
        self.routes = dict(DEFAULT_ROUTES if routes is None else routes)

        if not self.public_dir.is_dir():
            logger.warning(f"Public directory does not exist: {self.public_dir}")

    def handle_request(self, request: Request) -> Response:
        if request.method is not Method.GET:
            return not_found()

        file_name = self.routes.get(request.path)
        if file_name is None:
            file_name = request.path
        return self.read_file(file_name)

    def read_file(self, file_path: str) -> Response:
        """
        Respond with the contents of a file under public_dir.

        Args:
            file_path: Path relative to public_dir; a leading "/" is ignored.

        Returns:
            200 with the file text, 404 if missing or outside public_dir,
            500 if the file cannot be read as UTF-8 text.
        """
        try:
            # ValueError covers both an embedded NUL and an escaped path
            full_path = (self.public_dir / file_path.lstrip("/")).resolve()
            full_path.relative_to(self.public_dir)
        except ValueError:
            logger.warning(f"Directory traversal attempt: {file_path}")
            return not_found()

        if not full_path.is_file():
            return not_found()

        try:
            return ok(full_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error serving file {full_path}: {e}")
            return internal_error()
