"""Hello World — a top-level router with a mounted API router.

Demonstrates middleware registered with ``use()``, a child router mounted
under a prefix, path parameters, a final 404 fallback, and an error
handler on the top-level router.

Run:
    python app.py
"""

from waypoint import ASGIApp, Request, Response, Router, ServerConfig
from waypoint.middleware import JSONErrorHandler, Next, log_requests, not_found

api = Router(name="api")


@api.get("/hello")
def hello_world(request: Request, response: Response, next: Next) -> None:
    response.json({"message": "Hello World!"})


@api.get("/hello/:name")
def hello_name(request: Request, response: Response, next: Next) -> None:
    response.json({"message": f"Hello {request.params['name']}!"})


def powered_by(request: Request, response: Response, next: Next) -> None:
    """Tag every response, then let later routes run."""
    response.set_header("X-Powered-By", "waypoint")
    next()


router = Router(name="app")
router.use(log_requests)
router.use(powered_by)
router.use("/api", api)
router.use(not_found)
router.set_error_handler(JSONErrorHandler(debug=True))

app = ASGIApp(router, ServerConfig(port=3001))


if __name__ == "__main__":
    app.run()
