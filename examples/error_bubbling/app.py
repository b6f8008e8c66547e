"""Error bubbling — errors surface at the nearest router with a handler.

``/admin`` has its own error handler, so its failures stay local.
``/shop`` has none, so its failures bubble up to the top-level handler.

Run:
    python app.py
"""

from typing import Any

from waypoint import ASGIApp, HTTPError, Request, Response, Router
from waypoint.middleware import Next, json_error_handler, not_found

admin = Router(name="admin")


@admin.get("/stats")
def stats(request: Request, response: Response, next: Next) -> None:
    next(HTTPError(status=503, detail="stats backend offline"))


@admin.set_error_handler
def admin_errors(error: Any, request: Request, response: Response) -> None:
    response.status(500).text(f"admin failure: {error}")


shop = Router(name="shop")


@shop.get("/items/:id")
async def item(request: Request, response: Response, next: Next) -> None:
    if not request.params["id"].isdigit():
        raise HTTPError(status=400, detail="item id must be numeric")
    response.json({"id": int(request.params["id"])})


router = Router(name="app")
router.use("/admin", admin)
router.use("/shop", shop)
router.use(not_found)
router.set_error_handler(json_error_handler)

app = ASGIApp(router)


if __name__ == "__main__":
    app.run()
