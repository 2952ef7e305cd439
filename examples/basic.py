import time

from pydantic import BaseModel

from erlen import Erlen
from erlen import HTTPException
from erlen import Request
from erlen import Response

app = Erlen()


class Item(BaseModel):
    name: str
    price: float
    quantity: int = 1


class ItemResponse(BaseModel):
    id: int
    name: str
    price: float
    quantity: int


items_db: dict[int, Item] = {}
next_id = 1


class ItemNotFound(HTTPException):
    def __init__(self, item_id: str):
        super().__init__(404, f"Item {item_id} not found")


@app.middleware
def timing(request: Request, next, params: dict[str, str]) -> Response:
    start = time.perf_counter()
    response = next(request, params)
    response.headers["x-process-time"] = f"{time.perf_counter() - start:.6f}"
    return response


def require_token(request: Request, next, params: dict[str, str]) -> Response:
    if request.header("authorization") != "Bearer secret":
        return Response.json({"detail": "Unauthorized"}, 401)
    return next(request, params)


@app.exception_handler(ItemNotFound)
def item_not_found(request: Request, exc: ItemNotFound) -> Response:
    return Response.json({"detail": exc.detail, "path": request.path}, exc.status_code)


app.redirect("/home", "/", permanent=True)


@app.get("/")
def index(request: Request, params: dict[str, str]) -> dict[str, str]:
    return {"message": "Welcome to Erlen!"}


@app.get("/items")
def list_items(request: Request, params: dict[str, str]) -> list[ItemResponse]:
    return [
        ItemResponse(id=item_id, **item.model_dump())
        for item_id, item in items_db.items()
    ]


@app.get("/items/[item_id]")
def get_item(request: Request, params: dict[str, str]) -> ItemResponse:
    item_id = int(params["item_id"])
    if item_id not in items_db:
        raise ItemNotFound(params["item_id"])
    return ItemResponse(id=item_id, **items_db[item_id].model_dump())


@app.post("/items", middleware=[require_token])
def create_item(request: Request, params: dict[str, str]) -> ItemResponse:
    global next_id
    body = request.validate(Item)
    item_id = next_id
    next_id += 1
    items_db[item_id] = body
    return ItemResponse(id=item_id, **body.model_dump())


@app.delete("/items/[item_id]", middleware=[require_token])
def delete_item(request: Request, params: dict[str, str]) -> Response:
    item_id = int(params["item_id"])
    if item_id not in items_db:
        raise ItemNotFound(params["item_id"])
    del items_db[item_id]
    return Response.empty()


if __name__ == "__main__":
    app.run(port=8000)
