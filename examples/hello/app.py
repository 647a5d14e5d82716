"""Hello World — the smallest useful roost app.

Demonstrates chained route registration, (status, body) returns,
writing the response directly, and route- and app-level error handlers.

Run:
    python app.py
"""

from roost import App, NotFound, Route


def index(request, response):
    return 200, "Hello, World!"


def greet(request, response):
    name = request.query.get("name", "stranger")
    return 200, f"Hello, {name}!"


async def shout(request, response):
    text = await request.text()
    response.status = 201
    response.set_header("X-Shouted", "yes")
    await response.end(text.upper())


def divide(request, response):
    a = int(request.query["a"])
    b = int(request.query["b"])
    return 200, str(a // b)


def bad_numbers(request, response, error):
    return 400, f"Cannot divide: {error!r}"


def on_error(request, response, error):
    match error:
        case NotFound():
            return 404, f"Nothing at {request.path}"
        case _:
            return 500, "Something went wrong"


app = (
    App(port=8080)
    .add_routes(
        [
            Route("/").get(index),
            Route("/greet").get(greet),
            Route("/shout").post(shout),
            Route("/divide").get(divide).set_error_handler(bad_numbers),
        ]
    )
    .set_error_handler(on_error)
)


if __name__ == "__main__":
    app.run()
