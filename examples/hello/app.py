"""Hello World — the simplest haws app.

Serves an index page at the site root and a 404 page for everything
else. The ``"."`` route is the fallback; the server refuses to start
without one.

Run:
    python app.py

Then try:
    curl -i http://localhost:3000/
    curl -i http://localhost:3000/home
"""

from haws import App

app = App("localhost", 3000)


def index(_request: bytes) -> str:
    return "<h1>Hello world</h1>"


def err_page(_request: bytes) -> str:
    return "<h1>404 page not found</h1>"


# "/" answers only the bare root, not "/home" or anything below it
app.route("/", index)
# "." answers every request no other route matches
app.route(".", err_page)


@app.route("/echo")
def echo(request: bytes) -> str:
    return request.decode("latin-1")


if __name__ == "__main__":
    app.serve()
