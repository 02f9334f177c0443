# reactor_http

`reactor_http` is a small networking library built on the reactor pattern.
Each event loop watches its sockets, runs queued tasks, and drives a
one-second timer wheel. A TCP server and a TCP client are built on the
loops. An HTTP/1.1 server with regex routing and static file serving is
built on the TCP server. The package uses only the standard library.

## Running the bundled servers

Both commands take two arguments: a port and a log level from `0` to `4`.
The levels are `0` debug, `1` info, `2` warning, `3` error and `4` fatal.
If you give the wrong number of arguments, the command prints a usage line
and exits.

### Demo HTTP server

    reactor-http-demo 8080 1

The demo serves static files from `www_root/` in the current directory.
That directory must exist, or the server refuses to start with
`NotADirectoryError`. It runs 12 worker loops and has these routes:

- `GET /get`, `POST /post` and `DELETE /delete` answer with the request's
  text (start line, headers and body) repeated 64 times, as `text/plain`.
- `PUT /put` writes the request body to `www_root/put.txt`.

`reactor_http.app.build_server(port, www_root)` builds the same server
without running it.

### Echo server

    reactor-http-echo 9000 0

The echo server sends back what it receives, then shuts the connection
down. It closes connections that stay idle for 10 seconds.

## Writing an HTTP server

```python
from reactor_http.http_server import HttpServer


def hello(req, rsp):
    name = req.get_param("name") or "world"
    rsp.set_content(f"hello, {name}\n", "text/plain")


def echo_body(req, rsp):
    rsp.set_content(req.body, req.get_header("Content-Type") or "text/plain")


server = HttpServer(8080, timeout=30)
server.set_thread_count(4)
server.set_base_dir("./www_root/")
server.method_get("/hello", hello)
server.method_post("/echo", echo_body)
server.listen()
```

`listen()` runs until `stop()` is called from another thread.
`address()` returns the `(ip, port)` the server is bound to.

Handlers receive an `HttpRequest` and an `HttpResponse`. A route pattern is
a regular expression that must match the whole request path. The match is
stored in `request.matches`. Routes are tried in the order they were added.
When no route matches, the server answers `404`. Requests with a method
other than `GET`, `POST`, `PUT` or `DELETE` answer `405`, unless they are
served as static files.

`HttpResponse` also provides `set_header`, `set_redirect` and `set_cookie`.
Setting a header that already exists keeps its first value.
`HttpRequest` provides `get_header`, `get_param`, `get_cookie`,
`content_size`, `client_ip`, `is_json` and `should_close`.

### Static files

Once `set_base_dir` names a directory, `GET` and `HEAD` requests for regular
files under it are served directly. The server sets the MIME type from the
file extension and adds a `Last-Modified` header. A `HEAD` request gets the
headers without a body. A request for `/` serves the base page, which is
`index.html` unless you change it with `set_base_page`. Error responses use
the page set with `set_error_page`, which is `error.html` by default. The
error page is read from the base directory.

### Request limits

The HTTP parser rejects a request that breaks any of these rules:

- A request line or header line longer than 8192 bytes gets `414`.
- More than 100 headers gets `431`.
- A `Content-Length` above 10 MB gets `413`. A `Content-Length` that is not
  a number gets `400`.
- A malformed request line gets `400`, and so does an HTTP/1.1 request
  without a `Host` header.
- A decoded path that contains `../`, `..\` or `//` gets `403`.

After an error response, the server shuts the connection down.

Every response carries `Connection`, `Date` and `Server` headers. A
response with a body also carries `Content-Length`. A connection stays open
only when the request asked for `Connection: keep-alive`. Idle connections
are closed after the inactivity timeout, which you can change with
`set_inactive_release`.

## Lower layers

- `reactor_http.tcp_server.TcpServer`: accepts connections and spreads
  them across a `LoopThreadPool`. It can release idle connections with
  `enable_inactive_release` and schedule delayed tasks with `run_after`.
  Set `on_connected`, `on_message`, `on_close` and `on_event` to handle
  connections.
- `reactor_http.connection.Connection`: one connected socket, with
  buffered input and output, `send`, `shutdown` and `upgrade`.
- `reactor_http.tcp_client.TcpClient`: connects through a
  `reactor_http.connector.Connector`. A failed connect is retried after 1,
  2, 4 and then 8 seconds.
- `reactor_http.event_loop.EventLoop`: the poller, the task queue and the
  `TimerWheel`. `run_in_loop` runs a task at once in the loop thread and
  queues it from any other thread.
- `reactor_http.loop_thread`: `LoopThread` runs a loop in a daemon thread,
  and `LoopThreadPool` hands out loops in turn.
- `reactor_http.buffer.Buffer`: a growable byte buffer with line extraction.
- `reactor_http.http_util`: URL encoding and decoding, path normalisation,
  MIME lookup, status descriptions and HTTP dates.
- `reactor_http.log.logger`: a leveled logger that writes to the screen or
  to dated files under `~/log/`.

## What it does not do

- There is no TLS.
- Request bodies are read by `Content-Length` only. Chunked transfer
  encoding is not supported.
- Routes added with `method_options` are stored but never dispatched.
  `OPTIONS` requests answer `405`.

## Tests

The test suite uses pytest. Install the package with its `test` extra to
get it.