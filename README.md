# tinyweb

tinyweb provides the parts of a small HTTP/1.1 server for static files on Linux:

- a growable byte buffer that reads from and writes to file descriptors,
- a bounded, blocking producer/consumer deque,
- a min-heap of timers keyed by id,
- a fixed-size thread pool,
- a process-wide logger that writes to dated log files,
- a wrapper around `epoll`,
- an HTTP request parser and a static-file response builder.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## What the package does not do

tinyweb has no server of its own and no command to start one. It does not
accept connections, run an event loop, manage per-connection state or close
idle clients. You get the pieces listed below. Wiring them into a running
server is up to you.

## Modules

### `tinyweb.buffer.Buffer`

A byte buffer laid out as `[prependable | readable | writable]`.

- `append(data)` takes `bytes`, `bytearray`, `memoryview`, `str` (encoded as UTF-8) or another `Buffer`, whose readable bytes it copies. It grows or compacts the storage as needed.
- `peek()` returns the readable bytes. `has_read(n)` consumes them, and `reset_to_bytes()` returns them and resets the buffer.
- `readable_bytes()`, `writable_bytes()` and `prependable_bytes()` report the three regions.
- `read_fd(fd)` reads with `os.readv` into the free space plus a 64 KiB overflow area. `write_fd(fd)` writes the readable bytes. Both return a byte count and raise `OSError` on failure.

### `tinyweb.blockqueue.BlockDeque`

A bounded deque. `push_back` and `push_front` block while it is full. `pop(timeout=None)` blocks while it is empty. `pop` raises `TimeoutError` when the timeout passes. It raises `QueueClosed` when the deque is closed while empty. `close()` drops all items and wakes every waiter. `flush()` wakes one consumer.

### `tinyweb.timer.HeapTimer`

Timers keyed by a non-negative integer id. Timeouts are in milliseconds.

```python
from tinyweb.timer import HeapTimer

fired = []
timer = HeapTimer()
timer.add(1, 0, lambda: fired.append(1))
timer.tick()
assert fired == [1]
```

- `add(id, timeout, callback)` schedules a timer, or replaces the existing one for that id.
- `adjust(id, timeout)` moves an existing timer. It raises `KeyError` if there is none.
- `do_work(id)` removes the timer and runs its callback.
- `pop()` removes the earliest timer without running it.
- `tick()` runs every expired timer.
- `get_next_tick()` runs the expired timers and returns the milliseconds until the next one, or `-1` if none remain.

### `tinyweb.threadpool.ThreadPool`

Runs callables on a fixed number of daemon threads. `add_task(task)` queues a callable. `close()` lets queued tasks finish and joins the workers. The pool is also a context manager. Exceptions raised by tasks are logged through the standard `logging` module.

### `tinyweb.logger`

`get_logger()` returns the process-wide `Logger`.

`init(level, path="./log", suffix=".log", max_queue_capacity=1024)` opens `<path>/YYYY_MM_DD<suffix>` and creates the directory if needed. A positive queue capacity hands records to a background writer thread. Once the queue is full, records go straight to the file.

A new file is started when the day changes. Within a day, a new file `YYYY_MM_DD-<n><suffix>` is started every `max_lines` lines (50,000 by default).

`log_debug`, `log_info`, `log_warn` and `log_error` take a `%`-style format and its arguments. They write only when the logger is open and its level allows it. Levels are given by `LogLevel` (`DEBUG`, `INFO`, `WARN`, `ERROR`).

### `tinyweb.epoller.Epoller`

A thin layer over `select.epoll`. The methods are `add_fd`, `mod_fd` and `del_fd`, which accept an integer descriptor or an object with `fileno()`, plus `wait(timeout_ms=-1)` and `close()`. `wait` returns a list of `(fd, events)` pairs, at most `max_events` long.

### `tinyweb.httprequest.HttpRequest`

Parses a request out of a `Buffer`:

```python
from tinyweb.buffer import Buffer
from tinyweb.httprequest import HttpRequest

buff = Buffer()
buff.append("GET / HTTP/1.1\r\nConnection: keep-alive\r\n\r\n")
request = HttpRequest()
assert request.parse(buff)
assert request.path == "/index.html"
assert request.is_keep_alive()
```

`parse` returns `False` for an empty buffer or a malformed request line. After parsing, `method`, `path`, `version`, `body`, `header` and `post` hold what was read.

The parser rewrites some paths:

- `/` becomes `/index.html`.
- `/index`, `/register`, `/login`, `/welcome`, `/video` and `/picture` get `.html` appended.
- A `POST` to `/register.html` or `/login.html` with an `application/x-www-form-urlencoded` body has its form fields decoded into `post`, and its path becomes `/welcome.html`.

`get_post(key)` returns a form value, or `""` if the key is absent. `is_keep_alive()` is true only for `Connection: keep-alive` over HTTP/1.1.

### `tinyweb.httpresponse.HttpResponse`

`init(src_dir, path, is_keep_alive=False, code=-1)` prepares a response for the file `src_dir + path`. `make_response(buff)` appends the status line and headers to `buff` and memory-maps the file.

- A missing file or a directory gives `404`. A file that others may not read gives `403`. Any other code without a known status becomes `400`.
- For `400`, `403` and `404`, the path is switched to `/400.html`, `/403.html` or `/404.html`. If that page cannot be opened, a short built-in HTML error body is appended to the buffer instead.
- `Content-type` comes from the file suffix. Unknown suffixes are sent as `text/plain`.

The mapped body is returned by `file()`, or `None` for an empty or missing file. Its size is given by `file_len()`. `unmap_file()` releases the mapping.