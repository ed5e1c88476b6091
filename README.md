# byexample

A small HTTP load tester, a persistent store for short links, and the
pieces they are built from:

- **hit** — sends many concurrent HTTP requests to a server and prints a
  performance summary (requests per second, errors, bytes, fastest and
  slowest request).
- **link store** — keeps short keys and the URLs they stand for in SQLite.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## hit: load testing from the command line

```
hit [options] url
```

Options:

- `-n` — number of requests (default 100)
- `-c` — concurrency level (default 1); `-n` must not be smaller than `-c`
- `-rps` — throttle to this many requests per second

All values must be integers greater than zero; they may be written as
`-n=10` or `-n 10`, and with a `0x`, `0o`, `0b` or leading-`0` base prefix.
The url must have a scheme and a host. Invalid arguments are reported on
standard error together with the usage text, and the command exits with
status 1. For example:

```
hit -n=1000 -c=10 -rps=100 http://localhost:8080
```

prints a summary like:

```
Summary:
	Success    : 100%
	RPS        : 99.8
	Requests   : 1000
	Errors     : 0
	Bytes      : 2000
	Duration   : 10.02s
	Fastest    : 512µs
	Slowest    : 4.1ms
```

A request counts as an error when it fails or when the server answers with
anything other than `200 OK`. Redirects are not followed. Each request times
out after 30 seconds. Press Ctrl+C to stop early; the run also gives up after
an hour. In both cases the summary of what was sent is still printed and the
command exits with status 1.

## hit: load testing from Python

```python
import sys

from byexample.hit.client import Client, send_n

summary = send_n("http://localhost:8080", 1000, concurrency=10)
summary.fprint(sys.stdout)
print(summary.success_rate())
```

`Client` (fields `c`, `rps`, `timeout` and `transport`, any `httpx`
transport) gives finer control; `Client.do(request, n, stop)` sends an
`httpx.Request` `n` times and returns the aggregated `Result`. Setting the
optional `threading.Event` `stop` ends sending early. `send` sends a single
request and returns its own `Result`.

`Result` is an immutable summary: `merge` adds one result, `finalize` sets
the total duration and requests per second, and `fprint` / `str()` produce
the text shown above. Durations are in seconds.

The building blocks in `byexample.hit.pipe` can be reused for other fan-out
pipelines:

- `produce(n, fn, stop)` yields `fn()` `n` times;
- `throttle(items, delay)` yields one item per `delay` seconds;
- `split(items, concurrency, fn)` runs `fn` over the items in a fixed pool of
  threads and yields the results as they finish;
- `split_limit(items, concurrency, fn)` does the same with one thread per
  item, at most `concurrency` at a time.

## The link store

```python
from byexample.link import Link, Store
from byexample.sqlx import dial, memory_db

db = memory_db("demo")            # or dial("file:links.db?mode=rwc")
store = Store(db)
store.create(Link(key="go", url="https://go.dev"))
print(store.retrieve("go").url)   # https://go.dev
```

`dial` opens an SQLite database (a path, `:memory:` or a `file:` URI) and
creates the `links` table if needed; `memory_db(name)` opens an in-memory
database shared by every connection with the same name. `DB` is usable as a
context manager and closes its connection on exit.

Keys must not be blank and may be at most 16 bytes; URLs must be absolute
`http` or `https` URLs with a host. URLs are stored base64-encoded
(`encode_base64` / `decode_base64`).

`Store.create` and `Store.retrieve` raise the errors from
`byexample.errors`:

| Error                 | When                                  |
|-----------------------|---------------------------------------|
| `InvalidRequestError` | the key or the URL is not acceptable  |
| `LinkExistsError`     | a link with that key already exists   |
| `LinkNotExistError`   | no link has that key                  |

`LinkExistsError` is an `ExistsError` and `LinkNotExistError` a
`NotExistError`; all of them derive from `BiteError`. Database failures,
such as using a closed `DB`, propagate as `sqlite3` errors.

## What is not included

The package has no HTTP server for short links: there is no endpoint to
shorten or resolve URLs over HTTP and no service command. Links can only be
created and looked up from Python through `Store`.

## Other commands

- `byexample-hello` prints the book title.
- `byexample-monitor` simulates checking a server's response time (it waits
  between 1 and 5 seconds), shows CPU usage levels, sends slow-server
  notifications through printing Slack and SMS notifiers, and shows a colour
  and its inverse. The same pieces are in `byexample.monitor`: `Server`,
  `Usage`, `Notifier`, `SlackNotifier`, `SmsNotifier`, `MultiNotifier`,
  `notify` and `Color`.