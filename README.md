# filestreambot

Building blocks for a service that turns media posted to a Telegram log
channel into direct, streamable HTTP links. A link names the message that
holds the file and carries a short hash of the file's properties, so only
someone who was given the link can fetch the file.

The package covers the parts that do not depend on a particular Telegram
client library: configuration, link hashing, byte-range parsing, chunked
reading of a remote file, a small expiring cache, a round-robin pool of
worker clients, session string encoding and the HTTP application itself.

## What it does not do

* It contains no Telegram client. It does not log in, does not forward
  messages to the log channel and does not answer bot commands. The HTTP
  server reaches Telegram only through the worker clients you put in the
  pool (see "Serving files").
* It has no command-line program. You build the configuration, the pool
  and the application in your own code and run the application with
  aiohttp.
* It does not log in to produce a session; it only encodes the data of an
  already authorised session as a string.

## Configuration

`filestreambot.config.load_config(environ=None)` builds a `Config` from a
mapping of environment variables (`os.environ` when none is given). Missing
required variables and values that are not valid integers or booleans raise
`ValueError`.

`load_env_file(path="fsb.env")` loads a dotenv file into `os.environ`
without overriding variables that are already set, and returns `False`
when the file does not exist.

| Variable           | Required | Default | Field in `Config`                            |
|--------------------|----------|---------|----------------------------------------------|
| `API_ID`           | yes      |         | `api_id`                                     |
| `API_HASH`         | yes      |         | `api_hash`                                   |
| `BOT_TOKEN`        | yes      |         | `bot_token`                                  |
| `LOG_CHANNEL`      | yes      |         | `log_channel_id`, passed through `strip_int` |
| `DEV`              | no       | `false` | `dev`                                        |
| `PORT`             | no       | `8080`  | `port`                                       |
| `HOST`             | no       | derived | `host`, the base URL used in links           |
| `HASH_LENGTH`      | no       | `6`     | `hash_length`, passed through `clamp_hash_length` |
| `USE_SESSION_FILE` | no       | `true`  | `use_session_file`                           |
| `USER_SESSION`     | no       |         | `user_session`                               |
| `USE_PUBLIC_IP`    | no       | `false` | `use_public_ip`                              |
| `ALLOWED_USERS`    | no       |         | `allowed_users`, via `parse_allowed_users`   |
| `MULTI_TOKEN<n>`   | no       |         | `multi_tokens`, via `collect_multi_tokens`   |

Helpers used by `load_config`:

* `strip_int(value)` drops the sign and the first `"100"` of a channel id,
  so `-100123` becomes `123`.
* `clamp_hash_length(length)` turns `0` or anything below 5 into `6`, and
  anything above 32 into `32`.
* `parse_allowed_users(value)` splits a comma-separated list of ids; an
  empty string gives an empty list.
* `collect_multi_tokens(environ)` returns the values of all variables whose
  names start with `MULTI_TOKEN` followed by digits.
* `get_ip(public)` returns the local address, or with `public=True` the
  public one, and raises `OSError` when it cannot be found.

When `HOST` is empty it is set to `http://<ip>:<port>`, using `get_ip` and
falling back to `localhost` on error.

## Links and hashes

```python
from filestreambot.hashing import pack_file, get_short_hash, check_hash
from filestreambot.links import build_link, build_buttons

full = pack_file("movie.mkv", 734003200, "video/x-matroska", 5012345678)
short = get_short_hash(full, 6)
link = build_link("https://files.example.com", 42, short)
# "https://files.example.com/stream/42?hash=<short>"

assert check_hash(short, full, 6)
buttons = build_buttons(link, "video/x-matroska")
# [("Download", link + "&d=true"), ("Stream", link)]
```

`pack_file` is the hex MD5 of `HashableFile(file_name, file_size,
mime_type, file_id)`, as returned by `HashableFile.pack()`.
`get_short_hash` raises `ValueError` for a length outside the hash.
`is_streamable(mime_type)` is true for MIME types containing `video`,
`audio` or `pdf`; only those get a Stream button. `build_buttons` returns
no buttons at all for links on `http://localhost`.
`is_allowed(allowed_users, user_id)` admits everyone when the list is empty.

`filestreambot.timefmt.time_format(seconds)` renders a duration, for
example `time_format(3661) == "1 hour, 1 minute, 1 second"`.

## Serving files

`filestreambot.server.create_app(config, pool, start_time=None)` returns an
aiohttp application with two routes:

* `GET /` returns JSON with `message`, `ok`, `uptime` and `version`
  (a `RootResponse` from `filestreambot.types`).
* `GET /stream/{messageID}?hash=...` (and `HEAD`) serves the file. Without
  a `Range` header the whole file is sent with status 200; with one, the
  first range is sent with status 206 and a `Content-Range` header. Add
  `&d=true` to get `Content-Disposition: attachment` instead of `inline`.
  A bad message id, a missing or wrong hash, a failed file lookup or an
  unsatisfiable range gives 400; an empty pool gives 503.

`pool` is a `filestreambot.workers.WorkerPool`. Register clients with
`pool.add(client, username)`; each request takes the next worker from
`pool.next_worker()`. Every client must offer the methods described by
`filestreambot.server.FileSource`:

* `async get_file(message_id) -> File` — the `filestreambot.types.File`
  attached to a message of the log channel;
* `async fetch_chunk(location, offset, limit) -> bytes` — up to `limit`
  bytes of the file at `location`, starting at `offset`.

```python
from aiohttp import web

from filestreambot.config import load_config
from filestreambot.server import create_app
from filestreambot.workers import WorkerPool

config = load_config()
pool = WorkerPool()
pool.add(my_client, "my_bot")  # an object implementing FileSource
web.run_app(create_app(config, pool), port=config.port)
```

File properties are cached per message and worker for an hour in a
`filestreambot.cache.FileCache`. Range headers are parsed by
`filestreambot.ranges.parse_range(size, header)`, which returns a list of
`ByteRange(start, end)` and raises `RangeError` when nothing can be served.
Bodies are read in 1 MiB chunks through
`filestreambot.reader.TelegramReader`, built on the async generator
`iter_file_range(fetch_chunk, start, end, chunk_size)`.

## Cache

`FileCache(capacity=10 MiB, clock=time.monotonic)` stores pickled values.
`set(key, value, expire_seconds=0)` stores an entry (a non-positive expiry
never expires) and evicts the least recently used entries when full;
`get(key)` returns a copy or raises `KeyError` when the key is absent or
expired; `delete(key)` removes it.

## Session strings

`filestreambot.session_string.encode_pyrogram_session(dc, app_id,
test_mode, auth_key, auth_key_id)` packs the data of an authorised session
into an unpadded URL-safe base64 string of the form accepted by
`USER_SESSION`. The auth key must be 256 bytes, its ID 8 bytes, `dc` must
fit in one byte and `app_id` in a signed 32-bit integer; anything else
raises `ValueError`.