# somosdev

A small community message board. It reads posts from an SQLite database and serves them as a server-rendered HTML page, along with static files from an assets directory.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
somosdev
```

At startup the command loads environment variables from a `.env` file in the current directory. If there is no such file it logs an error and exits with status 1. The server then listens on port 8080 on all interfaces (`Config.addr` is `":8080"`).

The `APP_ENV` environment variable chooses the mode:

- Any value other than `production` (or no value) gives **development mode**. An in-memory database is opened and any pending migrations are run on it, debug logging is turned on for the `somosdev` loggers, and assets are read from `./assets` in the current directory and sent with `Cache-Control: no-store`.
- `production` gives **production mode**. The database named by `Config.db_uri` is opened without running migrations, and assets are read from the `assets` directory inside the installed package.

Every connection is opened with `foreign_keys = 1`, `journal_mode = wal` and `synchronous = normal`.

## Routes

Only `GET` and `HEAD` are accepted; other methods get `405 Method Not Allowed`.

| Path        | Behaviour                                               |
|-------------|---------------------------------------------------------|
| `/`         | Permanent redirect (301) to `/posts/`; so is any path that no other route matches |
| `/posts/`   | HTML page that lists every post as an outlined link button |
| `/users/`   | Empty response                                          |
| `/assets/…` | Static files, e.g. `/assets/css/output.css`; directories without `index.html` get a listing |

A request for `/posts` or `/users` (no trailing slash) is redirected to the path with the slash. If the posts cannot be read or rendered, `/posts/` answers `500` with a short plain-text message.

## Using it as a library

`somosdev.server.Server` is a WSGI application, so any WSGI server can host it:

```python
from somosdev.server import Config, Server

app = Server(Config(is_dev=True, addr=":8080"))
app.add_routes()
```

`Server.run()` serves it with Werkzeug's development server on `Config.addr`, which `somosdev.server.parse_addr` splits into host and port (`":8080"` gives `("", 8080)`).

Posts can be read straight from the database:

```python
from somosdev.db import open_database, close_database
from somosdev.models import Queries

conn = open_database("posts.sqlite3", seed=True)
posts = Queries(conn).get_posts()   # list of Post(id, content, created_at)
close_database(conn)                # runs PRAGMA optimize, then closes
```

`somosdev.templates` renders the HTML: `posts_page(posts, nonce)` gives the full document, built from `base_layout`, `theme_switcher_script` and `outline_button`. Text and attribute values are HTML-escaped.

## What it does not do

- The package ships no migration files and no stylesheets. `open_database(..., seed=True)` runs the `<version>_<name>.sql` files found in a `migrations` directory next to `somosdev/db.py`, recording them in a `goose_db_version` table; with none present it creates only that table. In development mode the in-memory database therefore has no `posts` table, and `/posts/` answers `500` until a migration creating it is added. Likewise `/assets/` has nothing to serve in production mode until an `assets` directory is placed in the package.
- The `somosdev` command never sets `Config.db_uri`, so in production mode it opens SQLite with an empty file name, which is a private temporary database rather than a persistent file. To serve a real database file, build `Config(db_uri=...)` yourself and host the `Server` as shown above.
- There is no way to create, edit or delete posts, and `/users/` has no content.