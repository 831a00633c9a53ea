# agora

The user side of a community message board backend: a user domain model,
role-based and attribute-based access guards, JWT authentication, cursor
pagination, command and query handlers, and user repositories kept in memory
or in MongoDB.

## What is inside

| Module | Purpose |
| --- | --- |
| `agora.rbac` | `UserRole`, `Permission`, the `Policy` that maps roles to permissions, and `RoleBasedGuard` |
| `agora.abac` | `AttributeBasedGuard`, which decides from the acting user and the target, e.g. who may change a username |
| `agora.guards` | `Guards`, one object that offers both kinds of check |
| `agora.auth` | `AuthenticatedUser`, `AuthClaims`, bearer-token parsing, a WSGI middleware and the current-user context |
| `agora.config` | `Settings` read from the environment (and an optional `.env` file), storage engine configuration |
| `agora.pagination` | Cursor encoding and page result types |
| `agora.user` | The `User` aggregate: badges, reputation, roles, bans |
| `agora.read_models` | `UserReadModel` and the repository and handler interfaces |
| `agora.vote` | Vote types for post interactions |
| `agora.commands` | Register, ban, unban, award and revoke badges, make moderator, change username |
| `agora.queries` | Look users up by id or e-mail, list users page by page |
| `agora.service` | `new_application`, which wires every handler to a repository and a guard |
| `agora.memory_repo` | `MemoryUserRepository`, an in-process store for tests and local work |
| `agora.mongo_repo`, `agora.mongo_documents`, `agora.mongodb` | MongoDB storage |

## Access rules

Roles are `ADMIN`, `MODERATOR`, `REGULAR` and `GUEST`. An admin may do
everything. A moderator may view and list users and ban or unban them. A regular
user may view users. A guest may only create an account.

```python
from agora.rbac import Permission, RoleBasedGuard, UnauthorizedError, UserRole

guard = RoleBasedGuard()
guard.authorize(UserRole.MODERATOR, Permission.BAN_USER)   # allowed

try:
    guard.authorize(UserRole.REGULAR, Permission.BAN_USER)
except UnauthorizedError:
    print("not allowed")
```

A username may be changed by an admin, or by a regular user or moderator for
their own account only:

```python
from agora.abac import AttributeBasedGuard
from agora.auth import fake_user
from agora.rbac import UserRole

actor = fake_user(UserRole.REGULAR)
AttributeBasedGuard().can_change_username(actor.id, actor)  # allowed
```

## Authentication

Requests carry an `Authorization: Bearer <jwt>` header signed with HS256. A
token that is missing, malformed or wrongly signed yields empty claims, and the
request proceeds as a guest.

```python
from agora.auth import fake_user, generate_test_token, parse_token_from_header
from agora.rbac import UserRole

secret = "secret"
user = fake_user(UserRole.MODERATOR)
signed = generate_test_token(user, secret)

claims = parse_token_from_header(f"Bearer {signed}", secret)
assert not claims.is_zero()
```

`auth_middleware(app, settings)` wraps a WSGI application and makes the caller
available through `current_user()` while the request is handled. In code
outside a request, `user_context(user)` sets the current user for a `with`
block.

## Configuration

`load_settings` reads these variables: `AUTH_SECRET` and `GO_ENV` are
required; `PORT` (default `8080`), `MONGODB_URI`, `MONGODB_NAME`,
`MONGODB_REPLICA_SET` (default `rs0`), `TIMEOUT` in seconds (default 10),
`MAX_POOL_SIZE` (100), `MIN_POOL_SIZE` (5), `CONN_IDLE_TIME` in minutes (30),
`MONGODB_RETRY_WRITES` and `MONGODB_RETRY_READS` (both true) and
`POSTGRES_URI` are optional. When the environment is `test`, the middleware
treats every request as coming from an admin.

`storage_engine_config(engine, settings)` checks that the chosen engine has
what it needs and returns a `MongoConfig` or `PostgresConfig`; any other engine
raises `UnsupportedEngineError`.

## Pagination

Cursors are base64 strings:

```python
from agora.pagination import decode_cursor, encode_cursor

cursor = encode_cursor("2024-01-01T00:00:00Z")
assert decode_cursor(cursor) == "2024-01-01T00:00:00Z"
```

## Running the tests

Install the package with its `test` extra and run pytest from the project
directory.