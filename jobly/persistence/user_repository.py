"""User repository - accounts, credentials and job applications."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from jobly.core.errors import ConflictError, NotFoundError, UnauthorizedError
from jobly.persistence.base import execute, fetch_all, fetch_one
from jobly.persistence.query_builder import build_partial_update, placeholder
from jobly.utils.hashing import hash_password, verify_password

logger = structlog.get_logger(__name__)

USER_FIELD_MAP = MappingProxyType(
    {
        "firstName": "first_name",
        "lastName": "last_name",
        "isAdmin": "is_admin",
    }
)

USER_COLUMNS = (
    'username, first_name AS "firstName", last_name AS "lastName", '
    'email, is_admin AS "isAdmin"'
)

APPLIED_JOB_IDS = (
    "COALESCE(array_agg(a.job_id ORDER BY a.job_id) "
    "FILTER (WHERE a.job_id IS NOT NULL), '{}') AS jobs"
)


class UserRepository:
    """CRUD operations for users and their applications."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def authenticate(self, username: str, password: str) -> dict[str, Any]:
        """Return the user (without password) for valid credentials.

        Raises UnauthorizedError for an unknown user or a wrong password.
        """
        user = await fetch_one(
            self.session,
            f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
            [username],
        )
        if user is not None:
            hashed = user.pop("password")
            if verify_password(password, hashed):
                return user

        logger.warning("Failed login attempt", username=username)
        raise UnauthorizedError("Invalid username/password")

    async def register(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Create a user with a hashed password; raises ConflictError on duplicates."""
        username = data["username"]
        duplicate = await fetch_one(
            self.session,
            "SELECT username FROM users WHERE username = $1",
            [username],
        )
        if duplicate is not None:
            logger.warning("Duplicate username", username=username)
            raise ConflictError(f"Duplicate username: {username}")

        user = await fetch_one(
            self.session,
            f"""INSERT INTO users
                   (username, password, first_name, last_name, email, is_admin)
               VALUES ($1, $2, $3, $4, $5, $6)
               RETURNING {USER_COLUMNS}""",
            [
                username,
                hash_password(data["password"]),
                data["firstName"],
                data["lastName"],
                data["email"],
                data.get("isAdmin", False),
            ],
            conflict_message=f"Duplicate username: {username}",
        )
        logger.info("User registered", username=username, is_admin=user["isAdmin"])
        return user

    async def find_all(self) -> list[dict[str, Any]]:
        """List users with the ids of the jobs each has applied to."""
        return await fetch_all(
            self.session,
            f"""SELECT u.username,
                      u.first_name AS "firstName",
                      u.last_name AS "lastName",
                      u.email,
                      u.is_admin AS "isAdmin",
                      {APPLIED_JOB_IDS}
               FROM users AS u
               LEFT JOIN applications AS a ON a.username = u.username
               GROUP BY u.username
               ORDER BY u.username""",
        )

    async def get(self, username: str) -> dict[str, Any]:
        user = await fetch_one(
            self.session,
            f"SELECT {USER_COLUMNS} FROM users WHERE username = $1",
            [username],
        )
        if user is None:
            raise NotFoundError(f"No user: {username}")

        applications = await fetch_all(
            self.session,
            "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
            [username],
        )
        user["jobs"] = [a["job_id"] for a in applications]
        return user

    async def update(self, username: str, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Partially update a user.

        A `password` in `changes` is hashed before it is written. This can also
        grant admin rights, so callers must gate it behind admin-or-self checks.
        """
        changes = dict(changes)
        if changes.get("password"):
            changes["password"] = hash_password(changes["password"])

        set_cols, values = build_partial_update(changes, USER_FIELD_MAP)
        username_idx = placeholder(len(values) + 1)

        result = await execute(
            self.session,
            f"""UPDATE users
               SET {set_cols}
               WHERE username = {username_idx}
               RETURNING username""",
            [*values, username],
        )
        if result.fetchone() is None:
            raise NotFoundError(f"No user: {username}")

        logger.info("User updated", username=username, fields=sorted(changes))
        return await self.get(username)

    async def remove(self, username: str) -> None:
        result = await execute(
            self.session,
            "DELETE FROM users WHERE username = $1 RETURNING username",
            [username],
        )
        if result.fetchone() is None:
            raise NotFoundError(f"No user: {username}")
        logger.info("User removed", username=username)

    async def apply_to_job(self, username: str, job_id: int) -> None:
        """Record an application; both the job and the user must exist."""
        job = await fetch_one(self.session, "SELECT id FROM jobs WHERE id = $1", [job_id])
        if job is None:
            raise NotFoundError(f"No job: {job_id}")

        user = await fetch_one(
            self.session,
            "SELECT username FROM users WHERE username = $1",
            [username],
        )
        if user is None:
            raise NotFoundError(f"No user: {username}")

        await execute(
            self.session,
            "INSERT INTO applications (job_id, username) VALUES ($1, $2)",
            [job_id, username],
            conflict_message=f"Already applied to job: {job_id}",
        )
        logger.info("Job application recorded", username=username, job_id=job_id)
