"""
Example 02: Record Mapping

This example demonstrates fetching many rows into Rows(...) of dataclasses
and Pydantic models, with column aliases.
"""

from row_scan import Engine, ConnectionConfig, Column, Rows, record
from dataclasses import dataclass, field
from datetime import date
from typing import Annotated
from pydantic import BaseModel, Field
import tempfile
import sqlite3
from pathlib import Path


@dataclass
class UserDataclass:
    """Aliases via Annotated and field metadata"""
    user_id: Annotated[int, Column("id")] = 0
    full_name: str = field(default="", metadata={"column": "name"})
    email: str = ""


@record(columns={"joined": "created_on"})
@dataclass
class Membership:
    """Aliases registered on the class"""
    id: int = 0
    joined: date | None = None


class UserPydantic(BaseModel):
    """Aliases via Pydantic Field"""
    id: int = 0
    name: str = ""
    email: str = Field(default="", alias="email_address")


def main():
    # Set up database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            created_on TEXT
        )
    """)
    conn.execute("INSERT INTO users VALUES (1, 'Alice', 'alice@example.com', '2023-01-15')")
    conn.execute("INSERT INTO users VALUES (2, 'Bob', 'bob@example.com', '2024-02-01')")
    conn.commit()
    conn.close()

    engine = Engine.from_config(ConnectionConfig(driver="sqlite", database=db_path))

    print("=== Dataclass Mapping ===\n")
    users = engine.fetch_all("SELECT id, name, email FROM users ORDER BY id", Rows(UserDataclass))
    for user in users:
        print(f"  - {user}")
    print()

    print("=== Registered Aliases and Type Conversion ===\n")
    memberships = engine.fetch_all("SELECT id, created_on FROM users", Rows(Membership))
    for membership in memberships:
        print(f"  - {membership.id} joined {membership.joined!r}")
    print()

    print("=== Pydantic Mapping ===\n")
    models = engine.fetch_all(
        "SELECT id, name, email AS email_address, 'extra' AS ignored FROM users WHERE id > ?",
        1, Rows(UserPydantic),
    )
    for model in models:
        print(f"  - {model!r}")
    print()

    # Clean up
    engine.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
