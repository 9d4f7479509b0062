"""
Example 01: Basic Query Execution

This example demonstrates scanning query results into Out slots and records
with row-scan's Engine.
"""

from row_scan import Engine, ConnectionConfig, Out, NoRowsError
from dataclasses import dataclass
import tempfile
import sqlite3
from pathlib import Path


@dataclass
class User:
    """Fields are matched by column name, then by position"""
    id: int = 0
    name: str = ""
    email: str = ""


def main():
    # Create a temporary database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    # Set up the database with some test data
    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL
        )
    """)
    conn.execute("INSERT INTO users (name, email) VALUES ('Alice', 'alice@example.com')")
    conn.execute("INSERT INTO users (name, email) VALUES ('Bob', 'bob@example.com')")
    conn.commit()
    conn.close()

    # Configure engine
    config = ConnectionConfig(driver="sqlite", database=db_path)
    engine = Engine.from_config(config)

    print("=== Basic Query Execution ===\n")

    # Leading arguments are query parameters, trailing Out slots receive the row
    id_, name, email = Out(int), Out(str), Out(str)
    engine.fetch_one(
        "SELECT id, name, email FROM users WHERE email = ?",
        "alice@example.com", id_, name, email,
    )
    print(f"Out slots: id={id_.value} name={name.value} email={email.value}\n")

    # A record instance is filled in place; LIMIT 1 is appended automatically
    user = User()
    engine.fetch_one("SELECT id, name, email FROM users WHERE id = ?", 2, user)
    print(f"Record: {user}\n")

    # Zero rows is an error, not None
    try:
        engine.fetch_one("SELECT id FROM users WHERE id = ?", 99, Out(int))
    except NoRowsError as e:
        print(f"NoRowsError: {e}\n")

    # Statements report affected rows and the last insert id
    result = engine.execute("INSERT INTO users (name, email) VALUES (?, ?)", "Carol", "carol@example.com")
    print(f"execute result: {result}\n")

    # Clean up
    engine.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
