"""Print the annotation session stored in the project's SQLite database.

This script reads the mirrored session from the KV_STORE table and prints it
in the tabular export format (or the structured JSON with `--json`). It
reuses the same `DATABASE_DIR` behavior as the application via
`utils.database_init.AsyncDatabaseInitializer`.

Run: set the `DATABASE_DIR` environment variable (or point it to the
      repository `database` folder) and run `python print_db.py`.
"""
import asyncio
import sys

from dotenv import load_dotenv

from dal.kv_dal import KeyValueDAL
from services.exporter import to_structured, to_tabular
from services.session_persistence import SessionPersistence
from utils.database_init import AsyncDatabaseInitializer


async def main(as_json: bool = False) -> None:
    """Load the stored session and print it to stdout."""
    initializer = AsyncDatabaseInitializer(reset=False)
    persistence = SessionPersistence(KeyValueDAL(initializer))
    items = await persistence.load()
    if not items:
        print(f"No annotated items stored under {persistence.key!r}.")
        return
    body = to_structured(items) if as_json else to_tabular(items)
    print(body.decode("utf-8"))


if __name__ == "__main__":
    load_dotenv()
    asyncio.run(main(as_json="--json" in sys.argv[1:]))
