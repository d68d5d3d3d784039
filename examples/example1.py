from functools import wraps
import asyncio

from firegit import ConflictError, FireGit

# Needs FIREGIT_OWNER, FIREGIT_REPO and GITHUB_TOKEN; FIREGIT_BASE_PATH is optional.


def async_decorator(f):
    """Decorator to allow calling an async function like a sync function"""
    @wraps(f)
    def wrapper(*args, **kwargs):
        ret = asyncio.run(f(*args, **kwargs))

        return ret
    return wrapper


@async_decorator
async def main():
    # 1. Connect to the repository configured in the environment
    async with FireGit.from_env() as db:
        users = db.collection("users")

        # 2. Create users
        alice = await users.add({"name": "Alice", "email": "alice@example.com"})
        await db.doc("users/bob").set({"name": "Bob", "email": "bob@example.com"})

        # 3. Merge a field into an existing document
        await alice.update({"email": "alice@example.org"})

        # 4. Sub-collections live under a document
        await alice.collection("posts").add({"title": "Hello from git"})

        # 5. Read the whole collection
        snapshot = await users.get()
        for doc in snapshot.docs:
            print(doc.id, doc.data)

        # 6. Someone else may have changed the document in between
        try:
            await db.doc("users/bob").update({"visits": 1})
        except ConflictError:
            print("bob changed concurrently, re-read and retry")

        # 7. Deleting is idempotent
        await db.doc("users/bob").delete()
        await db.doc("users/bob").delete()


main()
