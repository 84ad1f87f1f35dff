import asyncio

import bcrypt

DEFAULT_ROUNDS = 10


class BcryptPasswordHasher:
    """
    Salted, adaptive-cost password hashing.

    bcrypt is CPU bound, so hashing runs in a worker thread and does not block
    other requests on the event loop.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    async def hash(self, password: str) -> str:
        hashed = await asyncio.to_thread(
            bcrypt.hashpw, password.encode(), bcrypt.gensalt(self.rounds)
        )
        return hashed.decode()
