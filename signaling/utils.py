"""
Utility functions for ID generation and timestamps
"""
import random
import string
import time


def generate_client_id(length: int = 20) -> str:
    """Generate a random opaque client ID"""
    alphabet = string.ascii_letters + string.digits + "-_"
    return "".join(random.choice(alphabet) for _ in range(length))


def now_ms() -> int:
    """Current epoch time in milliseconds"""
    return int(time.time() * 1000)
