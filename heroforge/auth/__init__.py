"""Authentication: password hashing, session tokens and the access guard."""
