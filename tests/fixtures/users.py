"""Shared credentials for test profiles."""

from sisyflow.c2_auth_service.security import hash_password

TEST_PASSWORD = "Passw0rd!"

# bcrypt is slow on purpose; every test profile shares one hash
PASSWORD_HASH = hash_password(TEST_PASSWORD)
