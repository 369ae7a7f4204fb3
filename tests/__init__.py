import os

# Keep imports side-effect free and password hashing fast under test.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("PASSWORD_PBKDF2_ROUNDS", "1000")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("AUTH_REQUIRED", "false")
