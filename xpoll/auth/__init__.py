from .password_utils import PasswordHash, hash_password, verify_password, needs_rehash
