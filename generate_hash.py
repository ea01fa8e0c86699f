"""
Génère le hash bcrypt à placer dans ADMIN_SECRET_HASH (.env).

Usage:
    python generate_hash.py "mon-mot-de-passe-admin"
"""
import sys

import bcrypt

def generate_hash(password: str) -> str:
    # Génère un hash bcrypt avec salt auto
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')

if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit("usage: python generate_hash.py <admin-secret>")
    print(f"ADMIN_SECRET_HASH={generate_hash(sys.argv[1])}")
