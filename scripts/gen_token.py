"""
開発用: 既存ユーザーのトークンを発行して表示する。

    python scripts/gen_token.py user@example.com

AUTH_TOKEN_MODE / JWT_SECRET / STORE_BACKEND などは .env から読む。
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from auth.tokens import issue_token  # noqa: E402
from config import get_settings  # noqa: E402
from services.store import build_store  # noqa: E402


def main(argv):
    if len(argv) != 2:
        print("usage: gen_token.py <email>", file=sys.stderr)
        return 2

    settings = get_settings()
    store = build_store(settings)

    user = store.users.find_one(email=argv[1].strip().lower())
    if user is None:
        print(f"user not found: {argv[1]}", file=sys.stderr)
        return 1

    print(issue_token(user, settings))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
