# jobboard/scripts/issue_token.py
# Dev helper: print a bearer token the admin API accepts (same secret as the auth service).
import argparse

from jobboard.middleware.auth_middleware import create_access_token


def main(argv=None):
    parser = argparse.ArgumentParser(description="Issue a dev access token")
    parser.add_argument("user_id")
    parser.add_argument("--email")
    parser.add_argument("--minutes", type=int, default=None)
    args = parser.parse_args(argv)

    extra = {"email": args.email} if args.email else None
    print(create_access_token(args.user_id, extra=extra, minutes=args.minutes))


if __name__ == "__main__":
    main()
