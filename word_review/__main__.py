from __future__ import annotations

import argparse

import uvicorn

from word_review.config import configure_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="word_review", description="Run the Word Review web app.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--log-level", default=None, help="overrides WORD_REVIEW_LOG_LEVEL")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    uvicorn.run("word_review.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
