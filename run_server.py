"""Entry point for running the SocialHub API with Uvicorn."""
from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
  port = int(os.getenv("SOCIALHUB_PORT", "8000"))
  reload = os.getenv("UVICORN_RELOAD", "false").lower() == "true"
  logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
  uvicorn.run("socialhub.main:app", host="0.0.0.0", port=port, reload=reload)


if __name__ == "__main__":
  main()
