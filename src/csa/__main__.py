"""CSA entrypoint.

Run with:
  python -m csa
"""

import uvicorn

from csa.config import load_settings


def main() -> None:
    settings = load_settings()
    uvicorn.run("csa.app:app", host=settings.host, port=settings.port, reload=settings.reload)


if __name__ == "__main__":
    main()
