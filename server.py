import logging
import os

from dotenv import load_dotenv

# Local .env must be loaded before api.proxy reads its settings.
load_dotenv()

from api.proxy import app  # noqa: E402


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", "8000"))
    app.run(host="0.0.0.0", port=port, debug=False)


if __name__ == "__main__":
    main()
